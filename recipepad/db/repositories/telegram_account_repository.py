from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from recipepad.db.base import as_utc, utcnow
from recipepad.db.models.telegram_account import TelegramAccount as TelegramAccountModel
from recipepad.db.repositories.recipe_repository import upsert_statement
from recipepad.domains.identity.entities import TelegramAccount


class TelegramAccountRepository:
    """Репозиторий привязок Telegram-аккаунтов"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_telegram_id(self, telegram_id: int) -> Optional[TelegramAccount]:
        """Получение привязки по Telegram id"""
        result = await self.session.execute(
            select(TelegramAccountModel).where(TelegramAccountModel.telegram_id == telegram_id)
        )
        db_account = result.scalar_one_or_none()
        return self._to_domain(db_account) if db_account else None

    async def upsert(self, account: TelegramAccount) -> TelegramAccount:
        """Создание привязки или обновление профиля; owner не меняется"""
        now = utcnow()
        stmt = upsert_statement(self.session, TelegramAccountModel).values(
            telegram_id=account.telegram_id,
            owner=account.owner,
            username=account.username,
            first_name=account.first_name,
            last_name=account.last_name,
            photo_url=account.photo_url,
            auth_date=account.auth_date,
            created_at=now,
            updated_at=now
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[TelegramAccountModel.telegram_id],
            set_={
                "username": stmt.excluded.username,
                "first_name": stmt.excluded.first_name,
                "last_name": stmt.excluded.last_name,
                "photo_url": stmt.excluded.photo_url,
                "auth_date": stmt.excluded.auth_date,
                "updated_at": stmt.excluded.updated_at,
            }
        )

        await self.session.execute(stmt)
        await self.session.commit()

        return await self.get_by_telegram_id(account.telegram_id)

    def _to_domain(self, db_account: TelegramAccountModel) -> TelegramAccount:
        """Преобразование модели БД в доменную сущность"""
        return TelegramAccount(
            telegram_id=db_account.telegram_id,
            owner=db_account.owner,
            username=db_account.username,
            first_name=db_account.first_name,
            last_name=db_account.last_name,
            photo_url=db_account.photo_url,
            auth_date=as_utc(db_account.auth_date),
            created_at=as_utc(db_account.created_at),
            updated_at=as_utc(db_account.updated_at)
        )
