import hashlib
import hmac
import time
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from recipepad.core.logging import get_logger
from recipepad.core.security import create_access_token, verify_token
from recipepad.db.repositories.telegram_account_repository import TelegramAccountRepository
from recipepad.domains.identity.entities import TelegramAccount
from recipepad.domains.identity.schemas import TelegramLogin
from recipepad.integrations.telegram import TelegramNotConfigured

logger = get_logger(__name__)


class InvalidTelegramLogin(ValueError):
    """Подпись или срок действия данных виджета не прошли проверку"""


def telegram_login_hash(fields: Dict[str, Any], bot_token: str) -> str:
    """HMAC-SHA256 от data-check-string с ключом SHA256(bot_token)"""
    data_check_string = "\n".join(f"{key}={fields[key]}" for key in sorted(fields))
    secret_key = hashlib.sha256(bot_token.encode()).digest()
    return hmac.new(secret_key, data_check_string.encode(), hashlib.sha256).hexdigest()


class IdentityService:
    """Сервис привязки Telegram-аккаунтов и выдачи токенов"""

    def __init__(
        self,
        session: AsyncSession,
        bot_token: Optional[str],
        max_age: int = 86400,
        clock: Callable[[], float] = time.time
    ):
        self.session = session
        self.bot_token = bot_token
        self.max_age = max_age
        self._clock = clock
        self.account_repository = TelegramAccountRepository(session)

    def verify_telegram_login(self, login: TelegramLogin) -> bool:
        """Проверка подписи и свежести данных виджета"""
        if not self.bot_token:
            raise TelegramNotConfigured("TELEGRAM_BOT_TOKEN not set")

        expected = telegram_login_hash(login.check_fields(), self.bot_token)
        if not hmac.compare_digest(expected, login.hash):
            return False

        age = self._clock() - login.auth_date
        return age <= self.max_age

    async def login_with_telegram(self, login: TelegramLogin) -> Tuple[str, TelegramAccount]:
        """Привязка Telegram-пользователя к owner и выдача JWT"""
        if not self.verify_telegram_login(login):
            logger.info("telegram_login_rejected", telegram_id=login.id)
            raise InvalidTelegramLogin("Invalid Telegram login data")

        account = TelegramAccount.bind(
            telegram_id=login.id,
            auth_date=datetime.fromtimestamp(login.auth_date, tz=timezone.utc),
            username=login.username,
            first_name=login.first_name,
            last_name=login.last_name,
            photo_url=login.photo_url
        )
        account = await self.account_repository.upsert(account)

        token = create_access_token(data={"sub": account.owner, "tg_id": account.telegram_id})
        logger.info("telegram_login", owner=account.owner)
        return token, account

    @staticmethod
    def owner_from_token(token: str) -> Optional[str]:
        """owner из JWT токена или None"""
        payload = verify_token(token)
        if not payload:
            return None
        owner = payload.get("sub")
        return owner if isinstance(owner, str) and owner else None
