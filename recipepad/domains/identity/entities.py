from datetime import datetime
from typing import Optional

OWNER_PREFIX = "tg-"


class TelegramAccount:
    """Сущность привязки Telegram-пользователя к внутреннему owner"""

    def __init__(
        self,
        telegram_id: int,
        owner: str,
        auth_date: datetime,
        username: Optional[str] = None,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        photo_url: Optional[str] = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None
    ):
        self.telegram_id = telegram_id
        self.owner = owner
        self.auth_date = auth_date
        self.username = username
        self.first_name = first_name
        self.last_name = last_name
        self.photo_url = photo_url
        self.created_at = created_at
        self.updated_at = updated_at

    @staticmethod
    def owner_for(telegram_id: int) -> str:
        """owner выводится из Telegram id и никогда не меняется"""
        return f"{OWNER_PREFIX}{telegram_id}"

    @classmethod
    def bind(
        cls,
        telegram_id: int,
        auth_date: datetime,
        username: Optional[str] = None,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        photo_url: Optional[str] = None
    ) -> "TelegramAccount":
        """Создание привязки для Telegram-пользователя"""
        return cls(
            telegram_id=telegram_id,
            owner=cls.owner_for(telegram_id),
            auth_date=auth_date,
            username=username,
            first_name=first_name,
            last_name=last_name,
            photo_url=photo_url
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, TelegramAccount):
            return False
        return self.telegram_id == other.telegram_id

    def __repr__(self) -> str:
        return f"TelegramAccount(telegram_id={self.telegram_id}, owner={self.owner}, username={self.username})"
