from sqlalchemy import BigInteger, Column, DateTime, String, Text

from recipepad.db.base import Base, TimestampMixin


class TelegramAccount(TimestampMixin, Base):
    """Привязка Telegram-пользователя к внутреннему owner"""
    __tablename__ = "telegram_accounts"

    telegram_id = Column(BigInteger, primary_key=True, autoincrement=False)
    owner = Column(Text, unique=True, nullable=False)
    username = Column(String(64))
    first_name = Column(String(255))
    last_name = Column(String(255))
    photo_url = Column(Text)
    auth_date = Column(DateTime(timezone=True), nullable=False)
