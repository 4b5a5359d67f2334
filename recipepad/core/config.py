from typing import List, Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str
    jwt_secret: str
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24 * 30
    db_echo: bool = False

    # Telegram bot used for order notifications and login verification
    telegram_bot_token: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("TELEGRAM_BOT_TOKEN", "TG_BOT_TOKEN"),
    )
    telegram_chat_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("TELEGRAM_CHAT_ID", "TG_CHAT_ID"),
    )
    telegram_api_url: str = "https://api.telegram.org"
    telegram_timeouts: List[float] = [8.0, 12.0, 15.0]
    telegram_auth_max_age: int = 86400
    order_timezone: str = "Europe/Kyiv"

    recipes_cache_ttl: float = 15.0
    cors_origins: List[str] = ["*"]

    log_level: str = "INFO"
    log_json: bool = True

    model_config = {"env_file": ".env", "extra": "ignore"}

    @field_validator("database_url")
    @classmethod
    def use_async_driver(cls, v: str) -> str:
        # Render/Neon hand out libpq-style URLs
        for prefix in ("postgres://", "postgresql://"):
            if v.startswith(prefix):
                v = "postgresql+asyncpg://" + v[len(prefix):]
                break
        if v.startswith("postgresql+asyncpg://"):
            v = v.replace("sslmode=", "ssl=")
        return v

    @field_validator("telegram_timeouts")
    @classmethod
    def validate_timeouts(cls, v):
        if not v or any(t <= 0 for t in v):
            raise ValueError("telegram_timeouts must be a non-empty list of positive numbers")
        return v


settings = Settings()
