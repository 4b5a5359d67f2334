from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TelegramLogin(BaseModel):
    """Данные от Telegram Login Widget"""
    model_config = ConfigDict(extra="allow")

    id: int = Field(..., gt=0)
    first_name: str
    last_name: Optional[str] = None
    username: Optional[str] = None
    photo_url: Optional[str] = None
    auth_date: int = Field(..., gt=0)
    hash: str = Field(..., min_length=64, max_length=64)

    @field_validator("hash")
    @classmethod
    def validate_hash(cls, v):
        v = v.lower()
        if any(c not in "0123456789abcdef" for c in v):
            raise ValueError("hash must be a hex digest")
        return v

    def check_fields(self) -> Dict[str, Any]:
        """Поля, которые входят в data-check-string (всё, кроме hash)"""
        return self.model_dump(exclude={"hash"}, exclude_none=True)


class Token(BaseModel):
    """Схема для JWT токена"""
    access_token: str
    token_type: str = "bearer"
    owner: str


class OwnerResponse(BaseModel):
    owner: str
