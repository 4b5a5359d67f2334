from typing import Optional

from pydantic import BaseModel, Field, field_validator


class OrderCreate(BaseModel):
    """Заказ блюда с сайта"""
    title: Optional[str] = Field(default=None, validate_default=True)

    @field_validator("title", mode="before")
    @classmethod
    def validate_title(cls, v):
        if not isinstance(v, str) or len(v.strip()) < 2:
            raise ValueError("title is required")
        return v


class OrderResponse(BaseModel):
    ok: bool = True
