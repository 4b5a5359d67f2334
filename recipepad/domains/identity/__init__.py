from recipepad.domains.identity.entities import TelegramAccount
from recipepad.domains.identity.schemas import TelegramLogin, Token, OwnerResponse

__all__ = [
    "TelegramAccount",
    "TelegramLogin", "Token", "OwnerResponse",
]
