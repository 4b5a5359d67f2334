from recipepad.db.models.recipe import Recipe, LocalRecipe
from recipepad.db.models.telegram_account import TelegramAccount

__all__ = [
    "Recipe",
    "LocalRecipe",
    "TelegramAccount",
]
