from recipepad.db.repositories.recipe_repository import RecipeRepository, LocalRecipeRepository
from recipepad.db.repositories.telegram_account_repository import TelegramAccountRepository

__all__ = [
    "RecipeRepository",
    "LocalRecipeRepository",
    "TelegramAccountRepository",
]
