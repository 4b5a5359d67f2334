from recipepad.api.http.health import router as health_router
from recipepad.api.http.auth import router as auth_router
from recipepad.api.http.recipes import router as recipes_router
from recipepad.api.http.local_recipes import router as local_recipes_router
from recipepad.api.http.orders import router as orders_router

__all__ = [
    "health_router",
    "auth_router",
    "recipes_router",
    "local_recipes_router",
    "orders_router"
]
