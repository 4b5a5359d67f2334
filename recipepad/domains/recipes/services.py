from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from recipepad.core.logging import get_logger
from recipepad.db.repositories.recipe_repository import LocalRecipeRepository, RecipeRepository
from recipepad.domains.recipes.cache import ListingCache, ListingResult, build_entry, negotiate
from recipepad.domains.recipes.entities import Recipe

logger = get_logger(__name__)


class RecipeService:
    """Сервис глобальных рецептов с кэшем списка"""

    def __init__(self, session: AsyncSession, cache: ListingCache):
        self.session = session
        self.cache = cache
        self.recipe_repository = RecipeRepository(session)

    async def list_recipes(self, if_none_match: Optional[str] = None) -> ListingResult:
        """Список рецептов: из кэша, пока он свежий, иначе из БД"""
        entry = self.cache.fresh_entry()
        if entry is not None:
            logger.debug("recipes_cache_hit", etag=entry.etag)
            return negotiate(entry, if_none_match, from_cache=True)

        generation = self.cache.generation
        # при ошибке запроса кэш остаётся как был
        recipes = await self.recipe_repository.list_all()

        entry = build_entry(recipes, captured_at=self.cache.now())
        stored = self.cache.store(entry, generation)
        logger.debug("recipes_cache_miss", etag=entry.etag, count=len(recipes), stored=stored)

        return negotiate(entry, if_none_match, from_cache=False)

    async def get_recipe(self, recipe_id: str) -> Optional[Recipe]:
        """Получение рецепта по id (без кэша)"""
        return await self.recipe_repository.get_by_id(recipe_id)

    async def recipe_exists(self, recipe_id: str) -> bool:
        """Проверка существования рецепта"""
        return await self.recipe_repository.exists(recipe_id)

    async def publish_recipe(self, recipe_id: str, data: Dict[str, Any]) -> Recipe:
        """Публикация или обновление рецепта"""
        recipe = await self.recipe_repository.upsert(recipe_id, data)
        # запись -> инвалидация -> ответ
        self.cache.invalidate()
        logger.info("recipe_published", recipe_id=recipe_id)
        return recipe

    async def delete_recipe(self, recipe_id: str) -> bool:
        """Удаление рецепта из глобального списка"""
        deleted = await self.recipe_repository.delete(recipe_id)
        self.cache.invalidate()
        logger.info("recipe_deleted", recipe_id=recipe_id, existed=deleted)
        return deleted


class LocalRecipeService:
    """Сервис локальных рецептов владельца (не кэшируется)"""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.local_repository = LocalRecipeRepository(session)

    async def list_recipes(self, owner: str) -> List[Recipe]:
        """Рецепты владельца, свежие первыми"""
        return await self.local_repository.list_by_owner(owner)

    async def get_recipe(self, owner: str, recipe_id: str) -> Optional[Recipe]:
        """Получение рецепта владельца"""
        return await self.local_repository.get(owner, recipe_id)

    async def save_recipe(self, owner: str, recipe_id: str, data: Dict[str, Any]) -> Recipe:
        """Сохранение рецепта владельца; id всегда из пути"""
        return await self.local_repository.upsert(owner, recipe_id, {**data, "id": recipe_id})

    async def delete_recipe(self, owner: str, recipe_id: str) -> bool:
        """Удаление рецепта владельца"""
        return await self.local_repository.delete(owner, recipe_id)

    async def import_recipes(self, owner: str, recipes: Sequence[Dict[str, Any]]) -> int:
        """Массовый импорт рецептов владельца"""
        if not recipes:
            return 0
        count = await self.local_repository.bulk_upsert(owner, recipes)
        logger.info("local_recipes_imported", owner=owner, count=count)
        return count
