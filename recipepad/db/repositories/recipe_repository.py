from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import delete, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from recipepad.db.base import as_utc, utcnow
from recipepad.db.models.recipe import LocalRecipe as LocalRecipeModel, Recipe as RecipeModel
from recipepad.domains.recipes.entities import Recipe


def upsert_statement(session: AsyncSession, model):
    """INSERT ... ON CONFLICT для текущего диалекта"""
    dialect = session.get_bind().dialect.name
    if dialect == "postgresql":
        return postgresql.insert(model)
    if dialect == "sqlite":
        return sqlite.insert(model)
    raise NotImplementedError(f"upsert is not supported for dialect {dialect!r}")


class RecipeRepository:
    """Репозиторий глобальных рецептов"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_all(self) -> List[Recipe]:
        """Все рецепты, свежие первыми"""
        result = await self.session.execute(
            select(RecipeModel).order_by(RecipeModel.updated_at.desc())
        )
        return [self._to_domain(row) for row in result.scalars().all()]

    async def get_by_id(self, recipe_id: str) -> Optional[Recipe]:
        """Получение рецепта по id"""
        result = await self.session.execute(
            select(RecipeModel).where(RecipeModel.id == recipe_id)
        )
        db_recipe = result.scalar_one_or_none()
        return self._to_domain(db_recipe) if db_recipe else None

    async def exists(self, recipe_id: str) -> bool:
        """Проверка существования рецепта"""
        result = await self.session.execute(
            select(RecipeModel.id).where(RecipeModel.id == recipe_id).limit(1)
        )
        return result.scalar_one_or_none() is not None

    async def upsert(self, recipe_id: str, data: Dict[str, Any]) -> Recipe:
        """Создание или обновление рецепта, updated_at ставится здесь"""
        now = utcnow()
        stmt = upsert_statement(self.session, RecipeModel).values(
            id=recipe_id,
            data=data,
            created_at=now,
            updated_at=now
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[RecipeModel.id],
            set_={"data": stmt.excluded.data, "updated_at": stmt.excluded.updated_at}
        )

        await self.session.execute(stmt)
        await self.session.commit()

        return await self.get_by_id(recipe_id)

    async def delete(self, recipe_id: str) -> bool:
        """Удаление рецепта"""
        stmt = delete(RecipeModel).where(RecipeModel.id == recipe_id)
        result = await self.session.execute(stmt)
        await self.session.commit()
        return result.rowcount > 0

    def _to_domain(self, db_recipe: RecipeModel) -> Recipe:
        """Преобразование модели БД в доменную сущность"""
        return Recipe(
            id=db_recipe.id,
            data=db_recipe.data,
            created_at=as_utc(db_recipe.created_at),
            updated_at=as_utc(db_recipe.updated_at)
        )


class LocalRecipeRepository:
    """Репозиторий локальных рецептов владельца"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_by_owner(self, owner: str) -> List[Recipe]:
        """Рецепты владельца, свежие первыми"""
        result = await self.session.execute(
            select(LocalRecipeModel)
            .where(LocalRecipeModel.owner == owner)
            .order_by(LocalRecipeModel.updated_at.desc())
        )
        return [self._to_domain(row) for row in result.scalars().all()]

    async def get(self, owner: str, recipe_id: str) -> Optional[Recipe]:
        """Получение рецепта владельца по id"""
        result = await self.session.execute(
            select(LocalRecipeModel).where(
                LocalRecipeModel.owner == owner,
                LocalRecipeModel.id == recipe_id
            )
        )
        db_recipe = result.scalar_one_or_none()
        return self._to_domain(db_recipe) if db_recipe else None

    async def upsert(self, owner: str, recipe_id: str, data: Dict[str, Any]) -> Recipe:
        """Создание или обновление рецепта владельца"""
        await self._upsert_rows([self._row(owner, recipe_id, data)])
        await self.session.commit()
        return await self.get(owner, recipe_id)

    async def bulk_upsert(self, owner: str, items: Sequence[Dict[str, Any]]) -> int:
        """Массовая загрузка одной транзакцией; ключ каждого элемента — его id"""
        # в одном INSERT ... ON CONFLICT строка не может обновляться дважды
        rows = {}
        for item in items:
            rows[item["id"]] = self._row(owner, item["id"], item)

        try:
            await self._upsert_rows(list(rows.values()))
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        return len(items)

    async def delete(self, owner: str, recipe_id: str) -> bool:
        """Удаление рецепта владельца"""
        stmt = delete(LocalRecipeModel).where(
            LocalRecipeModel.owner == owner,
            LocalRecipeModel.id == recipe_id
        )
        result = await self.session.execute(stmt)
        await self.session.commit()
        return result.rowcount > 0

    async def _upsert_rows(self, rows: List[Dict[str, Any]]) -> None:
        if not rows:
            return
        # executemany: SQLAlchemy режет строки на пачки, лимит параметров драйвера не достигается
        stmt = upsert_statement(self.session, LocalRecipeModel)
        stmt = stmt.on_conflict_do_update(
            index_elements=[LocalRecipeModel.owner, LocalRecipeModel.id],
            set_={"data": stmt.excluded.data, "updated_at": stmt.excluded.updated_at}
        )
        await self.session.execute(stmt, rows)

    @staticmethod
    def _row(owner: str, recipe_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        now = utcnow()
        return {
            "owner": owner,
            "id": recipe_id,
            "data": data,
            "created_at": now,
            "updated_at": now,
        }

    def _to_domain(self, db_recipe: LocalRecipeModel) -> Recipe:
        """Преобразование модели БД в доменную сущность"""
        return Recipe(
            id=db_recipe.id,
            data=db_recipe.data,
            owner=db_recipe.owner,
            created_at=as_utc(db_recipe.created_at),
            updated_at=as_utc(db_recipe.updated_at)
        )
