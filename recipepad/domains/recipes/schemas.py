from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator


class RecipeUpsert(BaseModel):
    """Тело запроса на публикацию/обновление рецепта"""
    recipe: Optional[Dict[str, Any]] = Field(default=None, validate_default=True)

    @field_validator("recipe", mode="before")
    @classmethod
    def validate_recipe(cls, v):
        if not isinstance(v, dict):
            raise ValueError("body.recipe required")
        return v


class RecipeBulkUpload(BaseModel):
    """Массовая загрузка локальных рецептов"""
    recipes: List[Any] = Field(default_factory=list)

    @field_validator("recipes", mode="before")
    @classmethod
    def validate_recipes(cls, v):
        # не массив: загружать нечего
        if not isinstance(v, list):
            return []
        for item in v:
            if not isinstance(item, dict):
                raise ValueError("each recipe must be an object")
            recipe_id = item.get("id")
            if not isinstance(recipe_id, str) or not recipe_id.strip():
                raise ValueError("each recipe requires a non-empty string id")
        return v


class OkResponse(BaseModel):
    ok: bool = True


class BulkUploadResponse(OkResponse):
    count: int


class ExistsResponse(BaseModel):
    exists: bool
