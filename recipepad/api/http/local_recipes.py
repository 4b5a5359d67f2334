from typing import Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Response, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from recipepad.api.http.recipes import require_recipe
from recipepad.core.auth import get_owner
from recipepad.core.db import get_db
from recipepad.domains.recipes.schemas import (
    BulkUploadResponse, OkResponse, RecipeBulkUpload, RecipeUpsert
)
from recipepad.domains.recipes.services import LocalRecipeService

router = APIRouter(prefix="/local/recipes", tags=["local recipes"])


def get_local_recipe_service(db: AsyncSession = Depends(get_db)) -> LocalRecipeService:
    return LocalRecipeService(db)


@router.get("")
async def list_local_recipes(
    owner: str = Depends(get_owner),
    local_service: LocalRecipeService = Depends(get_local_recipe_service)
):
    """Список локальных рецептов владельца"""
    recipes = await local_service.list_recipes(owner)
    return JSONResponse(
        content=[recipe.to_payload() for recipe in recipes],
        headers={"Cache-Control": "no-store"}
    )


@router.post("/bulk", response_model=BulkUploadResponse)
async def import_local_recipes(
    payload: Optional[RecipeBulkUpload] = Body(default=None),
    owner: str = Depends(get_owner),
    local_service: LocalRecipeService = Depends(get_local_recipe_service)
):
    """Массовая загрузка локальных рецептов"""
    recipes = payload.recipes if payload is not None else []
    count = await local_service.import_recipes(owner, recipes)
    return BulkUploadResponse(count=count)


@router.get("/{recipe_id}")
async def get_local_recipe(
    recipe_id: str,
    owner: str = Depends(get_owner),
    local_service: LocalRecipeService = Depends(get_local_recipe_service)
):
    """Получение локального рецепта"""
    recipe = await local_service.get_recipe(owner, recipe_id)

    if not recipe:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="not found")

    return recipe.to_payload()


@router.put("/{recipe_id}", response_model=OkResponse)
async def save_local_recipe(
    recipe_id: str,
    payload: Optional[RecipeUpsert] = Body(default=None),
    owner: str = Depends(get_owner),
    local_service: LocalRecipeService = Depends(get_local_recipe_service)
):
    """Сохранение локального рецепта"""
    await local_service.save_recipe(owner, recipe_id, require_recipe(payload))
    return OkResponse()


@router.delete("/{recipe_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_local_recipe(
    recipe_id: str,
    owner: str = Depends(get_owner),
    local_service: LocalRecipeService = Depends(get_local_recipe_service)
):
    """Удаление локального рецепта"""
    await local_service.delete_recipe(owner, recipe_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
