from typing import Optional

from fastapi import APIRouter, Body, Depends, Header, HTTPException, Request, Response, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from recipepad.core.db import get_db
from recipepad.domains.recipes.cache import ListingCache
from recipepad.domains.recipes.schemas import ExistsResponse, OkResponse, RecipeUpsert
from recipepad.domains.recipes.services import RecipeService

router = APIRouter(prefix="/recipes", tags=["recipes"])

NO_STORE = {"Cache-Control": "no-store"}


def get_listing_cache(request: Request) -> ListingCache:
    """Кэш списка живёт в app.state всё время работы процесса"""
    return request.app.state.listing_cache


def require_recipe(payload: Optional[RecipeUpsert]) -> dict:
    """Тело без JSON-объекта считается пустым"""
    if payload is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="body.recipe required")
    return payload.recipe


def get_recipe_service(
    db: AsyncSession = Depends(get_db),
    cache: ListingCache = Depends(get_listing_cache)
) -> RecipeService:
    return RecipeService(db, cache)


@router.get("")
async def list_recipes(
    if_none_match: Optional[str] = Header(default=None),
    recipe_service: RecipeService = Depends(get_recipe_service)
):
    """Список глобальных рецептов с поддержкой If-None-Match"""
    result = await recipe_service.list_recipes(if_none_match)

    if result.not_modified:
        return Response(status_code=status.HTTP_304_NOT_MODIFIED)

    return Response(
        content=result.entry.body,
        media_type="application/json",
        headers=result.entry.headers
    )


@router.get("/{recipe_id}")
async def get_recipe(
    recipe_id: str,
    recipe_service: RecipeService = Depends(get_recipe_service)
):
    """Получение рецепта по id"""
    recipe = await recipe_service.get_recipe(recipe_id)

    if not recipe:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="not found")

    return JSONResponse(content=recipe.to_payload(), headers=NO_STORE)


@router.get("/{recipe_id}/exists", response_model=ExistsResponse)
async def recipe_exists(
    recipe_id: str,
    recipe_service: RecipeService = Depends(get_recipe_service)
):
    """Проверка, опубликован ли рецепт"""
    return ExistsResponse(exists=await recipe_service.recipe_exists(recipe_id))


@router.put("/{recipe_id}", response_model=OkResponse)
async def publish_recipe(
    recipe_id: str,
    payload: Optional[RecipeUpsert] = Body(default=None),
    recipe_service: RecipeService = Depends(get_recipe_service)
):
    """Выложить/обновить рецепт"""
    await recipe_service.publish_recipe(recipe_id, require_recipe(payload))
    return OkResponse()


@router.delete("/{recipe_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_recipe(
    recipe_id: str,
    recipe_service: RecipeService = Depends(get_recipe_service)
):
    """Удалить рецепт из глобального списка"""
    await recipe_service.delete_recipe(recipe_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
