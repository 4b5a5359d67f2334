from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from recipepad.core.db import get_db
from recipepad.core.logging import get_logger

router = APIRouter(tags=["health"])
logger = get_logger(__name__)


@router.get("/health")
async def health(db: AsyncSession = Depends(get_db)):
    """Проверка доступности БД"""
    try:
        await db.execute(text("select 1"))
    except Exception:
        logger.error("health_check_failed", exc_info=True)
        return JSONResponse(status_code=500, content={"ok": False})
    return {"ok": True}
