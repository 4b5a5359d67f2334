from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from recipepad.api.http import (
    auth_router,
    health_router,
    local_recipes_router,
    orders_router,
    recipes_router,
)
from recipepad.core.config import settings
from recipepad.core.db import engine, ensure_schema
from recipepad.core.errors import install_exception_handlers
from recipepad.core.logging import configure_logging, get_logger
from recipepad.domains.recipes.cache import ListingCache

configure_logging(settings.log_level, settings.log_json)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # без схемы API всё равно поднимается, ошибка видна в логах
    try:
        await ensure_schema(engine)
    except Exception:
        logger.error("ensure_schema_failed", exc_info=True)
    logger.info("api_started")
    yield
    await engine.dispose()


app = FastAPI(
    title="RecipePad",
    description="Бэкенд для обмена рецептами",
    version="1.0.0",
    lifespan=lifespan
)

# Кэш списка глобальных рецептов: один на процесс
app.state.listing_cache = ListingCache(ttl=settings.recipes_cache_ttl)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "Cache-Control", "Pragma", "X-Owner-Id"],
)
app.add_middleware(GZipMiddleware, minimum_size=1000)

install_exception_handlers(app)

# Подключаем роутеры
app.include_router(health_router)
app.include_router(auth_router)
app.include_router(recipes_router)
app.include_router(local_recipes_router)
app.include_router(orders_router)


@app.get("/")
async def root():
    """Корневой эндпоинт"""
    return {
        "message": "RecipePad API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health"
    }
