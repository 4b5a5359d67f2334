from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from recipepad.core.config import settings
from recipepad.core.logging import get_logger

logger = get_logger(__name__)

# Базовый класс для моделей
Base = declarative_base()

# Асинхронный движок
engine = create_async_engine(settings.database_url, future=True, echo=settings.db_echo)

# Сессии
SessionLocal = sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


# Функция для dependency injection в FastAPI
async def get_db():
    async with SessionLocal() as session:
        yield session


async def ensure_schema(bind: AsyncEngine = engine) -> None:
    """Создание таблиц при старте"""
    # модели регистрируются в Base.metadata при импорте
    import recipepad.db.models  # noqa: F401

    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("schema_ready", tables=sorted(Base.metadata.tables))
