from collections.abc import AsyncGenerator
from datetime import datetime, timezone
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase

from core.config import settings


class Base(DeclarativeBase):
    pass


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


engine = create_async_engine(settings.database_url, echo=settings.database_echo)
async_session_maker = async_sessionmaker(engine, expire_on_commit=False)


def import_models():
    """Import every model module so relationships can resolve by name."""
    from . import (  # noqa: F401
        users,
        ingredient,
        cocktail_method,
        cocktail_recipe,
        cocktail_ingredient,
        cocktail_ingredient_substitute,
        user_ingredient,
    )


async def create_db_and_tables():
    import_models()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    async with async_session_maker() as session:
        yield session
