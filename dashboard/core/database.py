from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import declarative_base

from dashboard.core.config import DATABASE_URL

Base = declarative_base()


def create_engine(url: str = DATABASE_URL, **kwargs) -> AsyncEngine:
    return create_async_engine(url, echo=False, future=True, **kwargs)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)


async def create_tables(engine: AsyncEngine) -> None:
    """Создает недостающие таблицы (для тестов и пустой базы)"""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


@asynccontextmanager
async def open_store(url: str = DATABASE_URL) -> AsyncIterator[async_sessionmaker]:
    """
    Открывает подключение к базе на время блока и закрывает его на выходе.

    Args:
        url: строка подключения SQLAlchemy

    Yields:
        async_sessionmaker: фабрика сессий, которую получает фасад
    """
    engine = create_engine(url)
    try:
        yield create_session_factory(engine)
    finally:
        await engine.dispose()


def dialect_insert(session: AsyncSession, model):
    """
    Возвращает insert() диалекта текущей сессии, чтобы были доступны
    on_conflict_do_nothing / on_conflict_do_update.
    """
    if session.bind.dialect.name == "sqlite":
        from sqlalchemy.dialects.sqlite import insert
    else:
        from sqlalchemy.dialects.postgresql import insert
    return insert(model)
