"""
Database session management.
Настройка подключения к БД и управление сессиями.
Поддерживает PostgreSQL и SQLite.
"""

from sqlalchemy.ext.asyncio import (
    AsyncSession,
    AsyncEngine,
    create_async_engine,
    async_sessionmaker,
)
from sqlalchemy.pool import StaticPool
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from config.settings import settings
from loguru import logger


def build_engine(database_url: str) -> AsyncEngine:
    """Создаёт engine с параметрами пула под тип БД."""
    engine_kwargs = {
        "echo": False,  # True для отладки SQL запросов
        "future": True,
    }

    if database_url.startswith("sqlite"):
        # SQLite требует особых настроек для async
        engine_kwargs["poolclass"] = StaticPool
        engine_kwargs["connect_args"] = {"check_same_thread": False}
    else:
        # PostgreSQL с connection pooling (AsyncAdaptedQueuePool по умолчанию)
        engine_kwargs["pool_size"] = settings.DB_POOL_SIZE
        engine_kwargs["max_overflow"] = settings.DB_MAX_OVERFLOW
        engine_kwargs["pool_timeout"] = settings.DB_POOL_TIMEOUT
        engine_kwargs["pool_recycle"] = settings.DB_POOL_RECYCLE
        engine_kwargs["pool_pre_ping"] = True

    return create_async_engine(database_url, **engine_kwargs)


def build_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Фабрика сессий. Передаётся в сервисы явно."""
    return async_sessionmaker(
        bind,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


is_sqlite = settings.DATABASE_URL.startswith("sqlite")

# Создаём engine
engine: AsyncEngine = build_engine(settings.DATABASE_URL)

# Фабрика сессий
async_session = build_session_factory(engine)


@asynccontextmanager
async def get_session_context(
    session_factory: async_sessionmaker[AsyncSession] = async_session,
) -> AsyncGenerator[AsyncSession, None]:
    """
    Контекстный менеджер для одной единицы работы.
    Использование:
        async with get_session_context(factory) as session:
            ...
    Коммит при успешном выходе, откат при исключении.
    """
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def init_db(bind: AsyncEngine = engine) -> None:
    """
    Инициализация базы данных.
    Создаёт все таблицы если их нет.
    """
    from database.models import Base

    logger.info("Initializing database...")

    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    if not is_sqlite:
        logger.info(
            f"Database pool initialized: "
            f"size={settings.DB_POOL_SIZE}, "
            f"max_overflow={settings.DB_MAX_OVERFLOW}, "
            f"timeout={settings.DB_POOL_TIMEOUT}s, "
            f"recycle={settings.DB_POOL_RECYCLE}s"
        )

    logger.info("Database initialized successfully")


async def close_db() -> None:
    """
    Закрытие подключения к БД.
    Вызывается при остановке приложения.
    """
    logger.info("Closing database connection...")
    await engine.dispose()
    logger.info("Database connection closed")


async def check_db_connection(
    session_factory: async_sessionmaker[AsyncSession] = async_session,
) -> bool:
    """
    Проверка подключения к БД.
    Возвращает True если подключение успешно.
    """
    from sqlalchemy import text

    try:
        async with session_factory() as session:
            await session.execute(text("SELECT 1"))
            return True
    except Exception as e:
        logger.error(f"Database connection check failed: {e}")
        return False
