import asyncio
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

import catalog.models  # noqa: F401  registers every table on the metadata
from catalog.logging import logger
from catalog.settings import app_settings

SessionFactory = Callable[[], AsyncSession]


def engine_options(url: str) -> dict[str, Any]:
    """
    Build engine keyword arguments for the given database URL.

    SQLite engines (used for local runs and tests) do not accept the
    connection pool sizing options used for PostgreSQL.

    Args:
        url: Async SQLAlchemy database URL.

    Returns:
        Keyword arguments for `create_async_engine`.
    """
    if url.startswith("sqlite"):
        return {"echo": False}

    return {
        "echo": False,
        "pool_size": app_settings.DB_POOL_SIZE,
        "max_overflow": app_settings.DB_MAX_OVERFLOW,
        "pool_recycle": app_settings.DB_POOL_RECYCLE,
        "pool_pre_ping": app_settings.DB_POOL_PRE_PING,
    }


def create_session_factory(engine: AsyncEngine) -> SessionFactory:
    """
    Create an AsyncSession factory bound to an engine.

    Args:
        engine: Engine the sessions will use.

    Returns:
        Callable producing new sessions; objects stay usable after commit.
    """
    return sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)


engine: AsyncEngine = create_async_engine(
    app_settings.DATABASE_URL, **engine_options(app_settings.DATABASE_URL)
)
async_session = create_session_factory(engine)


async def init_db(db_engine: AsyncEngine) -> None:
    """
    Create all catalog tables that do not exist yet.

    Args:
        db_engine: Engine to create the tables on.
    """
    async with db_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


async def wait_and_init_db(
    db_engine: AsyncEngine | None = None,
    retry_interval: int | None = None,
    max_retries: int | None = None,
) -> None:
    """
    Wait until the database is available and initialize tables.

    Args:
        db_engine: Engine to initialize. Defaults to the module engine.
        retry_interval: Time in seconds between retries.
            Defaults to app_settings.DB_INIT_RETRY_INTERVAL
        max_retries: Maximum number of retries before giving up.
            Defaults to app_settings.DB_INIT_MAX_RETRIES

    Raises:
        RuntimeError: If the database is still unreachable after all retries.
    """
    if db_engine is None:
        db_engine = engine
    if retry_interval is None:
        retry_interval = app_settings.DB_INIT_RETRY_INTERVAL
    if max_retries is None:
        max_retries = app_settings.DB_INIT_MAX_RETRIES

    for attempt in range(max_retries):
        try:
            await init_db(db_engine)
            logger.info("Database is now ready.")
            return
        except OperationalError:
            logger.warning(
                f"Database not ready, retrying in {retry_interval} seconds... (Attempt {attempt + 1}/{max_retries})"
            )
            await asyncio.sleep(retry_interval)

    logger.error("Failed to connect to the database after multiple attempts.")
    raise RuntimeError("Database connection could not be established.")


@asynccontextmanager
async def session_scope(
    session_factory: SessionFactory | None = None,
) -> AsyncIterator[AsyncSession]:
    """
    Open a session that forms one unit of work.

    The session is committed when the block finishes without error and
    rolled back otherwise.

    Args:
        session_factory: Factory to open the session from.
            Defaults to the module session factory.

    Yields:
        AsyncSession: An asynchronous SQLAlchemy session.
    """
    factory = session_factory or async_session
    async with factory() as session:
        try:
            yield session
            await session.commit()
        except IntegrityError as ex:
            await session.rollback()
            logger.error(f"Database integrity error: {ex}")
            raise
        except SQLAlchemyError as ex:
            await session.rollback()
            logger.error(f"Database error: {ex}")
            raise
