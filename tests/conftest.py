"""
Pytest configuration and fixtures for testing.

This module provides shared fixtures for the store, the notification bus,
tokens and GraphQL contexts.
"""

import os

import pytest
import pytest_asyncio
from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

# Set required environment variables for testing before importing app modules
os.environ.setdefault("DB_USER", "test-user")
os.environ.setdefault("DB_PASSWORD", "test-password")
os.environ.setdefault("DB_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET", "test-jwt-secret")
os.environ.setdefault("LOG_FILE_PATH", "/tmp/catalog-test-errors.log")

from catalog.graphql.context import CatalogContext  # noqa: E402
from catalog.managers.notification_bus import NotificationBus  # noqa: E402
from catalog.managers.token_manager import TokenManager  # noqa: E402
from catalog.models.user import User  # noqa: E402
from catalog.repositories.user_repository import UserRepository  # noqa: E402
from catalog.storage.db import create_session_factory, session_scope  # noqa: E402


def create_test_engine():
    """
    Create an engine on a private in-memory SQLite database.

    StaticPool keeps a single connection, so every session opened from
    the engine sees the same database.
    """
    return create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )


def create_file_engine(path):
    """
    Create an engine on a SQLite file, one connection per session.

    Transactions start with BEGIN IMMEDIATE so concurrent writers queue
    on the database lock instead of failing with "database is locked".
    """
    file_engine = create_async_engine(
        f"sqlite+aiosqlite:///{path}", connect_args={"timeout": 30}
    )

    @event.listens_for(file_engine.sync_engine, "connect")
    def disable_implicit_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(file_engine.sync_engine, "begin")
    def begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    return file_engine


@pytest_asyncio.fixture
async def engine():
    """
    Provides an engine with all catalog tables created.

    Yields:
        AsyncEngine: Engine bound to a fresh in-memory database.
    """
    test_engine = create_test_engine()
    async with test_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield test_engine

    await test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    """Provides a session factory bound to the test engine."""
    return create_session_factory(engine)


@pytest.fixture
def bus():
    """Provides a fresh notification bus."""
    return NotificationBus(max_queue_size=10)


@pytest.fixture
def token_manager():
    """Provides a token manager with a fixed secret and no expiry."""
    return TokenManager("test-secret")


@pytest_asyncio.fixture
async def user(session_factory) -> User:
    """
    Provides a registered user.

    Returns:
        User: The user 'mluukkai' with favorite genre 'refactoring'.
    """
    async with session_scope(session_factory) as session:
        return await UserRepository(session).create("mluukkai", "refactoring")


@pytest.fixture
def make_context(session_factory, bus, token_manager):
    """
    Provides a factory for GraphQL contexts sharing the test collaborators.

    Returns:
        Callable: Takes an optional current user and returns a context.
    """

    def factory(current_user: User | None = None) -> CatalogContext:
        return CatalogContext(
            session_factory=session_factory,
            bus=bus,
            token_manager=token_manager,
            current_user=current_user,
            shared_password="secret",
        )

    return factory
