"""
Per-request GraphQL context.

A context is built once per HTTP request and once per WebSocket
connection. It carries the collaborators every resolver needs and the
user resolved from the bearer token, if any.
"""

from fastapi import Depends
from starlette.requests import HTTPConnection
from strawberry.fastapi import BaseContext

from catalog.auth import resolve_identity
from catalog.logging import set_log_context
from catalog.managers.notification_bus import NotificationBus
from catalog.managers.token_manager import TokenManager
from catalog.models.user import User
from catalog.repositories.user_repository import UserRepository
from catalog.settings import app_settings
from catalog.storage.db import SessionFactory, session_scope


class CatalogContext(BaseContext):
    """
    Context handed to every resolver.

    Attributes:
        session_factory: Opens one store session per resolver call.
        bus: Notification bus for BOOK_ADDED events.
        token_manager: Signs tokens issued by `login`.
        current_user: The authenticated user, or None.
        shared_password: Password accepted by `login` for every user.
    """

    def __init__(
        self,
        session_factory: SessionFactory,
        bus: NotificationBus,
        token_manager: TokenManager,
        current_user: User | None = None,
        shared_password: str | None = None,
    ) -> None:
        super().__init__()
        self.session_factory = session_factory
        self.bus = bus
        self.token_manager = token_manager
        self.current_user = current_user
        if shared_password is None:
            shared_password = app_settings.LOGIN_SHARED_PASSWORD.get_secret_value()
        self.shared_password = shared_password


async def load_current_user(
    connection: HTTPConnection,
    session_factory: SessionFactory,
    token_manager: TokenManager,
) -> User | None:
    """
    Resolve the user a connection is acting for.

    Args:
        connection: The incoming HTTP request or WebSocket.
        session_factory: Factory for the lookup session.
        token_manager: Verifier for the bearer token.

    Returns:
        The user named by a valid token, or None. A valid token whose
        user no longer exists also yields None.
    """
    identity = resolve_identity(connection, token_manager)
    if identity is None:
        return None

    async with session_scope(session_factory) as session:
        user = await UserRepository(session).get_by_id(identity.id)

    if user is not None:
        set_log_context(user_id=user.id, username=user.username)
    return user


async def get_current_user(connection: HTTPConnection) -> User | None:
    """FastAPI dependency returning the caller's user, if any."""
    state = connection.app.state
    return await load_current_user(
        connection, state.session_factory, state.token_manager
    )


async def get_context(
    connection: HTTPConnection,
    current_user: User | None = Depends(get_current_user),
) -> CatalogContext:
    """
    Context getter used by the GraphQL router.

    The collaborators come from `app.state`, populated by the application
    factory and its lifespan.
    """
    state = connection.app.state
    return CatalogContext(
        session_factory=state.session_factory,
        bus=state.bus,
        token_manager=state.token_manager,
        current_user=current_user,
    )
