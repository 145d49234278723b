# Uvicorn application factory <https://www.uvicorn.org/#application-factories>
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI
from sqlalchemy.ext.asyncio import AsyncEngine
from strawberry.fastapi import GraphQLRouter
from strawberry.subscriptions import GRAPHQL_TRANSPORT_WS_PROTOCOL, GRAPHQL_WS_PROTOCOL

from catalog.api.http import health, metrics
from catalog.graphql.context import get_context
from catalog.graphql.schema import schema
from catalog.logging import logger
from catalog.managers.notification_bus import NotificationBus
from catalog.managers.token_manager import TokenManager
from catalog.middlewares.correlation_id import CorrelationIDMiddleware
from catalog.settings import app_settings
from catalog.storage import db


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    FastAPI lifespan context manager for startup and shutdown.

    Startup operations:
    - Sets up the database and tables
    - Creates the notification bus, unless one was injected
    - Initializes Prometheus metrics

    Shutdown operations:
    - Closes the notification bus, ending every live subscription
    """
    # Startup
    logger.info("Application startup: initializing resources")

    await db.wait_and_init_db(app.state.engine)
    logger.info("Initialized database and tables")

    if app.state.bus is None:
        app.state.bus = NotificationBus(app_settings.NOTIFICATION_QUEUE_SIZE)
    logger.info("Created notification bus")

    from catalog.utils.metrics import app_info

    app_info.labels(
        version="1.0.0",
        python_version=f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}",
        environment=app_settings.ENV.value,
    ).set(1)
    logger.info("Initialized Prometheus metrics")

    yield  # Application runs here

    # Shutdown
    logger.info("Application shutdown: cleaning up resources")
    app.state.bus.close()
    logger.info("Application shutdown complete")


def application(
    engine: AsyncEngine | None = None,
    bus: NotificationBus | None = None,
    token_manager: TokenManager | None = None,
) -> FastAPI:
    """
    Initializes and configures the FastAPI application.

    The GraphQL endpoint (HTTP and WebSocket subscriptions) is mounted at
    `GRAPHQL_PATH`, next to the `/health` and `/metrics` endpoints.

    Args:
        engine: Database engine. Defaults to the engine built from the
            settings.
        bus: Notification bus. Defaults to a new bus created at startup.
        token_manager: Token signer/verifier. Defaults to one built from
            the settings.

    Returns:
        The configured application.
    """
    app = FastAPI(
        title="Library catalog",
        description="Books and authors over GraphQL",
        version="1.0.0",
        lifespan=lifespan,
    )

    if engine is None:
        engine = db.engine
    app.state.engine = engine
    app.state.session_factory = (
        db.async_session
        if engine is db.engine
        else db.create_session_factory(engine)
    )
    app.state.bus = bus
    app.state.token_manager = token_manager or TokenManager.from_settings()

    graphql_app = GraphQLRouter(
        schema,
        context_getter=get_context,
        graphql_ide="graphiql" if app_settings.GRAPHIQL_ENABLED else None,
        subscription_protocols=(
            GRAPHQL_TRANSPORT_WS_PROTOCOL,
            GRAPHQL_WS_PROTOCOL,
        ),
    )

    app.include_router(graphql_app, prefix=app_settings.GRAPHQL_PATH)
    app.include_router(health.router)
    app.include_router(metrics.router)

    app.add_middleware(CorrelationIDMiddleware)

    return app


app = application()  # Need for fastapi cli
