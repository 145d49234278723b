from urllib.parse import parse_qsl

from fastapi.security.utils import get_authorization_scheme_param
from starlette.requests import HTTPConnection

from catalog.constants import AUTH_SCHEME
from catalog.exceptions import AuthenticationError
from catalog.logging import logger
from catalog.managers.token_manager import TokenManager
from catalog.schemas.user import Identity
from catalog.utils.metrics import MetricsCollector


def extract_bearer_token(connection: HTTPConnection) -> str | None:
    """
    Extract the bearer token carried by an incoming connection.

    HTTP requests carry it in the `Authorization` header. Browsers cannot
    set headers on WebSocket handshakes, so WebSocket connections carry it
    in an `Authorization` query parameter instead, falling back to the
    handshake header for clients that can send one.

    Args:
        connection: The incoming HTTP request or WebSocket.

    Returns:
        The raw token, or None when absent or not a bearer credential.
    """
    authorization = ""
    if connection.scope["type"] == "websocket":
        qs = dict(parse_qsl(connection.scope["query_string"].decode("utf8")))
        authorization = qs.get("Authorization", "")
    if not authorization:
        authorization = connection.headers.get("authorization", "")

    scheme, token = get_authorization_scheme_param(authorization)
    if scheme.lower() != AUTH_SCHEME or not token:
        return None

    return token


def resolve_identity(
    connection: HTTPConnection, token_manager: TokenManager
) -> Identity | None:
    """
    Resolve the identity of the caller, if any.

    This is a context-construction step: it never blocks the request. A
    missing, malformed, forged or expired token simply yields an
    unauthenticated caller, and the protected operations reject it later.

    Args:
        connection: The incoming HTTP request or WebSocket.
        token_manager: Verifier for the bearer token.

    Returns:
        The token's identity, or None when the caller is unauthenticated.
    """
    token = extract_bearer_token(connection)
    if token is None:
        return None

    try:
        identity = token_manager.decode(token)
    except AuthenticationError as ex:
        logger.debug(f"Ignoring bearer token: {ex.message}")
        MetricsCollector.record_token_validation("invalid")
        return None

    MetricsCollector.record_token_validation("valid")
    return identity
