"""
Error handler decorators for GraphQL resolvers.

Resolvers raise AppException subclasses; these decorators turn them into
GraphQL errors carrying `extensions.code` (and `extensions.invalidArgs`
where relevant) so no resolver needs its own try/except.
"""

from functools import wraps
from typing import Any, Callable

from graphql import GraphQLError

from catalog.exceptions import AppException, AuthenticationError, InternalFailure
from catalog.logging import logger
from catalog.utils.metrics import MetricsCollector


def _to_graphql_error(ex: AppException) -> GraphQLError:
    return GraphQLError(ex.message, extensions=ex.extensions())


def handle_graphql_errors(func: Callable) -> Callable:
    """
    Decorator converting exceptions raised by a resolver into GraphQL errors.

    AppException instances keep their message and code. Anything else is
    logged with its traceback and reported as a generic internal error,
    so store and programming errors never leak to clients.

    Args:
        func: The async resolver function to wrap.

    Returns:
        Wrapped function that raises GraphQLError on failure.

    Example:
        ```python
        @handle_graphql_errors
        async def edit_author(context: CatalogContext, name: str, born: int):
            ...  # raises ValidationFailure, no try/except needed
        ```
    """

    @wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)
        except AppException as ex:
            logger.warning(
                f"AppException in {func.__name__}: {ex.message}",
                extra={"exception_type": type(ex).__name__},
            )
            MetricsCollector.record_graphql_error(func.__name__, ex.code)
            raise _to_graphql_error(ex) from ex
        except Exception as ex:
            logger.error(
                f"Unexpected error in {func.__name__}: {ex}", exc_info=True
            )
            failure = InternalFailure()
            MetricsCollector.record_graphql_error(func.__name__, failure.code)
            raise _to_graphql_error(failure) from ex

    return wrapper


def authenticated(func: Callable) -> Callable:
    """
    Decorator rejecting callers without a current user.

    The wrapped resolver must take the GraphQL context as its first
    argument. The check runs before the resolver body, so a rejected call
    never touches the store.

    Raises:
        AuthenticationError: If `context.current_user` is None.
    """

    @wraps(func)
    async def wrapper(context: Any, *args: Any, **kwargs: Any) -> Any:
        if context.current_user is None:
            raise AuthenticationError()
        return await func(context, *args, **kwargs)

    return wrapper
