"""
Custom exception classes for the catalog service.

Every client-visible failure derives from AppException, which carries the
GraphQL error code placed in `extensions.code` and, where relevant, the
offending input arguments placed in `extensions.invalidArgs`.
"""

from typing import Any

from catalog.constants import (
    ERROR_CODE_BAD_USER_INPUT,
    ERROR_CODE_INTERNAL,
    ERROR_CODE_UNAUTHENTICATED,
    INTERNAL_ERROR_MESSAGE,
)


class AppException(Exception):
    """
    Base exception class for all application exceptions.

    Attributes:
        message: Human-readable error message.
        code: Machine-readable error code for the GraphQL error extensions.
        invalid_args: Offending input arguments echoed back to the client.
    """

    code: str = ERROR_CODE_INTERNAL

    def __init__(
        self, message: str, invalid_args: dict[str, Any] | None = None
    ):
        """
        Initialize the exception with a message.

        Args:
            message: Human-readable error description.
            invalid_args: Optional mapping of argument name to the value
                that caused the failure.
        """
        self.message = message
        self.invalid_args = invalid_args or {}
        super().__init__(message)

    def extensions(self) -> dict[str, Any]:
        """Build the GraphQL error extensions for this exception."""
        extensions: dict[str, Any] = {"code": self.code}
        if self.invalid_args:
            extensions["invalidArgs"] = self.invalid_args
        return extensions


class AuthenticationError(AppException):
    """
    No valid identity for a protected operation.

    Raised when a mutation that requires a logged in user is executed
    without one, and internally when a bearer token cannot be decoded.
    """

    code = ERROR_CODE_UNAUTHENTICATED

    def __init__(self, message: str = "not authenticated"):
        super().__init__(message)


class ValidationFailure(AppException):
    """
    The store rejected malformed or duplicate input.

    Attributes:
        field: Name of the offending field.
    """

    code = ERROR_CODE_BAD_USER_INPUT

    def __init__(self, message: str, field: str, value: Any = None):
        self.field = field
        super().__init__(message, invalid_args={field: value})


class InvalidCredentials(AppException):
    """Login failed: unknown username or wrong password."""

    code = ERROR_CODE_BAD_USER_INPUT

    def __init__(self, message: str = "wrong credentials"):
        super().__init__(message)


class InternalFailure(AppException):
    """
    Unexpected failure masked behind a generic message.

    The original exception is logged, never sent to the client.
    """

    code = ERROR_CODE_INTERNAL

    def __init__(self, message: str = INTERNAL_ERROR_MESSAGE):
        super().__init__(message)
