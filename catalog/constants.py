"""
Application-level constants for hardcoded business logic.

These values represent core application behavior and should NEVER be changed
via environment variables or configuration. They define protocol names,
error codes and safety limits.

For configurable values (connection pools, token TTL, queue sizes, etc.),
see catalog/settings.py where values can be overridden via environment variables.
"""

# ============================================================================
# Notification Topics
# ============================================================================

# Topic carrying one event per successfully persisted book
BOOK_ADDED = "BOOK_ADDED"


# ============================================================================
# GraphQL Error Codes
# ============================================================================

# Values placed in `extensions.code` of client-visible errors
ERROR_CODE_UNAUTHENTICATED = "UNAUTHENTICATED"
ERROR_CODE_BAD_USER_INPUT = "BAD_USER_INPUT"
ERROR_CODE_INTERNAL = "INTERNAL_SERVER_ERROR"

# Message returned for every masked internal failure
INTERNAL_ERROR_MESSAGE = "Internal server error"


# ============================================================================
# Authentication
# ============================================================================

# Scheme expected in the Authorization header / query parameter
AUTH_SCHEME = "bearer"

# Signing algorithm for issued tokens (shared secret)
TOKEN_ALGORITHM = "HS256"


# ============================================================================
# Logging
# ============================================================================

# Maximum size of a single structured log line
MAX_LOG_SIZE_BYTES = 256 * 1024
