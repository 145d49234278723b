"""
Facade for centralized metrics emission.

Provides high-level methods for recording metrics without exposing
Prometheus implementation details to the rest of the codebase.
"""


class MetricsCollector:
    """
    Centralized facade for all Prometheus metrics.

    All methods are static for easy use without instantiation.
    """

    # ========== GraphQL Metrics ==========

    @staticmethod
    def record_graphql_operation(
        operation_type: str, duration: float, failed: bool
    ) -> None:
        """
        Record one executed GraphQL operation.

        Args:
            operation_type: 'query', 'mutation' or 'subscription'.
            duration: Execution time in seconds.
            failed: Whether the result carried errors.
        """
        from catalog.utils.metrics.graphql import (
            graphql_operation_duration_seconds,
            graphql_operations_total,
        )

        graphql_operations_total.labels(
            operation_type=operation_type,
            status="error" if failed else "success",
        ).inc()
        graphql_operation_duration_seconds.labels(
            operation_type=operation_type
        ).observe(duration)

    @staticmethod
    def record_graphql_error(field: str, code: str) -> None:
        """
        Record a client-visible error raised by a resolver.

        Args:
            field: Name of the resolver that failed.
            code: Error code sent in the error extensions.
        """
        from catalog.utils.metrics.graphql import graphql_errors_total

        graphql_errors_total.labels(field=field, code=code).inc()

    # ========== Notification Metrics ==========

    @staticmethod
    def record_subscription_opened(topic: str) -> None:
        """Record a newly registered subscriber."""
        from catalog.utils.metrics.notifications import subscriptions_active

        subscriptions_active.labels(topic=topic).inc()

    @staticmethod
    def record_subscription_closed(topic: str) -> None:
        """Record a deregistered subscriber."""
        from catalog.utils.metrics.notifications import subscriptions_active

        subscriptions_active.labels(topic=topic).dec()

    @staticmethod
    def record_notification_published(topic: str) -> None:
        """Record one published event."""
        from catalog.utils.metrics.notifications import (
            notifications_published_total,
        )

        notifications_published_total.labels(topic=topic).inc()

    @staticmethod
    def record_notification_dropped(topic: str) -> None:
        """Record one event discarded by the drop-oldest policy."""
        from catalog.utils.metrics.notifications import (
            notifications_dropped_total,
        )

        notifications_dropped_total.labels(topic=topic).inc()

    # ========== Auth Metrics ==========

    @staticmethod
    def record_login(status: str) -> None:
        """
        Record a login attempt.

        Args:
            status: 'success' or 'failure'.
        """
        from catalog.utils.metrics.auth import auth_attempts_total

        auth_attempts_total.labels(status=status).inc()

    @staticmethod
    def record_token_validation(status: str) -> None:
        """
        Record a bearer token validation.

        Args:
            status: 'valid' or 'invalid'.
        """
        from catalog.utils.metrics.auth import auth_token_validations_total

        auth_token_validations_total.labels(status=status).inc()
