"""Custom filters for uvicorn access logging."""

import json
import logging
import os

DEFAULT_EXCLUDED_PATHS = ["/metrics", "/health"]


class ExcludeMetricsFilter(logging.Filter):
    """
    Logging filter dropping monitoring requests from uvicorn access logs.

    Prometheus scrapes and health probes would otherwise drown the
    GraphQL traffic. The class is loaded by uvicorn's logging config
    before the application starts, so it reads the excluded paths from
    the environment instead of `catalog.settings` (which requires the
    database and token variables).
    """

    def __init__(self, name: str = "") -> None:
        super().__init__(name)
        raw = os.getenv("LOG_EXCLUDED_PATHS")
        # JSON list, e.g. ["/metrics", "/health"]
        self.excluded_paths = json.loads(raw) if raw else DEFAULT_EXCLUDED_PATHS

    def filter(self, record: logging.LogRecord) -> bool:
        """
        Determine if the log record should be logged.

        Args:
            record: The log record to evaluate.

        Returns:
            False if the request path is excluded, True otherwise.
        """
        message = record.getMessage()
        return not any(path in message for path in self.excluded_paths)
