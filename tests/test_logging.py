"""Tests for structured logging functionality."""

import json
import logging

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from catalog.logging import (
    HumanReadableFormatter,
    StructuredJSONFormatter,
    set_log_context,
)
from catalog.middlewares.correlation_id import (
    CorrelationIDMiddleware,
    correlation_id,
    log_context,
)


def make_record(message: str = "Book added", level: int = logging.INFO, **extra):
    record = logging.LogRecord(
        name="catalog",
        level=level,
        pathname=__file__,
        lineno=10,
        msg=message,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.fixture
def bound_context():
    """
    Isolate the log context of a test.

    Yields:
        None: The context is reset to its previous value afterwards.
    """
    token = log_context.set({})
    yield
    log_context.reset(token)


class TestLogContext:
    """Test log context management."""

    def test_set_log_context_merges_fields(self, bound_context):
        """Test that successive calls add to the context."""
        set_log_context(user_id=1)
        set_log_context(username="mluukkai")

        assert log_context.get() == {"user_id": 1, "username": "mluukkai"}

    def test_each_request_starts_empty(self):
        """Test fields bound during one request do not reach the next."""
        app = FastAPI()
        app.add_middleware(CorrelationIDMiddleware)
        seen = []

        @app.get("/whoami")
        async def whoami():
            seen.append(dict(log_context.get()))
            set_log_context(username="mluukkai")
            return {}

        with TestClient(app) as client:
            client.get("/whoami")
            client.get("/whoami")

        assert seen == [{}, {}]


class TestStructuredJSONFormatter:
    """Test JSON log output."""

    def test_includes_context_and_correlation_id(self, bound_context):
        """Test request context ends up in the JSON document."""
        token = correlation_id.set("abcd1234")
        set_log_context(username="mluukkai")
        try:
            output = StructuredJSONFormatter().format(make_record())
        finally:
            correlation_id.reset(token)

        data = json.loads(output)
        assert data["message"] == "Book added"
        assert data["level"] == "INFO"
        assert data["request_id"] == "abcd1234"
        assert data["username"] == "mluukkai"

    def test_extra_fields_are_serialized(self):
        """Test non-JSON extras fall back to their string form."""
        output = StructuredJSONFormatter().format(
            make_record(exception_type="ValidationFailure", payload=object())
        )

        data = json.loads(output)
        assert data["exception_type"] == "ValidationFailure"
        assert isinstance(data["payload"], str)
        assert "msg" not in data

    def test_long_message_is_truncated(self):
        """Test oversized messages are cut short."""
        output = StructuredJSONFormatter().format(make_record("x" * 300_000))

        assert json.loads(output)["message"].endswith("... [TRUNCATED]")


class TestHumanReadableFormatter:
    """Test console log output."""

    def test_placeholder_without_correlation_id(self, bound_context):
        """Test a dash stands in for a missing correlation id."""
        output = HumanReadableFormatter().format(make_record())

        assert "[-] INFO: Book added" in output

    def test_bound_fields_follow_correlation_id(self, bound_context):
        """Test request fields are shown next to the correlation id."""
        token = correlation_id.set("abcd1234")
        set_log_context(username="mluukkai")
        try:
            output = HumanReadableFormatter().format(make_record())
        finally:
            correlation_id.reset(token)

        assert "[abcd1234 username=mluukkai] INFO: Book added" in output

    def test_warning_includes_location(self, bound_context):
        """Test non-INFO lines carry module, function and line."""
        output = HumanReadableFormatter().format(
            make_record("Slow subscriber", level=logging.WARNING)
        )

        assert ":10 - Slow subscriber" in output
