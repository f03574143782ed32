"""Unit tests for structured logging configuration and session context."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from uuid import UUID

import pytest
import structlog

from src.infrastructure.observability.logging import (
    _get_log_level,
    configure_structlog,
    get_logger_for_service,
)
from src.infrastructure.observability.session_context import (
    bind_session_id,
    clear_session_id,
    generate_session_id,
    get_session_id,
)


@pytest.fixture
def restore_structlog() -> Iterator[None]:
    """Put structlog back to its defaults after the test."""
    yield
    structlog.reset_defaults()


def _renderers(processor_type: type) -> list[object]:
    return [p for p in structlog.get_config()["processors"] if isinstance(p, processor_type)]


class TestConfigureStructlog:
    """Tests for configure_structlog."""

    def test_production_renders_json(self, restore_structlog: None) -> None:
        """Production logs are JSON lines."""
        configure_structlog(environment="production")
        assert _renderers(structlog.processors.JSONRenderer)

    def test_development_renders_console(self, restore_structlog: None) -> None:
        """Development logs go to the console renderer."""
        configure_structlog(environment="development")
        assert _renderers(structlog.dev.ConsoleRenderer)

    def test_session_context_is_merged(self, restore_structlog: None) -> None:
        """Bound contextvars are merged into every entry."""
        configure_structlog()
        processors = structlog.get_config()["processors"]
        assert structlog.contextvars.merge_contextvars in processors

    def test_log_level_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """LOG_LEVEL picks the filtering level; unknown names mean INFO."""
        monkeypatch.setenv("LOG_LEVEL", "debug")
        assert _get_log_level() == logging.DEBUG
        monkeypatch.setenv("LOG_LEVEL", "chatty")
        assert _get_log_level() == logging.INFO

    def test_service_logger_binds_context(self) -> None:
        """Service loggers carry the service and component."""
        with structlog.testing.capture_logs() as captured:
            get_logger_for_service("RuleResolverService").info("routing_resolved")
        assert captured[0]["service"] == "RuleResolverService"
        assert captured[0]["component"] == "routing"


class TestSessionContext:
    """Tests for session id binding."""

    def test_generated_ids_are_uuid7(self) -> None:
        """Session ids are time-ordered UUIDs."""
        assert UUID(generate_session_id()).version == 7

    def test_bind_and_clear(self) -> None:
        """Bound ids are visible until cleared."""
        structlog.contextvars.clear_contextvars()
        assert get_session_id() == ""
        bind_session_id("session-1")
        assert get_session_id() == "session-1"
        clear_session_id()
        assert get_session_id() == ""
