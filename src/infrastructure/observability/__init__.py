"""Observability infrastructure for structured logging.

This module provides cross-cutting observability concerns:
- Structured JSON or console logging with structlog
- Editing session id carried in structlog contextvars

Usage:
    from src.infrastructure.observability import (
        bind_session_id,
        configure_structlog,
        generate_session_id,
    )

    # When the engine is wired
    configure_structlog(environment="production")

    # When an editing session opens
    bind_session_id(generate_session_id())
"""

from src.infrastructure.observability.logging import (
    configure_structlog,
    get_logger_for_service,
)
from src.infrastructure.observability.session_context import (
    bind_session_id,
    clear_session_id,
    generate_session_id,
    get_session_id,
)

__all__: list[str] = [
    "bind_session_id",
    "clear_session_id",
    "configure_structlog",
    "generate_session_id",
    "get_logger_for_service",
    "get_session_id",
]
