"""Structured logging configuration with structlog.

This module provides centralized structlog configuration for the engine,
supporting both production (JSON) and development (console) output modes.

Log Entry Format:
    {
        "timestamp": "2025-03-10T08:00:00.000000Z",
        "level": "info",
        "event": "routing_resolved",
        "session_id": "uuid",
        "service": "RuleResolverService",
        ...additional context
    }

Usage:
    # Once, when the engine is wired
    from src.infrastructure.observability import configure_structlog

    configure_structlog(environment="production")  # JSON output
    configure_structlog(environment="development")  # Console output

    # Then use structlog normally
    import structlog
    log = structlog.get_logger(__name__)
    log.info("event_name", key="value")
"""

import logging
import os

import structlog
from structlog.typing import Processor

# Environment variable for log level (default: INFO)
LOG_LEVEL_ENV = "LOG_LEVEL"
DEFAULT_LOG_LEVEL = "INFO"


def _get_log_level() -> int:
    """Get the configured log level from environment.

    Returns:
        The logging level integer (e.g., logging.INFO). Unknown names fall
        back to INFO.
    """
    level_name = os.getenv(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL).upper()
    level = getattr(logging, level_name, logging.INFO)
    return level if isinstance(level, int) else logging.INFO


def configure_structlog(environment: str = "production") -> None:
    """Configure structlog for the engine.

    Args:
        environment: 'production' for JSON output, anything else for
            console output. Defaults to 'production'.
    """
    shared_processors: list[Processor] = [
        # Merge context from contextvars (session_id)
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if environment == "production":
        final_processor: Processor = structlog.processors.JSONRenderer()
    else:
        final_processor = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=shared_processors + [final_processor],
        wrapper_class=structlog.make_filtering_bound_logger(_get_log_level()),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger_for_service(
    service_name: str, component: str = "routing"
) -> structlog.BoundLogger:
    """Get a pre-bound logger for a service.

    Args:
        service_name: The name of the service (typically class name).
        component: The component type (default: "routing").

    Returns:
        A BoundLogger with service and component bound.
    """
    return structlog.get_logger().bind(
        service=service_name,
        component=component,
    )
