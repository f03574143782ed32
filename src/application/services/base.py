"""Base service logging mixin.

This module provides the LoggingMixin class for standardized structured
logging across application services.

Usage:
    from src.application.services.base import LoggingMixin

    class MyService(LoggingMixin):
        def __init__(self, dependency: SomePort) -> None:
            self._dependency = dependency
            self._init_logger()  # Initialize structured logger

        async def do_something(self) -> None:
            log = self._log_operation("do_something", classification="SYS")
            log.info("operation_started")
            # ... do work ...
            log.info("operation_completed")
"""

import structlog


class LoggingMixin:
    """Mixin providing structured logging for services.

    The logger is bound with:
    - service: The class name of the service
    - component: The component type (default: "routing")

    Each operation gets:
    - operation: The name of the operation being performed
    - Any additional context passed to _log_operation()

    The editing session id, when bound, is merged in from structlog
    contextvars by the configured processors.

    Attributes:
        _log: The structlog BoundLogger for this service instance.
    """

    _log: structlog.BoundLogger

    def _init_logger(self, component: str = "routing") -> None:
        """Initialize the logger with service name binding.

        Should be called in __init__ after setting up dependencies.

        Args:
            component: The component type for log categorization.
        """
        self._log = structlog.get_logger().bind(
            service=self.__class__.__name__,
            component=component,
        )

    def _log_operation(
        self,
        operation: str,
        **context: object,
    ) -> structlog.BoundLogger:
        """Create an operation-scoped logger.

        Args:
            operation: Name of the operation being performed.
            **context: Additional context to bind to the logger.

        Returns:
            BoundLogger with operation context.
        """
        return self._log.bind(operation=operation, **context)
