"""Task materialization and editing session domain errors."""

from __future__ import annotations

from src.domain.exceptions import RoutingEngineError


class InvalidAnchorDateError(RoutingEngineError, ValueError):
    """Raised when a due-date anchor is not a calendar date.

    Attributes:
        value: The rejected anchor value.
    """

    def __init__(self, value: object) -> None:
        """Initialize with the rejected anchor value.

        Args:
            value: The rejected anchor value.
        """
        super().__init__(
            f"Anchor date must be a date or datetime, got {type(value).__name__}: {value!r}"
        )
        self.value = value


class EditingSessionClosedError(RoutingEngineError):
    """Raised when a confirmed or cancelled editing session is used again.

    Attributes:
        session_id: The closed session.
        state: The state the session was closed in.
    """

    def __init__(self, session_id: str, state: str) -> None:
        """Initialize with the session id and the closing state.

        Args:
            session_id: The closed session.
            state: The state the session was closed in.
        """
        super().__init__(f"Editing session {session_id} is already {state}")
        self.session_id = session_id
        self.state = state
