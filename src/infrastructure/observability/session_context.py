"""Editing session context for structured logging.

The active editing session id is kept in structlog's contextvars, so
every log line emitted while a session is being built, edited, confirmed
or cancelled carries ``session_id`` through merge_contextvars.

Usage:
    session_id = generate_session_id()
    bind_session_id(session_id)
    try:
        ...  # log lines carry session_id
    finally:
        clear_session_id()
"""

import structlog
from uuid6 import uuid7

SESSION_ID_KEY = "session_id"


def generate_session_id() -> str:
    """Generate a new time-ordered session id (UUIDv7).

    Returns:
        A new UUIDv7 string.
    """
    return str(uuid7())


def get_session_id() -> str:
    """Get the session id bound in the current context.

    Returns:
        The current session id or empty string if none is bound.
    """
    return str(structlog.contextvars.get_contextvars().get(SESSION_ID_KEY, ""))


def bind_session_id(session_id: str) -> None:
    """Bind a session id into the logging context.

    Args:
        session_id: The session id to bind.
    """
    structlog.contextvars.bind_contextvars(**{SESSION_ID_KEY: session_id})


def clear_session_id() -> None:
    """Remove the session id from the logging context."""
    structlog.contextvars.unbind_contextvars(SESSION_ID_KEY)
