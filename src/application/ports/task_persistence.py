"""Task persistence port.

Accepts confirmed, fully materialized tasks for durable storage.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from src.domain.models.configurable_task import ConfigurableTask


class TaskPersistenceProtocol(Protocol):
    """Protocol for storing confirmed checklist tasks."""

    async def save_tasks(self, process_id: str, tasks: Sequence[ConfigurableTask]) -> None:
        """Store the confirmed tasks of one process.

        Args:
            process_id: The onboarding/mover/offboarding record the tasks belong to.
            tasks: Selected tasks in display order.
        """
        ...


__all__ = ["TaskPersistenceProtocol"]
