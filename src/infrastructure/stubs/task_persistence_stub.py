"""In-memory task persistence stub.

WARNING: This stub is for development/testing only.
"""

from __future__ import annotations

from collections.abc import Sequence

from src.application.ports.task_persistence import TaskPersistenceProtocol
from src.domain.models.configurable_task import ConfigurableTask


class TaskPersistenceStub(TaskPersistenceProtocol):
    """Records saved tasks per process.

    Attributes:
        saved: process_id -> tasks saved for it, in order.
        save_calls: Number of save_tasks calls made.
        fail_with: Exception raised by save_tasks, if set.
    """

    def __init__(self, fail_with: Exception | None = None) -> None:
        self.saved: dict[str, list[ConfigurableTask]] = {}
        self.save_calls = 0
        self.fail_with = fail_with

    async def save_tasks(self, process_id: str, tasks: Sequence[ConfigurableTask]) -> None:
        """Store tasks for a process."""
        self.save_calls += 1
        if self.fail_with is not None:
            raise self.fail_with
        self.saved.setdefault(process_id, []).extend(tasks)

    def clear(self) -> None:
        """Clear saved tasks and counters (for testing)."""
        self.saved.clear()
        self.save_calls = 0
        self.fail_with = None
