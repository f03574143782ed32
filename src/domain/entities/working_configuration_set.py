"""Working configuration set entity.

The in-memory, ordered collection of ConfigurableTask that one editing
session owns before confirmation. It has a single writer, so no locking
is done.

Mutation rules:
- update_one / update_many replace only the fields set on the patch and
  mark the touched tasks configured
- unknown ids are ignored; both operations never raise
- applying the same patch twice gives the same state as applying it once
- when an anchor date is known and the patch changes the offset, the due
  date is recomputed
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date

from src.domain.models.classification import TASK_CODE_PATTERN
from src.domain.models.configurable_task import ConfigurableTask, TaskPatch
from src.domain.services.due_date import compute_due_date


class WorkingConfigurationSet:
    """Editable collection of configurable tasks.

    Attributes:
        anchor_date: Date due dates are computed from, None if unknown.
    """

    def __init__(
        self,
        tasks: Iterable[ConfigurableTask] = (),
        anchor_date: date | None = None,
    ) -> None:
        """Initialize the set.

        Args:
            tasks: Initial tasks, in display order. Later duplicates of an
                id replace earlier ones in place.
            anchor_date: Date due dates are computed from.
        """
        self._tasks: dict[str, ConfigurableTask] = {}
        for task in tasks:
            self._tasks[task.id] = task
        self.anchor_date = anchor_date

    def __len__(self) -> int:
        return len(self._tasks)

    def __contains__(self, task_id: object) -> bool:
        return task_id in self._tasks

    @property
    def tasks(self) -> tuple[ConfigurableTask, ...]:
        """All tasks in display order."""
        return tuple(self._tasks.values())

    @property
    def selected_count(self) -> int:
        """Number of selected tasks."""
        return sum(1 for task in self._tasks.values() if task.is_selected)

    @property
    def configured_count(self) -> int:
        """Number of tasks that were deliberately routed."""
        return sum(1 for task in self._tasks.values() if task.is_configured)

    def get(self, task_id: str) -> ConfigurableTask | None:
        """Return the task with this id, or None."""
        return self._tasks.get(task_id)

    def selected(self) -> list[ConfigurableTask]:
        """Selected tasks in display order."""
        return [task for task in self._tasks.values() if task.is_selected]

    def add(self, task: ConfigurableTask) -> None:
        """Append a task (or replace the task with the same id)."""
        self._tasks[task.id] = task

    def update_one(self, task_id: str, patch: TaskPatch) -> bool:
        """Apply a patch to one task.

        Args:
            task_id: Id of the task to update.
            patch: Fields to replace.

        Returns:
            True if the task exists and was updated, False otherwise.
        """
        task = self._tasks.get(task_id)
        if task is None:
            return False
        self._tasks[task_id] = self._apply(task, patch)
        return True

    def update_many(self, task_ids: Iterable[str], patch: TaskPatch) -> int:
        """Apply the same patch to every listed task.

        Args:
            task_ids: Ids of the tasks to update; unknown ids are skipped.
            patch: Fields to replace.

        Returns:
            Number of tasks updated.
        """
        updated = 0
        for task_id in dict.fromkeys(task_ids):
            if self.update_one(task_id, patch):
                updated += 1
        return updated

    def recompute_due_dates(self, anchor_date: date | None = None) -> None:
        """Recompute every due date, optionally against a new anchor."""
        if anchor_date is not None:
            self.anchor_date = anchor_date
        if self.anchor_date is None:
            return
        for task_id, task in self._tasks.items():
            self._tasks[task_id] = task.with_due_date(
                compute_due_date(self.anchor_date, task.offset_type, task.days_offset)
            )

    def auto_number(self) -> list[str]:
        """Give every task without a code the next ``PREFIX-NNN`` code.

        Numbering continues after the highest code already present for the
        prefix. The prefix comes from the task's category.

        Returns:
            The codes that were assigned, in display order.
        """
        highest: dict[str, int] = {}
        for task in self._tasks.values():
            match = TASK_CODE_PATTERN.match(task.task_code or "")
            if match:
                prefix, number = match.group(1), int(match.group(2))
                highest[prefix] = max(highest.get(prefix, 0), number)

        assigned: list[str] = []
        for task_id, task in self._tasks.items():
            if task.task_code:
                continue
            prefix = task.category.code_prefix
            highest[prefix] = highest.get(prefix, 0) + 1
            code = f"{prefix}-{highest[prefix]:03d}"
            self._tasks[task_id] = task.with_task_code(code)
            assigned.append(code)
        return assigned

    def _apply(self, task: ConfigurableTask, patch: TaskPatch) -> ConfigurableTask:
        updated = patch.apply_to(task)
        if self.anchor_date is not None and patch.touches_timing:
            updated = updated.with_due_date(
                compute_due_date(self.anchor_date, updated.offset_type, updated.days_offset)
            )
        return updated
