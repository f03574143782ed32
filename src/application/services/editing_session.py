"""Editing session.

Wraps the working configuration set of one checklist while a human
reviews it. The session is single-writer and ends exactly once, by
confirm() (selected tasks are handed to task persistence) or cancel()
(everything is discarded). A closed session refuses further use.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date
from enum import StrEnum

from src.application.ports.task_persistence import TaskPersistenceProtocol
from src.application.services.base import LoggingMixin
from src.domain.entities.working_configuration_set import WorkingConfigurationSet
from src.domain.errors.task import EditingSessionClosedError
from src.domain.models.configurable_task import ConfigurableTask, TaskPatch
from src.infrastructure.observability.session_context import clear_session_id


class SessionState(StrEnum):
    """Lifecycle state of an editing session."""

    OPEN = "open"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class EditingSession(LoggingMixin):
    """One human's review of a generated checklist.

    Attributes:
        session_id: Id bound into the logging context for this session.
        process_id: The process record the tasks belong to.
    """

    def __init__(
        self,
        session_id: str,
        process_id: str,
        working_set: WorkingConfigurationSet,
        persistence: TaskPersistenceProtocol,
    ) -> None:
        self.session_id = session_id
        self.process_id = process_id
        self._working_set = working_set
        self._persistence = persistence
        self._state = SessionState.OPEN
        self._init_logger(component="editing_session")

    @property
    def state(self) -> SessionState:
        """Current lifecycle state."""
        return self._state

    @property
    def is_open(self) -> bool:
        """True until the session is confirmed or cancelled."""
        return self._state == SessionState.OPEN

    @property
    def tasks(self) -> tuple[ConfigurableTask, ...]:
        """All tasks in display order (readable after closing)."""
        return self._working_set.tasks

    @property
    def working_set(self) -> WorkingConfigurationSet:
        """The underlying working configuration set.

        Raises:
            EditingSessionClosedError: If the session is closed.
        """
        self._ensure_open()
        return self._working_set

    def update_one(self, task_id: str, patch: TaskPatch) -> bool:
        """Edit one task; unknown ids are ignored."""
        self._ensure_open()
        return self._working_set.update_one(task_id, patch)

    def update_many(self, task_ids: Iterable[str], patch: TaskPatch) -> int:
        """Apply the same edit to several tasks; unknown ids are ignored."""
        self._ensure_open()
        updated = self._working_set.update_many(task_ids, patch)
        self._log.debug("bulk_update_applied", updated=updated)
        return updated

    def recompute_due_dates(self, anchor_date: date | None = None) -> None:
        """Recompute due dates, optionally against a new anchor date."""
        self._ensure_open()
        self._working_set.recompute_due_dates(anchor_date)

    def auto_number(self) -> list[str]:
        """Assign codes to tasks that have none."""
        self._ensure_open()
        return self._working_set.auto_number()

    async def confirm(self) -> list[ConfigurableTask]:
        """Hand the selected tasks to task persistence and close the session.

        If persistence fails the error propagates and the session stays
        open, so the confirmation can be retried.

        Returns:
            The tasks that were persisted, in display order.

        Raises:
            EditingSessionClosedError: If the session is already closed.
        """
        self._ensure_open()
        selected = self._working_set.selected()
        await self._persistence.save_tasks(self.process_id, selected)
        self._close(SessionState.CONFIRMED)
        self._log.info(
            "editing_session_confirmed",
            process_id=self.process_id,
            persisted=len(selected),
            configured=self._working_set.configured_count,
        )
        clear_session_id()
        return selected

    def cancel(self) -> None:
        """Discard the working set and close the session.

        Raises:
            EditingSessionClosedError: If the session is already closed.
        """
        self._ensure_open()
        self._close(SessionState.CANCELLED)
        self._log.info(
            "editing_session_cancelled",
            process_id=self.process_id,
            discarded=len(self._working_set),
        )
        self._working_set = WorkingConfigurationSet()
        clear_session_id()

    def _close(self, state: SessionState) -> None:
        self._state = state

    def _ensure_open(self) -> None:
        if self._state != SessionState.OPEN:
            raise EditingSessionClosedError(self.session_id, self._state.value)
