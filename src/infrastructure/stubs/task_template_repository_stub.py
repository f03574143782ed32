"""In-memory task template repository stub.

WARNING: This stub is for development/testing only.
"""

from __future__ import annotations

from collections.abc import Iterable

from src.application.ports.task_template_repository import (
    TaskTemplateRepositoryProtocol,
    TemplateFilter,
)
from src.domain.errors.rule import RuleStoreUnavailableError
from src.domain.models.task_template import TaskLibraryTemplate


class TaskTemplateRepositoryStub(TaskTemplateRepositoryProtocol):
    """In-memory task library.

    Attributes:
        force_unavailable: When True every read raises RuleStoreUnavailableError.
        list_calls: Number of list_templates calls made.
    """

    def __init__(
        self,
        templates: Iterable[TaskLibraryTemplate] = (),
        *,
        force_unavailable: bool = False,
    ) -> None:
        self._templates: list[TaskLibraryTemplate] = list(templates)
        self.force_unavailable = force_unavailable
        self.list_calls = 0

    def add(self, template: TaskLibraryTemplate) -> None:
        """Add a template to the library."""
        self._templates.append(template)

    async def list_templates(
        self, template_filter: TemplateFilter | None = None
    ) -> list[TaskLibraryTemplate]:
        """List templates passing the filter, ordered by sort order."""
        self.list_calls += 1
        if self.force_unavailable:
            raise RuleStoreUnavailableError("in-memory stub", "forced unavailable")
        templates = [
            t for t in self._templates if template_filter is None or template_filter.matches(t)
        ]
        return sorted(templates, key=lambda t: t.sort_order)

    async def get_template(self, template_id: int) -> TaskLibraryTemplate | None:
        """Retrieve a template by id."""
        return next((t for t in self._templates if t.id == template_id), None)

    def clear(self) -> None:
        """Clear the library and counters (for testing)."""
        self._templates.clear()
        self.list_calls = 0
        self.force_unavailable = False
