"""Task template repository port.

Read contract for the task library consumed by the checklist builder.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from src.domain.models.classification import ProcessType
from src.domain.models.task_template import TaskLibraryTemplate


@dataclass(frozen=True)
class TemplateFilter:
    """Filter for listing templates.

    A template listing ProcessType.ALL passes any process type filter.
    """

    process_type: ProcessType | None = None
    is_active: bool | None = True

    def matches(self, template: TaskLibraryTemplate) -> bool:
        """Check whether a template passes this filter."""
        if self.is_active is not None and template.is_active != self.is_active:
            return False
        if self.process_type is None:
            return True
        return template.applies_to(self.process_type)


class TaskTemplateRepositoryProtocol(Protocol):
    """Protocol for task library reads."""

    async def list_templates(
        self, template_filter: TemplateFilter | None = None
    ) -> list[TaskLibraryTemplate]:
        """List templates passing the filter, ordered by sort order.

        Raises:
            RuleStoreUnavailableError: If the store cannot be read.
        """
        ...

    async def get_template(self, template_id: int) -> TaskLibraryTemplate | None:
        """Retrieve a template by id, None if absent."""
        ...


__all__ = ["TaskTemplateRepositoryProtocol", "TemplateFilter"]
