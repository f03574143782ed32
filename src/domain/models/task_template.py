"""Task library template domain model.

A TaskLibraryTemplate is a reusable, classification-tagged task blueprint
independent of any specific person's process.

The routing fields (default_assignee, timing, requires_approval,
default_approver) are informational only. They are stored and round-tripped
with the library, but materialization never reads them: the resolved
routing is always complete, whether it comes from an active classification
rule or from the default policy. Only the notification flags are used, as
the fallback for flags the routing leaves unset.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

from src.domain.models.classification import (
    ProcessType,
    TaskCategory,
    TaskClassification,
    process_types_match,
)
from src.domain.models.routing_policy import (
    Approver,
    Assignee,
    NotificationSettings,
    TimingPolicy,
)


class SourceType(StrEnum):
    """What a task was created from."""

    DOCUMENT = "document"
    SYSTEM = "system"
    ASSET = "asset"
    TRAINING = "training"
    CUSTOM = "custom"


@dataclass(frozen=True)
class SourceReference:
    """Reference to the selected item a task was created from."""

    source_type: SourceType = SourceType.CUSTOM
    source_id: int | str | None = None


@dataclass(frozen=True)
class TaskLibraryTemplate:
    """Classification-tagged task blueprint.

    Attributes:
        classification: Classification that drives routing for the task.
        title: Task title.
        id: Store identifier, None for ad-hoc templates.
        task_code: Library code such as ``SYS-001``.
        sequence_number: Numeric part of the task code.
        description: Short description.
        instructions: Detailed guidance for the assignee.
        source: Item the task is created from.
        process_types: Processes the template applies to (ALL = every one).
        departments: Departments the template is limited to (empty = all).
        job_titles: Job titles the template is limited to (empty = all).
        default_assignee: Informational default assignee, None when unset.
        timing: Informational default timing, None when unset.
        requires_approval: Informational approval requirement.
        default_approver: Informational approver.
        notifications: Fallback for notification flags the routing leaves unset.
        send_reminder: Whether a reminder is sent before the due date.
        reminder_days_before: Days before the due date for the reminder.
        depends_on_task_codes: Library codes that must complete first.
        blocked_until_complete: Task stays blocked until its dependencies finish.
        estimated_hours: Expected effort.
        is_active: Inactive templates are never offered.
        is_mandatory: Mandatory templates cannot be dropped from a checklist.
        sort_order: Display ordering.
        tags: Free-form search tags.
    """

    classification: TaskClassification
    title: str
    id: int | None = None
    task_code: str | None = None
    sequence_number: int | None = None
    description: str = ""
    instructions: str = ""
    source: SourceReference = field(default_factory=SourceReference)
    process_types: frozenset[ProcessType] = field(
        default_factory=lambda: frozenset({ProcessType.ALL})
    )
    departments: frozenset[str] = field(default_factory=frozenset)
    job_titles: frozenset[str] = field(default_factory=frozenset)
    default_assignee: Assignee | None = None
    timing: TimingPolicy | None = None
    requires_approval: bool = False
    default_approver: Approver | None = None
    notifications: NotificationSettings = field(default_factory=NotificationSettings)
    send_reminder: bool = True
    reminder_days_before: int = 1
    depends_on_task_codes: tuple[str, ...] = ()
    blocked_until_complete: bool = False
    estimated_hours: float | None = None
    is_active: bool = True
    is_mandatory: bool = False
    sort_order: int = 0
    tags: tuple[str, ...] = ()

    @property
    def category(self) -> TaskCategory:
        """Editing category derived from the classification."""
        return TaskCategory.for_classification(self.classification)

    def applies_to(
        self,
        process_type: ProcessType,
        department: str | None = None,
        job_title: str | None = None,
    ) -> bool:
        """Check whether the template belongs in a process checklist.

        The process type must be listed (or ALL). A department or job title
        list only excludes the template when a value is supplied and not
        listed.
        """
        if not self.process_types or not process_types_match(
            self.process_types, process_type
        ):
            return False
        if self.departments and department and department not in self.departments:
            return False
        if self.job_titles and job_title and job_title not in self.job_titles:
            return False
        return True
