"""Configurable task domain model.

A ConfigurableTask is the materialized, editable unit produced by the task
template merger. It is mutated only through TaskPatch (single or bulk
edits in the working configuration set) and is either discarded on cancel
or handed to task persistence on confirmation.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date
from typing import Any

from src.domain.models.classification import TaskCategory, TaskClassification
from src.domain.models.patch import UNSET, Unset, set_fields
from src.domain.models.resolved_routing import _person_fields, _variant_fields
from src.domain.models.routing_policy import (
    Approver,
    Assignee,
    AutoApprovePolicy,
    EscalationPolicy,
    NotificationSettings,
    OffsetType,
    Priority,
    SlaPolicy,
)
from src.domain.models.task_template import SourceReference

# Fields whose change invalidates a computed due date
TIMING_FIELDS: frozenset[str] = frozenset({"offset_type", "days_offset"})


@dataclass(frozen=True, eq=True)
class ConfigurableTask:
    """A fully configured, editable task.

    Attributes:
        id: Task identity within the editing session.
        title: Task title.
        classification: Classification the routing was resolved for.
        category: Editing category.
        source: Item the task was created from.
        assignee: Who carries out the task.
        offset_type: Direction of the due-date offset.
        days_offset: Magnitude of the due-date offset (sign ignored).
        priority: Task priority.
        task_code: Library or auto-generated code (``HRD-002``).
        due_date: Computed due date, None until an anchor is known.
        requires_approval: Whether approval is required.
        approver: Approver variant (None when no approval).
        escalation: Escalation policy carried from the routing.
        auto_approve: Auto-approval thresholds carried from the routing.
        sla: SLA policy carried from the routing.
        notifications: Resolved notification flags.
        send_reminder: Whether a reminder is sent before the due date.
        reminder_days_before: Days before the due date for the reminder.
        estimated_hours: Expected effort.
        instructions: Free-text guidance for the assignee.
        is_mandatory: Whether the task came from a mandatory template.
        is_selected: Whether the task is kept on confirmation.
        is_configured: True once a rule or a human has deliberately routed it.
        depends_on_task_ids: Ids of tasks (same session) that must complete first.
        blocked_until_complete: Task stays blocked until dependencies finish.
        rule_id: Rule that produced the routing, None for the default policy.
    """

    id: str
    title: str
    classification: TaskClassification
    category: TaskCategory
    source: SourceReference
    assignee: Assignee
    offset_type: OffsetType
    days_offset: int
    priority: Priority
    task_code: str | None = None
    due_date: date | None = None
    requires_approval: bool = False
    approver: Approver | None = None
    escalation: EscalationPolicy | None = None
    auto_approve: AutoApprovePolicy | None = None
    sla: SlaPolicy | None = None
    notifications: NotificationSettings = field(default_factory=NotificationSettings)
    send_reminder: bool = True
    reminder_days_before: int = 1
    estimated_hours: float | None = None
    instructions: str = ""
    is_mandatory: bool = False
    is_selected: bool = True
    is_configured: bool = False
    depends_on_task_ids: tuple[str, ...] = ()
    blocked_until_complete: bool = False
    rule_id: int | None = None

    @property
    def has_dependencies(self) -> bool:
        """True when the task waits on other tasks."""
        return bool(self.depends_on_task_ids)

    def with_due_date(self, due_date: date | None) -> ConfigurableTask:
        """Create a copy with a new due date."""
        return replace(self, due_date=due_date)

    def with_task_code(self, task_code: str) -> ConfigurableTask:
        """Create a copy with a task code."""
        return replace(self, task_code=task_code)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a flat dictionary for the presentation layer.

        Returns:
            Dictionary with enumerations as their string values and the
            due date in ISO 8601 format.
        """
        assignee_role, assignee_person = _variant_fields(self.assignee)
        approver_role, approver_person = (
            _variant_fields(self.approver) if self.approver else (None, None)
        )
        return {
            "id": self.id,
            "task_code": self.task_code,
            "title": self.title,
            "classification": self.classification.value,
            "category": self.category.value,
            "source_type": self.source.source_type.value,
            "source_id": self.source.source_id,
            "assignee_type": self.assignee.type.value,
            "assignee_role": assignee_role,
            **_person_fields("assignee", assignee_person),
            "requires_approval": self.requires_approval,
            "approver_type": self.approver.type.value if self.approver else None,
            "approver_role": approver_role,
            **_person_fields("approver", approver_person),
            "offset_type": self.offset_type.value,
            "days_offset": self.days_offset,
            "due_date": self.due_date.isoformat() if self.due_date else None,
            "priority": self.priority.value,
            "send_email_notification": self.notifications.send_email,
            "send_teams_notification": self.notifications.send_teams,
            "notify_on_assignment": self.notifications.notify_on_assignment,
            "notify_on_completion": self.notifications.notify_on_completion,
            "notify_manager_on_completion": self.notifications.notify_manager_on_completion,
            "send_reminder": self.send_reminder,
            "reminder_days_before": self.reminder_days_before,
            "estimated_hours": self.estimated_hours,
            "instructions": self.instructions,
            "is_mandatory": self.is_mandatory,
            "is_selected": self.is_selected,
            "is_configured": self.is_configured,
            "depends_on_task_ids": list(self.depends_on_task_ids),
            "blocked_until_complete": self.blocked_until_complete,
            "rule_id": self.rule_id,
        }


@dataclass(frozen=True)
class TaskPatch:
    """Explicit partial update for a configurable task.

    Every field defaults to UNSET (leave unchanged); an explicit None
    clears a nullable field, for example ``TaskPatch(approver=None)``.
    """

    title: str | Unset = UNSET
    assignee: Assignee | Unset = UNSET
    requires_approval: bool | Unset = UNSET
    approver: Approver | None | Unset = UNSET
    offset_type: OffsetType | Unset = UNSET
    days_offset: int | Unset = UNSET
    priority: Priority | Unset = UNSET
    notifications: NotificationSettings | Unset = UNSET
    send_reminder: bool | Unset = UNSET
    reminder_days_before: int | Unset = UNSET
    estimated_hours: float | None | Unset = UNSET
    instructions: str | Unset = UNSET
    is_selected: bool | Unset = UNSET
    depends_on_task_ids: tuple[str, ...] | Unset = UNSET
    blocked_until_complete: bool | Unset = UNSET

    @property
    def is_empty(self) -> bool:
        """True when the patch changes nothing."""
        return not set_fields(self)

    @property
    def touches_timing(self) -> bool:
        """True when the patch changes the due-date offset."""
        return bool(TIMING_FIELDS & set_fields(self).keys())

    def apply_to(self, task: ConfigurableTask) -> ConfigurableTask:
        """Apply the set fields to a task and mark it configured.

        A task that no longer requires approval carries no approver.

        Args:
            task: The task to update.

        Returns:
            A new task with only the set fields replaced.
        """
        updated = replace(task, **set_fields(self), is_configured=True)
        if not updated.requires_approval and updated.approver is not None:
            updated = replace(updated, approver=None)
        return updated
