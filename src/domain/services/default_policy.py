"""Default policy table.

Static per-classification fallback routing used whenever no active
classification rule matches. Every classification in the taxonomy must
have an entry; completeness is checked once at startup with
validate_default_policy() so a gap surfaces as a configuration error,
never at resolution time.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

from src.domain.errors.classification import DefaultPolicyIncompleteError
from src.domain.models.classification import TaskClassification
from src.domain.models.routing_policy import (
    Approver,
    Assignee,
    ManagerAssignee,
    NotificationSettings,
    OffsetType,
    Priority,
    RoleApprover,
    RoleAssignee,
    TimingPolicy,
)

# The fallback only decides the delivery channels; the remaining flags are
# left to the task template.
DEFAULT_POLICY_NOTIFICATIONS = NotificationSettings(
    send_email=True,
    send_teams=False,
    notify_on_assignment=None,
    notify_on_completion=None,
    notify_manager_on_completion=None,
)


@dataclass(frozen=True)
class DefaultPolicyEntry:
    """Partial routing used when no rule applies.

    Attributes:
        assignee: Fallback assignee.
        timing: Fallback offset and priority.
        requires_approval: Whether approval is required.
        approver: Fallback approver when approval is required.
        notifications: Fallback notification flags.
    """

    assignee: Assignee
    timing: TimingPolicy
    requires_approval: bool = False
    approver: Approver | None = None
    notifications: NotificationSettings = field(
        default_factory=lambda: DEFAULT_POLICY_NOTIFICATIONS
    )


def _entry(
    role: str | None,
    offset_type: OffsetType,
    days_offset: int,
    priority: Priority,
    approver_role: str | None = None,
    assignee: Assignee | None = None,
) -> DefaultPolicyEntry:
    return DefaultPolicyEntry(
        assignee=assignee or RoleAssignee(role=role),
        timing=TimingPolicy(
            offset_type=offset_type, days_offset=days_offset, priority=priority
        ),
        requires_approval=approver_role is not None,
        approver=RoleApprover(role=approver_role) if approver_role else None,
    )


DEFAULT_POLICY_TABLE: Mapping[TaskClassification, DefaultPolicyEntry] = {
    TaskClassification.DOC: _entry(
        "HR Team", OffsetType.BEFORE_START, 5, Priority.HIGH
    ),
    TaskClassification.SYS: _entry(
        "IT Team", OffsetType.BEFORE_START, 3, Priority.HIGH, approver_role="IT Lead"
    ),
    TaskClassification.HRD: _entry(
        "IT Team", OffsetType.BEFORE_START, 5, Priority.MEDIUM, approver_role="IT Admin"
    ),
    TaskClassification.TRN: _entry(
        "Training", OffsetType.AFTER_START, 7, Priority.MEDIUM
    ),
    TaskClassification.ORI: _entry(
        None, OffsetType.ON_START, 0, Priority.HIGH, assignee=ManagerAssignee()
    ),
    TaskClassification.CMP: _entry(
        "HR Team", OffsetType.BEFORE_START, 3, Priority.HIGH, approver_role="HR Manager"
    ),
    TaskClassification.FAC: _entry(
        "Facilities", OffsetType.BEFORE_START, 2, Priority.MEDIUM
    ),
    TaskClassification.SEC: _entry(
        "Security",
        OffsetType.BEFORE_START,
        1,
        Priority.HIGH,
        approver_role="Security Manager",
    ),
    TaskClassification.FIN: _entry(
        "Finance",
        OffsetType.BEFORE_START,
        5,
        Priority.HIGH,
        approver_role="Finance Manager",
    ),
    TaskClassification.COM: _entry(
        "IT Team", OffsetType.BEFORE_START, 2, Priority.MEDIUM
    ),
}


def validate_default_policy(
    table: Mapping[TaskClassification, DefaultPolicyEntry] = DEFAULT_POLICY_TABLE,
) -> None:
    """Verify every classification has a default policy entry.

    Args:
        table: The table to check.

    Raises:
        DefaultPolicyIncompleteError: If any classification is missing.
    """
    missing = [c.value for c in TaskClassification if c not in table]
    if missing:
        raise DefaultPolicyIncompleteError(missing)


def default_policy_for(
    classification: TaskClassification,
    table: Mapping[TaskClassification, DefaultPolicyEntry] = DEFAULT_POLICY_TABLE,
) -> DefaultPolicyEntry:
    """Look up the fallback entry for a classification.

    Raises:
        DefaultPolicyIncompleteError: If the entry is missing, which means
            startup validation was skipped.
    """
    try:
        return table[classification]
    except KeyError:
        raise DefaultPolicyIncompleteError([classification.value]) from None
