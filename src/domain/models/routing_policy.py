"""Routing policy value objects.

Building blocks shared by classification rules, task templates, the
default policy table and resolved routings:

- Assignee variants: Role, Specific, Manager, Employee
- Approver variants: Role, Specific, Manager, Skip-Level
- Timing (offset type, magnitude, priority), escalation, auto-approval,
  SLA and notification settings

Each assignee/approver variant carries only the fields that are valid for
its type, and exposes its type as a closed string enumeration so consumers
can switch on it exhaustively.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import ClassVar, TypeAlias

from src.domain.errors.rule import InvalidRuleError


class Priority(StrEnum):
    """Task priority levels."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"


class OffsetType(StrEnum):
    """Direction of a due-date offset relative to the anchor date.

    The stored days offset is always a magnitude; the sign is carried here.
    """

    BEFORE_START = "before-start"
    ON_START = "on-start"
    AFTER_START = "after-start"


class AssigneeType(StrEnum):
    """Who carries out a task."""

    ROLE = "Role"
    SPECIFIC = "Specific"
    MANAGER = "Manager"
    EMPLOYEE = "Employee"


class ApproverType(StrEnum):
    """Who approves a task."""

    ROLE = "Role"
    SPECIFIC = "Specific"
    MANAGER = "Manager"
    SKIP_LEVEL = "Skip-Level"


@dataclass(frozen=True)
class PersonIdentity:
    """A directory person (user id, display name, email)."""

    person_id: int | None = None
    name: str | None = None
    email: str | None = None

    @property
    def is_empty(self) -> bool:
        """True when no identifying field is set."""
        return self.person_id is None and not self.name and not self.email


# -----------------------------------------------------------------------------
# Assignee variants
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class RoleAssignee:
    """Task assigned to a team or role (e.g. "IT Team")."""

    type: ClassVar[AssigneeType] = AssigneeType.ROLE

    role: str | None


@dataclass(frozen=True)
class SpecificAssignee:
    """Task assigned to a named person."""

    type: ClassVar[AssigneeType] = AssigneeType.SPECIFIC

    person: PersonIdentity


@dataclass(frozen=True)
class ManagerAssignee:
    """Task assigned to the requester's manager.

    On a rule the person is always None. After materialization it holds the
    supplied manager identity, or stays None when no manager was known
    (unassigned pending manager lookup).
    """

    type: ClassVar[AssigneeType] = AssigneeType.MANAGER

    person: PersonIdentity | None = None


@dataclass(frozen=True)
class EmployeeAssignee:
    """Task owned by the employee the process is about.

    Resolution is deferred to the owning process, so there is no identity.
    """

    type: ClassVar[AssigneeType] = AssigneeType.EMPLOYEE


Assignee: TypeAlias = RoleAssignee | SpecificAssignee | ManagerAssignee | EmployeeAssignee


# -----------------------------------------------------------------------------
# Approver variants
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class RoleApprover:
    """Approval by a role (e.g. "IT Lead")."""

    type: ClassVar[ApproverType] = ApproverType.ROLE

    role: str | None


@dataclass(frozen=True)
class SpecificApprover:
    """Approval by a named person."""

    type: ClassVar[ApproverType] = ApproverType.SPECIFIC

    person: PersonIdentity


@dataclass(frozen=True)
class ManagerApprover:
    """Approval by the requester's manager (identity filled at materialization)."""

    type: ClassVar[ApproverType] = ApproverType.MANAGER

    person: PersonIdentity | None = None


@dataclass(frozen=True)
class SkipLevelApprover:
    """Approval by the manager's manager.

    The engine does not look up the org hierarchy; this variant is passed
    through unresolved and downstream consumers must resolve it.
    """

    type: ClassVar[ApproverType] = ApproverType.SKIP_LEVEL


Approver: TypeAlias = RoleApprover | SpecificApprover | ManagerApprover | SkipLevelApprover


# -----------------------------------------------------------------------------
# Policy records
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class TimingPolicy:
    """When a task is due and how urgent it is.

    Attributes:
        offset_type: Before, on, or after the anchor date.
        days_offset: Non-negative number of days from the anchor.
        priority: Task priority.
    """

    offset_type: OffsetType = OffsetType.ON_START
    days_offset: int = 0
    priority: Priority = Priority.MEDIUM

    def __post_init__(self) -> None:
        """Validate timing values."""
        if self.days_offset < 0:
            raise InvalidRuleError(
                f"days_offset must be a non-negative magnitude, got {self.days_offset}"
            )


@dataclass(frozen=True)
class EscalationPolicy:
    """Escalation path when the primary approver does not respond.

    Carried through for a downstream workflow engine; no timers run here.
    """

    enabled: bool = False
    after_days: int | None = None
    escalate_to: RoleApprover | SpecificApprover | SkipLevelApprover | None = None


@dataclass(frozen=True)
class AutoApprovePolicy:
    """Declared auto-approval thresholds.

    Evaluated by the caller, never by the engine.
    """

    enabled: bool = False
    max_cost: float | None = None
    max_days: int | None = None


@dataclass(frozen=True)
class SlaPolicy:
    """Target completion window for tasks of a classification."""

    enabled: bool = False
    target_days: int | None = None
    warning_days: int | None = None


@dataclass(frozen=True)
class NotificationSettings:
    """Which notifications fire for a task.

    A None flag means the policy did not specify it, so a lower precedence
    layer (the task template) decides.
    """

    send_email: bool | None = True
    send_teams: bool | None = False
    notify_on_assignment: bool | None = True
    notify_on_completion: bool | None = True
    notify_manager_on_completion: bool | None = False
    teams_channel_webhook: str | None = None

    def overlay(self, baseline: NotificationSettings) -> NotificationSettings:
        """Return these settings with unspecified flags taken from baseline."""
        return NotificationSettings(
            send_email=_first_set(self.send_email, baseline.send_email),
            send_teams=_first_set(self.send_teams, baseline.send_teams),
            notify_on_assignment=_first_set(
                self.notify_on_assignment, baseline.notify_on_assignment
            ),
            notify_on_completion=_first_set(
                self.notify_on_completion, baseline.notify_on_completion
            ),
            notify_manager_on_completion=_first_set(
                self.notify_manager_on_completion,
                baseline.notify_manager_on_completion,
            ),
            teams_channel_webhook=self.teams_channel_webhook
            or baseline.teams_channel_webhook,
        )


def _first_set(value: bool | None, fallback: bool | None) -> bool | None:
    return fallback if value is None else value
