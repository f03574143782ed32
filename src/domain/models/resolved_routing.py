"""Resolved routing domain model.

A ResolvedRouting is the engine's output for one classification in one
context: assignee, approval (including escalation), timing, notification
flags, and provenance. It is always complete; an unassigned manager
task is a valid routing, not a failure.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from src.domain.models.classification import TaskClassification
from src.domain.models.routing_policy import (
    Approver,
    Assignee,
    AutoApprovePolicy,
    EscalationPolicy,
    ManagerApprover,
    ManagerAssignee,
    NotificationSettings,
    OffsetType,
    PersonIdentity,
    Priority,
    RoleApprover,
    RoleAssignee,
    SlaPolicy,
    SpecificApprover,
    SpecificAssignee,
)


class RoutingSource(StrEnum):
    """Where a routing came from."""

    RULE = "rule"
    DEFAULT_POLICY = "default_policy"


@dataclass(frozen=True, eq=True)
class ResolvedRouting:
    """Concrete routing for one classification.

    Attributes:
        classification: The classification that was resolved.
        source: RULE when an active rule was used, DEFAULT_POLICY otherwise.
        rule_id: Id of the rule used, None for the default policy.
        assignee: Resolved assignee variant.
        requires_approval: Whether approval is required.
        approver: Resolved approver variant (None when no approval).
        escalation: Escalation policy carried from the rule.
        auto_approve: Auto-approval thresholds carried from the rule.
        offset_type: Direction of the due-date offset.
        days_offset: Magnitude of the due-date offset.
        priority: Task priority.
        sla: SLA policy carried from the rule.
        notifications: Notification flags (None = not specified by policy).
    """

    classification: TaskClassification
    source: RoutingSource
    assignee: Assignee
    offset_type: OffsetType
    days_offset: int
    priority: Priority
    requires_approval: bool = False
    approver: Approver | None = None
    escalation: EscalationPolicy | None = None
    auto_approve: AutoApprovePolicy | None = None
    sla: SlaPolicy | None = None
    notifications: NotificationSettings = field(default_factory=NotificationSettings)
    rule_id: int | None = None

    @property
    def is_from_rule(self) -> bool:
        """True when an administrator-defined rule produced this routing."""
        return self.source == RoutingSource.RULE

    @property
    def is_assigned(self) -> bool:
        """True when the assignee names a role or a person."""
        assignee = self.assignee
        if isinstance(assignee, RoleAssignee):
            return bool(assignee.role)
        if isinstance(assignee, SpecificAssignee):
            return not assignee.person.is_empty
        if isinstance(assignee, ManagerAssignee):
            return assignee.person is not None and not assignee.person.is_empty
        return False

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a flat dictionary with closed string enumerations.

        Returns:
            Dictionary suitable for JSON serialization.
        """
        assignee_role, assignee_person = _variant_fields(self.assignee)
        data: dict[str, Any] = {
            "classification": self.classification.value,
            "source": self.source.value,
            "rule_id": self.rule_id,
            "assignee_type": self.assignee.type.value,
            "assignee_role": assignee_role,
            **_person_fields("assignee", assignee_person),
            "requires_approval": self.requires_approval,
            "approver_type": self.approver.type.value if self.approver else None,
            "offset_type": self.offset_type.value,
            "days_offset": self.days_offset,
            "priority": self.priority.value,
            "send_email_notification": self.notifications.send_email,
            "send_teams_notification": self.notifications.send_teams,
            "notify_on_assignment": self.notifications.notify_on_assignment,
            "notify_on_completion": self.notifications.notify_on_completion,
            "notify_manager_on_completion": self.notifications.notify_manager_on_completion,
        }
        approver_role, approver_person = (
            _variant_fields(self.approver) if self.approver else (None, None)
        )
        data["approver_role"] = approver_role
        data.update(_person_fields("approver", approver_person))
        if self.escalation is not None:
            data["escalation_enabled"] = self.escalation.enabled
            data["escalation_days"] = self.escalation.after_days
            target = self.escalation.escalate_to
            data["escalation_approver_type"] = target.type.value if target else None
        return data


def _variant_fields(
    variant: Assignee | Approver,
) -> tuple[str | None, PersonIdentity | None]:
    """Extract (role, person) from an assignee or approver variant."""
    if isinstance(variant, (RoleAssignee, RoleApprover)):
        return variant.role, None
    if isinstance(variant, (SpecificAssignee, SpecificApprover)):
        return None, variant.person
    if isinstance(variant, (ManagerAssignee, ManagerApprover)):
        return None, variant.person
    return None, None


def _person_fields(prefix: str, person: PersonIdentity | None) -> dict[str, Any]:
    return {
        f"{prefix}_id": person.person_id if person else None,
        f"{prefix}_name": person.name if person else None,
        f"{prefix}_email": person.email if person else None,
    }
