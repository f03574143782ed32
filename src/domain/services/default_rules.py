"""Seed classification rules.

One unscoped rule per classification, used to populate an empty rule
store. Seeding skips any classification that already has a rule.
"""

from __future__ import annotations

from src.domain.models.classification import TaskClassification
from src.domain.models.classification_rule import ApprovalPolicy, ClassificationRule
from src.domain.models.routing_policy import (
    AutoApprovePolicy,
    EscalationPolicy,
    ManagerAssignee,
    NotificationSettings,
    OffsetType,
    Priority,
    RoleApprover,
    RoleAssignee,
    SlaPolicy,
    TimingPolicy,
)


def _approval(approver: str, escalate_after: int, escalate_to: str) -> ApprovalPolicy:
    return ApprovalPolicy(
        requires_approval=True,
        approver=RoleApprover(role=approver),
        escalation=EscalationPolicy(
            enabled=True,
            after_days=escalate_after,
            escalate_to=RoleApprover(role=escalate_to),
        ),
    )


def _notifications(teams: bool, on_completion: bool, manager: bool) -> NotificationSettings:
    return NotificationSettings(
        send_email=True,
        send_teams=teams,
        notify_on_assignment=True,
        notify_on_completion=on_completion,
        notify_manager_on_completion=manager,
    )


DEFAULT_CLASSIFICATION_RULES: tuple[ClassificationRule, ...] = (
    ClassificationRule(
        classification=TaskClassification.DOC,
        assignee=RoleAssignee(role="HR Team"),
        timing=TimingPolicy(OffsetType.BEFORE_START, 5, Priority.HIGH),
        sla=SlaPolicy(enabled=True, target_days=5, warning_days=2),
        notifications=_notifications(teams=False, on_completion=True, manager=False),
        sort_order=1,
        description="Documentation tasks assigned to HR Team, no approval required",
    ),
    ClassificationRule(
        classification=TaskClassification.SYS,
        assignee=RoleAssignee(role="IT Team"),
        approval=_approval("IT Lead", 2, "IT Manager"),
        timing=TimingPolicy(OffsetType.BEFORE_START, 3, Priority.HIGH),
        sla=SlaPolicy(enabled=True, target_days=3, warning_days=1),
        notifications=_notifications(teams=True, on_completion=True, manager=True),
        sort_order=2,
        description=(
            "System access tasks assigned to IT Team, approved by IT Lead "
            "with escalation to IT Manager"
        ),
    ),
    ClassificationRule(
        classification=TaskClassification.HRD,
        assignee=RoleAssignee(role="IT Team"),
        approval=ApprovalPolicy(
            requires_approval=True,
            approver=RoleApprover(role="IT Admin"),
            escalation=EscalationPolicy(
                enabled=True, after_days=3, escalate_to=RoleApprover(role="IT Manager")
            ),
            auto_approve=AutoApprovePolicy(enabled=True, max_cost=500),
        ),
        timing=TimingPolicy(OffsetType.BEFORE_START, 5, Priority.MEDIUM),
        sla=SlaPolicy(enabled=True, target_days=5, warning_days=2),
        notifications=_notifications(teams=True, on_completion=True, manager=True),
        sort_order=3,
        description=(
            "Hardware tasks assigned to IT Team, approved by IT Admin "
            "(auto-approve under $500)"
        ),
    ),
    ClassificationRule(
        classification=TaskClassification.TRN,
        assignee=RoleAssignee(role="Training"),
        timing=TimingPolicy(OffsetType.AFTER_START, 7, Priority.MEDIUM),
        sla=SlaPolicy(enabled=True, target_days=14, warning_days=3),
        notifications=_notifications(teams=False, on_completion=True, manager=False),
        sort_order=4,
        description="Training tasks assigned to Training/L&D team, no approval required",
    ),
    ClassificationRule(
        classification=TaskClassification.ORI,
        assignee=ManagerAssignee(),
        timing=TimingPolicy(OffsetType.ON_START, 0, Priority.HIGH),
        sla=SlaPolicy(enabled=True, target_days=1, warning_days=0),
        notifications=_notifications(teams=True, on_completion=False, manager=False),
        sort_order=5,
        description="Orientation tasks assigned to hiring manager",
    ),
    ClassificationRule(
        classification=TaskClassification.CMP,
        assignee=RoleAssignee(role="HR Team"),
        approval=_approval("HR Manager", 2, "Legal"),
        timing=TimingPolicy(OffsetType.BEFORE_START, 3, Priority.HIGH),
        sla=SlaPolicy(enabled=True, target_days=3, warning_days=1),
        notifications=_notifications(teams=False, on_completion=True, manager=True),
        sort_order=6,
        description="Compliance tasks assigned to HR Team, approved by HR Manager",
    ),
    ClassificationRule(
        classification=TaskClassification.FAC,
        assignee=RoleAssignee(role="Facilities"),
        timing=TimingPolicy(OffsetType.BEFORE_START, 2, Priority.MEDIUM),
        sla=SlaPolicy(enabled=True, target_days=2, warning_days=1),
        notifications=_notifications(teams=False, on_completion=True, manager=False),
        sort_order=7,
        description="Facilities tasks assigned to Facilities team",
    ),
    ClassificationRule(
        classification=TaskClassification.SEC,
        assignee=RoleAssignee(role="Security"),
        approval=_approval("Security Manager", 1, "Operations Manager"),
        timing=TimingPolicy(OffsetType.BEFORE_START, 1, Priority.HIGH),
        sla=SlaPolicy(enabled=True, target_days=1, warning_days=0),
        notifications=_notifications(teams=True, on_completion=True, manager=True),
        sort_order=8,
        description="Security tasks assigned to Security team, approved by Security Manager",
    ),
    ClassificationRule(
        classification=TaskClassification.FIN,
        assignee=RoleAssignee(role="Finance"),
        approval=_approval("Finance Manager", 2, "CFO"),
        timing=TimingPolicy(OffsetType.BEFORE_START, 5, Priority.HIGH),
        sla=SlaPolicy(enabled=True, target_days=5, warning_days=2),
        notifications=_notifications(teams=False, on_completion=True, manager=False),
        sort_order=9,
        description="Finance tasks assigned to Finance team, approved by Finance Manager",
    ),
    ClassificationRule(
        classification=TaskClassification.COM,
        assignee=RoleAssignee(role="IT Team"),
        timing=TimingPolicy(OffsetType.BEFORE_START, 2, Priority.MEDIUM),
        sla=SlaPolicy(enabled=True, target_days=2, warning_days=1),
        notifications=_notifications(teams=True, on_completion=True, manager=False),
        sort_order=10,
        description="Communication/account setup tasks assigned to IT Team",
    ),
)
