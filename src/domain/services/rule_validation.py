"""Structural validation of classification rules.

Run by the rule administration service before a rule is stored. Timing
values are validated by TimingPolicy itself.
"""

from __future__ import annotations

from src.domain.errors.rule import InvalidRuleError
from src.domain.models.classification_rule import ClassificationRule
from src.domain.models.routing_policy import (
    RoleApprover,
    RoleAssignee,
    SpecificApprover,
    SpecificAssignee,
)


def validate_rule(rule: ClassificationRule) -> None:
    """Check a rule for inconsistent variant and policy fields.

    Args:
        rule: The rule to check.

    Raises:
        InvalidRuleError: On the first problem found.
    """
    assignee = rule.assignee
    if isinstance(assignee, RoleAssignee) and not (assignee.role or "").strip():
        raise InvalidRuleError("a Role assignee needs a role name")
    if isinstance(assignee, SpecificAssignee) and assignee.person.is_empty:
        raise InvalidRuleError("a Specific assignee needs a person")

    approval = rule.approval
    if approval.requires_approval:
        approver = approval.approver
        if approver is None:
            raise InvalidRuleError("approval is required but no approver is set")
        if isinstance(approver, RoleApprover) and not (approver.role or "").strip():
            raise InvalidRuleError("a Role approver needs a role name")
        if isinstance(approver, SpecificApprover) and approver.person.is_empty:
            raise InvalidRuleError("a Specific approver needs a person")

    escalation = approval.escalation
    if escalation is not None and escalation.enabled:
        if escalation.escalate_to is None:
            raise InvalidRuleError("escalation is enabled but has no target")
        if escalation.after_days is None or escalation.after_days < 1:
            raise InvalidRuleError(
                f"escalation needs a positive day count, got {escalation.after_days}"
            )

    auto_approve = approval.auto_approve
    if auto_approve is not None:
        if auto_approve.max_cost is not None and auto_approve.max_cost < 0:
            raise InvalidRuleError(
                f"auto-approve max cost cannot be negative, got {auto_approve.max_cost}"
            )
        if auto_approve.max_days is not None and auto_approve.max_days < 0:
            raise InvalidRuleError(
                f"auto-approve max days cannot be negative, got {auto_approve.max_days}"
            )

    sla = rule.sla
    if sla is not None and sla.enabled:
        if sla.target_days is None or sla.target_days < 0:
            raise InvalidRuleError(f"SLA target days must be set, got {sla.target_days}")
        if sla.warning_days is not None and sla.warning_days > sla.target_days:
            raise InvalidRuleError(
                f"SLA warning ({sla.warning_days}d) exceeds target ({sla.target_days}d)"
            )
