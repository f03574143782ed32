"""Unit tests for classification rule validation."""

from __future__ import annotations

from dataclasses import replace

import pytest

from src.domain.errors.rule import InvalidRuleError
from src.domain.models.classification import TaskClassification
from src.domain.models.classification_rule import ApprovalPolicy, ClassificationRule
from src.domain.models.routing_policy import (
    AutoApprovePolicy,
    EscalationPolicy,
    ManagerAssignee,
    PersonIdentity,
    RoleApprover,
    RoleAssignee,
    SkipLevelApprover,
    SlaPolicy,
    SpecificApprover,
    SpecificAssignee,
)
from src.domain.services.default_rules import DEFAULT_CLASSIFICATION_RULES
from src.domain.services.rule_validation import validate_rule


def _rule(**kwargs: object) -> ClassificationRule:
    base = ClassificationRule(
        classification=TaskClassification.SYS,
        assignee=RoleAssignee(role="IT Team"),
    )
    return replace(base, **kwargs)  # type: ignore[arg-type]


class TestValidateRule:
    """Tests for validate_rule."""

    def test_valid_rule(self) -> None:
        """A role rule without approval is valid."""
        validate_rule(_rule())

    def test_manager_assignee_needs_no_identity(self) -> None:
        """Manager assignees are resolved later."""
        validate_rule(_rule(assignee=ManagerAssignee()))

    @pytest.mark.parametrize("role", [None, "", "   "])
    def test_role_assignee_needs_role(self, role: str | None) -> None:
        """A Role assignee must name a role."""
        with pytest.raises(InvalidRuleError, match="Role assignee"):
            validate_rule(_rule(assignee=RoleAssignee(role=role)))

    def test_specific_assignee_needs_person(self) -> None:
        """A Specific assignee must identify someone."""
        with pytest.raises(InvalidRuleError, match="Specific assignee"):
            validate_rule(_rule(assignee=SpecificAssignee(person=PersonIdentity())))

    def test_approval_needs_approver(self) -> None:
        """Requiring approval without an approver is rejected."""
        with pytest.raises(InvalidRuleError, match="no approver"):
            validate_rule(_rule(approval=ApprovalPolicy(requires_approval=True)))

    def test_specific_approver_needs_person(self) -> None:
        """A Specific approver must identify someone."""
        approval = ApprovalPolicy(
            requires_approval=True, approver=SpecificApprover(person=PersonIdentity())
        )
        with pytest.raises(InvalidRuleError, match="Specific approver"):
            validate_rule(_rule(approval=approval))

    def test_approver_ignored_without_approval(self) -> None:
        """An empty approver is irrelevant when approval is not required."""
        approval = ApprovalPolicy(requires_approval=False, approver=RoleApprover(role=""))
        validate_rule(_rule(approval=approval))

    def test_escalation_needs_target(self) -> None:
        """Enabled escalation must say where to escalate."""
        approval = ApprovalPolicy(
            requires_approval=True,
            approver=RoleApprover(role="IT Lead"),
            escalation=EscalationPolicy(enabled=True, after_days=2),
        )
        with pytest.raises(InvalidRuleError, match="no target"):
            validate_rule(_rule(approval=approval))

    def test_escalation_needs_positive_days(self) -> None:
        """Escalation after zero days is rejected."""
        approval = ApprovalPolicy(
            requires_approval=True,
            approver=RoleApprover(role="IT Lead"),
            escalation=EscalationPolicy(
                enabled=True, after_days=0, escalate_to=SkipLevelApprover()
            ),
        )
        with pytest.raises(InvalidRuleError, match="positive day count"):
            validate_rule(_rule(approval=approval))

    def test_negative_auto_approve_cost(self) -> None:
        """Auto-approve thresholds cannot be negative."""
        approval = ApprovalPolicy(auto_approve=AutoApprovePolicy(enabled=True, max_cost=-1))
        with pytest.raises(InvalidRuleError, match="max cost"):
            validate_rule(_rule(approval=approval))

    def test_sla_warning_after_target(self) -> None:
        """The SLA warning cannot come after the target."""
        sla = SlaPolicy(enabled=True, target_days=2, warning_days=3)
        with pytest.raises(InvalidRuleError, match="exceeds target"):
            validate_rule(_rule(sla=sla))

    def test_enabled_sla_needs_target(self) -> None:
        """An enabled SLA must have target days."""
        with pytest.raises(InvalidRuleError, match="SLA target"):
            validate_rule(_rule(sla=SlaPolicy(enabled=True)))

    def test_disabled_policies_are_not_checked(self) -> None:
        """Disabled escalation and SLA blocks may be incomplete."""
        approval = ApprovalPolicy(escalation=EscalationPolicy(enabled=False))
        validate_rule(_rule(approval=approval, sla=SlaPolicy(enabled=False)))


class TestDefaultRules:
    """Tests for the seedable default rules."""

    def test_one_rule_per_classification(self) -> None:
        """The defaults cover each classification exactly once."""
        classifications = [rule.classification for rule in DEFAULT_CLASSIFICATION_RULES]
        assert sorted(classifications) == sorted(TaskClassification)

    def test_default_rules_are_valid(self) -> None:
        """Every default rule passes validation."""
        for rule in DEFAULT_CLASSIFICATION_RULES:
            validate_rule(rule)

    def test_default_rules_are_unsaved_and_unscoped(self) -> None:
        """Defaults carry no id and apply everywhere."""
        for rule in DEFAULT_CLASSIFICATION_RULES:
            assert rule.id is None
            assert rule.scope.is_unscoped
