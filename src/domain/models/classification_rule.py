"""Classification rule domain model.

A ClassificationRule is a scoped routing policy for one classification:
who does the work, whether and by whom it is approved, when it is due,
and which notifications fire. Rules are created and edited by an
administrator through the rule store and deactivated rather than deleted
in normal use.

Key Concepts:
- Scope: optional process types and departments; empty means "matches
  everything"
- Specificity: 2 x (department scope set) + 1 x (process scope set); the
  most specific matching rule is the single effective rule, fields are
  never merged across rules
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone

from src.domain.errors.rule import ImmutableRuleFieldError
from src.domain.models.classification import (
    ProcessType,
    TaskClassification,
    process_types_match,
)
from src.domain.models.patch import UNSET, Unset, set_fields
from src.domain.models.routing_policy import (
    Approver,
    Assignee,
    AutoApprovePolicy,
    EscalationPolicy,
    NotificationSettings,
    RoleAssignee,
    SlaPolicy,
    TimingPolicy,
)

# Specificity weights
DEPARTMENT_SCOPE_WEIGHT: int = 2
PROCESS_SCOPE_WEIGHT: int = 1


def _utc_now() -> datetime:
    """Return current UTC time with timezone info."""
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class RuleScope:
    """Where a rule applies.

    Attributes:
        process_types: Process types the rule is limited to (empty = all).
        departments: Department names the rule is limited to (empty = all).
    """

    process_types: frozenset[ProcessType] = field(default_factory=frozenset)
    departments: frozenset[str] = field(default_factory=frozenset)

    @property
    def is_unscoped(self) -> bool:
        """True when the rule applies everywhere."""
        return not self.process_types and not self.departments

    @property
    def specificity(self) -> int:
        """How narrowly the rule is scoped; higher wins."""
        return (DEPARTMENT_SCOPE_WEIGHT if self.departments else 0) + (
            PROCESS_SCOPE_WEIGHT if self.process_types else 0
        )

    def matches(
        self,
        process_type: ProcessType | None = None,
        department: str | None = None,
    ) -> bool:
        """Check whether this scope covers the given context.

        An unspecified context value matches any scope on that axis.
        """
        if not process_types_match(self.process_types, process_type):
            return False
        if self.departments and department is not None:
            return department in self.departments
        return True


@dataclass(frozen=True)
class ApprovalPolicy:
    """Approval requirement of a rule.

    Attributes:
        requires_approval: Whether tasks need approval at all.
        approver: Primary approver; only meaningful when approval is required.
        escalation: Optional escalation path for the approval.
        auto_approve: Declared auto-approval thresholds (carried, not evaluated).
    """

    requires_approval: bool = False
    approver: Approver | None = None
    escalation: EscalationPolicy | None = None
    auto_approve: AutoApprovePolicy | None = None


@dataclass(frozen=True)
class ClassificationRule:
    """A scoped routing policy for one classification.

    Attributes:
        classification: The classification this rule routes (immutable).
        id: Store-assigned identifier; None until created.
        scope: Process type / department restriction.
        assignee: Who carries out the task.
        approval: Approval requirement, approver and escalation.
        timing: Offset type, days offset and priority.
        sla: Optional SLA policy.
        notifications: Notification flags.
        is_active: Inactive rules are never resolved.
        sort_order: Administrative ordering; lower wins among equally
            specific rules.
        description: Free text for administrators.
        created_at: When the store created the rule (UTC).
        modified_at: When the store last changed the rule (UTC).
    """

    classification: TaskClassification
    id: int | None = None
    scope: RuleScope = field(default_factory=RuleScope)
    assignee: Assignee = field(default_factory=lambda: RoleAssignee(role=None))
    approval: ApprovalPolicy = field(default_factory=ApprovalPolicy)
    timing: TimingPolicy = field(default_factory=TimingPolicy)
    sla: SlaPolicy | None = None
    notifications: NotificationSettings = field(default_factory=NotificationSettings)
    is_active: bool = True
    sort_order: int = 0
    description: str = ""
    created_at: datetime | None = None
    modified_at: datetime | None = None

    @property
    def specificity(self) -> int:
        """Specificity score of this rule's scope."""
        return self.scope.specificity

    @property
    def requires_approval(self) -> bool:
        """Shortcut for approval.requires_approval."""
        return self.approval.requires_approval

    def applies_to(
        self,
        process_type: ProcessType | None = None,
        department: str | None = None,
    ) -> bool:
        """Check whether this rule's scope covers the given context."""
        return self.scope.matches(process_type, department)

    def with_id(self, rule_id: int, created_at: datetime | None = None) -> ClassificationRule:
        """Create a copy carrying the store-assigned id and timestamps."""
        now = created_at or _utc_now()
        return replace(self, id=rule_id, created_at=now, modified_at=now)


@dataclass(frozen=True)
class RulePatch:
    """Explicit partial update for a classification rule.

    Every field defaults to UNSET (leave unchanged). Setting a nullable
    field such as ``sla`` to None clears it.

    ``classification`` exists only so that an attempt to change it can be
    detected and rejected.
    """

    classification: TaskClassification | Unset = UNSET
    scope: RuleScope | Unset = UNSET
    assignee: Assignee | Unset = UNSET
    approval: ApprovalPolicy | Unset = UNSET
    timing: TimingPolicy | Unset = UNSET
    sla: SlaPolicy | None | Unset = UNSET
    notifications: NotificationSettings | Unset = UNSET
    is_active: bool | Unset = UNSET
    sort_order: int | Unset = UNSET
    description: str | Unset = UNSET

    @property
    def is_empty(self) -> bool:
        """True when the patch changes nothing."""
        return not set_fields(self)

    def apply_to(self, rule: ClassificationRule) -> ClassificationRule:
        """Apply the set fields to a rule.

        Args:
            rule: The stored rule to update.

        Returns:
            The updated rule with a fresh modified_at timestamp.

        Raises:
            ImmutableRuleFieldError: If the patch changes the classification.
        """
        changes = set_fields(self)
        new_classification = changes.pop("classification", rule.classification)
        if new_classification != rule.classification:
            raise ImmutableRuleFieldError(rule.id if rule.id is not None else -1)
        return replace(rule, **changes, modified_at=_utc_now())
