"""Routing materializer domain service.

Expands the effective classification rule (or the default policy entry)
into a concrete ResolvedRouting. Deterministic, no I/O, and always
returns a complete routing.

Assignee resolution:
- Role / Specific: copied verbatim
- Manager: the supplied manager identity, or left unassigned
- Employee: deferred to the owning process

Approver resolution mirrors the assignee and is gated by
requires_approval. Skip-Level is passed through unresolved.
"""

from __future__ import annotations

from src.domain.models.classification import TaskClassification
from src.domain.models.classification_rule import ClassificationRule
from src.domain.models.resolved_routing import ResolvedRouting, RoutingSource
from src.domain.models.routing_policy import (
    Approver,
    Assignee,
    ManagerApprover,
    ManagerAssignee,
    PersonIdentity,
)
from src.domain.services.default_policy import DefaultPolicyEntry


def resolve_assignee(assignee: Assignee, manager: PersonIdentity | None) -> Assignee:
    """Substitute the manager identity into a Manager assignee."""
    if isinstance(assignee, ManagerAssignee):
        return ManagerAssignee(person=_known(manager))
    return assignee


def resolve_approver(
    requires_approval: bool,
    approver: Approver | None,
    manager: PersonIdentity | None,
) -> Approver | None:
    """Resolve the approver; None whenever approval is not required."""
    if not requires_approval or approver is None:
        return None
    if isinstance(approver, ManagerApprover):
        return ManagerApprover(person=_known(manager))
    return approver


def materialize(
    source: ClassificationRule | DefaultPolicyEntry,
    classification: TaskClassification,
    manager: PersonIdentity | None = None,
) -> ResolvedRouting:
    """Expand a rule or default policy entry into a ResolvedRouting.

    Args:
        source: The effective rule, or the default entry when no rule matched.
        classification: The classification being resolved.
        manager: The requester's manager, when known.

    Returns:
        The resolved routing. Escalation, auto-approval and SLA data are
        carried through from a rule unchanged.
    """
    if isinstance(source, ClassificationRule):
        approval = source.approval
        return ResolvedRouting(
            classification=classification,
            source=RoutingSource.RULE,
            rule_id=source.id,
            assignee=resolve_assignee(source.assignee, manager),
            requires_approval=approval.requires_approval,
            approver=resolve_approver(
                approval.requires_approval, approval.approver, manager
            ),
            escalation=approval.escalation,
            auto_approve=approval.auto_approve,
            offset_type=source.timing.offset_type,
            days_offset=source.timing.days_offset,
            priority=source.timing.priority,
            sla=source.sla,
            notifications=source.notifications,
        )

    return ResolvedRouting(
        classification=classification,
        source=RoutingSource.DEFAULT_POLICY,
        assignee=resolve_assignee(source.assignee, manager),
        requires_approval=source.requires_approval,
        approver=resolve_approver(source.requires_approval, source.approver, manager),
        offset_type=source.timing.offset_type,
        days_offset=source.timing.days_offset,
        priority=source.timing.priority,
        notifications=source.notifications,
    )


def _known(person: PersonIdentity | None) -> PersonIdentity | None:
    if person is None or person.is_empty:
        return None
    return person
