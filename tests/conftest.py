"""
Pytest configuration and shared fixtures for routing engine tests.

Testing Standards:
- All async tests use pytest.mark.asyncio (auto mode enabled in pyproject.toml)
- In-memory stubs from src.infrastructure.stubs are the test doubles
- Unit tests go in tests/unit/
- Integration tests go in tests/integration/
"""

from __future__ import annotations

from collections.abc import Callable

import pytest

from src.application.services.rule_resolver_service import RuleResolverService
from src.application.services.task_template_merger import TaskTemplateMerger
from src.domain.models.classification import ProcessType, TaskClassification
from src.domain.models.classification_rule import (
    ApprovalPolicy,
    ClassificationRule,
    RuleScope,
)
from src.domain.models.routing_policy import (
    OffsetType,
    PersonIdentity,
    Priority,
    RoleApprover,
    RoleAssignee,
    TimingPolicy,
)
from src.domain.models.task_template import TaskLibraryTemplate
from src.infrastructure.stubs.classification_rule_repository_stub import (
    ClassificationRuleRepositoryStub,
)
from src.infrastructure.stubs.task_persistence_stub import TaskPersistenceStub
from src.infrastructure.stubs.task_template_repository_stub import (
    TaskTemplateRepositoryStub,
)


@pytest.fixture
def anyio_backend() -> str:
    """Use asyncio as the async backend."""
    return "asyncio"


@pytest.fixture
def project_version() -> str:
    """Provide the current project version for tests."""
    from src import __version__

    return __version__


def make_rule(
    classification: TaskClassification = TaskClassification.SYS,
    *,
    rule_id: int | None = None,
    role: str = "IT Team",
    process_types: set[ProcessType] | None = None,
    departments: set[str] | None = None,
    priority: Priority = Priority.HIGH,
    offset_type: OffsetType = OffsetType.BEFORE_START,
    days_offset: int = 3,
    approver_role: str | None = None,
    is_active: bool = True,
    sort_order: int = 0,
) -> ClassificationRule:
    """Build a rule with sensible defaults for tests."""
    return ClassificationRule(
        classification=classification,
        id=rule_id,
        scope=RuleScope(
            process_types=frozenset(process_types or ()),
            departments=frozenset(departments or ()),
        ),
        assignee=RoleAssignee(role=role),
        approval=ApprovalPolicy(
            requires_approval=approver_role is not None,
            approver=RoleApprover(role=approver_role) if approver_role else None,
        ),
        timing=TimingPolicy(offset_type=offset_type, days_offset=days_offset, priority=priority),
        is_active=is_active,
        sort_order=sort_order,
    )


@pytest.fixture
def rule_factory() -> Callable[..., ClassificationRule]:
    """Factory for classification rules."""
    return make_rule


@pytest.fixture
def template_factory() -> Callable[..., TaskLibraryTemplate]:
    """Factory for task library templates."""

    def _make(
        classification: TaskClassification = TaskClassification.SYS,
        title: str = "Provision account",
        **kwargs: object,
    ) -> TaskLibraryTemplate:
        return TaskLibraryTemplate(classification=classification, title=title, **kwargs)  # type: ignore[arg-type]

    return _make


@pytest.fixture
def manager() -> PersonIdentity:
    """A known manager identity."""
    return PersonIdentity(person_id=42, name="Dana Reyes", email="dana.reyes@example.com")


@pytest.fixture
def rule_repository() -> ClassificationRuleRepositoryStub:
    """Empty in-memory rule repository."""
    return ClassificationRuleRepositoryStub()


@pytest.fixture
def template_repository() -> TaskTemplateRepositoryStub:
    """Empty in-memory task library."""
    return TaskTemplateRepositoryStub()


@pytest.fixture
def task_persistence() -> TaskPersistenceStub:
    """Recording task persistence."""
    return TaskPersistenceStub()


@pytest.fixture
def resolver(rule_repository: ClassificationRuleRepositoryStub) -> RuleResolverService:
    """Resolver over the in-memory rule repository."""
    return RuleResolverService(rule_repository)


@pytest.fixture
def sequential_ids() -> Callable[[], str]:
    """Deterministic task id factory (task-1, task-2, ...)."""
    counter = iter(range(1, 1_000_000))
    return lambda: f"task-{next(counter)}"


@pytest.fixture
def merger(sequential_ids: Callable[[], str]) -> TaskTemplateMerger:
    """Merger with deterministic task ids."""
    return TaskTemplateMerger(id_factory=sequential_ids)
