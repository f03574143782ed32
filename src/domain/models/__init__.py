"""Domain models for the routing engine.

Contains value objects and domain models that represent
core routing concepts. These models are immutable and
contain no infrastructure dependencies.
"""

from src.domain.models.classification import (
    ProcessType,
    TaskCategory,
    TaskClassification,
    generate_task_code,
    parse_task_code,
)
from src.domain.models.classification_rule import (
    ApprovalPolicy,
    ClassificationRule,
    RulePatch,
    RuleScope,
)
from src.domain.models.configurable_task import ConfigurableTask, TaskPatch
from src.domain.models.patch import UNSET, Unset
from src.domain.models.resolved_routing import ResolvedRouting, RoutingSource
from src.domain.models.routing_policy import (
    Approver,
    ApproverType,
    Assignee,
    AssigneeType,
    AutoApprovePolicy,
    EmployeeAssignee,
    EscalationPolicy,
    ManagerApprover,
    ManagerAssignee,
    NotificationSettings,
    OffsetType,
    PersonIdentity,
    Priority,
    RoleApprover,
    RoleAssignee,
    SkipLevelApprover,
    SlaPolicy,
    SpecificApprover,
    SpecificAssignee,
    TimingPolicy,
)
from src.domain.models.task_template import (
    SourceReference,
    SourceType,
    TaskLibraryTemplate,
)

__all__: list[str] = [
    "UNSET",
    "ApprovalPolicy",
    "Approver",
    "ApproverType",
    "Assignee",
    "AssigneeType",
    "AutoApprovePolicy",
    "ClassificationRule",
    "ConfigurableTask",
    "EmployeeAssignee",
    "EscalationPolicy",
    "ManagerApprover",
    "ManagerAssignee",
    "NotificationSettings",
    "OffsetType",
    "PersonIdentity",
    "Priority",
    "ProcessType",
    "ResolvedRouting",
    "RoleApprover",
    "RoleAssignee",
    "RoutingSource",
    "RulePatch",
    "RuleScope",
    "SkipLevelApprover",
    "SlaPolicy",
    "SourceReference",
    "SourceType",
    "SpecificApprover",
    "SpecificAssignee",
    "TaskCategory",
    "TaskClassification",
    "TaskLibraryTemplate",
    "TaskPatch",
    "TimingPolicy",
    "Unset",
    "generate_task_code",
    "parse_task_code",
]
