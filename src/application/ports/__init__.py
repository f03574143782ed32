"""Application ports - Abstract interfaces for infrastructure adapters.

This module defines the contracts that infrastructure adapters must implement.
Ports enable dependency inversion and make the application layer testable.

Available ports:
- ClassificationRuleRepositoryProtocol: rule reads and administration
- TaskTemplateRepositoryProtocol: task library reads
- OrgDirectoryProtocol: manager lookups
- TaskPersistenceProtocol: confirmed task storage
"""

from src.application.ports.classification_rule_repository import (
    ClassificationRuleRepositoryProtocol,
    RuleFilter,
)
from src.application.ports.org_directory import OrgDirectoryProtocol
from src.application.ports.task_persistence import TaskPersistenceProtocol
from src.application.ports.task_template_repository import (
    TaskTemplateRepositoryProtocol,
    TemplateFilter,
)

__all__: list[str] = [
    "ClassificationRuleRepositoryProtocol",
    "OrgDirectoryProtocol",
    "RuleFilter",
    "TaskPersistenceProtocol",
    "TaskTemplateRepositoryProtocol",
    "TemplateFilter",
]
