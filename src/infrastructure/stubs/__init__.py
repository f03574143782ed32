"""Infrastructure stubs for development and testing.

This module provides stub implementations of infrastructure ports
for use in development and testing environments.

Available stubs:
- ClassificationRuleRepositoryStub: In-memory rules, failure injection, call counts
- TaskTemplateRepositoryStub: In-memory task library
- OrgDirectoryStub: Manager lookups from a fixed mapping
- TaskPersistenceStub: Records confirmed tasks

WARNING: These stubs are NOT for production use.
Production implementations are in src/infrastructure/adapters/.
"""

from src.infrastructure.stubs.classification_rule_repository_stub import (
    ClassificationRuleRepositoryStub,
)
from src.infrastructure.stubs.org_directory_stub import OrgDirectoryStub
from src.infrastructure.stubs.task_persistence_stub import TaskPersistenceStub
from src.infrastructure.stubs.task_template_repository_stub import (
    TaskTemplateRepositoryStub,
)

__all__: list[str] = [
    "ClassificationRuleRepositoryStub",
    "OrgDirectoryStub",
    "TaskPersistenceStub",
    "TaskTemplateRepositoryStub",
]
