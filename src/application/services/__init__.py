"""Application services - Use case orchestration.

This module contains application services that orchestrate domain
operations and coordinate with infrastructure adapters.

Available services:
- RuleResolverService: single and batch routing resolution with fail-open
- TaskTemplateMerger: template + routing + anchor date -> configurable task
- ClassificationRuleAdminService: rule CRUD and default rule seeding
- ChecklistBuilderService: process request -> editing session
- EditingSession: review, confirm or cancel a generated checklist
"""

from src.application.services.checklist_builder_service import (
    ChecklistBuilderService,
    ChecklistRequest,
    SelectedItem,
)
from src.application.services.classification_rule_admin_service import (
    ClassificationRuleAdminService,
)
from src.application.services.editing_session import EditingSession, SessionState
from src.application.services.rule_resolver_service import RuleResolverService
from src.application.services.task_template_merger import (
    TaskTemplateMerger,
    new_task_id,
)

__all__: list[str] = [
    "ChecklistBuilderService",
    "ChecklistRequest",
    "ClassificationRuleAdminService",
    "EditingSession",
    "RuleResolverService",
    "SelectedItem",
    "SessionState",
    "TaskTemplateMerger",
    "new_task_id",
]
