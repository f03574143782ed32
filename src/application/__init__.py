"""
Application layer - Use cases and orchestration for the routing engine.

This layer contains:
- Application services (resolution, materialization, rule administration,
  checklist building, editing sessions)
- Port definitions (abstract interfaces for infrastructure)

IMPORT RULES:
- CAN import from: domain
- CANNOT import from: infrastructure (except stubs and observability), bootstrap
"""

from src.application.ports import (
    ClassificationRuleRepositoryProtocol,
    RuleFilter,
    TaskTemplateRepositoryProtocol,
    TemplateFilter,
)

__all__: list[str] = [
    "ClassificationRuleRepositoryProtocol",
    "RuleFilter",
    "TaskTemplateRepositoryProtocol",
    "TemplateFilter",
]
