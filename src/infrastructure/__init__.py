"""
Infrastructure layer - External adapters for the routing engine.

This layer contains:
- YAML rule/template store adapters (flat records, JSON-encoded lists)
- In-memory stubs for every port
- structlog configuration

IMPORT RULES:
- CAN import from: domain, application
- Implements ports defined in application layer
"""

from src.infrastructure.adapters import YamlClassificationRuleStore, YamlTaskTemplateStore

__all__: list[str] = ["YamlClassificationRuleStore", "YamlTaskTemplateStore"]
