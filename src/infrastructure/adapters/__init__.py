"""Infrastructure adapters for the routing engine.

Adapters implement the ports defined in the application layer,
providing concrete implementations for external stores.
"""

from src.infrastructure.adapters.rule_store import (
    YamlClassificationRuleStore,
    YamlTaskTemplateStore,
)

__all__: list[str] = ["YamlClassificationRuleStore", "YamlTaskTemplateStore"]
