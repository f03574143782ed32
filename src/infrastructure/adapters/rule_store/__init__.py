"""Rule store adapters (YAML files with flat, JSON-encoded records)."""

from src.infrastructure.adapters.rule_store.record_codec import (
    rule_from_record,
    rule_to_record,
    template_from_record,
    template_to_record,
)
from src.infrastructure.adapters.rule_store.yaml_rule_store import (
    YamlClassificationRuleStore,
    YamlTaskTemplateStore,
)

__all__: list[str] = [
    "YamlClassificationRuleStore",
    "YamlTaskTemplateStore",
    "rule_from_record",
    "rule_to_record",
    "template_from_record",
    "template_to_record",
]
