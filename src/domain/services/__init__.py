"""Domain services for the routing engine.

Pure functions over already-fetched data; no I/O.

Available services:
- select_most_specific / build_rule_lookup: effective rule selection
- DEFAULT_POLICY_TABLE / validate_default_policy: fallback routing
- materialize: rule or default entry -> ResolvedRouting
- compute_due_date: anchor date + offset -> due date
- validate_rule: structural rule checks
"""

from src.domain.services.default_policy import (
    DEFAULT_POLICY_TABLE,
    DefaultPolicyEntry,
    default_policy_for,
    validate_default_policy,
)
from src.domain.services.default_rules import DEFAULT_CLASSIFICATION_RULES
from src.domain.services.due_date import compute_due_date, normalize_anchor_date
from src.domain.services.routing_materializer import materialize
from src.domain.services.rule_selection import (
    build_rule_lookup,
    rule_precedence_key,
    select_most_specific,
)
from src.domain.services.rule_validation import validate_rule

__all__: list[str] = [
    "DEFAULT_CLASSIFICATION_RULES",
    "DEFAULT_POLICY_TABLE",
    "DefaultPolicyEntry",
    "build_rule_lookup",
    "compute_due_date",
    "default_policy_for",
    "materialize",
    "normalize_anchor_date",
    "rule_precedence_key",
    "select_most_specific",
    "validate_default_policy",
    "validate_rule",
]
