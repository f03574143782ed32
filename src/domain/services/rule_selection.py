"""Specificity-based rule selection.

Both the single resolver and the batch resolver pick the effective rule
with rule_precedence_key so they can never disagree:

1. Higher specificity wins (department scope 2, process scope 1).
2. Among equally specific rules, lower sort_order wins.
3. Then lower rule id; rules without an id sort last.

Fields are never merged across rules.
"""

from __future__ import annotations

import sys
from collections.abc import Iterable

from src.domain.models.classification import ProcessType, TaskClassification
from src.domain.models.classification_rule import ClassificationRule


def rule_precedence_key(rule: ClassificationRule) -> tuple[int, int, int]:
    """Sort key where the first rule in ascending order is the effective one."""
    rule_id = rule.id if rule.id is not None else sys.maxsize
    return (-rule.specificity, rule.sort_order, rule_id)


def select_most_specific(
    rules: Iterable[ClassificationRule],
) -> ClassificationRule | None:
    """Pick the effective rule from already-filtered candidates.

    Args:
        rules: Active rules matching one classification and context.

    Returns:
        The highest-precedence rule, or None if there are no candidates.
    """
    return min(rules, key=rule_precedence_key, default=None)


def build_rule_lookup(
    rules: Iterable[ClassificationRule],
    process_type: ProcessType | None = None,
    department: str | None = None,
) -> dict[TaskClassification, ClassificationRule]:
    """Build a classification -> effective rule table in one pass.

    Inactive rules and rules whose scope does not cover the context are
    skipped. A later rule replaces the kept one only when it strictly
    precedes it, so input order never changes the result.
    """
    lookup: dict[TaskClassification, ClassificationRule] = {}
    for rule in rules:
        if not rule.is_active or not rule.applies_to(process_type, department):
            continue
        current = lookup.get(rule.classification)
        if current is None or rule_precedence_key(rule) < rule_precedence_key(current):
            lookup[rule.classification] = rule
    return lookup
