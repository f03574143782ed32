"""In-memory classification rule repository stub.

Supports failure injection so callers can exercise the fail-open path,
and counts list_rules calls so tests can check round trips.

WARNING: This stub is for development/testing only.
Production should use a persistent rule store adapter.
"""

from __future__ import annotations

from collections.abc import Iterable

from src.application.ports.classification_rule_repository import (
    ClassificationRuleRepositoryProtocol,
    RuleFilter,
)
from src.domain.errors.rule import RuleNotFoundError, RuleStoreUnavailableError
from src.domain.models.classification_rule import ClassificationRule, RulePatch


class ClassificationRuleRepositoryStub(ClassificationRuleRepositoryProtocol):
    """In-memory rule storage.

    Attributes:
        force_unavailable: When True every call raises RuleStoreUnavailableError.
        list_calls: Number of list_rules calls made.
    """

    def __init__(
        self,
        rules: Iterable[ClassificationRule] = (),
        *,
        force_unavailable: bool = False,
    ) -> None:
        """Initialize the stub.

        Args:
            rules: Initial rules. Rules without an id get the next free id.
            force_unavailable: Make every call fail.
        """
        self._rules: dict[int, ClassificationRule] = {}
        self._next_id = 1
        self.force_unavailable = force_unavailable
        self.list_calls = 0
        for rule in rules:
            self._store(rule)

    def _store(self, rule: ClassificationRule) -> ClassificationRule:
        if rule.id is None:
            rule = rule.with_id(self._next_id)
        self._rules[rule.id] = rule  # type: ignore[index]
        self._next_id = max(self._next_id, rule.id + 1)  # type: ignore[operator]
        return rule

    def _check_available(self) -> None:
        if self.force_unavailable:
            raise RuleStoreUnavailableError("in-memory stub", "forced unavailable")

    async def list_rules(self, rule_filter: RuleFilter | None = None) -> list[ClassificationRule]:
        """List rules passing the filter, ordered by sort order then id."""
        self.list_calls += 1
        self._check_available()
        rules = [
            rule
            for rule in self._rules.values()
            if rule_filter is None or rule_filter.matches(rule)
        ]
        return sorted(rules, key=lambda rule: (rule.sort_order, rule.id or 0))

    async def get_rule(self, rule_id: int) -> ClassificationRule | None:
        """Retrieve a rule by id."""
        self._check_available()
        return self._rules.get(rule_id)

    async def create_rule(self, rule: ClassificationRule) -> ClassificationRule:
        """Store a rule under the next free id."""
        self._check_available()
        return self._store(rule.with_id(self._next_id))

    async def update_rule(self, rule_id: int, patch: RulePatch) -> ClassificationRule:
        """Apply a patch to a stored rule."""
        self._check_available()
        current = self._rules.get(rule_id)
        if current is None:
            raise RuleNotFoundError(rule_id)
        updated = patch.apply_to(current)
        self._rules[rule_id] = updated
        return updated

    async def delete_rule(self, rule_id: int) -> None:
        """Remove a rule."""
        self._check_available()
        if self._rules.pop(rule_id, None) is None:
            raise RuleNotFoundError(rule_id)

    def clear(self) -> None:
        """Clear all stored rules and counters (for testing)."""
        self._rules.clear()
        self._next_id = 1
        self.list_calls = 0
        self.force_unavailable = False
