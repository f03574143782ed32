"""Classification rule repository port.

This module defines the abstract interface for reading and administering
classification rules in the Rule Store. Store encoding (flat records,
JSON-encoded list fields) is the adapter's concern.

Failure policy:
- Adapters raise RuleStoreUnavailableError when the backing store fails
- Resolution absorbs that error and falls back to the default policy
- Administration lets it propagate
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from src.domain.models.classification import ProcessType, TaskClassification
from src.domain.models.classification_rule import ClassificationRule, RulePatch


@dataclass(frozen=True)
class RuleFilter:
    """Filter for listing rules.

    None on a field means "do not filter on it". Process type and
    department are matched against rule scopes, where an empty scope
    matches anything.
    """

    classification: TaskClassification | None = None
    process_type: ProcessType | None = None
    department: str | None = None
    is_active: bool | None = None
    requires_approval: bool | None = None

    def matches(self, rule: ClassificationRule) -> bool:
        """Check whether a rule passes this filter."""
        if self.classification is not None and rule.classification != self.classification:
            return False
        if self.is_active is not None and rule.is_active != self.is_active:
            return False
        if (
            self.requires_approval is not None
            and rule.requires_approval != self.requires_approval
        ):
            return False
        return rule.applies_to(self.process_type, self.department)


class ClassificationRuleRepositoryProtocol(Protocol):
    """Protocol for classification rule storage operations."""

    async def list_rules(self, rule_filter: RuleFilter | None = None) -> list[ClassificationRule]:
        """List rules passing the filter, ordered by sort order.

        Args:
            rule_filter: Optional filter; None lists every rule.

        Returns:
            Matching rules.

        Raises:
            RuleStoreUnavailableError: If the store cannot be read.
        """
        ...

    async def get_rule(self, rule_id: int) -> ClassificationRule | None:
        """Retrieve a rule by id.

        Returns:
            The rule if found, None otherwise.
        """
        ...

    async def create_rule(self, rule: ClassificationRule) -> ClassificationRule:
        """Store a new rule.

        Args:
            rule: The rule to create; its id is ignored.

        Returns:
            The stored rule with its assigned id and timestamps.
        """
        ...

    async def update_rule(self, rule_id: int, patch: RulePatch) -> ClassificationRule:
        """Apply a partial update to a stored rule.

        Returns:
            The updated rule.

        Raises:
            RuleNotFoundError: If the rule does not exist.
            ImmutableRuleFieldError: If the patch changes the classification.
        """
        ...

    async def delete_rule(self, rule_id: int) -> None:
        """Delete a rule permanently.

        Raises:
            RuleNotFoundError: If the rule does not exist.
        """
        ...


__all__ = ["ClassificationRuleRepositoryProtocol", "RuleFilter"]
