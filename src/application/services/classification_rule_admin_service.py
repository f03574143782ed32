"""Classification rule administration service.

Create, update, deactivate and delete classification rules, and seed the
default rules into an empty store. Unlike resolution, administration
does not absorb store failures: RuleStoreUnavailableError propagates to
the caller.
"""

from __future__ import annotations

from dataclasses import replace

from src.application.ports.classification_rule_repository import (
    ClassificationRuleRepositoryProtocol,
    RuleFilter,
)
from src.application.services.base import LoggingMixin
from src.domain.errors.rule import RuleNotFoundError
from src.domain.models.classification_rule import ClassificationRule, RulePatch
from src.domain.services.default_rules import DEFAULT_CLASSIFICATION_RULES
from src.domain.services.rule_validation import validate_rule


class ClassificationRuleAdminService(LoggingMixin):
    """Rule administration on top of the rule repository."""

    def __init__(self, rule_repository: ClassificationRuleRepositoryProtocol) -> None:
        """Initialize the service.

        Args:
            rule_repository: Rule Store access.
        """
        self._rules = rule_repository
        self._init_logger(component="rule_admin")

    async def list_rules(self, rule_filter: RuleFilter | None = None) -> list[ClassificationRule]:
        """List rules passing the filter."""
        return await self._rules.list_rules(rule_filter)

    async def get_rule(self, rule_id: int) -> ClassificationRule | None:
        """Get a rule by id, None if absent."""
        return await self._rules.get_rule(rule_id)

    async def create_rule(self, rule: ClassificationRule) -> ClassificationRule:
        """Validate and store a new rule.

        A sort order of 0 means "not supplied": the rule is placed after
        every existing rule (max + 1).

        Args:
            rule: The rule to create.

        Returns:
            The stored rule with its id.

        Raises:
            InvalidRuleError: If the rule is structurally invalid.
        """
        validate_rule(rule)
        if rule.sort_order == 0:
            existing = await self._rules.list_rules()
            next_order = max((r.sort_order for r in existing), default=0) + 1
            rule = replace(rule, sort_order=next_order)

        created = await self._rules.create_rule(rule)
        self._log.info(
            "classification_rule_created",
            rule_id=created.id,
            classification=created.classification.value,
            specificity=created.specificity,
            sort_order=created.sort_order,
        )
        return created

    async def update_rule(self, rule_id: int, patch: RulePatch) -> ClassificationRule:
        """Apply a partial update to a rule.

        Args:
            rule_id: The rule to update.
            patch: Fields to change.

        Returns:
            The updated rule.

        Raises:
            RuleNotFoundError: If the rule does not exist.
            ImmutableRuleFieldError: If the patch changes the classification.
            InvalidRuleError: If the updated rule is structurally invalid.
        """
        current = await self._rules.get_rule(rule_id)
        if current is None:
            raise RuleNotFoundError(rule_id)
        if patch.is_empty:
            return current

        # Validate the outcome before writing it
        validate_rule(patch.apply_to(current))
        updated = await self._rules.update_rule(rule_id, patch)
        self._log.info("classification_rule_updated", rule_id=rule_id)
        return updated

    async def set_rule_active(self, rule_id: int, is_active: bool) -> ClassificationRule:
        """Activate or deactivate a rule.

        Raises:
            RuleNotFoundError: If the rule does not exist.
        """
        updated = await self.update_rule(rule_id, RulePatch(is_active=is_active))
        self._log.info(
            "classification_rule_activation_changed",
            rule_id=rule_id,
            is_active=is_active,
        )
        return updated

    async def delete_rule(self, rule_id: int) -> None:
        """Delete a rule permanently (prefer set_rule_active in normal use).

        Raises:
            RuleNotFoundError: If the rule does not exist.
        """
        if await self._rules.get_rule(rule_id) is None:
            raise RuleNotFoundError(rule_id)
        await self._rules.delete_rule(rule_id)
        self._log.warning("classification_rule_deleted", rule_id=rule_id)

    async def seed_default_rules(self) -> tuple[int, int]:
        """Create the default rules for classifications that have none.

        Returns:
            (created, skipped) counts.
        """
        existing = await self._rules.list_rules()
        covered = {rule.classification for rule in existing}

        created = skipped = 0
        for rule in DEFAULT_CLASSIFICATION_RULES:
            if rule.classification in covered:
                skipped += 1
                continue
            await self._rules.create_rule(rule)
            created += 1

        self._log.info("default_rules_seeded", created=created, skipped=skipped)
        return created, skipped
