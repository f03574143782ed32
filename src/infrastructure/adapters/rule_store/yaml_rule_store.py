"""YAML-backed rule store.

Keeps classification rules and task library templates as lists of flat
records in YAML files:

    rules:
      - id: 1
        classification: SYS
        process_types: '["Onboarding"]'
        departments: []
        assignee_type: Role
        assignee_role: IT Team
        ...

    templates:
      - id: 7
        task_code: SYS-001
        classification: SYS
        title: Provision laptop account
        ...

A missing file is an empty store. Read and write failures raise
RuleStoreUnavailableError; records that cannot be decoded are logged, skipped
on reads and written back unchanged.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import structlog
import yaml

from src.application.ports.classification_rule_repository import (
    ClassificationRuleRepositoryProtocol,
    RuleFilter,
)
from src.application.ports.task_template_repository import (
    TaskTemplateRepositoryProtocol,
    TemplateFilter,
)
from src.domain.errors.rule import RuleNotFoundError, RuleStoreUnavailableError
from src.domain.exceptions import RoutingEngineError
from src.domain.models.classification_rule import ClassificationRule, RulePatch
from src.domain.models.task_template import TaskLibraryTemplate
from src.infrastructure.adapters.rule_store.record_codec import (
    rule_from_record,
    rule_to_record,
    template_from_record,
    template_to_record,
)

logger = structlog.get_logger(__name__)

RULES_KEY = "rules"
TEMPLATES_KEY = "templates"


def read_records(path: Path, key: str) -> list[dict[str, Any]]:
    """Read the record list stored under ``key``.

    Raises:
        RuleStoreUnavailableError: If the file cannot be read or parsed.
    """
    if not path.exists():
        return []
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as exc:
        raise RuleStoreUnavailableError(str(path), str(exc)) from exc

    if data is None:
        return []
    if not isinstance(data, dict):
        raise RuleStoreUnavailableError(str(path), "top level must be a mapping")
    records = data.get(key) or []
    if not isinstance(records, list):
        raise RuleStoreUnavailableError(str(path), f"'{key}' must be a list")
    return [record for record in records if isinstance(record, dict)]


def write_records(path: Path, key: str, records: list[dict[str, Any]]) -> None:
    """Replace the record list stored under ``key``.

    Raises:
        RuleStoreUnavailableError: If the file cannot be written.
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump({key: records}, f, sort_keys=False, allow_unicode=True)
    except OSError as exc:
        raise RuleStoreUnavailableError(str(path), str(exc)) from exc


class YamlClassificationRuleStore(ClassificationRuleRepositoryProtocol):
    """Classification rules persisted in a YAML file."""

    def __init__(self, path: Path | str) -> None:
        """Initialize the store.

        Args:
            path: YAML file holding the rule records.
        """
        self._path = Path(path)
        self._log = logger.bind(component="rule_store", path=str(self._path))

    def _load(self) -> tuple[list[ClassificationRule], list[dict[str, Any]]]:
        """Decode the stored records.

        Returns:
            The decoded rules, and the raw records that could not be decoded.
            Writes carry the raw records through unchanged.
        """
        rules: list[ClassificationRule] = []
        undecodable: list[dict[str, Any]] = []
        for record in read_records(self._path, RULES_KEY):
            try:
                rules.append(rule_from_record(record))
            except RoutingEngineError as exc:
                undecodable.append(record)
                self._log.warning(
                    "rule_record_skipped",
                    record_id=record.get("id"),
                    error_type=type(exc).__name__,
                    error=str(exc),
                )
        return rules, undecodable

    def _save(
        self, rules: list[ClassificationRule], undecodable: list[dict[str, Any]]
    ) -> None:
        records = [rule_to_record(rule) for rule in rules]
        write_records(self._path, RULES_KEY, records + undecodable)

    async def list_rules(self, rule_filter: RuleFilter | None = None) -> list[ClassificationRule]:
        """List rules passing the filter, ordered by sort order then id."""
        rules, _ = self._load()
        if rule_filter is not None:
            rules = [rule for rule in rules if rule_filter.matches(rule)]
        return sorted(rules, key=lambda rule: (rule.sort_order, rule.id or 0))

    async def get_rule(self, rule_id: int) -> ClassificationRule | None:
        """Retrieve a rule by id."""
        rules, _ = self._load()
        return next((rule for rule in rules if rule.id == rule_id), None)

    async def create_rule(self, rule: ClassificationRule) -> ClassificationRule:
        """Append a rule with the next free id.

        Ids held by undecodable records count as taken.
        """
        rules, undecodable = self._load()
        taken = [r.id or 0 for r in rules] + [
            record["id"] for record in undecodable if _is_int_id(record.get("id"))
        ]
        next_id = max(taken, default=0) + 1
        created = rule.with_id(next_id)
        rules.append(created)
        self._save(rules, undecodable)
        self._log.debug("rule_record_written", rule_id=next_id)
        return created

    async def update_rule(self, rule_id: int, patch: RulePatch) -> ClassificationRule:
        """Apply a patch to a stored rule."""
        rules, undecodable = self._load()
        for index, rule in enumerate(rules):
            if rule.id == rule_id:
                updated = patch.apply_to(rule)
                rules[index] = updated
                self._save(rules, undecodable)
                return updated
        raise RuleNotFoundError(rule_id)

    async def delete_rule(self, rule_id: int) -> None:
        """Remove a rule from the file."""
        rules, undecodable = self._load()
        remaining = [rule for rule in rules if rule.id != rule_id]
        if len(remaining) == len(rules):
            raise RuleNotFoundError(rule_id)
        self._save(remaining, undecodable)


def _is_int_id(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class YamlTaskTemplateStore(TaskTemplateRepositoryProtocol):
    """Task library templates read from a YAML file."""

    def __init__(self, path: Path | str) -> None:
        """Initialize the store.

        Args:
            path: YAML file holding the template records.
        """
        self._path = Path(path)
        self._log = logger.bind(component="template_store", path=str(self._path))

    def _load(self) -> list[TaskLibraryTemplate]:
        templates: list[TaskLibraryTemplate] = []
        for record in read_records(self._path, TEMPLATES_KEY):
            try:
                templates.append(template_from_record(record))
            except RoutingEngineError as exc:
                self._log.warning(
                    "template_record_skipped",
                    record_id=record.get("id"),
                    error_type=type(exc).__name__,
                    error=str(exc),
                )
        return templates

    async def list_templates(
        self, template_filter: TemplateFilter | None = None
    ) -> list[TaskLibraryTemplate]:
        """List templates passing the filter, ordered by sort order."""
        templates = self._load()
        if template_filter is not None:
            templates = [t for t in templates if template_filter.matches(t)]
        return sorted(templates, key=lambda t: (t.sort_order, t.id or 0))

    async def get_template(self, template_id: int) -> TaskLibraryTemplate | None:
        """Retrieve a template by id."""
        return next((t for t in self._load() if t.id == template_id), None)

    def save_templates(self, templates: list[TaskLibraryTemplate]) -> None:
        """Replace the stored library (used when importing a library)."""
        write_records(
            self._path, TEMPLATES_KEY, [template_to_record(t) for t in templates]
        )
