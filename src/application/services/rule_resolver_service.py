"""Rule resolver service.

Resolves routing for one classification (find_rule / resolve_routing) or
for a set of classifications with a single rule fetch (resolve_batch).

Resolution Policy:
- Classification values are parsed at the boundary; unknown values raise
  UnknownClassificationError and are never defaulted
- The effective rule is the one with the highest specificity, then the
  lowest sort order, then the lowest id
- No matching rule -> default policy entry
- Rule store failures are logged and treated as "no rules" (fail-open)
- The default policy table is validated once, when the service is built
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from src.application.ports.classification_rule_repository import (
    ClassificationRuleRepositoryProtocol,
    RuleFilter,
)
from src.application.services.base import LoggingMixin
from src.domain.models.classification import ProcessType, TaskClassification
from src.domain.models.classification_rule import ClassificationRule
from src.domain.models.resolved_routing import ResolvedRouting
from src.domain.models.routing_policy import PersonIdentity
from src.domain.services.default_policy import (
    DEFAULT_POLICY_TABLE,
    DefaultPolicyEntry,
    default_policy_for,
    validate_default_policy,
)
from src.domain.services.routing_materializer import materialize
from src.domain.services.rule_selection import build_rule_lookup


class RuleResolverService(LoggingMixin):
    """Classification rule resolution with default-policy fallback.

    Constructed once per session and injected wherever routing is needed.
    Holds no per-call state.
    """

    def __init__(
        self,
        rule_repository: ClassificationRuleRepositoryProtocol,
        default_policy: Mapping[TaskClassification, DefaultPolicyEntry] = DEFAULT_POLICY_TABLE,
    ) -> None:
        """Initialize the resolver.

        Args:
            rule_repository: Rule Store read access.
            default_policy: Fallback table; must cover every classification.

        Raises:
            DefaultPolicyIncompleteError: If the fallback table has gaps.
        """
        validate_default_policy(default_policy)
        self._rules = rule_repository
        self._default_policy = default_policy
        self._init_logger(component="routing")

    async def find_rule(
        self,
        classification: TaskClassification | str,
        process_type: ProcessType | None = None,
        department: str | None = None,
    ) -> ClassificationRule | None:
        """Find the effective rule for a classification in a context.

        Args:
            classification: Classification member or code.
            process_type: Process the task belongs to, if known.
            department: Department of the subject person, if known.

        Returns:
            The effective rule, or None when the default policy applies.

        Raises:
            UnknownClassificationError: If the classification is unknown.
        """
        parsed = TaskClassification.parse(classification)
        rules = await self._fetch_rules(
            RuleFilter(
                classification=parsed,
                process_type=process_type,
                department=department,
                is_active=True,
            ),
            operation="find_rule",
        )
        return build_rule_lookup(rules, process_type, department).get(parsed)

    async def resolve_routing(
        self,
        classification: TaskClassification | str,
        process_type: ProcessType | None = None,
        department: str | None = None,
        manager: PersonIdentity | None = None,
    ) -> ResolvedRouting:
        """Resolve the routing for one classification.

        Args:
            classification: Classification member or code.
            process_type: Process the task belongs to, if known.
            department: Department of the subject person, if known.
            manager: Manager identity for Manager assignees/approvers.

        Returns:
            A complete routing from the effective rule or the default policy.

        Raises:
            UnknownClassificationError: If the classification is unknown.
        """
        parsed = TaskClassification.parse(classification)
        rule = await self.find_rule(parsed, process_type, department)
        routing = self._materialize(parsed, rule, manager)
        self._log.debug(
            "routing_resolved",
            classification=parsed.value,
            source=routing.source.value,
            rule_id=routing.rule_id,
        )
        return routing

    async def resolve_batch(
        self,
        classifications: Iterable[TaskClassification | str],
        process_type: ProcessType | None = None,
        department: str | None = None,
        manager: PersonIdentity | None = None,
    ) -> dict[TaskClassification, ResolvedRouting]:
        """Resolve routings for several classifications with one rule fetch.

        The result for each classification is the same as resolve_routing
        would return for it alone against the same rules.

        Args:
            classifications: Classification members or codes.
            process_type: Process the tasks belong to, if known.
            department: Department of the subject person, if known.
            manager: Manager identity for Manager assignees/approvers.

        Returns:
            Mapping of classification to routing.

        Raises:
            UnknownClassificationError: If any classification is unknown.
                Nothing is fetched in that case.
        """
        requested = list(dict.fromkeys(TaskClassification.parse(c) for c in classifications))
        log = self._log_operation("resolve_batch", count=len(requested))
        if not requested:
            return {}

        rules = await self._fetch_rules(
            RuleFilter(process_type=process_type, department=department, is_active=True),
            operation="resolve_batch",
        )
        lookup = build_rule_lookup(rules, process_type, department)

        results = {
            classification: self._materialize(
                classification, lookup.get(classification), manager
            )
            for classification in requested
        }
        log.info(
            "batch_routing_resolved",
            from_rules=sum(1 for routing in results.values() if routing.is_from_rule),
            from_default_policy=sum(
                1 for routing in results.values() if not routing.is_from_rule
            ),
        )
        return results

    def _materialize(
        self,
        classification: TaskClassification,
        rule: ClassificationRule | None,
        manager: PersonIdentity | None,
    ) -> ResolvedRouting:
        source = rule if rule is not None else default_policy_for(
            classification, self._default_policy
        )
        return materialize(source, classification, manager)

    async def _fetch_rules(
        self, rule_filter: RuleFilter, operation: str
    ) -> list[ClassificationRule]:
        try:
            return list(await self._rules.list_rules(rule_filter))
        except Exception as exc:
            self._log.warning(
                "rule_store_unavailable_using_default_policy",
                operation=operation,
                error_type=type(exc).__name__,
                error=str(exc),
            )
            return []
