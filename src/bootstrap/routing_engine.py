"""Bootstrap wiring for the routing engine.

Builds the engine once per session: store adapters (YAML files or
in-memory stubs), the resolver (which validates the default policy
table), the merger, rule administration and the checklist builder.
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from src.application.ports.classification_rule_repository import (
    ClassificationRuleRepositoryProtocol,
)
from src.application.ports.org_directory import OrgDirectoryProtocol
from src.application.ports.task_persistence import TaskPersistenceProtocol
from src.application.ports.task_template_repository import (
    TaskTemplateRepositoryProtocol,
)
from src.application.services.checklist_builder_service import ChecklistBuilderService
from src.application.services.classification_rule_admin_service import (
    ClassificationRuleAdminService,
)
from src.application.services.rule_resolver_service import RuleResolverService
from src.application.services.task_template_merger import TaskTemplateMerger
from src.bootstrap.logging import configure_logging
from src.config.routing_config import RoutingEngineConfig
from src.infrastructure.adapters.rule_store import (
    YamlClassificationRuleStore,
    YamlTaskTemplateStore,
)
from src.infrastructure.stubs.classification_rule_repository_stub import (
    ClassificationRuleRepositoryStub,
)
from src.infrastructure.stubs.task_persistence_stub import TaskPersistenceStub
from src.infrastructure.stubs.task_template_repository_stub import (
    TaskTemplateRepositoryStub,
)

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class RoutingEngine:
    """The wired engine services."""

    config: RoutingEngineConfig
    rules: ClassificationRuleRepositoryProtocol
    templates: TaskTemplateRepositoryProtocol
    resolver: RuleResolverService
    merger: TaskTemplateMerger
    rule_admin: ClassificationRuleAdminService
    checklist_builder: ChecklistBuilderService


_engine: RoutingEngine | None = None


def _rule_repository(config: RoutingEngineConfig) -> ClassificationRuleRepositoryProtocol:
    if config.rule_store_path is not None:
        return YamlClassificationRuleStore(config.rule_store_path)
    return ClassificationRuleRepositoryStub()


def _template_repository(config: RoutingEngineConfig) -> TaskTemplateRepositoryProtocol:
    if config.template_store_path is not None:
        return YamlTaskTemplateStore(config.template_store_path)
    return TaskTemplateRepositoryStub()


async def build_routing_engine(
    config: RoutingEngineConfig | None = None,
    *,
    rules: ClassificationRuleRepositoryProtocol | None = None,
    templates: TaskTemplateRepositoryProtocol | None = None,
    persistence: TaskPersistenceProtocol | None = None,
    org_directory: OrgDirectoryProtocol | None = None,
    configure_logs: bool = True,
) -> RoutingEngine:
    """Wire the engine.

    Args:
        config: Engine configuration; read from the environment when None.
        rules: Rule store to use instead of the configured one.
        templates: Template store to use instead of the configured one.
        persistence: Task persistence; the in-memory stub when None.
        org_directory: Manager lookups; disabled when None.
        configure_logs: Configure structlog for the config's environment.

    Returns:
        The wired engine.

    Raises:
        DefaultPolicyIncompleteError: If the default policy table has gaps.
        RuleStoreUnavailableError: If seeding is enabled and the store fails.
    """
    config = config or RoutingEngineConfig.from_environment()
    if configure_logs:
        configure_logging(config)

    rules = rules if rules is not None else _rule_repository(config)
    templates = templates if templates is not None else _template_repository(config)
    resolver = RuleResolverService(rules)
    merger = TaskTemplateMerger()
    rule_admin = ClassificationRuleAdminService(rules)
    checklist_builder = ChecklistBuilderService(
        resolver=resolver,
        template_repository=templates,
        persistence=persistence if persistence is not None else TaskPersistenceStub(),
        org_directory=org_directory,
        merger=merger,
    )

    if config.seed_default_rules:
        await rule_admin.seed_default_rules()

    logger.info(
        "routing_engine_started",
        environment=config.environment,
        rule_store=str(config.rule_store_path) if config.rule_store_path else "memory",
        template_store=(
            str(config.template_store_path) if config.template_store_path else "memory"
        ),
    )
    return RoutingEngine(
        config=config,
        rules=rules,
        templates=templates,
        resolver=resolver,
        merger=merger,
        rule_admin=rule_admin,
        checklist_builder=checklist_builder,
    )


async def get_routing_engine() -> RoutingEngine:
    """Get the routing engine, building it from the environment on first use."""
    global _engine
    if _engine is None:
        _engine = await build_routing_engine()
    return _engine


def set_routing_engine(engine: RoutingEngine) -> None:
    """Set a custom routing engine."""
    global _engine
    _engine = engine


def reset_routing_engine() -> None:
    """Reset the routing engine singleton."""
    global _engine
    _engine = None


__all__ = [
    "RoutingEngine",
    "build_routing_engine",
    "get_routing_engine",
    "reset_routing_engine",
    "set_routing_engine",
]
