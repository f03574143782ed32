"""Routing engine configuration.

This module defines the engine's runtime configuration with environment
variable overrides.

Environment Variables:
- ROUTING_ENVIRONMENT: 'production' (JSON logs) or 'development' (console logs);
  default: production
- ROUTING_RULE_STORE_PATH: YAML file for rule records; unset = in-memory store
- ROUTING_TEMPLATE_STORE_PATH: YAML file for template records; unset = in-memory store
- ROUTING_SEED_DEFAULT_RULES: seed the default rules into an empty rule store
  (default: false)
- LOG_LEVEL: read by the logging setup (default: INFO)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

# =============================================================================
# Environments
# =============================================================================

PRODUCTION_ENVIRONMENT = "production"
DEVELOPMENT_ENVIRONMENT = "development"
VALID_ENVIRONMENTS = frozenset({PRODUCTION_ENVIRONMENT, DEVELOPMENT_ENVIRONMENT})

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


def _get_bool_env(key: str, default: bool) -> bool:
    """Get boolean environment variable with default.

    Args:
        key: Environment variable name.
        default: Default value if not set or unparsable.

    Returns:
        Parsed boolean value or default.
    """
    value = os.environ.get(key)
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    return default


def _get_path_env(key: str) -> Path | None:
    """Get a path environment variable; empty or unset means None."""
    value = os.environ.get(key, "").strip()
    return Path(value) if value else None


@dataclass(frozen=True)
class RoutingEngineConfig:
    """Runtime configuration of the routing engine.

    Attributes:
        environment: Logging environment (production or development).
        rule_store_path: YAML rule store, None for the in-memory store.
        template_store_path: YAML template store, None for the in-memory store.
        seed_default_rules: Seed the default rules into an empty rule store.
    """

    environment: str = PRODUCTION_ENVIRONMENT
    rule_store_path: Path | None = None
    template_store_path: Path | None = None
    seed_default_rules: bool = False

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.environment not in VALID_ENVIRONMENTS:
            raise ValueError(
                f"environment must be one of {sorted(VALID_ENVIRONMENTS)}, "
                f"got {self.environment!r}"
            )

    @property
    def uses_file_stores(self) -> bool:
        """True when either store is file-backed."""
        return self.rule_store_path is not None or self.template_store_path is not None

    @classmethod
    def from_environment(cls) -> RoutingEngineConfig:
        """Create config from environment variables with defaults.

        Returns:
            RoutingEngineConfig with values from environment or defaults.
        """
        environment = os.environ.get("ROUTING_ENVIRONMENT", "").strip().lower()
        if environment not in VALID_ENVIRONMENTS:
            environment = PRODUCTION_ENVIRONMENT

        return cls(
            environment=environment,
            rule_store_path=_get_path_env("ROUTING_RULE_STORE_PATH"),
            template_store_path=_get_path_env("ROUTING_TEMPLATE_STORE_PATH"),
            seed_default_rules=_get_bool_env("ROUTING_SEED_DEFAULT_RULES", False),
        )


# Default production config (in-memory stores, JSON logs)
DEFAULT_ROUTING_CONFIG = RoutingEngineConfig()

# Development config with console logs and seeded rules
DEVELOPMENT_ROUTING_CONFIG = RoutingEngineConfig(
    environment=DEVELOPMENT_ENVIRONMENT,
    seed_default_rules=True,
)
