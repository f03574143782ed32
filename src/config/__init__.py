"""Configuration module for the routing engine.

Available Configurations:
- RoutingEngineConfig: environment, store locations, default rule seeding
"""

from src.config.routing_config import (
    DEFAULT_ROUTING_CONFIG,
    DEVELOPMENT_ROUTING_CONFIG,
    RoutingEngineConfig,
)

__all__ = [
    "DEFAULT_ROUTING_CONFIG",
    "DEVELOPMENT_ROUTING_CONFIG",
    "RoutingEngineConfig",
]
