"""
Domain entities for the routing engine.

Entities are objects with distinct identity that persists over time.
The working configuration set is owned by exactly one editing session.
"""

from src.domain.entities.working_configuration_set import WorkingConfigurationSet

__all__: list[str] = ["WorkingConfigurationSet"]
