"""
Domain layer - pure routing and materialization logic.

This layer contains:
- Taxonomy, rule, template and task models (immutable value objects)
- The working configuration set entity
- Domain services (rule selection, default policy, materialization,
  due-date arithmetic)
- Domain exceptions

CRITICAL: This layer must NOT import from application, infrastructure, or bootstrap.
Only stdlib and typing imports are allowed.
"""

from src.domain.errors import UnknownClassificationError
from src.domain.exceptions import RoutingEngineError
from src.domain.models import TaskClassification

__all__: list[str] = [
    "RoutingEngineError",
    "TaskClassification",
    "UnknownClassificationError",
]
