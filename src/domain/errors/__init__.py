"""Domain errors for the routing engine.

Provides specific exception classes for different failure scenarios.
All exceptions inherit from RoutingEngineError.
"""

from src.domain.errors.classification import (
    DefaultPolicyIncompleteError,
    UnknownClassificationError,
)
from src.domain.errors.rule import (
    ImmutableRuleFieldError,
    InvalidRuleError,
    RuleNotFoundError,
    RuleStoreUnavailableError,
)
from src.domain.errors.task import EditingSessionClosedError, InvalidAnchorDateError

__all__: list[str] = [
    "DefaultPolicyIncompleteError",
    "EditingSessionClosedError",
    "ImmutableRuleFieldError",
    "InvalidAnchorDateError",
    "InvalidRuleError",
    "RuleNotFoundError",
    "RuleStoreUnavailableError",
    "UnknownClassificationError",
]
