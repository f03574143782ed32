"""Base exception classes for the routing engine domain layer."""


class RoutingEngineError(Exception):
    """Base exception for all domain errors.

    All domain-specific exceptions MUST inherit from this class so callers
    can separate engine failures from unrelated runtime errors.

    Concrete subclasses live in src.domain.errors:
    - UnknownClassificationError
    - DefaultPolicyIncompleteError
    - InvalidAnchorDateError
    - InvalidRuleError
    - RuleNotFoundError
    """

    def __init__(self, message: str = "") -> None:
        """Initialize the exception with an optional message.

        Args:
            message: Human-readable error description.
        """
        super().__init__(message)
