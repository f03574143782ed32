"""Classification rule domain errors.

Errors for rule validation and rule administration. Resolution never
raises these for repository problems; only administration operations and
caller input validation do.
"""

from __future__ import annotations

from src.domain.exceptions import RoutingEngineError


class InvalidRuleError(RoutingEngineError, ValueError):
    """Raised when a classification rule is structurally invalid.

    Attributes:
        reason: Why the rule was rejected.
    """

    def __init__(self, reason: str) -> None:
        """Initialize with the rejection reason.

        Args:
            reason: Why the rule was rejected.
        """
        super().__init__(f"Invalid classification rule: {reason}")
        self.reason = reason


class RuleNotFoundError(RoutingEngineError):
    """Raised when an administration operation targets a missing rule.

    Attributes:
        rule_id: The id that could not be found.
    """

    def __init__(self, rule_id: int) -> None:
        """Initialize with the missing rule id.

        Args:
            rule_id: The id that could not be found.
        """
        super().__init__(f"Classification rule not found: {rule_id}")
        self.rule_id = rule_id


class ImmutableRuleFieldError(RoutingEngineError):
    """Raised when an update tries to change a rule's classification.

    The classification of a rule is fixed at creation. Re-targeting a rule
    must be done by deactivating it and creating a new one.

    Attributes:
        rule_id: The rule that was being updated.
        field_name: The immutable field the update tried to change.
    """

    def __init__(self, rule_id: int, field_name: str = "classification") -> None:
        """Initialize with the rule id and the immutable field name.

        Args:
            rule_id: The rule that was being updated.
            field_name: The immutable field the update tried to change.
        """
        super().__init__(
            f"Field '{field_name}' of classification rule {rule_id} "
            "cannot be changed after creation"
        )
        self.rule_id = rule_id
        self.field_name = field_name


class RuleStoreUnavailableError(RoutingEngineError):
    """Raised by rule/template store adapters when the backing store fails.

    Resolution absorbs this error and falls back to the default policy.
    Administration operations let it propagate.

    Attributes:
        source: Description of the store that failed (path, name).
        reason: Underlying failure description.
    """

    def __init__(self, source: str, reason: str) -> None:
        """Initialize with the failing store and reason.

        Args:
            source: Description of the store that failed.
            reason: Underlying failure description.
        """
        super().__init__(f"Rule store unavailable ({source}): {reason}")
        self.source = source
        self.reason = reason
