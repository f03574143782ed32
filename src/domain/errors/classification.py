"""Classification and default policy domain errors.

These errors represent taxonomy mismatches between a caller and the
engine. They are raised at the boundary and never converted into a
default routing.
"""

from __future__ import annotations

from collections.abc import Iterable

from src.domain.exceptions import RoutingEngineError


class UnknownClassificationError(RoutingEngineError, ValueError):
    """Raised when a value outside the classification taxonomy is supplied.

    An unrecognized classification means the caller and the engine disagree
    on the taxonomy, so the value is rejected instead of defaulted.

    Attributes:
        value: The rejected value, as received.
    """

    def __init__(self, value: object, message: str | None = None) -> None:
        """Initialize with the rejected value and optional custom message.

        Args:
            value: The value that is not a known classification.
            message: Optional custom error message.
        """
        msg = message or (
            f"Unknown task classification: {value!r}. "
            "Valid classifications are: DOC, SYS, HRD, TRN, ORI, CMP, FAC, SEC, FIN, COM"
        )
        super().__init__(msg)
        self.value = value


class DefaultPolicyIncompleteError(RoutingEngineError):
    """Raised by startup validation when the default policy table has gaps.

    Every classification must have a default routing. A missing entry is a
    configuration bug and must stop the engine from starting.

    Attributes:
        missing: Codes of the classifications without a default entry.
    """

    def __init__(self, missing: Iterable[str]) -> None:
        """Initialize with the classifications that lack a default entry.

        Args:
            missing: Classification codes without a default policy entry.
        """
        self.missing = tuple(sorted(missing))
        super().__init__(
            "Default policy table is incomplete - no entry for: "
            f"{', '.join(self.missing)}"
        )
