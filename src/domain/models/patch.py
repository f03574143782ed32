"""Explicit "leave unchanged" marker for partial updates.

Patch types (TaskPatch, RulePatch) default every field to UNSET. A field
explicitly set to None therefore means "clear this value", which keeps
nullable fields (an assignee, an approver) unambiguous.
"""

from __future__ import annotations

from dataclasses import fields
from enum import Enum
from typing import Any, Final


class Unset(Enum):
    """Single-member enum used as the UNSET sentinel type."""

    UNSET = "UNSET"

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Final = Unset.UNSET


def is_set(value: object) -> bool:
    """True when a patch field carries a value (including None)."""
    return value is not UNSET


def set_fields(patch: Any) -> dict[str, Any]:
    """Collect the fields of a patch dataclass that are not UNSET.

    Args:
        patch: A dataclass instance whose fields default to UNSET.

    Returns:
        Mapping of field name to value for every set field.
    """
    return {
        f.name: getattr(patch, f.name)
        for f in fields(patch)
        if getattr(patch, f.name) is not UNSET
    }
