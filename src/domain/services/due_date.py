"""Due-date arithmetic.

The stored days offset is a magnitude; the direction comes from the
offset type:

- before-start: anchor - |days|
- on-start: anchor
- after-start: anchor + |days|
"""

from __future__ import annotations

from datetime import date, datetime, timedelta

from src.domain.errors.task import InvalidAnchorDateError
from src.domain.models.routing_policy import OffsetType


def normalize_anchor_date(anchor: object) -> date:
    """Validate an anchor date supplied by a caller.

    Datetimes are reduced to their calendar date.

    Raises:
        InvalidAnchorDateError: If the value is not a date.
    """
    if isinstance(anchor, datetime):
        return anchor.date()
    if isinstance(anchor, date):
        return anchor
    raise InvalidAnchorDateError(anchor)


def compute_due_date(anchor: date, offset_type: OffsetType, days_offset: int) -> date:
    """Compute a due date from an anchor date and an offset.

    Examples:
        >>> compute_due_date(date(2025, 3, 10), OffsetType.BEFORE_START, 5)
        datetime.date(2025, 3, 5)
        >>> compute_due_date(date(2025, 3, 10), OffsetType.AFTER_START, 7)
        datetime.date(2025, 3, 17)
    """
    days = abs(days_offset)
    if offset_type == OffsetType.BEFORE_START:
        return anchor - timedelta(days=days)
    if offset_type == OffsetType.AFTER_START:
        return anchor + timedelta(days=days)
    return anchor
