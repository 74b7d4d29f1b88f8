"""Open-Interval Enforcement — current/end_date rules for work experiences and educations.

Invariants:
    - All functions are PURE: no IO, no async, no DB
    - current=True with a non-null end_date is rejected (never auto-corrected)
    - end_date, when present, must not precede start_date
    - Updates are checked against the merged state (stored values + patch)
"""

from datetime import datetime, timezone
from typing import Any

from fedlink.core.errors import ValidationError


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes (SQLite drops tzinfo on read)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def check_interval(
    start_date: datetime, end_date: datetime | None, current: bool,
) -> None:
    """Raise ValidationError when the interval is inconsistent."""
    if current and end_date is not None:
        raise ValidationError(
            "An entry marked as current cannot have an end_date", field="end_date",
        )
    if end_date is not None and as_utc(end_date) < as_utc(start_date):
        raise ValidationError("end_date cannot precede start_date", field="end_date")


def merged_interval(stored: Any, patch: dict) -> tuple[datetime, datetime | None, bool]:
    """Combine stored interval fields with a partial update."""
    return (
        patch.get("start_date", stored.start_date),
        patch.get("end_date", stored.end_date),
        bool(patch.get("current", stored.current)),
    )
