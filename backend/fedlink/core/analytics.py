"""Instance Analytics — pure aggregation over rows already loaded by the shell.

Invariants:
    - All functions are PURE: `now` is always passed in, never read from the clock
    - Time series always contain exactly `days` points, oldest first, ending on `now`'s date
    - Buckets are calendar days in UTC, labelled MM/DD
    - Federation counts use FederationStatus values only (no free-form strings)

Design Decisions:
    - Inputs are sequences of objects with `created_at` (duck-typed rows): keeps core free of ORM imports
"""

from collections import Counter
from datetime import date, datetime, timedelta
from typing import Any, Iterable, Sequence

from fedlink.core.domain_types import FederationStatus
from fedlink.core.enforce_intervals import as_utc


def _label(day: date) -> str:
    return day.strftime("%m/%d")


def time_series(rows: Iterable[Any], days: int, now: datetime) -> list[dict]:
    """Count rows per UTC day over the last `days` days."""
    today = as_utc(now).date()
    first = today - timedelta(days=days - 1)
    counts = Counter(
        d for d in (as_utc(r.created_at).date() for r in rows) if first <= d <= today
    )
    return [
        {"date": _label(first + timedelta(days=i)), "count": counts.get(first + timedelta(days=i), 0)}
        for i in range(days)
    ]


def count_recent(rows: Iterable[Any], days: int, now: datetime) -> int:
    cutoff = as_utc(now) - timedelta(days=days)
    return sum(1 for r in rows if as_utc(r.created_at) >= cutoff)


def active_actor_ids(activities: Iterable[Any], days: int, now: datetime) -> set[int]:
    """Distinct actor ids with at least one activity in the last `days` days."""
    cutoff = as_utc(now) - timedelta(days=days)
    return {
        a.actor_id for a in activities
        if a.actor_id is not None and as_utc(a.created_at) >= cutoff
    }


def counts_by_type(activities: Iterable[Any]) -> dict[str, int]:
    return dict(Counter((a.type or "Unknown") for a in activities))


def federation_metrics(federations: Sequence[Any]) -> dict[str, int]:
    by_status = Counter(f.status for f in federations)
    return {
        "total": len(federations),
        "approved": by_status.get(FederationStatus.APPROVED.value, 0),
        "pending": by_status.get(FederationStatus.PENDING.value, 0),
        "rejected": by_status.get(FederationStatus.REJECTED.value, 0),
    }


def federation_stats(federations: Sequence[Any]) -> list[dict]:
    metrics = federation_metrics(federations)
    return [
        {"name": "Connected", "value": metrics["approved"]},
        {"name": "Pending", "value": metrics["pending"]},
        {"name": "Rejected", "value": metrics["rejected"]},
    ]


def posts_by_type(posts: Iterable[Any]) -> list[dict]:
    posts = list(posts)
    media = sum(1 for p in posts if p.media_url)
    return [
        {"name": "Text", "value": len(posts) - media},
        {"name": "Media", "value": media},
    ]


def services_by_category(services: Iterable[Any], categories: Iterable[Any]) -> list[dict]:
    """Non-empty category buckets in catalog order, plus an Uncategorized bucket if needed."""
    per_category = Counter(s.category_id for s in services)
    result = [
        {"name": c.name, "value": per_category[c.id]}
        for c in categories if per_category.get(c.id)
    ]
    uncategorized = per_category.get(None, 0)
    if uncategorized:
        result.append({"name": "Uncategorized", "value": uncategorized})
    return result


def most_recent(rows: Iterable[Any], limit: int) -> list[Any]:
    return sorted(rows, key=lambda r: as_utc(r.created_at), reverse=True)[:limit]
