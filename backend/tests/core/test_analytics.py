"""Instance Analytics — verifies pure aggregation over duck-typed rows.

Tests:
    - time_series has exactly `days` buckets ending today, oldest first
    - Rows outside the window are not counted
    - Federation and post breakdowns use fixed labels
"""

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

from fedlink.core import analytics

NOW = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)


def row(days_ago: float, **fields):
    return SimpleNamespace(created_at=NOW - timedelta(days=days_ago), **fields)


def test_time_series_shape_and_counts():
    rows = [row(0), row(0.1), row(2), row(30)]
    series = analytics.time_series(rows, 7, NOW)
    assert len(series) == 7
    assert series[-1] == {"date": "03/10", "count": 2}
    assert series[0]["date"] == "03/04"
    assert sum(p["count"] for p in series) == 3


def test_count_recent_and_active_actors():
    rows = [row(1, actor_id=1), row(3, actor_id=2), row(40, actor_id=3), row(1, actor_id=None)]
    assert analytics.count_recent(rows, 7, NOW) == 3
    assert analytics.active_actor_ids(rows, 7, NOW) == {1, 2}


def test_counts_by_type_labels_missing_type():
    rows = [SimpleNamespace(type="Create"), SimpleNamespace(type="Create"), SimpleNamespace(type=None)]
    assert analytics.counts_by_type(rows) == {"Create": 2, "Unknown": 1}


def test_federation_breakdown():
    feds = [SimpleNamespace(status=s) for s in ("approved", "pending", "pending", "rejected")]
    assert analytics.federation_metrics(feds) == {
        "total": 4, "approved": 1, "pending": 2, "rejected": 1,
    }
    assert analytics.federation_stats(feds) == [
        {"name": "Connected", "value": 1},
        {"name": "Pending", "value": 2},
        {"name": "Rejected", "value": 1},
    ]


def test_posts_by_type_splits_media():
    posts = [SimpleNamespace(media_url=None), SimpleNamespace(media_url="http://x/img.png")]
    assert analytics.posts_by_type(posts) == [
        {"name": "Text", "value": 1}, {"name": "Media", "value": 1},
    ]


def test_services_by_category_adds_uncategorized():
    cats = [SimpleNamespace(id=1, name="Design"), SimpleNamespace(id=2, name="Legal")]
    services = [SimpleNamespace(category_id=1), SimpleNamespace(category_id=None)]
    assert analytics.services_by_category(services, cats) == [
        {"name": "Design", "value": 1}, {"name": "Uncategorized", "value": 1},
    ]


def test_most_recent_orders_newest_first():
    rows = [row(5, id=1), row(1, id=2), row(3, id=3)]
    assert [r.id for r in analytics.most_recent(rows, 2)] == [2, 3]
