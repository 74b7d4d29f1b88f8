"""Instance Analytics Service — loads instance-scoped rows and hands them to core/analytics.

Invariants:
    - Scope: members of the instance (admin + activity-log actors), their posts and
      services, the instance's activity log and its outgoing federation edges
    - Every function takes `now` so results are reproducible in tests
"""

from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from fedlink.core import analytics
from fedlink.core.domain_types import TimeRange
from fedlink.models.instance import Instance
from fedlink.repositories import (
    InstanceRepository, PostRepository, ServiceRepository, UserRepository,
)
from fedlink.schemas.instance import FederationResponse

OVERVIEW_DAYS = 30
RECENT_CONNECTIONS = 5


async def _members(db: AsyncSession, instance: Instance):
    member_ids = await InstanceRepository(db).list_member_ids(instance.id)
    return member_ids, await UserRepository(db).list_by_ids(member_ids)


async def overview(db: AsyncSession, instance: Instance, now: datetime) -> dict:
    _, users = await _members(db, instance)
    instances = InstanceRepository(db)
    activities = await instances.list_activities(instance.id)
    federations = await instances.list_federations(instance.id)
    return {
        "users": {
            "total": len(users),
            "growth": analytics.time_series(users, OVERVIEW_DAYS, now),
        },
        "activities": {
            "total": len(activities),
            "by_type": analytics.counts_by_type(activities),
            "recent": analytics.time_series(activities, OVERVIEW_DAYS, now),
        },
        "federation": analytics.federation_metrics(federations),
        "instance": {
            "name": instance.name,
            "created_at": instance.created_at.isoformat(),
            "domain": instance.domain,
        },
    }


async def users_report(
    db: AsyncSession, instance: Instance, time_range: TimeRange, now: datetime,
) -> dict:
    member_ids, users = await _members(db, instance)
    days = time_range.days_in_range
    activities = await InstanceRepository(db).list_activities(instance.id)
    recent_actors = analytics.active_actor_ids(activities, days, now)
    return {
        "total_users": len(users),
        "active_users": len(recent_actors & set(member_ids)),
        "new_users": analytics.count_recent(users, days, now),
        "users_over_time": analytics.time_series(users, days, now),
    }


async def posts_report(
    db: AsyncSession, instance: Instance, time_range: TimeRange, now: datetime,
) -> dict:
    member_ids, _ = await _members(db, instance)
    posts = await PostRepository(db).list_by_users(member_ids)
    return {
        "total_posts": len(posts),
        "posts_over_time": analytics.time_series(posts, time_range.days_in_range, now),
        "posts_by_type": analytics.posts_by_type(posts),
    }


async def services_report(
    db: AsyncSession, instance: Instance, time_range: TimeRange, now: datetime,
) -> dict:
    member_ids, _ = await _members(db, instance)
    repo = ServiceRepository(db)
    services = await repo.list_by_users(member_ids)
    categories = await repo.list_categories()
    return {
        "total_services": len(services),
        "services_over_time": analytics.time_series(services, time_range.days_in_range, now),
        "services_by_category": analytics.services_by_category(services, categories),
    }


async def federation_report(db: AsyncSession, instance: Instance) -> dict:
    federations = await InstanceRepository(db).list_federations(instance.id)
    return {
        "total_connections": len(federations),
        "federation_stats": analytics.federation_stats(federations),
        "recent_connections": [
            FederationResponse.model_validate(f).model_dump(mode="json")
            for f in analytics.most_recent(federations, RECENT_CONNECTIONS)
        ],
    }
