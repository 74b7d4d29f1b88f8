"""Instance Routes — instance administration, federation edges, activity log, analytics.

Invariants:
    - The creator of an instance becomes its admin
    - Instance mutations and analytics are admin-only (403 for other signed-in users)
    - Federation status changes and deletes are allowed to the admin of either endpoint
    - Analytics time_range is one of week | month | year (400 otherwise)
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from fedlink.api.deps import ensure_instance_admin, require_user
from fedlink.core.domain_types import TimeRange
from fedlink.core.errors import AuthorizationDeniedError
from fedlink.infrastructure.database import get_db
from fedlink.models.instance import FederatedInstance, Instance
from fedlink.models.user import User
from fedlink.repositories import InstanceRepository
from fedlink.schemas.instance import (
    ActivityResponse, FederationCreate, FederationResponse, FederationStatusUpdate,
    InstanceCreate, InstanceResponse, InstanceUpdate, RecentActivityResponse,
)
from fedlink.services import instance_analytics

router = APIRouter(prefix="/api/v1", tags=["instances"])


def _now() -> datetime:
    return datetime.now(timezone.utc)


async def _administered(db: AsyncSession, instance_id: int, user: User, action: str) -> Instance:
    instance = await InstanceRepository(db).get(instance_id)
    ensure_instance_admin(user, instance, action)
    return instance


async def _federation_for_admin(
    db: AsyncSession, federation_id: int, user: User,
) -> FederatedInstance:
    repo = InstanceRepository(db)
    edge = await repo.get_federation(federation_id)
    source = await repo.get(edge.instance_id)
    if user.id not in (source.admin_id, edge.fed_with_instance.admin_id):
        raise AuthorizationDeniedError("Not authorized to manage this federation")
    return edge


@router.post("/instances", response_model=InstanceResponse, status_code=status.HTTP_201_CREATED)
async def create_instance(
    body: InstanceCreate,
    user: User = Depends(require_user), db: AsyncSession = Depends(get_db),
):
    return await InstanceRepository(db).create(user.id, body)


@router.get("/instances/{instance_id}", response_model=InstanceResponse)
async def get_instance(instance_id: int, db: AsyncSession = Depends(get_db)):
    return await InstanceRepository(db).get(instance_id)


@router.put("/instances/{instance_id}", response_model=InstanceResponse)
async def update_instance(
    instance_id: int, body: InstanceUpdate,
    user: User = Depends(require_user), db: AsyncSession = Depends(get_db),
):
    await _administered(db, instance_id, user, "update")
    return await InstanceRepository(db).update(instance_id, body)


@router.delete("/instances/{instance_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_instance(
    instance_id: int, user: User = Depends(require_user), db: AsyncSession = Depends(get_db),
):
    await _administered(db, instance_id, user, "delete")
    await InstanceRepository(db).delete(instance_id)


# ─── Federation ─────────────────────────────────────────────────

@router.post(
    "/instances/{instance_id}/federations", response_model=FederationResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_federation(
    instance_id: int, body: FederationCreate,
    user: User = Depends(require_user), db: AsyncSession = Depends(get_db),
):
    await _administered(db, instance_id, user, "federate")
    return await InstanceRepository(db).create_federation(
        instance_id, body.fed_with_instance_id,
    )


@router.get("/instances/{instance_id}/federations", response_model=list[FederationResponse])
async def list_federations(instance_id: int, db: AsyncSession = Depends(get_db)):
    repo = InstanceRepository(db)
    await repo.get(instance_id)
    return await repo.list_federations(instance_id)


@router.put("/federations/{federation_id}/status", response_model=FederationResponse)
async def update_federation_status(
    federation_id: int, body: FederationStatusUpdate,
    user: User = Depends(require_user), db: AsyncSession = Depends(get_db),
):
    await _federation_for_admin(db, federation_id, user)
    return await InstanceRepository(db).update_federation_status(federation_id, body.status)


@router.delete("/federations/{federation_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_federation(
    federation_id: int, user: User = Depends(require_user), db: AsyncSession = Depends(get_db),
):
    await _federation_for_admin(db, federation_id, user)
    await InstanceRepository(db).delete_federation(federation_id)


# ─── Activity log ───────────────────────────────────────────────

@router.get("/instances/{instance_id}/activities", response_model=list[ActivityResponse])
async def list_activities(
    instance_id: int,
    limit: int = Query(50, ge=1, le=500),
    db: AsyncSession = Depends(get_db),
):
    repo = InstanceRepository(db)
    await repo.get(instance_id)
    return await repo.list_activities(instance_id, limit)


@router.get("/activities/recent", response_model=list[RecentActivityResponse])
async def recent_activities(
    limit: int = Query(20, ge=1, le=100), db: AsyncSession = Depends(get_db),
):
    return await InstanceRepository(db).recent_activities(limit)


# ─── Analytics ──────────────────────────────────────────────────

@router.get("/instances/{instance_id}/analytics")
async def analytics_overview(
    instance_id: int, user: User = Depends(require_user), db: AsyncSession = Depends(get_db),
):
    instance = await _administered(db, instance_id, user, "view analytics for")
    return await instance_analytics.overview(db, instance, _now())


@router.get("/instances/{instance_id}/analytics/users")
async def analytics_users(
    instance_id: int, time_range: TimeRange = Query(TimeRange.WEEK),
    user: User = Depends(require_user), db: AsyncSession = Depends(get_db),
):
    instance = await _administered(db, instance_id, user, "view analytics for")
    return await instance_analytics.users_report(db, instance, time_range, _now())


@router.get("/instances/{instance_id}/analytics/posts")
async def analytics_posts(
    instance_id: int, time_range: TimeRange = Query(TimeRange.WEEK),
    user: User = Depends(require_user), db: AsyncSession = Depends(get_db),
):
    instance = await _administered(db, instance_id, user, "view analytics for")
    return await instance_analytics.posts_report(db, instance, time_range, _now())


@router.get("/instances/{instance_id}/analytics/services")
async def analytics_services(
    instance_id: int, time_range: TimeRange = Query(TimeRange.WEEK),
    user: User = Depends(require_user), db: AsyncSession = Depends(get_db),
):
    instance = await _administered(db, instance_id, user, "view analytics for")
    return await instance_analytics.services_report(db, instance, time_range, _now())


@router.get("/instances/{instance_id}/analytics/federation")
async def analytics_federation(
    instance_id: int, user: User = Depends(require_user), db: AsyncSession = Depends(get_db),
):
    instance = await _administered(db, instance_id, user, "view analytics for")
    return await instance_analytics.federation_report(db, instance)
