"""Services Directory Routes — categories and service listings.

Invariants:
    - Deleting a category keeps its services (category_id becomes null)
    - Service edits and deletes are owner-only
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from fedlink.api.deps import ensure_owner, require_user
from fedlink.infrastructure.database import get_db
from fedlink.models.user import User
from fedlink.repositories import ServiceRepository
from fedlink.schemas.service import (
    CategoryCreate, CategoryResponse, ServiceCreate, ServiceResponse, ServiceUpdate,
)

router = APIRouter(prefix="/api/v1", tags=["services"])


@router.post(
    "/categories", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED,
)
async def create_category(
    body: CategoryCreate,
    user: User = Depends(require_user), db: AsyncSession = Depends(get_db),
):
    return await ServiceRepository(db).create_category(body)


@router.get("/categories", response_model=list[CategoryResponse])
async def list_categories(db: AsyncSession = Depends(get_db)):
    return await ServiceRepository(db).list_categories()


@router.delete("/categories/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(
    category_id: int, user: User = Depends(require_user), db: AsyncSession = Depends(get_db),
):
    await ServiceRepository(db).delete_category(category_id)


@router.post("/services", response_model=ServiceResponse, status_code=status.HTTP_201_CREATED)
async def create_service(
    body: ServiceCreate,
    user: User = Depends(require_user), db: AsyncSession = Depends(get_db),
):
    return await ServiceRepository(db).create(user.id, body)


@router.get("/services", response_model=list[ServiceResponse])
async def search_services(
    q: str | None = Query(None, max_length=200),
    category_id: int | None = Query(None, gt=0),
    location: str | None = Query(None, max_length=200),
    db: AsyncSession = Depends(get_db),
):
    return await ServiceRepository(db).search(q, category_id, location)


@router.get("/services/{service_id}", response_model=ServiceResponse)
async def get_service(service_id: int, db: AsyncSession = Depends(get_db)):
    return await ServiceRepository(db).get(service_id)


@router.put("/services/{service_id}", response_model=ServiceResponse)
async def update_service(
    service_id: int, body: ServiceUpdate,
    user: User = Depends(require_user), db: AsyncSession = Depends(get_db),
):
    repo = ServiceRepository(db)
    ensure_owner(user, (await repo.get(service_id)).user_id, "service")
    return await repo.update(service_id, body)


@router.delete("/services/{service_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_service(
    service_id: int, user: User = Depends(require_user), db: AsyncSession = Depends(get_db),
):
    repo = ServiceRepository(db)
    ensure_owner(user, (await repo.get(service_id)).user_id, "service")
    await repo.delete(service_id)
