"""Profile History Routes — create, edit and delete work experiences and educations.

Invariants:
    - Every mutation requires a session; edits and deletes are owner-only
    - current=True with an end_date is rejected with 400, on create and on update
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from fedlink.api.deps import ensure_owner, require_user
from fedlink.infrastructure.database import get_db
from fedlink.models.user import User
from fedlink.repositories import ProfileRepository
from fedlink.schemas.profile import (
    EducationCreate, EducationResponse, EducationUpdate,
    WorkExperienceCreate, WorkExperienceResponse, WorkExperienceUpdate,
)

router = APIRouter(prefix="/api/v1", tags=["profile"])


@router.post(
    "/work-experiences", response_model=WorkExperienceResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_work_experience(
    body: WorkExperienceCreate,
    user: User = Depends(require_user), db: AsyncSession = Depends(get_db),
):
    return await ProfileRepository(db).create_work_experience(user.id, body)


@router.put("/work-experiences/{row_id}", response_model=WorkExperienceResponse)
async def update_work_experience(
    row_id: int, body: WorkExperienceUpdate,
    user: User = Depends(require_user), db: AsyncSession = Depends(get_db),
):
    repo = ProfileRepository(db)
    ensure_owner(user, (await repo.get_work_experience(row_id)).user_id, "work experience")
    return await repo.update_work_experience(row_id, body)


@router.delete("/work-experiences/{row_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_work_experience(
    row_id: int, user: User = Depends(require_user), db: AsyncSession = Depends(get_db),
):
    repo = ProfileRepository(db)
    ensure_owner(user, (await repo.get_work_experience(row_id)).user_id, "work experience")
    await repo.delete_work_experience(row_id)


@router.post(
    "/educations", response_model=EducationResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_education(
    body: EducationCreate,
    user: User = Depends(require_user), db: AsyncSession = Depends(get_db),
):
    return await ProfileRepository(db).create_education(user.id, body)


@router.put("/educations/{row_id}", response_model=EducationResponse)
async def update_education(
    row_id: int, body: EducationUpdate,
    user: User = Depends(require_user), db: AsyncSession = Depends(get_db),
):
    repo = ProfileRepository(db)
    ensure_owner(user, (await repo.get_education(row_id)).user_id, "education")
    return await repo.update_education(row_id, body)


@router.delete("/educations/{row_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_education(
    row_id: int, user: User = Depends(require_user), db: AsyncSession = Depends(get_db),
):
    repo = ProfileRepository(db)
    ensure_owner(user, (await repo.get_education(row_id)).user_id, "education")
    await repo.delete_education(row_id)
