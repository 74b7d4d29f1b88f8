"""User Routes — profiles and everything listed under a user.

Invariants:
    - Reads are public; PUT / DELETE on a user are self-only (403 otherwise)
    - Deleting a user relies on storage cascades for owned rows
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from fedlink.api.deps import ensure_owner, require_user
from fedlink.infrastructure.database import get_db
from fedlink.models.user import User
from fedlink.repositories import (
    InstanceRepository, PostRepository, ProfileRepository, ServiceRepository,
    SkillRepository, UserRepository,
)
from fedlink.schemas.instance import InstanceResponse
from fedlink.schemas.post import PostResponse
from fedlink.schemas.profile import EducationResponse, WorkExperienceResponse
from fedlink.schemas.service import ServiceResponse
from fedlink.schemas.skill import UserSkillResponse
from fedlink.schemas.user import UserResponse, UserUpdate

router = APIRouter(prefix="/api/v1/users", tags=["users"])


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: int, db: AsyncSession = Depends(get_db)):
    return await UserRepository(db).get_or_404(user_id)


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: int, body: UserUpdate,
    user: User = Depends(require_user), db: AsyncSession = Depends(get_db),
):
    ensure_owner(user, user_id, "profile")
    return await UserRepository(db).update(user_id, body)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: int, user: User = Depends(require_user), db: AsyncSession = Depends(get_db),
):
    ensure_owner(user, user_id, "profile")
    await UserRepository(db).delete(user_id)


@router.get("/{user_id}/work-experiences", response_model=list[WorkExperienceResponse])
async def list_work_experiences(user_id: int, db: AsyncSession = Depends(get_db)):
    return await ProfileRepository(db).list_work_experiences_by_user(user_id)


@router.get("/{user_id}/educations", response_model=list[EducationResponse])
async def list_educations(user_id: int, db: AsyncSession = Depends(get_db)):
    return await ProfileRepository(db).list_educations_by_user(user_id)


@router.get("/{user_id}/skills", response_model=list[UserSkillResponse])
async def list_user_skills(user_id: int, db: AsyncSession = Depends(get_db)):
    return await SkillRepository(db).list_user_skills(user_id)


@router.get("/{user_id}/services", response_model=list[ServiceResponse])
async def list_user_services(user_id: int, db: AsyncSession = Depends(get_db)):
    return await ServiceRepository(db).list_by_user(user_id)


@router.get("/{user_id}/posts", response_model=list[PostResponse])
async def list_user_posts(user_id: int, db: AsyncSession = Depends(get_db)):
    return await PostRepository(db).list_by_user(user_id)


@router.get("/{user_id}/instances", response_model=list[InstanceResponse])
async def list_user_instances(user_id: int, db: AsyncSession = Depends(get_db)):
    return await InstanceRepository(db).list_by_admin(user_id)
