"""Skill Routes — skill catalog, user skills and endorsements.

Invariants:
    - Users cannot endorse their own skills (403)
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from fedlink.api.deps import require_user
from fedlink.core.errors import AuthorizationDeniedError
from fedlink.infrastructure.database import get_db
from fedlink.models.user import User
from fedlink.repositories import SkillRepository
from fedlink.schemas.skill import (
    SkillCreate, SkillResponse, UserSkillCreate, UserSkillResponse,
)

router = APIRouter(prefix="/api/v1", tags=["skills"])


@router.post("/skills", response_model=SkillResponse, status_code=status.HTTP_201_CREATED)
async def create_skill(
    body: SkillCreate,
    user: User = Depends(require_user), db: AsyncSession = Depends(get_db),
):
    return await SkillRepository(db).create_skill(body)


@router.get("/skills", response_model=list[SkillResponse])
async def list_skills(db: AsyncSession = Depends(get_db)):
    return await SkillRepository(db).list_skills()


@router.post(
    "/user-skills", response_model=UserSkillResponse, status_code=status.HTTP_201_CREATED,
)
async def add_user_skill(
    body: UserSkillCreate,
    user: User = Depends(require_user), db: AsyncSession = Depends(get_db),
):
    return await SkillRepository(db).add_user_skill(user.id, body.skill_id)


@router.delete("/user-skills/{skill_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_user_skill(
    skill_id: int, user: User = Depends(require_user), db: AsyncSession = Depends(get_db),
):
    await SkillRepository(db).remove_user_skill(user.id, skill_id)


@router.post("/user-skills/{user_id}/{skill_id}/endorse", response_model=UserSkillResponse)
async def endorse_skill(
    user_id: int, skill_id: int,
    user: User = Depends(require_user), db: AsyncSession = Depends(get_db),
):
    if user.id == user_id:
        raise AuthorizationDeniedError("Users cannot endorse their own skills")
    return await SkillRepository(db).endorse(user_id, skill_id)
