"""Skill Repository — skill catalog, user skills and endorsements.

Invariants:
    - A user holds a skill at most once (409 on repeat)
    - endorse() is a single UPDATE ... SET endorsements = endorsements + 1
"""

from sqlalchemy import select, update

from fedlink.core.errors import ResourceNotFoundError
from fedlink.models.skill import Skill, UserSkill
from fedlink.repositories.base import Repository
from fedlink.schemas.skill import SkillCreate


class SkillRepository(Repository):
    async def create_skill(self, data: SkillCreate) -> Skill:
        """Add a catalog skill. Names are unique (ConflictError)."""
        return await self.add(Skill(name=data.name))

    async def list_skills(self) -> list[Skill]:
        result = await self.db.execute(select(Skill).order_by(Skill.name))
        return list(result.scalars().all())

    async def get_skill(self, skill_id: int) -> Skill:
        return await self.fetch_or_404(Skill, skill_id, "Skill")

    async def add_user_skill(self, user_id: int, skill_id: int) -> UserSkill:
        """Attach a catalog skill to a user. 404 for an unknown skill, 409 if already held."""
        await self.get_skill(skill_id)
        return await self.add(UserSkill(user_id=user_id, skill_id=skill_id))

    async def list_user_skills(self, user_id: int) -> list[UserSkill]:
        """A user's skills, most endorsed first, with the skill joined."""
        result = await self.db.execute(
            select(UserSkill).where(UserSkill.user_id == user_id)
            .order_by(UserSkill.endorsements.desc(), UserSkill.id),
        )
        return list(result.unique().scalars().all())

    async def get_user_skill(self, user_id: int, skill_id: int) -> UserSkill:
        result = await self.db.execute(
            select(UserSkill)
            .where(UserSkill.user_id == user_id, UserSkill.skill_id == skill_id)
            .execution_options(populate_existing=True),
        )
        row = result.unique().scalar_one_or_none()
        if row is None:
            raise ResourceNotFoundError("UserSkill", f"{user_id}/{skill_id}")
        return row

    async def remove_user_skill(self, user_id: int, skill_id: int) -> None:
        await self.remove(await self.get_user_skill(user_id, skill_id))

    async def endorse(self, user_id: int, skill_id: int) -> UserSkill:
        """Increment endorsements in one UPDATE. 404 if the user does not hold the skill."""
        result = await self.db.execute(
            update(UserSkill)
            .where(UserSkill.user_id == user_id, UserSkill.skill_id == skill_id)
            .values(endorsements=UserSkill.endorsements + 1),
        )
        if result.rowcount == 0:
            await self.db.rollback()
            raise ResourceNotFoundError("UserSkill", f"{user_id}/{skill_id}")
        await self.commit()
        return await self.get_user_skill(user_id, skill_id)
