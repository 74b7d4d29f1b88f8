"""User Repository — identity rows, login upsert and federation identity assignment.

Invariants:
    - upsert_from_identity never creates a second row for the same username
    - Federation identity is assigned once; later calls return the stored values
"""

import logging

from sqlalchemy import select

from fedlink.core.activitypub import federation_identity
from fedlink.models.user import User
from fedlink.repositories.base import Repository, apply_patch
from fedlink.schemas.user import IdentityClaims, UserCreate, UserUpdate

logger = logging.getLogger(__name__)


class UserRepository(Repository):
    async def get(self, user_id: int) -> User | None:
        """User by id, or None."""
        return await self.fetch(User, user_id)

    async def get_or_404(self, user_id: int) -> User:
        return await self.fetch_or_404(User, user_id, "User")

    async def get_by_username(self, username: str) -> User | None:
        """Exact, case-sensitive username lookup."""
        result = await self.db.execute(select(User).where(User.username == username))
        return result.scalar_one_or_none()

    async def create(self, data: UserCreate) -> User:
        """Insert a user. Duplicate username or email raises ConflictError."""
        user = await self.add(User(**data.model_dump()))
        logger.info("User created", extra={"user_id": user.id})
        return user

    async def upsert_from_identity(self, claims: IdentityClaims) -> User:
        """Existing user for the claimed username, or a new one built from the claims."""
        existing = await self.get_by_username(claims.username)
        if existing is not None:
            return existing
        return await self.create(UserCreate(
            username=claims.username,
            email=claims.resolved_email(),
            first_name=claims.first_name,
            last_name=claims.last_name,
            bio=claims.bio,
            profile_image_url=claims.profile_image_url,
        ))

    async def update(self, user_id: int, data: UserUpdate) -> User:
        """Apply the fields present in the patch; a taken username or email raises ConflictError."""
        user = await self.get_or_404(user_id)
        apply_patch(user, data.model_dump(exclude_unset=True))
        await self.commit()
        return user

    async def delete(self, user_id: int) -> None:
        """Delete the user; owned rows go with it through ON DELETE CASCADE."""
        user = await self.get_or_404(user_id)
        await self.remove(user)
        logger.info("User deleted", extra={"user_id": user_id})

    async def set_federation_identity(self, user_id: int, domain: str) -> User:
        """Assign actor, inbox and outbox URLs on first call; later calls are no-ops."""
        user = await self.get_or_404(user_id)
        if user.actor_url:
            return user
        identity = federation_identity(domain, user.id)
        user.activity_pub_id = identity.activity_pub_id
        user.actor_url = identity.actor_url
        user.inbox_url = identity.inbox_url
        user.outbox_url = identity.outbox_url
        await self.commit()
        logger.info("Federation identity assigned", extra={"user_id": user.id})
        return user

    async def list_by_ids(self, user_ids: list[int]) -> list[User]:
        """Users for the given ids, ordered by id. Unknown ids are skipped."""
        if not user_ids:
            return []
        result = await self.db.execute(
            select(User).where(User.id.in_(user_ids)).order_by(User.id),
        )
        return list(result.scalars().all())


