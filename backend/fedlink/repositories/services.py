"""Service Repository — categories and the services directory.

Invariants:
    - delete_category nulls dependent services' category_id before deleting, in one
      transaction; services are never removed with their category
    - search() matches the query against title and description, case-insensitively
"""

import logging

from sqlalchemy import delete, or_, select, update

from fedlink.models.service import Category, Service
from fedlink.repositories.base import Repository, apply_patch
from fedlink.schemas.service import CategoryCreate, ServiceCreate, ServiceUpdate

logger = logging.getLogger(__name__)

_NULLABLE = frozenset({"category_id", "price", "location"})


class ServiceRepository(Repository):
    # ─── Categories ─────────────────────────────────────────────

    async def create_category(self, data: CategoryCreate) -> Category:
        return await self.add(Category(**data.model_dump()))

    async def list_categories(self) -> list[Category]:
        result = await self.db.execute(select(Category).order_by(Category.name))
        return list(result.scalars().all())

    async def get_category(self, category_id: int) -> Category:
        return await self.fetch_or_404(Category, category_id, "Category")

    async def delete_category(self, category_id: int) -> None:
        """Uncategorise dependent services, then delete the category, in one commit."""
        await self.get_category(category_id)
        result = await self.db.execute(
            update(Service).where(Service.category_id == category_id)
            .values(category_id=None),
        )
        await self.db.execute(delete(Category).where(Category.id == category_id))
        await self.commit()
        logger.info(
            f"Category {category_id} deleted, {result.rowcount} services uncategorized",
        )

    # ─── Services ───────────────────────────────────────────────

    async def create(self, user_id: int, data: ServiceCreate) -> Service:
        """Insert a service. 404 when category_id names no category."""
        if data.category_id is not None:
            await self.get_category(data.category_id)
        return await self.add(Service(user_id=user_id, **data.model_dump()))

    async def get(self, service_id: int) -> Service:
        return await self.fetch_or_404(Service, service_id, "Service")

    async def _list(self, *criteria) -> list[Service]:
        result = await self.db.execute(
            select(Service).where(*criteria)
            .order_by(Service.created_at.desc(), Service.id.desc())
            .execution_options(populate_existing=True),
        )
        return list(result.unique().scalars().all())

    async def list_by_user(self, user_id: int) -> list[Service]:
        return await self._list(Service.user_id == user_id)

    async def list_by_category(self, category_id: int) -> list[Service]:
        return await self._list(Service.category_id == category_id)

    async def list_by_users(self, user_ids: list[int]) -> list[Service]:
        if not user_ids:
            return []
        return await self._list(Service.user_id.in_(user_ids))

    async def search(
        self, query: str | None = None, category_id: int | None = None,
        location: str | None = None,
    ) -> list[Service]:
        """Services matching every given filter, newest first."""
        criteria = []
        if query:
            pattern = f"%{query.strip().lower()}%"
            criteria.append(or_(
                Service.title.ilike(pattern), Service.description.ilike(pattern),
            ))
        if category_id is not None:
            criteria.append(Service.category_id == category_id)
        if location:
            criteria.append(Service.location.ilike(f"%{location.strip()}%"))
        return await self._list(*criteria)

    async def update(self, service_id: int, data: ServiceUpdate) -> Service:
        """Patch a service. Nullable fields may be cleared with an explicit null."""
        service = await self.get(service_id)
        patch = {
            k: v for k, v in data.model_dump(exclude_unset=True).items()
            if v is not None or k in _NULLABLE
        }
        if patch.get("category_id") is not None:
            await self.get_category(patch["category_id"])
        apply_patch(service, patch)
        await self.commit()
        return await self.get(service_id)

    async def delete(self, service_id: int) -> None:
        await self.remove(await self.get(service_id))
