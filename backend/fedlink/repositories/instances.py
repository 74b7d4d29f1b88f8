"""Instance Repository — instances, federation edges, the activity log and membership.

Invariants:
    - JSON configuration blocks are stored as validated, versioned documents
    - A federation edge never points at its own instance
    - Approving an edge upserts the reciprocal edge as approved in the same
      transaction; rejecting or resetting leaves the reverse edge untouched
    - Members of an instance are its admin plus every actor in its activity log
"""

import logging

from sqlalchemy import select

from fedlink.core.domain_types import FederationStatus
from fedlink.core.errors import ValidationError
from fedlink.core.instance_config import load_federation_rules
from fedlink.models.instance import Activity, FederatedInstance, Instance
from fedlink.repositories.base import Repository, apply_patch
from fedlink.schemas.instance import InstanceCreate, InstanceUpdate

logger = logging.getLogger(__name__)

_NULLABLE = frozenset({"description", "domain", "logo"})


class InstanceRepository(Repository):
    async def create(self, admin_id: int, data: InstanceCreate) -> Instance:
        """Create an instance administered by admin_id."""
        instance = await self.add(Instance(admin_id=admin_id, **data.model_dump(mode="json")))
        logger.info(
            f"Instance created: {instance.name}",
            extra={"instance_id": instance.id, "user_id": admin_id},
        )
        return instance

    async def get(self, instance_id: int) -> Instance:
        return await self.fetch_or_404(Instance, instance_id, "Instance")

    async def find(self, instance_id: int) -> Instance | None:
        return await self.fetch(Instance, instance_id)

    async def list_by_admin(self, admin_id: int) -> list[Instance]:
        result = await self.db.execute(
            select(Instance).where(Instance.admin_id == admin_id).order_by(Instance.id),
        )
        return list(result.scalars().all())

    async def first_administered(self, admin_id: int) -> Instance | None:
        """Lowest-id instance the user administers, or None."""
        instances = await self.list_by_admin(admin_id)
        return instances[0] if instances else None

    async def update(self, instance_id: int, data: InstanceUpdate) -> Instance:
        """Patch settings. Config blocks are replaced whole, never merged."""
        instance = await self.get(instance_id)
        patch = {
            k: v for k, v in data.model_dump(mode="json", exclude_unset=True).items()
            if v is not None or k in _NULLABLE
        }
        apply_patch(instance, patch)
        await self.commit()
        return instance

    async def delete(self, instance_id: int) -> None:
        await self.remove(await self.get(instance_id))
        logger.info("Instance deleted", extra={"instance_id": instance_id})

    # ─── Federation ─────────────────────────────────────────────

    async def create_federation(
        self, instance_id: int, fed_with_instance_id: int,
    ) -> FederatedInstance:
        """Open a pending edge to a peer the source's federation rules permit."""
        if instance_id == fed_with_instance_id:
            raise ValidationError(
                "An instance cannot federate with itself", field="fed_with_instance_id",
            )
        instance = await self.get(instance_id)
        peer = await self.get(fed_with_instance_id)
        if not load_federation_rules(instance.federation_rules).permits(peer.domain):
            raise ValidationError(
                f"Federation with '{peer.domain}' is not permitted by federation rules",
                field="fed_with_instance_id",
            )
        edge = await self.add(FederatedInstance(
            instance_id=instance_id,
            fed_with_instance_id=fed_with_instance_id,
            status=FederationStatus.PENDING.value,
        ))
        logger.info(
            f"Federation requested with instance {fed_with_instance_id}",
            extra={"instance_id": instance_id},
        )
        return edge

    async def get_federation(self, federation_id: int) -> FederatedInstance:
        return await self.fetch_or_404(FederatedInstance, federation_id, "Federation")

    async def find_federation(
        self, instance_id: int, fed_with_instance_id: int,
    ) -> FederatedInstance | None:
        result = await self.db.execute(
            select(FederatedInstance).where(
                FederatedInstance.instance_id == instance_id,
                FederatedInstance.fed_with_instance_id == fed_with_instance_id,
            ).execution_options(populate_existing=True),
        )
        return result.unique().scalar_one_or_none()

    async def list_federations(self, instance_id: int) -> list[FederatedInstance]:
        result = await self.db.execute(
            select(FederatedInstance).where(FederatedInstance.instance_id == instance_id)
            .order_by(FederatedInstance.created_at.desc(), FederatedInstance.id.desc())
            .execution_options(populate_existing=True),
        )
        return list(result.unique().scalars().all())

    async def update_federation_status(
        self, federation_id: int, status: FederationStatus,
    ) -> FederatedInstance:
        """Set an edge's status; approving also upserts the reverse edge as approved."""
        edge = await self.get_federation(federation_id)
        edge.status = status.value
        if status == FederationStatus.APPROVED:
            stmt = self.dialect_insert(FederatedInstance).values(
                instance_id=edge.fed_with_instance_id,
                fed_with_instance_id=edge.instance_id,
                status=FederationStatus.APPROVED.value,
            )
            stmt = stmt.on_conflict_do_update(
                index_elements=[
                    FederatedInstance.instance_id, FederatedInstance.fed_with_instance_id,
                ],
                set_={"status": FederationStatus.APPROVED.value},
            )
            await self.db.execute(stmt)
        await self.commit()
        logger.info(
            f"Federation {federation_id} set to {status.value}",
            extra={"instance_id": edge.instance_id},
        )
        return await self.get_federation(federation_id)

    async def delete_federation(self, federation_id: int) -> None:
        await self.remove(await self.get_federation(federation_id))

    # ─── Activity log ───────────────────────────────────────────

    async def record_activity(
        self, instance_id: int, activity_type: str, actor_id: int | None = None,
        object_id: str | None = None, target_id: str | None = None,
        payload: dict | None = None, commit: bool = True,
    ) -> Activity:
        """Append to the instance activity log. commit=False only flushes the row."""
        activity = Activity(
            instance_id=instance_id,
            type=activity_type,
            actor_id=actor_id,
            object_id=object_id,
            target_id=target_id,
            payload=payload or {},
        )
        if not commit:
            return await self.stage(activity)
        return await self.add(activity)

    async def list_activities(self, instance_id: int, limit: int | None = None) -> list[Activity]:
        """An instance's activity log, newest first."""
        stmt = (
            select(Activity).where(Activity.instance_id == instance_id)
            .order_by(Activity.created_at.desc(), Activity.id.desc())
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self.db.execute(stmt)
        return list(result.unique().scalars().all())

    async def recent_activities(self, limit: int = 20) -> list[Activity]:
        """Latest activities across every instance."""
        result = await self.db.execute(
            select(Activity).order_by(Activity.created_at.desc(), Activity.id.desc())
            .limit(limit),
        )
        return list(result.unique().scalars().all())

    # ─── Membership ─────────────────────────────────────────────

    async def list_member_ids(self, instance_id: int) -> list[int]:
        """The admin plus every distinct actor in the activity log, sorted."""
        instance = await self.get(instance_id)
        result = await self.db.execute(
            select(Activity.actor_id).where(
                Activity.instance_id == instance_id, Activity.actor_id.is_not(None),
            ).distinct(),
        )
        return sorted({instance.admin_id, *result.scalars().all()})
