"""Instance ORM — tenant nodes, federation edges and the activity log.

Invariants:
    - Instance.admin_id cascades on user deletion (an instance never outlives its admin)
    - content_moderation / required_fields / federation_rules are free-form JSON at the
      schema level; their shape is validated by fedlink.core.instance_config
    - At most one FederatedInstance per ordered (instance_id, fed_with_instance_id)
    - Activity.actor_id is SET NULL on user deletion; activities are append-only
"""

from datetime import datetime, timezone

from sqlalchemy import (
    JSON, Boolean, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fedlink.db.base import Base
from fedlink.models.user import User


class Instance(Base):
    __tablename__ = "instances"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    admin_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    domain: Mapped[str | None] = mapped_column(Text, nullable=True, unique=True)
    logo: Mapped[str | None] = mapped_column(Text, nullable=True)
    registration_type: Mapped[str] = mapped_column(
        String(20), nullable=False, default="open",
    )
    content_moderation: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    required_fields: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    federation_rules: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )


class FederatedInstance(Base):
    __tablename__ = "federated_instances"
    __table_args__ = (UniqueConstraint("instance_id", "fed_with_instance_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    instance_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("instances.id", ondelete="CASCADE"), nullable=False,
    )
    fed_with_instance_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("instances.id", ondelete="CASCADE"), nullable=False,
    )
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    fed_with_instance: Mapped[Instance] = relationship(
        Instance, foreign_keys=[fed_with_instance_id], lazy="joined",
    )


class Activity(Base):
    __tablename__ = "activities"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    instance_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("instances.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    type: Mapped[str] = mapped_column(String(50), nullable=False)
    actor_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True,
    )
    object_id: Mapped[str | None] = mapped_column(Text, nullable=True)
    target_id: Mapped[str | None] = mapped_column(Text, nullable=True)
    payload: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    actor: Mapped[User | None] = relationship(User, lazy="joined")
    instance: Mapped[Instance] = relationship(Instance, lazy="joined")
