"""User ORM — identity, profile fields and optional federation identity.

Invariants:
    - username and email are unique and non-nullable
    - activity_pub_id, actor_url, inbox_url, outbox_url are unique but nullable
    - Deleting a user cascades (at the DB level) to work experiences, educations,
      user skills, services, posts, comments, reactions and administered instances

Design Decisions:
    - No one-to-many relationship() collections on User: cascades are enforced by
      ON DELETE CASCADE foreign keys on the child tables, never fanned out by the ORM
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from fedlink.db.base import Base


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    email: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    first_name: Mapped[str | None] = mapped_column(Text, nullable=True)
    last_name: Mapped[str | None] = mapped_column(Text, nullable=True)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    headline: Mapped[str | None] = mapped_column(Text, nullable=True)
    profile_image_url: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Federation identity (assigned when the actor document is first served)
    activity_pub_id: Mapped[str | None] = mapped_column(Text, nullable=True, unique=True)
    actor_url: Mapped[str | None] = mapped_column(Text, nullable=True, unique=True)
    inbox_url: Mapped[str | None] = mapped_column(Text, nullable=True, unique=True)
    outbox_url: Mapped[str | None] = mapped_column(Text, nullable=True, unique=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    @property
    def display_name(self) -> str:
        if self.first_name and self.last_name:
            return f"{self.first_name} {self.last_name}"
        return self.username
