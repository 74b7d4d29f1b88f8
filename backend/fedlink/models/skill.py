"""Skill ORM — global skill catalog plus the per-user endorsement join.

Invariants:
    - Skill.name is unique (deduplicated catalog)
    - At most one UserSkill per (user_id, skill_id)
    - endorsements only ever increments
"""

from sqlalchemy import ForeignKey, Integer, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fedlink.db.base import Base


class Skill(Base):
    __tablename__ = "skills"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(Text, nullable=False, unique=True)


class UserSkill(Base):
    __tablename__ = "user_skills"
    __table_args__ = (UniqueConstraint("user_id", "skill_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False,
    )
    skill_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("skills.id", ondelete="CASCADE"), nullable=False,
    )
    endorsements: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    skill: Mapped[Skill] = relationship(Skill, lazy="joined")
