"""ORM Models — SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Referential integrity (cascade / set null) lives in ForeignKey(ondelete=...)

Design Decisions:
    - One file per aggregate (user, profile, skill, service, post, instance, session)
    - All models imported here so metadata is complete before create_all or a query runs
"""

from fedlink.models.user import User  # noqa: F401
from fedlink.models.profile import WorkExperience, Education  # noqa: F401
from fedlink.models.skill import Skill, UserSkill  # noqa: F401
from fedlink.models.service import Category, Service  # noqa: F401
from fedlink.models.post import Post, Comment, Reaction  # noqa: F401
from fedlink.models.instance import Instance, FederatedInstance, Activity  # noqa: F401
from fedlink.models.web_session import WebSession  # noqa: F401
