"""Repositories — one data-access class per aggregate, bound to an AsyncSession.

Invariants:
    - Every operation takes typed input and returns ORM rows or raises a FedLinkError
    - Uniqueness / foreign-key violations surface as ConflictError (409)
    - Cascading deletes are left to the storage engine

Design Decisions:
    - Classes over free functions: routes build one repository per request from
      the injected session, tests build them from the fixture session
"""

from fedlink.repositories.users import UserRepository  # noqa: F401
from fedlink.repositories.profiles import ProfileRepository  # noqa: F401
from fedlink.repositories.skills import SkillRepository  # noqa: F401
from fedlink.repositories.services import ServiceRepository  # noqa: F401
from fedlink.repositories.posts import PostRepository  # noqa: F401
from fedlink.repositories.instances import InstanceRepository  # noqa: F401
