"""Request Dependencies — session-cookie authentication and ownership guards.

Invariants:
    - get_current_user never raises for a missing, unknown or expired session: it returns None
    - require_user raises AuthenticationRequiredError (401) when no user is resolved
    - Ownership / admin checks raise AuthorizationDeniedError (403), never 401
    - A session whose user no longer exists is treated as anonymous
"""

from datetime import timedelta

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from fedlink.config import get_settings
from fedlink.core.errors import AuthenticationRequiredError, AuthorizationDeniedError
from fedlink.infrastructure.database import get_db
from fedlink.infrastructure.session_store import SessionStore
from fedlink.models.instance import Instance
from fedlink.models.user import User
from fedlink.repositories.users import UserRepository


def session_store_for(db: AsyncSession) -> SessionStore:
    settings = get_settings()
    return SessionStore(db, timedelta(hours=settings.session_ttl_hours))


def session_id_from(request: Request) -> str | None:
    return request.cookies.get(get_settings().session_cookie_name)


async def get_current_user(
    request: Request, db: AsyncSession = Depends(get_db),
) -> User | None:
    payload = await session_store_for(db).load(session_id_from(request))
    if not payload or "user_id" not in payload:
        return None
    return await UserRepository(db).get(payload["user_id"])


async def require_user(user: User | None = Depends(get_current_user)) -> User:
    if user is None:
        raise AuthenticationRequiredError()
    return user


def ensure_owner(user: User, owner_id: int, resource: str) -> None:
    if user.id != owner_id:
        raise AuthorizationDeniedError(f"Not authorized to modify this {resource}")


def ensure_instance_admin(user: User, instance: Instance, action: str = "manage") -> None:
    if instance.admin_id != user.id:
        raise AuthorizationDeniedError(f"Not authorized to {action} this instance")
