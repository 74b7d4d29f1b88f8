"""Auth Routes — login, logout and the current-user lookup.

Invariants:
    - Login upserts the user from identity claims and issues a fresh session cookie
    - Logout destroys the server-side row and clears the cookie, signed in or not
    - GET /auth/user returns null for anonymous callers (never 401)
"""

import logging

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from fedlink.api.deps import get_current_user, session_id_from, session_store_for
from fedlink.config import get_settings
from fedlink.infrastructure.database import get_db
from fedlink.models.user import User
from fedlink.repositories.users import UserRepository
from fedlink.schemas.user import IdentityClaims, UserResponse

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


@router.post("/login", response_model=UserResponse)
async def login(
    claims: IdentityClaims, request: Request, response: Response,
    db: AsyncSession = Depends(get_db),
):
    """Exchange identity-provider claims for a session cookie."""
    settings = get_settings()
    user = await UserRepository(db).upsert_from_identity(claims)
    store = session_store_for(db)
    await store.destroy(session_id_from(request))
    sid = await store.create({"user_id": user.id, "username": user.username})
    response.set_cookie(
        settings.session_cookie_name, sid,
        max_age=settings.session_ttl_hours * 3600,
        httponly=True, samesite="lax", secure=settings.cookie_secure,
    )
    logger.info("User logged in", extra={"user_id": user.id})
    return user


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(request: Request, db: AsyncSession = Depends(get_db)):
    await session_store_for(db).destroy(session_id_from(request))
    response = Response(status_code=status.HTTP_204_NO_CONTENT)
    response.delete_cookie(get_settings().session_cookie_name)
    return response


@router.get("/user", response_model=UserResponse | None)
async def current_user(user: User | None = Depends(get_current_user)):
    return user
