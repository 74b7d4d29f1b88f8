"""View Routes — server-side page resolution for the web client.

Invariants:
    - Every call gets a fresh ViewContext; no view state survives between requests
    - The payload is {"status", "page", "params", "location"}
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from fedlink.api.deps import get_current_user
from fedlink.core.view_state import ViewContext
from fedlink.infrastructure.database import get_db
from fedlink.models.user import User
from fedlink.services.page_resolver import resolve, to_payload

router = APIRouter(prefix="/api/v1/views", tags=["views"])


@router.get("/resolve")
async def resolve_view(
    path: str = Query(..., min_length=1, max_length=2000),
    user: User | None = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    state = await resolve(path, db, user, ViewContext())
    return to_payload(state)
