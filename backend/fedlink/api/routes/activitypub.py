"""ActivityPub Routes — actor, outbox and inbox documents.

Invariants:
    - Fetching an actor assigns the user's federation identity on first request
    - The inbox records the activity and answers 202; nothing is delivered or verified
    - Responses use the application/activity+json media type
"""

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from fedlink.config import get_settings
from fedlink.core.activitypub import build_actor, build_outbox, federation_identity
from fedlink.infrastructure.database import get_db
from fedlink.repositories import PostRepository, UserRepository
from fedlink.schemas.instance import InboxActivity
from fedlink.services.federation import receive_inbox_activity

ACTIVITY_JSON = "application/activity+json"

router = APIRouter(prefix="/activitypub", tags=["activitypub"])


@router.get("/actor/{user_id}")
async def get_actor(user_id: int, db: AsyncSession = Depends(get_db)):
    domain = get_settings().public_domain
    user = await UserRepository(db).set_federation_identity(user_id, domain)
    document = build_actor(user, federation_identity(domain, user.id))
    return JSONResponse(document, media_type=ACTIVITY_JSON)


@router.get("/actor/{user_id}/outbox")
async def get_outbox(user_id: int, db: AsyncSession = Depends(get_db)):
    domain = get_settings().public_domain
    user = await UserRepository(db).get_or_404(user_id)
    posts = await PostRepository(db).list_by_user(user.id)
    identity = federation_identity(domain, user.id)
    return JSONResponse(
        build_outbox(domain, identity.actor_url, posts), media_type=ACTIVITY_JSON,
    )


@router.post("/actor/{user_id}/inbox", status_code=status.HTTP_202_ACCEPTED)
async def post_inbox(
    user_id: int, body: InboxActivity, db: AsyncSession = Depends(get_db),
):
    recipient = await UserRepository(db).get_or_404(user_id)
    activity = await receive_inbox_activity(db, recipient, body)
    return {"status": "accepted", "activity_id": activity.id}
