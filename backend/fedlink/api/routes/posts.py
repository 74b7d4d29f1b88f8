"""Feed Routes — posts, comments and reactions.

Invariants:
    - Creating a post may record a federation Create activity (services/federation)
    - A user's reaction to a post is a single row: POST overwrites, DELETE removes
    - Post and comment deletes are owner-only
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from fedlink.api.deps import ensure_owner, require_user
from fedlink.config import get_settings
from fedlink.infrastructure.database import get_db
from fedlink.models.user import User
from fedlink.repositories import PostRepository
from fedlink.schemas.post import (
    CommentCreate, CommentResponse, PostCreate, PostResponse,
    ReactionResponse, ReactionSet,
)
from fedlink.services.federation import publish_post

router = APIRouter(prefix="/api/v1", tags=["posts"])


@router.post("/posts", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post(
    body: PostCreate,
    user: User = Depends(require_user), db: AsyncSession = Depends(get_db),
):
    """Create a post and, when its author federates, its Create activity in one commit."""
    repo = PostRepository(db)
    post = await repo.create(user.id, body, commit=False)
    await publish_post(db, post, user, get_settings().public_domain)
    await repo.commit()
    return await repo.get(post.id)


@router.get("/posts", response_model=list[PostResponse])
async def list_feed(
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
):
    return await PostRepository(db).feed(limit, offset)


@router.get("/posts/{post_id}", response_model=PostResponse)
async def get_post(post_id: int, db: AsyncSession = Depends(get_db)):
    return await PostRepository(db).get(post_id)


@router.delete("/posts/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_post(
    post_id: int, user: User = Depends(require_user), db: AsyncSession = Depends(get_db),
):
    repo = PostRepository(db)
    ensure_owner(user, (await repo.get(post_id)).user_id, "post")
    await repo.delete(post_id)


@router.post(
    "/posts/{post_id}/comments", response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_comment(
    post_id: int, body: CommentCreate,
    user: User = Depends(require_user), db: AsyncSession = Depends(get_db),
):
    return await PostRepository(db).create_comment(post_id, user.id, body)


@router.get("/posts/{post_id}/comments", response_model=list[CommentResponse])
async def list_comments(post_id: int, db: AsyncSession = Depends(get_db)):
    repo = PostRepository(db)
    await repo.get(post_id)
    return await repo.list_comments(post_id)


@router.delete("/comments/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_comment(
    comment_id: int, user: User = Depends(require_user), db: AsyncSession = Depends(get_db),
):
    repo = PostRepository(db)
    ensure_owner(user, (await repo.get_comment(comment_id)).user_id, "comment")
    await repo.delete_comment(comment_id)


@router.post("/posts/{post_id}/reactions", response_model=ReactionResponse)
async def set_reaction(
    post_id: int, body: ReactionSet,
    user: User = Depends(require_user), db: AsyncSession = Depends(get_db),
):
    return await PostRepository(db).set_reaction(post_id, user.id, body.type)


@router.delete("/posts/{post_id}/reactions", status_code=status.HTTP_204_NO_CONTENT)
async def remove_reaction(
    post_id: int, user: User = Depends(require_user), db: AsyncSession = Depends(get_db),
):
    await PostRepository(db).remove_reaction(post_id, user.id)


@router.get("/posts/{post_id}/reactions", response_model=list[ReactionResponse])
async def list_reactions(post_id: int, db: AsyncSession = Depends(get_db)):
    repo = PostRepository(db)
    await repo.get(post_id)
    return await repo.list_reactions(post_id)
