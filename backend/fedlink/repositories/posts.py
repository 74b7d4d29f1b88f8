"""Post Repository — feed, comments and reactions.

Invariants:
    - Feed is newest first with the author eagerly joined
    - Comments are listed oldest first
    - set_reaction is one INSERT ... ON CONFLICT (post_id, user_id) DO UPDATE statement:
      concurrent callers always leave exactly one row per (post, user)
"""

import logging

from sqlalchemy import delete, select

from fedlink.core.domain_types import ReactionType
from fedlink.core.errors import ResourceNotFoundError
from fedlink.models.post import Comment, Post, Reaction
from fedlink.repositories.base import Repository
from fedlink.schemas.post import CommentCreate, PostCreate

logger = logging.getLogger(__name__)


class PostRepository(Repository):
    async def create(self, user_id: int, data: PostCreate, commit: bool = True) -> Post:
        """Insert a post. With commit=False the row is only flushed (id and created_at
        assigned) so publishing can join the same transaction."""
        post = Post(user_id=user_id, **data.model_dump())
        if commit:
            post = await self.add(post)
        else:
            await self.stage(post)
        logger.info("Post created", extra={"user_id": user_id, "post_id": post.id})
        return post

    async def get(self, post_id: int) -> Post:
        return await self.fetch_or_404(Post, post_id, "Post")

    async def feed(self, limit: int = 20, offset: int = 0) -> list[Post]:
        """Public feed, newest first, paginated."""
        result = await self.db.execute(
            select(Post).order_by(Post.created_at.desc(), Post.id.desc())
            .limit(limit).offset(offset),
        )
        return list(result.unique().scalars().all())

    async def list_by_user(self, user_id: int) -> list[Post]:
        return await self.list_by_users([user_id])

    async def list_by_users(self, user_ids: list[int]) -> list[Post]:
        """Posts by any of the given authors, newest first."""
        if not user_ids:
            return []
        result = await self.db.execute(
            select(Post).where(Post.user_id.in_(user_ids))
            .order_by(Post.created_at.desc(), Post.id.desc()),
        )
        return list(result.unique().scalars().all())

    def attach_activity(self, post: Post, activity_id: str) -> None:
        """Link a post to its Create activity; persisted with the caller's commit."""
        post.activity_id = activity_id

    async def delete(self, post_id: int) -> None:
        await self.remove(await self.get(post_id))

    # ─── Comments ───────────────────────────────────────────────

    async def create_comment(self, post_id: int, user_id: int, data: CommentCreate) -> Comment:
        """Comment on a post. 404 when the post does not exist."""
        await self.get(post_id)
        return await self.add(Comment(post_id=post_id, user_id=user_id, content=data.content))

    async def list_comments(self, post_id: int) -> list[Comment]:
        result = await self.db.execute(
            select(Comment).where(Comment.post_id == post_id)
            .order_by(Comment.created_at, Comment.id),
        )
        return list(result.unique().scalars().all())

    async def get_comment(self, comment_id: int) -> Comment:
        return await self.fetch_or_404(Comment, comment_id, "Comment")

    async def delete_comment(self, comment_id: int) -> None:
        await self.remove(await self.get_comment(comment_id))

    # ─── Reactions ──────────────────────────────────────────────

    async def set_reaction(
        self, post_id: int, user_id: int, reaction_type: ReactionType,
    ) -> Reaction:
        """Insert or overwrite the caller's reaction in one ON CONFLICT statement."""
        await self.get(post_id)
        stmt = self.dialect_insert(Reaction).values(
            post_id=post_id, user_id=user_id, type=reaction_type.value,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[Reaction.post_id, Reaction.user_id],
            set_={"type": stmt.excluded.type},
        )
        await self.db.execute(stmt)
        await self.commit()
        return await self.get_reaction(post_id, user_id)

    async def find_reaction(self, post_id: int, user_id: int) -> Reaction | None:
        result = await self.db.execute(
            select(Reaction)
            .where(Reaction.post_id == post_id, Reaction.user_id == user_id)
            .execution_options(populate_existing=True),
        )
        return result.scalar_one_or_none()

    async def get_reaction(self, post_id: int, user_id: int) -> Reaction:
        reaction = await self.find_reaction(post_id, user_id)
        if reaction is None:
            raise ResourceNotFoundError("Reaction", f"{post_id}/{user_id}")
        return reaction

    async def list_reactions(self, post_id: int) -> list[Reaction]:
        result = await self.db.execute(
            select(Reaction).where(Reaction.post_id == post_id).order_by(Reaction.id),
        )
        return list(result.scalars().all())

    async def remove_reaction(self, post_id: int, user_id: int) -> None:
        """Delete the caller's reaction. 404 when there is none."""
        result = await self.db.execute(
            delete(Reaction).where(Reaction.post_id == post_id, Reaction.user_id == user_id),
        )
        if result.rowcount == 0:
            await self.db.rollback()
            raise ResourceNotFoundError("Reaction", f"{post_id}/{user_id}")
        await self.commit()
