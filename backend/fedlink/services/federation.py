"""Federation Service — records outgoing Create activities and incoming inbox activities.

Invariants:
    - A post is published only when its author has a federation identity AND administers
      an instance whose federation rules allow auto-sharing
    - Posts hitting the instance's moderation keywords are not published
    - Inbox activities are recorded against the recipient's first administered instance;
      a recipient without an instance cannot receive
    - A published post, its Create activity and posts.activity_id commit in one transaction
    - Nothing is delivered, signed or retried; documents are recorded for serving only
"""

import logging
from uuid import uuid4

from sqlalchemy.ext.asyncio import AsyncSession

from fedlink.core.activitypub import (
    activity_url, build_activity, note_object, object_ref,
)
from fedlink.core.domain_types import ActivityType
from fedlink.core.errors import ResourceNotFoundError
from fedlink.core.instance_config import load_content_moderation, load_federation_rules
from fedlink.models.instance import Activity
from fedlink.models.post import Post
from fedlink.models.user import User
from fedlink.repositories import InstanceRepository, PostRepository
from fedlink.schemas.instance import InboxActivity

logger = logging.getLogger(__name__)


async def publish_post(
    db: AsyncSession, post: Post, author: User, domain: str,
) -> Activity | None:
    """Stage a Create activity for a flushed, uncommitted post and link the post to it.

    Nothing is committed here: the caller commits the post, the activity and
    posts.activity_id together. Returns None when nothing is shared.
    """
    if not author.actor_url:
        return None
    instances = InstanceRepository(db)
    instance = await instances.first_administered(author.id)
    if instance is None:
        return None
    if not load_federation_rules(instance.federation_rules).auto_share:
        return None
    flagged = load_content_moderation(instance.content_moderation).flags(post.content)
    if flagged:
        logger.warning(
            f"Post withheld from federation, moderation keywords: {flagged}",
            extra={"post_id": post.id, "instance_id": instance.id},
        )
        return None

    key = uuid4().hex
    note = note_object(domain, post, author.actor_url, post.created_at)
    document = build_activity(
        activity_url(domain, key), ActivityType.CREATE.value, author.actor_url, note,
    )
    activity = await instances.record_activity(
        instance.id, ActivityType.CREATE.value, actor_id=author.id,
        object_id=note["id"], payload=document, commit=False,
    )
    PostRepository(db).attach_activity(post, document["id"])
    logger.info(
        "Create activity staged",
        extra={"post_id": post.id, "instance_id": instance.id, "user_id": author.id},
    )
    return activity


async def receive_inbox_activity(
    db: AsyncSession, recipient: User, incoming: InboxActivity,
) -> Activity:
    instances = InstanceRepository(db)
    instance = await instances.first_administered(recipient.id)
    if instance is None:
        raise ResourceNotFoundError("Inbox", recipient.id)
    activity = await instances.record_activity(
        instance.id, incoming.type,
        object_id=object_ref(incoming.object),
        target_id=object_ref(incoming.target) or recipient.actor_url,
        payload=incoming.model_dump(mode="json", exclude_none=True),
    )
    logger.info(
        f"Inbox activity recorded: {incoming.type}",
        extra={"instance_id": instance.id, "user_id": recipient.id},
    )
    return activity
