"""ActivityPub Documents — actor, outbox and activity envelopes as plain dicts.

Invariants:
    - All functions are PURE: domain and timestamps are passed in
    - Actor URL is https://<domain>/activitypub/actor/<user_id>; inbox/outbox hang off it
    - Nothing here sends, signs or retries; documents are served, never delivered
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any

AS_CONTEXT = "https://www.w3.org/ns/activitystreams"
SECURITY_CONTEXT = "https://w3id.org/security/v1"
PUBLIC_AUDIENCE = "https://www.w3.org/ns/activitystreams#Public"


@dataclass(frozen=True)
class FederationIdentity:
    activity_pub_id: str
    actor_url: str
    inbox_url: str
    outbox_url: str


def federation_identity(domain: str, user_id: int) -> FederationIdentity:
    path = f"/activitypub/actor/{user_id}"
    actor_url = f"https://{domain}{path}"
    return FederationIdentity(
        activity_pub_id=path,
        actor_url=actor_url,
        inbox_url=f"{actor_url}/inbox",
        outbox_url=f"{actor_url}/outbox",
    )


def post_url(domain: str, post_id: int) -> str:
    return f"https://{domain}/api/v1/posts/{post_id}"


def activity_url(domain: str, activity_key: str) -> str:
    return f"https://{domain}/activitypub/activity/{activity_key}"


def build_actor(user: Any, identity: FederationIdentity) -> dict:
    actor = {
        "@context": [AS_CONTEXT, SECURITY_CONTEXT],
        "id": identity.actor_url,
        "type": "Person",
        "preferredUsername": user.username,
        "name": user.display_name,
        "inbox": identity.inbox_url,
        "outbox": identity.outbox_url,
    }
    if user.bio:
        actor["summary"] = user.bio
    if user.profile_image_url:
        actor["icon"] = {
            "type": "Image",
            "mediaType": "image/jpeg",
            "url": user.profile_image_url,
        }
    return actor


def note_object(domain: str, post: Any, actor_url: str, published: datetime) -> dict:
    return {
        "id": post_url(domain, post.id),
        "type": "Note",
        "content": post.content,
        "attributedTo": actor_url,
        "published": published.isoformat(),
    }


def build_activity(
    activity_id: str, activity_type: str, actor_url: str, obj: Any,
    recipients: list[str] | None = None,
) -> dict:
    return {
        "@context": AS_CONTEXT,
        "id": activity_id,
        "type": activity_type,
        "actor": actor_url,
        "object": obj,
        "to": recipients if recipients is not None else [PUBLIC_AUDIENCE],
    }


def build_outbox(domain: str, actor_url: str, posts: list[Any]) -> dict:
    items = [
        {
            "id": post_url(domain, p.id),
            "type": "Create",
            "actor": actor_url,
            "object": {
                "id": post_url(domain, p.id),
                "type": "Note",
                "content": p.content,
                "published": p.created_at.isoformat(),
            },
        }
        for p in posts
    ]
    return {
        "@context": AS_CONTEXT,
        "id": f"{actor_url}/outbox",
        "type": "OrderedCollection",
        "totalItems": len(items),
        "orderedItems": items,
    }


def object_ref(value: Any) -> str | None:
    """Id of an embedded object or a bare IRI; None when absent."""
    if isinstance(value, str):
        return value
    if isinstance(value, dict):
        ref = value.get("id")
        return ref if isinstance(ref, str) else None
    return None
