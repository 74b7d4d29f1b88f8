"""Federation Service — a published post and its Create activity share one transaction.

Tests:
    - publish_post stages without committing: a rollback leaves neither row behind
    - one commit persists the post, the activity and posts.activity_id together
"""

from fedlink.repositories import InstanceRepository, PostRepository
from fedlink.schemas.instance import InstanceCreate
from fedlink.schemas.post import PostCreate
from fedlink.services.federation import publish_post


async def _federated_author(test_db, make_user):
    author = await make_user("alice", actor_url="https://home.example/activitypub/actor/1")
    instance = await InstanceRepository(test_db).create(
        author.id, InstanceCreate(name="Home", domain="home.example"),
    )
    return author, instance.id


async def test_rollback_discards_post_and_activity(test_db, make_user):
    """Nothing from a publish survives if the caller rolls back instead of committing."""
    author, instance_id = await _federated_author(test_db, make_user)
    posts = PostRepository(test_db)
    post = await posts.create(author.id, PostCreate(content="hello"), commit=False)
    activity = await publish_post(test_db, post, author, "home.example")
    assert activity is not None
    assert post.activity_id == activity.payload["id"]

    await test_db.rollback()

    assert await posts.feed() == []
    assert await InstanceRepository(test_db).list_activities(instance_id) == []


async def test_single_commit_persists_everything(test_db, make_user):
    """One commit stores the post already linked to its recorded Create activity."""
    author, instance_id = await _federated_author(test_db, make_user)
    posts = PostRepository(test_db)
    post = await posts.create(author.id, PostCreate(content="hello"), commit=False)
    await publish_post(test_db, post, author, "home.example")
    post_id = post.id
    await posts.commit()

    stored = await posts.get(post_id)
    activities = await InstanceRepository(test_db).list_activities(instance_id)
    assert [a.type for a in activities] == ["Create"]
    assert stored.activity_id == activities[0].payload["id"]
