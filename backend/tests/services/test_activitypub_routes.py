"""ActivityPub Routes — actor identity, outbox, inbox and Create publishing."""

from fedlink.core.errors import DatabaseError
from fedlink.repositories import InstanceRepository


async def test_actor_assigns_identity_once(client, login):
    """GET actor returns a Person document with a stable id."""
    alice = await login("alice", first_name="Alice", bio="Gardener")
    res = await client.get(f"/activitypub/actor/{alice['id']}")
    assert res.status_code == 200
    assert res.headers["content-type"].startswith("application/activity+json")
    actor = res.json()
    assert actor["type"] == "Person"
    assert actor["preferredUsername"] == "alice"
    assert actor["summary"] == "Gardener"
    assert actor["inbox"] == f"{actor['id']}/inbox"

    again = (await client.get(f"/activitypub/actor/{alice['id']}")).json()
    assert again["id"] == actor["id"]


async def test_actor_missing_user_is_404(client):
    """Unknown actors return 404."""
    assert (await client.get("/activitypub/actor/404")).status_code == 404


async def test_outbox_lists_posts(client, login):
    """The outbox lists the user's posts as Create items."""
    alice = await login("alice")
    await client.post("/api/v1/posts", json={"content": "one"})
    await client.post("/api/v1/posts", json={"content": "two"})
    outbox = (await client.get(f"/activitypub/actor/{alice['id']}/outbox")).json()
    assert outbox["type"] == "OrderedCollection"
    assert outbox["totalItems"] == 2
    assert {i["object"]["content"] for i in outbox["orderedItems"]} == {"one", "two"}


async def test_inbox_without_instance_is_404(client, login):
    """A recipient without an instance cannot receive."""
    alice = await login("alice")
    res = await client.post(
        f"/activitypub/actor/{alice['id']}/inbox", json={"type": "Follow"},
    )
    assert res.status_code == 404


async def test_inbox_records_activity(client, login):
    """Inbox activities are recorded with their object id and full payload."""
    alice = await login("alice")
    instance = (await client.post(
        "/api/v1/instances", json={"name": "Home", "domain": "home.example"},
    )).json()
    client.cookies.clear()
    res = await client.post(f"/activitypub/actor/{alice['id']}/inbox", json={
        "type": "Follow",
        "actor": "https://remote.example/users/zed",
        "object": {"id": "https://home.example/activitypub/actor/1", "type": "Person"},
        "extra": "kept",
    })
    assert res.status_code == 202
    assert res.json()["status"] == "accepted"

    activities = (await client.get(f"/api/v1/instances/{instance['id']}/activities")).json()
    assert len(activities) == 1
    assert activities[0]["type"] == "Follow"
    assert activities[0]["object_id"] == "https://home.example/activitypub/actor/1"
    assert activities[0]["payload"]["extra"] == "kept"


async def test_post_by_federated_admin_records_create(client, login):
    """A federated admin's post records a Create activity."""
    alice = await login("alice")
    await client.get(f"/activitypub/actor/{alice['id']}")
    instance = (await client.post(
        "/api/v1/instances", json={"name": "Home", "domain": "home.example"},
    )).json()

    post = (await client.post("/api/v1/posts", json={"content": "Hello fediverse"})).json()
    assert post["activity_id"]

    activities = (await client.get(f"/api/v1/instances/{instance['id']}/activities")).json()
    assert [a["type"] for a in activities] == ["Create"]
    assert activities[0]["payload"]["object"]["content"] == "Hello fediverse"
    assert activities[0]["actor_id"] == alice["id"]


async def test_moderated_post_is_not_published(client, login):
    """Posts matching moderation keywords stay local."""
    alice = await login("alice")
    await client.get(f"/activitypub/actor/{alice['id']}")
    instance = (await client.post("/api/v1/instances", json={
        "name": "Home", "domain": "home.example",
        "content_moderation": {"keywords": ["spam"]},
    })).json()

    post = (await client.post("/api/v1/posts", json={"content": "Buy SPAM now"})).json()
    assert post["activity_id"] is None
    assert (await client.get(f"/api/v1/instances/{instance['id']}/activities")).json() == []


async def test_post_without_identity_is_not_published(client, login):
    """Authors without a federation identity publish nothing."""
    await login("alice")
    await client.post("/api/v1/instances", json={"name": "Home", "domain": "home.example"})
    post = (await client.post("/api/v1/posts", json={"content": "local only"})).json()
    assert post["activity_id"] is None


async def test_failed_publish_leaves_no_post(client, login, monkeypatch):
    """If recording the Create activity fails, the post is not stored either."""
    alice = await login("alice")
    await client.get(f"/activitypub/actor/{alice['id']}")
    await client.post("/api/v1/instances", json={"name": "Home", "domain": "home.example"})

    async def failing_record(self, *args, **kwargs):
        raise DatabaseError("activity log unavailable", "insert")

    monkeypatch.setattr(InstanceRepository, "record_activity", failing_record)
    res = await client.post("/api/v1/posts", json={"content": "Hello fediverse"})
    assert res.status_code == 503
    assert (await client.get("/api/v1/posts")).json() == []
