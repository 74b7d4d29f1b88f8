"""Instance Routes — admin checks, federation edges, activity log and analytics.

Tests:
    - Only the admin may update an instance or read its analytics (403 otherwise)
    - Approving a federation creates the reciprocal approved edge
    - Self-federation and blocked peers are rejected with 400
    - Unknown analytics time_range is rejected with 400
"""

import pytest


async def _instance(client, name: str, domain: str, **fields) -> dict:
    res = await client.post("/api/v1/instances", json={"name": name, "domain": domain, **fields})
    assert res.status_code == 201, res.text
    return res.json()


@pytest.fixture
async def two_instances(client, login):
    """alice administers north.example, bob administers south.example; bob stays signed in."""
    await login("alice")
    north = await _instance(client, "North", "north.example")
    await login("bob")
    south = await _instance(client, "South", "south.example")
    return north, south


async def test_creator_becomes_admin(client, login):
    """The creator of an instance becomes its admin."""
    alice = await login("alice")
    created = await _instance(client, "Home", "home.example")
    assert created["admin_id"] == alice["id"]
    assert created["federation_rules"]["auto_share"] is True
    listed = (await client.get(f"/api/v1/users/{alice['id']}/instances")).json()
    assert [i["id"] for i in listed] == [created["id"]]


async def test_update_requires_admin(client, two_instances):
    """Only the admin may update an instance."""
    north, _ = two_instances
    res = await client.put(f"/api/v1/instances/{north['id']}", json={"name": "Taken"})
    assert res.status_code == 403


async def test_update_rejects_unknown_fields(client, login):
    """Unknown fields in an update body are rejected."""
    await login("alice")
    created = await _instance(client, "Home", "home.example")
    res = await client.put(f"/api/v1/instances/{created['id']}", json={"admin_id": 99})
    assert res.status_code == 400


async def test_approval_creates_reciprocal_edge(client, login, two_instances):
    """Approving an edge adds the approved reverse edge in the same commit."""
    north, south = two_instances
    await login("alice")
    edge = await client.post(
        f"/api/v1/instances/{north['id']}/federations",
        json={"fed_with_instance_id": south["id"]},
    )
    assert edge.status_code == 201
    assert edge.json()["status"] == "pending"
    assert edge.json()["fed_with_instance"]["name"] == "South"

    await login("bob")
    approved = await client.put(
        f"/api/v1/federations/{edge.json()['id']}/status", json={"status": "approved"},
    )
    assert approved.status_code == 200
    assert approved.json()["status"] == "approved"

    reverse = (await client.get(f"/api/v1/instances/{south['id']}/federations")).json()
    assert [(f["fed_with_instance_id"], f["status"]) for f in reverse] == [
        (north["id"], "approved"),
    ]


async def test_federation_status_needs_an_endpoint_admin(client, login, two_instances):
    """Users who administer neither endpoint cannot change edge status."""
    north, south = two_instances
    await login("alice")
    edge = (await client.post(
        f"/api/v1/instances/{north['id']}/federations",
        json={"fed_with_instance_id": south["id"]},
    )).json()
    await login("carol")
    res = await client.put(f"/api/v1/federations/{edge['id']}/status", json={"status": "rejected"})
    assert res.status_code == 403


async def test_self_federation_is_400(client, login):
    """Federating an instance with itself returns 400."""
    await login("alice")
    home = await _instance(client, "Home", "home.example")
    res = await client.post(
        f"/api/v1/instances/{home['id']}/federations", json={"fed_with_instance_id": home["id"]},
    )
    assert res.status_code == 400


async def test_blocked_peer_is_400(client, login, two_instances):
    """A blocklisted peer domain returns 400."""
    north, south = two_instances
    await login("alice")
    await client.put(f"/api/v1/instances/{north['id']}", json={
        "federation_rules": {"federation_scope": "blocklist", "blocked_domains": ["south.example"]},
    })
    res = await client.post(
        f"/api/v1/instances/{north['id']}/federations",
        json={"fed_with_instance_id": south["id"]},
    )
    assert res.status_code == 400


async def test_analytics_admin_only(client, login, two_instances):
    """Analytics return 403 for other users and data for the admin."""
    north, _ = two_instances
    res = await client.get(f"/api/v1/instances/{north['id']}/analytics")
    assert res.status_code == 403

    await login("alice")
    await client.post("/api/v1/posts", json={"content": "first"})
    overview = await client.get(f"/api/v1/instances/{north['id']}/analytics")
    assert overview.status_code == 200
    assert overview.json()["users"]["total"] == 1

    posts = (await client.get(
        f"/api/v1/instances/{north['id']}/analytics/posts", params={"time_range": "month"},
    )).json()
    assert posts["total_posts"] == 1
    assert sum(point["count"] for point in posts["posts_over_time"]) == 1


async def test_analytics_bad_time_range_is_400(client, login):
    """An unknown time_range returns 400."""
    await login("alice")
    home = await _instance(client, "Home", "home.example")
    res = await client.get(
        f"/api/v1/instances/{home['id']}/analytics/users", params={"time_range": "decade"},
    )
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_analytics_anonymous_is_401(client, two_instances):
    """Analytics without a session return 401."""
    north, _ = two_instances
    client.cookies.clear()
    res = await client.get(f"/api/v1/instances/{north['id']}/analytics/federation")
    assert res.status_code == 401
