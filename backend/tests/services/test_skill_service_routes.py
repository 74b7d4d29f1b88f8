"""Skill & Services Directory Routes — endorsements, categories, search."""


async def test_skill_flow_and_self_endorse_forbidden(client, login):
    """Others can endorse a skill; the owner cannot."""
    alice = await login("alice")
    skill = (await client.post("/api/v1/skills", json={"name": "Go"})).json()
    dup = await client.post("/api/v1/skills", json={"name": "Go"})
    assert dup.status_code == 409

    res = await client.post("/api/v1/user-skills", json={"skill_id": skill["id"]})
    assert res.status_code == 201
    own = await client.post(f"/api/v1/user-skills/{alice['id']}/{skill['id']}/endorse")
    assert own.status_code == 403

    await login("bob")
    endorsed = await client.post(f"/api/v1/user-skills/{alice['id']}/{skill['id']}/endorse")
    assert endorsed.status_code == 200
    assert endorsed.json()["endorsements"] == 1

    skills = (await client.get(f"/api/v1/users/{alice['id']}/skills")).json()
    assert skills[0]["skill"]["name"] == "Go"


async def test_category_delete_keeps_service(client, login):
    """Deleting a category leaves its services uncategorised."""
    await login("alice")
    category = (await client.post(
        "/api/v1/categories", json={"name": "Design", "color": "#FF00AA"},
    )).json()
    service = (await client.post("/api/v1/services", json={
        "title": "Logos", "description": "Vector logos", "category_id": category["id"],
    })).json()
    assert service["category"]["name"] == "Design"

    assert (await client.delete(f"/api/v1/categories/{category['id']}")).status_code == 204

    reloaded = (await client.get(f"/api/v1/services/{service['id']}")).json()
    assert reloaded["category_id"] is None
    assert reloaded["category"] is None


async def test_service_search_and_owner_edit(client, login):
    """Search finds by keyword; only the owner may edit."""
    await login("alice")
    created = (await client.post("/api/v1/services", json={
        "title": "Bookkeeping", "description": "Monthly books", "location": "Porto",
    })).json()
    found = (await client.get("/api/v1/services", params={"q": "book"})).json()
    assert [s["id"] for s in found] == [created["id"]]
    assert (await client.get("/api/v1/services", params={"location": "Oslo"})).json() == []

    await login("bob")
    res = await client.put(f"/api/v1/services/{created['id']}", json={"price": "free"})
    assert res.status_code == 403
