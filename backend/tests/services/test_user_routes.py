"""User & Profile History Routes — uniqueness conflicts, self-only edits, interval rule.

Tests:
    - Duplicate username/email surfaces as 409
    - current=True with an end_date is 400 on create and on update
    - Deleting your account cascades through your rows
"""

from fedlink.repositories import UserRepository
from fedlink.schemas.user import UserCreate


async def test_duplicate_username_is_conflict(client, login, test_session_factory):
    """Renaming to a taken username returns 409 and changes nothing."""
    alice = await login("alice")
    async with test_session_factory() as db:
        await UserRepository(db).create(UserCreate(username="bob", email="bob@example.com"))
    res = await client.put(f"/api/v1/users/{alice['id']}", json={"username": "bob"})
    assert res.status_code == 409
    assert res.json()["error"]["code"] == "CONFLICT"
    assert (await client.get(f"/api/v1/users/{alice['id']}")).json()["username"] == "alice"


async def test_update_own_profile(client, login):
    """Users can edit their own profile."""
    alice = await login("alice")
    res = await client.put(f"/api/v1/users/{alice['id']}", json={"headline": "Engineer"})
    assert res.status_code == 200
    assert res.json()["headline"] == "Engineer"


async def test_get_missing_user_is_404(client):
    """Unknown users return 404 with the resource type."""
    res = await client.get("/api/v1/users/9999")
    assert res.status_code == 404
    assert res.json()["error"]["context"]["resource_type"] == "User"


async def test_work_experience_interval_rules(client, login):
    """current with an end_date is rejected on create and on update."""
    alice = await login("alice")
    bad = await client.post("/api/v1/work-experiences", json={
        "company": "Acme", "title": "Dev", "start_date": "2020-01-01T00:00:00Z",
        "end_date": "2021-01-01T00:00:00Z", "current": True,
    })
    assert bad.status_code == 400

    ok = await client.post("/api/v1/work-experiences", json={
        "company": "Acme", "title": "Dev", "start_date": "2020-01-01T00:00:00Z",
        "end_date": "2021-01-01T00:00:00Z",
    })
    assert ok.status_code == 201
    row_id = ok.json()["id"]

    patched = await client.put(f"/api/v1/work-experiences/{row_id}", json={"current": True})
    assert patched.status_code == 400
    assert patched.json()["error"]["details"][0]["field"] == "end_date"

    listed = await client.get(f"/api/v1/users/{alice['id']}/work-experiences")
    assert [r["current"] for r in listed.json()] == [False]


async def test_education_owner_only(client, login):
    """Only the owner may delete an education entry."""
    await login("alice")
    created = await client.post("/api/v1/educations", json={
        "school": "MIT", "start_date": "2010-09-01T00:00:00Z",
    })
    assert created.status_code == 201
    await login("bob")
    res = await client.delete(f"/api/v1/educations/{created.json()['id']}")
    assert res.status_code == 403


async def test_delete_account_cascades(client, login):
    """Deleting an account removes its posts and services."""
    alice = await login("alice")
    await client.post("/api/v1/posts", json={"content": "bye"})
    await client.post("/api/v1/services", json={"title": "Tutoring", "description": "Maths"})
    res = await client.delete(f"/api/v1/users/{alice['id']}")
    assert res.status_code == 204
    assert (await client.get("/api/v1/posts")).json() == []
    assert (await client.get("/api/v1/services")).json() == []
