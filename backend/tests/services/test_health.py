"""Health Routes + error envelope — liveness, readiness and the structured 400 payload."""


async def test_health_check(client):
    """GET /health/ returns 200 with the service name."""
    res = await client.get("/api/v1/health/")
    assert res.status_code == 200
    assert res.json()["service"] == "fedlink-api"


async def test_readiness_uses_database(client):
    """GET /health/ready reports the database as healthy."""
    res = await client.get("/api/v1/health/ready")
    assert res.status_code == 200
    assert res.json()["checks"]["database"] == "healthy"


async def test_validation_error_envelope(client, login):
    """Schema failures return the structured 400 envelope with field details."""
    await login("alice")
    res = await client.post("/api/v1/categories", json={"name": "Design", "color": "red"})
    assert res.status_code == 400
    error = res.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert error["category"] == "validation"
    assert any(d["field"].endswith("color") for d in error["details"])
