import pytest


@pytest.mark.asyncio
async def test_liveness(client):
    r = await client.get("/api/health/live")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"


@pytest.mark.asyncio
async def test_health_reports_database(client):
    r = await client.get("/api/health")
    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "healthy"
    assert body["services"]["database"]["status"] == "healthy"
    assert "sqlite" in body["services"]["database"]["message"]


@pytest.mark.asyncio
async def test_health_unhealthy_when_database_closed(client, database):
    await database.disconnect()

    r = await client.get("/api/health")
    assert r.status_code == 503
    assert r.json()["services"]["database"]["status"] == "unhealthy"
