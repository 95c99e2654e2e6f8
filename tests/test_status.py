from datetime import datetime

import pytest


@pytest.mark.asyncio
async def test_status_before_any_refresh(client):
    r = await client.get("/api/status")
    assert r.status_code == 404
    assert r.json() == {"error": "Status not found. Please run refresh."}


@pytest.mark.asyncio
async def test_status_after_refresh(client, refreshed):
    r = await client.get("/api/status")
    assert r.status_code == 200
    body = r.json()
    assert body["total_countries"] == refreshed["countries_processed"]
    assert isinstance(datetime.fromisoformat(body["last_refreshed_at"]), datetime)


@pytest.mark.asyncio
async def test_status_is_overwritten_not_duplicated(client, upstream, database, refreshed):
    from sqlalchemy import func, select

    from country_api.modules.status.models import RefreshStatus

    first = (await client.get("/api/status")).json()

    upstream.countries = upstream.countries[:2]
    await client.post("/api/countries/refresh")

    second = (await client.get("/api/status")).json()
    assert second["total_countries"] == 2
    assert second["last_refreshed_at"] >= first["last_refreshed_at"]

    async with database.session() as session:
        rows = await session.scalar(select(func.count()).select_from(RefreshStatus))
    assert rows == 1
