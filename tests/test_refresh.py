import asyncio

import pytest


@pytest.mark.asyncio
async def test_refresh_reports_processed_count(client, upstream):
    r = await client.post("/api/countries/refresh")
    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "success"
    assert body["message"] == "Cache refreshed successfully"
    assert body["countries_processed"] == len(upstream.countries)

    # both sources were hit once
    assert sorted(upstream.requests) == ["countries.test", "rates.test"]


@pytest.mark.asyncio
async def test_refresh_counts_distinct_names_case_insensitively(client, upstream):
    upstream.countries.append({**upstream.countries[0], "name": "NIGERIA", "population": 7})

    r = await client.post("/api/countries/refresh")
    assert r.status_code == 200
    assert r.json()["countries_processed"] == 5

    countries = (await client.get("/api/countries")).json()
    assert len(countries) == 5

    # the later entry wins
    nigeria = (await client.get("/api/countries/nigeria")).json()
    assert nigeria["name"] == "NIGERIA"
    assert nigeria["population"] == 7


@pytest.mark.asyncio
async def test_second_refresh_with_other_casing_updates_in_place(client, upstream, refreshed):
    before = {c["name"].lower(): c["id"] for c in (await client.get("/api/countries")).json()}

    for entry in upstream.countries:
        entry["name"] = entry["name"].upper()

    r = await client.post("/api/countries/refresh")
    assert r.status_code == 200

    after = (await client.get("/api/countries")).json()
    assert len(after) == len(before)
    assert {c["name"].lower(): c["id"] for c in after} == before
    assert all(c["name"].isupper() for c in after)


@pytest.mark.asyncio
async def test_country_without_currency_has_zero_gdp(client, refreshed):
    r = await client.get("/api/countries/Antarctica")
    assert r.status_code == 200
    body = r.json()
    assert body["currency_code"] is None
    assert body["exchange_rate"] is None
    assert body["estimated_gdp"] == 0


@pytest.mark.asyncio
async def test_currency_without_rate_has_null_gdp(client, refreshed):
    body = (await client.get("/api/countries/atlantis")).json()
    assert body["currency_code"] == "ATL"
    assert body["exchange_rate"] is None
    assert body["estimated_gdp"] is None


@pytest.mark.asyncio
async def test_estimated_gdp_within_multiplier_range(client, refreshed):
    body = (await client.get("/api/countries/Nigeria")).json()
    population, rate = 206139589, 1600.5

    assert body["currency_code"] == "NGN"
    assert body["exchange_rate"] == rate
    assert population * 1000 / rate <= body["estimated_gdp"] < population * 2000 / rate


@pytest.mark.asyncio
async def test_testland_scenario(client, upstream):
    upstream.countries = [{"name": "Testland", "population": 1000, "currencies": [{"code": "TST"}]}]
    upstream.rates_payload = {"rates": {"TST": 2}}

    r = await client.post("/api/countries/refresh")
    assert r.status_code == 200
    assert r.json()["countries_processed"] == 1

    body = (await client.get("/api/countries/testland")).json()
    assert body["currency_code"] == "TST"
    assert body["exchange_rate"] == 2
    assert 500000 <= body["estimated_gdp"] < 1000000
    assert body["capital"] is None
    assert body["flag_url"] is None


@pytest.mark.asyncio
async def test_capital_list_uses_first_entry(client, upstream):
    upstream.countries = [{"name": "Chile", "capital": ["Santiago"], "population": 10, "currencies": []}]

    await client.post("/api/countries/refresh")

    body = (await client.get("/api/countries/chile")).json()
    assert body["capital"] == "Santiago"


@pytest.mark.asyncio
async def test_render_failure_does_not_fail_refresh(client, monkeypatch):
    from country_api.modules.countries import renderer

    def _broken(*_args, **_kwargs):
        raise OSError("disk full")

    monkeypatch.setattr(renderer, "draw_summary", _broken)

    r = await client.post("/api/countries/refresh")
    assert r.status_code == 200
    assert r.json()["countries_processed"] == 5


@pytest.mark.asyncio
async def test_concurrent_refreshes_both_succeed(client, upstream):
    first, second = await asyncio.gather(
        client.post("/api/countries/refresh"),
        client.post("/api/countries/refresh"),
    )

    assert first.status_code == 200, first.text
    assert second.status_code == 200, second.text

    countries = (await client.get("/api/countries")).json()
    assert sorted(c["name"] for c in countries) == sorted(c["name"] for c in upstream.countries)

    status = (await client.get("/api/status")).json()
    assert status["total_countries"] == len(upstream.countries)


@pytest.mark.asyncio
async def test_overlong_currency_code_is_stored_as_no_currency(client, upstream):
    upstream.countries.append(
        {"name": "Oddland", "population": 10, "currencies": [{"code": "(none-listed)"}]}
    )

    r = await client.post("/api/countries/refresh")
    assert r.status_code == 200, r.text

    oddland = (await client.get("/api/countries/oddland")).json()
    assert oddland["currency_code"] is None
    assert oddland["estimated_gdp"] == 0
