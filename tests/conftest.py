import os

# SQLite allows one writer at a time, so upserts run one by one under test
os.environ["REFRESH_CONCURRENCY"] = "1"
os.environ.setdefault("ENVIRONMENT", "test")

import copy

import httpx
import pytest

from api import create_app
from country_api.core.database import Database
from country_api.core.services.http_client import JsonSourceClient
from country_api.modules.countries.sources import CountrySources

COUNTRIES_URL = "https://countries.test/v2/all"
RATES_URL = "https://rates.test/v6/latest/USD"

SAMPLE_COUNTRIES = [
    {
        "name": "Nigeria",
        "capital": "Abuja",
        "region": "Africa",
        "population": 206139589,
        "flag": "https://flagcdn.com/ng.svg",
        "currencies": [{"code": "NGN", "name": "Nigerian naira", "symbol": "₦"}],
    },
    {
        "name": "Ghana",
        "capital": "Accra",
        "region": "Africa",
        "population": 31072940,
        "flag": "https://flagcdn.com/gh.svg",
        "currencies": [{"code": "GHS", "name": "Ghanaian cedi", "symbol": "₵"}],
    },
    {
        "name": "France",
        "capital": "Paris",
        "region": "Europe",
        "population": 67391582,
        "flag": "https://flagcdn.com/fr.svg",
        "currencies": [{"code": "EUR", "name": "Euro", "symbol": "€"}],
    },
    {
        "name": "Antarctica",
        "region": "Polar",
        "population": 1000,
        "flag": "https://flagcdn.com/aq.svg",
    },
    {
        "name": "Atlantis",
        "capital": "Poseidonis",
        "region": "Ocean",
        "population": 500,
        "currencies": [{"code": "ATL", "name": "Atlantean drachma"}],
    },
]

SAMPLE_RATES = {"USD": 1, "NGN": 1600.5, "GHS": 15.2, "EUR": 0.92}


class FakeUpstream:
    """Both external sources, served from mutable attributes through httpx.MockTransport."""

    def __init__(self):
        self.countries = copy.deepcopy(SAMPLE_COUNTRIES)
        self.rates_payload = {"result": "success", "base_code": "USD", "rates": dict(SAMPLE_RATES)}
        self.countries_status = 200
        self.rates_status = 200
        self.fail_connect = set()
        self.requests: list[str] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        host = request.url.host
        self.requests.append(host)

        if host in self.fail_connect:
            raise httpx.ConnectError("connection refused", request=request)
        if host == "countries.test":
            return httpx.Response(self.countries_status, json=self.countries)
        if host == "rates.test":
            return httpx.Response(self.rates_status, json=self.rates_payload)
        return httpx.Response(404, json={"message": "not found"})


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
async def database(tmp_path):
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'countries.db'}")
    await db.connect()
    await db.create_all()
    try:
        yield db
    finally:
        await db.disconnect()


@pytest.fixture
def image_path(tmp_path):
    return tmp_path / "cache" / "summary.png"


@pytest.fixture
async def app(database, upstream, image_path):
    http = httpx.AsyncClient(transport=httpx.MockTransport(upstream.handler))
    sources = CountrySources(
        client=JsonSourceClient(client=http),
        countries_url=COUNTRIES_URL,
        rates_url=RATES_URL,
    )
    yield create_app(database=database, sources=sources, image_path=image_path)
    await http.aclose()


@pytest.fixture
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def refreshed(client):
    r = await client.post("/api/countries/refresh")
    assert r.status_code == 200, r.text
    return r.json()
