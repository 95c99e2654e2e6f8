"""External country metadata and exchange rate sources."""

import asyncio
from typing import Any

from country_api.core.exception import SourceUnavailableError
from country_api.core.logging import get_logger
from country_api.core.services.http_client import JsonSourceClient

logger = get_logger(__name__)

COUNTRIES_SOURCE = "Countries API"
RATES_SOURCE = "Exchange Rates API"


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def parse_countries(payload: Any) -> list[dict[str, Any]]:
    """Accept only a list of JSON objects."""
    if not isinstance(payload, list):
        raise SourceUnavailableError(COUNTRIES_SOURCE, "expected a list of countries")
    if not all(isinstance(entry, dict) for entry in payload):
        raise SourceUnavailableError(COUNTRIES_SOURCE, "every country entry must be an object")
    return payload


def parse_rates(payload: Any) -> dict[str, float]:
    """Pull the ``rates`` mapping out of the payload, rejecting anything that is not code -> number."""
    rates = payload.get("rates") if isinstance(payload, dict) else None
    if not isinstance(rates, dict):
        raise SourceUnavailableError(RATES_SOURCE, "response has no rates mapping")
    if not all(isinstance(code, str) and _is_number(rate) for code, rate in rates.items()):
        raise SourceUnavailableError(RATES_SOURCE, "rates must map currency codes to numbers")
    return {code: float(rate) for code, rate in rates.items()}


class CountrySources:
    """Both upstream sources behind one shared HTTP client."""

    def __init__(self, client: JsonSourceClient, countries_url: str, rates_url: str):
        self.client = client
        self.countries_url = countries_url
        self.rates_url = rates_url

    async def aclose(self) -> None:
        await self.client.aclose()

    async def fetch_countries(self) -> list[dict[str, Any]]:
        payload = await self.client.get_json(self.countries_url, source=COUNTRIES_SOURCE)
        return parse_countries(payload)

    async def fetch_rates(self) -> dict[str, float]:
        payload = await self.client.get_json(self.rates_url, source=RATES_SOURCE)
        return parse_rates(payload)

    async def fetch_all(self) -> tuple[list[dict[str, Any]], dict[str, float]]:
        """Fetch both sources concurrently; the first failure propagates."""
        countries, rates = await asyncio.gather(self.fetch_countries(), self.fetch_rates())
        logger.info(f"Fetched {len(countries)} countries and {len(rates)} exchange rates")
        return countries, rates
