"""Refresh workflow and queries over the country store."""

import asyncio
import random
from collections.abc import Callable, Mapping, Sequence
from datetime import UTC, datetime
from typing import Any

from pydantic import ValidationError as SchemaValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from country_api.core.database import Database
from country_api.core.exception import NotFoundError, ValidationError
from country_api.core.logging import get_logger
from country_api.modules.countries.models import CURRENCY_CODE_MAX_LENGTH, Country, normalize_name
from country_api.modules.countries.repository import CountryRepository
from country_api.modules.countries.schemas import CountryRecord, CountrySort
from country_api.modules.countries.sources import CountrySources
from country_api.modules.status.repository import RefreshStatusRepository

logger = get_logger(__name__)

GDP_MULTIPLIER_MIN = 1000
GDP_MULTIPLIER_MAX = 2000


def random_multiplier() -> float:
    """Uniform draw from [1000, 2000)."""
    return GDP_MULTIPLIER_MIN + random.random() * (GDP_MULTIPLIER_MAX - GDP_MULTIPLIER_MIN)


def _first_currency_code(currencies: Any) -> str | None:
    if isinstance(currencies, list) and currencies:
        first = currencies[0]
        code = first.get("code") if isinstance(first, dict) else None
        # Codes that do not fit the column count as no currency
        if isinstance(code, str) and 0 < len(code) <= CURRENCY_CODE_MAX_LENGTH:
            return code
    return None


def _capital(value: Any) -> str | None:
    # v2 of the source sends a string, v3 a list of strings
    if isinstance(value, list):
        return value[0] if value else None
    return value or None


def derive_country(
    entry: Mapping[str, Any],
    rates: Mapping[str, float],
    multiplier: Callable[[], float] = random_multiplier,
) -> CountryRecord:
    """
    Merge one source country with the rate table.

    - No currency: code and rate are null, estimated GDP is 0.
    - Currency with a positive rate and a known population:
      ``population * multiplier() / rate``.
    - Otherwise estimated GDP is null.

    Raises:
        pydantic.ValidationError: the merged record breaks the record schema
    """
    population = entry.get("population")
    currency_code = _first_currency_code(entry.get("currencies"))

    exchange_rate = rates.get(currency_code) if currency_code else None
    if exchange_rate is not None and exchange_rate <= 0:
        exchange_rate = None

    if currency_code is None:
        estimated_gdp = 0.0
    elif isinstance(population, (int, float)) and exchange_rate is not None:
        estimated_gdp = population * multiplier() / exchange_rate
    else:
        estimated_gdp = None

    return CountryRecord(
        name=entry.get("name"),
        capital=_capital(entry.get("capital")),
        region=entry.get("region") or None,
        population=population,
        currency_code=currency_code,
        exchange_rate=exchange_rate,
        estimated_gdp=estimated_gdp,
        flag_url=entry.get("flag") or None,
    )


def _validation_details(entry: Mapping[str, Any], exc: SchemaValidationError) -> list[dict[str, Any]]:
    country = entry.get("name") or "<unnamed>"
    return [
        {
            "country": country,
            "field": ".".join(str(loc) for loc in error["loc"]),
            "message": error["msg"],
        }
        for error in exc.errors()
    ]


class RefreshService:
    """Pulls both sources, derives every country and upserts it."""

    def __init__(
        self,
        database: Database,
        sources: CountrySources,
        concurrency: int = 20,
        multiplier: Callable[[], float] = random_multiplier,
    ):
        self.database = database
        self.sources = sources
        self.concurrency = concurrency
        self.multiplier = multiplier

    def build_records(
        self, countries: Sequence[Mapping[str, Any]], rates: Mapping[str, float]
    ) -> list[CountryRecord]:
        """Derive and validate all records, keeping the last one per case-insensitive name."""
        records: dict[str, CountryRecord] = {}
        for entry in countries:
            try:
                record = derive_country(entry, rates, self.multiplier)
            except SchemaValidationError as e:
                raise ValidationError("Validation failed", details=_validation_details(entry, e)) from e
            records[normalize_name(record.name)] = record
        return list(records.values())

    async def _upsert(self, record: CountryRecord, semaphore: asyncio.Semaphore) -> None:
        async with semaphore:
            async with self.database.session() as session:
                await CountryRepository(session).upsert(record)

    async def refresh(self) -> int:
        """
        Run one refresh.

        Returns:
            Number of country records upserted

        Raises:
            SourceUnavailableError: a source failed; nothing was written
            ValidationError: a derived record was rejected; nothing was written
        """
        refreshed_at = datetime.now(tz=UTC)
        logger.info("Refresh started")

        countries, rates = await self.sources.fetch_all()
        records = self.build_records(countries, rates)

        semaphore = asyncio.Semaphore(self.concurrency)
        await asyncio.gather(*(self._upsert(record, semaphore) for record in records))

        async with self.database.session() as session:
            await RefreshStatusRepository(session).save(refreshed_at, len(records))

        logger.info(f"Refresh finished: {len(records)} countries processed")
        return len(records)


class CountryService:
    """Read and delete operations for the countries API."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.country_repo = CountryRepository(db)

    async def list_countries(
        self,
        region: str | None = None,
        currency: str | None = None,
        sort: CountrySort | None = None,
    ) -> Sequence[Country]:
        return await self.country_repo.search(region=region, currency=currency, sort=sort)

    async def get_country(self, name: str) -> Country:
        country = await self.country_repo.get_by_name(name)
        if not country:
            raise NotFoundError("Country not found")
        return country

    async def delete_country(self, name: str) -> Country:
        country = await self.country_repo.get_by_name(name)
        if not country:
            raise NotFoundError("Country not found")

        await self.country_repo.remove(country)
        logger.info(f"Deleted country '{country.name}'")
        return country
