"""Country repository for refresh upserts and API queries."""

from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from country_api.core.repository import BaseRepository
from country_api.modules.countries.models import Country, normalize_name
from country_api.modules.countries.schemas import CountryRecord, CountrySort

_SORT_COLUMNS = {
    CountrySort.GDP_DESC: Country.estimated_gdp.desc().nulls_last(),
    CountrySort.GDP_ASC: Country.estimated_gdp.asc().nulls_last(),
    CountrySort.POPULATION_DESC: Country.population.desc(),
    CountrySort.POPULATION_ASC: Country.population.asc(),
}


class CountryRepository(BaseRepository[Country]):
    """Repository for Country model operations."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, Country)

    async def get_by_name(self, name: str) -> Country | None:
        """Get a country by name, ignoring case.

        Args:
            name: Country name in any casing

        Returns:
            Country if found, None otherwise
        """
        statement = select(self.model).where(self.model.name_key == normalize_name(name))
        result = await self.db.scalar(statement)
        return result

    async def upsert(self, record: CountryRecord) -> Country:
        """Insert the record, or overwrite the row that has the same name in any casing."""
        values = record.model_dump()
        values["name_key"] = normalize_name(record.name)

        await self.upsert_values(values, index_elements=[self.model.name_key])
        return await self.get_by_name(record.name)

    async def search(
        self,
        region: str | None = None,
        currency: str | None = None,
        sort: CountrySort | None = None,
    ) -> Sequence[Country]:
        statement = select(self.model)
        if region:
            statement = statement.where(self.model.region == region)
        if currency:
            statement = statement.where(self.model.currency_code == currency.upper())

        if sort is not None:
            statement = statement.order_by(_SORT_COLUMNS[sort], self.model.id)
        else:
            statement = statement.order_by(self.model.id)

        result = await self.db.scalars(statement)
        return result.all()

    async def top_by_gdp(self, limit: int = 5) -> Sequence[Country]:
        statement = (
            select(self.model)
            .where(self.model.estimated_gdp.is_not(None))
            .order_by(self.model.estimated_gdp.desc(), self.model.id)
            .limit(limit)
        )
        result = await self.db.scalars(statement)
        return result.all()
