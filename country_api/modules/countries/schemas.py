"""Schemas for countries module."""

from enum import Enum

from pydantic import Field

from country_api.core.schema import BaseSchema
from country_api.modules.countries.models import CURRENCY_CODE_MAX_LENGTH


class CountrySort(str, Enum):
    """Orderings accepted by the list endpoint."""

    GDP_DESC = "gdp_desc"
    GDP_ASC = "gdp_asc"
    POPULATION_DESC = "population_desc"
    POPULATION_ASC = "population_asc"


class CountryRecord(BaseSchema):
    """A derived country, validated before it is written to the store."""

    name: str = Field(default=..., min_length=1, max_length=255)
    capital: str | None = None
    region: str | None = None
    population: int = Field(default=..., ge=0)
    currency_code: str | None = Field(default=None, max_length=CURRENCY_CODE_MAX_LENGTH)
    exchange_rate: float | None = Field(default=None, gt=0)
    estimated_gdp: float | None = Field(default=None, ge=0)
    flag_url: str | None = None


class CountryResponse(BaseSchema):
    """Single country as served by the API."""

    id: int
    name: str = Field(default=..., description="Country name (e.g., 'Nigeria')")
    capital: str | None = None
    region: str | None = None
    population: int
    currency_code: str | None = Field(default=None, description="First listed currency code (e.g., 'NGN')")
    exchange_rate: float | None = Field(default=None, description="Units of the currency per USD")
    estimated_gdp: float | None = Field(default=None, description="population x random(1000-2000) / exchange_rate")
    flag_url: str | None = None


class RefreshResponse(BaseSchema):
    status: str = "success"
    message: str = "Cache refreshed successfully"
    countries_processed: int
