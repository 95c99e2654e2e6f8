"""Country record as persisted by the refresh workflow."""

from sqlalchemy import BigInteger, Float, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from country_api.core.database import Base


CURRENCY_CODE_MAX_LENGTH = 10


def normalize_name(name: str) -> str:
    """Lookup key for case-insensitive name matching."""
    return name.casefold()


class Country(Base):
    __tablename__ = "countries"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(length=255), nullable=False)
    # Unique case-folded name; every by-name lookup goes through this column
    name_key: Mapped[str] = mapped_column(String(length=255), unique=True, index=True, nullable=False)

    capital: Mapped[str | None] = mapped_column(String(length=255), nullable=True)
    region: Mapped[str | None] = mapped_column(String(length=100), nullable=True, index=True)
    population: Mapped[int] = mapped_column(BigInteger, nullable=False)

    currency_code: Mapped[str | None] = mapped_column(String(length=CURRENCY_CODE_MAX_LENGTH), nullable=True, index=True)
    exchange_rate: Mapped[float | None] = mapped_column(Float, nullable=True)
    estimated_gdp: Mapped[float | None] = mapped_column(Float, nullable=True)

    flag_url: Mapped[str | None] = mapped_column(String(length=500), nullable=True)
