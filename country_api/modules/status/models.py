"""Singleton row describing the most recent successful refresh."""

from datetime import datetime

from sqlalchemy import DateTime, Integer
from sqlalchemy.orm import Mapped, mapped_column

from country_api.core.database import Base

# The table only ever holds this row
STATUS_SLOT_ID = 1


class RefreshStatus(Base):
    __tablename__ = "refresh_status"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, default=STATUS_SLOT_ID)
    last_refreshed_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    total_countries: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
