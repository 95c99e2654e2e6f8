from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from country_api.core.repository import BaseRepository
from country_api.modules.status.models import STATUS_SLOT_ID, RefreshStatus


class RefreshStatusRepository(BaseRepository[RefreshStatus]):
    def __init__(self, db: AsyncSession):
        super().__init__(db, RefreshStatus)

    async def get_current(self) -> RefreshStatus | None:
        return await self.get(STATUS_SLOT_ID)

    async def save(self, last_refreshed_at: datetime, total_countries: int) -> RefreshStatus:
        """Overwrite the singleton, creating it on the first refresh; the last writer wins."""
        values = {"last_refreshed_at": last_refreshed_at, "total_countries": total_countries}

        await self.upsert_values({"id": STATUS_SLOT_ID, **values}, index_elements=[self.model.id])
        return await self.get_current()
