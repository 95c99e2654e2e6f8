from sqlalchemy.ext.asyncio import AsyncSession

from country_api.core.exception import NotFoundError
from country_api.modules.status.models import RefreshStatus
from country_api.modules.status.repository import RefreshStatusRepository


class StatusService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.status_repo = RefreshStatusRepository(db)

    async def get_status(self) -> RefreshStatus:
        status = await self.status_repo.get_current()
        if not status:
            raise NotFoundError("Status not found. Please run refresh.")
        return status
