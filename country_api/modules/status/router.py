from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from country_api.core.database import get_db
from country_api.modules.status.schemas import StatusResponse
from country_api.modules.status.service import StatusService

router = APIRouter()


@router.get(
    path="/status",
    response_model=StatusResponse,
    summary="Refresh status",
    description="Timestamp and country count of the most recent successful refresh.",
)
async def get_status(db: AsyncSession = Depends(get_db)):
    service = StatusService(db)
    return await service.get_status()
