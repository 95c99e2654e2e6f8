from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from country_api.core.database import Database, get_database
from country_api.modules.health.schemas import HealthCheckResponse, LivenessResponse
from country_api.modules.health.service import HealthCheckService

router = APIRouter(prefix="/api/health", tags=["Health"])


@router.get(
    "",
    response_model=HealthCheckResponse,
    status_code=status.HTTP_200_OK,
    summary="Complete Health Check",
    description="Check health status of the database. Responds 503 when it is unreachable.",
)
async def health_check(database: Database = Depends(get_database)):
    service = HealthCheckService(database)
    health = await service.get_health_status()
    if health.status != "healthy":
        return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content=health.model_dump())
    return health


@router.get(
    "/live",
    response_model=LivenessResponse,
    status_code=status.HTTP_200_OK,
    summary="Liveness Probe",
    description="Returns 200 while the process is serving requests. Does not touch dependencies.",
)
async def liveness():
    return LivenessResponse(status="ok")
