import time
from datetime import UTC, datetime

from sqlalchemy import text

from country_api import __version__
from country_api.core.config import settings
from country_api.core.database import Database
from country_api.core.logging import get_logger
from country_api.modules.health.schemas import HealthCheckResponse, ServiceStatus

logger = get_logger(__name__)


class HealthCheckService:
    """Checks the components the API cannot serve without."""

    def __init__(self, database: Database):
        self.database = database

    async def check_database(self) -> ServiceStatus:
        """Round-trip a trivial query through the store."""
        start = time.perf_counter()
        try:
            async with self.database.session() as session:
                result = await session.execute(text("SELECT 1"))
                result.scalar()
            response_time = (time.perf_counter() - start) * 1000
            return ServiceStatus(
                name="database",
                status="healthy",
                message=f"{self.database.engine.dialect.name} connection successful",
                response_time_ms=round(response_time, 2),
            )
        except Exception as e:
            response_time = (time.perf_counter() - start) * 1000
            logger.error(f"Database health check failed: {e}")
            return ServiceStatus(
                name="database",
                status="unhealthy",
                message=f"Database connection failed: {e!s}",
                response_time_ms=round(response_time, 2),
            )

    async def get_health_status(self) -> HealthCheckResponse:
        db_status = await self.check_database()
        services = {"database": db_status}

        overall_status = "healthy" if all(s.status == "healthy" for s in services.values()) else "unhealthy"

        return HealthCheckResponse(
            status=overall_status,
            version=__version__,
            environment=settings.ENVIRONMENT,
            services=services,
            timestamp=datetime.now(tz=UTC).isoformat(),
        )
