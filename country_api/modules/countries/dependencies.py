from fastapi import Depends, Request

from country_api.core.config import settings
from country_api.core.database import Database, get_database
from country_api.modules.countries.renderer import SummaryRenderer
from country_api.modules.countries.service import RefreshService
from country_api.modules.countries.sources import CountrySources


def get_sources(request: Request) -> CountrySources:
    return request.app.state.sources


def get_renderer(request: Request) -> SummaryRenderer:
    return request.app.state.renderer


def get_refresh_service(
    database: Database = Depends(get_database),
    sources: CountrySources = Depends(get_sources),
) -> RefreshService:
    return RefreshService(database, sources, concurrency=settings.REFRESH_CONCURRENCY)
