"""Router for countries endpoints."""

from fastapi import APIRouter, BackgroundTasks, Depends, Query
from fastapi.responses import FileResponse
from sqlalchemy.ext.asyncio import AsyncSession

from country_api.core.database import get_db
from country_api.core.exception import NotFoundError
from country_api.core.schema import MessageResponse
from country_api.modules.countries.dependencies import get_refresh_service, get_renderer
from country_api.modules.countries.renderer import SummaryRenderer
from country_api.modules.countries.schemas import CountryResponse, CountrySort, RefreshResponse
from country_api.modules.countries.service import CountryService, RefreshService

router = APIRouter()


@router.post(
    path="/refresh",
    response_model=RefreshResponse,
    summary="Refresh country cache",
    description="Fetch countries and exchange rates, recompute estimated GDP and upsert every country.",
)
async def refresh_countries(
    background_tasks: BackgroundTasks,
    service: RefreshService = Depends(get_refresh_service),
    renderer: SummaryRenderer = Depends(get_renderer),
) -> RefreshResponse:
    """
    Refresh the cached countries.

    The summary image is redrawn after the response is sent; a rendering
    failure is only logged.

    Raises:
        503: A source could not be fetched
        400: A derived country failed validation
    """
    processed = await service.refresh()
    background_tasks.add_task(renderer.render)
    return RefreshResponse(countries_processed=processed)


@router.get(
    path="",
    response_model=list[CountryResponse],
    summary="List countries",
    description="Filter by region and currency code, optionally sorted by estimated GDP or population.",
)
async def list_countries(
    region: str | None = Query(default=None, description="Exact region, e.g. 'Africa'"),
    currency: str | None = Query(default=None, description="Currency code, case-insensitive"),
    sort: CountrySort | None = Query(default=None, description="gdp_desc, gdp_asc, population_desc, population_asc"),
    db: AsyncSession = Depends(get_db),
):
    service = CountryService(db)
    return await service.list_countries(region=region, currency=currency, sort=sort)


@router.get(
    path="/image",
    response_class=FileResponse,
    summary="Summary image",
    description="The PNG rendered after the last refresh.",
)
async def get_summary_image(renderer: SummaryRenderer = Depends(get_renderer)):
    if not renderer.image_path.is_file():
        raise NotFoundError("Summary image not found")
    return FileResponse(renderer.image_path, media_type="image/png")


@router.get(
    path="/{name}",
    response_model=CountryResponse,
    summary="Get country by name",
    description="Case-insensitive exact name match.",
)
async def get_country(name: str, db: AsyncSession = Depends(get_db)):
    service = CountryService(db)
    return await service.get_country(name)


@router.delete(
    path="/{name}",
    response_model=MessageResponse,
    summary="Delete country by name",
    description="Case-insensitive exact name match.",
)
async def delete_country(name: str, db: AsyncSession = Depends(get_db)) -> MessageResponse:
    service = CountryService(db)
    country = await service.delete_country(name)
    return MessageResponse(message=f"Country '{country.name}' deleted successfully")
