from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from fastapi import APIRouter, FastAPI
from fastapi.middleware import Middleware
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from country_api import __version__
from country_api.core.config import settings
from country_api.core.database import Database
from country_api.core.handler import init as init_exception_handlers
from country_api.core.logging import configure_logging, get_logger
from country_api.core.middlewares.logging import LoggingMiddleware
from country_api.core.services.http_client import JsonSourceClient
from country_api.modules.countries import models as country_models  # noqa: F401
from country_api.modules.countries.renderer import SummaryRenderer
from country_api.modules.countries.router import router as countries_router
from country_api.modules.countries.sources import CountrySources
from country_api.modules.health.router import router as health_router
from country_api.modules.status import models as status_models  # noqa: F401
from country_api.modules.status.router import router as status_router

configure_logging()
logger = get_logger(__name__)

openapi_tags = [
    {"name": "Countries", "description": "Cached countries with exchange rates and estimated GDP"},
    {"name": "Status", "description": "Last refresh summary"},
    {"name": "Health", "description": "Health Check Endpoint"},
]


def build_sources() -> CountrySources:
    return CountrySources(
        client=JsonSourceClient(timeout_seconds=settings.HTTP_TIMEOUT_SECONDS),
        countries_url=settings.COUNTRIES_API_URL,
        rates_url=settings.EXCHANGE_RATE_API_URL,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """
    Application lifespan events.

    Startup:
        - Connect the database and create missing tables
        - Open the HTTP client used for the external sources

    Shutdown:
        - Close the HTTP client and dispose of the engine
    """
    logger.info("Application startup: Initializing resources...")

    database: Database = app.state.database
    await database.connect()
    await database.create_all()

    if app.state.sources is None:
        app.state.sources = build_sources()

    logger.info(f"{settings.PROJECT_NAME} is ready")

    yield

    logger.info("Application shutdown: Cleaning up resources...")
    await app.state.sources.aclose()
    await database.disconnect()


def create_app(
    database: Database | None = None,
    sources: CountrySources | None = None,
    image_path: Path | None = None,
) -> FastAPI:
    """Build the application around explicitly supplied resources.

    Anything left as None is built from settings; the database and sources
    are opened by the lifespan handler.
    """
    middleware_list: list[Middleware] = [Middleware(LoggingMiddleware)]

    if settings.CORS_ORIGINS:
        middleware_list.insert(
            0,
            Middleware(
                CORSMiddleware,
                allow_origins=settings.CORS_ORIGINS,
                allow_methods=["*"],
                allow_headers=["*"],
            ),
        )

    app = FastAPI(
        title=settings.PROJECT_NAME,
        description="Country metadata merged with USD exchange rates and an estimated GDP",
        version=__version__,
        middleware=middleware_list,
        openapi_tags=openapi_tags,
        lifespan=lifespan,
        docs_url=None if settings.is_production else "/api/docs",
        redoc_url=None if settings.is_production else "/api/redoc",
        openapi_url=None if settings.is_production else "/api/openapi.json",
    )

    app.state.database = database or Database(settings.DATABASE_URL)
    app.state.sources = sources
    app.state.renderer = SummaryRenderer(app.state.database, image_path or settings.SUMMARY_IMAGE_PATH)

    init_exception_handlers(app)

    @app.get("/", response_class=PlainTextResponse, include_in_schema=False)
    async def root():
        return "Country Currency & Exchange API is Working!"

    api_router = APIRouter(prefix="/api")
    api_router.include_router(router=countries_router, prefix="/countries", tags=["Countries"])
    api_router.include_router(router=status_router, tags=["Status"])

    app.include_router(api_router)
    app.include_router(router=health_router)

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
