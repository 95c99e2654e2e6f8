"""Summary image of the refresh status and the top countries by estimated GDP."""

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from fastapi.concurrency import run_in_threadpool
from PIL import Image, ImageDraw, ImageFont

from country_api.core.database import Database
from country_api.core.logging import get_logger
from country_api.modules.countries.repository import CountryRepository
from country_api.modules.status.repository import RefreshStatusRepository

logger = get_logger(__name__)

IMAGE_SIZE = (600, 400)
BACKGROUND = "#f0f0f0"
TITLE = "Country Data Summary"
EMPTY_RANKING = "No countries with estimated GDP available."
TOP_LIMIT = 5

FONT_SIZE = 18
TITLE_FONT_SIZE = 24
LINE_HEIGHT = int(FONT_SIZE * 1.5)


@dataclass(frozen=True)
class SummarySnapshot:
    total_countries: int = 0
    last_refreshed_at: datetime | None = None
    top_countries: list[tuple[str, float]] = field(default_factory=list)

    def ranking_lines(self) -> list[str]:
        if not self.top_countries:
            return [EMPTY_RANKING]
        return [f"{rank}. {name}: ${gdp:,.2f}" for rank, (name, gdp) in enumerate(self.top_countries, start=1)]

    def refreshed_label(self) -> str:
        if self.last_refreshed_at is None:
            return "N/A"
        return self.last_refreshed_at.strftime("%Y-%m-%d %H:%M:%S UTC")


def _font(size: int, bold: bool = False) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    name = "DejaVuSans-Bold.ttf" if bold else "DejaVuSans.ttf"
    try:
        return ImageFont.truetype(name, size)
    except OSError:
        return ImageFont.load_default(size=size)


def draw_summary(snapshot: SummarySnapshot, path: Path) -> Path:
    """Draw the summary and write it as PNG, replacing any previous image."""
    img = Image.new("RGB", IMAGE_SIZE, color=BACKGROUND)
    draw = ImageDraw.Draw(img)
    body = _font(FONT_SIZE)
    heading = _font(FONT_SIZE, bold=True)

    y = 40
    draw.text((20, y - TITLE_FONT_SIZE), TITLE, fill="#333333", font=_font(TITLE_FONT_SIZE, bold=True))
    y += LINE_HEIGHT * 2

    draw.text((20, y - FONT_SIZE), f"Total Countries: {snapshot.total_countries}", fill="#555555", font=body)
    y += LINE_HEIGHT
    draw.text((20, y - FONT_SIZE), f"Last Refreshed: {snapshot.refreshed_label()}", fill="#555555", font=body)
    y += LINE_HEIGHT * 2

    draw.text((20, y - FONT_SIZE), "Top 5 Countries by Estimated GDP:", fill="#333333", font=heading)
    y += LINE_HEIGHT

    for line in snapshot.ranking_lines():
        draw.text((40, y - FONT_SIZE), line, fill="#666666", font=body)
        y += LINE_HEIGHT

    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_name(f".{path.name}.tmp")
    img.save(tmp_path, "PNG")
    tmp_path.replace(path)
    return path


class SummaryRenderer:
    """Reads the store and redraws the summary image. Never raises."""

    def __init__(self, database: Database, image_path: Path):
        self.database = database
        self.image_path = Path(image_path)

    async def snapshot(self) -> SummarySnapshot:
        async with self.database.session() as session:
            status = await RefreshStatusRepository(session).get_current()
            top = await CountryRepository(session).top_by_gdp(limit=TOP_LIMIT)

        return SummarySnapshot(
            total_countries=status.total_countries if status else 0,
            last_refreshed_at=status.last_refreshed_at if status else None,
            top_countries=[(country.name, country.estimated_gdp) for country in top],
        )

    async def render(self) -> None:
        try:
            snapshot = await self.snapshot()
            path = await run_in_threadpool(draw_summary, snapshot, self.image_path)
        except Exception:
            logger.exception("Error generating summary image")
            return

        logger.info(f"Summary image generated at {path}")
