from datetime import datetime

from pydantic import Field

from country_api.core.schema import BaseSchema


class StatusResponse(BaseSchema):
    last_refreshed_at: datetime = Field(default=..., description="When the last successful refresh started")
    total_countries: int = Field(default=..., description="Countries processed by that refresh")
