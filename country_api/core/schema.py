from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, field_serializer


class BaseSchema(BaseModel):
    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
    )

    @field_serializer("*", mode="wrap", when_used="unless-none")
    def serialize_datetime(self, value, handler, info):
        """Datetimes go out as ISO 8601 strings, enums as their values."""
        result = handler(value)
        if isinstance(value, datetime):
            return value.isoformat()
        elif isinstance(result, Enum):
            return result.value
        return result


class MessageResponse(BaseSchema):
    message: str
