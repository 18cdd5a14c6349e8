"""Shared schema pieces."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

# Largest value a SQLite INTEGER column can hold
MAX_INTEGER = 2**63 - 1


def format_timestamp(value: datetime) -> str:
    """Render a timestamp the way the wire contract expects (second resolution)."""
    return value.strftime(TIMESTAMP_FORMAT)


class CamelModel(BaseModel):
    """Base schema whose JSON keys are camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SuccessResponse(BaseModel):
    """Acknowledgement for mutations that return no resource."""

    success: bool = Field(default=True, description="Always true on success")
