"""Marker configuration."""

from pydantic import BaseModel, field_validator

DEFAULT_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


class MarkerConfig(BaseModel):
    """Marker configuration."""

    memory_in_megabytes: bool = True
    timestamp_format: str = DEFAULT_TIMESTAMP_FORMAT
    real_memory_usage: bool = False

    @field_validator("timestamp_format", mode="before")
    @classmethod
    def _default_timestamp_format(cls, value: str | None) -> str:
        # An empty or missing format means the default one
        return value or DEFAULT_TIMESTAMP_FORMAT
