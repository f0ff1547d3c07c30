"""Configuration for common-schema, with environment variable support.

Library calls take their options as explicit keyword arguments. The config
supplies the defaults used by the command line interface and by
NormalizeOptions.from_config().
"""

import sys
from dataclasses import dataclass

from loguru import logger
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class CommonSchemaConfig(BaseSettings):
    """Settings read from COMMON_SCHEMA_* environment variables."""

    log_level: str = Field(default="WARNING", description="Level for the stderr log sink")
    allow_unknown_fields: bool = Field(default=False)
    allow_missing_fields: bool = Field(default=False)
    remove_unknown_fields: bool = Field(default=False)
    serialize: bool = Field(default=False)
    load_geo_types: bool = Field(
        default=True, description="Register the geopoint and geojson types on new factories"
    )

    model_config = SettingsConfigDict(
        env_prefix="COMMON_SCHEMA_",
        extra="ignore",
    )


@dataclass(frozen=True)
class NormalizeOptions:
    """Options for a single validate() or normalize() call.

    allow_unknown_fields: keep fields that have no schema without an error
    allow_missing_fields: skip the required check
    remove_unknown_fields: strip fields that have no schema
    serialize: produce serialization-friendly primitives (ISO dates, base64)
    """

    allow_unknown_fields: bool = False
    allow_missing_fields: bool = False
    remove_unknown_fields: bool = False
    serialize: bool = False

    @classmethod
    def from_config(cls, config: CommonSchemaConfig) -> "NormalizeOptions":
        return cls(
            allow_unknown_fields=config.allow_unknown_fields,
            allow_missing_fields=config.allow_missing_fields,
            remove_unknown_fields=config.remove_unknown_fields,
            serialize=config.serialize,
        )


def setup_logging(level: str = "WARNING") -> None:
    """Replace loguru's default sink with a stderr sink at the given level."""
    logger.remove()
    logger.add(sys.stderr, level=level, format="<level>{level: <8}</level> {message}")
    logger.debug(f"Logging configured at level {level}")
