"""common-schema - normalize, validate and transform documents against declarative schemas."""

from typing import Any

from common_schema.builders import Mixed, map_, or_
from common_schema.config import CommonSchemaConfig, NormalizeOptions
from common_schema.errors import (
    CommonSchemaError,
    FieldError,
    SchemaError,
    ValidationError,
    is_field_error,
    is_validation_error,
)
from common_schema.factory import SchemaFactory
from common_schema.schema import Schema
from common_schema.schema_types import SchemaType, TypeMatch
from common_schema.sentinels import ABSENT
from common_schema.traversal import Handlers

__version__ = "0.1.0"

default_schema_factory = SchemaFactory()


def create_schema(schema_data: Any) -> Schema:
    """Create a Schema using the default factory."""
    return default_schema_factory.create_schema(schema_data)


__all__ = [
    "ABSENT",
    "CommonSchemaConfig",
    "CommonSchemaError",
    "FieldError",
    "Handlers",
    "Mixed",
    "NormalizeOptions",
    "Schema",
    "SchemaError",
    "SchemaFactory",
    "SchemaType",
    "TypeMatch",
    "ValidationError",
    "create_schema",
    "default_schema_factory",
    "is_field_error",
    "is_validation_error",
    "map_",
    "or_",
]
