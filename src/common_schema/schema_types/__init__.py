"""Schema type plugins."""

from common_schema.schema_types.base import SchemaType, TypeMatch
from common_schema.schema_types.core import (
    CORE_TYPES,
    ArraySchemaType,
    BinarySchemaType,
    BooleanSchemaType,
    DateSchemaType,
    MapSchemaType,
    MixedSchemaType,
    NumberSchemaType,
    ObjectSchemaType,
    OrSchemaType,
    StringSchemaType,
)
from common_schema.schema_types.geo import GEO_TYPES, GeoJSONSchemaType, GeoPointSchemaType

__all__ = [
    "SchemaType",
    "TypeMatch",
    "CORE_TYPES",
    "GEO_TYPES",
    "ObjectSchemaType",
    "ArraySchemaType",
    "MapSchemaType",
    "OrSchemaType",
    "StringSchemaType",
    "NumberSchemaType",
    "DateSchemaType",
    "BinarySchemaType",
    "BooleanSchemaType",
    "MixedSchemaType",
    "GeoPointSchemaType",
    "GeoJSONSchemaType",
]
