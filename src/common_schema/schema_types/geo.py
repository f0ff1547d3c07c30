"""Geographic schema types: geopoint and geojson.

Both are registered like any third-party type would be, through
SchemaFactory.register_type(). They only rely on the public SchemaType
interface.
"""

import weakref
from typing import TYPE_CHECKING, Any

from loguru import logger

from common_schema.config import NormalizeOptions
from common_schema.errors import FieldError, is_field_error, is_validation_error
from common_schema.schema_types.base import SchemaType, TypeMatch
from common_schema.schema_types.core import NumberSchemaType, is_number

if TYPE_CHECKING:
    from common_schema.schema import Schema


_number_type = NumberSchemaType()

POSITION_FORMAT_ERROR = "Must be array in form [ long, lat ]"


def validate_position(value: Any) -> None:
    """Check a [long, lat] pair.

    Raises:
        FieldError: If value is not a pair of numbers within range.
    """
    if not isinstance(value, list) or len(value) != 2 or not all(is_number(item) for item in value):
        raise FieldError("invalid_type", POSITION_FORMAT_ERROR)
    if value[0] < -180 or value[0] > 180:
        raise FieldError("invalid_format", "Longitude must be between -180 and 180")
    if value[1] < -90 or value[1] > 90:
        raise FieldError("invalid_format", "Latitude must be between -90 and 90")


def normalize_position(value: Any, schema: "Schema") -> list:
    """Coerce "long,lat" strings and numeric strings into a [long, lat] pair."""
    if isinstance(value, str):
        value = value.split(",")
    if isinstance(value, (list, tuple)):
        if len(value) != 2:
            raise FieldError("invalid_type", POSITION_FORMAT_ERROR)
        options = NormalizeOptions()
        value = [_number_type.normalize(item, {"type": "number"}, None, options, schema) for item in value]
    validate_position(value)
    return value


class GeoPointSchemaType(SchemaType):
    """A single [long, lat] position."""

    default_name = "geopoint"

    def validate(self, value, subschema, field, options, schema):
        validate_position(value)

    def normalize(self, value, subschema, field, options, schema):
        return normalize_position(value, schema)

    def check_type_match(self, value, subschema, schema):
        try:
            validate_position(value)
            return TypeMatch.EXACT
        except FieldError:
            pass
        try:
            normalize_position(value, schema)
            return TypeMatch.COERCIBLE
        except FieldError:
            return TypeMatch.NONE

    def to_json_schema(self, subschema, schema):
        return {
            "type": "array",
            "items": {"type": "number"},
            "minItems": 2,
            "maxItems": 2,
            "description": subschema.get("description") or "Longitude, Latitude",
        }


# Raw schemas for each GeoJSON geometry, keyed by its "type" member
GEOJSON_GEOMETRY_SCHEMAS: dict[str, dict] = {
    "Point": {"type": "object", "properties": {"type": str, "coordinates": "geopoint"}},
    "LineString": {"type": "object", "properties": {"type": str, "coordinates": ["geopoint"]}},
    "Polygon": {"type": "object", "properties": {"type": str, "coordinates": [["geopoint"]]}},
    "MultiPoint": {"type": "object", "properties": {"type": str, "coordinates": ["geopoint"]}},
    "MultiLineString": {"type": "object", "properties": {"type": str, "coordinates": [["geopoint"]]}},
    "MultiPolygon": {"type": "object", "properties": {"type": str, "coordinates": [[["geopoint"]]]}},
    "GeometryCollection": {"type": "object", "properties": {"type": str, "geometries": ["geojson"]}},
}


class GeoJSONSchemaType(SchemaType):
    """A GeoJSON geometry object.

    Each geometry is checked against an internal schema built lazily from
    the factory of the schema being validated, so the internal schemas see
    the same geopoint and geojson registrations.
    """

    default_name = "geojson"

    def __init__(self, name: str | None = None):
        super().__init__(name)
        # factory -> geometry type -> Schema
        self._geometry_schemas: weakref.WeakKeyDictionary = weakref.WeakKeyDictionary()

    def _get_geometry_schema(self, geometry_type: str, schema: "Schema") -> "Schema":
        cache = self._geometry_schemas.setdefault(schema.factory, {})
        cached = cache.get(geometry_type)
        if cached is not None:
            return cached
        if geometry_type not in GEOJSON_GEOMETRY_SCHEMAS:
            raise FieldError("invalid_type", f"Unrecognized GeoJSON type: {geometry_type}")
        logger.debug(f"Building internal schema for GeoJSON {geometry_type}")
        geometry_schema = schema.factory.create_schema(GEOJSON_GEOMETRY_SCHEMAS[geometry_type])
        cache[geometry_type] = geometry_schema
        return geometry_schema

    def _check_shape(self, value: Any, subschema: dict) -> None:
        if not isinstance(value, dict):
            raise FieldError("invalid_type", "GeoJSON object must be object")
        if not isinstance(value.get("type"), str):
            raise FieldError("invalid_type", 'GeoJSON object must have a "type" property')
        allowed_types = subschema.get("allowed_types")
        if isinstance(allowed_types, list) and value["type"] not in allowed_types:
            raise FieldError("invalid_type", "GeoJSON object must have type " + ", ".join(allowed_types))

    def validate(self, value, subschema, field, options, schema):
        self._check_shape(value, subschema)
        geometry_schema = self._get_geometry_schema(value["type"], schema)
        try:
            geometry_schema.validate(value)
        except Exception as e:
            if not (is_validation_error(e) or is_field_error(e)):
                raise
            raise FieldError("invalid_format", e.message)

    def normalize(self, value, subschema, field, options, schema):
        self._check_shape(value, subschema)
        geometry_schema = self._get_geometry_schema(value["type"], schema)
        try:
            return geometry_schema.normalize(value)
        except Exception as e:
            if not (is_validation_error(e) or is_field_error(e)):
                raise
            raise FieldError("invalid_format", e.message)

    def to_json_schema(self, subschema, schema):
        allowed_types = list(subschema.get("allowed_types") or GEOJSON_GEOMETRY_SCHEMAS)
        json_schema: dict[str, Any] = {
            "type": "object",
            "properties": {
                "type": {"type": "string", "enum": allowed_types},
            },
            "required": ["type"],
        }
        if subschema.get("description"):
            json_schema["description"] = subschema["description"]
        return json_schema


GEO_TYPES: list[type[SchemaType]] = [GeoPointSchemaType, GeoJSONSchemaType]
