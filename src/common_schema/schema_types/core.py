"""Built-in schema types.

Container types (object, array, map, or) recurse by calling back into the
Schema's engine wrappers for every child. Primitive types never recurse and
only implement the single-value hooks.
"""

import base64
import binascii
import json
import math
import re
from datetime import UTC, date, datetime
from typing import TYPE_CHECKING, Any

from common_schema.alternation import match_alternative, max_type_match
from common_schema.builders import Mixed
from common_schema.errors import FieldError, SchemaError
from common_schema.paths import is_index_component, join_path
from common_schema.schema_types.base import FilterChild, SchemaType, TypeMatch
from common_schema.sentinels import ABSENT

if TYPE_CHECKING:
    from common_schema.schema import Schema


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


# --- Containers ---


class ObjectSchemaType(SchemaType):
    """Dict with a fixed set of declared properties."""

    default_name = "object"

    def match_shorthand_type(self, raw: Any) -> bool:
        return isinstance(raw, dict)

    def normalize_shorthand_schema(self, subschema: dict, schema: "Schema") -> dict:
        subschema["properties"] = subschema["type"]
        return subschema

    def normalize_schema(self, subschema: dict, schema: "Schema") -> dict:
        properties = subschema.get("properties")
        if not isinstance(properties, dict):
            raise SchemaError("Object in schema must have properties field", {"subschema": subschema})
        normalized = {}
        for key, prop in properties.items():
            prop_subschema = schema.normalize_subschema(prop)
            if prop_subschema is not None:
                normalized[key] = prop_subschema
        subschema["properties"] = normalized
        return subschema

    def traverse_schema(self, subschema, path, handlers, schema, options):
        for key, prop in subschema["properties"].items():
            schema.traverse_subschema(prop, join_path(path, key), handlers, options)

    def get_field_subschema(self, subschema, path_component, schema):
        return subschema["properties"].get(str(path_component))

    def filter_subschema(self, subschema: dict, filter_child: FilterChild) -> dict | None:
        properties = {}
        for key, prop in subschema["properties"].items():
            kept = filter_child(prop)
            if kept is not None:
                properties[key] = kept
        return {**subschema, "properties": properties}

    def _unknown_keys(self, value: dict, subschema: dict) -> list:
        properties = subschema["properties"]
        return [key for key in value if key not in properties]

    def traverse(self, value, subschema, field, handlers, schema):
        if not isinstance(value, dict):
            return
        for key, prop in subschema["properties"].items():
            schema.traverse_value(value.get(key, ABSENT), prop, join_path(field, key), handlers)
        if subschema.get("keep_unknown_fields"):
            return
        for key in self._unknown_keys(value, subschema):
            schema.traverse_value(value[key], None, join_path(field, key), handlers)

    async def traverse_async(self, value, subschema, field, handlers, schema):
        if not isinstance(value, dict):
            return
        for key, prop in subschema["properties"].items():
            await schema.traverse_value_async(value.get(key, ABSENT), prop, join_path(field, key), handlers)
        if subschema.get("keep_unknown_fields"):
            return
        for key in self._unknown_keys(value, subschema):
            await schema.traverse_value_async(value[key], None, join_path(field, key), handlers)

    def transform(self, value, subschema, field, handlers, schema):
        if not isinstance(value, dict):
            return value
        result = {}
        for key, prop in subschema["properties"].items():
            child = schema.transform_value(value.get(key, ABSENT), prop, join_path(field, key), handlers)
            if child is not ABSENT:
                result[key] = child
        for key in self._unknown_keys(value, subschema):
            if subschema.get("keep_unknown_fields"):
                result[key] = value[key]
                continue
            child = schema.transform_value(value[key], None, join_path(field, key), handlers)
            if child is not ABSENT:
                result[key] = child
        return result

    async def transform_async(self, value, subschema, field, handlers, schema):
        if not isinstance(value, dict):
            return value
        result = {}
        for key, prop in subschema["properties"].items():
            child = await schema.transform_value_async(
                value.get(key, ABSENT), prop, join_path(field, key), handlers
            )
            if child is not ABSENT:
                result[key] = child
        for key in self._unknown_keys(value, subschema):
            if subschema.get("keep_unknown_fields"):
                result[key] = value[key]
                continue
            child = await schema.transform_value_async(value[key], None, join_path(field, key), handlers)
            if child is not ABSENT:
                result[key] = child
        return result

    def validate(self, value, subschema, field, options, schema):
        if not isinstance(value, dict):
            raise FieldError("invalid_type", "Must be an object")

    def normalize(self, value, subschema, field, options, schema):
        self.validate(value, subschema, field, options, schema)
        return value

    def check_type_match(self, value, subschema, schema):
        return TypeMatch.COMPLEX if isinstance(value, dict) else TypeMatch.NONE

    def to_json_schema(self, subschema, schema):
        properties = {}
        required = []
        for key, prop in subschema["properties"].items():
            properties[key] = schema.subschema_to_json_schema(prop)
            if prop.get("required"):
                required.append(key)
        json_schema: dict[str, Any] = {"type": "object", "properties": properties}
        if required:
            json_schema["required"] = required
        return json_schema


class ArraySchemaType(SchemaType):
    """List whose elements all share one subschema."""

    default_name = "array"
    is_collection = True

    def match_shorthand_type(self, raw: Any) -> bool:
        return isinstance(raw, list) and len(raw) == 1

    def normalize_shorthand_schema(self, subschema: dict, schema: "Schema") -> dict:
        subschema["elements"] = subschema["type"][0]
        return subschema

    def normalize_schema(self, subschema: dict, schema: "Schema") -> dict:
        elements = schema.normalize_subschema(subschema.get("elements"))
        if elements is None:
            raise SchemaError("Array schema must have elements field", {"subschema": subschema})
        subschema["elements"] = elements
        return subschema

    def traverse_schema(self, subschema, path, handlers, schema, options):
        if options.get("include_path_arrays"):
            path = join_path(path, "$")
        schema.traverse_subschema(subschema["elements"], path, handlers, options)

    def get_field_subschema(self, subschema, path_component, schema):
        if is_index_component(path_component):
            return subschema["elements"]
        return None

    def filter_subschema(self, subschema: dict, filter_child: FilterChild) -> dict | None:
        elements = filter_child(subschema["elements"])
        if elements is None:
            return None
        return {**subschema, "elements": elements}

    def traverse(self, value, subschema, field, handlers, schema):
        if not isinstance(value, list):
            return
        for index, element in enumerate(value):
            schema.traverse_value(element, subschema["elements"], join_path(field, index), handlers)

    async def traverse_async(self, value, subschema, field, handlers, schema):
        if not isinstance(value, list):
            return
        for index, element in enumerate(value):
            await schema.traverse_value_async(
                element, subschema["elements"], join_path(field, index), handlers
            )

    def transform(self, value, subschema, field, handlers, schema):
        if not isinstance(value, list):
            return value
        result = []
        for index, element in enumerate(value):
            child = schema.transform_value(element, subschema["elements"], join_path(field, index), handlers)
            if child is not ABSENT:
                result.append(child)
        return result

    async def transform_async(self, value, subschema, field, handlers, schema):
        if not isinstance(value, list):
            return value
        result = []
        for index, element in enumerate(value):
            child = await schema.transform_value_async(
                element, subschema["elements"], join_path(field, index), handlers
            )
            if child is not ABSENT:
                result.append(child)
        return result

    def validate(self, value, subschema, field, options, schema):
        if not isinstance(value, list):
            raise FieldError("invalid_type", "Must be an array")
        if any(element is ABSENT for element in value):
            raise FieldError("invalid", "Arrays may not contain undefined elements")

    def normalize(self, value, subschema, field, options, schema):
        self.validate(value, subschema, field, options, schema)
        return value

    def check_type_match(self, value, subschema, schema):
        return TypeMatch.COMPLEX if isinstance(value, list) else TypeMatch.NONE

    def to_json_schema(self, subschema, schema):
        return {"type": "array", "items": schema.subschema_to_json_schema(subschema["elements"])}


class MapSchemaType(SchemaType):
    """Dict with arbitrary keys whose values share one subschema."""

    default_name = "map"
    is_collection = True

    def normalize_schema(self, subschema: dict, schema: "Schema") -> dict:
        values = schema.normalize_subschema(subschema.get("values"))
        if values is None:
            raise SchemaError("Map schema must have values field", {"subschema": subschema})
        subschema["values"] = values
        return subschema

    def traverse_schema(self, subschema, path, handlers, schema, options):
        if options.get("include_path_arrays"):
            path = join_path(path, "$")
        schema.traverse_subschema(subschema["values"], path, handlers, options)

    def get_field_subschema(self, subschema, path_component, schema):
        return subschema["values"]

    def filter_subschema(self, subschema: dict, filter_child: FilterChild) -> dict | None:
        values = filter_child(subschema["values"])
        if values is None:
            return None
        return {**subschema, "values": values}

    def traverse(self, value, subschema, field, handlers, schema):
        if not isinstance(value, dict):
            return
        for key, item in value.items():
            schema.traverse_value(item, subschema["values"], join_path(field, key), handlers)

    async def traverse_async(self, value, subschema, field, handlers, schema):
        if not isinstance(value, dict):
            return
        for key, item in value.items():
            await schema.traverse_value_async(item, subschema["values"], join_path(field, key), handlers)

    def transform(self, value, subschema, field, handlers, schema):
        if not isinstance(value, dict):
            return value
        result = {}
        for key, item in value.items():
            child = schema.transform_value(item, subschema["values"], join_path(field, key), handlers)
            if child is not ABSENT:
                result[key] = child
        return result

    async def transform_async(self, value, subschema, field, handlers, schema):
        if not isinstance(value, dict):
            return value
        result = {}
        for key, item in value.items():
            child = await schema.transform_value_async(
                item, subschema["values"], join_path(field, key), handlers
            )
            if child is not ABSENT:
                result[key] = child
        return result

    def validate(self, value, subschema, field, options, schema):
        if not isinstance(value, dict):
            raise FieldError("invalid_type", "Must be an object")

    def normalize(self, value, subschema, field, options, schema):
        self.validate(value, subschema, field, options, schema)
        return value

    def check_type_match(self, value, subschema, schema):
        return TypeMatch.COMPLEX if isinstance(value, dict) else TypeMatch.NONE

    def to_json_schema(self, subschema, schema):
        return {
            "type": "object",
            "patternProperties": {"^.*$": schema.subschema_to_json_schema(subschema["values"])},
        }


class OrSchemaType(SchemaType):
    """Value matching one of several alternative subschemas.

    The or node is visited like any other node, then the chosen alternative
    is visited at the same field path.
    """

    default_name = "or"

    def normalize_schema(self, subschema: dict, schema: "Schema") -> dict:
        alternatives = subschema.get("alternatives")
        if not isinstance(alternatives, list):
            raise SchemaError("Or schema must have alternatives field", {"subschema": subschema})
        if len(alternatives) < 2:
            raise SchemaError("Or schema must have at least 2 options", {"subschema": subschema})
        normalized = []
        for alternative in alternatives:
            alternative_subschema = schema.normalize_subschema(alternative)
            if alternative_subschema is None:
                raise SchemaError("Or schema alternatives may not be empty", {"subschema": subschema})
            normalized.append(alternative_subschema)
        subschema["alternatives"] = normalized
        return subschema

    def traverse_schema(self, subschema, path, handlers, schema, options):
        for alternative in subschema["alternatives"]:
            schema.traverse_subschema(alternative, path, handlers, options)

    def get_field_subschema(self, subschema, path_component, schema):
        for alternative in subschema["alternatives"]:
            alternative_type = schema.get_schema_type(alternative)
            child = alternative_type.get_field_subschema(alternative, path_component, schema)
            if child is not None:
                return child
        return None

    def filter_subschema(self, subschema: dict, filter_child: FilterChild) -> dict | None:
        alternatives = [kept for alt in subschema["alternatives"] if (kept := filter_child(alt)) is not None]
        if not alternatives:
            return None
        # A single survivor replaces the alternation and takes over its modifiers
        if len(alternatives) == 1:
            modifiers = {key: value for key, value in subschema.items() if key not in ("type", "alternatives")}
            return {**alternatives[0], **modifiers}
        return {**subschema, "alternatives": alternatives}

    def traverse(self, value, subschema, field, handlers, schema):
        alternative = match_alternative(value, subschema, schema)
        schema.traverse_value(value, alternative, field, handlers)

    async def traverse_async(self, value, subschema, field, handlers, schema):
        alternative = match_alternative(value, subschema, schema)
        await schema.traverse_value_async(value, alternative, field, handlers)

    def transform(self, value, subschema, field, handlers, schema):
        alternative = match_alternative(value, subschema, schema)
        return schema.transform_value(value, alternative, field, handlers)

    async def transform_async(self, value, subschema, field, handlers, schema):
        alternative = match_alternative(value, subschema, schema)
        return await schema.transform_value_async(value, alternative, field, handlers)

    def check_type_match(self, value, subschema, schema):
        return max_type_match(value, subschema, schema)

    def to_json_schema(self, subschema, schema):
        return {"anyOf": [schema.subschema_to_json_schema(alt) for alt in subschema["alternatives"]]}


# --- Primitives ---


class PrimitiveSchemaType(SchemaType):
    """Leaf type. Claims the Python types listed in `shorthands`.

    validate() defaults to normalize(), so subclasses with a strict
    type check raise before delegating.
    """

    shorthands: tuple = ()

    def match_shorthand_type(self, raw: Any) -> bool:
        return any(raw is shorthand for shorthand in self.shorthands)

    def validate(self, value, subschema, field, options, schema):
        self.normalize(value, subschema, field, options, schema)


def _check_numeric_keys(subschema: dict, keys: tuple[str, ...]) -> None:
    for key in keys:
        bound = subschema.get(key)
        if bound is not None and not is_number(bound):
            raise SchemaError(f"{subschema['type']} {key} must be a number", {"subschema": subschema})


def _check_length(length: int, subschema: dict) -> None:
    max_length = subschema.get("max_length")
    if max_length is not None and length > max_length:
        raise FieldError("too_long", subschema.get("max_length_error") or "Too long")
    min_length = subschema.get("min_length")
    if min_length is not None and length < min_length:
        raise FieldError("too_short", subschema.get("min_length_error") or "Too short")


class StringSchemaType(PrimitiveSchemaType):
    default_name = "string"
    shorthands = (str,)

    def normalize_schema(self, subschema: dict, schema: "Schema") -> dict:
        _check_numeric_keys(subschema, ("min_length", "max_length"))
        match = subschema.get("match")
        if isinstance(match, re.Pattern):
            subschema["match"] = match.pattern
        elif match is not None and not isinstance(match, str):
            raise SchemaError("String match must be a regular expression", {"subschema": subschema})
        return subschema

    def validate(self, value, subschema, field, options, schema):
        if not isinstance(value, str):
            raise FieldError("invalid_type", "Must be a string")
        self.normalize(value, subschema, field, options, schema)

    def normalize(self, value, subschema, field, options, schema):
        if isinstance(value, bool):
            value = "true" if value else "false"
        elif not isinstance(value, str):
            value = str(value)

        max_length = subschema.get("max_length")
        if max_length is not None and len(value) > max_length:
            raise FieldError("too_long", subschema.get("max_length_error") or "String is too long")
        min_length = subschema.get("min_length")
        if min_length is not None and len(value) < min_length:
            raise FieldError("too_short", subschema.get("min_length_error") or "String is too short")
        match = subschema.get("match")
        if match is not None and re.search(match, value) is None:
            raise FieldError(
                "invalid_format", subschema.get("match_error") or "Invalid format", {"regex": match}
            )
        return value

    def check_type_match(self, value, subschema, schema):
        if isinstance(value, str):
            return TypeMatch.EXACT
        if isinstance(value, (dict, list, tuple, set)):
            return TypeMatch.NONE
        return TypeMatch.COERCIBLE

    def to_json_schema(self, subschema, schema):
        json_schema: dict[str, Any] = {"type": "string"}
        if subschema.get("min_length") is not None:
            json_schema["minLength"] = subschema["min_length"]
        if subschema.get("max_length") is not None:
            json_schema["maxLength"] = subschema["max_length"]
        if subschema.get("match") is not None:
            json_schema["pattern"] = subschema["match"]
        return json_schema


def _parse_number(text: str) -> float | None:
    stripped = text.strip()
    # float() also reads digit separators, which are not numeric text here
    if not stripped or "_" in stripped:
        return None
    try:
        number = float(stripped)
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def _as_utc(value: datetime) -> datetime:
    return value if value.tzinfo is not None else value.replace(tzinfo=UTC)


def _to_datetime(value: Any) -> datetime | None:
    """Coerce ISO strings, epoch milliseconds and dates; None if impossible."""
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=UTC)
    if isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.strip())
        except ValueError:
            return None
        return _as_utc(parsed)
    if is_number(value):
        try:
            return datetime.fromtimestamp(value / 1000, tz=UTC)
        except (OverflowError, OSError, ValueError):
            return None
    return None


class NumberSchemaType(PrimitiveSchemaType):
    default_name = "number"
    shorthands = (int, float)

    def normalize_schema(self, subschema: dict, schema: "Schema") -> dict:
        _check_numeric_keys(subschema, ("min", "max"))
        return subschema

    def validate(self, value, subschema, field, options, schema):
        if not is_number(value):
            raise FieldError("invalid_type", "Must be a number")
        self.normalize(value, subschema, field, options, schema)

    def normalize(self, value, subschema, field, options, schema):
        if isinstance(value, str):
            value = _parse_number(value)
            if value is None:
                raise FieldError("invalid_type", "Must be a number")
        elif isinstance(value, datetime):
            value = _as_utc(value).timestamp() * 1000
        elif not is_number(value):
            raise FieldError("invalid_type", "Must be a number")

        maximum = subschema.get("max")
        if maximum is not None and value > maximum:
            raise FieldError("too_large", subschema.get("max_error") or "Too large")
        minimum = subschema.get("min")
        if minimum is not None and value < minimum:
            raise FieldError("too_small", subschema.get("min_error") or "Too small")
        return value

    def check_type_match(self, value, subschema, schema):
        if is_number(value):
            return TypeMatch.EXACT
        if isinstance(value, str) and _parse_number(value) is not None:
            return TypeMatch.COERCIBLE
        return TypeMatch.NONE

    def to_json_schema(self, subschema, schema):
        json_schema: dict[str, Any] = {"type": "number"}
        if subschema.get("min") is not None:
            json_schema["minimum"] = subschema["min"]
        if subschema.get("max") is not None:
            json_schema["maximum"] = subschema["max"]
        return json_schema


class DateSchemaType(PrimitiveSchemaType):
    """Datetimes. Naive values are compared as UTC."""

    default_name = "date"
    shorthands = (datetime,)

    def normalize_schema(self, subschema: dict, schema: "Schema") -> dict:
        for key in ("min", "max"):
            if subschema.get(key) is None:
                continue
            bound = _to_datetime(subschema[key])
            if bound is None:
                raise SchemaError(f"Date {key} must be valid date", {"subschema": subschema})
            subschema[key] = bound
        return subschema

    def validate(self, value, subschema, field, options, schema):
        if not isinstance(value, datetime):
            raise FieldError("invalid_type", "Must be a date")
        self.normalize(value, subschema, field, options, schema)

    def normalize(self, value, subschema, field, options, schema):
        value = _to_datetime(value)
        if value is None:
            raise FieldError("invalid_type", "Must be a date")

        maximum = subschema.get("max")
        if maximum is not None and _as_utc(value) > _as_utc(maximum):
            raise FieldError("too_large", subschema.get("max_error") or "Too late")
        minimum = subschema.get("min")
        if minimum is not None and _as_utc(value) < _as_utc(minimum):
            raise FieldError("too_small", subschema.get("min_error") or "Too early")

        if options.serialize:
            return value.isoformat()
        return value

    def check_type_match(self, value, subschema, schema):
        if isinstance(value, datetime):
            return TypeMatch.EXACT
        if _to_datetime(value) is not None:
            return TypeMatch.COERCIBLE
        return TypeMatch.NONE

    def to_json_schema(self, subschema, schema):
        return {"type": "string", "format": "date-time"}


_BASE64_INVALID = re.compile(r"[^A-Za-z0-9+/=]")


def _is_byte_list(value: Any) -> bool:
    return isinstance(value, list) and all(
        isinstance(item, int) and not isinstance(item, bool) and 0 <= item <= 255 for item in value
    )


class BinarySchemaType(PrimitiveSchemaType):
    default_name = "binary"
    shorthands = (bytes, bytearray)

    def normalize_schema(self, subschema: dict, schema: "Schema") -> dict:
        _check_numeric_keys(subschema, ("min_length", "max_length"))
        return subschema

    def validate(self, value, subschema, field, options, schema):
        if not isinstance(value, (bytes, bytearray)):
            raise FieldError("invalid_type", "Must be bytes")
        self.normalize(value, subschema, field, options, schema)

    def normalize(self, value, subschema, field, options, schema):
        if isinstance(value, bytearray):
            value = bytes(value)
        elif isinstance(value, str):
            if _BASE64_INVALID.search(value):
                raise FieldError("invalid_type", "Must be base64 data")
            try:
                value = base64.b64decode(value, validate=True)
            except binascii.Error:
                raise FieldError("invalid_type", "Must be base64 data")
        elif _is_byte_list(value):
            value = bytes(value)
        elif not isinstance(value, bytes):
            raise FieldError("invalid_type", "Must be binary data")

        _check_length(len(value), subschema)

        if options.serialize:
            return base64.b64encode(value).decode("ascii")
        return value

    def check_type_match(self, value, subschema, schema):
        if isinstance(value, (bytes, bytearray)):
            return TypeMatch.EXACT
        if _is_byte_list(value):
            return TypeMatch.COERCIBLE
        if isinstance(value, str) and not _BASE64_INVALID.search(value):
            return TypeMatch.COERCIBLE
        return TypeMatch.NONE

    def to_json_schema(self, subschema, schema):
        return {"type": "string", "contentEncoding": "base64"}


TRUE_STRINGS = frozenset({"true", "t", "y", "yes", "1", "on", "totallydude"})
FALSE_STRINGS = frozenset({"false", "f", "n", "no", "0", "off", "definitelynot"})


class BooleanSchemaType(PrimitiveSchemaType):
    default_name = "boolean"
    shorthands = (bool,)

    def validate(self, value, subschema, field, options, schema):
        if not isinstance(value, bool):
            raise FieldError("invalid_type", "Must be a boolean")

    def normalize(self, value, subschema, field, options, schema):
        if isinstance(value, bool):
            return value
        if is_number(value) and value in (0, 1):
            return value == 1
        if isinstance(value, str):
            lowered = value.lower()
            if lowered in TRUE_STRINGS:
                return True
            if lowered in FALSE_STRINGS:
                return False
        raise FieldError("invalid_type", "Must be boolean")

    def check_type_match(self, value, subschema, schema):
        if isinstance(value, bool):
            return TypeMatch.EXACT
        if is_number(value) and value in (0, 1):
            return TypeMatch.COERCIBLE
        if isinstance(value, str) and value.lower() in TRUE_STRINGS | FALSE_STRINGS:
            return TypeMatch.COERCIBLE
        return TypeMatch.NONE

    def to_json_schema(self, subschema, schema):
        return {"type": "boolean"}


class MixedSchemaType(PrimitiveSchemaType):
    """Accepts any value. Every path below it is also mixed."""

    default_name = "mixed"
    shorthands = (Mixed,)

    def get_field_subschema(self, subschema, path_component, schema):
        return {"type": "mixed"}

    def validate(self, value, subschema, field, options, schema):
        return None

    def normalize(self, value, subschema, field, options, schema):
        if not subschema.get("serialize_mixed"):
            return value
        if options.serialize:
            if isinstance(value, str):
                raise FieldError("invalid_type", "Mixed type value must not be a string")
            try:
                return json.dumps(value)
            except (TypeError, ValueError):
                raise FieldError("invalid_format", "Must be JSON serializable")
        if isinstance(value, str):
            try:
                return json.loads(value)
            except ValueError:
                raise FieldError("invalid_format", "Must be valid JSON")
        return value

    def check_type_match(self, value, subschema, schema):
        return TypeMatch.NONE

    def to_json_schema(self, subschema, schema):
        return {}


CORE_TYPES: list[type[SchemaType]] = [
    ObjectSchemaType,
    ArraySchemaType,
    MapSchemaType,
    OrSchemaType,
    StringSchemaType,
    NumberSchemaType,
    DateSchemaType,
    BinarySchemaType,
    BooleanSchemaType,
    MixedSchemaType,
]
