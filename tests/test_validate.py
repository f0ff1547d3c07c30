"""Tests for Schema.validate() and Schema.is_valid()."""

from datetime import UTC, datetime

import pytest

from common_schema import FieldError, ValidationError, create_schema


def _noop():
    pass


def _valid_document() -> dict:
    return {
        "foo": {"bar": "8", "baz": 8},
        "arr": [
            {"zip": datetime(2014, 1, 1, tzinfo=UTC)},
            {"zip": datetime.fromtimestamp(1427982068.722, tz=UTC)},
            {"zip": datetime.now()},
            {},
        ],
        "map": {"foo": 2, "bar": 4},
        "bin": b"asdf",
        "boo": True,
        "mix": {"a": [_noop], "b": 5},
        "o": {"qux": 4, "bam": "7"},
        "point": [23, 23],
        "geojsons": [
            {"type": "Point", "coordinates": [23, 23]},
            {"type": "LineString", "coordinates": [[23, 23], [33, 33], [44, 44]]},
            {"type": "Polygon", "coordinates": [[[23, 23], [33, 33], [33, 23], [23, 23]]]},
            {
                "type": "MultiPolygon",
                "coordinates": [
                    [[[23, 23], [33, 33], [33, 23], [23, 23]]],
                    [[[23, 23], [33, 33], [33, 23], [23, 23]]],
                ],
            },
            {
                "type": "GeometryCollection",
                "geometries": [
                    {"type": "Point", "coordinates": [23, 23]},
                    {"type": "LineString", "coordinates": [[23, 23], [33, 33], [44, 44]]},
                ],
            },
        ],
    }


def _invalid_document() -> dict:
    return {
        "foo": {"bar": 8, "baz": "8"},
        "arr": [
            {"zip": "2014-01-01T00:00:00Z"},
            {"zip": 1427982068722},
            {"zip": datetime.now()},
            {},
        ],
        "map": {"foo": 2, "bar": "4"},
        "bin": "YXNkZg==",
        "boo": "yes",
        "mix": {"a": [_noop]},
        "o": {"qux": "4", "bam": "7"},
        "point": "foo",
        "geojsons": [
            {"type": "Point", "coordinates": [23, 230]},
            {"type": "LineString", "coordinates": [[23, 23], [33, 33], [44, 44]]},
            {"type": "Polygon", "coordinates": [[[23, 23], [33, 33], [33, 23], [23, 223]]]},
            {
                "type": "MultiPolygon",
                "coordinates": [
                    [[[23, 23], [33, 33], [33, 23], [23, 23]]],
                    [[[23, 23], [33, 33], [33, 23], [23, 23]]],
                ],
            },
            {
                "type": "GeometryCollection",
                "geometries": [
                    {"type": "Point", "coordinates": [23, 23]},
                    {"type": "LineString", "coordinates": [[23, 23], [33, 33], [44, 444]]},
                ],
            },
            {"type": "MultiPoint", "coordinates": [[23, 23], [33, 33], [44, 44]]},
        ],
    }


EXPECTED_ERRORS = [
    {"field": "foo.bar", "code": "invalid_type", "message": "Must be a string"},
    {"field": "foo.baz", "code": "invalid_type", "message": "Must be a number"},
    {"field": "arr.0.zip", "code": "invalid_type", "message": "Must be a date"},
    {"field": "arr.1.zip", "code": "invalid_type", "message": "Must be a date"},
    {"field": "map.bar", "code": "invalid_type", "message": "Must be a number"},
    {"field": "bin", "code": "invalid_type", "message": "Must be bytes"},
    {"field": "boo", "code": "invalid_type", "message": "Must be a boolean"},
    {"field": "o.qux", "code": "invalid_type", "message": "Must be a number"},
    {"field": "point", "code": "invalid_type", "message": "Must be array in form [ long, lat ]"},
    {"field": "geojsons.0", "code": "invalid_format", "message": "Latitude must be between -90 and 90"},
    {"field": "geojsons.2", "code": "invalid_format", "message": "Latitude must be between -90 and 90"},
    {"field": "geojsons.4", "code": "invalid_format", "message": "Latitude must be between -90 and 90"},
    {
        "field": "geojsons.5",
        "code": "invalid_type",
        "message": "GeoJSON object must have type Point, LineString, Polygon, MultiPolygon, GeometryCollection",
    },
]


class TestValidate:
    def test_valid(self, kitchen_sink_schema):
        assert kitchen_sink_schema.validate(_valid_document()) is True

    def test_invalid_reports_every_error_in_order(self, kitchen_sink_schema):
        with pytest.raises(ValidationError) as exc_info:
            kitchen_sink_schema.validate(_invalid_document())
        assert [error.to_dict() for error in exc_info.value.field_errors] == EXPECTED_ERRORS
        assert exc_info.value.message == "Must be a string"

    def test_does_not_coerce(self):
        schema = create_schema({"foo": float})
        document = {"foo": "3"}
        with pytest.raises(ValidationError):
            schema.validate(document)
        assert document == {"foo": "3"}

    def test_unknown_fields(self):
        schema = create_schema({"foo": str})
        with pytest.raises(ValidationError, match="Unknown field"):
            schema.validate({"foo": "a", "bar": 1})
        assert schema.validate({"foo": "a", "bar": 1}, allow_unknown_fields=True)
        assert schema.validate({"foo": "a", "bar": 1}, remove_unknown_fields=True)

    def test_keep_unknown_fields(self):
        schema = create_schema({"type": "object", "properties": {"foo": str}, "keep_unknown_fields": True})
        assert schema.validate({"foo": "a", "bar": 1})

    def test_required(self):
        schema = create_schema({"foo": {"type": str, "required": True}})
        with pytest.raises(ValidationError, match="Field is required"):
            schema.validate({})
        assert schema.validate({}, allow_missing_fields=True)

    def test_default_satisfies_required(self):
        schema = create_schema({"foo": {"type": str, "required": True, "default": "x"}})
        assert schema.validate({})

    def test_enum_checked_before_type(self):
        schema = create_schema({"type": str, "enum": ["a"]})
        with pytest.raises(ValidationError) as exc_info:
            schema.validate(1)
        assert exc_info.value.field_errors[0].code == "unrecognized"

    def test_invalid_container_stops_descent(self):
        schema = create_schema({"foo": {"bar": str}})
        with pytest.raises(ValidationError) as exc_info:
            schema.validate({"foo": "not an object"})
        assert [error.field for error in exc_info.value.field_errors] == ["foo"]

    def test_custom_validate_hook(self):
        def positive(value, subschema, field, options, schema):
            if value <= 0:
                raise FieldError("too_small", "Must be positive")

        schema = create_schema({"type": float, "validate": positive})
        assert schema.validate(3)
        with pytest.raises(ValidationError, match="Must be positive"):
            schema.validate(-1)


class TestIsValid:
    def test_valid(self, kitchen_sink_schema):
        assert kitchen_sink_schema.is_valid(_valid_document()) is True

    def test_invalid(self, kitchen_sink_schema):
        assert kitchen_sink_schema.is_valid(_invalid_document()) is False

    def test_options(self):
        schema = create_schema({"foo": str})
        assert schema.is_valid({"bar": 1}) is False
        assert schema.is_valid({"bar": 1}, allow_unknown_fields=True) is True
