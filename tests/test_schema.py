"""Tests for schema construction, normalization and field listing."""

import re
from datetime import datetime

import pytest

from common_schema import Mixed, Schema, SchemaError, create_schema, map_, or_


class TestIsSchema:
    def test_is_schema(self):
        schema = create_schema({"foo": str})
        assert Schema.is_schema(schema) is True
        for value in ["foo", True, 64, {"foo": "bar"}, [4, 16, 256], re.compile("foo"), datetime.now()]:
            assert Schema.is_schema(value) is False


# --- Schema normalization ---


class TestSchemaNormalization:
    def test_shorthand_object(self):
        schema = create_schema({"foo": str, "bar": str})
        assert schema.get_data() == {
            "type": "object",
            "properties": {"foo": {"type": "string"}, "bar": {"type": "string"}},
        }

    def test_shorthand_forms_are_equivalent(self):
        shorthand = create_schema({"a": [float], "b": map_(bool), "c": Mixed, "d": bytes, "e": datetime})
        explicit = create_schema(
            {
                "type": "object",
                "properties": {
                    "a": {"type": "array", "elements": {"type": "number"}},
                    "b": {"type": "map", "values": {"type": "boolean"}},
                    "c": {"type": "mixed"},
                    "d": {"type": "binary"},
                    "e": {"type": "date"},
                },
            }
        )
        assert shorthand.get_data() == explicit.get_data()

    def test_type_names_as_strings(self):
        schema = create_schema({"name": "string", "tags": ["string"]})
        assert schema.get_data()["properties"]["tags"] == {"type": "array", "elements": {"type": "string"}}

    def test_modifiers_are_kept(self):
        schema = create_schema({"foo": {"type": [str], "required": True, "description": "Foos"}})
        assert schema.get_data()["properties"]["foo"] == {
            "type": "array",
            "elements": {"type": "string"},
            "required": True,
            "description": "Foos",
        }

    def test_or_builder(self):
        schema = create_schema(or_(str, float, required=True))
        assert schema.get_data() == {
            "type": "or",
            "required": True,
            "alternatives": [{"type": "string"}, {"type": "number"}],
        }

    def test_idempotent(self):
        raw = {"foo": [{"bar": or_(str, float)}], "baz": map_(datetime), "qux": {"type": str, "match": re.compile("x")}}
        first = create_schema(raw)
        second = create_schema(first.get_data())
        assert second.get_data() == first.get_data()

    def test_schema_instance_as_input(self):
        inner = create_schema({"foo": str})
        outer = create_schema({"inner": inner})
        assert outer.get_data()["properties"]["inner"] == inner.get_data()
        assert outer.get_data()["properties"]["inner"] is not inner.get_data()

    def test_caller_data_not_modified(self):
        raw = {"foo": {"type": [str]}}
        create_schema(raw)
        assert raw == {"foo": {"type": [str]}}

    def test_none_properties_are_dropped(self):
        schema = create_schema({"foo": str, "bar": None})
        assert list(schema.get_data()["properties"]) == ["foo"]


class TestSchemaErrors:
    @pytest.mark.parametrize(
        "raw, message",
        [
            ({"type": "nope"}, "Unknown schema type: nope"),
            ({"type": "object"}, "Object in schema must have properties field"),
            ({"type": "array"}, "Array schema must have elements field"),
            ({"type": "map"}, "Map schema must have values field"),
            ({"type": "or"}, "Or schema must have alternatives field"),
            ({"type": "or", "alternatives": [str]}, "Or schema must have at least 2 options"),
            ({"foo": [str, float]}, "Shorthand arrays must contain exactly 1 element"),
            ({"type": "date", "min": "yesterday"}, "Date min must be valid date"),
            ({"type": "number", "max": "10"}, "number max must be a number"),
            ({"type": float, "min": True}, "number min must be a number"),
            ({"type": str, "max_length": "3"}, "string max_length must be a number"),
            ({"type": bytes, "min_length": [1]}, "binary min_length must be a number"),
            (None, "Schema data must not be empty"),
        ],
    )
    def test_malformed_schemas(self, raw, message):
        with pytest.raises(SchemaError, match=re.escape(message)):
            create_schema(raw)

    def test_unclaimed_shorthand(self):
        with pytest.raises(SchemaError, match="Unknown schema type"):
            create_schema({"foo": complex})


# --- Field listing ---


class TestListFields:
    @pytest.fixture
    def schema(self):
        return create_schema(
            {
                "foo": str,
                "bar": {"type": "map", "values": float},
                "baz": {"biz": {"buz": bool}},
                "arr": [{"zip": str}],
            }
        )

    def test_default(self, schema):
        assert schema.list_fields() == ["foo", "bar", "baz", "baz.biz", "baz.biz.buz", "arr"]

    def test_no_stop_at_arrays(self, schema):
        assert schema.list_fields(stop_at_arrays=False) == [
            "foo",
            "bar",
            "baz",
            "baz.biz",
            "baz.biz.buz",
            "arr",
            "arr.zip",
        ]

    def test_include_path_arrays(self, schema):
        assert schema.list_fields(stop_at_arrays=False, include_path_arrays=True) == [
            "foo",
            "bar",
            "bar.$",
            "baz",
            "baz.biz",
            "baz.biz.buz",
            "arr",
            "arr.$",
            "arr.$.zip",
        ]

    def test_max_depth(self, schema):
        assert schema.list_fields(max_depth=2) == ["foo", "bar", "baz", "baz.biz", "arr"]

    def test_only_leaves(self, schema):
        assert schema.list_fields(only_leaves=True) == ["foo", "bar", "baz.biz.buz", "arr"]

    def test_or_alternatives_share_paths(self):
        schema = create_schema({"o": or_({"a": str}, {"a": float, "b": str})})
        assert schema.list_fields() == ["o", "o.a", "o.b"]
