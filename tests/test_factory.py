"""Tests for SchemaFactory and custom schema types."""

import pytest

from common_schema import FieldError, SchemaError, SchemaFactory, SchemaType, TypeMatch, ValidationError


class Upper:
    """Shorthand marker for UpperSchemaType."""


class UpperSchemaType(SchemaType):
    """Strings stored upper-cased."""

    default_name = "upper"

    def match_shorthand_type(self, raw):
        return raw is Upper

    def validate(self, value, subschema, field, options, schema):
        if not isinstance(value, str) or value != value.upper():
            raise FieldError("invalid_format", "Must be upper case")

    def normalize(self, value, subschema, field, options, schema):
        if not isinstance(value, str):
            raise FieldError("invalid_type", "Must be a string")
        return value.upper()

    def check_type_match(self, value, subschema, schema):
        return TypeMatch.COERCIBLE if isinstance(value, str) else TypeMatch.NONE


class TestRegisterType:
    def test_custom_type_by_name(self, factory):
        factory.register_type("upper", UpperSchemaType())
        schema = factory.create_schema({"code": "upper"})
        assert schema.normalize({"code": "abc"}) == {"code": "ABC"}
        with pytest.raises(ValidationError) as exc_info:
            schema.validate({"code": "abc"})
        assert exc_info.value.field_errors[0].field == "code"

    def test_type_adopts_registered_name(self, factory):
        factory.register_type("shout", UpperSchemaType())
        schema = factory.create_schema({"code": "shout"})
        assert schema.get_data()["properties"]["code"] == {"type": "shout"}
        assert factory.get_type("shout").name == "shout"

    def test_register_returns_factory(self, factory):
        assert factory.register_type("upper", UpperSchemaType()) is factory

    def test_replace_builtin(self, factory):
        factory.register_type("string", UpperSchemaType())
        schema = factory.create_schema({"code": "string"})
        assert schema.normalize({"code": "abc"}) == {"code": "ABC"}

    def test_registration_is_per_factory(self, factory):
        factory.register_type("upper", UpperSchemaType())
        assert factory.has_type("upper")
        assert not SchemaFactory().has_type("upper")


class TestShorthand:
    def test_builtin_shorthands(self, factory):
        assert factory.match_shorthand_type(str).name == "string"
        assert factory.match_shorthand_type(float).name == "number"
        assert factory.match_shorthand_type(bool).name == "boolean"
        assert factory.match_shorthand_type({"a": str}).name == "object"
        assert factory.match_shorthand_type(["x"]).name == "array"
        assert factory.match_shorthand_type(object) is None

    def test_first_registered_type_wins(self, factory):
        class AnotherUpper(UpperSchemaType):
            default_name = "another_upper"

        factory.register_type("upper", UpperSchemaType())
        factory.register_type("another_upper", AnotherUpper())
        assert factory.match_shorthand_type(Upper).name == "upper"

    def test_custom_shorthand_in_schema(self, factory):
        factory.register_type("upper", UpperSchemaType())
        schema = factory.create_schema({"code": Upper, "codes": [Upper]})
        assert schema.get_data()["properties"]["code"] == {"type": "upper"}
        codes = schema.get_data()["properties"]["codes"]
        assert codes == {"type": "array", "elements": {"type": "upper"}}


class TestGetType:
    def test_unknown_type(self, factory):
        with pytest.raises(SchemaError, match="Unknown schema type: nope"):
            factory.get_type("nope")

    def test_geo_types_are_optional(self):
        factory = SchemaFactory(load_geo_types=False)
        assert factory.has_type("string")
        assert not factory.has_type("geopoint")
        with pytest.raises(SchemaError):
            factory.create_schema({"where": "geopoint"})

    def test_repr_lists_types(self, factory):
        assert "geojson" in repr(factory)


class EvenSchemaType(SchemaType):
    default_name = "even"

    def validate(self, value, subschema, field, options, schema):
        if not isinstance(value, int) or value % 2:
            raise FieldError("invalid", "Must be an even integer")

    def normalize(self, value, subschema, field, options, schema):
        try:
            value = int(value)
        except (TypeError, ValueError):
            raise FieldError("invalid_type", "Must be an integer")
        self.validate(value, subschema, field, options, schema)
        return value


class TestDefaultTypeMatch:
    @pytest.mark.parametrize(
        "value,expected",
        [(4, TypeMatch.EXACT), ("4", TypeMatch.COERCIBLE), (3, TypeMatch.NONE), ("x", TypeMatch.NONE)],
    )
    def test_scores_from_validate_then_normalize(self, factory, value, expected):
        factory.register_type("even", EvenSchemaType())
        schema = factory.create_schema({"n": "even"})
        assert factory.get_type("even").check_type_match(value, {"type": "even"}, schema) == expected

    def test_custom_type_in_alternation(self, factory):
        factory.register_type("even", EvenSchemaType())
        schema = factory.create_schema({"type": "or", "alternatives": ["even", "string"]})
        assert schema.normalize(4) == 4
        assert schema.normalize("4") == "4"
        assert schema.normalize(3) == "3"
