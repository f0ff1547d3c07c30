"""Shared fixtures for common-schema tests."""

import pytest

from common_schema import Mixed, SchemaFactory, map_, or_


@pytest.fixture
def factory() -> SchemaFactory:
    """A fresh factory so registrations in one test never leak into another."""
    return SchemaFactory()


@pytest.fixture
def kitchen_sink_schema(factory):
    """A schema exercising every built-in type."""
    return factory.create_schema(
        {
            "foo": {"bar": str, "baz": float},
            "miss": "date",
            "arr": [{"zip": "date"}],
            "map": map_(float),
            "bin": bytes,
            "boo": bool,
            "mix": Mixed,
            "o": or_(float, str, {"qux": {"type": float, "required": True}, "bam": str}),
            "point": "geopoint",
            "geojsons": [
                {
                    "type": "geojson",
                    "allowed_types": ["Point", "LineString", "Polygon", "MultiPolygon", "GeometryCollection"],
                }
            ],
        }
    )
