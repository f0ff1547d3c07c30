"""Shorthand helpers for building schemas.

    create_schema({
        "name": str,
        "tags": [str],
        "scores": map_(float),
        "ref": or_(str, {"id": float}, required=True),
        "extra": Mixed,
    })
"""

from typing import Any


class Mixed:
    """Shorthand marker for the `mixed` type, which accepts any value."""

    def __init__(self) -> None:
        raise TypeError("Mixed is a schema marker and cannot be instantiated")


def or_(*alternatives: Any, **options: Any) -> dict:
    """Subschema matching any one of the alternatives.

    Alternatives are listed in order of preference. Keyword arguments become
    common modifiers on the `or` node, e.g. required=True.
    """
    return {**options, "type": "or", "alternatives": list(alternatives)}


def map_(values: Any, **options: Any) -> dict:
    """Subschema for a dict with arbitrary keys whose values all match `values`."""
    return {**options, "type": "map", "values": values}
