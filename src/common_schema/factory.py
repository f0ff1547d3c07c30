"""Schema type registry and Schema construction."""

from typing import Any

from loguru import logger

from common_schema.errors import SchemaError
from common_schema.schema import Schema
from common_schema.schema_types import CORE_TYPES, GEO_TYPES, SchemaType


class SchemaFactory:
    """Ordered registry of schema types.

    Registration order matters: when a shorthand value is claimed by more than
    one type, the type registered first wins.
    """

    def __init__(self, load_geo_types: bool = True):
        self._types: dict[str, SchemaType] = {}
        for type_class in CORE_TYPES:
            self.register_type(type_class.default_name, type_class())
        if load_geo_types:
            for type_class in GEO_TYPES:
                self.register_type(type_class.default_name, type_class())

    def register_type(self, name: str, schema_type: SchemaType) -> "SchemaFactory":
        """Register schema_type under name, replacing any existing type of that name.

        The type adopts name, which is what normalized subschemas carry in
        their `type` key.

        Returns:
            The factory, so calls can be chained.
        """
        if name in self._types:
            logger.debug(f"Replacing schema type {name}")
        else:
            logger.debug(f"Registering schema type {name}")
        schema_type.name = name
        self._types[name] = schema_type
        return self

    def has_type(self, name: str) -> bool:
        return name in self._types

    def get_type(self, name: str) -> SchemaType:
        """Return the type registered under name.

        Raises:
            SchemaError: If no such type is registered.
        """
        schema_type = self._types.get(name)
        if schema_type is None:
            raise SchemaError(f"Unknown schema type: {name}", {"type": name})
        return schema_type

    def match_shorthand_type(self, raw: Any) -> SchemaType | None:
        """Return the first registered type that claims raw as shorthand."""
        for schema_type in self._types.values():
            if schema_type.match_shorthand_type(raw):
                return schema_type
        return None

    def create_schema(self, schema_data: Any) -> Schema:
        """Normalize schema_data and wrap it in a Schema bound to this factory.

        Raises:
            SchemaError: If schema_data is malformed.
        """
        return Schema(schema_data, self)

    def __repr__(self) -> str:
        return f"SchemaFactory(types={list(self._types)!r})"
