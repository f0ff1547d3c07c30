"""Schema: a normalized schema tree plus the operations that walk it."""

import copy
from collections.abc import Callable
from dataclasses import replace
from typing import TYPE_CHECKING, Any

from loguru import logger

from common_schema import paths, traversal
from common_schema.config import NormalizeOptions
from common_schema.errors import SchemaError, ValidationError
from common_schema.normalizer import Normalizer
from common_schema.schema_normalizer import normalize_subschema
from common_schema.schema_types.base import SchemaType
from common_schema.sentinels import ABSENT
from common_schema.validator import Validator

if TYPE_CHECKING:
    from common_schema.factory import SchemaFactory


class Schema:
    """A normalized schema bound to the factory whose types it uses.

    Construct through SchemaFactory.create_schema() or common_schema.create_schema().
    The normalized data is never modified after construction.
    """

    is_common_schema = True

    def __init__(self, schema_data: Any, factory: "SchemaFactory", *, normalize: bool = True):
        self._factory = factory
        if not normalize:
            self._data = schema_data
            return

        if self.is_schema(schema_data):
            schema_data = schema_data.get_data()
        data = normalize_subschema(self, copy.deepcopy(schema_data))
        if data is None:
            raise SchemaError("Schema data must not be empty")
        logger.debug(f"Normalized schema with root type {data['type']}")
        self._data = data

    def __deepcopy__(self, memo: dict) -> "Schema":
        return self

    def __repr__(self) -> str:
        return f"Schema(type={self._data['type']!r})"

    @property
    def factory(self) -> "SchemaFactory":
        return self._factory

    def get_data(self) -> dict:
        """The normalized schema tree."""
        return self._data

    @staticmethod
    def is_schema(obj: Any) -> bool:
        return getattr(obj, "is_common_schema", False) is True

    def get_schema_type(self, subschema: dict) -> SchemaType:
        return self._factory.get_type(subschema["type"])

    def normalize_subschema(self, raw: Any) -> dict | None:
        return normalize_subschema(self, raw)

    def create_subschema(self, subschema: dict) -> "Schema":
        """Wrap an already-normalized subschema of this schema."""
        return Schema(subschema, self._factory, normalize=False)

    # --- Engine entry points used by schema types ---

    def traverse_value(self, value: Any, subschema: dict | None, field: str, handlers: Any) -> None:
        traversal.traverse_value(self, value, subschema, field, handlers)

    async def traverse_value_async(
        self, value: Any, subschema: dict | None, field: str, handlers: Any
    ) -> None:
        await traversal.traverse_value_async(self, value, subschema, field, handlers)

    def transform_value(self, value: Any, subschema: dict | None, field: str, handlers: Any) -> Any:
        return traversal.transform_value(self, value, subschema, field, handlers)

    async def transform_value_async(
        self, value: Any, subschema: dict | None, field: str, handlers: Any
    ) -> Any:
        return await traversal.transform_value_async(self, value, subschema, field, handlers)

    def traverse_subschema(self, subschema: dict | None, path: str, handlers: Any, options: dict) -> None:
        traversal.traverse_subschema(self, subschema, path, handlers, options)

    # --- Documents ---

    def traverse(self, value: Any, handlers: Any) -> None:
        """Walk value alongside the schema, calling handlers at every node."""
        self.traverse_value(value, self._data, "", handlers)

    async def traverse_async(self, value: Any, handlers: Any) -> None:
        await self.traverse_value_async(value, self._data, "", handlers)

    def transform(self, value: Any, handlers: Any) -> Any:
        """Rebuild value from what handlers return at each node. May return ABSENT."""
        return self.transform_value(value, self._data, "", handlers)

    async def transform_async(self, value: Any, handlers: Any) -> Any:
        return await self.transform_value_async(value, self._data, "", handlers)

    def traverse_schema(self, handlers: Any, include_path_arrays: bool = False) -> None:
        """Visit every subschema, calling handlers.on_subschema(subschema, path, schema_type).

        With include_path_arrays, array and map children get a '$' path segment.
        """
        self.traverse_subschema(self._data, "", handlers, {"include_path_arrays": include_path_arrays})

    @staticmethod
    def _build_options(options: NormalizeOptions | None, overrides: dict) -> NormalizeOptions:
        options = options or NormalizeOptions()
        return replace(options, **overrides) if overrides else options

    def validate(self, value: Any, options: NormalizeOptions | None = None, **overrides: bool) -> bool:
        """Strictly validate value without modifying it.

        Args:
            value: The document to check.
            options: Base options; keyword arguments override single fields.

        Returns:
            True.

        Raises:
            ValidationError: Carrying every field error found.
        """
        validator = Validator(self, self._build_options(options, overrides))
        self.traverse(value, validator)
        validator.raise_if_errors()
        return True

    def is_valid(self, value: Any, options: NormalizeOptions | None = None, **overrides: bool) -> bool:
        try:
            return self.validate(value, options, **overrides)
        except ValidationError:
            return False

    def normalize(self, value: Any, options: NormalizeOptions | None = None, **overrides: bool) -> Any:
        """Return a coerced copy of value: defaults filled in, types converted.

        Raises:
            ValidationError: Carrying every field error found.
        """
        normalizer = Normalizer(self, self._build_options(options, overrides))
        result = self.transform(value, normalizer)
        normalizer.raise_if_errors()
        return None if result is ABSENT else result

    # --- Schema introspection ---

    def get_subschema_data(self, path: str) -> dict | None:
        """Return the subschema at a dot-separated field path, or None.

        Array indices may be numbers or one of the placeholders $ # _ *.
        """
        return paths.resolve_subschema(self, path)

    def has_parent_type(self, path: str, type_name: str, skip_last_field: bool = False) -> bool:
        return paths.has_parent_type(self, path, type_name, skip_last_field)

    def list_fields(
        self,
        stop_at_arrays: bool = True,
        include_path_arrays: bool = False,
        max_depth: int | None = None,
        only_leaves: bool = False,
    ) -> list[str]:
        """List the field paths the schema declares, in schema order.

        Args:
            stop_at_arrays: Do not list fields below arrays and maps.
            include_path_arrays: Add a '$' segment for array and map children.
            max_depth: Only list paths with at most this many segments.
            only_leaves: Drop paths that have listed descendants.
        """
        fields: list[str] = []
        seen: set[str] = set()

        def on_subschema(subschema: dict, path: str, schema_type: SchemaType) -> bool | None:
            if not path:
                return None
            if max_depth is not None and len(paths.split_path(path)) > max_depth:
                return False
            if path not in seen:
                seen.add(path)
                fields.append(path)
            if stop_at_arrays and schema_type.is_collection:
                return False
            return None

        self.traverse_schema(_SubschemaVisitor(on_subschema), include_path_arrays=include_path_arrays)

        if only_leaves:
            fields = [field for field in fields if not any(other.startswith(field + ".") for other in fields)]
        return fields

    def filter_schema(self, predicate: Callable[[dict], bool | None]) -> "Schema":
        """Return a new Schema keeping the subschemas predicate selects.

        predicate returns True to keep a subschema whole, False to drop it and
        None to keep it with its children filtered.

        Raises:
            ValueError: If predicate returns anything else.
        """

        def filter_child(subschema: dict) -> dict | None:
            result = predicate(subschema)
            if result is True:
                return subschema
            if result is False:
                return None
            if result is None:
                return self.get_schema_type(subschema).filter_subschema(subschema, filter_child)
            raise ValueError(f"filter_schema predicate must return True, False or None, not {result!r}")

        data = filter_child(self._data)
        if data is None:
            data = {"type": "object", "properties": {}}
        return Schema(copy.deepcopy(data), self._factory, normalize=False)

    def to_json_schema(self) -> dict:
        """Export the schema as a JSON Schema document."""
        return self.subschema_to_json_schema(self._data)

    def subschema_to_json_schema(self, subschema: dict) -> dict:
        json_schema = self.get_schema_type(subschema).to_json_schema(subschema, self)
        if subschema.get("description"):
            json_schema["description"] = subschema["description"]
        if isinstance(subschema.get("enum"), list):
            json_schema["enum"] = list(subschema["enum"])
        return json_schema


class _SubschemaVisitor:
    def __init__(self, on_subschema: Callable[[dict, str, SchemaType], bool | None]):
        self.on_subschema = on_subschema
