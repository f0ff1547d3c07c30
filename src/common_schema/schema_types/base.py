"""Base class for schema type plugins.

A schema type owns every behaviour specific to one value of a subschema's
`type` key: recognising shorthand, normalizing and traversing the schema,
recursing into documents, and validating or coercing single values. The
engines in common_schema.traversal reach types only through this interface,
so new types can be registered on a SchemaFactory without touching them.
"""

from collections.abc import Callable
from enum import IntEnum
from typing import TYPE_CHECKING, Any, TypeAlias

from common_schema.config import NormalizeOptions
from common_schema.errors import is_field_error

if TYPE_CHECKING:
    from common_schema.schema import Schema


class TypeMatch(IntEnum):
    """How well a value matches a type. Used to pick `or` alternatives."""

    NONE = 0  # does not match at all
    COMPLEX = 1  # container type, needs deeper validation to know
    COERCIBLE = 2  # normalize() can coerce it
    EXACT = 3  # precisely the type


FilterChild: TypeAlias = Callable[[dict], dict | None]


class SchemaType:
    """Superclass for schema types.

    Subclasses set `default_name` and override the hooks they need. The
    defaults describe a leaf type with no children that accepts any value.
    """

    default_name: str = ""

    # Types whose children are addressed by index or key placeholders
    is_collection: bool = False

    def __init__(self, name: str | None = None):
        self.name = name or self.default_name

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"

    # --- Schema normalization ---

    def match_shorthand_type(self, raw: Any) -> bool:
        """Whether this type claims an un-annotated shorthand value like `str`."""
        return False

    def normalize_shorthand_schema(self, subschema: dict, schema: "Schema") -> dict:
        """Rewrite {"type": <shorthand>} into this type's full layout.

        Children are not normalized here; normalize_schema() runs next.
        """
        return subschema

    def normalize_schema(self, subschema: dict, schema: "Schema") -> dict:
        """Check type-specific keys and normalize child subschemas.

        Raises:
            SchemaError: If the subschema is invalid.
        """
        return subschema

    # --- Schema traversal ---

    def traverse_schema(
        self,
        subschema: dict,
        path: str,
        handlers: Any,
        schema: "Schema",
        options: dict,
    ) -> None:
        """Recurse into child subschemas. Handlers for this node were already called."""
        return None

    def get_field_subschema(self, subschema: dict, path_component: Any, schema: "Schema") -> dict | None:
        """Return the child subschema for one path component, if any."""
        return None

    def filter_subschema(self, subschema: dict, filter_child: FilterChild) -> dict | None:
        """Structural copy keeping only children that filter_child returns."""
        return dict(subschema)

    # --- Document traversal ---

    def traverse(self, value: Any, subschema: dict, field: str, handlers: Any, schema: "Schema") -> None:
        """Call the engine for each child of value. Not responsible for value itself."""
        return None

    async def traverse_async(
        self, value: Any, subschema: dict, field: str, handlers: Any, schema: "Schema"
    ) -> None:
        return None

    def transform(self, value: Any, subschema: dict, field: str, handlers: Any, schema: "Schema") -> Any:
        """Transform each child of value and return the rebuilt value."""
        return value

    async def transform_async(
        self, value: Any, subschema: dict, field: str, handlers: Any, schema: "Schema"
    ) -> Any:
        return value

    # --- Values ---

    def validate(
        self,
        value: Any,
        subschema: dict,
        field: str | None,
        options: NormalizeOptions,
        schema: "Schema",
    ) -> None:
        """Strictly check a single value without recursing.

        Raises:
            FieldError: If the value is invalid.
        """
        return None

    def normalize(
        self,
        value: Any,
        subschema: dict,
        field: str | None,
        options: NormalizeOptions,
        schema: "Schema",
    ) -> Any:
        """Coerce a single value to canonical form and check it. Does not recurse.

        Raises:
            FieldError: If the value cannot be normalized.
        """
        return value

    def check_enum(self, value: Any, valid_values: list) -> bool:
        return value in valid_values

    def check_type_match(self, value: Any, subschema: dict, schema: "Schema") -> TypeMatch:
        """Score how well value matches this type.

        The default tries validate(), then normalize(). Types should override
        this with something cheaper when they can.
        """
        options = NormalizeOptions()
        try:
            self.validate(value, subschema, None, options, schema)
            return TypeMatch.EXACT
        except Exception as e:
            if not is_field_error(e):
                raise
        try:
            self.normalize(value, subschema, None, options, schema)
            return TypeMatch.COERCIBLE
        except Exception as e:
            if not is_field_error(e):
                raise
        return TypeMatch.NONE

    def to_json_schema(self, subschema: dict, schema: "Schema") -> dict:
        return {}
