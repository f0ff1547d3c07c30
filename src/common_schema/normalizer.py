"""Transform handlers behind Schema.normalize()."""

import copy
from typing import TYPE_CHECKING, Any

from common_schema.config import NormalizeOptions
from common_schema.errors import FieldError, FieldErrorCollector, is_field_error
from common_schema.schema_types.base import SchemaType
from common_schema.sentinels import ABSENT, is_present

if TYPE_CHECKING:
    from common_schema.schema import Schema


def apply_default(value: Any, subschema: dict) -> Any:
    """Substitute the subschema default for an ABSENT or None value.

    Callable defaults are called each time. Other defaults are deep-copied so
    documents never share the schema's default object.
    """
    if is_present(value):
        return value
    default = subschema.get("default")
    if default is None:
        return value
    return default() if callable(default) else copy.deepcopy(default)


class Normalizer(FieldErrorCollector):
    """Coerces each field to its canonical form, collecting field errors."""

    def __init__(self, schema: "Schema", options: NormalizeOptions):
        super().__init__()
        self.schema = schema
        self.options = options

    def on_field(self, field: str, value: Any, subschema: dict, schema_type: SchemaType) -> Any:
        value = apply_default(value, subschema)

        # --- Missing value ---
        # Trigger: no value and no default
        # Outcome: required error unless missing fields are allowed; value kept as-is
        if not is_present(value):
            if subschema.get("required") and not self.options.allow_missing_fields:
                self.add_field_error(
                    FieldError("required", subschema.get("required_error") or "Field is required"), field
                )
            return value

        # --- Coercion and hooks ---
        try:
            normalize_hook = subschema.get("normalize")
            if callable(normalize_hook):
                value = normalize_hook(value, subschema, field, self.options, self.schema)
            value = schema_type.normalize(value, subschema, field, self.options, self.schema)
            validate_hook = subschema.get("validate")
            if callable(validate_hook):
                validate_hook(value, subschema, field, self.options, self.schema)
        except Exception as e:
            if not is_field_error(e):
                raise
            self.add_field_error(e, field)
            return value

        enum = subschema.get("enum")
        if isinstance(enum, list) and not schema_type.check_enum(value, enum):
            self.add_field_error(
                FieldError(
                    "unrecognized",
                    subschema.get("enum_error") or "Unrecognized value",
                    {"value": value, "enum": enum},
                ),
                field,
            )
        return value

    def on_unknown_field(self, field: str, value: Any) -> Any:
        if self.options.remove_unknown_fields:
            return ABSENT
        if not self.options.allow_unknown_fields:
            self.add_field_error(FieldError("unknown_field", "Unknown field"), field)
        return value
