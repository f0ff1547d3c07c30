"""Traversal handlers behind Schema.validate()."""

from typing import TYPE_CHECKING, Any

from common_schema.config import NormalizeOptions
from common_schema.errors import FieldError, FieldErrorCollector, is_field_error
from common_schema.normalizer import apply_default
from common_schema.schema_types.base import SchemaType
from common_schema.sentinels import is_present

if TYPE_CHECKING:
    from common_schema.schema import Schema


class Validator(FieldErrorCollector):
    """Strictly checks each field without coercing it.

    Values that would only pass after coercion, like "3" for a number, are
    errors here.
    """

    def __init__(self, schema: "Schema", options: NormalizeOptions):
        super().__init__()
        self.schema = schema
        self.options = options

    def on_field(self, field: str, value: Any, subschema: dict, schema_type: SchemaType) -> bool | None:
        value = apply_default(value, subschema)

        if not is_present(value):
            if subschema.get("required") and not self.options.allow_missing_fields:
                self.add_field_error(
                    FieldError("required", subschema.get("required_error") or "Field is required"), field
                )
            return None

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
            return None

        try:
            schema_type.validate(value, subschema, field, self.options, self.schema)
            validate_hook = subschema.get("validate")
            if callable(validate_hook):
                validate_hook(value, subschema, field, self.options, self.schema)
        except Exception as e:
            if not is_field_error(e):
                raise
            self.add_field_error(e, field)
            # Children of an invalid value would only repeat the error
            return False
        return None

    def on_unknown_field(self, field: str, value: Any) -> None:
        if not (self.options.allow_unknown_fields or self.options.remove_unknown_fields):
            self.add_field_error(FieldError("unknown_field", "Unknown field"), field)
