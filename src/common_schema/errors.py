"""
Exceptions raised by common-schema.

Field-level problems are described by FieldError. The engines collect them
into a single ValidationError rather than stopping at the first one.

Standard field error codes:
  invalid_type    -> value is the wrong type
  invalid_format  -> value does not match a regex or format routine
  required        -> a required field is missing
  duplicate       -> a field required to be unique has a duplicate value
  invalid         -> generic
  too_small       -> numeric value below min
  too_large       -> numeric value above max
  too_short       -> string or binary shorter than min_length
  too_long        -> string or binary longer than max_length
  unrecognized    -> value not in the enum
  unknown_field   -> field has no attached schema
"""

from typing import Any


class CommonSchemaError(Exception):
    """Base exception for all common-schema errors."""

    pass


class SchemaError(CommonSchemaError):
    """Raised when the schema definition itself is malformed."""

    def __init__(self, message: str = "Schema syntax error", details: Any = None):
        self.message = message
        self.details = details
        super().__init__(message)


class FieldError(CommonSchemaError):
    """Error data for a single document field.

    Schema types raise this from validate() and normalize(). The engine
    attaches the field path and adds it to the batch for the current call.
    """

    is_field_error = True

    def __init__(
        self,
        code: str = "invalid",
        message: str = "Validation error",
        details: Any = None,
        field: str | None = None,
    ):
        self.code = code or "invalid"
        self.message = message or "Validation error"
        self.details = details
        self.field = field
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"field": self.field, "code": self.code, "message": self.message}
        if self.details is not None:
            result["details"] = self.details
        return result

    def __repr__(self) -> str:
        return f"FieldError(code={self.code!r}, message={self.message!r}, field={self.field!r})"


class ValidationError(CommonSchemaError):
    """Aggregate of one or more FieldErrors, or a standalone message."""

    is_validation_error = True

    def __init__(
        self,
        field_errors: list[FieldError] | str | None = None,
        message: str | None = None,
    ):
        if isinstance(field_errors, str):
            message = field_errors
            field_errors = None
        self.field_errors: list[FieldError] = list(field_errors or [])
        if not message:
            if self.field_errors:
                message = self.field_errors[0].message or "Validation failure"
            else:
                message = "Validation failure"
        self.message = message
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": "validation_error",
            "message": self.message,
            "field_errors": [error.to_dict() for error in self.field_errors],
        }


def is_field_error(value: Any) -> bool:
    """True if value carries the field error tag, regardless of its class."""
    return getattr(value, "is_field_error", False) is True


def is_validation_error(value: Any) -> bool:
    """True if value carries the validation error tag, regardless of its class."""
    return getattr(value, "is_validation_error", False) is True


class FieldErrorCollector:
    """Accumulates FieldErrors during one engine pass."""

    def __init__(self) -> None:
        self.field_errors: list[FieldError] = []

    def add_field_error(self, error: FieldError, field: str) -> None:
        error.field = field
        self.field_errors.append(error)

    def raise_if_errors(self) -> None:
        """Raise one ValidationError carrying every collected error, if any."""
        if self.field_errors:
            raise ValidationError(self.field_errors)
