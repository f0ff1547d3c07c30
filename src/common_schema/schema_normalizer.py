"""Expands raw schema data, shorthand included, into canonical subschemas.

Every canonical subschema is a dict whose `type` key names a registered
schema type. Shorthand forms accepted for any subschema:

  "string"                 -> {"type": "string"}
  str                      -> {"type": "string"}
  [str]                    -> {"type": "array", "elements": {"type": "string"}}
  {"name": str}            -> {"type": "object", "properties": {...}}
  {"type": [str], ...}     -> same as [str], keeping the other keys
"""

import copy
from typing import TYPE_CHECKING, Any

from common_schema.errors import SchemaError
from common_schema.sentinels import ABSENT

if TYPE_CHECKING:
    from common_schema.schema import Schema


def _check_shorthand_list(raw: Any) -> None:
    if isinstance(raw, list) and len(raw) != 1:
        raise SchemaError("Shorthand arrays must contain exactly 1 element", {"subschema": raw})


def normalize_subschema(schema: "Schema", raw: Any) -> dict | None:
    """Normalize one raw subschema and, through its type, all of its children.

    raw is modified in place; Schema deep-copies caller data before the
    first call.

    Raises:
        SchemaError: If any part of the subschema is malformed.
    """
    if raw is None or raw is ABSENT:
        return None

    if schema.is_schema(raw):
        raw = copy.deepcopy(raw.get_data())

    if isinstance(raw, dict) and "type" in raw:
        subschema = raw
    else:
        _check_shorthand_list(raw)
        subschema = {"type": raw}

    type_value = subschema["type"]

    # --- Named type ---
    if isinstance(type_value, str):
        schema_type = schema.factory.get_type(type_value)
        return schema_type.normalize_schema(subschema, schema)

    # --- Shorthand type ---
    # Trigger: `type` holds a Python type, list or dict instead of a name
    # Outcome: the first registered type claiming it rewrites the subschema
    _check_shorthand_list(type_value)
    schema_type = schema.factory.match_shorthand_type(type_value)
    if schema_type is None:
        raise SchemaError(f"Unknown schema type: {type_value!r}", {"type": repr(type_value)})
    subschema = schema_type.normalize_shorthand_schema(subschema, schema)
    subschema["type"] = schema_type.name
    return schema_type.normalize_schema(subschema, schema)
