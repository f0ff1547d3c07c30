"""Document traversal and transform engines.

Both engines walk a document in lockstep with a normalized schema. At each
node they call the caller's handlers, then hand recursion to the node's
schema type, which calls back into these functions for every child.

Handlers are any object with some of these methods:

    on_field(field, value, subschema, schema_type)
    on_unknown_field(field, value)
    post_field(field, value, subschema, schema_type)    # transform only

For traversal, on_field returning False stops descent below that node. For
transforms, each method returns the replacement value and ABSENT deletes the
field. The async variants accept handlers returning awaitables and visit
children strictly one at a time.
"""

import inspect
from typing import TYPE_CHECKING, Any

from common_schema.sentinels import ABSENT, is_present

if TYPE_CHECKING:
    from common_schema.schema import Schema


class Handlers:
    """No-op handlers. Subclass and override what you need."""

    def on_field(self, field: str, value: Any, subschema: dict, schema_type: Any) -> Any:
        return value

    def on_unknown_field(self, field: str, value: Any) -> Any:
        return value

    def post_field(self, field: str, value: Any, subschema: dict, schema_type: Any) -> Any:
        return value


async def _resolve(result: Any) -> Any:
    if inspect.isawaitable(result):
        return await result
    return result


# --- Traversal ---


def traverse_value(schema: "Schema", value: Any, subschema: dict | None, field: str, handlers: Any) -> None:
    if subschema is None:
        on_unknown_field = getattr(handlers, "on_unknown_field", None)
        if on_unknown_field is not None:
            on_unknown_field(field, value)
        return

    schema_type = schema.get_schema_type(subschema)
    on_field = getattr(handlers, "on_field", None)
    if on_field is not None and on_field(field, value, subschema, schema_type) is False:
        return
    if is_present(value):
        schema_type.traverse(value, subschema, field, handlers, schema)


async def traverse_value_async(
    schema: "Schema", value: Any, subschema: dict | None, field: str, handlers: Any
) -> None:
    if subschema is None:
        on_unknown_field = getattr(handlers, "on_unknown_field", None)
        if on_unknown_field is not None:
            await _resolve(on_unknown_field(field, value))
        return

    schema_type = schema.get_schema_type(subschema)
    on_field = getattr(handlers, "on_field", None)
    if on_field is not None:
        if await _resolve(on_field(field, value, subschema, schema_type)) is False:
            return
    if is_present(value):
        await schema_type.traverse_async(value, subschema, field, handlers, schema)


# --- Transform ---


def transform_value(schema: "Schema", value: Any, subschema: dict | None, field: str, handlers: Any) -> Any:
    if subschema is None:
        on_unknown_field = getattr(handlers, "on_unknown_field", None)
        if on_unknown_field is not None:
            return on_unknown_field(field, value)
        return value

    schema_type = schema.get_schema_type(subschema)
    on_field = getattr(handlers, "on_field", None)
    if on_field is not None:
        value = on_field(field, value, subschema, schema_type)

    # Children see the value on_field returned, not the original
    if is_present(value):
        value = schema_type.transform(value, subschema, field, handlers, schema)

    post_field = getattr(handlers, "post_field", None)
    if post_field is not None and value is not ABSENT:
        value = post_field(field, value, subschema, schema_type)
    return value


async def transform_value_async(
    schema: "Schema", value: Any, subschema: dict | None, field: str, handlers: Any
) -> Any:
    if subschema is None:
        on_unknown_field = getattr(handlers, "on_unknown_field", None)
        if on_unknown_field is not None:
            return await _resolve(on_unknown_field(field, value))
        return value

    schema_type = schema.get_schema_type(subschema)
    on_field = getattr(handlers, "on_field", None)
    if on_field is not None:
        value = await _resolve(on_field(field, value, subschema, schema_type))

    if is_present(value):
        value = await schema_type.transform_async(value, subschema, field, handlers, schema)

    post_field = getattr(handlers, "post_field", None)
    if post_field is not None and value is not ABSENT:
        value = await _resolve(post_field(field, value, subschema, schema_type))
    return value


# --- Schema-only traversal ---


def traverse_subschema(
    schema: "Schema", subschema: dict | None, path: str, handlers: Any, options: dict
) -> None:
    """Visit subschema and its descendants without a document.

    Calls handlers.on_subschema(subschema, path, schema_type); returning
    False skips the node's children.
    """
    if subschema is None:
        return
    schema_type = schema.get_schema_type(subschema)
    on_subschema = getattr(handlers, "on_subschema", None)
    if on_subschema is not None and on_subschema(subschema, path, schema_type) is False:
        return
    schema_type.traverse_schema(subschema, path, handlers, schema, options)
