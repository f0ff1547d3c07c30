"""Schema-path addressing.

Field paths are dot-separated strings; numeric segments index into lists and
the root is the empty string. Collection types also accept the placeholder
segments in PATH_PLACEHOLDERS in place of an index.
"""

from typing import TYPE_CHECKING, Any

from common_schema.errors import SchemaError

if TYPE_CHECKING:
    from common_schema.schema import Schema


PATH_PLACEHOLDERS = frozenset({"$", "#", "_", "*"})


def join_path(path: str, component: Any) -> str:
    """Append one component to a field path."""
    return f"{path}.{component}" if path else str(component)


def split_path(path: str) -> list[str]:
    return path.split(".") if path else []


def is_index_component(component: Any) -> bool:
    """True for list indices and index placeholders."""
    if isinstance(component, int) and not isinstance(component, bool):
        return True
    component = str(component)
    return component.isdigit() or component in PATH_PLACEHOLDERS


def resolve_subschema(schema: "Schema", path: str) -> dict | None:
    """Return the subschema addressed by path, or None if there is none."""
    current = schema.get_data()
    for component in split_path(path):
        if current is None:
            return None
        current = schema.get_schema_type(current).get_field_subschema(current, component, schema)
    return current


def has_parent_type(
    schema: "Schema",
    path: str,
    type_name: str,
    skip_last_field: bool = False,
) -> bool:
    """Check whether any subschema along path has the given type.

    Collection subschemas may be stepped through without an index segment, so
    'foo.bar' reaches 'bar' inside a list of objects at 'foo'.

    Raises:
        SchemaError: If the path does not exist in the schema.
    """
    components = split_path(path)
    current = schema.get_data()
    visited: list[dict] = []

    for component in components:
        visited.append(current)
        schema_type = schema.get_schema_type(current)
        child = schema_type.get_field_subschema(current, component, schema)

        # --- Step through collections ---
        # Trigger: 'foo.bar' where foo is a list and 'bar' is not an index
        # Outcome: descend into the element subschema and retry the component
        while child is None and schema_type.is_collection:
            current = schema_type.get_field_subschema(current, "$", schema)
            if current is None:
                break
            visited.append(current)
            schema_type = schema.get_schema_type(current)
            child = schema_type.get_field_subschema(current, component, schema)

        if child is None:
            raise SchemaError("Did not find field in schema", {"path": path})
        current = child

    if not skip_last_field:
        visited.append(current)

    return any(subschema["type"] == type_name for subschema in visited)
