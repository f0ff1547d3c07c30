"""Schema commands: inspect a schema file."""

import json
from pathlib import Path
from typing import Annotated, Optional

import typer

from common_schema.cli.app import app
from common_schema.cli.commands.command_utils import get_config, load_schema

SchemaPath = Annotated[Path, typer.Argument(help="Schema file (YAML or JSON)")]


@app.command()
def fields(
    ctx: typer.Context,
    schema_path: SchemaPath,
    stop_at_arrays: bool = typer.Option(
        True, "--stop-at-arrays/--no-stop-at-arrays", help="Do not list fields inside arrays and maps."
    ),
    include_path_arrays: bool = typer.Option(
        False, "--include-path-arrays", help="Show array and map children with a '$' segment."
    ),
    max_depth: Optional[int] = typer.Option(None, "--max-depth", min=1, help="Maximum path depth."),
    only_leaves: bool = typer.Option(False, "--only-leaves", help="Only list fields without children."),
):
    """List the field paths declared by SCHEMA, one per line."""
    schema = load_schema(schema_path, get_config(ctx))
    for field in schema.list_fields(
        stop_at_arrays=stop_at_arrays,
        include_path_arrays=include_path_arrays,
        max_depth=max_depth,
        only_leaves=only_leaves,
    ):
        typer.echo(field)


@app.command("json-schema")
def json_schema(ctx: typer.Context, schema_path: SchemaPath):
    """Print SCHEMA converted to JSON Schema."""
    schema = load_schema(schema_path, get_config(ctx))
    typer.echo(json.dumps(schema.to_json_schema(), indent=2, default=str))
