"""Document commands: validate and normalize a document against a schema."""

import json
from pathlib import Path
from typing import Annotated

import typer
from loguru import logger
from rich.table import Table

from common_schema.cli.app import app
from common_schema.cli.commands.command_utils import console, get_config, load_data_file, load_schema
from common_schema.config import NormalizeOptions
from common_schema.errors import ValidationError

SchemaPath = Annotated[Path, typer.Argument(help="Schema file (YAML or JSON)")]
DocumentPath = Annotated[Path, typer.Argument(help="Document file (YAML or JSON)")]


def _print_field_errors(error: ValidationError) -> None:
    table = Table(title="Validation errors")
    table.add_column("Field", style="cyan")
    table.add_column("Code", style="yellow")
    table.add_column("Message")
    for field_error in error.field_errors:
        table.add_row(field_error.field or "(root)", field_error.code, field_error.message)
    console.print(table)


# --- Validate ---


@app.command()
def validate(
    ctx: typer.Context,
    schema_path: SchemaPath,
    document_path: DocumentPath,
    allow_unknown_fields: bool = typer.Option(
        False, "--allow-unknown-fields", help="Accept fields the schema does not declare."
    ),
    allow_missing_fields: bool = typer.Option(
        False, "--allow-missing-fields", help="Skip required field checks."
    ),
):
    """Strictly validate DOCUMENT against SCHEMA.

    Exits with code 1 if the document is invalid and 2 if the schema is.
    """
    config = get_config(ctx)
    schema = load_schema(schema_path, config)
    document = load_data_file(document_path)
    options = NormalizeOptions(
        allow_unknown_fields=allow_unknown_fields or config.allow_unknown_fields,
        allow_missing_fields=allow_missing_fields or config.allow_missing_fields,
        remove_unknown_fields=config.remove_unknown_fields,
    )

    logger.info(f"Validating {document_path} against {schema_path}")
    try:
        schema.validate(document, options)
    except ValidationError as e:
        _print_field_errors(e)
        raise typer.Exit(1)
    console.print("[green]Document is valid[/green]")


# --- Normalize ---


@app.command()
def normalize(
    ctx: typer.Context,
    schema_path: SchemaPath,
    document_path: DocumentPath,
    allow_unknown_fields: bool = typer.Option(
        False, "--allow-unknown-fields", help="Keep fields the schema does not declare."
    ),
    remove_unknown_fields: bool = typer.Option(
        False, "--remove-unknown-fields", help="Drop fields the schema does not declare."
    ),
    allow_missing_fields: bool = typer.Option(
        False, "--allow-missing-fields", help="Skip required field checks."
    ),
):
    """Normalize DOCUMENT against SCHEMA and print the result as JSON.

    Dates and binary values are serialized to ISO and base64 strings.
    """
    config = get_config(ctx)
    schema = load_schema(schema_path, config)
    document = load_data_file(document_path)
    options = NormalizeOptions(
        allow_unknown_fields=allow_unknown_fields or config.allow_unknown_fields,
        allow_missing_fields=allow_missing_fields or config.allow_missing_fields,
        remove_unknown_fields=remove_unknown_fields or config.remove_unknown_fields,
        serialize=True,
    )

    logger.info(f"Normalizing {document_path} against {schema_path}")
    try:
        result = schema.normalize(document, options)
    except ValidationError as e:
        _print_field_errors(e)
        raise typer.Exit(1)
    typer.echo(json.dumps(result, indent=2, default=str))
