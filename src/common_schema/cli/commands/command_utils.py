"""Helpers shared by the document and schema commands."""

from pathlib import Path
from typing import Any

import typer
import yaml
from loguru import logger
from rich.console import Console

from common_schema.config import CommonSchemaConfig
from common_schema.errors import SchemaError
from common_schema.factory import SchemaFactory
from common_schema.schema import Schema

console = Console()


def get_config(ctx: typer.Context) -> CommonSchemaConfig:
    # ctx.obj is unset when a command module is invoked without the app callback
    return ctx.obj if isinstance(ctx.obj, CommonSchemaConfig) else CommonSchemaConfig()


def load_data_file(path: Path) -> Any:
    """Read a YAML or JSON file. JSON is parsed as YAML, which it is a subset of."""
    try:
        with path.open(encoding="utf-8") as f:
            return yaml.safe_load(f)
    except OSError as e:
        console.print(f"[red]Error: cannot read {path}: {e}[/red]")
        raise typer.Exit(2)
    except yaml.YAMLError as e:
        console.print(f"[red]Error: cannot parse {path}: {e}[/red]")
        raise typer.Exit(2)


def load_schema(path: Path, config: CommonSchemaConfig) -> Schema:
    """Build a Schema from a schema file, exiting with code 2 if it is malformed."""
    schema_data = load_data_file(path)
    factory = SchemaFactory(load_geo_types=config.load_geo_types)
    try:
        schema = factory.create_schema(schema_data)
    except SchemaError as e:
        console.print(f"[red]Schema error in {path}: {e.message}[/red]")
        raise typer.Exit(2)
    logger.info(f"Loaded schema from {path}")
    return schema
