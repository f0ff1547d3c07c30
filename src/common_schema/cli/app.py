from typing import Optional

import typer

from common_schema.config import CommonSchemaConfig, setup_logging


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        import common_schema

        typer.echo(f"common-schema version: {common_schema.__version__}")
        raise typer.Exit()


app = typer.Typer(name="common-schema", no_args_is_help=True)


@app.callback()
def app_callback(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", help="Log debug output to stderr."),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """common-schema - validate and normalize documents against declarative schemas."""
    config = CommonSchemaConfig()
    setup_logging("DEBUG" if verbose else config.log_level)
    ctx.obj = config
