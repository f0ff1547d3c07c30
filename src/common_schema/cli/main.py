"""Main CLI entry point for common-schema."""  # pragma: no cover

from common_schema.cli.app import app  # pragma: no cover

# Register commands
from common_schema.cli.commands import document, schema  # noqa: F401  # pragma: no cover

if __name__ == "__main__":  # pragma: no cover
    app()
