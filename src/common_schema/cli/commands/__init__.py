"""CLI commands for common-schema."""

from . import document, schema

__all__ = ["document", "schema"]
