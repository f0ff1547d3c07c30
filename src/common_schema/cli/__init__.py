"""Command line interface for common-schema."""
