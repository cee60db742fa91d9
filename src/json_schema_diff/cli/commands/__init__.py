"""CLI commands for json-schema-diff."""

from . import config, diff

__all__ = ["config", "diff"]
