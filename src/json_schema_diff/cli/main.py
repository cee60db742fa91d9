"""Main CLI entry point for json-schema-diff."""  # pragma: no cover

from json_schema_diff.cli.app import app  # pragma: no cover

# Register commands
from json_schema_diff.cli.commands import (  # noqa: F401  # pragma: no cover
    config,
    diff,
)

if __name__ == "__main__":  # pragma: no cover
    # start the app
    app()
