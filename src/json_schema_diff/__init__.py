"""json-schema-diff - breaking-change detection for JSON Schema revisions."""

from json_schema_diff.errors import (
    ConfigError,
    InvalidSchema,
    SchemaDiffError,
    UnresolvedReference,
)
from json_schema_diff.schema import Change, ChangeKind, DiffPolicy, diff_schemas

__version__ = "0.1.0"

# Library entry point: diff(old_schema, new_schema) -> list[Change]
diff = diff_schemas

__all__ = [
    "Change",
    "ChangeKind",
    "ConfigError",
    "DiffPolicy",
    "InvalidSchema",
    "SchemaDiffError",
    "UnresolvedReference",
    "diff",
    "diff_schemas",
]
