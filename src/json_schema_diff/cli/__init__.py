"""CLI tools for json-schema-diff."""
