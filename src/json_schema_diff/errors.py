"""
Custom exceptions for schema diffing.
"""


class SchemaDiffError(Exception):
    """Base exception for all json-schema-diff errors."""

    pass


class InvalidSchema(SchemaDiffError):
    """Raised when a value cannot be interpreted as a boolean or object schema."""

    def __init__(self, pointer: str, reason: str | None = None):
        self.pointer = pointer
        self.reason = reason
        location = pointer or "<root>"
        message = f"Invalid schema at {location}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class UnresolvedReference(SchemaDiffError):
    """Raised when a $ref pointer has no matching definition."""

    def __init__(self, pointer: str):
        self.pointer = pointer
        super().__init__(f"Unresolved reference: {pointer}")


class ConfigError(SchemaDiffError):
    """Raised when the config file cannot be loaded."""

    pass
