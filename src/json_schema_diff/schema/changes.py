"""Change records for json-schema-diff.

A Change pairs a location in the schema tree with a ChangeKind and the verdict
on whether it breaks data that validated against the old schema. Each
ChangeKind variant is a small frozen dataclass whose class name is its tag in
serialized output:

  {"path": "/properties/name", "change": {"TypeRemove": {"removed": "string"}}, "is_breaking": true}

Variants carry only what is needed to describe the change; the verdict is
decided by the keyword differs, not by the variant.
"""

from dataclasses import dataclass, fields
from typing import Any

from json_schema_diff.schema.model import Bound


def _jsonable(value: Any) -> Any:
    if isinstance(value, Bound):
        return value.to_dict()
    if isinstance(value, tuple):
        return [_jsonable(item) for item in value]
    return value


@dataclass(frozen=True)
class ChangeKind:
    """Base class for every kind of change."""

    @property
    def tag(self) -> str:
        return type(self).__name__

    def to_dict(self) -> dict[str, dict[str, Any]]:
        return {self.tag: {f.name: _jsonable(getattr(self, f.name)) for f in fields(self)}}


# --- type ---


@dataclass(frozen=True)
class TypeAdd(ChangeKind):
    added: str


@dataclass(frozen=True)
class TypeRemove(ChangeKind):
    removed: str


# --- enum ---


@dataclass(frozen=True)
class EnumAdd(ChangeKind):
    added: Any


@dataclass(frozen=True)
class EnumRemove(ChangeKind):
    removed: Any


@dataclass(frozen=True)
class EnumRestrictionAdd(ChangeKind):
    """An enum now limits a value that previously had no enum."""

    values: tuple


@dataclass(frozen=True)
class EnumRestrictionRemove(ChangeKind):
    """An enum was dropped, lifting the limit on allowed values."""

    values: tuple


# --- const ---


@dataclass(frozen=True)
class ConstAdd(ChangeKind):
    added: Any


@dataclass(frozen=True)
class ConstRemove(ChangeKind):
    removed: Any


@dataclass(frozen=True)
class ConstChange(ChangeKind):
    old: Any
    new: Any


# --- string constraints ---


@dataclass(frozen=True)
class PatternAdd(ChangeKind):
    added: str


@dataclass(frozen=True)
class PatternRemove(ChangeKind):
    removed: str


@dataclass(frozen=True)
class PatternChange(ChangeKind):
    old: str
    new: str


@dataclass(frozen=True)
class MinLengthChange(ChangeKind):
    old: int
    new: int


@dataclass(frozen=True)
class MaxLengthChange(ChangeKind):
    old: int | None
    new: int | None


# --- numeric constraints ---


@dataclass(frozen=True)
class MinimumChange(ChangeKind):
    old: Bound | None
    new: Bound | None


@dataclass(frozen=True)
class MaximumChange(ChangeKind):
    old: Bound | None
    new: Bound | None


# --- format ---


@dataclass(frozen=True)
class FormatAdd(ChangeKind):
    added: str


@dataclass(frozen=True)
class FormatRemove(ChangeKind):
    removed: str


@dataclass(frozen=True)
class FormatChange(ChangeKind):
    old: str
    new: str


# --- required ---


@dataclass(frozen=True)
class RequiredAdd(ChangeKind):
    added: tuple[str, ...]


@dataclass(frozen=True)
class RequiredRemove(ChangeKind):
    removed: tuple[str, ...]


# --- objects ---


@dataclass(frozen=True)
class AdditionalPropertiesChange(ChangeKind):
    """additionalProperties switched kind; a schema side is reported as "schema"."""

    old: bool | str
    new: bool | str


@dataclass(frozen=True)
class PropertyAdd(ChangeKind):
    name: str


@dataclass(frozen=True)
class PropertyRemove(ChangeKind):
    name: str


# --- arrays ---


@dataclass(frozen=True)
class TupleToArray(ChangeKind):
    old_length: int


@dataclass(frozen=True)
class ArrayToTuple(ChangeKind):
    new_length: int


@dataclass(frozen=True)
class TupleChange(ChangeKind):
    old_length: int
    new_length: int


# --- combinators ---


@dataclass(frozen=True)
class AnyOfBranchAdd(ChangeKind):
    index: int
    branch: Any


@dataclass(frozen=True)
class AnyOfBranchRemove(ChangeKind):
    index: int
    branch: Any


@dataclass(frozen=True)
class NotAdd(ChangeKind):
    added: Any


@dataclass(frozen=True)
class NotRemove(ChangeKind):
    removed: Any


# --- Change record ---


@dataclass(frozen=True)
class Change:
    """A single detected difference between the old and new schema."""

    path: str  # JSON pointer into the schema, "" for the root
    change: ChangeKind
    is_breaking: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "change": self.change.to_dict(),
            "is_breaking": self.is_breaking,
        }
