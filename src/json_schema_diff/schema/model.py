"""Schema data model for json-schema-diff.

A schema node is either a boolean literal (true matches everything, false
matches nothing) or a keyword set. Keyword values are normalized when the node
is parsed so that the keyword differs can compare them directly:

  Keyword                       -> Normalized form
  ---------------------------------------------------------------
  type (string or list)         -> frozenset of type tags (number implies integer)
  enum                          -> tuple of values, or None
  minLength / maxLength         -> int (default 0) / int or None (unbounded)
  minimum / exclusiveMinimum    -> a single Bound, or None
  maximum / exclusiveMaximum    -> a single Bound, or None
  additionalProperties          -> True, False or a child SchemaNode ({} is True)
  items                         -> child SchemaNode, tuple of children, or None

Nodes never hold back-references; $ref stays a pointer string that the resolver
looks up in a DefinitionRegistry.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


# --- Type tags ---
# Canonical order, used whenever type changes are emitted.

JSON_TYPES: tuple[str, ...] = (
    "string",
    "number",
    "integer",
    "object",
    "array",
    "boolean",
    "null",
)

ALL_TYPES = frozenset(JSON_TYPES)

# Keywords the differs compare at node level (anyOf and $ref are handled by the walker)
COMPARED_KEYWORDS = frozenset(
    {
        "type",
        "enum",
        "const",
        "pattern",
        "minLength",
        "maxLength",
        "minimum",
        "maximum",
        "exclusiveMinimum",
        "exclusiveMaximum",
        "format",
        "required",
        "properties",
        "additionalProperties",
        "items",
        "not",
    }
)


def sort_types(types) -> list[str]:
    """Return type tags in canonical order."""
    return [t for t in JSON_TYPES if t in types]


# --- Const sentinel ---


class _Absent:
    """Marker for a keyword that is not present (const may legitimately be null)."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> bool:
        return False


ABSENT: Any = _Absent()


# --- Polarity ---


class Polarity(Enum):
    """Which direction of change is breaking at a point in the tree."""

    NARROWING_BREAKS = 1
    WIDENING_BREAKS = -1

    def inverted(self) -> "Polarity":
        if self is Polarity.NARROWING_BREAKS:
            return Polarity.WIDENING_BREAKS
        return Polarity.NARROWING_BREAKS

    @property
    def narrowing_breaks(self) -> bool:
        return self is Polarity.NARROWING_BREAKS


# --- Policy ---


@dataclass(frozen=True)
class DiffPolicy:
    """Tunable verdicts for keywords whose breaking-ness is heuristic."""

    format_breaking: bool = False  # format is advisory in most validators
    pattern_breaking: bool = True  # regex containment is not decided


# --- Numeric bounds ---


@dataclass(frozen=True)
class Bound:
    """A minimum or maximum together with its inclusivity."""

    value: int | float
    exclusive: bool = False

    def to_dict(self) -> dict:
        return {"value": self.value, "exclusive": self.exclusive}


# --- Schema node ---


@dataclass(frozen=True, eq=False)
class SchemaNode:
    """A normalized schema node.

    `location` is the JSON pointer fragment of the node inside its own document
    ("#", "#/properties/name", "#/$defs/Item"). It is what the registry keys
    definitions by and what the diff walker uses to detect reference cycles.
    """

    location: str
    raw: Any = True
    literal: bool | None = None  # True/False for boolean schemas, None for keyword sets
    types: frozenset[str] = ALL_TYPES
    declares_types: bool = True  # False when no keyword fixed the type set
    enum: tuple | None = None
    const: Any = ABSENT
    pattern: str | None = None
    min_length: int = 0
    max_length: int | None = None
    minimum: Bound | None = None
    maximum: Bound | None = None
    format: str | None = None
    required: tuple[str, ...] = ()
    properties: dict[str, "SchemaNode"] = field(default_factory=dict)
    additional_properties: "bool | SchemaNode" = True
    items: "SchemaNode | tuple[SchemaNode, ...] | None" = None
    any_of: "tuple[SchemaNode, ...] | None" = None
    not_: "SchemaNode | None" = None
    ref: str | None = None
    id: str | None = None
    definitions: dict[str, "SchemaNode"] = field(default_factory=dict)
    defs: dict[str, "SchemaNode"] = field(default_factory=dict)

    @property
    def is_literal(self) -> bool:
        return self.literal is not None

    @property
    def accepts_nothing(self) -> bool:
        return self.literal is False

    @property
    def has_const(self) -> bool:
        return self.const is not ABSENT

    @property
    def is_any_of_only(self) -> bool:
        """True when anyOf is the only compared keyword on this node."""
        return (
            self.any_of is not None
            and isinstance(self.raw, dict)
            and not COMPARED_KEYWORDS.intersection(self.raw)
        )

    def children(self) -> list["SchemaNode"]:
        """Every directly nested schema node, in document order."""
        nodes: list[SchemaNode] = []
        nodes.extend(self.definitions.values())
        nodes.extend(self.defs.values())
        nodes.extend(self.properties.values())
        if isinstance(self.additional_properties, SchemaNode):
            nodes.append(self.additional_properties)
        if isinstance(self.items, SchemaNode):
            nodes.append(self.items)
        elif isinstance(self.items, tuple):
            nodes.extend(self.items)
        if self.any_of:
            nodes.extend(self.any_of)
        if self.not_ is not None:
            nodes.append(self.not_)
        return nodes


def literal_node(value: bool, location: str) -> SchemaNode:
    """Build the node for a boolean schema."""
    return SchemaNode(
        location=location,
        raw=value,
        literal=value,
        types=ALL_TYPES if value else frozenset(),
    )
