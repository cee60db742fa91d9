"""Schema comparison engine for json-schema-diff.

Parses two JSON schema documents into normalized node trees, resolves $ref
through per-document registries, and walks both trees to produce an ordered
list of changes, each classified as breaking or non-breaking.
"""

from json_schema_diff.schema.model import (
    ALL_TYPES,
    JSON_TYPES,
    Bound,
    DiffPolicy,
    Polarity,
    SchemaNode,
)
from json_schema_diff.schema.parser import parse_schema
from json_schema_diff.schema.resolver import DefinitionRegistry, build_registry
from json_schema_diff.schema.changes import Change, ChangeKind
from json_schema_diff.schema.matcher import BranchMatching, match_branches
from json_schema_diff.schema.diff import DiffWalker, diff_schemas

__all__ = [
    # Model
    "ALL_TYPES",
    "JSON_TYPES",
    "Bound",
    "DiffPolicy",
    "Polarity",
    "SchemaNode",
    # Parser
    "parse_schema",
    # Resolver
    "DefinitionRegistry",
    "build_registry",
    # Changes
    "Change",
    "ChangeKind",
    # Matcher
    "BranchMatching",
    "match_branches",
    # Diff
    "DiffWalker",
    "diff_schemas",
]
