"""Schema diff for json-schema-diff.

Walks the old and new schema trees side by side. At every node the walker:

  1. Resolves $ref on both sides through each document's DefinitionRegistry
  2. Runs the keyword differs in a fixed order: type, enum, const, string
     constraints, numeric constraints, format, required, additionalProperties,
     properties, items, anyOf, not
  3. Descends into nested schemas: additionalProperties, common properties
     (in old insertion order), items, matched anyOf branches, not

The polarity flag is passed down explicitly and flipped when descending into
"not". Reference cycles are cut by remembering which (old location, new
location) pairs are on the current recursion path; meeting one again reports
no changes for that branch.

An anyOf node with no type of its own takes the union of its branch types.
When one side is a bare anyOf and the other has none, the other side is
matched against the branches as a one-branch anyOf, so wrapping a schema in
an anyOf reports nothing.
"""

from dataclasses import replace
from typing import Any

from loguru import logger

from json_schema_diff.schema import keywords
from json_schema_diff.schema.changes import AnyOfBranchAdd, AnyOfBranchRemove, Change
from json_schema_diff.schema.matcher import match_branches
from json_schema_diff.schema.model import (
    ALL_TYPES,
    DiffPolicy,
    Polarity,
    SchemaNode,
    literal_node,
)
from json_schema_diff.schema.parser import parse_schema, pointer_join
from json_schema_diff.schema.resolver import DefinitionRegistry, build_registry


class DiffWalker:
    """Recursive comparison of two schema trees."""

    def __init__(
        self,
        lhs_registry: DefinitionRegistry,
        rhs_registry: DefinitionRegistry,
        policy: DiffPolicy | None = None,
        visiting: set[tuple[str, str]] | None = None,
    ):
        self.lhs_registry = lhs_registry
        self.rhs_registry = rhs_registry
        self.policy = policy or DiffPolicy()
        self.changes: list[Change] = []
        self._visiting: set[tuple[str, str]] = visiting if visiting is not None else set()

    def diff(
        self,
        path: str,
        lhs: SchemaNode,
        rhs: SchemaNode,
        polarity: Polarity = Polarity.NARROWING_BREAKS,
    ) -> None:
        """Compare two nodes and append every change found below `path`."""
        lhs = self.lhs_registry.resolve(lhs)
        rhs = self.rhs_registry.resolve(rhs)

        key = (lhs.location, rhs.location)
        if key in self._visiting:
            logger.debug(
                f"Reference cycle at {path or '<root>'} "
                f"({lhs.location} vs {rhs.location}); reporting no changes"
            )
            return

        self._visiting.add(key)
        try:
            self._diff_resolved(path, lhs, rhs, polarity)
        finally:
            self._visiting.discard(key)

    def count_changes(
        self, path: str, lhs: SchemaNode, rhs: SchemaNode, polarity: Polarity
    ) -> int:
        """Count the changes between two nodes without recording them."""
        walker = DiffWalker(
            self.lhs_registry,
            self.rhs_registry,
            self.policy,
            visiting=set(self._visiting),
        )
        walker.diff(path, lhs, rhs, polarity)
        return len(walker.changes)

    # --- Per-node comparison ---

    def _diff_resolved(
        self,
        path: str,
        lhs: SchemaNode,
        rhs: SchemaNode,
        polarity: Polarity,
    ) -> None:
        # Types of an anyOf are only compared at node level when the other side
        # has no anyOf; otherwise the branch diffs report them
        if lhs.any_of is None or rhs.any_of is None:
            lhs = _with_branch_types(self.lhs_registry, lhs)
            rhs = _with_branch_types(self.rhs_registry, rhs)

        # --- Boolean schemas ---
        # Trigger: either side is false, which accepts nothing
        # Outcome: only the type sets are compared; every other keyword is vacuous
        if lhs.is_literal and rhs.is_literal and lhs.literal == rhs.literal:
            return
        if lhs.accepts_nothing or rhs.accepts_nothing:
            self.changes.extend(keywords.diff_types(path, lhs, rhs))
            return

        # --- One-sided anyOf ---
        # Trigger: one side is nothing but an anyOf and the other side has none
        # Outcome: the other side is matched as a one-branch anyOf, so
        #          {"type": "integer"} and {"anyOf": [{"type": "integer"}]} are equal
        if lhs.is_any_of_only and rhs.any_of is None:
            pairs = self._match_any_of(path, lhs.any_of, (rhs,), polarity)
            self._diff_branch_pairs(path, pairs, polarity)
            return
        if rhs.is_any_of_only and lhs.any_of is None:
            pairs = self._match_any_of(path, (lhs,), rhs.any_of, polarity)
            self._diff_branch_pairs(path, pairs, polarity)
            return

        # --- Keyword families ---
        self.changes.extend(keywords.diff_types(path, lhs, rhs))
        self.changes.extend(keywords.diff_enum(path, lhs, rhs, polarity))
        self.changes.extend(keywords.diff_const(path, lhs, rhs))
        self.changes.extend(keywords.diff_string_constraints(path, lhs, rhs, self.policy))
        self.changes.extend(keywords.diff_numeric_constraints(path, lhs, rhs))
        self.changes.extend(keywords.diff_format(path, lhs, rhs, self.policy))
        self.changes.extend(keywords.diff_required(path, lhs, rhs))
        self.changes.extend(keywords.diff_additional_properties(path, lhs, rhs))
        self.changes.extend(keywords.diff_properties(path, lhs, rhs))
        self.changes.extend(keywords.diff_items(path, lhs, rhs))
        branch_pairs = self._diff_any_of_branches(path, lhs, rhs, polarity)
        self.changes.extend(keywords.diff_not(path, lhs, rhs, polarity))

        # --- Nested schemas ---
        if isinstance(lhs.additional_properties, SchemaNode) and isinstance(
            rhs.additional_properties, SchemaNode
        ):
            self.diff(
                pointer_join(path, "additionalProperties"),
                lhs.additional_properties,
                rhs.additional_properties,
                polarity,
            )

        for name, lhs_child in lhs.properties.items():
            rhs_child = rhs.properties.get(name)
            if rhs_child is not None:
                self.diff(pointer_join(path, "properties", name), lhs_child, rhs_child, polarity)

        self._diff_items(path, lhs, rhs, polarity)

        self._diff_branch_pairs(path, branch_pairs, polarity)

        # Only enum and not-in-not flip inside a negation; other families keep
        # their fixed verdicts
        if lhs.not_ is not None and rhs.not_ is not None:
            self.diff(pointer_join(path, "not"), lhs.not_, rhs.not_, polarity.inverted())

    def _diff_items(
        self,
        path: str,
        lhs: SchemaNode,
        rhs: SchemaNode,
        polarity: Polarity,
    ) -> None:
        if lhs.items is None and rhs.items is None:
            return

        # Absent items accepts every element
        lhs_items = lhs.items if lhs.items is not None else _default_items(lhs)
        rhs_items = rhs.items if rhs.items is not None else _default_items(rhs)
        items_path = pointer_join(path, "items")

        if isinstance(lhs_items, SchemaNode) and isinstance(rhs_items, SchemaNode):
            self.diff(items_path, lhs_items, rhs_items, polarity)
        elif isinstance(lhs_items, tuple) and isinstance(rhs_items, tuple):
            for index, (lhs_item, rhs_item) in enumerate(zip(lhs_items, rhs_items)):
                self.diff(pointer_join(items_path, index), lhs_item, rhs_item, polarity)
        elif isinstance(rhs_items, tuple):
            for index, rhs_item in enumerate(rhs_items):
                self.diff(pointer_join(items_path, index), lhs_items, rhs_item, polarity)
        else:
            for index, lhs_item in enumerate(lhs_items):
                self.diff(pointer_join(items_path, index), lhs_item, rhs_items, polarity)

    def _diff_any_of_branches(
        self,
        path: str,
        lhs: SchemaNode,
        rhs: SchemaNode,
        polarity: Polarity,
    ) -> list[tuple[tuple[SchemaNode, SchemaNode], int]]:
        """Emit branch additions and removals; return the matched pairs.

        A missing anyOf acts as a single branch that accepts everything, so
        introducing anyOf shows up as that branch being removed.
        """
        if lhs.any_of is None and rhs.any_of is None:
            return []

        lhs_branches = lhs.any_of if lhs.any_of is not None else _default_branches(lhs)
        rhs_branches = rhs.any_of if rhs.any_of is not None else _default_branches(rhs)
        return self._match_any_of(path, lhs_branches, rhs_branches, polarity)

    def _match_any_of(
        self,
        path: str,
        lhs_branches: tuple[SchemaNode, ...],
        rhs_branches: tuple[SchemaNode, ...],
        polarity: Polarity,
    ) -> list[tuple[tuple[SchemaNode, SchemaNode], int]]:
        branches_path = pointer_join(path, "anyOf")

        matching = match_branches(
            len(lhs_branches),
            len(rhs_branches),
            lambda old, new: self.count_changes(
                pointer_join(branches_path, new),
                lhs_branches[old],
                rhs_branches[new],
                polarity,
            ),
        )

        for old in matching.removed:
            self.changes.append(
                Change(
                    path,
                    AnyOfBranchRemove(index=old, branch=lhs_branches[old].raw),
                    is_breaking=True,
                )
            )
        for new in matching.added:
            self.changes.append(
                Change(
                    path,
                    AnyOfBranchAdd(index=new, branch=rhs_branches[new].raw),
                    is_breaking=False,
                )
            )

        return [
            ((lhs_branches[old], rhs_branches[new]), new) for old, new in matching.pairs
        ]

    def _diff_branch_pairs(
        self,
        path: str,
        pairs: list[tuple[tuple[SchemaNode, SchemaNode], int]],
        polarity: Polarity,
    ) -> None:
        for (lhs_branch, rhs_branch), new_index in pairs:
            self.diff(pointer_join(path, "anyOf", new_index), lhs_branch, rhs_branch, polarity)


def _default_items(node: SchemaNode) -> SchemaNode:
    return literal_node(True, pointer_join(node.location, "items"))


def _default_branches(node: SchemaNode) -> tuple[SchemaNode, ...]:
    return (literal_node(True, pointer_join(node.location, "anyOf", 0)),)


def _with_branch_types(registry: DefinitionRegistry, node: SchemaNode) -> SchemaNode:
    """Give an anyOf node without a declared type the union of its branch types."""
    if node.declares_types or node.any_of is None:
        return node
    return replace(node, types=_branch_types(registry, node, frozenset()))


def _branch_types(
    registry: DefinitionRegistry, node: SchemaNode, seen: frozenset[str]
) -> frozenset[str]:
    if node.declares_types or node.any_of is None:
        return node.types
    # A branch that leads back here adds nothing we can narrow
    if node.location in seen:
        return ALL_TYPES
    seen = seen | {node.location}
    types: frozenset[str] = frozenset()
    for branch in node.any_of:
        types |= _branch_types(registry, registry.resolve(branch), seen)
    return types


# --- Entry point ---


def diff_schemas(lhs: Any, rhs: Any, policy: DiffPolicy | None = None) -> list[Change]:
    """Compare two JSON schema documents.

    Args:
        lhs: The old schema, already decoded from JSON (a dict or a bool).
        rhs: The new schema, already decoded from JSON.
        policy: Verdicts for heuristic keywords (format, pattern). Defaults to
            DiffPolicy().

    Returns:
        The changes from lhs to rhs, in a deterministic order.

    Raises:
        InvalidSchema: If either document is not a boolean or object schema.
        UnresolvedReference: If a $ref points at nothing.
    """
    lhs_root = parse_schema(lhs)
    rhs_root = parse_schema(rhs)

    walker = DiffWalker(build_registry(lhs_root), build_registry(rhs_root), policy)
    walker.diff("", lhs_root, rhs_root)

    breaking = sum(1 for change in walker.changes if change.is_breaking)
    logger.debug(f"Schema diff found {len(walker.changes)} changes ({breaking} breaking)")
    return walker.changes
