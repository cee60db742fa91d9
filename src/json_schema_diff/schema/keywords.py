"""Keyword differs for json-schema-diff.

One function per keyword family. Each takes the current path and the resolved
old (lhs) and new (rhs) nodes and returns the changes for that family only,
with the breaking verdict already decided:

  Keyword family        -> Breaking when
  ---------------------------------------------------------------
  type                  -> a type is removed
  enum                  -> acceptance narrows (under the current polarity)
  const                 -> const is added or changed
  pattern               -> any change (DiffPolicy.pattern_breaking)
  minLength/maxLength   -> the length range shrinks
  minimum/maximum       -> the bound tightens (inclusive -> exclusive counts)
  format                -> never by default (DiffPolicy.format_breaking)
  required              -> a requirement is added
  additionalProperties  -> true -> false/schema, or schema -> false
  properties            -> removed while the new object is closed
  items                 -> array -> tuple, or the tuple length changes
  not                   -> a negation is added (under the current polarity)

Differs never fail. Absent keywords were already replaced by their defaults
when the nodes were parsed, so adding a keyword with its default value is not
a change.
"""

import json
from typing import Any

from json_schema_diff.schema.changes import (
    AdditionalPropertiesChange,
    ArrayToTuple,
    Change,
    ConstAdd,
    ConstChange,
    ConstRemove,
    EnumAdd,
    EnumRemove,
    EnumRestrictionAdd,
    EnumRestrictionRemove,
    FormatAdd,
    FormatChange,
    FormatRemove,
    MaximumChange,
    MaxLengthChange,
    MinimumChange,
    MinLengthChange,
    NotAdd,
    NotRemove,
    PatternAdd,
    PatternChange,
    PatternRemove,
    PropertyAdd,
    PropertyRemove,
    RequiredAdd,
    RequiredRemove,
    TupleChange,
    TupleToArray,
    TypeAdd,
    TypeRemove,
)
from json_schema_diff.schema.model import (
    Bound,
    DiffPolicy,
    Polarity,
    SchemaNode,
    sort_types,
)


# --- Value comparison ---


def _normalize_value(value: Any) -> Any:
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, list):
        return [_normalize_value(item) for item in value]
    if isinstance(value, dict):
        return {key: _normalize_value(item) for key, item in value.items()}
    return value


def canonical_value(value: Any) -> str:
    """Key for comparing JSON literals: 1 and 1.0 match, key order is ignored."""
    return json.dumps(_normalize_value(value), sort_keys=True, separators=(",", ":"))


def _unique_values(values: tuple) -> dict[str, Any]:
    unique: dict[str, Any] = {}
    for value in values:
        unique.setdefault(canonical_value(value), value)
    return unique


# --- type ---


def diff_types(path: str, lhs: SchemaNode, rhs: SchemaNode) -> list[Change]:
    changes = [
        Change(path, TypeRemove(removed=tag), is_breaking=True)
        for tag in sort_types(lhs.types - rhs.types)
    ]
    changes.extend(
        Change(path, TypeAdd(added=tag), is_breaking=False)
        for tag in sort_types(rhs.types - lhs.types)
    )
    return changes


# --- enum ---


def diff_enum(path: str, lhs: SchemaNode, rhs: SchemaNode, polarity: Polarity) -> list[Change]:
    """Diff enum values.

    Narrowing (removing a value, introducing an enum) is breaking under the
    default polarity and widening is breaking once polarity has been inverted.
    """
    narrowing_breaks = polarity.narrowing_breaks

    if lhs.enum is None and rhs.enum is None:
        return []
    if lhs.enum is None:
        return [Change(path, EnumRestrictionAdd(values=rhs.enum), is_breaking=narrowing_breaks)]
    if rhs.enum is None:
        return [
            Change(path, EnumRestrictionRemove(values=lhs.enum), is_breaking=not narrowing_breaks)
        ]

    old_values = _unique_values(lhs.enum)
    new_values = _unique_values(rhs.enum)

    changes = [
        Change(path, EnumRemove(removed=value), is_breaking=narrowing_breaks)
        for key, value in old_values.items()
        if key not in new_values
    ]
    changes.extend(
        Change(path, EnumAdd(added=value), is_breaking=not narrowing_breaks)
        for key, value in new_values.items()
        if key not in old_values
    )
    return changes


# --- const ---


def diff_const(path: str, lhs: SchemaNode, rhs: SchemaNode) -> list[Change]:
    if lhs.has_const and not rhs.has_const:
        return [Change(path, ConstRemove(removed=lhs.const), is_breaking=False)]
    if rhs.has_const and not lhs.has_const:
        return [Change(path, ConstAdd(added=rhs.const), is_breaking=True)]
    if lhs.has_const and canonical_value(lhs.const) != canonical_value(rhs.const):
        return [Change(path, ConstChange(old=lhs.const, new=rhs.const), is_breaking=True)]
    return []


# --- string constraints ---


def diff_string_constraints(
    path: str,
    lhs: SchemaNode,
    rhs: SchemaNode,
    policy: DiffPolicy,
) -> list[Change]:
    changes: list[Change] = []

    # Patterns are compared as literal source text only
    if lhs.pattern != rhs.pattern:
        if lhs.pattern is None:
            kind = PatternAdd(added=rhs.pattern)
        elif rhs.pattern is None:
            kind = PatternRemove(removed=lhs.pattern)
        else:
            kind = PatternChange(old=lhs.pattern, new=rhs.pattern)
        changes.append(Change(path, kind, is_breaking=policy.pattern_breaking))

    if lhs.min_length != rhs.min_length:
        changes.append(
            Change(
                path,
                MinLengthChange(old=lhs.min_length, new=rhs.min_length),
                is_breaking=rhs.min_length > lhs.min_length,
            )
        )

    if lhs.max_length != rhs.max_length:
        shrinks = rhs.max_length is not None and (
            lhs.max_length is None or rhs.max_length < lhs.max_length
        )
        changes.append(
            Change(
                path,
                MaxLengthChange(old=lhs.max_length, new=rhs.max_length),
                is_breaking=shrinks,
            )
        )

    return changes


# --- numeric constraints ---


def lower_bound_tightened(old: Bound | None, new: Bound | None) -> bool:
    """True if the new minimum rejects some value the old one accepted."""
    if new is None:
        return False
    if old is None:
        return True
    if new.value != old.value:
        return new.value > old.value
    return new.exclusive and not old.exclusive


def upper_bound_tightened(old: Bound | None, new: Bound | None) -> bool:
    """True if the new maximum rejects some value the old one accepted."""
    if new is None:
        return False
    if old is None:
        return True
    if new.value != old.value:
        return new.value < old.value
    return new.exclusive and not old.exclusive


def diff_numeric_constraints(path: str, lhs: SchemaNode, rhs: SchemaNode) -> list[Change]:
    changes: list[Change] = []
    if lhs.minimum != rhs.minimum:
        changes.append(
            Change(
                path,
                MinimumChange(old=lhs.minimum, new=rhs.minimum),
                is_breaking=lower_bound_tightened(lhs.minimum, rhs.minimum),
            )
        )
    if lhs.maximum != rhs.maximum:
        changes.append(
            Change(
                path,
                MaximumChange(old=lhs.maximum, new=rhs.maximum),
                is_breaking=upper_bound_tightened(lhs.maximum, rhs.maximum),
            )
        )
    return changes


# --- format ---


def diff_format(path: str, lhs: SchemaNode, rhs: SchemaNode, policy: DiffPolicy) -> list[Change]:
    if lhs.format == rhs.format:
        return []
    if lhs.format is None:
        kind = FormatAdd(added=rhs.format)
    elif rhs.format is None:
        kind = FormatRemove(removed=lhs.format)
    else:
        kind = FormatChange(old=lhs.format, new=rhs.format)
    return [Change(path, kind, is_breaking=policy.format_breaking)]


# --- required ---


def diff_required(path: str, lhs: SchemaNode, rhs: SchemaNode) -> list[Change]:
    old_required = set(lhs.required)
    new_required = set(rhs.required)

    changes: list[Change] = []
    removed = sorted(old_required - new_required)
    if removed:
        changes.append(Change(path, RequiredRemove(removed=tuple(removed)), is_breaking=False))
    added = sorted(new_required - old_required)
    if added:
        changes.append(Change(path, RequiredAdd(added=tuple(added)), is_breaking=True))
    return changes


# --- additionalProperties ---


def _additional_properties_kind(value: "bool | SchemaNode") -> bool | str:
    return value if isinstance(value, bool) else "schema"


def diff_additional_properties(path: str, lhs: SchemaNode, rhs: SchemaNode) -> list[Change]:
    """Report additionalProperties switching between true, false and a schema.

    Two schemas are not compared here; the walker descends into them.
    """
    old = _additional_properties_kind(lhs.additional_properties)
    new = _additional_properties_kind(rhs.additional_properties)
    if old == new:
        return []
    widens = new is True or old is False
    return [Change(path, AdditionalPropertiesChange(old=old, new=new), is_breaking=not widens)]


# --- properties ---


def diff_properties(path: str, lhs: SchemaNode, rhs: SchemaNode) -> list[Change]:
    """Report property definitions that appear or disappear.

    Dropping a definition only rejects data when the new object is closed
    (additionalProperties: false); otherwise the field still falls through to
    additionalProperties.
    """
    closed = rhs.additional_properties is False

    changes = [
        Change(path, PropertyRemove(name=name), is_breaking=closed)
        for name in lhs.properties
        if name not in rhs.properties
    ]
    changes.extend(
        Change(path, PropertyAdd(name=name), is_breaking=False)
        for name in rhs.properties
        if name not in lhs.properties
    )
    return changes


# --- items ---


def diff_items(path: str, lhs: SchemaNode, rhs: SchemaNode) -> list[Change]:
    """Report changes between single-schema (array) and tuple validation.

    Item schemas themselves are compared by the walker.
    """
    old_tuple = isinstance(lhs.items, tuple)
    new_tuple = isinstance(rhs.items, tuple)

    if old_tuple and new_tuple:
        if len(lhs.items) == len(rhs.items):
            return []
        return [
            Change(
                path,
                TupleChange(old_length=len(lhs.items), new_length=len(rhs.items)),
                is_breaking=True,
            )
        ]
    if new_tuple:
        return [Change(path, ArrayToTuple(new_length=len(rhs.items)), is_breaking=True)]
    if old_tuple:
        return [Change(path, TupleToArray(old_length=len(lhs.items)), is_breaking=False)]
    return []


# --- not ---


def diff_not(path: str, lhs: SchemaNode, rhs: SchemaNode, polarity: Polarity) -> list[Change]:
    if lhs.not_ is None and rhs.not_ is not None:
        return [Change(path, NotAdd(added=rhs.not_.raw), is_breaking=polarity.narrowing_breaks)]
    if lhs.not_ is not None and rhs.not_ is None:
        return [
            Change(path, NotRemove(removed=lhs.not_.raw), is_breaking=not polarity.narrowing_breaks)
        ]
    return []
