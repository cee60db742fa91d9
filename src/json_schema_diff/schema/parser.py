"""Schema parser for json-schema-diff.

Turns a parsed JSON value into a tree of SchemaNode objects, normalizing each
supported keyword on the way. Unsupported keywords are ignored. Values that
have the wrong shape for a keyword (a "type" that is a number, a "required"
that is not a list) are ignored the same way, since validating the schema
itself is not this tool's job. Only nodes that are neither a boolean nor an
object are rejected.
"""

from typing import Any

from json_schema_diff.errors import InvalidSchema
from json_schema_diff.schema.model import (
    ABSENT,
    ALL_TYPES,
    Bound,
    SchemaNode,
    literal_node,
)


# --- JSON pointer helpers ---


def escape_token(token: str) -> str:
    """Escape a single JSON pointer reference token (RFC 6901)."""
    return token.replace("~", "~0").replace("/", "~1")


def pointer_join(base: str, *tokens: str | int) -> str:
    """Append reference tokens to a pointer, escaping each one."""
    return base + "".join(f"/{escape_token(str(token))}" for token in tokens)


# --- Keyword helpers ---


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def json_type_of(value: Any) -> str:
    """Return the JSON type tag of a literal value."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    return "object"


def _expand_types(tags) -> frozenset[str]:
    types = {tag for tag in tags if tag in ALL_TYPES}
    # Every number schema also accepts integers
    if "number" in types:
        types.add("integer")
    return frozenset(types)


def _parse_types(schema: dict) -> frozenset[str] | None:
    """Compute the type set an object schema declares.

    An explicit "type" wins. Otherwise the set is inferred from "const", then
    from the presence of "properties". "not": {} (or "not": true) means no
    type at all. Returns None when nothing fixes the set; the node then
    accepts every type, unless anyOf narrows it (see DiffWalker).
    """
    declared = schema.get("type")
    if isinstance(declared, str):
        return _expand_types([declared])
    if isinstance(declared, list):
        return _expand_types(tag for tag in declared if isinstance(tag, str))

    if "const" in schema:
        const_type = json_type_of(schema["const"])
        if const_type == "integer":
            const_type = "number"
        return _expand_types([const_type])

    if isinstance(schema.get("properties"), dict):
        return frozenset({"object"})

    negated = schema.get("not")
    if negated is True or negated == {}:
        return frozenset()

    return None


def _tighter(first: Bound, second: Bound, lower: bool) -> Bound:
    if first.value == second.value:
        return first if first.exclusive else second
    if lower:
        return first if first.value > second.value else second
    return first if first.value < second.value else second


def _parse_bound(schema: dict, inclusive_key: str, exclusive_key: str) -> Bound | None:
    """Merge an inclusive bound and its exclusive variant into one Bound.

    Draft-04 uses a boolean exclusiveMinimum/exclusiveMaximum that modifies the
    inclusive keyword. Draft-06 and later use a number that is a bound of its own;
    when both are present the tighter one applies.
    """
    inclusive = schema.get(inclusive_key)
    exclusive = schema.get(exclusive_key)
    inclusive = inclusive if _is_number(inclusive) else None

    if isinstance(exclusive, bool):
        if inclusive is None:
            return None
        return Bound(inclusive, exclusive=exclusive)

    if not _is_number(exclusive):
        return Bound(inclusive) if inclusive is not None else None

    exclusive_bound = Bound(exclusive, exclusive=True)
    if inclusive is None:
        return exclusive_bound
    return _tighter(Bound(inclusive), exclusive_bound, lower=inclusive_key == "minimum")


def _parse_length(value: Any) -> int | None:
    if isinstance(value, int) and not isinstance(value, bool) and value >= 0:
        return value
    if isinstance(value, float) and value.is_integer() and value >= 0:
        return int(value)
    return None


def _parse_required(value: Any) -> tuple[str, ...]:
    if not isinstance(value, list):
        return ()
    names: list[str] = []
    for name in value:
        if isinstance(name, str) and name not in names:
            names.append(name)
    return tuple(names)


def _parse_children(value: Any, location: str) -> dict[str, SchemaNode]:
    if not isinstance(value, dict):
        return {}
    return {
        name: parse_schema(child, pointer_join(location, name)) for name, child in value.items()
    }


def _parse_additional_properties(schema: dict, location: str) -> "bool | SchemaNode":
    value = schema.get("additionalProperties", True)
    if isinstance(value, bool):
        return value
    # An empty schema accepts everything, same as true
    if isinstance(value, dict) and not value:
        return True
    return parse_schema(value, pointer_join(location, "additionalProperties"))


def _parse_items(schema: dict, location: str):
    if "items" not in schema:
        return None
    value = schema["items"]
    items_location = pointer_join(location, "items")
    if isinstance(value, list):
        return tuple(
            parse_schema(item, pointer_join(items_location, index))
            for index, item in enumerate(value)
        )
    return parse_schema(value, items_location)


def _parse_any_of(schema: dict, location: str) -> tuple[SchemaNode, ...] | None:
    value = schema.get("anyOf")
    if not isinstance(value, list):
        return None
    branches_location = pointer_join(location, "anyOf")
    return tuple(
        parse_schema(branch, pointer_join(branches_location, index))
        for index, branch in enumerate(value)
    )


# --- Main Parser ---


def parse_schema(value: Any, location: str = "#") -> SchemaNode:
    """Parse a JSON value into a SchemaNode.

    Args:
        value: The already-decoded JSON value (bool or dict).
        location: JSON pointer fragment of the value inside its document.

    Returns:
        The normalized SchemaNode for the value and all of its subschemas.

    Raises:
        InvalidSchema: If the value, or any nested subschema, is neither a
            boolean nor an object.
    """
    if isinstance(value, bool):
        return literal_node(value, location)

    if not isinstance(value, dict):
        raise InvalidSchema(
            location,
            f"expected a boolean or an object, got {json_type_of(value)}",
        )

    not_node = None
    if "not" in value:
        not_node = parse_schema(value["not"], pointer_join(location, "not"))

    enum = value.get("enum")
    pattern = value.get("pattern")
    schema_format = value.get("format")
    ref = value.get("$ref")
    schema_id = value.get("$id")
    types = _parse_types(value)

    return SchemaNode(
        location=location,
        raw=value,
        literal=None,
        types=types if types is not None else ALL_TYPES,
        declares_types=types is not None,
        enum=tuple(enum) if isinstance(enum, list) else None,
        const=value["const"] if "const" in value else ABSENT,
        pattern=pattern if isinstance(pattern, str) else None,
        min_length=_parse_length(value.get("minLength")) or 0,
        max_length=_parse_length(value.get("maxLength")),
        minimum=_parse_bound(value, "minimum", "exclusiveMinimum"),
        maximum=_parse_bound(value, "maximum", "exclusiveMaximum"),
        format=schema_format if isinstance(schema_format, str) else None,
        required=_parse_required(value.get("required")),
        properties=_parse_children(value.get("properties"), pointer_join(location, "properties")),
        additional_properties=_parse_additional_properties(value, location),
        items=_parse_items(value, location),
        any_of=_parse_any_of(value, location),
        not_=not_node,
        ref=ref if isinstance(ref, str) else None,
        id=schema_id if isinstance(schema_id, str) else None,
        definitions=_parse_children(
            value.get("definitions"), pointer_join(location, "definitions")
        ),
        defs=_parse_children(value.get("$defs"), pointer_join(location, "$defs")),
    )
