"""Tests for json_schema_diff.schema.resolver -- definition registry and $ref resolution."""

import pytest

from json_schema_diff.errors import UnresolvedReference
from json_schema_diff.schema.parser import parse_schema
from json_schema_diff.schema.resolver import DefinitionRegistry, build_registry


def _registry(document: dict) -> DefinitionRegistry:
    return build_registry(parse_schema(document))


# --- Draft-07 definitions ---


class TestDraft7Definitions:
    def test_definition_lookup(self):
        registry = _registry({"definitions": {"A": {"type": "string"}}})
        node = registry.lookup("#/definitions/A")
        assert node is not None
        assert node.types == {"string"}

    def test_missing_definition(self):
        registry = _registry({"definitions": {"A": {}}})
        assert registry.lookup("#/definitions/not-there") is None

    def test_root_id_qualified_pointer(self):
        registry = _registry(
            {
                "$id": "urn:uuid:e773a2e8-d746-4dc6-9480-0bba5ff33504",
                "definitions": {"A": {}},
            }
        )
        assert "#/definitions/A" in registry
        assert registry.lookup(
            "urn:uuid:e773a2e8-d746-4dc6-9480-0bba5ff33504#/definitions/A"
        ) is registry.lookup("#/definitions/A")

    def test_definition_with_own_id(self):
        registry = _registry({"definitions": {"A": {"$id": "some-id"}}})
        assert registry.lookup("some-id") is registry.lookup("#/definitions/A")


# --- Draft 2020-12 $defs ---


class TestDraft2020Defs:
    def test_defs_lookup(self):
        registry = _registry({"$defs": {"A": {"$id": "some-id"}}})
        assert registry.lookup("#/$defs/A") is not None
        assert registry.lookup("#/$defs/A") is registry.lookup("some-id")

    def test_missing_defs_entry(self):
        registry = _registry({"$defs": {"A": {}}})
        assert registry.lookup("#/$defs/not-there") is None

    def test_nested_defs_addressable(self):
        registry = _registry({"$defs": {"A": {"$defs": {"B": {"type": "null"}}}}})
        assert registry.lookup("#/$defs/A/$defs/B").types == {"null"}


# --- $id bases ---


class TestIdBases:
    def test_relative_id_joined_against_root(self):
        registry = _registry(
            {
                "$id": "https://example.com/schemas/root.json",
                "$defs": {"Item": {"$id": "item.json", "type": "integer"}},
            }
        )
        item = registry.lookup("https://example.com/schemas/item.json")
        assert item is not None
        assert item.types == {"integer"}
        # Relative refs resolve against the root base
        assert registry.lookup("item.json") is item

    def test_pointer_into_subschema_resource(self):
        registry = _registry(
            {
                "$id": "https://example.com/root.json",
                "$defs": {
                    "Item": {
                        "$id": "item.json",
                        "properties": {"name": {"type": "string"}},
                    }
                },
            }
        )
        node = registry.lookup("https://example.com/item.json#/properties/name")
        assert node is not None
        assert node.types == {"string"}

    def test_anchor_style_id(self):
        registry = _registry({"definitions": {"A": {"$id": "#foo", "type": "boolean"}}})
        assert registry.lookup("#foo") is registry.lookup("#/definitions/A")

    def test_relative_ref_resolves_against_enclosing_id(self):
        root = parse_schema(
            {
                "$defs": {
                    "A": {
                        "$id": "http://example.com/a.json",
                        "definitions": {"B": {"type": "string"}},
                        "properties": {"x": {"$ref": "#/definitions/B"}},
                    }
                },
                "$ref": "#/$defs/A",
            }
        )
        registry = build_registry(root)
        x = registry.lookup("#/$defs/A/properties/x")

        resolved = registry.resolve(x)

        assert resolved.location == "#/$defs/A/definitions/B"
        assert resolved.types == {"string"}

    def test_enclosing_id_wins_over_document_pointer(self):
        root = parse_schema(
            {
                "definitions": {"B": {"type": "null"}},
                "properties": {
                    "inner": {
                        "$id": "inner.json",
                        "definitions": {"B": {"type": "boolean"}},
                        "properties": {"x": {"$ref": "#/definitions/B"}},
                    }
                },
            }
        )
        registry = build_registry(root)

        resolved = registry.resolve(registry.lookup("#/properties/inner/properties/x"))

        assert resolved.types == {"boolean"}


# --- Local pointers ---


class TestLocalPointers:
    def test_root_pointer(self):
        root = parse_schema({"type": "object"})
        registry = build_registry(root)
        assert registry.lookup("#") is root

    def test_property_pointer(self):
        registry = _registry({"properties": {"a": {"items": {"type": "string"}}}})
        assert registry.lookup("#/properties/a/items").types == {"string"}

    def test_percent_encoded_pointer(self):
        registry = _registry({"$defs": {"My Type": {"type": "null"}}})
        assert registry.lookup("#/$defs/My%20Type").types == {"null"}


# --- resolve ---


class TestResolve:
    def test_node_without_ref_is_returned_as_is(self):
        root = parse_schema({"type": "string"})
        registry = build_registry(root)
        assert registry.resolve(root) is root

    def test_resolves_ref(self):
        root = parse_schema({"$ref": "#/definitions/A", "definitions": {"A": {"type": "string"}}})
        registry = build_registry(root)
        resolved = registry.resolve(root)
        assert resolved.location == "#/definitions/A"
        assert resolved.types == {"string"}

    def test_resolves_chained_refs(self):
        root = parse_schema(
            {
                "$ref": "#/definitions/A",
                "definitions": {
                    "A": {"$ref": "#/definitions/B"},
                    "B": {"type": "integer"},
                },
            }
        )
        resolved = build_registry(root).resolve(root)
        assert resolved.location == "#/definitions/B"

    def test_unresolved_reference_raises(self):
        root = parse_schema({"$ref": "#/definitions/Missing"})
        with pytest.raises(UnresolvedReference) as exc_info:
            build_registry(root).resolve(root)
        assert exc_info.value.pointer == "#/definitions/Missing"

    def test_reference_loop_resolves_to_true(self):
        root = parse_schema(
            {
                "$ref": "#/definitions/A",
                "definitions": {
                    "A": {"$ref": "#/definitions/B"},
                    "B": {"$ref": "#/definitions/A"},
                },
            }
        )
        resolved = build_registry(root).resolve(root)
        assert resolved.literal is True

    def test_self_reference_at_root_resolves_to_true(self):
        root = parse_schema({"$ref": "#"})
        resolved = build_registry(root).resolve(root)
        assert resolved.literal is True
