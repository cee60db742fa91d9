"""Reference resolver for json-schema-diff.

Every document gets its own DefinitionRegistry, built once before diffing
starts. The registry maps each way a subschema can be addressed to its node:

  1. Local pointer       -> "#/definitions/A", "#/$defs/A", "#/properties/a", "#"
  2. Root $id qualified  -> "<root $id>#/definitions/A"
  3. Subschema $id       -> "some-id", and the id joined against the enclosing base
  4. Pointer into an $id -> "<subschema id>#/properties/x"

Resolution is a pure lookup: a node carrying $ref is replaced by the node it
points to, following chains until a node without $ref is reached. A $ref inside
a subschema with its own $id is joined against that $id first.
"""

from urllib.parse import unquote, urldefrag, urljoin

from loguru import logger

from json_schema_diff.errors import UnresolvedReference
from json_schema_diff.schema.model import SchemaNode, literal_node


class DefinitionRegistry:
    """Addressable subschemas of a single schema document."""

    def __init__(self, base_uri: str | None = None):
        self.base_uri = base_uri
        self._entries: dict[str, SchemaNode] = {}
        self._bases: dict[str, str] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, pointer: str) -> bool:
        return self.lookup(pointer) is not None

    def register(self, pointer: str, node: SchemaNode) -> None:
        """Register a node under a pointer. The first registration wins."""
        self._entries.setdefault(pointer, node)

    def set_base(self, location: str, base: str) -> None:
        """Record the $id base URI that references at a location resolve against."""
        self._bases[location] = base

    def lookup(self, pointer: str, base: str | None = None) -> SchemaNode | None:
        """Find the node addressed by a pointer, or None.

        When `base` is given the pointer is first joined against it.
        """
        candidates = [pointer, unquote(pointer)]
        if base:
            joined = urljoin(base, pointer)
            candidates[:0] = [joined, unquote(joined)]
        if self.base_uri:
            candidates.append(urljoin(self.base_uri, pointer))
        for candidate in candidates:
            node = self._entries.get(candidate)
            if node is not None:
                return node
        return None

    def resolve(self, node: SchemaNode) -> SchemaNode:
        """Dereference a node, following chained references.

        Raises:
            UnresolvedReference: If a pointer in the chain has no registered node.
        """
        chain: list[str] = []
        while node.ref is not None:
            # --- Reference loop without content ---
            # Trigger: the chain comes back to a node it already passed through
            # Outcome: no keyword ever constrains the value, so it acts like true
            if node.location in chain:
                logger.warning(
                    f"Reference chain {' -> '.join(chain)} loops back to {node.location}; "
                    f"treating it as the true schema"
                )
                return literal_node(True, node.location)
            chain.append(node.location)

            target = self.lookup(node.ref, self._bases.get(node.location))
            if target is None:
                raise UnresolvedReference(node.ref)
            logger.debug(f"Resolved {node.ref} at {node.location} to {target.location}")
            node = target
        return node


# --- Registry construction ---


def _register_tree(
    registry: DefinitionRegistry,
    node: SchemaNode,
    root_uri: str | None,
    base: str | None,
    resource_root: str,
) -> None:
    """Register a subtree, children before their parent."""
    anchor_only = node.id is not None and node.id.startswith("#")
    if node.id is not None and not anchor_only:
        base = urljoin(base, node.id) if base else node.id
        resource_root = node.location

    for child in node.children():
        _register_tree(registry, child, root_uri, base, resource_root)

    registry.register(node.location, node)

    if root_uri:
        registry.register(f"{root_uri}{node.location}", node)

    if base is not None:
        registry.set_base(node.location, base)
        uri, _ = urldefrag(base)
        relative = node.location[len(resource_root) :]
        registry.register(f"{uri}#{relative}", node)
        if not relative:
            registry.register(uri, node)

    if node.id is not None:
        registry.register(node.id, node)
        if base is not None and anchor_only:
            registry.register(urljoin(base, node.id), node)


def build_registry(root: SchemaNode) -> DefinitionRegistry:
    """Build the registry for a document from its root node.

    Every subschema is registered before any reference is resolved, so a $ref
    may point forwards, backwards, or at the root itself.
    """
    root_uri = None
    if root.id is not None and not root.id.startswith("#"):
        root_uri, _ = urldefrag(root.id)

    registry = DefinitionRegistry(base_uri=root_uri)
    _register_tree(registry, root, root_uri, None, "#")
    logger.debug(f"Built definition registry with {len(registry)} entries")
    return registry
