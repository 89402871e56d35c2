"""Recursive traversal over schema node graphs."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from schema_sync.diagnostics import CyclicSchemaError
from schema_sync.schema_model import SchemaNode, SchemaOrBool

NodeVisitor = Callable[[SchemaNode], None]


@dataclass
class RefSlot:
    """Handle on one node's reference token that can be read and rewritten in place."""

    node: SchemaNode

    @property
    def value(self) -> str:
        return self.node.ref or ""

    @value.setter
    def value(self, token: str) -> None:
        self.node.ref = token


def walk(root: SchemaNode | None, visit: NodeVisitor) -> None:
    """Visit every node reachable from ``root`` plus every root-level definition.

    Order: the node itself, ``additionalItems``, tuple ``items``, single ``items``,
    ``contains``, ``additionalProperties``, ``properties`` values, ``allOf``,
    ``anyOf``, ``oneOf`` members and ``not``. Definitions nested below the root
    are not visited; only the root's own ``definitions`` table is.

    ``visit`` may mutate the node it receives. A node that is its own ancestor
    raises ``CyclicSchemaError``.
    """
    if root is None:
        return
    _walk_node(root, visit, breadcrumb="#", ancestors=set())
    for name, definition in (root.definitions or {}).items():
        _walk_node(definition, visit, breadcrumb=f"#/definitions/{name}", ancestors=set())


def collect_refs(root: SchemaNode | None) -> list[RefSlot]:
    """Return a rewritable slot for every node carrying a ``$ref``."""
    slots: list[RefSlot] = []

    def _collect(node: SchemaNode) -> None:
        if node.ref is not None:
            slots.append(RefSlot(node))

    walk(root, _collect)
    return slots


def _walk_node(
    value: SchemaOrBool | None,
    visit: NodeVisitor,
    *,
    breadcrumb: str,
    ancestors: set[int],
) -> None:
    if value is None or isinstance(value, bool):
        return
    node_id = id(value)
    if node_id in ancestors:
        raise CyclicSchemaError("schema node is its own ancestor", breadcrumb=breadcrumb)
    ancestors.add(node_id)
    try:
        visit(value)
        for child_breadcrumb, child in _children(value, breadcrumb):
            _walk_node(child, visit, breadcrumb=child_breadcrumb, ancestors=ancestors)
    finally:
        ancestors.discard(node_id)


def _children(node: SchemaNode, breadcrumb: str) -> list[tuple[str, SchemaOrBool | None]]:
    children: list[tuple[str, SchemaOrBool | None]] = [
        (f"{breadcrumb}/additionalItems", node.additional_items)
    ]
    if isinstance(node.items, list):
        children.extend(
            (f"{breadcrumb}/items/{index}", item) for index, item in enumerate(node.items)
        )
    else:
        children.append((f"{breadcrumb}/items", node.items))
    children.append((f"{breadcrumb}/contains", node.contains))
    children.append((f"{breadcrumb}/additionalProperties", node.additional_properties))
    children.extend(
        (f"{breadcrumb}/properties/{name}", prop)
        for name, prop in (node.properties or {}).items()
    )
    for keyword, members in (
        ("allOf", node.all_of),
        ("anyOf", node.any_of),
        ("oneOf", node.one_of),
    ):
        children.extend(
            (f"{breadcrumb}/{keyword}/{index}", member)
            for index, member in enumerate(members or ())
        )
    children.append((f"{breadcrumb}/not", node.not_))
    return children
