"""Document tree model for the email editor.

The editor keeps an email as an ordered list of top-level :class:`Node`
objects.  This module loads that list from the JSON shape the editor stores,
dumps it back, checks its structural invariants and provides the pure edit
operations (insert, remove, move, hide, relabel) the editor performs.

Edits never mutate their input: each returns a new top-level list in which
only the nodes on the path to the edited node are copied.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Iterator, Mapping, Optional, Sequence

from tree2mjml import registry
from tree2mjml.exceptions import TreeError


# ---------------------------------------------------------------------------
# Node definition
# ---------------------------------------------------------------------------

@dataclass
class Node:
    id: str
    type: str
    attributes: dict[str, str] = field(default_factory=dict)
    content: Optional[str] = None
    # ``None`` for leaf types, a (possibly empty) list for containers
    children: Optional[list[Node]] = None
    # Hidden nodes stay in the tree but are left out of the markup
    hidden: bool = False
    # Display name in the navigator, never emitted
    label: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON shape of this node and its subtree."""
        data: dict[str, Any] = {
            "id": self.id,
            "type": self.type,
            "attributes": dict(self.attributes),
        }
        if self.content is not None:
            data["content"] = self.content
        if self.children is not None:
            data["children"] = [child.to_dict() for child in self.children]
        if self.hidden:
            data["hidden"] = True
        if self.label is not None:
            data["label"] = self.label
        return data


def new_id() -> str:
    """Return a fresh opaque node id."""
    return uuid.uuid4().hex[:12]


def new_node(component_type: str, *, node_id: Optional[str] = None) -> Node:
    """Create a node of *component_type* populated from the registry.

    Raises:
        TreeError: If *component_type* is not registered.
    """
    definition = registry.lookup(component_type)
    if definition is None:
        raise TreeError(f"Unknown component type {component_type!r}")
    return Node(
        id=node_id or new_id(),
        type=definition.type,
        attributes=dict(definition.default_attrs),
        content=definition.default_content,
        children=[] if definition.is_container else None,
    )


# ---------------------------------------------------------------------------
# Loading / dumping
# ---------------------------------------------------------------------------

class TreeParser:
    """Load editor JSON data into a list of :class:`Node` objects.

    Accepts either the bare list of top-level elements or a mapping that
    carries it under ``"elements"`` (the shape of a saved template).
    """

    def parse(self, data: Any) -> list[Node]:
        if isinstance(data, Mapping) and "elements" in data:
            data = data["elements"]
        if not isinstance(data, list):
            raise TreeError(f"Expected a list of elements, got {type(data).__name__}")
        seen: set[str] = set()
        return self._convert_nodes(data, seen, path="elements")

    def _convert_nodes(self, items: list[Any], seen: set[str], path: str) -> list[Node]:
        return [
            self._convert_node(item, seen, f"{path}[{index}]")
            for index, item in enumerate(items)
        ]

    def _convert_node(self, item: Any, seen: set[str], path: str) -> Node:
        if not isinstance(item, Mapping):
            raise TreeError(f"{path}: expected an object, got {type(item).__name__}")

        node_id = item.get("id")
        if not isinstance(node_id, str) or not node_id:
            raise TreeError(f"{path}: missing or invalid 'id'")
        if node_id in seen:
            raise TreeError(f"{path}: duplicate id {node_id!r}")
        seen.add(node_id)

        node_type = item.get("type")
        if not isinstance(node_type, str) or not node_type:
            raise TreeError(f"{path}: missing or invalid 'type'")

        raw_attributes = item.get("attributes")
        attributes = self._convert_attributes({} if raw_attributes is None else raw_attributes, path)

        content = item.get("content")
        if content is not None and not isinstance(content, str):
            raise TreeError(f"{path}: 'content' must be a string")

        children_raw = item.get("children")
        children: Optional[list[Node]] = None
        if children_raw is not None:
            if not isinstance(children_raw, list):
                raise TreeError(f"{path}: 'children' must be a list")
            children = self._convert_nodes(children_raw, seen, f"{path}.children")

        label = item.get("label")
        if label is not None and not isinstance(label, str):
            raise TreeError(f"{path}: 'label' must be a string")

        hidden = item.get("hidden", False)
        if not isinstance(hidden, bool):
            raise TreeError(f"{path}: 'hidden' must be a boolean")

        return Node(
            id=node_id,
            type=node_type,
            attributes=attributes,
            content=content,
            children=children,
            hidden=hidden,
            label=label,
        )

    @staticmethod
    def _convert_attributes(raw: Any, path: str) -> dict[str, str]:
        if not isinstance(raw, Mapping):
            raise TreeError(f"{path}: 'attributes' must be an object")
        attributes: dict[str, str] = {}
        for key, value in raw.items():
            if not isinstance(key, str) or not isinstance(value, str):
                raise TreeError(f"{path}: attribute {key!r} must map a string to a string")
            attributes[key] = value
        return attributes


def parse_tree(data: Any) -> list[Node]:
    """Shortcut for ``TreeParser().parse(data)``."""
    return TreeParser().parse(data)


def dump_tree(nodes: Sequence[Node]) -> list[dict[str, Any]]:
    return [node.to_dict() for node in nodes]


# ---------------------------------------------------------------------------
# Traversal
# ---------------------------------------------------------------------------

def iter_nodes(nodes: Sequence[Node]) -> Iterator[Node]:
    """Yield every node depth-first, parents before children."""
    for node in nodes:
        yield node
        if node.children:
            yield from iter_nodes(node.children)


def find_node(nodes: Sequence[Node], node_id: str) -> Optional[Node]:
    for node in iter_nodes(nodes):
        if node.id == node_id:
            return node
    return None


def strip_hidden(nodes: Sequence[Node]) -> list[Node]:
    """Return a copy of *nodes* without hidden nodes and their subtrees."""
    visible: list[Node] = []
    for node in nodes:
        if node.hidden:
            continue
        if node.children is not None:
            node = replace(node, children=strip_hidden(node.children))
        visible.append(node)
    return visible


def validate_tree(nodes: Sequence[Node]) -> list[str]:
    """Return a message for every structural invariant the tree breaks.

    An empty list means the tree is well formed.
    """
    problems: list[str] = []
    seen: set[str] = set()
    for node in iter_nodes(nodes):
        if node.id in seen:
            problems.append(f"duplicate id {node.id!r}")
        seen.add(node.id)

        definition = registry.lookup(node.type)
        if definition is None:
            problems.append(f"node {node.id!r}: unknown component type {node.type!r}")
            continue
        if definition.is_container and node.children is None:
            problems.append(f"node {node.id!r}: container {node.type} has no children list")
        elif not definition.is_container and node.children is not None:
            problems.append(f"node {node.id!r}: {node.type} cannot have children")
    return problems


# ---------------------------------------------------------------------------
# Edit operations
# ---------------------------------------------------------------------------

_SiblingEdit = Callable[[list[Node], int], list[Node]]


def _edit_siblings(
    nodes: Sequence[Node], node_id: str, edit: _SiblingEdit
) -> tuple[list[Node], bool]:
    """Apply *edit* to the sibling list holding *node_id*.

    Only the ancestors of the edited list are copied; every other subtree
    is shared with the input.
    """
    for index, node in enumerate(nodes):
        if node.id == node_id:
            return edit(list(nodes), index), True
    for index, node in enumerate(nodes):
        if node.children:
            children, found = _edit_siblings(node.children, node_id, edit)
            if found:
                updated = list(nodes)
                updated[index] = replace(node, children=children)
                return updated, True
    return list(nodes), False


def _require(nodes: Sequence[Node], node_id: str) -> Node:
    node = find_node(nodes, node_id)
    if node is None:
        raise TreeError(f"No node with id {node_id!r}")
    return node


def _replace_node(nodes: Sequence[Node], node_id: str, fn: Callable[[Node], Node]) -> list[Node]:
    def edit(siblings: list[Node], index: int) -> list[Node]:
        siblings[index] = fn(siblings[index])
        return siblings

    updated, found = _edit_siblings(nodes, node_id, edit)
    if not found:
        raise TreeError(f"No node with id {node_id!r}")
    return updated


def _extract(nodes: Sequence[Node], node_id: str) -> tuple[list[Node], Node]:
    extracted: list[Node] = []

    def edit(siblings: list[Node], index: int) -> list[Node]:
        extracted.append(siblings.pop(index))
        return siblings

    updated, found = _edit_siblings(nodes, node_id, edit)
    if not found:
        raise TreeError(f"No node with id {node_id!r}")
    return updated, extracted[0]


def _accepts_children(node: Node) -> bool:
    return node.children is not None or registry.is_container(node.type)


def add_node(nodes: Sequence[Node], node: Node, parent_id: Optional[str] = None) -> list[Node]:
    """Append *node* at top level, or as the last child of *parent_id*."""
    existing = {n.id for n in iter_nodes(nodes)}
    incoming: set[str] = set()
    for descendant in iter_nodes([node]):
        if descendant.id in existing or descendant.id in incoming:
            raise TreeError(f"Duplicate id {descendant.id!r}")
        incoming.add(descendant.id)
    if parent_id is None:
        return [*nodes, node]

    parent = _require(nodes, parent_id)
    if not _accepts_children(parent):
        raise TreeError(f"Node {parent_id!r} ({parent.type}) cannot hold children")
    return _replace_node(
        nodes, parent_id, lambda p: replace(p, children=[*(p.children or []), node])
    )


def update_node(nodes: Sequence[Node], updated: Node) -> list[Node]:
    """Replace the node carrying ``updated.id`` with *updated*.

    The type of a node is fixed, and ids stay unique across the tree.
    """
    current = _require(nodes, updated.id)
    if updated.type != current.type:
        raise TreeError(
            f"Cannot change type of {updated.id!r} from {current.type} to {updated.type}"
        )
    result = _replace_node(nodes, updated.id, lambda _old: updated)
    seen: set[str] = set()
    for node in iter_nodes(result):
        if node.id in seen:
            raise TreeError(f"Duplicate id {node.id!r}")
        seen.add(node.id)
    return result


def remove_node(nodes: Sequence[Node], node_id: str) -> list[Node]:
    """Remove *node_id* together with all its descendants."""
    updated, _removed = _extract(nodes, node_id)
    return updated


def _check_not_within(dragged: Node, target_id: str) -> None:
    if dragged.id == target_id or find_node(dragged.children or [], target_id) is not None:
        raise TreeError(f"Cannot move {dragged.id!r} into its own subtree")


def move_into(nodes: Sequence[Node], drag_id: str, container_id: str) -> list[Node]:
    """Move *drag_id* to the end of *container_id*'s children."""
    dragged = _require(nodes, drag_id)
    _check_not_within(dragged, container_id)
    container = _require(nodes, container_id)
    if not _accepts_children(container):
        raise TreeError(f"Node {container_id!r} ({container.type}) cannot hold children")

    remaining, dragged = _extract(nodes, drag_id)
    return _replace_node(
        remaining,
        container_id,
        lambda c: replace(c, children=[*(c.children or []), dragged]),
    )


def reorder(
    nodes: Sequence[Node], drag_id: str, target_id: str, position: str = "before"
) -> list[Node]:
    """Move *drag_id* next to *target_id*, ``"before"`` or ``"after"`` it."""
    if position not in ("before", "after"):
        raise ValueError(f"position must be 'before' or 'after', got {position!r}")
    if drag_id == target_id:
        _require(nodes, drag_id)
        return list(nodes)
    dragged = _require(nodes, drag_id)
    _check_not_within(dragged, target_id)
    _require(nodes, target_id)

    remaining, dragged = _extract(nodes, drag_id)

    def edit(siblings: list[Node], index: int) -> list[Node]:
        siblings.insert(index if position == "before" else index + 1, dragged)
        return siblings

    updated, _found = _edit_siblings(remaining, target_id, edit)
    return updated


def move_sibling(nodes: Sequence[Node], node_id: str, direction: str) -> list[Node]:
    """Swap *node_id* with its previous (``"up"``) or next (``"down"``) sibling.

    Moving past either end leaves the tree unchanged.
    """
    if direction not in ("up", "down"):
        raise ValueError(f"direction must be 'up' or 'down', got {direction!r}")

    def edit(siblings: list[Node], index: int) -> list[Node]:
        swap = index - 1 if direction == "up" else index + 1
        if 0 <= swap < len(siblings):
            siblings[index], siblings[swap] = siblings[swap], siblings[index]
        return siblings

    updated, found = _edit_siblings(nodes, node_id, edit)
    if not found:
        raise TreeError(f"No node with id {node_id!r}")
    return updated


def toggle_hidden(nodes: Sequence[Node], node_id: str) -> list[Node]:
    return _replace_node(nodes, node_id, lambda n: replace(n, hidden=not n.hidden))


def set_label(nodes: Sequence[Node], node_id: str, label: Optional[str]) -> list[Node]:
    """Set the display label of *node_id*; a blank label clears it."""
    cleaned = (label or "").strip() or None
    return _replace_node(nodes, node_id, lambda n: replace(n, label=cleaned))
