"""
Mindmap Tree Reconstructor.

Turns the flat, parent-referencing node list into a navigable forest.
The id -> children index is built once, in linear time, when a document
is loaded; expanding a node is then a dict lookup instead of a scan of
the whole list.

A node is a root when its parentId is absent, empty, or ROOT_SENTINEL.
Nodes whose parent chain never reaches a root (dangling parentId, or a
cycle) are excluded from the forest and listed in `orphans`.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field

from loguru import logger

from reformat.content.models import MindmapNode


@dataclass(frozen=True)
class MindmapTree:
    """A node with its reconstructed children, in original list order."""
    node: MindmapNode
    children: tuple[MindmapTree, ...] = ()

    @property
    def id(self) -> str:
        return self.node.id


class MindmapIndex:
    """One-time index over a flat node list."""

    def __init__(self, nodes: Sequence[MindmapNode]):
        self.nodes: tuple[MindmapNode, ...] = tuple(nodes)
        self._children: dict[str, list[int]] = {}
        self._roots: list[int] = []

        for position, node in enumerate(self.nodes):
            if node.is_root:
                self._roots.append(position)
            else:
                self._children.setdefault(node.parent_id, []).append(position)

        reachable = {position for position, _ in self._walk_positions()}
        self.orphans: tuple[MindmapNode, ...] = tuple(
            node for position, node in enumerate(self.nodes) if position not in reachable
        )
        if self.orphans:
            logger.warning(
                f"Mindmap: {len(self.orphans)} node(s) unreachable from any root: "
                f"{[n.id for n in self.orphans]}"
            )

    @property
    def roots(self) -> tuple[MindmapNode, ...]:
        return tuple(self.nodes[p] for p in self._roots)

    def children_of(self, node_id: str) -> tuple[MindmapNode, ...]:
        return tuple(self.nodes[p] for p in self._children.get(node_id, ()))

    def has_children(self, node_id: str) -> bool:
        return bool(self._children.get(node_id))

    def walk(self) -> Iterator[tuple[MindmapNode, int]]:
        """Pre-order (node, depth) over the reachable forest."""
        for position, depth in self._walk_positions():
            yield self.nodes[position], depth

    def forest(self) -> list[MindmapTree]:
        """Nested tree objects for every root."""
        visited: set[int] = set()
        return [self._build(p, visited) for p in self._roots]

    def _build(self, position: int, visited: set[int]) -> MindmapTree:
        visited.add(position)
        node = self.nodes[position]
        children = tuple(
            self._build(child, visited)
            for child in self._children.get(node.id, ())
            if child not in visited
        )
        return MindmapTree(node=node, children=children)

    def _walk_positions(self) -> Iterator[tuple[int, int]]:
        visited: set[int] = set()
        stack = [(p, 0) for p in reversed(self._roots)]
        while stack:
            position, depth = stack.pop()
            if position in visited:
                continue
            visited.add(position)
            yield position, depth
            node = self.nodes[position]
            for child in reversed(self._children.get(node.id, ())):
                if child not in visited:
                    stack.append((child, depth + 1))


def build_forest(nodes: Sequence[MindmapNode]) -> list[MindmapTree]:
    """Shortcut for `MindmapIndex(nodes).forest()`."""
    return MindmapIndex(nodes).forest()


@dataclass
class ExpansionState:
    """
    Open/closed state per node for one mindmap view.

    Transient UI state; never part of the document. Roots start open,
    everything deeper starts closed.
    """
    expanded: set[str] = field(default_factory=set)

    @classmethod
    def initial(cls, index: MindmapIndex) -> ExpansionState:
        return cls(expanded={node.id for node in index.roots})

    def is_open(self, node_id: str) -> bool:
        return node_id in self.expanded

    def toggle(self, node_id: str) -> bool:
        """Flip one node; returns the new open state."""
        if node_id in self.expanded:
            self.expanded.discard(node_id)
            return False
        self.expanded.add(node_id)
        return True

    def expand_all(self, index: MindmapIndex) -> None:
        self.expanded = {node.id for node, _ in index.walk()}
