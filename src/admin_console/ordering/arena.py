"""
admin_console.ordering.arena

Flat node arena for two-level ordered forests.

Responsibilities:
- Index nodes by id with explicit parent references (no nested structures).
- Validate an arrangement: unique ids, known parents, at most two levels.
- Project the arena into sibling groups, preserving arrangement order.
- Build reorder plans and move nodes within their sibling group.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from admin_console.ordering.models import OrderedNode, PlanEntry, ReorderPlan


class NodeArena:
    """
    Sibling order is the order in which nodes appear in the input; the
    incoming `sort_order` values are ignored.
    """

    def __init__(self, nodes: Iterable[OrderedNode]) -> None:
        self._nodes: dict[str, OrderedNode] = {}
        for node in nodes:
            if node.id in self._nodes:
                raise ValueError(f"Duplicate node id in arrangement: {node.id}")
            self._nodes[node.id] = node

        self._groups: dict[str | None, list[str]] = {None: []}
        for node in self._nodes.values():
            if node.parent_id is not None:
                parent = self._nodes.get(node.parent_id)
                if parent is None:
                    raise ValueError(f"Node {node.id} references unknown parent {node.parent_id}")
                if parent.parent_id is not None:
                    raise ValueError(f"Node {node.id} is nested deeper than two levels")
            self._groups.setdefault(node.parent_id, []).append(node.id)

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    def __iter__(self) -> Iterator[OrderedNode]:
        return iter(self._nodes.values())

    def get(self, node_id: str) -> OrderedNode:
        return self._nodes[node_id]

    def siblings(self, parent_id: str | None = None) -> list[OrderedNode]:
        return [self._nodes[i] for i in self._groups.get(parent_id, [])]

    def top_level(self) -> list[OrderedNode]:
        return self.siblings(None)

    def children(self, node_id: str) -> list[OrderedNode]:
        return self.siblings(node_id)

    def walk(self) -> Iterator[tuple[OrderedNode, int]]:
        # Pre-order: each top-level node, then its children; positions are 1-based per group.
        for position, top in enumerate(self.top_level(), start=1):
            yield top, position
            for child_position, child in enumerate(self.children(top.id), start=1):
                yield child, child_position

    def plan(self) -> ReorderPlan:
        return tuple(PlanEntry(node.id, position, node.is_child) for node, position in self.walk())

    def renumbered(self) -> list[OrderedNode]:
        return [node.with_order(position) for node, position in self.walk()]

    def check_matches(self, canonical: Iterable[OrderedNode]) -> None:
        """
        Raise ValueError unless this arena holds exactly the canonical ids, each
        under its canonical parent. Only a full rearrangement of the stored tree
        keeps every sibling group contiguous.
        """

        parents = {n.id: n.parent_id for n in canonical}
        missing = parents.keys() - self._nodes.keys()
        unknown = self._nodes.keys() - parents.keys()
        if missing or unknown:
            raise ValueError(
                f"Arrangement does not match stored nodes (missing={sorted(missing)}, "
                f"unknown={sorted(unknown)})"
            )
        moved = sorted(i for i, n in self._nodes.items() if n.parent_id != parents[i])
        if moved:
            raise ValueError(f"Arrangement changes the parent of: {moved}")

    def move(self, node_id: str, to_index: int) -> NodeArena:
        """
        Return a new arena with `node_id` moved to `to_index` (0-based, clamped)
        inside its own sibling group.
        """

        node = self._nodes[node_id]
        group = list(self._groups.get(node.parent_id, []))
        group.remove(node_id)
        group.insert(max(0, min(to_index, len(group))), node_id)

        moved = NodeArena.__new__(NodeArena)
        moved._nodes = dict(self._nodes)
        moved._groups = {k: list(v) for k, v in self._groups.items()}
        moved._groups[node.parent_id] = group
        return moved


def build_plan(arrangement: Iterable[OrderedNode]) -> ReorderPlan:
    return NodeArena(arrangement).plan()


def move(arrangement: Iterable[OrderedNode], node_id: str, to_index: int) -> list[OrderedNode]:
    """
    Arrangement after dragging `node_id` to `to_index` within its sibling group,
    renumbered 1..n per group.
    """

    return NodeArena(arrangement).move(node_id, to_index).renumbered()


def group_tree(nodes: Iterable[OrderedNode]) -> list[tuple[OrderedNode, list[OrderedNode]]]:
    arena = NodeArena(nodes)
    return [(top, arena.children(top.id)) for top in arena.top_level()]


# --- Module Notes -----------------------------------------------------------
# Children may appear anywhere in the input sequence; grouping happens after all
# ids are known, so a flat list in any parent/child interleaving is accepted.
