from __future__ import annotations

import pytest

from admin_console.ordering.arena import NodeArena, build_plan, group_tree, move
from admin_console.ordering.models import OrderedNode, PlanEntry
from tests.fakes import nodes


def test_plan_is_pre_order_with_per_group_positions() -> None:
    arrangement = nodes(
        ("b", None, 9), ("b1", "b", 3), ("a", None, 1), ("a1", "a", 1), ("a2", "a", 1)
    )

    assert build_plan(arrangement) == (
        PlanEntry("b", 1, False),
        PlanEntry("b1", 1, True),
        PlanEntry("a", 2, False),
        PlanEntry("a1", 1, True),
        PlanEntry("a2", 2, True),
    )


def test_children_may_precede_their_parent_in_the_input() -> None:
    arrangement = nodes(("a1", "a", 1), ("a", None, 1), ("a2", "a", 1))
    arena = NodeArena(arrangement)
    assert [n.id for n in arena.children("a")] == ["a1", "a2"]
    assert [n.id for n, _ in arena.walk()] == ["a", "a1", "a2"]


def test_renumbered_keeps_display_fields() -> None:
    node = OrderedNode(id="a", sort_order=7, name="Alpha", attrs={"description": "x"})
    (renumbered,) = NodeArena([node]).renumbered()
    assert renumbered.sort_order == 1
    assert renumbered.name == "Alpha"
    assert renumbered.attrs == {"description": "x"}


@pytest.mark.parametrize(
    ("arrangement", "message"),
    [
        (nodes(("a", None, 1), ("a", None, 2)), "Duplicate"),
        (nodes(("a1", "missing", 1)), "unknown parent"),
        (nodes(("a", None, 1), ("a1", "a", 1), ("a1x", "a1", 1)), "deeper than two levels"),
    ],
)
def test_invalid_arrangements_are_rejected(arrangement, message) -> None:
    with pytest.raises(ValueError, match=message):
        NodeArena(arrangement)


def test_move_within_sibling_group() -> None:
    arrangement = nodes(("a", None, 1), ("a1", "a", 1), ("a2", "a", 2), ("b", None, 2))

    moved = move(arrangement, "a2", 0)
    assert [(n.id, n.sort_order) for n in moved] == [("a", 1), ("a2", 1), ("a1", 2), ("b", 2)]

    moved = move(arrangement, "a", 99)
    assert [(n.id, n.sort_order) for n in moved] == [("b", 1), ("a", 2), ("a1", 1), ("a2", 2)]


def test_move_returns_new_arena() -> None:
    arena = NodeArena(nodes(("a", None, 1), ("b", None, 2)))
    moved = arena.move("b", 0)
    assert [n.id for n in arena.top_level()] == ["a", "b"]
    assert [n.id for n in moved.top_level()] == ["b", "a"]


def test_group_tree() -> None:
    grouped = group_tree(nodes(("a", None, 1), ("b", None, 2), ("b1", "b", 1)))
    assert [(top.id, [c.id for c in children]) for top, children in grouped] == [
        ("a", []),
        ("b", ["b1"]),
    ]


def test_empty_arrangement_has_empty_plan() -> None:
    assert build_plan([]) == ()


def test_check_matches_accepts_full_rearrangement() -> None:
    stored = nodes(("a", None, 1), ("a1", "a", 1), ("b", None, 2))
    NodeArena(nodes(("b", None, 1), ("a", None, 2), ("a1", "a", 1))).check_matches(stored)


@pytest.mark.parametrize(
    ("arrangement", "message"),
    [
        (nodes(("a", None, 1)), "missing"),
        (nodes(("a", None, 1), ("b", None, 2), ("a1", "a", 1), ("c", None, 3)), "unknown"),
        (nodes(("a", None, 1), ("b", None, 2), ("a1", "b", 1)), "changes the parent"),
        (nodes(("a", None, 1), ("b", None, 2), ("a1", None, 3)), "changes the parent"),
    ],
)
def test_check_matches_rejects_other_trees(arrangement, message) -> None:
    stored = nodes(("a", None, 1), ("a1", "a", 1), ("b", None, 2))
    with pytest.raises(ValueError, match=message):
        NodeArena(arrangement).check_matches(stored)
