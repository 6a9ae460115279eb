"""
tests.test_stores

SQLite-backed stores and services (real SQLAlchemy units of work).
"""

from __future__ import annotations

import pytest

from admin_console.auth.models import AdminRole
from admin_console.db.init_db import seed_admin
from admin_console.errors import HardBackendError, NotFoundError
from admin_console.ordering.models import OrderedNode
from admin_console.services.categories import CategoryService
from admin_console.services.tools import ToolService
from admin_console.stores.admins import SqlAdminDirectory, StaticAdminDirectory
from admin_console.stores.categories import CategoryStore
from admin_console.stores.tools import ToolStore


@pytest.mark.asyncio
async def test_new_categories_go_to_the_end_of_their_group(session_factory, data_client) -> None:
    svc = CategoryService(store=CategoryStore(session_factory), client=data_client)

    a = await svc.create(name="A")
    b = await svc.create(name="B", description="second")
    a1 = await svc.create(name="A1", parent_id=a.id)
    a2 = await svc.create(name="A2", parent_id=a.id)

    assert (a.sort_order, b.sort_order) == (1, 2)
    assert (a1.sort_order, a2.sort_order) == (1, 2)
    assert a1.parent_id == a.id and a1.is_child

    grouped = await svc.tree()
    assert [(top.name, [c.name for c in kids]) for top, kids in grouped] == [
        ("A", ["A1", "A2"]),
        ("B", []),
    ]
    assert grouped[1][0].attrs["description"] == "second"


@pytest.mark.asyncio
async def test_create_under_unknown_parent_fails(session_factory, data_client) -> None:
    svc = CategoryService(store=CategoryStore(session_factory), client=data_client)
    with pytest.raises(NotFoundError):
        await svc.create(name="orphan", parent_id="missing")


@pytest.mark.asyncio
async def test_reorder_persists_tree(session_factory, data_client) -> None:
    svc = CategoryService(store=CategoryStore(session_factory), client=data_client)
    a = await svc.create(name="A")
    b = await svc.create(name="B")
    a1 = await svc.create(name="A1", parent_id=a.id)
    a2 = await svc.create(name="A2", parent_id=a.id)

    arrangement = [
        OrderedNode(id=b.id),
        OrderedNode(id=a.id),
        OrderedNode(id=a2.id, parent_id=a.id),
        OrderedNode(id=a1.id, parent_id=a.id),
    ]
    assert await svc.reorder(arrangement) is True

    fresh = CategoryService(store=CategoryStore(session_factory), client=data_client)
    assert [n.name for n in await fresh.refresh()] == ["B", "A", "A2", "A1"]
    assert [n.sort_order for n in fresh.view.nodes] == [1, 2, 1, 2]


@pytest.mark.asyncio
async def test_reorder_rejects_partial_or_reparented_arrangements(
    session_factory, data_client
) -> None:
    svc = CategoryService(store=CategoryStore(session_factory), client=data_client)
    a = await svc.create(name="A")
    b = await svc.create(name="B")
    c = await svc.create(name="C")
    a1 = await svc.create(name="A1", parent_id=a.id)
    b1 = await svc.create(name="B1", parent_id=b.id)

    with pytest.raises(ValueError):
        await svc.reorder([OrderedNode(id=c.id)])

    with pytest.raises(ValueError):
        await svc.reorder(
            [
                OrderedNode(id=a.id),
                OrderedNode(id=b.id),
                OrderedNode(id=a1.id, parent_id=b.id),
                OrderedNode(id=b1.id, parent_id=b.id),
                OrderedNode(id=c.id),
            ]
        )

    fresh = CategoryService(store=CategoryStore(session_factory), client=data_client)
    assert [(n.name, n.sort_order) for n in await fresh.refresh()] == [
        ("A", 1),
        ("A1", 1),
        ("B", 2),
        ("B1", 1),
        ("C", 3),
    ]


class _FlakyCategoryStore(CategoryStore):
    """Fails the second sort_order write with a hard backend error."""

    writes = 0

    async def update_sort_order(
        self, node_id: str, sort_order: int, *, is_child: bool = False
    ) -> None:
        self.writes += 1
        if self.writes == 2:
            raise HardBackendError("connection reset")
        await super().update_sort_order(node_id, sort_order, is_child=is_child)


@pytest.mark.asyncio
async def test_failed_write_rolls_back_to_stored_order(session_factory, data_client) -> None:
    messages: list[str] = []
    svc = CategoryService(
        store=_FlakyCategoryStore(session_factory), client=data_client, notify=messages.append
    )
    a = await svc.create(name="A")
    b = await svc.create(name="B")
    c = await svc.create(name="C")

    ok = await svc.reorder([OrderedNode(id=c.id), OrderedNode(id=b.id), OrderedNode(id=a.id)])

    assert ok is False
    assert messages == ["Failed to reorder categories. Please try again."]
    # The first write (C -> 1) landed before the failure; the view shows that stored state.
    assert sorted((n.sort_order, n.name) for n in svc.view.nodes) == [
        (1, "A"),
        (1, "C"),
        (2, "B"),
    ]


@pytest.mark.asyncio
async def test_delete_category_removes_children_and_closes_gap(
    session_factory, data_client
) -> None:
    svc = CategoryService(store=CategoryStore(session_factory), client=data_client)
    a = await svc.create(name="A")
    b = await svc.create(name="B")
    c = await svc.create(name="C")
    b1 = await svc.create(name="B1", parent_id=b.id)

    assert await svc.delete(b.id) is True

    assert await svc.get(b1.id) is None
    assert [(n.id, n.sort_order) for n in await svc.refresh()] == [(a.id, 1), (c.id, 2)]


@pytest.mark.asyncio
async def test_update_category_details(session_factory, data_client) -> None:
    svc = CategoryService(store=CategoryStore(session_factory), client=data_client)
    a = await svc.create(name="A")

    updated = await svc.update(a.id, name="Alpha", description="first")
    assert updated.name == "Alpha"
    assert updated.attrs["description"] == "first"
    assert updated.sort_order == a.sort_order

    with pytest.raises(NotFoundError):
        await svc.update("missing", name="x")


@pytest.mark.asyncio
async def test_update_sort_order_on_missing_row_raises(session_factory) -> None:
    store = CategoryStore(session_factory)
    with pytest.raises(NotFoundError):
        await store.update_sort_order("missing", 1)
    with pytest.raises(NotFoundError):
        await store.update_sort_order("missing", 1, is_child=True)


@pytest.mark.asyncio
async def test_tools_are_a_flat_ordered_list(session_factory, data_client) -> None:
    svc = ToolService(store=ToolStore(session_factory), client=data_client)
    t1 = await svc.create(name="Hammer", website_link="https://example.com/h")
    t2 = await svc.create(name="Saw")
    t3 = await svc.create(name="Drill")

    assert [t.sort_order for t in (t1, t2, t3)] == [1, 2, 3]
    assert await ToolStore(session_factory).list_ordered(t1.id) == []

    await svc.list_ordered()
    assert await svc.move(t3.id, 0) is True
    assert [t.name for t in await svc.list_ordered()] == ["Drill", "Hammer", "Saw"]

    assert await svc.delete(t1.id) is True
    remaining = await svc.list_ordered()
    assert [(t.name, t.sort_order) for t in remaining] == [("Drill", 1), ("Saw", 2)]


@pytest.mark.asyncio
async def test_tool_store_rejects_child_writes(session_factory) -> None:
    with pytest.raises(HardBackendError):
        await ToolStore(session_factory).update_sort_order("t", 1, is_child=True)


@pytest.mark.asyncio
async def test_sql_admin_directory(session_factory, data_client) -> None:
    await seed_admin(
        session_factory, identity_id="u1", email="u1@example.com", role=AdminRole.moderator
    )
    directory = SqlAdminDirectory(session_factory, client=data_client)

    record = await directory.lookup("u1")
    assert record is not None and record.role is AdminRole.moderator
    assert await directory.lookup("nobody") is None


@pytest.mark.asyncio
async def test_static_admin_directory() -> None:
    directory = StaticAdminDirectory({"u1": AdminRole.super_admin})
    assert (await directory.lookup("u1")).role is AdminRole.super_admin
    assert await directory.lookup("u2") is None
