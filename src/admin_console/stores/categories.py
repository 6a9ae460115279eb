"""
admin_console.stores.categories

ResourceStore over the category tree (categories + subcategories).

Responsibilities:
- List a sibling group (top level or one category's subcategories) as `OrderedNode`s.
- Write one node's `sort_order` per committed unit of work.
- Create/update/delete tree nodes for the console's category screens.
"""

from __future__ import annotations

from admin_console.db.models import Category, Subcategory
from admin_console.db.repositories.categories import CategoryRepo
from admin_console.errors import NotFoundError
from admin_console.ordering.models import OrderedNode
from admin_console.stores.base import SqlStore


def _to_node(row: Category | Subcategory) -> OrderedNode:
    parent_id = row.category_id if isinstance(row, Subcategory) else None
    return OrderedNode(
        id=row.id,
        sort_order=row.sort_order,
        parent_id=parent_id,
        name=row.name,
        created_at=row.created_at,
        attrs={"description": row.description},
    )


class CategoryStore(SqlStore):
    async def list_ordered(self, parent_id: str | None = None) -> list[OrderedNode]:
        async with self._scope() as session:
            repo = CategoryRepo(session)
            if parent_id is None:
                rows: list[Category] | list[Subcategory] = await repo.list_top_level()
            else:
                rows = await repo.list_children(parent_id)
            return [_to_node(r) for r in rows]

    async def list_tree(self) -> list[OrderedNode]:
        # Two queries instead of one per category; same order as list_ordered per group.
        async with self._scope() as session:
            repo = CategoryRepo(session)
            top = await repo.list_top_level()
            children = await repo.list_all_children()
        by_parent: dict[str, list[OrderedNode]] = {}
        for child in children:
            by_parent.setdefault(child.category_id, []).append(_to_node(child))
        nodes: list[OrderedNode] = []
        for row in top:
            nodes.append(_to_node(row))
            nodes.extend(by_parent.get(row.id, []))
        return nodes

    async def update_sort_order(
        self, node_id: str, sort_order: int, *, is_child: bool = False
    ) -> None:
        async with self._scope() as session:
            touched = await CategoryRepo(session).set_sort_order(
                node_id, sort_order, is_child=is_child
            )
            if touched == 0:
                raise NotFoundError(f"Category not found: {node_id}")

    async def get(self, node_id: str) -> OrderedNode | None:
        async with self._scope() as session:
            repo = CategoryRepo(session)
            row: Category | Subcategory | None = await repo.get(node_id)
            if row is None:
                row = await repo.get_child(node_id)
            return None if row is None else _to_node(row)

    async def next_sort_order(self, parent_id: str | None = None) -> int:
        async with self._scope() as session:
            return await CategoryRepo(session).max_sort_order(parent_id) + 1

    async def create(
        self,
        *,
        name: str,
        description: str | None = None,
        parent_id: str | None = None,
        sort_order: int,
    ) -> OrderedNode:
        async with self._scope() as session:
            repo = CategoryRepo(session)
            if parent_id is not None:
                parent = await repo.get(parent_id)
                if parent is None:
                    raise NotFoundError(f"Parent category not found: {parent_id}")
            row = await repo.create(
                name=name, description=description, sort_order=sort_order, parent_id=parent_id
            )
            return _to_node(row)

    async def update_details(
        self,
        node_id: str,
        *,
        name: str | None = None,
        description: str | None = None,
    ) -> OrderedNode:
        async with self._scope() as session:
            repo = CategoryRepo(session)
            row: Category | Subcategory | None = await repo.get(node_id)
            if row is None:
                row = await repo.get_child(node_id)
            if row is None:
                raise NotFoundError(f"Category not found: {node_id}")
            if name is not None:
                row.name = name
            if description is not None:
                row.description = description
            await session.flush()
            return _to_node(row)

    async def delete(self, node_id: str) -> OrderedNode:
        async with self._scope() as session:
            repo = CategoryRepo(session)
            row: Category | Subcategory | None = await repo.get(node_id)
            if row is None:
                row = await repo.get_child(node_id)
            if row is None:
                raise NotFoundError(f"Category not found: {node_id}")
            node = _to_node(row)
            await repo.delete(node_id, is_child=node.is_child)
            return node


# --- Module Notes -----------------------------------------------------------
# Deleting a top-level category removes its subcategories in the same unit of work.
