"""
admin_console.db.repositories.categories

Repository for the two-level category tree.

Responsibilities:
- Read categories (top level) and subcategories (children) in sibling order.
- Insert, update and delete tree nodes; write `sort_order` for one node at a time.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from admin_console.db.models import Category, Subcategory


class CategoryRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_top_level(self) -> list[Category]:
        # created_at breaks ties left behind by duplicate sort orders.
        stmt = select(Category).order_by(Category.sort_order, Category.created_at)
        return list((await self._session.execute(stmt)).scalars().all())

    async def list_children(self, category_id: str) -> list[Subcategory]:
        stmt = (
            select(Subcategory)
            .where(Subcategory.category_id == category_id)
            .order_by(Subcategory.sort_order, Subcategory.created_at)
        )
        return list((await self._session.execute(stmt)).scalars().all())

    async def list_all_children(self) -> list[Subcategory]:
        stmt = select(Subcategory).order_by(
            Subcategory.category_id, Subcategory.sort_order, Subcategory.created_at
        )
        return list((await self._session.execute(stmt)).scalars().all())

    async def get(self, node_id: str) -> Category | None:
        return await self._session.get(Category, node_id)

    async def get_child(self, node_id: str) -> Subcategory | None:
        return await self._session.get(Subcategory, node_id)

    async def max_sort_order(self, parent_id: str | None) -> int:
        if parent_id is None:
            stmt = select(func.max(Category.sort_order))
        else:
            stmt = select(func.max(Subcategory.sort_order)).where(
                Subcategory.category_id == parent_id
            )
        return (await self._session.execute(stmt)).scalar_one_or_none() or 0

    async def create(
        self,
        *,
        name: str,
        description: str | None,
        sort_order: int,
        parent_id: str | None = None,
    ) -> Category | Subcategory:
        node: Category | Subcategory
        if parent_id is None:
            node = Category(name=name, description=description, sort_order=sort_order)
        else:
            node = Subcategory(
                category_id=parent_id, name=name, description=description, sort_order=sort_order
            )
        self._session.add(node)
        await self._session.flush()
        return node

    async def set_sort_order(self, node_id: str, sort_order: int, *, is_child: bool) -> int:
        # Returns the number of rows touched; 0 means the node does not exist.
        model = Subcategory if is_child else Category
        stmt = (
            update(model)
            .where(model.id == node_id)
            .values(sort_order=sort_order, updated_at=datetime.utcnow())
        )
        result = await self._session.execute(stmt)
        return result.rowcount or 0

    async def delete(self, node_id: str, *, is_child: bool) -> int:
        if is_child:
            result = await self._session.execute(
                delete(Subcategory).where(Subcategory.id == node_id)
            )
            return result.rowcount or 0
        # Children first, so backends without FK cascades behave the same.
        await self._session.execute(delete(Subcategory).where(Subcategory.category_id == node_id))
        result = await self._session.execute(delete(Category).where(Category.id == node_id))
        return result.rowcount or 0
