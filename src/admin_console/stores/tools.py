"""
admin_console.stores.tools

ResourceStore over the flat tool list.

Responsibilities:
- List tools in display order (a single top-level sibling group).
- Write one tool's `sort_order` per committed unit of work.
- Create/update/delete tools for the console's tool screens.
"""

from __future__ import annotations

from admin_console.db.models import Tool
from admin_console.db.repositories.tools import ToolRepo
from admin_console.errors import HardBackendError, NotFoundError
from admin_console.ordering.models import OrderedNode
from admin_console.stores.base import SqlStore


def _to_node(row: Tool) -> OrderedNode:
    return OrderedNode(
        id=row.id,
        sort_order=row.sort_order,
        name=row.name,
        created_at=row.created_at,
        attrs={"image_url": row.image_url, "website_link": row.website_link},
    )


class ToolStore(SqlStore):
    """
    Flat ResourceStore: a single top-level sibling group, no children.
    """

    async def list_ordered(self, parent_id: str | None = None) -> list[OrderedNode]:
        if parent_id is not None:
            return []
        async with self._scope() as session:
            return [_to_node(r) for r in await ToolRepo(session).list_ordered()]

    async def update_sort_order(
        self, node_id: str, sort_order: int, *, is_child: bool = False
    ) -> None:
        if is_child:
            raise HardBackendError(f"Tools have no children: {node_id}")
        async with self._scope() as session:
            if await ToolRepo(session).set_sort_order(node_id, sort_order) == 0:
                raise NotFoundError(f"Tool not found: {node_id}")

    async def get(self, tool_id: str) -> OrderedNode | None:
        async with self._scope() as session:
            row = await ToolRepo(session).get(tool_id)
            return None if row is None else _to_node(row)

    async def next_sort_order(self) -> int:
        async with self._scope() as session:
            return await ToolRepo(session).max_sort_order() + 1

    async def create(
        self,
        *,
        name: str,
        sort_order: int,
        image_url: str | None = None,
        website_link: str | None = None,
    ) -> OrderedNode:
        async with self._scope() as session:
            row = await ToolRepo(session).create(
                name=name, sort_order=sort_order, image_url=image_url, website_link=website_link
            )
            return _to_node(row)

    async def update_details(
        self,
        tool_id: str,
        *,
        name: str | None = None,
        image_url: str | None = None,
        website_link: str | None = None,
    ) -> OrderedNode:
        async with self._scope() as session:
            row = await ToolRepo(session).get(tool_id)
            if row is None:
                raise NotFoundError(f"Tool not found: {tool_id}")
            if name is not None:
                row.name = name
            if image_url is not None:
                row.image_url = image_url
            if website_link is not None:
                row.website_link = website_link
            await session.flush()
            return _to_node(row)

    async def delete(self, tool_id: str) -> None:
        async with self._scope() as session:
            if await ToolRepo(session).delete(tool_id) == 0:
                raise NotFoundError(f"Tool not found: {tool_id}")


# --- Module Notes -----------------------------------------------------------
# `list_ordered(parent_id)` answers [] for any parent; `is_child` writes are rejected.
