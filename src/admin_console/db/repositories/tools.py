"""
admin_console.db.repositories.tools

Repository for the flat tool list.

Responsibilities:
- Read tools in sibling order, insert/update/delete them.
- Write `sort_order` for one tool at a time.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from admin_console.db.models import Tool


class ToolRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_ordered(self) -> list[Tool]:
        stmt = select(Tool).order_by(Tool.sort_order, Tool.created_at)
        return list((await self._session.execute(stmt)).scalars().all())

    async def get(self, tool_id: str) -> Tool | None:
        return await self._session.get(Tool, tool_id)

    async def max_sort_order(self) -> int:
        stmt = select(func.max(Tool.sort_order))
        return (await self._session.execute(stmt)).scalar_one_or_none() or 0

    async def create(
        self,
        *,
        name: str,
        sort_order: int,
        image_url: str | None = None,
        website_link: str | None = None,
    ) -> Tool:
        tool = Tool(
            name=name, image_url=image_url, website_link=website_link, sort_order=sort_order
        )
        self._session.add(tool)
        await self._session.flush()
        return tool

    async def set_sort_order(self, tool_id: str, sort_order: int) -> int:
        stmt = (
            update(Tool)
            .where(Tool.id == tool_id)
            .values(sort_order=sort_order, updated_at=datetime.utcnow())
        )
        return (await self._session.execute(stmt)).rowcount or 0

    async def delete(self, tool_id: str) -> int:
        return (await self._session.execute(delete(Tool).where(Tool.id == tool_id))).rowcount or 0


# --- Module Notes -----------------------------------------------------------
# created_at breaks ties left behind by duplicate sort orders, as for categories.
