"""
admin_console.services.tools

Tool list service (console-facing operations).

Responsibilities:
- List, create, update and delete tools; every remote call goes through the
  retrying client.
- Append new tools at the end of the list.
- Route all `sort_order` changes through a flat `HierarchicalReorder`.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable

from admin_console.data.retry import RetryingDataClient
from admin_console.observability.logging import get_logger
from admin_console.ordering.arena import move
from admin_console.ordering.models import OrderedNode
from admin_console.ordering.reorder import HierarchicalReorder, OrderedView
from admin_console.stores.tools import ToolStore

log = get_logger(__name__)


class ToolService:
    def __init__(
        self,
        *,
        store: ToolStore,
        client: RetryingDataClient,
        view: OrderedView | None = None,
        notify: Callable[[str], None] | None = None,
    ) -> None:
        self._store = store
        self._client = client
        self.reorderer = HierarchicalReorder(
            store=store, client=client, view=view, notify=notify, label="tools", nested=False
        )

    @property
    def view(self) -> OrderedView:
        return self.reorderer.view

    async def list_ordered(self) -> tuple[OrderedNode, ...]:
        self.view.replace(await self._client.execute(self._store.list_ordered))
        return self.view.nodes

    async def get(self, tool_id: str) -> OrderedNode | None:
        return await self._client.execute(lambda: self._store.get(tool_id))

    async def create(
        self,
        *,
        name: str,
        image_url: str | None = None,
        website_link: str | None = None,
    ) -> OrderedNode:
        async def _create() -> OrderedNode:
            sort_order = await self._store.next_sort_order()
            return await self._store.create(
                name=name, sort_order=sort_order, image_url=image_url, website_link=website_link
            )

        tool = await self._client.execute(_create)
        log.info("tool_created", id=tool.id, sort_order=tool.sort_order)
        return tool

    async def update(
        self,
        tool_id: str,
        *,
        name: str | None = None,
        image_url: str | None = None,
        website_link: str | None = None,
    ) -> OrderedNode:
        return await self._client.execute(
            lambda: self._store.update_details(
                tool_id, name=name, image_url=image_url, website_link=website_link
            )
        )

    async def delete(self, tool_id: str) -> bool:
        await self._client.execute(lambda: self._store.delete(tool_id))
        log.info("tool_deleted", id=tool_id)
        return await self.reorderer.normalize()

    async def reorder(self, arrangement: Iterable[OrderedNode]) -> bool:
        return await self.reorderer.reorder(arrangement)

    async def move(self, tool_id: str, to_index: int) -> bool:
        return await self.reorder(move(self.view.nodes, tool_id, to_index))

    async def normalize(self) -> bool:
        return await self.reorderer.normalize()


# --- Module Notes -----------------------------------------------------------
# Tools have no children, so the reorderer never loads a second level.
