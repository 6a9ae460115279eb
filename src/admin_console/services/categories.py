"""
admin_console.services.categories

Category tree service (console-facing operations).

Responsibilities:
- Read the tree, create/update/delete nodes; every remote call goes through the
  retrying client.
- Place new nodes at the end of their sibling group.
- Route all `sort_order` changes through `HierarchicalReorder` (reorder, and the
  normalize pass that follows a delete).
"""

from __future__ import annotations

from collections.abc import Callable, Iterable

from admin_console.data.retry import RetryingDataClient
from admin_console.observability.logging import get_logger
from admin_console.ordering.arena import group_tree, move
from admin_console.ordering.models import OrderedNode
from admin_console.ordering.reorder import HierarchicalReorder, OrderedView
from admin_console.stores.categories import CategoryStore

log = get_logger(__name__)


class CategoryService:
    def __init__(
        self,
        *,
        store: CategoryStore,
        client: RetryingDataClient,
        view: OrderedView | None = None,
        notify: Callable[[str], None] | None = None,
    ) -> None:
        self._store = store
        self._client = client
        self.reorderer = HierarchicalReorder(
            store=store, client=client, view=view, notify=notify, label="categories"
        )

    @property
    def view(self) -> OrderedView:
        return self.reorderer.view

    async def refresh(self) -> tuple[OrderedNode, ...]:
        nodes = await self._client.execute(self._store.list_tree)
        self.view.replace(nodes)
        return self.view.nodes

    async def tree(self) -> list[tuple[OrderedNode, list[OrderedNode]]]:
        return group_tree(await self.refresh())

    async def get(self, node_id: str) -> OrderedNode | None:
        return await self._client.execute(lambda: self._store.get(node_id))

    async def create(
        self,
        *,
        name: str,
        description: str | None = None,
        parent_id: str | None = None,
    ) -> OrderedNode:
        async def _create() -> OrderedNode:
            sort_order = await self._store.next_sort_order(parent_id)
            return await self._store.create(
                name=name, description=description, parent_id=parent_id, sort_order=sort_order
            )

        node = await self._client.execute(_create)
        log.info("category_created", id=node.id, parent_id=parent_id, sort_order=node.sort_order)
        return node

    async def update(
        self,
        node_id: str,
        *,
        name: str | None = None,
        description: str | None = None,
    ) -> OrderedNode:
        return await self._client.execute(
            lambda: self._store.update_details(node_id, name=name, description=description)
        )

    async def delete(self, node_id: str) -> bool:
        """
        Delete a node (a category takes its subcategories with it), then close the
        gap in the remaining sibling orders. Returns the normalize outcome.
        """

        node = await self._client.execute(lambda: self._store.delete(node_id))
        log.info("category_deleted", id=node.id, parent_id=node.parent_id)
        return await self.reorderer.normalize()

    async def reorder(self, arrangement: Iterable[OrderedNode]) -> bool:
        return await self.reorderer.reorder(arrangement)

    async def move(self, node_id: str, to_index: int) -> bool:
        # Drag-and-drop entry point: move within the sibling group of the current view.
        return await self.reorder(move(self.view.nodes, node_id, to_index))

    async def normalize(self) -> bool:
        return await self.reorderer.normalize()


# --- Module Notes -----------------------------------------------------------
# `update` has no sort_order parameter; ordering changes only flow
# through the reorderer so sibling runs stay contiguous.
