"""
admin_console.ordering.reorder

Optimistic hierarchical reordering against a fallible remote store.

Responsibilities:
- Verify: the arrangement must be a full rearrangement of the stored tree
  (same ids, same parents), checked against one read of the canonical state.
- Stage: apply the new arrangement to the local view before any remote write.
- Commit: persist the plan one write at a time (each write completes before the
  next is issued), stopping at the first failure.
- Reconcile: on failure, reload the canonical arrangement, discard the optimistic
  state and emit a single user-visible message.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable

from admin_console.data.retry import RetryingDataClient
from admin_console.errors import ReorderPartialFailure
from admin_console.observability.logging import get_logger
from admin_console.ordering.arena import NodeArena
from admin_console.ordering.models import OrderedNode, ReorderPlan
from admin_console.stores.base import ResourceStore

log = get_logger(__name__)

ViewListener = Callable[[tuple[OrderedNode, ...]], None]


class OrderedView:
    """
    Local copy of an ordered resource as the console displays it.

    `stale` is set when the view could not be reconciled with the store.
    """

    def __init__(self, nodes: Iterable[OrderedNode] = ()) -> None:
        self._nodes: tuple[OrderedNode, ...] = tuple(nodes)
        self.stale = False
        self._listeners: list[ViewListener] = []

    @property
    def nodes(self) -> tuple[OrderedNode, ...]:
        return self._nodes

    @property
    def ids(self) -> list[str]:
        return [n.id for n in self._nodes]

    def replace(self, nodes: Iterable[OrderedNode]) -> None:
        self._nodes = tuple(nodes)
        self.stale = False
        for listener in list(self._listeners):
            listener(self._nodes)

    def subscribe(self, listener: ViewListener) -> Callable[[], None]:
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)


def _ignore(_: str) -> None:
    return None


class HierarchicalReorder:
    def __init__(
        self,
        *,
        store: ResourceStore,
        client: RetryingDataClient,
        view: OrderedView | None = None,
        notify: Callable[[str], None] | None = None,
        label: str = "items",
        nested: bool = True,
    ) -> None:
        self._store = store
        self._client = client
        self.view = view or OrderedView()
        self._notify = notify or _ignore
        self._label = label
        # Flat resources (tools) have no children to load.
        self._nested = nested
        self.last_error: str | None = None

    @property
    def failure_message(self) -> str:
        return f"Failed to reorder {self._label}. Please try again."

    def stage(self, arrangement: Iterable[OrderedNode]) -> ReorderPlan:
        arena = NodeArena(arrangement)
        self.view.replace(arena.renumbered())
        return arena.plan()

    async def commit(self, plan: ReorderPlan) -> None:
        for completed, entry in enumerate(plan):
            try:
                await self._client.execute(
                    lambda e=entry: self._store.update_sort_order(
                        e.id, e.sort_order, is_child=e.is_child
                    )
                )
            except Exception as e:
                raise ReorderPartialFailure(
                    node_id=entry.id,
                    sort_order=entry.sort_order,
                    completed=completed,
                    cause=e,
                ) from e

    async def load(self) -> list[OrderedNode]:
        top = await self._client.execute(lambda: self._store.list_ordered(None))
        nodes: list[OrderedNode] = []
        for node in top:
            nodes.append(node)
            if self._nested:
                nodes.extend(
                    await self._client.execute(lambda p=node.id: self._store.list_ordered(p))
                )
        return nodes

    async def reconcile(self) -> tuple[OrderedNode, ...]:
        self.view.replace(await self.load())
        return self.view.nodes

    async def reorder(self, arrangement: Iterable[OrderedNode]) -> bool:
        """
        Verify, stage, commit and (on failure) reconcile. Returns True iff every
        write of the plan succeeded.

        The arrangement must hold every stored node exactly once, each under its
        stored parent; anything else (malformed, partial, re-parented) raises
        ValueError before any local or remote change.
        """

        arrangement = list(arrangement)
        if not arrangement:
            return True

        arena = NodeArena(arrangement)
        arena.check_matches(await self.load())
        plan = self.stage(arena)
        self.last_error = None
        try:
            await self.commit(plan)
        except ReorderPartialFailure as failure:
            log.warning(
                "reorder_write_failed",
                resource=self._label,
                node_id=failure.node_id,
                sort_order=failure.sort_order,
                completed=failure.completed,
                planned=len(plan),
                error=str(failure.cause),
            )
            await self._rollback()
            self.last_error = self.failure_message
            self._notify(self.failure_message)
            return False

        log.info("reorder_committed", resource=self._label, writes=len(plan))
        return True

    async def normalize(self) -> bool:
        """
        Rewrite the canonical order as contiguous runs starting at 1, repairing
        duplicates or gaps left by deletes or external writers.
        """

        return await self.reorder(await self.load())

    async def _rollback(self) -> None:
        try:
            nodes = await self.reconcile()
        except Exception as e:
            # The optimistic state is known to be wrong; flag it rather than trust it.
            self.view.stale = True
            log.error("reorder_reload_failed", resource=self._label, error=str(e))
            return
        log.info("reorder_reconciled", resource=self._label, nodes=len(nodes))


# --- Module Notes -----------------------------------------------------------
# The plan is not diffed against the previous state: unchanged positions are
# written too. Write volume per reorder is small (one sibling forest).
