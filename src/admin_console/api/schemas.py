"""
admin_console.api.schemas

Request/response models shared by the ordered-resource routers.

Responsibilities:
- Wire shapes for nodes and reorder requests.
- Conversion between wire shapes and `OrderedNode`.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from admin_console.ordering.models import OrderedNode


class NodeOut(BaseModel):
    id: str
    name: str
    sort_order: int
    parent_id: str | None = None
    attrs: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_node(cls, node: OrderedNode) -> NodeOut:
        return cls(
            id=node.id,
            name=node.name,
            sort_order=node.sort_order,
            parent_id=node.parent_id,
            attrs=dict(node.attrs),
        )


class OrderItem(BaseModel):
    id: str = Field(min_length=1)
    parent_id: str | None = None


class ReorderRequest(BaseModel):
    # Sibling order is the order of items in this list.
    nodes: list[OrderItem] = Field(default_factory=list)

    def arrangement(self) -> list[OrderedNode]:
        return [OrderedNode(id=item.id, parent_id=item.parent_id) for item in self.nodes]


class MoveRequest(BaseModel):
    to_index: int = Field(ge=0)


class ReorderResponse(BaseModel):
    ok: bool
    message: str | None = None
    nodes: list[NodeOut] = Field(default_factory=list)


# --- Module Notes -----------------------------------------------------------
# Clients never send sort_order values: positions are derived from list order.
