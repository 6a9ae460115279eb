"""
admin_console.ordering.models

Value types for ordered resources.

Responsibilities:
- `OrderedNode`: one row of an ordered resource (category, subcategory, tool).
- `PlanEntry` / `ReorderPlan`: the writes that realize a new arrangement.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any


@dataclass(frozen=True, slots=True)
class OrderedNode:
    id: str
    sort_order: int = 1
    parent_id: str | None = None
    name: str = field(default="", compare=False)
    created_at: datetime | None = field(default=None, compare=False)
    # Resource-specific display fields (description, image_url, ...).
    attrs: dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    @property
    def is_child(self) -> bool:
        return self.parent_id is not None

    def with_order(self, sort_order: int) -> OrderedNode:
        return replace(self, sort_order=sort_order)


@dataclass(frozen=True, slots=True)
class PlanEntry:
    id: str
    sort_order: int
    is_child: bool


ReorderPlan = tuple[PlanEntry, ...]


# --- Module Notes -----------------------------------------------------------
# `name`/`created_at` are display data; equality only considers identity and placement.
