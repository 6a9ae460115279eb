"""
admin_console.ordering

Ordered-resource package.

Responsibilities:
- Node/plan types for two-level ordered forests.
- Arena projection into sibling groups.
- Optimistic, sequential, rollback-capable reordering.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# `reorder.HierarchicalReorder` is the only code path that writes `sort_order`.
