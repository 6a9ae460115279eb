"""
admin_console.stores

Remote store boundary.

Responsibilities:
- ResourceStore / AdminDirectory protocols consumed by the core.
- SQLAlchemy-backed implementations that translate backend failures into the
  stable error taxonomy (`admin_console.errors`).
"""

# Package marker; stores are imported directly from submodules.


# --- Module Notes -----------------------------------------------------------
# This is where backend error codes are interpreted; nothing above this layer
# should inspect SQLSTATEs or driver exceptions.
