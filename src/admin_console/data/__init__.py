"""
admin_console.data

Data-access policy package.

Responsibilities:
- Wrap remote reads/writes/deletes with the session-refresh retry policy.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Stores depend on this package; it must not depend on stores.
