"""
admin_console.services

Service-layer package.

Responsibilities:
- Console-facing operations over ordered resources (categories, tools).
- Compose stores, the retrying client and the reorderer.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Services should be pure Python and easily testable with fake stores/sessions.
