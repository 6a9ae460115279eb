"""
admin_console.auth

Authentication/authorization package.

Responsibilities:
- Session tokens and the session provider boundary.
- Pure role evaluation and the per-view authorization gate.
- FastAPI dependencies that put the gate in front of protected routes.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Admin roles come from the admin directory, never from token claims.
