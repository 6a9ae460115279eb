"""
admin_console.observability

Observability package.

Responsibilities:
- Structured logging configuration.
- Request context propagation for consistent log enrichment.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Core modules (gate, retry, reorder) only log; exporters stay outside the core.
