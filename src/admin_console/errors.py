"""
admin_console.errors

Exception taxonomy shared by the authorization and data layers.

Responsibilities:
- Name the failure classes the core distinguishes (session, role, transient
  permission, hard backend, partial reorder).
- Keep backend-specific error codes out of callers: stores translate their
  native failures into these types at the boundary.
"""

from __future__ import annotations


class AdminConsoleError(Exception):
    pass


class SessionInvalid(AdminConsoleError):
    """No session, or the session failed validation."""


class RoleDenied(AdminConsoleError):
    """A valid session whose identity lacks the required admin role."""


class InvalidTransition(AdminConsoleError):
    pass


class DataStoreError(AdminConsoleError):
    """
    Base for failures raised at the ResourceStore boundary.

    `code` carries the backend code (SQLSTATE, PostgREST code, ...) when known.
    """

    def __init__(self, message: str, *, code: str | None = None) -> None:
        super().__init__(message)
        self.code = code


class TransientPermissionError(DataStoreError):
    """
    Rejection plausibly caused by a stale authorization context
    (row-level policy rejection, insufficient privilege, expired session).
    Recovered by one refresh-and-retry cycle.
    """


class HardBackendError(DataStoreError):
    """Validation, constraint or connectivity failure. Never retried."""


class NotFoundError(HardBackendError):
    pass


class ReorderPartialFailure(AdminConsoleError):
    """
    A write inside a reorder plan failed.

    Raised internally by the commit phase and converted into a rollback plus a
    single user-visible message; callers of `reorder` only see a boolean.
    """

    def __init__(
        self, *, node_id: str, sort_order: int, completed: int, cause: BaseException
    ) -> None:
        super().__init__(
            f"reorder write {completed + 1} failed for {node_id} (sort_order={sort_order})"
        )
        self.node_id = node_id
        self.sort_order = sort_order
        # Number of plan entries persisted before the failure.
        self.completed = completed
        self.cause = cause


# Codes that indicate the authorization context went stale rather than a real denial.
# 42501: insufficient_privilege (row-level security rejection)
# PGRST301: JWT expired / invalid, PGRST302: anonymous access disabled, PGRST303: JWT claims rejected
TRANSIENT_PERMISSION_CODES: frozenset[str] = frozenset({"42501", "PGRST301", "PGRST302", "PGRST303"})


def classify_backend_error(code: str | None, message: str) -> DataStoreError:
    """
    Map a backend error code onto the stable taxonomy.

    Classification is by code only; message text is carried along for logs.
    """

    if code is not None and code in TRANSIENT_PERMISSION_CODES:
        return TransientPermissionError(message, code=code)
    return HardBackendError(message, code=code)


# --- Module Notes -----------------------------------------------------------
# `SessionInvalid`/`RoleDenied` describe gate outcomes; the gate itself resolves to a
# decision state and only the HTTP layer turns those outcomes into responses.
