"""
admin_console.auth.models

Auth domain models.

Responsibilities:
- Define the authenticated identity (`Identity`) and its `Session`.
- Define admin directory records and the authorization decision states.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import UTC, datetime


class AdminRole(enum.StrEnum):
    # Values are stored in the admins table; treat as stable API contract.
    super_admin = "super_admin"
    content_admin = "content_admin"
    moderator = "moderator"


class AuthorizationDecision(enum.StrEnum):
    resolving = "RESOLVING"
    unauthenticated = "UNAUTHENTICATED"
    unauthorized = "UNAUTHORIZED"
    authorized = "AUTHORIZED"

    @property
    def is_terminal(self) -> bool:
        return self is not AuthorizationDecision.resolving


@dataclass(frozen=True, slots=True)
class Identity:
    """
    Authenticated principal supplied by the session provider.
    """

    id: str
    email: str = ""


@dataclass(frozen=True, slots=True)
class Session:
    token: str
    identity: Identity
    expires_at: datetime

    def is_valid(self, now: datetime | None = None) -> bool:
        return (now or datetime.now(tz=UTC)) < self.expires_at

    def expires_within(self, seconds: float, now: datetime | None = None) -> bool:
        remaining = (self.expires_at - (now or datetime.now(tz=UTC))).total_seconds()
        return 0 < remaining < seconds


@dataclass(frozen=True, slots=True)
class AdminRecord:
    """
    Admin directory entry. Absence of a record means "not an administrator".
    """

    id: str
    role: AdminRole


# --- Module Notes -----------------------------------------------------------
# Decisions are transient: recomputed per gate activation and never persisted.
