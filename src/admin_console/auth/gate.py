"""
admin_console.auth.gate

Authorization gate for protected views.

Responsibilities:
- Resolve session validity and admin-role membership into an `AuthorizationDecision`.
- Enforce an explicit transition table (every terminal state is entered from RESOLVING).
- Drop stale resolutions when a newer activation supersedes the current one or the
  gate is closed.
- Fire the navigation side effect (sign-in / access-denied) for applied transitions only.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Protocol

from admin_console.auth.models import AdminRecord, AdminRole, AuthorizationDecision, Identity
from admin_console.auth.roles import is_allowed
from admin_console.auth.session import SessionProvider
from admin_console.errors import InvalidTransition, SessionInvalid
from admin_console.observability.logging import get_logger
from admin_console.stores.admins import AdminDirectory

log = get_logger(__name__)

D = AuthorizationDecision

# Allowed (from, to) pairs. Starting a new cycle resets to RESOLVING outside this table.
TRANSITIONS: frozenset[tuple[AuthorizationDecision, AuthorizationDecision]] = frozenset(
    {
        (D.resolving, D.unauthenticated),
        (D.resolving, D.unauthorized),
        (D.resolving, D.authorized),
    }
)


class Navigator(Protocol):
    def navigate(self, path: str) -> None: ...


class RecordingNavigator:
    """
    Navigator that remembers redirects instead of performing them.
    The HTTP layer turns `last` into a response header.
    """

    def __init__(self) -> None:
        self.history: list[str] = []

    @property
    def last(self) -> str | None:
        return self.history[-1] if self.history else None

    def navigate(self, path: str) -> None:
        self.history.append(path)


@dataclass(frozen=True, slots=True)
class GateInputs:
    identity: Identity | None
    require_admin: bool
    allowed_roles: frozenset[AdminRole]


Listener = Callable[[AuthorizationDecision], None]


class AuthorizationGate:
    def __init__(
        self,
        *,
        sessions: SessionProvider,
        directory: AdminDirectory,
        navigator: Navigator,
        sign_in_path: str = "/auth/login",
        access_denied_path: str = "/unauthorized",
    ) -> None:
        self._sessions = sessions
        self._directory = directory
        self._navigator = navigator
        self._sign_in_path = sign_in_path
        self._access_denied_path = access_denied_path

        self._state = D.resolving
        self._admin_record: AdminRecord | None = None
        self._inputs: GateInputs | None = None
        self._generation = 0
        self._closed = False
        self._listeners: list[Listener] = []

    @property
    def state(self) -> AuthorizationDecision:
        return self._state

    @property
    def admin_record(self) -> AdminRecord | None:
        return self._admin_record

    @property
    def closed(self) -> bool:
        return self._closed

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def close(self) -> None:
        # Bumping the generation invalidates every in-flight resolution.
        self._closed = True
        self._generation += 1
        self._listeners.clear()

    async def update(
        self,
        identity: Identity | None,
        require_admin: bool = False,
        allowed_roles: Iterable[AdminRole] = (),
    ) -> AuthorizationDecision:
        inputs = GateInputs(identity, require_admin, frozenset(allowed_roles))
        if inputs == self._inputs and self._state.is_terminal:
            return self._state
        return await self.evaluate(identity, require_admin, allowed_roles)

    async def evaluate(
        self,
        identity: Identity | None,
        require_admin: bool = False,
        allowed_roles: Iterable[AdminRole] = (),
    ) -> AuthorizationDecision:
        """
        Start a fresh resolution cycle, superseding any in-flight one.

        Returns the decision this cycle resolved to. A superseded cycle returns its
        decision without applying it (no state change, no navigation).
        """

        if self._closed:
            raise InvalidTransition("Gate is closed")

        inputs = GateInputs(identity, require_admin, frozenset(allowed_roles))
        self._generation += 1
        generation = self._generation
        self._inputs = inputs
        self._admin_record = None
        self._set_state(D.resolving)

        decision, record = await self._resolve(inputs)

        if generation != self._generation:
            log.info("gate_stale_resolution", decision=str(decision), closed=self._closed)
            return decision

        self._admin_record = record
        self._transition(decision)
        return decision

    async def _resolve(
        self, inputs: GateInputs
    ) -> tuple[AuthorizationDecision, AdminRecord | None]:
        if inputs.identity is None:
            return D.unauthenticated, None

        try:
            session = await self._sessions.get_session()
        except SessionInvalid as e:
            log.info("gate_session_invalid", error=str(e))
            return D.unauthenticated, None
        except Exception as e:
            # A provider failure is an unverified session, never an error out of the gate.
            log.warning("gate_session_error", error=str(e))
            return D.unauthenticated, None
        if session is None or not session.is_valid():
            return D.unauthenticated, None

        if not inputs.require_admin:
            return D.authorized, None

        try:
            record = await self._directory.lookup(inputs.identity.id)
        except Exception as e:
            # Fail closed: directory errors are indistinguishable from "not an admin".
            log.warning("gate_directory_error", identity=inputs.identity.id, error=str(e))
            record = None

        if record is None:
            return D.unauthorized, None
        if not is_allowed(record, inputs.require_admin, inputs.allowed_roles):
            return D.unauthorized, record
        return D.authorized, record

    def _transition(self, target: AuthorizationDecision) -> None:
        if (self._state, target) not in TRANSITIONS:
            raise InvalidTransition(f"{self._state} -> {target}")
        self._set_state(target)
        log.info("gate_transition", decision=str(target))

        if target is D.unauthenticated:
            self._navigator.navigate(self._sign_in_path)
        elif target is D.unauthorized:
            self._navigator.navigate(self._access_denied_path)

    def _set_state(self, state: AuthorizationDecision) -> None:
        changed = state is not self._state
        self._state = state
        if changed:
            for listener in list(self._listeners):
                listener(state)


# --- Module Notes -----------------------------------------------------------
# One gate instance per protected-view activation. The HTTP layer creates one per
# request (see `auth.deps.require_admin`) and closes it when the request finishes.
