"""
admin_console.auth.session

Session provider boundary and its JWT-backed implementation.

Responsibilities:
- Define the `SessionProvider` protocol consumed by the gate and the retrying client.
- Hold a session as a short-lived JWT; refresh re-mints it for the same identity.
- Proactively refresh sessions that are about to expire.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Protocol

from admin_console.auth.jwt import JwtConfig, JwtValidationError, decode_and_validate, issue_token
from admin_console.auth.models import Identity, Session
from admin_console.errors import SessionInvalid
from admin_console.observability.logging import get_logger

log = get_logger(__name__)


class SessionProvider(Protocol):
    async def get_session(self) -> Session | None: ...

    async def refresh_session(self) -> None: ...


class JwtSessionProvider:
    """
    Session provider over a bearer token.

    `get_session` returns None when signed out and raises `SessionInvalid` when the
    held token does not validate (bad signature, expired, wrong audience...).
    """

    def __init__(
        self,
        *,
        cfg: JwtConfig,
        token: str | None = None,
        ttl: timedelta = timedelta(hours=1),
        refresh_grace: timedelta = timedelta(minutes=5),
    ) -> None:
        self._cfg = cfg
        self._token = token
        self._ttl = ttl
        # How long after expiry a token may still be exchanged for a fresh one.
        self._refresh_grace = refresh_grace
        self.refreshed = False

    @property
    def token(self) -> str | None:
        return self._token

    def sign_in(self, identity: Identity) -> Session:
        self._token = issue_token(
            cfg=self._cfg, subject=identity.id, email=identity.email, ttl=self._ttl
        )
        return self._decode(self._token)

    def sign_out(self) -> None:
        self._token = None

    async def get_session(self) -> Session | None:
        if not self._token:
            return None
        return self._decode(self._token)

    async def refresh_session(self) -> None:
        if not self._token:
            raise SessionInvalid("No session to refresh")
        # Expired-session rejections are the main reason to refresh, so accept a
        # recently expired token here (signature and claims still verified).
        session = self._decode(self._token, leeway=self._refresh_grace)
        self._token = issue_token(
            cfg=self._cfg,
            subject=session.identity.id,
            email=session.identity.email,
            ttl=self._ttl,
        )
        self.refreshed = True
        log.info("session_refreshed", subject=session.identity.id)

    async def refresh_if_expiring(self, window: timedelta = timedelta(minutes=5)) -> bool:
        # Proactive path: live sessions only. Recently expired ones are refreshed on retry.
        session = await self.get_session()
        if session is None or not session.expires_within(window.total_seconds()):
            return False
        await self.refresh_session()
        return True

    def _decode(self, token: str, leeway: timedelta = timedelta(0)) -> Session:
        try:
            payload = decode_and_validate(cfg=self._cfg, token=token, leeway=leeway)
        except JwtValidationError as e:
            raise SessionInvalid(f"Invalid session: {e}") from e
        identity = Identity(id=str(payload["sub"]), email=str(payload.get("email", "")))
        return Session(
            token=token,
            identity=identity,
            expires_at=datetime.fromtimestamp(int(payload["exp"]), tz=UTC),
        )


# --- Module Notes -----------------------------------------------------------
# The provider's lifecycle belongs to whoever composes the application (request
# scope in the HTTP layer); the core only ever sees the protocol.
