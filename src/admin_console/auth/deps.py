"""
admin_console.auth.deps

FastAPI dependency functions for authentication and authorization.

Responsibilities:
- Turn a bearer token into a request-scoped `JwtSessionProvider` and `Identity`.
- Build the request's retrying data client and admin directory.
- Put an `AuthorizationGate` in front of protected routes via `require_admin`.
"""

from __future__ import annotations

from datetime import timedelta

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from starlette.status import HTTP_401_UNAUTHORIZED, HTTP_403_FORBIDDEN

from admin_console.api.deps import sessionmaker_from_app, settings_dep
from admin_console.auth.gate import AuthorizationGate, RecordingNavigator
from admin_console.auth.jwt import JwtConfig
from admin_console.auth.models import AdminRole, AuthorizationDecision, Identity
from admin_console.auth.roles import parse_roles
from admin_console.auth.session import JwtSessionProvider
from admin_console.data.retry import RetryingDataClient
from admin_console.errors import SessionInvalid
from admin_console.settings import Settings
from admin_console.stores.admins import AdminDirectory, SqlAdminDirectory

_bearer = HTTPBearer(auto_error=False)


def get_session_provider(
    request: Request,
    creds: HTTPAuthorizationCredentials | None = Depends(_bearer),
    settings: Settings = Depends(settings_dep),
) -> JwtSessionProvider:
    provider = JwtSessionProvider(
        cfg=JwtConfig.from_settings(settings),
        token=creds.credentials if creds is not None else None,
        ttl=timedelta(minutes=settings.session_ttl_minutes),
        refresh_grace=timedelta(seconds=settings.session_refresh_grace_seconds),
    )
    # SessionRefreshMiddleware reads this back to return a refreshed token.
    request.state.sessions = provider
    return provider


async def get_identity(
    sessions: JwtSessionProvider = Depends(get_session_provider),
    settings: Settings = Depends(settings_dep),
) -> Identity | None:
    try:
        # Near-expiry sessions are re-minted up front; the middleware returns the new token.
        await sessions.refresh_if_expiring(
            timedelta(seconds=settings.session_refresh_window_seconds)
        )
        session = await sessions.get_session()
    except SessionInvalid:
        return None
    return session.identity if session is not None else None


def get_data_client(
    sessions: JwtSessionProvider = Depends(get_session_provider),
    settings: Settings = Depends(settings_dep),
) -> RetryingDataClient:
    return RetryingDataClient(sessions=sessions, retry_delay=settings.retry_delay_seconds)


def get_admin_directory(
    session_factory: async_sessionmaker[AsyncSession] = Depends(sessionmaker_from_app),
    client: RetryingDataClient = Depends(get_data_client),
) -> AdminDirectory:
    return SqlAdminDirectory(session_factory, client=client)


def require_admin(*roles: str | AdminRole, admin: bool = True):
    """
    Dependency factory: resolve an AuthorizationGate for the request.

    - UNAUTHENTICATED -> 401, `x-redirect-to` = sign-in path
    - UNAUTHORIZED    -> 403, `x-redirect-to` = access-denied path
    An empty `roles` accepts any admin role.
    """

    allowed = parse_roles(roles)

    async def _dep(
        identity: Identity | None = Depends(get_identity),
        sessions: JwtSessionProvider = Depends(get_session_provider),
        directory: AdminDirectory = Depends(get_admin_directory),
        settings: Settings = Depends(settings_dep),
    ) -> AuthorizationGate:
        navigator = RecordingNavigator()
        gate = AuthorizationGate(
            sessions=sessions,
            directory=directory,
            navigator=navigator,
            sign_in_path=settings.sign_in_path,
            access_denied_path=settings.access_denied_path,
        )
        try:
            decision = await gate.evaluate(identity, admin, allowed)
        finally:
            # One activation per request; nothing may resolve after the request is done.
            gate.close()

        if decision is AuthorizationDecision.unauthenticated:
            raise HTTPException(
                status_code=HTTP_401_UNAUTHORIZED,
                detail="Sign-in required",
                headers={"WWW-Authenticate": "Bearer", "x-redirect-to": navigator.last or ""},
            )
        if decision is AuthorizationDecision.unauthorized:
            raise HTTPException(
                status_code=HTTP_403_FORBIDDEN,
                detail="Insufficient role",
                headers={"x-redirect-to": navigator.last or ""},
            )
        return gate

    return _dep


# --- Module Notes -----------------------------------------------------------
# Route policy: reads accept any admin role; writes require super_admin or
# content_admin (see the routers).
