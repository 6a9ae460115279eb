"""
admin_console.auth.middleware

Return refreshed session tokens to the caller.

Responsibilities:
- After the endpoint runs, expose a token re-minted by a refresh-and-retry cycle
  in the `x-session-token` response header.
"""

from __future__ import annotations

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

SESSION_TOKEN_HEADER = "x-session-token"


class SessionRefreshMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        response: Response = await call_next(request)
        # request.state is shared with the endpoint through the ASGI scope.
        sessions = getattr(request.state, "sessions", None)
        if sessions is not None and sessions.refreshed and sessions.token:
            response.headers[SESSION_TOKEN_HEADER] = sessions.token
        return response


# --- Module Notes -----------------------------------------------------------
# Clients replace their stored token when this header is present.
