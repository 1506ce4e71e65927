"""Auth gateway: resolve the session cookie to an identity once per request.

The middleware never rejects a request. It attaches ``request.state.identity``
(an Identity or None); routes choose how to enforce it through the
dependencies in deps.py (redirect for pages, 401 for the API).
"""
import logging

from starlette.concurrency import run_in_threadpool
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from ltc_tracker.config import Settings
from ltc_tracker.schemas.auth import Identity
from ltc_tracker.security.fingerprint import request_fingerprint
from ltc_tracker.security.sessions import SessionStore
from ltc_tracker.services.identity import IdentityStore

logger = logging.getLogger(__name__)


def set_session_cookie(request: Request, response: Response, token: str) -> None:
    """Attach the session cookie and tell the gateway not to clear it."""
    settings: Settings = request.app.state.settings
    response.set_cookie(
        settings.session_cookie_name,
        token,
        max_age=int(settings.session_ttl.total_seconds()),
        path="/",
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
    )
    request.state.session_cookie_written = True


def clear_session_cookie(request: Request, response: Response) -> None:
    settings: Settings = request.app.state.settings
    response.delete_cookie(
        settings.session_cookie_name,
        path="/",
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
    )
    request.state.session_cookie_written = True


def resolve_identity(
    sessions: SessionStore,
    identities: IdentityStore,
    token: str | None,
    fingerprint: str,
) -> Identity | None:
    """Token -> live session -> identity, or None at the first failure."""
    session = sessions.lookup(token, fingerprint)
    if session is None:
        return None
    return identities.get_identity(session.user_id)


class AuthGatewayMiddleware(BaseHTTPMiddleware):
    """Attach request.state.identity from the session cookie."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        container = request.app.state.container
        settings: Settings = request.app.state.settings
        token = request.cookies.get(settings.session_cookie_name)

        request.state.identity = None
        request.state.session_cookie_written = False
        if token:
            try:
                request.state.identity = await run_in_threadpool(
                    resolve_identity,
                    container.session_store(),
                    container.identities(),
                    token,
                    request_fingerprint(request),
                )
            except Exception:  # pylint: disable=broad-except
                # Anonymous on storage failure; the gateway never raises.
                logger.exception("Session lookup failed")

        response = await call_next(request)

        if token and request.state.identity is None and not request.state.session_cookie_written:
            clear_session_cookie(request, response)
        return response
