"""Main module for the LTC tracker service."""
import asyncio
import logging
import subprocess
import sys
from contextlib import asynccontextmanager, suppress
from pathlib import Path

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException

from ltc_tracker import __version__
from ltc_tracker.config import Settings
from ltc_tracker.container import Container, init_container
from ltc_tracker.errors import (AlreadyLoggedIn, Internal, LoginRequired,
                                MalformedInput, TrackerError)
from ltc_tracker.routers import (accounts_router, auth_router,
                                 daily_stats_router, pages_router)
from ltc_tracker.schemas import ErrorBody
from ltc_tracker.security.gateway import AuthGatewayMiddleware

logger = logging.getLogger(__name__)

_HTTP_CODES = {
    400: "malformed_input",
    401: "not_authenticated",
    403: "not_authorized",
    404: "not_found",
    405: "method_not_allowed",
    409: "conflict",
    502: "upstream_error",
    504: "upstream_timeout",
}


async def reap_sessions_forever(container: Container, interval: float) -> None:
    """Purge expired sessions every ``interval`` seconds until cancelled."""
    store = container.session_store()
    while True:
        await asyncio.sleep(interval)
        try:
            await run_in_threadpool(store.purge_expired)
        except Exception as exc:  # pylint: disable=broad-except
            logger.warning("Session reaper failed: %s", exc)


@asynccontextmanager
async def lifespan(fastapi_app: FastAPI):
    """Create tables and start the session reaper; close resources on shutdown."""
    container: Container = fastapi_app.state.container
    settings: Settings = fastapi_app.state.settings
    container.database().init()

    reaper = None
    if settings.session_reap_interval > 0:
        reaper = asyncio.create_task(
            reap_sessions_forever(container, settings.session_reap_interval)
        )

    yield

    if reaper is not None:
        reaper.cancel()
        with suppress(asyncio.CancelledError):
            await reaper

    # Close provider resources (httpx clients)
    for provider in (container.price_provider(), container.address_provider()):
        try:
            await provider.close()
        except Exception as exc:  # pylint: disable=broad-except
            logger.warning("Error closing provider %s: %s", type(provider).__name__, exc)
    container.database().dispose()


def _error_response(status_code: int, message: str, code: str, details=None) -> JSONResponse:
    body = ErrorBody(error=message, code=code, details=details)
    return JSONResponse(body.model_dump(exclude_none=True), status_code=status_code)


def register_exception_handlers(app: FastAPI) -> None:
    """Render every failure as ``{"error", "code"}``; redirects for page auth."""

    @app.exception_handler(TrackerError)
    async def tracker_error_handler(request: Request, exc: TrackerError) -> JSONResponse:
        if isinstance(exc, Internal):
            logger.error("Internal error on %s %s: %s", request.method, request.url.path, exc)
            return _error_response(500, Internal.default_message, Internal.code)
        return _error_response(exc.status_code, exc.message, exc.code)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        details = [
            {"loc": list(err.get("loc", ())), "msg": err.get("msg", "")}
            for err in exc.errors()
        ]
        return _error_response(
            400, "Invalid request", MalformedInput.code, details=details
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        code = _HTTP_CODES.get(exc.status_code, "error")
        return _error_response(exc.status_code, str(exc.detail), code)

    @app.exception_handler(LoginRequired)
    async def login_required_handler(request: Request, exc: LoginRequired) -> RedirectResponse:
        return RedirectResponse(
            request.app.state.settings.login_path,
            status_code=status.HTTP_303_SEE_OTHER,
        )

    @app.exception_handler(AlreadyLoggedIn)
    async def already_logged_in_handler(
        request: Request, exc: AlreadyLoggedIn
    ) -> RedirectResponse:
        return RedirectResponse(
            request.app.state.settings.home_path,
            status_code=status.HTTP_303_SEE_OTHER,
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return _error_response(500, Internal.default_message, Internal.code)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the FastAPI app with its own container and database handle."""
    settings = settings or Settings.from_env()
    fastapi_app = FastAPI(
        title="LTC Tracker",
        description="Session-authenticated tracking of LTC mining accounts and daily earnings",
        version=__version__,
        lifespan=lifespan,
    )
    fastapi_app.state.settings = settings
    fastapi_app.state.container = init_container(settings)

    fastapi_app.add_middleware(AuthGatewayMiddleware)
    register_exception_handlers(fastapi_app)

    fastapi_app.include_router(auth_router)
    fastapi_app.include_router(pages_router)
    fastapi_app.include_router(accounts_router)
    fastapi_app.include_router(daily_stats_router)

    @fastapi_app.get("/health")
    def health():
        """Return health check status."""
        return {"status": "ok"}

    return fastapi_app


def run():
    """Run the server (uvicorn). Use for `poetry run start`."""
    logging.basicConfig(level=logging.INFO)
    uvicorn.run("ltc_tracker.main:create_app", factory=True, host="127.0.0.1", port=8001)


def run_dev():
    """Run the development server with Postgres running via Docker."""
    logging.basicConfig(level=logging.DEBUG)
    project_root = Path(__file__).resolve().parent.parent.parent
    try:
        subprocess.run(
            ["docker", "compose", "up", "-d", "postgres"],
            cwd=project_root,
            capture_output=True,
            text=True,
            check=True,
        )
    except subprocess.CalledProcessError as e:
        print("Failed to start Postgres:", e.stderr or e.stdout, file=sys.stderr)
        sys.exit(1)
    uvicorn.run(
        "ltc_tracker.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
