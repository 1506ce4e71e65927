"""Login, logout, signup and profile routes."""
import logging

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse, RedirectResponse

from ltc_tracker.deps import (ApiIdentity, Identities, OptionalIdentity,
                              Sessions)
from ltc_tracker.errors import AlreadyLoggedIn, NotAuthenticated
from ltc_tracker.schemas import (AuthResponse, ChangePasswordRequest,
                                 LoginRequest, SignupRequest,
                                 UpdateInfoRequest, UserOut)
from ltc_tracker.security.fingerprint import client_address, request_fingerprint
from ltc_tracker.routers.params import ERROR_RESPONSES
from ltc_tracker.security.gateway import (clear_session_cookie,
                                          set_session_cookie)

logger = logging.getLogger(__name__)
router = APIRouter(tags=["auth"], responses=ERROR_RESPONSES)


@router.get("/login")
def login_page(identity: OptionalIdentity) -> dict:
    """Login entry point. Authenticated callers are sent to the dashboard."""
    if identity is not None:
        raise AlreadyLoggedIn()
    return {"page": "login", "error": None}


@router.post("/login", response_model=AuthResponse)
def login(
    body: LoginRequest,
    request: Request,
    identities: Identities,
    sessions: Sessions,
) -> JSONResponse:
    """Check credentials, open a server-side session and set the cookie."""
    identity = identities.authenticate(body.email, body.password)
    if identity is None:
        logger.info("Login failed for %s", body.email.strip().lower())
        raise NotAuthenticated("Invalid credentials")

    token = sessions.create(
        identity.id,
        request_fingerprint(request),
        user_agent=request.headers.get("user-agent"),
        ip_address=client_address(request),
    )
    payload = AuthResponse(
        message="Logged in",
        user=UserOut(**identity.model_dump()),
    )
    response = JSONResponse(payload.model_dump(mode="json", by_alias=True))
    set_session_cookie(request, response, token)
    request.state.identity = identity
    logger.info("Login succeeded for user_id=%s", identity.id)
    return response


@router.post("/logout")
def logout(request: Request, sessions: Sessions) -> RedirectResponse:
    """Destroy the session (if any), clear the cookie and go to /login."""
    settings = request.app.state.settings
    sessions.destroy(request.cookies.get(settings.session_cookie_name))
    response = RedirectResponse(settings.login_path, status_code=status.HTTP_303_SEE_OTHER)
    clear_session_cookie(request, response)
    request.state.identity = None
    return response


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def signup(body: SignupRequest, identities: Identities) -> AuthResponse:
    identity = identities.create_user(body.email, body.password, body.display_name)
    return AuthResponse(message="Account created", user=UserOut(**identity.model_dump()))


@router.get("/api/user/me", response_model=UserOut)
def me(identity: ApiIdentity) -> UserOut:
    return UserOut(**identity.model_dump())


@router.patch("/api/user/update-info", response_model=AuthResponse)
def update_info(
    body: UpdateInfoRequest,
    request: Request,
    identity: ApiIdentity,
    identities: Identities,
) -> AuthResponse:
    updated = identities.update_info(identity.id, body.display_name, body.email)
    request.state.identity = updated
    return AuthResponse(
        message="Profile updated successfully",
        user=UserOut(**updated.model_dump()),
    )


@router.patch("/api/user/change-password", response_model=AuthResponse)
def change_password(
    body: ChangePasswordRequest,
    identity: ApiIdentity,
    identities: Identities,
) -> AuthResponse:
    identities.change_password(
        identity.id,
        body.current_password,
        body.new_password,
        body.confirm_password,
    )
    return AuthResponse(message="Password changed successfully")
