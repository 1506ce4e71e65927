"""Error taxonomy shared by stores, repositories and routers.

Each error carries the HTTP status and a machine-readable code; the
exception handlers in main.py render them as ``{"error", "code"}`` bodies.
"""


class TrackerError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code: int = 500
    code: str = "internal"
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class MalformedInput(TrackerError):
    """Missing or unparsable request fields."""

    status_code = 400
    code = "malformed_input"
    default_message = "Malformed input"


class NotAuthenticated(TrackerError):
    """No valid session is attached to the request."""

    status_code = 401
    code = "not_authenticated"
    default_message = "Unauthorized"


class NotAuthorized(TrackerError):
    """Valid session, but the action is not permitted."""

    status_code = 403
    code = "not_authorized"
    default_message = "Access denied"


class NotFound(TrackerError):
    """Resource is missing or not owned by the caller."""

    status_code = 404
    code = "not_found"
    default_message = "Not found"


class Conflict(TrackerError):
    """Uniqueness violation or invalid state transition."""

    status_code = 409
    code = "conflict"
    default_message = "Conflict"


class Internal(TrackerError):
    """Unexpected backend failure. The message is never sent to clients."""


class LoginRequired(Exception):
    """Raised by browsable routes to redirect anonymous traffic to the login page."""


class AlreadyLoggedIn(Exception):
    """Raised by the login page to send authenticated traffic to the home page."""
