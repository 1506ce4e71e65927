"""Client fingerprint used to bind a session to the device that created it."""
import hashlib

from starlette.requests import HTTPConnection


def fingerprint(user_agent: str | None, client_address: str | None) -> str:
    """SHA-256 hex digest of ``user_agent|client_address``.

    Coarse binding only: collisions between unrelated clients are acceptable,
    the session token is the actual secret.
    """
    raw = f"{user_agent or ''}|{client_address or ''}"
    return hashlib.sha256(raw.encode("utf-8")).hexdigest()


def client_address(conn: HTTPConnection) -> str:
    return conn.client.host if conn.client else ""


def request_fingerprint(conn: HTTPConnection) -> str:
    """Fingerprint of an incoming request."""
    return fingerprint(conn.headers.get("user-agent"), client_address(conn))
