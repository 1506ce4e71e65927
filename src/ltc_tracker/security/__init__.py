"""Authentication and authorization: fingerprints, sessions, ownership."""
from ltc_tracker.security.fingerprint import fingerprint, request_fingerprint
from ltc_tracker.security.ownership import Action, OwnershipGuard
from ltc_tracker.security.passwords import PasswordHasher
from ltc_tracker.security.sessions import SessionStore

__all__ = [
    "Action",
    "OwnershipGuard",
    "PasswordHasher",
    "SessionStore",
    "fingerprint",
    "request_fingerprint",
]
