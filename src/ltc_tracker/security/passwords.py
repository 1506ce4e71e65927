"""Password hashing (argon2id)."""
from argon2 import PasswordHasher as _Argon2Hasher
from argon2 import Type
from argon2.exceptions import InvalidHashError, VerificationError

MIN_PASSWORD_LENGTH = 6


class PasswordHasher:
    """Thin wrapper exposing hash()/verify() over argon2-cffi."""

    def __init__(self) -> None:
        self._hasher = _Argon2Hasher(type=Type.ID)

    def hash(self, secret: str) -> str:
        return self._hasher.hash(secret)

    def verify(self, secret: str, digest: str) -> bool:
        """Return True when ``secret`` matches ``digest``; malformed digests never match."""
        try:
            return self._hasher.verify(digest, secret)
        except (VerificationError, InvalidHashError):
            return False
