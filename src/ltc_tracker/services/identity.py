"""Identity store: user records and credential checks."""
import logging

from sqlalchemy.exc import IntegrityError
from sqlmodel import select

from ltc_tracker.db import Database, Role, User
from ltc_tracker.errors import Conflict, MalformedInput, NotFound
from ltc_tracker.schemas.auth import Identity
from ltc_tracker.security.passwords import MIN_PASSWORD_LENGTH, PasswordHasher

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


class IdentityStore:
    """Create, authenticate and update users."""

    def __init__(self, database: Database, hasher: PasswordHasher) -> None:
        self._db = database
        self._hasher = hasher

    def create_user(
        self,
        email: str,
        password: str,
        display_name: str,
        role: Role = Role.USER,
    ) -> Identity:
        """Register a user. Raises Conflict when the email is taken."""
        email = normalize_email(email)
        user = User(
            email=email,
            hashed_password=self._hasher.hash(password),
            display_name=display_name.strip(),
            role=role,
        )
        try:
            with self._db.session() as db:
                if db.exec(select(User).where(User.email == email)).first():
                    raise Conflict("Email already in use")
                db.add(user)
                db.flush()
                identity = Identity.from_user(user)
        except IntegrityError as exc:
            raise Conflict("Email already in use") from exc
        logger.info("User created: user_id=%s", identity.id)
        return identity

    def authenticate(self, email: str, password: str) -> Identity | None:
        """Return the identity for valid credentials, otherwise None."""
        with self._db.session() as db:
            user = db.exec(
                select(User).where(User.email == normalize_email(email))
            ).first()
        if user is None or not self._hasher.verify(password, user.hashed_password):
            return None
        return Identity.from_user(user)

    def get_identity(self, user_id: int) -> Identity | None:
        with self._db.session() as db:
            user = db.get(User, user_id)
        return Identity.from_user(user) if user else None

    def update_info(self, user_id: int, display_name: str, email: str) -> Identity:
        """Change display name and email; the new email must be unused."""
        email = normalize_email(email)
        try:
            with self._db.session() as db:
                user = db.get(User, user_id)
                if user is None:
                    raise NotFound("User not found")
                if email != user.email:
                    taken = db.exec(select(User).where(User.email == email)).first()
                    if taken:
                        raise Conflict("Email already in use")
                user.email = email
                user.display_name = display_name.strip()
                db.add(user)
                db.flush()
                identity = Identity.from_user(user)
        except IntegrityError as exc:
            raise Conflict("Email already in use") from exc
        return identity

    def change_password(
        self,
        user_id: int,
        current_password: str,
        new_password: str,
        confirm_password: str,
    ) -> None:
        if new_password != confirm_password:
            raise MalformedInput("Passwords do not match")
        if len(new_password) < MIN_PASSWORD_LENGTH:
            raise MalformedInput(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
            )
        with self._db.session() as db:
            user = db.get(User, user_id)
            if user is None:
                raise NotFound("User not found")
            if not self._hasher.verify(current_password, user.hashed_password):
                raise MalformedInput("Current password is incorrect")
            user.hashed_password = self._hasher.hash(new_password)
            db.add(user)
        logger.info("Password changed for user_id=%s", user_id)
