"""Identity and user-facing auth payloads."""
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

from ltc_tracker.db import Role, User


class CamelModel(BaseModel):
    """Base for API payloads: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Identity(CamelModel):
    """The authenticated caller attached to a request."""

    model_config = ConfigDict(frozen=True)

    id: int
    email: str
    display_name: str
    role: Role = Role.USER

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @classmethod
    def from_user(cls, user: User) -> "Identity":
        return cls(
            id=user.id,
            email=user.email,
            display_name=user.display_name,
            role=user.role,
        )


class LoginRequest(CamelModel):
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)


class SignupRequest(CamelModel):
    email: EmailStr
    password: str = Field(min_length=6)
    display_name: str = Field(min_length=1, max_length=100)

    @field_validator("display_name")
    @classmethod
    def _strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("display name must not be blank")
        return v


class UpdateInfoRequest(CamelModel):
    """Profile update. ``name`` is accepted as the display name."""

    display_name: str = Field(min_length=1, max_length=100, alias="name")
    email: EmailStr


class ChangePasswordRequest(CamelModel):
    current_password: str = Field(min_length=1)
    new_password: str = Field(min_length=1)
    confirm_password: str = Field(min_length=1)


class UserOut(CamelModel):
    id: int
    email: str
    display_name: str
    role: Role


class AuthResponse(CamelModel):
    success: bool = True
    message: str
    user: UserOut | None = None
