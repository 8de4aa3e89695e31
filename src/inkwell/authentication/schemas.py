from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class UserState(str, Enum):
    UNKNOWN = "unknown"
    USER = "user"
    ADMIN = "admin"


class Identity(BaseModel):
    """Resolved caller context for one request.

    The default instance is the anonymous identity every request falls back
    to when no valid session cookie is present.
    """

    model_config = ConfigDict(frozen=True)

    user_state: UserState = UserState.UNKNOWN
    session_id: int | None = None

    @property
    def is_admin(self) -> bool:
        return self.user_state is UserState.ADMIN

    @property
    def is_user(self) -> bool:
        return self.user_state is UserState.USER

    @property
    def is_authenticated(self) -> bool:
        return self.user_state is not UserState.UNKNOWN

    @property
    def display_name(self) -> str:
        if self.is_admin:
            return "Admin"
        if self.is_user:
            return "User"
        return "Anonymous"

    def __repr__(self) -> str:
        return f"<Identity {self.user_state.value}>"

    def __bool__(self) -> bool:
        """Anonymous identities are falsy in boolean context."""
        return self.is_authenticated


class Session(BaseModel):
    """Server-side record binding an unguessable token to a user state."""

    model_config = ConfigDict(frozen=True)

    id: int
    user_state: UserState

    def to_identity(self) -> Identity:
        return Identity(user_state=self.user_state, session_id=self.id)


class AuthenticationResult(BaseModel):
    """Result from the authentication backend.

    Attributes:
        success: Whether authentication succeeded.
        identity: The resolved identity, anonymous on failure.
        message: Human-readable status message.
        errors: List of error details for debugging/logging.
        extra: Extra data from the backend (session id, etc).

    """

    success: bool
    identity: Identity = Field(default_factory=Identity)
    message: str = ""
    errors: list[str] = Field(default_factory=list)
    extra: dict[str, Any] = Field(default_factory=dict)

    def __repr__(self) -> str:
        return f"<AuthenticationResult success={self.success} identity={self.identity!r}>"


class LoginForm(BaseModel):
    user: str = ""
    password: str = ""
