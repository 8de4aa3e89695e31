from .backend import SessionAuthenticationBackend
from .cookies import (
    AUTH_COOKIE_NAME,
    clear_session_cookie,
    parse_cookie_header,
    parse_session_id,
    set_session_cookie,
)
from .dependencies import get_identity
from .interface import AuthenticationBackend
from .middleware import SessionAuthenticationMiddleware
from .schemas import AuthenticationResult, Identity, LoginForm, Session, UserState
from .sessions import ReadWriteLock, SessionStore

__all__ = [
    "AUTH_COOKIE_NAME",
    "AuthenticationBackend",
    "AuthenticationResult",
    "Identity",
    "LoginForm",
    "ReadWriteLock",
    "Session",
    "SessionAuthenticationBackend",
    "SessionAuthenticationMiddleware",
    "SessionStore",
    "UserState",
    "clear_session_cookie",
    "get_identity",
    "parse_cookie_header",
    "parse_session_id",
    "set_session_cookie",
]
