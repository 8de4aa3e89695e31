import logging
import secrets
from typing_extensions import override

from inkwell.core.config import InkwellSettings, inkwell_settings
from inkwell.core.exceptions import ValidationFailure

from .cookies import parse_cookie_header, parse_session_id
from .interface import AuthenticationBackend
from .schemas import AuthenticationResult, Identity, UserState
from .sessions import SessionStore

logger = logging.getLogger(__name__)


class SessionAuthenticationBackend(AuthenticationBackend):
    """
    Cookie-backed authentication against the in-memory `SessionStore`.

    Args:
        sessions: The process-wide session store.
        settings: Source of the admin credentials and cookie name.
    """

    def __init__(
        self,
        sessions: SessionStore,
        settings: InkwellSettings = inkwell_settings,
    ):
        self.sessions = sessions
        self.settings = settings

    @property
    def cookie_name(self) -> str:
        return self.settings.AUTH_COOKIE_NAME

    @override
    def authenticate(self, cookie_header: str | None) -> AuthenticationResult:
        """Resolve the identity carried by a raw `Cookie` header.

        Never raises: every failure degrades to the anonymous identity.

        Args:
            cookie_header: The request's `Cookie` header, or None if absent.

        Returns:
            AuthenticationResult: Always returns a result object, never None.

        """
        if cookie_header is None:
            return AuthenticationResult(
                success=False,
                message="No Cookie",
                errors=["Request carries no Cookie header"],
            )
        try:
            cookies = parse_cookie_header(cookie_header)
        except ValidationFailure as e:
            return AuthenticationResult(
                success=False,
                message="Malformed Cookie",
                errors=[str(e)],
            )
        token = cookies.get(self.cookie_name)
        if token is None:
            return AuthenticationResult(
                success=False,
                message="No Session Cookie",
                errors=[f"Cookie {self.cookie_name!r} not present"],
            )
        try:
            session_id = parse_session_id(token)
        except ValidationFailure as e:
            return AuthenticationResult(
                success=False,
                message="Invalid Session",
                errors=[str(e)],
                extra={"token": token},
            )
        try:
            session = self.sessions.lookup(session_id)
        except TimeoutError as e:
            return AuthenticationResult(
                success=False,
                message="Session Store Unavailable",
                errors=[str(e)],
                extra={"token": token},
            )
        if session is None:
            return AuthenticationResult(
                success=False,
                message="Invalid Session",
                errors=["Session id is not registered"],
                extra={"token": token},
            )
        return AuthenticationResult(
            success=True,
            identity=session.to_identity(),
            message="Authenticated",
            extra={"session": session},
        )

    @override
    def login(self, user: str, password: str) -> AuthenticationResult:
        """Open an admin session when both secrets match.

        The failure message is identical whichever value was wrong.
        """
        expected_user = self.settings.ADMIN_USER
        expected_password = self.settings.ADMIN_PASSWORD
        # Compare both before branching so timing does not reveal which failed
        user_ok = secrets.compare_digest(user.encode(), expected_user.encode())
        password_ok = secrets.compare_digest(
            password.encode(), expected_password.encode()
        )
        if not (expected_user and expected_password and user_ok and password_ok):
            logger.warning("Rejected admin login attempt")
            return AuthenticationResult(
                success=False,
                message="Login Failed",
                errors=["Invalid credentials"],
            )

        try:
            session_id = self.sessions.create(UserState.ADMIN)
        except TimeoutError as e:
            logger.error("Could not open admin session: %s", e)
            return AuthenticationResult(
                success=False,
                message="Session Store Unavailable",
                errors=[str(e)],
            )
        logger.info("Admin logged in")
        return AuthenticationResult(
            success=True,
            identity=Identity(user_state=UserState.ADMIN, session_id=session_id),
            message="Login Successful",
            extra={"session_id": session_id},
        )

    @override
    def logout(self, identity: Identity) -> bool:
        if identity.session_id is None:
            return False
        try:
            removed = self.sessions.invalidate(identity.session_id)
        except TimeoutError as e:
            logger.error("Could not close session: %s", e)
            return False
        if removed:
            logger.info("Session closed for %s", identity.display_name)
        return removed
