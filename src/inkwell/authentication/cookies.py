from starlette.responses import Response

from inkwell.core.config import inkwell_settings
from inkwell.core.exceptions import ValidationFailure

from .sessions import SESSION_ID_BITS

AUTH_COOKIE_NAME = inkwell_settings.AUTH_COOKIE_NAME
EXPIRED_COOKIE_DATE = "Thu, 01 Jan 1970 00:00:00 GMT"


def parse_cookie_header(raw: str) -> dict[str, str]:
    """Split a `Cookie` header into name/value pairs.

    Parsing is all-or-nothing: a single pair that does not split into
    exactly one name and one value on `=` rejects the whole header.

    Raises:
        ValidationFailure: If any pair is malformed.

    Example:
        >>> parse_cookie_header("auth=42; theme=dark")
        {'auth': '42', 'theme': 'dark'}
    """
    cookies: dict[str, str] = {}
    for pair in raw.split(";"):
        parts = pair.strip().split("=")
        if len(parts) != 2:
            msg = f"Malformed cookie pair: {pair.strip()[:32]!r}"
            raise ValidationFailure(msg)
        name, value = parts
        cookies[name] = value
    return cookies


def parse_session_id(value: str) -> int:
    """Parse the decimal form of an unsigned 128-bit session id.

    Raises:
        ValidationFailure: If the value is not a decimal integer in range.
    """
    if not value.isascii() or not value.isdigit():
        msg = "Session id is not an unsigned decimal integer"
        raise ValidationFailure(msg)
    session_id = int(value)
    if session_id >= 1 << SESSION_ID_BITS:
        msg = "Session id exceeds 128 bits"
        raise ValidationFailure(msg)
    return session_id


def set_session_cookie(
    response: Response,
    session_id: int,
    *,
    cookie_name: str = AUTH_COOKIE_NAME,
) -> None:
    response.set_cookie(cookie_name, str(session_id), path="/")


def clear_session_cookie(
    response: Response,
    *,
    cookie_name: str = AUTH_COOKIE_NAME,
) -> None:
    response.set_cookie(cookie_name, "", expires=EXPIRED_COOKIE_DATE, path="/")
