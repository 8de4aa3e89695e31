import logging
from typing import Any, Awaitable, Callable, Final

from fastapi import Request
from starlette.types import ASGIApp

from .backend import SessionAuthenticationBackend
from .schemas import Identity

logger = logging.getLogger(__name__)


class SessionAuthenticationMiddleware:
    """
    Resolve `request.state.identity` for every HTTP request.

    The identity defaults to anonymous and is only replaced when the backend
    finds a registered session for the request's cookie, so handlers can
    always read it without checking for errors.
    """

    def __init__(
        self,
        app: ASGIApp,
        backend: SessionAuthenticationBackend,
    ):
        self.app: Final[ASGIApp] = app
        self.backend: Final[SessionAuthenticationBackend] = backend

    async def __call__(
        self,
        scope: dict[str, Any],
        receive: Callable[[], Awaitable[Any]],
        send,
    ) -> Any:
        if scope["type"] not in ("http", "websocket"):
            await self.app(scope, receive, send)
            return None
        request = Request(scope)

        request.state.identity = Identity()

        try:
            result = self.backend.authenticate(request.headers.get("cookie"))
            if result.success:
                request.state.identity = result.identity
            elif "token" in result.extra:
                logger.debug(
                    "Authentication failed for token ending in ...%s: %s",
                    str(result.extra["token"])[-4:],
                    result.message,
                )
        except Exception:
            logger.exception(
                "Authentication middleware encountered an unexpected error"
            )

        return await self.app(scope, receive, send)
