import uuid
from typing import Any, Awaitable, Callable, Final

from starlette.datastructures import MutableHeaders
from starlette.types import ASGIApp, Message

from inkwell.core.logging import bind_request_id, release_request_id

REQUEST_ID_HEADER = "X-Request-ID"


class RequestIdMiddleware:
    """
    Tag each HTTP request with an id.

    An incoming `X-Request-ID` is reused, otherwise a new one is generated.
    The id is visible to every log record emitted while the request runs
    and is echoed back on the response.
    """

    def __init__(self, app: ASGIApp, header_name: str = REQUEST_ID_HEADER):
        self.app: Final[ASGIApp] = app
        self.header_name: Final[str] = header_name

    async def __call__(
        self,
        scope: dict[str, Any],
        receive: Callable[[], Awaitable[Any]],
        send,
    ) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        incoming = None
        wanted = self.header_name.lower().encode("latin-1")
        for key, value in scope.get("headers", []):
            if key == wanted:
                incoming = value.decode("latin-1")
                break
        request_id = incoming or uuid.uuid4().hex

        async def send_with_id(message: Message) -> None:
            if message["type"] == "http.response.start":
                headers = MutableHeaders(scope=message)
                headers[self.header_name] = request_id
            await send(message)

        token = bind_request_id(request_id)
        try:
            await self.app(scope, receive, send_with_id)
        finally:
            release_request_id(token)
