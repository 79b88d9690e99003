"""
Request body size guard.

Rejects requests whose declared Content-Length is over the limit before
the body is read, and cuts off bodies without one (chunked transfer) as
soon as the bytes received pass the limit.
"""

from starlette.datastructures import Headers
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from upload_gateway.config import get_settings
from upload_gateway.core.exceptions import PayloadTooLargeException
from upload_gateway.core.responses import create_error_response

# Room for multipart boundaries and part headers around the file itself
MULTIPART_OVERHEAD = 1024 * 1024


class RequestSizeLimitMiddleware:
    """
    Caps request bodies at the upload limit plus multipart overhead.

    When ``max_upload_size`` is not given, MAX_UPLOAD_SIZE is read from
    settings on every request.
    """

    def __init__(self, app: ASGIApp, max_upload_size: int | None = None) -> None:
        self.app = app
        self.max_upload_size = max_upload_size

    def _limit(self) -> int:
        if self.max_upload_size is not None:
            return self.max_upload_size
        return get_settings().MAX_UPLOAD_SIZE

    async def _reject(self, scope: Scope, receive: Receive, send: Send, max_upload_size: int) -> None:
        exc = PayloadTooLargeException(max_upload_size)
        response = create_error_response(exc.error, exc.message, exc.status_code)
        await response(scope, receive, send)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        max_upload_size = self._limit()
        max_bytes = max_upload_size + MULTIPART_OVERHEAD

        length = Headers(scope=scope).get("content-length")
        try:
            declared = int(length) if length is not None else None
        except ValueError:
            declared = None
        if declared is not None and declared > max_bytes:
            await self._reject(scope, receive, send, max_upload_size)
            return

        received = 0
        response_started = False
        rejected = False

        async def limited_receive() -> Message:
            nonlocal received, rejected
            if rejected:
                return {"type": "http.disconnect"}

            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > max_bytes:
                    # The app sees a disconnect; whatever it answers is dropped
                    rejected = True
                    if not response_started:
                        await self._reject(scope, receive, send, max_upload_size)
                    return {"type": "http.disconnect"}
            return message

        async def guarded_send(message: Message) -> None:
            nonlocal response_started
            if rejected:
                return
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        await self.app(scope, limited_receive, guarded_send)
