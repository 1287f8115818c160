"""
Request body size guard.
"""

from starlette.datastructures import Headers
from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from evaluation_api.core.config import settings
from evaluation_api.core.exceptions import PayloadTooLargeError
from evaluation_api.core.logging import get_logger

logger = get_logger(__name__)


class BodySizeLimitMiddleware:
    """
    Answer 413 when a request body exceeds ``EVALUATION_MAX_REQUEST_BYTES``.

    A declared ``Content-Length`` is rejected up front. Otherwise the body is
    read and counted chunk by chunk, so chunked uploads are bounded too, and
    the buffered messages are replayed to the application unchanged.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        limit = settings.evaluation.max_request_bytes
        declared = Headers(scope=scope).get("content-length", "")
        if declared.isdigit() and int(declared) > limit:
            await self._reject(scope, receive, send, limit, int(declared))
            return

        buffered: list[Message] = []
        received = 0
        more_body = True
        while more_body:
            message = await receive()
            buffered.append(message)
            if message["type"] != "http.request":
                break
            received += len(message.get("body", b""))
            if received > limit:
                await self._reject(scope, receive, send, limit, received)
                return
            more_body = message.get("more_body", False)

        async def replay() -> Message:
            if buffered:
                return buffered.pop(0)
            return await receive()

        await self.app(scope, replay, send)

    async def _reject(self, scope: Scope, receive: Receive, send: Send, limit: int, size: int) -> None:
        exc = PayloadTooLargeError(limit)
        logger.warning("Request body too large", size=size, limit=limit, path=scope.get("path"))
        response = JSONResponse(status_code=exc.status_code, content=exc.to_dict())
        await response(scope, receive, send)
