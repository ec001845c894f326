from __future__ import annotations

import logging

from starlette.datastructures import Headers
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from app.api.responses import error_response
from app.domain.exceptions import PayloadTooLargeError

logger = logging.getLogger("app.body_limit")

_METHODS_WITH_BODY = frozenset({"POST", "PUT", "PATCH"})


class BodySizeLimitMiddleware:
    """Reject request bodies larger than `max_body_bytes` with a 413.

    The declared Content-Length is checked first. Bodies sent without one
    (chunked) are read chunk by chunk and rejected as soon as the running total
    passes the limit, so at most `max_body_bytes` plus one chunk is ever held.
    An accepted body is replayed to the application unchanged.

    Written as a plain ASGI middleware so it can stop reading the stream early.
    """

    def __init__(self, app: ASGIApp, *, max_body_bytes: int):
        self.app = app
        self._max_body_bytes = max_body_bytes

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or scope["method"] not in _METHODS_WITH_BODY:
            await self.app(scope, receive, send)
            return

        declared = Headers(scope=scope).get("content-length")
        if declared is not None:
            try:
                size = int(declared)
                if size < 0:
                    raise ValueError(declared)
            except ValueError:
                response = error_response(status_code=400, message="invalid content-length header")
                await response(scope, receive, send)
                return
            if size > self._max_body_bytes:
                await self._reject(scope, receive, send)
                return
            await self.app(scope, receive, send)
            return

        chunks: list[bytes] = []
        received = 0
        more_body = True
        while more_body:
            message = await receive()
            if message["type"] == "http.disconnect":
                return
            chunk = message.get("body", b"")
            received += len(chunk)
            if received > self._max_body_bytes:
                await self._reject(scope, receive, send)
                return
            chunks.append(chunk)
            more_body = message.get("more_body", False)

        body = b"".join(chunks)
        replayed = False

        async def replay() -> Message:
            nonlocal replayed
            if replayed:
                return await receive()
            replayed = True
            return {"type": "http.request", "body": body, "more_body": False}

        await self.app(scope, replay, send)

    async def _reject(self, scope: Scope, receive: Receive, send: Send) -> None:
        exc = PayloadTooLargeError()
        logger.info(
            "Request body too large",
            extra={
                "request_id": scope.get("state", {}).get("request_id"),
                "http_method": scope["method"],
                "request_path": scope["path"],
                "status_code": exc.status_code,
                "error": exc.error_kind,
            },
        )
        response = error_response(status_code=exc.status_code, message=exc.message)
        await response(scope, receive, send)
