"""
Request body size guard.

Bodies declaring a Content-Length above settings.max_body_bytes are answered
with 413 before the route runs. Bodies without a length (chunked uploads) are
counted as they are received, and PayloadTooLarge is raised from inside the
route's body read once the limit is crossed.
"""

import logging
from typing import Optional

from fastapi.responses import JSONResponse
from starlette.datastructures import Headers
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from voxverify.config import settings
from voxverify.core.errors import PayloadTooLarge

logger = logging.getLogger(__name__)


class BodySizeLimitMiddleware:
    def __init__(self, app: ASGIApp, max_bytes: Optional[int] = None):
        self.app = app
        self.max_bytes = max_bytes if max_bytes is not None else settings.max_body_bytes

    def _too_large(self) -> PayloadTooLarge:
        return PayloadTooLarge(details=f"Max {self.max_bytes // 1024 // 1024}MB allowed.")

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        content_length = Headers(scope=scope).get("content-length")
        if content_length and content_length.isdigit() and int(content_length) > self.max_bytes:
            logger.warning(
                f"[LIMIT] Rejected {scope['method']} {scope['path']}: "
                f"{int(content_length) / 1024 / 1024:.2f} MB > {self.max_bytes // 1024 // 1024} MB"
            )
            exc = self._too_large()
            response = JSONResponse(status_code=exc.status_code, content=exc.detail)
            await response(scope, receive, send)
            return

        received = 0

        async def limited_receive() -> Message:
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > self.max_bytes:
                    logger.warning(
                        f"[LIMIT] Rejected {scope['method']} {scope['path']}: "
                        f"streamed body passed {self.max_bytes // 1024 // 1024} MB"
                    )
                    raise self._too_large()
            return message

        await self.app(scope, limited_receive, send)
