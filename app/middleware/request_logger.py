# app/middleware/request_logger.py
import logging
import time

from starlette.types import ASGIApp, Message, Receive, Scope, Send

logger = logging.getLogger("nexus.http")


class RequestLoggerMiddleware:
    """
    Logs every HTTP request with:
      - method, path, status, duration
      - X-Req-Id (from client)

    Bodies are never logged; they may carry passwords.
    """
    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        start = time.time()
        headers = dict(scope.get("headers") or [])
        rid = headers.get(b"x-req-id", b"-").decode("latin-1")
        method = scope.get("method", "-")
        path = scope.get("path", "-")
        status = {"code": 500}

        async def send_wrapper(message: Message):
            if message["type"] == "http.response.start":
                status["code"] = message["status"]
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            dur_ms = (time.time() - start) * 1000
            logger.info("rid=%s %s %s -> %d in %.1fms", rid, method, path, status["code"], dur_ms)
