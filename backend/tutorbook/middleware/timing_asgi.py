"""
Pure ASGI Timing Middleware

Adds X-Process-Time to every HTTP response and warns on slow requests.
"""

import logging
import time

from starlette.datastructures import MutableHeaders
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from ..core.constants import HEALTH_PATH, METRICS_PATH

logger = logging.getLogger(__name__)

SLOW_REQUEST_MS = 100


class TimingMiddlewareASGI:
    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        path = scope.get("path", "")
        method = scope.get("method", "")

        # Skip timing for health and metrics endpoints
        if path in (HEALTH_PATH, METRICS_PATH):
            await self.app(scope, receive, send)
            return

        start_time = time.time()

        async def send_wrapper(message: Message) -> None:
            if message["type"] == "http.response.start":
                process_time = (time.time() - start_time) * 1000  # Convert to ms

                headers = MutableHeaders(scope=message)
                headers["X-Process-Time"] = f"{process_time:.2f}ms"

                if process_time > SLOW_REQUEST_MS:
                    logger.warning(
                        f"[TIMING] Slow request: {method} {path} took {process_time:.2f}ms"
                    )
                else:
                    logger.debug(f"[TIMING] {method} {path}: {process_time:.2f}ms")

            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        except Exception as e:
            process_time = (time.time() - start_time) * 1000
            logger.error(f"[TIMING] Error in request {path} after {process_time:.2f}ms: {str(e)}")
            raise
