"""
Character API - Access Log Middleware
======================================

What:  One log record per HTTP request: method, path, status, response
       size and latency.
How:   Times the downstream call with time.perf_counter() and reads the
       Content-Length of the response.
Who:   Applied to every request via Starlette middleware.
When:  Inside RequestIDMiddleware, so the request ID is already set.

Log line:
    GET /3 200 57 - 4.2 ms [a1b2c3d4]

    The size column is "-" when the response has no Content-Length
    (e.g. streamed bodies).

What we log vs what we DON'T log:
    ✅ Log: method, path, status, size, duration, client IP, request ID
    ❌ Don't log: query strings, headers, response bodies
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from character_api.middleware.request_id import request_id_var

logger = logging.getLogger("character_api.access")


class AccessLogMiddleware(BaseHTTPMiddleware):
    """
    Logs each request after the response is produced.

    Level by status:
        5xx → ERROR
        4xx → WARNING
        else → INFO
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        start_time = time.perf_counter()

        client_ip = request.client.host if request.client else "unknown"
        method = request.method
        path = request.url.path

        try:
            response = await call_next(request)
        except Exception:
            # Unhandled errors are rendered outside this middleware
            self._log(method, path, 500, "-", start_time, client_ip)
            raise

        self._log(
            method,
            path,
            response.status_code,
            response.headers.get("content-length", "-"),
            start_time,
            client_ip,
        )
        return response

    def _log(self, method, path, status, size, start_time, client_ip) -> None:
        duration_ms = (time.perf_counter() - start_time) * 1000
        rid = request_id_var.get("")

        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        logger.log(
            log_level,
            "%s %s %d %s - %.1f ms [%s]",
            method,
            path,
            status,
            size,
            duration_ms,
            rid,
            extra={
                "request_id": rid,
                "method": method,
                "path": path,
                "status": status,
                "size": size,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )
