"""
Wanderlust Backend — Request Logging Middleware
=================================================

What:  One access-log line per HTTP request: method, path, status, duration.
Why:   Shows every redirect, validation failure and error page with the
       request ID that also appears in the application logs.
How:   Times the downstream call and logs on the `wanderlust.access` logger.
When:  Runs inside RequestIDMiddleware (uses its request ID) and inside the
       method override, so the logged method is the effective one
       (DELETE, not the POST the browser sent).

Log level by status:
    5xx → ERROR, 4xx → WARNING, 2xx/3xx → INFO

Unhandled exceptions:
    Anything the exception handlers in main.py did not turn into a response
    is logged with its traceback and answered with the generic 500 page.

What we DON'T log: request bodies (listing text and reviews are user content).
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from wanderlust.middleware.request_id import request_id_var
from wanderlust.views import error_page

logger = logging.getLogger("wanderlust.access")
error_logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs structured information about each HTTP request and response."""

    # Probed every few seconds by orchestrators; logging them drowns real traffic
    QUIET_PATHS = {"/health"}

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        start_time = time.perf_counter()

        # request.client may be None in testing
        client_ip = getattr(request.client, "host", "unknown") if request.client else "unknown"
        method = request.method
        path = request.url.path
        rid = request_id_var.get("")

        if path in self.QUIET_PATHS:
            return await self._call_downstream(request, call_next, rid)

        response = await self._call_downstream(request, call_next, rid)

        duration_ms = (time.perf_counter() - start_time) * 1000

        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        logger.log(
            log_level,
            "%s %s %d %.1fms [%s] from %s",
            method,
            path,
            status,
            duration_ms,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "method": method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )

        return response

    @staticmethod
    async def _call_downstream(
        request: Request, call_next: RequestResponseEndpoint, rid: str
    ) -> Response:
        """
        Run the rest of the app; an exception no handler claimed becomes the
        generic 500 page here, so it still gets an access line and a request ID.
        """
        try:
            return await call_next(request)
        except Exception as exc:
            error_logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=exc)
            return error_page(500)
