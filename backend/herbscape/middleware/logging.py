"""
HerbScape Backend — Access Log Middleware
===========================================

What:  One "herbscape.access" line per request.

Fields (also attached as `extra` for structured handlers):
    request_id   correlation ID (see request_id.py)
    client       first 8 chars of the herbscape_client cookie, "-" on a first visit
    signed_in    whether the request carried an sb-access-token cookie
    method, path, status, duration_ms

Never logged: request bodies (symptom text, photos), query strings (search
text) and cookie values beyond the client prefix.

Level: ERROR for 5xx, WARNING for 4xx, INFO otherwise. Health probes are
skipped entirely.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from herbscape.catalog.registry import CLIENT_COOKIE
from herbscape.middleware.request_id import request_id_var
from herbscape.routes.deps import ACCESS_TOKEN_COOKIE

logger = logging.getLogger("herbscape.access")

QUIET_PATHS = frozenset({"/health"})


def _level_for(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Typical durations:
        GET /             10-50ms, plus the herbs query on a client's first visit
        GET /?lang=hi     up to TRANSLATION_WAIT_SECONDS while translate-plant runs
        POST /scan        dominated by identify-plant
        POST /remedies    dominated by the remedies webhook
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in QUIET_PATHS:
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - started) * 1000

        fields = {
            "request_id": request_id_var.get(""),
            "client": (request.cookies.get(CLIENT_COOKIE) or "-")[:8],
            "signed_in": ACCESS_TOKEN_COOKIE in request.cookies,
            "method": request.method,
            "path": request.url.path,
            "status": response.status_code,
            "duration_ms": round(duration_ms, 2),
        }
        logger.log(
            _level_for(response.status_code),
            "%s %s %d %.1fms [%s] client=%s%s",
            fields["method"],
            fields["path"],
            fields["status"],
            duration_ms,
            fields["request_id"],
            fields["client"],
            " (signed in)" if fields["signed_in"] else "",
            extra=fields,
        )
        return response
