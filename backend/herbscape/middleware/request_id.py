"""
HerbScape Backend — Request ID Middleware
===========================================

What:  Tags every request with a correlation ID and echoes it as X-Request-ID.
How:   Reuses a well-formed X-Request-ID sent by the caller (a proxy or the
       page's own fetch calls), otherwise mints 8 hex chars. The ID lives in a
       ContextVar so page, service and access logs can prefix their lines.

Error bodies carry the same ID (see main._error_response), so a toast or JSON
error can be matched to the server log entries of that request.
"""

import re
import uuid
from contextvars import ContextVar
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"

# Caller IDs end up verbatim in log lines
_ACCEPTED_ID = re.compile(r"^[A-Za-z0-9._-]{1,64}$")

request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def resolve_request_id(header_value: Optional[str]) -> str:
    if header_value and _ACCEPTED_ID.match(header_value):
        return header_value
    return uuid.uuid4().hex[:8]


class RequestIDMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = rid
        return response
