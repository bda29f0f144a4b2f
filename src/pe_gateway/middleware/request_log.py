"""Per-request access log and request id.

Each request gets an id (the caller's X-Request-ID when it looks sane,
otherwise `req_<12 hex>`). The id is stored on request.state for the
response envelope and echoed back in the X-Request-ID header.

    INFO [POST] /api/v1/trades/7/confirm -> 200 (23ms) req_a1b2c3d4e5f6
"""

import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("pe.request")

REQUEST_ID_HEADER = "X-Request-ID"
_MAX_INBOUND_ID = 64


def _request_id(request: Request) -> str:
    inbound = request.headers.get(REQUEST_ID_HEADER, "")
    if inbound and len(inbound) <= _MAX_INBOUND_ID and inbound.isprintable():
        return inbound
    return f"req_{uuid.uuid4().hex[:12]}"


class RequestLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = _request_id(request)
        request.state.request_id = request_id

        start = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000

        response.headers[REQUEST_ID_HEADER] = request_id
        level = logging.WARNING if response.status_code >= 500 else logging.INFO
        logger.log(
            level,
            "[%s] %s -> %d (%.0fms) %s",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
            request_id,
        )
        return response
