"""Request-ID and correlation-ID propagation.

Reads ``X-Request-ID`` / ``X-Correlation-ID`` (generating either when
missing), binds both into structlog context vars and echoes them on the
response, health responses included.
"""

from __future__ import annotations

import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

TRACE_HEADERS = {
    "X-Request-ID": "request_id",
    "X-Correlation-ID": "correlation_id",
}


def _trace_ids(request: Request) -> dict[str, str]:
    return {
        header: request.headers.get(header) or uuid.uuid4().hex
        for header in TRACE_HEADERS
    }


class RequestContextMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        ids = _trace_ids(request)

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            **{TRACE_HEADERS[header]: value for header, value in ids.items()}
        )

        response = await call_next(request)
        response.headers.update(ids)
        return response
