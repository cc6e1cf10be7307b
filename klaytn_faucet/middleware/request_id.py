from __future__ import annotations

"""
Request ID middleware.

- Propagates an inbound ``X-Request-Id`` or generates one (uuid4 hex).
- Stores it on ``request.state.request_id`` and binds it into structlog
  contextvars so every event logged while serving the request carries it.
- Echoes it back in the ``X-Request-Id`` response header.
"""

import re
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from ..logging import bind_request_context, clear_request_context

REQUEST_ID_HEADER = "X-Request-Id"

# Inbound ids end up in logs and headers; keep them short and printable.
_SAFE_ID = re.compile(r"^[A-Za-z0-9._-]{1,128}$")


class RequestIdMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        req_id = request.headers.get(REQUEST_ID_HEADER.lower(), "")
        if not _SAFE_ID.match(req_id):
            req_id = uuid.uuid4().hex

        request.state.request_id = req_id
        bind_request_context(request_id=req_id)
        try:
            response: Response = await call_next(request)
        finally:
            clear_request_context("request_id")

        response.headers[REQUEST_ID_HEADER] = req_id
        return response


__all__ = ["REQUEST_ID_HEADER", "RequestIdMiddleware"]
