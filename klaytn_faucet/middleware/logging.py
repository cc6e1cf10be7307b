from __future__ import annotations

"""
Access logging middleware: one structured line per request with method,
path, status, latency and client address.
"""

import time

from fastapi import FastAPI, Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from ..logging import get_logger

log = get_logger("klaytn_faucet.access")


def _client_ip(request: Request) -> str:
    fwd = request.headers.get("x-forwarded-for")
    if fwd:
        return fwd.split(",")[0].strip()
    if request.client:
        return request.client.host
    return ""


class AccessLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        start = time.perf_counter()
        status = 500
        try:
            response = await call_next(request)
            status = response.status_code
            return response
        finally:
            latency_ms = round((time.perf_counter() - start) * 1000, 3)
            emit = log.error if status >= 500 else (log.warning if status >= 400 else log.info)
            emit(
                "access",
                method=request.method,
                path=request.url.path,
                status=status,
                latency_ms=latency_ms,
                client_ip=_client_ip(request),
            )


def install_access_log_middleware(app: FastAPI) -> None:
    app.add_middleware(AccessLogMiddleware)


__all__ = ["AccessLogMiddleware", "install_access_log_middleware"]
