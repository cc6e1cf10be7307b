from __future__ import annotations

"""
Exception → ``{"msg": ..., "code": ...}`` JSON mappers for FastAPI.

- FaucetError subclasses keep their own status and safe message.
- Starlette/FastAPI HTTPException (404, 405, ...) keeps its status.
- Unhandled exceptions become a generic 500; the stack goes to the log only.

Responses never carry exception text from the node client or eth-account,
only the classified message.
"""

from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..errors import FaucetError
from ..logging import get_logger

log = get_logger(__name__)


def _body(msg: str, code: str, request: Request, extras: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    body: Dict[str, Any] = {"msg": msg, "code": code}
    rid = getattr(request.state, "request_id", "")
    if rid:
        body["requestId"] = rid
    if extras:
        body.update(extras)
    return body


async def _handle_faucet_error(request: Request, exc: FaucetError) -> JSONResponse:
    body = _body(exc.message, exc.code, request, exc.to_body())
    if exc.status_code >= 500:
        log.error("faucet_error", path=request.url.path, status=exc.status_code, **body)
    else:
        log.info("faucet_error", path=request.url.path, status=exc.status_code, **body)
    return JSONResponse(status_code=exc.status_code, content=body)


async def _handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    detail = str(exc.detail) if getattr(exc, "detail", None) else "error"
    body = _body(detail, "http_error", request)
    return JSONResponse(status_code=exc.status_code, content=body, headers=getattr(exc, "headers", None))


async def _handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    body = _body("invalid request", "validation_error", request)
    log.info("validation_error", path=request.url.path, errors=len(exc.errors()))
    return JSONResponse(status_code=400, content=body)


async def _handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    body = _body("internal server error", "server_error", request)
    log.exception("unhandled_exception", path=request.url.path)
    return JSONResponse(status_code=500, content=body)


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(FaucetError, _handle_faucet_error)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, _handle_http_exception)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _handle_validation_error)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _handle_unexpected_error)


__all__ = ["install_error_handlers"]
