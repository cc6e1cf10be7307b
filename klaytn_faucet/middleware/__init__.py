"""
ASGI middleware: request ids, access logging and error to JSON mapping.
"""

from __future__ import annotations

from .errors import install_error_handlers
from .logging import AccessLogMiddleware, install_access_log_middleware
from .request_id import RequestIdMiddleware

__all__ = [
    "AccessLogMiddleware",
    "RequestIdMiddleware",
    "install_access_log_middleware",
    "install_error_handlers",
]
