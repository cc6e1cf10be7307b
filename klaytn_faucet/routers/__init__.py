"""
HTTP routers. Each module exposes one ``router``.
"""

from __future__ import annotations

from .faucet import router as faucet_router
from .health import router as health_router

__all__ = ["faucet_router", "health_router"]
