from __future__ import annotations

from typing import Optional

from fastapi import FastAPI

from .config import Settings
from .metrics import setup_metrics
from .middleware.errors import install_error_handlers
from .middleware.logging import install_access_log_middleware
from .middleware.request_id import RequestIdMiddleware
from .routers.faucet import router as faucet_router
from .routers.health import router as health_router
from .services.issuer import NodeConnector, TransactionIssuer, node_connector
from .services.signer import SignerIdentity
from .version import __version__


def create_app(
    settings: Settings,
    *,
    signer: Optional[SignerIdentity] = None,
    connect: Optional[NodeConnector] = None,
) -> FastAPI:
    """
    FastAPI factory. Builds the signer identity and its issuer from
    ``settings`` unless given, then mounts routers and middleware.

    ``connect`` replaces the Klaytn JSON-RPC connector (tests use it to
    inject a fake node).
    """
    if signer is None:
        signer = SignerIdentity.from_hex(settings.faucet_key.get_secret_value())
    if connect is None:
        connect = node_connector(settings.to_node_rpc_config())

    app = FastAPI(
        title="Klaytn Faucet",
        version=__version__,
        docs_url=None,
        redoc_url=None,
    )
    app.state.settings = settings
    app.state.issuer = TransactionIssuer(
        signer,
        chain_id=settings.chain_id,
        connect=connect,
        node_timeout_s=settings.rpc_timeout,
    )

    # Last added runs first: the request id is bound before the access log line
    install_access_log_middleware(app)
    app.add_middleware(RequestIdMiddleware)

    install_error_handlers(app)
    setup_metrics(app)

    app.include_router(health_router)
    app.include_router(faucet_router)
    return app


__all__ = ["create_app"]
