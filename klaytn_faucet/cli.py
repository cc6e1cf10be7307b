"""
Command-line entry point for the Klaytn faucet.

Usage:
  klaytn-faucet CHAIN_ID ENDPOINT FAUCET_PRIVATE_KEY [--host 0.0.0.0] [--port 80]

Startup validates, in order, the argument count, the chain id, the node
endpoint (a live probe) and the private key. Any failure prints a
diagnostic to stderr and exits with status 1 without serving.
"""

from __future__ import annotations

import asyncio
import re
from typing import List, Optional

import typer
import uvicorn
from pydantic import ValidationError

from .adapters.node_rpc import NodeRpc, NodeRpcConfig, NodeRpcError, RpcResponseError
from .app import create_app
from .config import load_settings
from .errors import (
    InvalidArguments,
    InvalidChainId,
    NodeUnreachable,
    StartupError,
)
from .logging import get_logger, setup_logging
from .services.signer import SignerIdentity

USAGE = "Usage: klaytn-faucet [chainID] [endpoint] [faucet private key without 0x]"
_DECIMAL_RE = re.compile(r"^[0-9]+$")

app = typer.Typer(add_completion=False, help="Klaytn faucet: single-account KLAY grant service")
log = get_logger(__name__)


def parse_chain_id(raw: str) -> int:
    raw = raw.strip()
    if not _DECIMAL_RE.match(raw):
        raise InvalidChainId()
    chain_id = int(raw, 10)
    if chain_id <= 0:
        raise InvalidChainId("Invalid chainID: must be a positive integer")
    return chain_id


async def probe_node(config: NodeRpcConfig) -> Optional[int]:
    """
    Connectivity check against the node. Returns the chain id it reports,
    or None when it answered but without a usable chain id.
    """
    try:
        async with NodeRpc(config) as node:
            return await node.ping()
    except RpcResponseError:
        # The node is there; it just rejected or mangled the probe call.
        return None
    except NodeRpcError as exc:
        raise NodeUnreachable() from exc


def bootstrap(args: List[str], *, host: Optional[str] = None, port: Optional[int] = None):
    """
    Validate process arguments and return ``(settings, signer)``.
    Raises a :class:`StartupError` subclass on the first invalid input.
    """
    if len(args) != 3:
        raise InvalidArguments(f"expected 3 arguments, got {len(args)}")
    chain_id_raw, endpoint, key_raw = args

    chain_id = parse_chain_id(chain_id_raw)
    try:
        settings = load_settings(chain_id, endpoint, key_raw, host=host, port=port)
    except ValidationError as exc:
        # field names only; input values may include the key
        fields = sorted({".".join(str(p) for p in e["loc"]) for e in exc.errors()})
        raise InvalidArguments(f"invalid settings: {', '.join(fields)}") from None

    node_chain_id = asyncio.run(probe_node(settings.to_node_rpc_config()))
    if node_chain_id is not None and node_chain_id != chain_id:
        log.warning("startup.chain_id_mismatch", configured=chain_id, node=node_chain_id)

    signer = SignerIdentity.from_hex(key_raw)
    return settings, signer


@app.command()
def serve(
    args: Optional[List[str]] = typer.Argument(None, help="CHAIN_ID ENDPOINT FAUCET_PRIVATE_KEY", show_default=False),
    host: Optional[str] = typer.Option(None, "--host", help="Bind address (default: $FAUCET_HOST or 0.0.0.0)"),
    port: Optional[int] = typer.Option(None, "--port", help="Bind port (default: $FAUCET_PORT or 80)"),
):
    """
    Validate startup parameters and serve GET /faucet/{address}.
    """
    setup_logging()
    try:
        settings, signer = bootstrap(list(args or []), host=host, port=port)
    except StartupError as exc:
        if isinstance(exc, InvalidArguments):
            typer.echo(USAGE, err=True)
        typer.echo(f"Error: {exc.message}", err=True)
        raise typer.Exit(code=1)

    typer.echo(f"Faucet Address: {signer.address}")
    uvicorn.run(create_app(settings, signer=signer), host=settings.host, port=settings.port, log_config=None)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
