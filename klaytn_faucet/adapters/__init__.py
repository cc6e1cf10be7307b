"""
Adapters to services outside the faucet process.

- ``node_rpc``: async JSON-RPC client for a Klaytn node (nonce lookup,
  raw transaction relay, connectivity check).
"""

from __future__ import annotations

from .node_rpc import (
    NodeRpc,
    NodeRpcConfig,
    NodeRpcError,
    RpcResponseError,
    RpcTransportError,
)

__all__ = [
    "NodeRpc",
    "NodeRpcConfig",
    "NodeRpcError",
    "RpcResponseError",
    "RpcTransportError",
]
