"""
JSON-RPC client for talking to a Klaytn node.

The faucet needs three things from a node:
  * klay_chainID                 : connectivity check at startup (ping)
  * klay_getTransactionCount     : pending nonce of the faucet account
  * klay_sendRawTransaction      : relay a signed transaction

Notes
-----
* Every call is a single attempt. The faucet reports node hiccups to the
  caller instead of retrying.
* Quantities come back as 0x-prefixed hex strings and are returned as ints.
* Raw transactions are RLP bytes submitted as 0x-prefixed hex.
* Kaia nodes accept the same methods under the ``kaia`` namespace and the
  Ethereum-compatible ones under ``eth``; the namespace is configurable.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

import httpx

HexStr = str

_TX_HASH_RE = re.compile(r"^0x[0-9a-fA-F]{64}$")


# ----------------------------- Errors ---------------------------------------


class NodeRpcError(Exception):
    """Base class for all node RPC errors."""


class RpcTransportError(NodeRpcError):
    """The node could not be reached (connect failure, timeout, bad URL)."""


class RpcResponseError(NodeRpcError):
    """The node answered, but with an error."""

    def __init__(self, code: int, message: str, data: Any | None = None):
        super().__init__(f"RPC error {code}: {message}")
        self.code = code
        self.message = message
        self.data = data


# ----------------------------- Helpers --------------------------------------


def _to_0x(b: bytes) -> HexStr:
    return "0x" + b.hex()


def _as_hex_payload(x: Union[bytes, bytearray, memoryview, str]) -> HexStr:
    if isinstance(x, (bytes, bytearray, memoryview)):
        return _to_0x(bytes(x))
    if isinstance(x, str):
        s = x.strip().lower()
        if not s.startswith("0x"):
            s = "0x" + s
        int(s[2:] or "0", 16)
        return s
    raise TypeError("Unsupported payload type; expected bytes or hex string")


def _error_code(value: Any) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str):
        try:
            return int(value, 0)
        except ValueError:
            pass
    return -32000


def _quantity(value: Any) -> int:
    """Decode a JSON-RPC quantity (0x-hex string or plain int)."""
    if isinstance(value, bool):
        raise RpcResponseError(-32603, f"unexpected quantity: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value, 16) if value.lower().startswith("0x") else int(value)
        except ValueError:
            pass
    raise RpcResponseError(-32603, f"unexpected quantity: {value!r}")


def check_endpoint(url: str) -> httpx.URL:
    """
    Parse and sanity-check a node endpoint. Only http(s) is supported.
    """
    try:
        parsed = httpx.URL(url)
    except (httpx.InvalidURL, TypeError, ValueError) as exc:
        raise RpcTransportError("endpoint is not a valid URL") from exc
    if parsed.scheme not in ("http", "https") or not parsed.host:
        raise RpcTransportError("endpoint must be an http(s) URL with a host")
    return parsed


# ----------------------------- Client ---------------------------------------


@dataclass
class NodeRpcConfig:
    url: str
    timeout_s: float = 10.0
    namespace: str = "klay"
    headers: Optional[Dict[str, str]] = None


class NodeRpc:
    """
    Minimal async JSON-RPC client for a Klaytn node.

    Use as an async context manager; one instance is one connection::

        async with NodeRpc(NodeRpcConfig(url="http://127.0.0.1:8551")) as node:
            nonce = await node.get_pending_nonce(addr)
    """

    def __init__(self, config: NodeRpcConfig):
        self._cfg = config
        self._id = 0
        self._client: Optional[httpx.AsyncClient] = None
        self._url: Optional[httpx.URL] = None

    # ---------- lifecycle ----------

    async def start(self) -> None:
        if self._client is None:
            self._url = check_endpoint(self._cfg.url)
            headers = {"content-type": "application/json", "accept": "application/json"}
            if self._cfg.headers:
                headers.update(self._cfg.headers)
            self._client = httpx.AsyncClient(timeout=self._cfg.timeout_s, headers=headers)

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "NodeRpc":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    # ---------- core transport ----------

    def _method(self, name: str) -> str:
        return f"{self._cfg.namespace}_{name}"

    async def _call(self, method: str, params: Any | None = None) -> Any:
        if self._client is None:
            await self.start()
        assert self._client is not None and self._url is not None

        self._id += 1
        payload = {"jsonrpc": "2.0", "id": self._id, "method": method, "params": params or []}

        try:
            resp = await self._client.post(self._url, json=payload)
        except httpx.TransportError as exc:
            # TimeoutException is a TransportError too
            raise RpcTransportError(f"{method}: {exc.__class__.__name__}") from exc

        if resp.status_code != 200:
            raise RpcResponseError(resp.status_code, f"HTTP {resp.status_code}")
        try:
            data = json.loads(resp.content)
        except ValueError as exc:
            raise RpcResponseError(-32700, "invalid JSON in node response") from exc
        if not isinstance(data, dict):
            raise RpcResponseError(-32600, "unexpected JSON-RPC envelope")

        err = data.get("error")
        if err is not None:
            if isinstance(err, dict):
                raise RpcResponseError(
                    _error_code(err.get("code")), str(err.get("message", "Unknown error")), err.get("data")
                )
            raise RpcResponseError(-32000, str(err))
        return data.get("result")

    # ---------- typed methods ----------

    async def ping(self) -> int:
        """
        Connectivity check. Returns the chain id the node reports.
        """
        return _quantity(await self._call(self._method("chainID")))

    async def get_pending_nonce(self, address: str) -> int:
        """Next nonce for ``address``, counting transactions still in the pool."""
        return _quantity(await self._call(self._method("getTransactionCount"), [address, "pending"]))

    async def send_raw_transaction(self, raw_tx: Union[bytes, bytearray, memoryview, str]) -> HexStr:
        """
        Submit a signed RLP-encoded transaction (raw bytes or hex str).
        Returns the transaction hash reported by the node.
        """
        result = await self._call(self._method("sendRawTransaction"), [_as_hex_payload(raw_tx)])
        if not isinstance(result, str) or not _TX_HASH_RE.match(result):
            raise RpcResponseError(-32603, f"unexpected transaction hash: {result!r}")
        return result


__all__ = [
    "NodeRpc",
    "NodeRpcConfig",
    "NodeRpcError",
    "RpcTransportError",
    "RpcResponseError",
    "check_endpoint",
]
