"""
Transaction issuer: one faucet grant per call.

    issue(recipient)
      1. validate recipient                       -> InvalidRecipient
      -- signer lock held from here --
      2. open node connection, fetch pending nonce -> NodeUnavailable / NonceFetchFailed
      3. build the grant transaction
      4. sign it for the configured chain id       -> SigningFailed
      5. submit the raw transaction               -> SubmissionFailed
      -- connection closed, lock released --
      6. return the node's transaction hash

Nonce fetch and submission are two round trips against the same account
state on the node. Two grants interleaving between them would read the same
pending nonce, so the whole section runs under one ``asyncio.Lock`` per
signer identity; concurrent callers queue on it in FIFO order.

No step is retried. Every node call is bounded by ``node_timeout_s`` so a
hung node cannot hold the lock forever.
"""

from __future__ import annotations

import asyncio
import contextlib
import time
from dataclasses import dataclass
from typing import AsyncContextManager, AsyncIterator, Callable, Protocol

from ..adapters.node_rpc import NodeRpc, NodeRpcConfig, NodeRpcError, RpcTransportError
from ..errors import (
    FaucetError,
    NodeUnavailable,
    NonceFetchFailed,
    SubmissionFailed,
)
from ..logging import get_logger
from ..metrics import CRITICAL_SECTION_SECONDS, ISSUANCES, WAITING
from ..models.common import validate_recipient
from .signer import SignedTransaction, SignerIdentity
from .tx_builder import DEFAULT_POLICY, TransferPolicy, build_grant

log = get_logger(__name__)


class NodeClient(Protocol):
    async def get_pending_nonce(self, address: str) -> int: ...

    async def send_raw_transaction(self, raw_tx: bytes) -> str: ...


NodeConnector = Callable[[], AsyncContextManager[NodeClient]]


def node_connector(config: NodeRpcConfig) -> NodeConnector:
    """Connector that opens a fresh :class:`NodeRpc` per grant."""

    def _connect() -> AsyncContextManager[NodeClient]:
        return NodeRpc(config)

    return _connect


@dataclass(frozen=True)
class Issuance:
    tx_hash: str
    nonce: int
    recipient: str
    signed: SignedTransaction


class TransactionIssuer:
    def __init__(
        self,
        signer: SignerIdentity,
        *,
        chain_id: int,
        connect: NodeConnector,
        policy: TransferPolicy = DEFAULT_POLICY,
        node_timeout_s: float = 10.0,
    ):
        self.signer = signer
        self.chain_id = chain_id
        self.policy = policy
        self._connect = connect
        self._node_timeout_s = node_timeout_s
        self._lock = asyncio.Lock()

    @property
    def busy(self) -> bool:
        """True while a grant holds the signer lock."""
        return self._lock.locked()

    @contextlib.asynccontextmanager
    async def _guard(self) -> AsyncIterator[None]:
        with WAITING.track_inprogress():
            await self._lock.acquire()
        try:
            yield
        finally:
            self._lock.release()

    async def issue(self, recipient: str) -> Issuance:
        try:
            to_addr = validate_recipient(recipient)
            async with self._guard():
                started = time.perf_counter()
                try:
                    issuance = await self._issue_locked(to_addr)
                finally:
                    CRITICAL_SECTION_SECONDS.observe(time.perf_counter() - started)
        except FaucetError as exc:
            ISSUANCES.labels(outcome=exc.code).inc()
            log.warning(
                "faucet.issue.failed",
                recipient=recipient,
                code=exc.code,
                cause=exc.__cause__.__class__.__name__ if exc.__cause__ else None,
            )
            raise

        ISSUANCES.labels(outcome="ok").inc()
        log.info(
            "faucet.issue.ok",
            recipient=issuance.recipient,
            nonce=issuance.nonce,
            tx_hash=issuance.tx_hash,
        )
        return issuance

    async def _issue_locked(self, to_addr: str) -> Issuance:
        async with contextlib.AsyncExitStack() as stack:
            try:
                node = await stack.enter_async_context(self._connect())
            except NodeRpcError as exc:
                raise NodeUnavailable() from exc

            nonce = await self._fetch_nonce(node)
            unsigned = build_grant(nonce, to_addr, self.policy)
            signed = self.signer.sign(unsigned, self.chain_id)
            tx_hash = await self._submit(node, signed)

        if tx_hash.lower() != signed.tx_hash:
            log.warning("faucet.issue.hash_mismatch", node_hash=tx_hash, local_hash=signed.tx_hash)
        return Issuance(tx_hash=tx_hash, nonce=nonce, recipient=to_addr, signed=signed)

    async def _fetch_nonce(self, node: NodeClient) -> int:
        try:
            nonce = await asyncio.wait_for(
                node.get_pending_nonce(self.signer.address), timeout=self._node_timeout_s
            )
        except (RpcTransportError, asyncio.TimeoutError) as exc:
            raise NodeUnavailable() from exc
        except NodeRpcError as exc:
            raise NonceFetchFailed() from exc
        if isinstance(nonce, bool) or not isinstance(nonce, int) or not 0 <= nonce < 2**64:
            raise NonceFetchFailed()
        return nonce

    async def _submit(self, node: NodeClient, signed: SignedTransaction) -> str:
        try:
            return await asyncio.wait_for(
                node.send_raw_transaction(signed.raw), timeout=self._node_timeout_s
            )
        except (NodeRpcError, asyncio.TimeoutError) as exc:
            raise SubmissionFailed() from exc


__all__ = [
    "Issuance",
    "NodeClient",
    "NodeConnector",
    "TransactionIssuer",
    "node_connector",
]
