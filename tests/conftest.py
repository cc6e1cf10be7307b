from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any, AsyncIterator, List, Optional, Tuple

import pytest
import pytest_asyncio
from eth_utils import keccak
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from klaytn_faucet.app import create_app
from klaytn_faucet.config import Settings
from klaytn_faucet.services.issuer import TransactionIssuer
from klaytn_faucet.services.signer import SignerIdentity

# Well-known throwaway test key; never funded anywhere that matters.
FAUCET_KEY = "4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318"
CHAIN_ID = 1001
RPC_URL = "http://node.test:8551/"
RECIPIENT = "0x" + "aa" * 20


# ----------------------------
# Fake Klaytn node
# ----------------------------
@dataclass
class NodeState:
    """
    Shared state behind every FakeNode connection: a pending nonce that
    advances on each accepted transaction, plus call bookkeeping.
    """

    next_nonce: int = 7
    nonce_errors: List[Exception] = field(default_factory=list)
    send_errors: List[Exception] = field(default_factory=list)
    connect_error: Optional[Exception] = None
    nonce_delay_s: float = 0.0
    calls: List[Tuple[str, Any]] = field(default_factory=list)
    sent: List[bytes] = field(default_factory=list)
    opened: int = 0
    closed: int = 0
    active: int = 0
    max_active: int = 0


class FakeNode:
    """
    Test double for klaytn_faucet.adapters.node_rpc.NodeRpc: async context
    manager with get_pending_nonce / send_raw_transaction.
    """

    def __init__(self, state: NodeState) -> None:
        self.state = state

    async def __aenter__(self) -> "FakeNode":
        if self.state.connect_error is not None:
            raise self.state.connect_error
        self.state.opened += 1
        self.state.active += 1
        self.state.max_active = max(self.state.max_active, self.state.active)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        self.state.active -= 1
        self.state.closed += 1

    async def get_pending_nonce(self, address: str) -> int:
        self.state.calls.append(("nonce", address))
        if self.state.nonce_delay_s:
            await asyncio.sleep(self.state.nonce_delay_s)
        # yield so concurrent callers get a chance to interleave
        await asyncio.sleep(0)
        if self.state.nonce_errors:
            raise self.state.nonce_errors.pop(0)
        return self.state.next_nonce

    async def send_raw_transaction(self, raw_tx: bytes) -> str:
        self.state.calls.append(("send", raw_tx))
        await asyncio.sleep(0)
        if self.state.send_errors:
            raise self.state.send_errors.pop(0)
        self.state.sent.append(raw_tx)
        self.state.next_nonce += 1
        return "0x" + keccak(raw_tx).hex()


# ----------------------------
# Core fixtures
# ----------------------------
@pytest.fixture
def signer() -> SignerIdentity:
    return SignerIdentity.from_hex(FAUCET_KEY)


@pytest.fixture
def node_state() -> NodeState:
    return NodeState()


@pytest.fixture
def connect(node_state: NodeState):
    return lambda: FakeNode(node_state)


@pytest.fixture
def issuer(signer: SignerIdentity, connect) -> TransactionIssuer:
    return TransactionIssuer(signer, chain_id=CHAIN_ID, connect=connect, node_timeout_s=1.0)


@pytest.fixture
def settings() -> Settings:
    return Settings(chain_id=CHAIN_ID, rpc_url=RPC_URL, faucet_key=FAUCET_KEY)


# ----------------------------
# FastAPI application fixtures
# ----------------------------
@pytest.fixture
def app(settings: Settings, connect) -> FastAPI:
    """App wired to the fake node."""
    return create_app(settings, connect=connect)


@pytest_asyncio.fixture
async def aclient(app: FastAPI) -> AsyncIterator[AsyncClient]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client
