from __future__ import annotations

import json

import httpx
import pytest
import respx
import rlp
from eth_account import Account
from eth_utils import keccak
from httpx import ASGITransport, AsyncClient

from klaytn_faucet.adapters.node_rpc import RpcResponseError, RpcTransportError
from klaytn_faucet.app import create_app
from klaytn_faucet.errors import SigningFailed
from klaytn_faucet.services.signer import SignerIdentity
from klaytn_faucet.services.tx_builder import GAS_LIMIT, GAS_PRICE, GRANT_AMOUNT

from .conftest import CHAIN_ID, FAUCET_KEY, RECIPIENT, RPC_URL


def _int(b: bytes) -> int:
    return int.from_bytes(b, "big")


@pytest.mark.asyncio
async def test_grant_returns_tx_hash(aclient, node_state):
    r = await aclient.get(f"/faucet/{RECIPIENT}")

    assert r.status_code == 200, r.text
    body = r.json()
    assert set(body) == {"txHash"}
    assert body["txHash"] == "0x" + keccak(node_state.sent[0]).hex()


@pytest.mark.asyncio
@pytest.mark.parametrize("address", ["0x" + "a" * 39, "0x" + "a" * 41, "abc"])
async def test_wrong_length_is_400_before_node(aclient, node_state, address):
    r = await aclient.get(f"/faucet/{address}")

    assert r.status_code == 400
    assert r.json()["msg"] == "invalid address format"
    assert node_state.opened == 0


@pytest.mark.asyncio
async def test_non_hex_address_of_right_length_is_400(aclient, node_state):
    r = await aclient.get("/faucet/0x" + "z" * 40)

    assert r.status_code == 400
    assert r.json()["code"] == "invalid_recipient"
    assert node_state.calls == []


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "setup, msg, code",
    [
        (
            lambda s: s.nonce_errors.append(RpcResponseError(-32000, "x")),
            "failed to get a pending nonce",
            "nonce_fetch_failed",
        ),
        (
            lambda s: setattr(s, "connect_error", RpcTransportError("refused")),
            "failed to connect to a Klaytn node",
            "node_unavailable",
        ),
        (
            lambda s: s.send_errors.append(RpcResponseError(-32000, "nonce too low")),
            "fail to send a transaction",
            "submission_failed",
        ),
    ],
)
async def test_node_failures_map_to_500(aclient, node_state, setup, msg, code):
    setup(node_state)

    r = await aclient.get(f"/faucet/{RECIPIENT}")

    assert r.status_code == 500
    body = r.json()
    assert body["msg"] == msg
    assert body["code"] == code
    assert "nonce too low" not in r.text
    assert FAUCET_KEY not in r.text.lower()


@pytest.mark.asyncio
async def test_signing_failure_maps_to_500(aclient, node_state, monkeypatch):
    def broken_sign(self, transaction, chain_id):
        raise SigningFailed()

    monkeypatch.setattr(SignerIdentity, "sign", broken_sign)

    r = await aclient.get(f"/faucet/{RECIPIENT}")

    assert r.status_code == 500
    assert r.json()["msg"] == "fail to sign transaction with the faucet account"
    assert r.json()["code"] == "signing_failed"
    assert [c[0] for c in node_state.calls] == ["nonce"]
    assert node_state.opened == node_state.closed == 1


@pytest.mark.asyncio
async def test_request_id_is_echoed(aclient):
    r = await aclient.get(f"/faucet/{RECIPIENT}", headers={"X-Request-Id": "req-123"})
    assert r.headers["X-Request-Id"] == "req-123"

    r = await aclient.get("/faucet/0x1")
    assert r.headers.get("X-Request-Id")
    assert r.json()["requestId"] == r.headers["X-Request-Id"]


@pytest.mark.asyncio
async def test_unknown_route_is_json_404(aclient):
    r = await aclient.get("/nope")
    assert r.status_code == 404
    assert r.json()["code"] == "http_error"


@pytest.mark.asyncio
async def test_grant_through_json_rpc_node(settings, signer):
    """Full path: HTTP request -> issuer -> NodeRpc -> mocked Klaytn JSON-RPC."""
    submitted = []

    def klaytn_node(request: httpx.Request) -> httpx.Response:
        call = json.loads(request.content)
        if call["method"] == "klay_getTransactionCount":
            assert call["params"] == [signer.address, "pending"]
            result = "0x7"
        elif call["method"] == "klay_sendRawTransaction":
            raw = bytes.fromhex(call["params"][0][2:])
            submitted.append(raw)
            result = "0x" + keccak(raw).hex()
        else:
            error = {"code": -32601, "message": "method not found"}
            return httpx.Response(200, json={"jsonrpc": "2.0", "id": call["id"], "error": error})
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": call["id"], "result": result})

    app = create_app(settings)
    with respx.mock(assert_all_called=True) as router:
        router.post(RPC_URL).mock(side_effect=klaytn_node)
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as client:
            r = await client.get(f"/faucet/{RECIPIENT}")

    assert r.status_code == 200, r.text
    assert len(submitted) == 1
    raw = submitted[0]
    assert r.json()["txHash"] == "0x" + keccak(raw).hex()

    nonce, gas_price, gas, to, value, data, v, _r, _s = rlp.decode(raw)
    assert _int(nonce) == 7
    assert _int(gas_price) == GAS_PRICE
    assert _int(gas) == GAS_LIMIT
    assert _int(value) == GRANT_AMOUNT
    assert to == bytes.fromhex(RECIPIENT[2:])
    assert data == b""
    assert _int(v) in (CHAIN_ID * 2 + 35, CHAIN_ID * 2 + 36)
    assert Account.recover_transaction(raw) == signer.address


def _jsonrpc_node(nonce_reply: dict, send_reply: dict):
    def handler(request: httpx.Request) -> httpx.Response:
        call = json.loads(request.content)
        reply = nonce_reply if call["method"] == "klay_getTransactionCount" else send_reply
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": call["id"], **reply})

    return handler


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "nonce_reply, send_reply, code",
    [
        ({"error": {"code": None, "message": "odd"}}, {"result": "0x" + "ab" * 32}, "nonce_fetch_failed"),
        ({"error": {"code": "x", "message": "odd"}}, {"result": "0x" + "ab" * 32}, "nonce_fetch_failed"),
        ({"result": "0x7"}, {"result": "0x1234"}, "submission_failed"),
        ({"result": "0x7"}, {"result": None}, "submission_failed"),
    ],
)
async def test_odd_node_replies_are_classified(settings, nonce_reply, send_reply, code):
    app = create_app(settings)
    with respx.mock:
        respx.post(RPC_URL).mock(side_effect=_jsonrpc_node(nonce_reply, send_reply))
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as client:
            r = await client.get(f"/faucet/{RECIPIENT}")

    assert r.status_code == 500
    assert r.json()["code"] == code


@pytest.mark.asyncio
async def test_node_hash_is_echoed_unchanged(settings):
    echoed = "0x" + "Ab" * 32
    app = create_app(settings)
    with respx.mock:
        respx.post(RPC_URL).mock(side_effect=_jsonrpc_node({"result": "0x0"}, {"result": echoed}))
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as client:
            r = await client.get(f"/faucet/{RECIPIENT}")

    assert r.status_code == 200, r.text
    assert r.json() == {"txHash": echoed}
