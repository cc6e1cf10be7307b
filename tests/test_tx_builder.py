from __future__ import annotations

import pytest

from klaytn_faucet.services.tx_builder import (
    DEFAULT_POLICY,
    GAS_LIMIT,
    GAS_PRICE,
    GRANT_AMOUNT,
    KLAY,
    STON,
    UnsignedTransaction,
    build_grant,
    build_transaction,
)

from .conftest import RECIPIENT


def test_policy_constants_match_klaytn_units():
    assert GRANT_AMOUNT == 5 * 10**18
    assert GAS_LIMIT == 50_000
    assert GAS_PRICE == 25 * 10**9
    assert KLAY == 10**9 * STON


def test_build_transaction_carries_fields_verbatim():
    tx = build_transaction(7, RECIPIENT, 5 * KLAY, 50_000, 25 * STON)
    assert tx == UnsignedTransaction(
        nonce=7,
        recipient=RECIPIENT,
        amount=5 * KLAY,
        gas_limit=50_000,
        gas_price=25 * STON,
        payload=b"",
    )


def test_build_grant_uses_fixed_policy():
    tx = build_grant(0, RECIPIENT)
    assert (tx.amount, tx.gas_limit, tx.gas_price) == (
        DEFAULT_POLICY.amount,
        DEFAULT_POLICY.gas_limit,
        DEFAULT_POLICY.gas_price,
    )
    assert tx.payload == b""


def test_as_dict_is_legacy_shape():
    d = build_grant(3, RECIPIENT).as_dict()
    assert set(d) == {"nonce", "to", "value", "gas", "gasPrice", "data"}
    assert d["to"] == RECIPIENT
    assert d["nonce"] == 3


def test_unsigned_transaction_is_frozen():
    tx = build_grant(1, RECIPIENT)
    with pytest.raises(AttributeError):
        tx.nonce = 2  # type: ignore[misc]


@pytest.mark.parametrize(
    "kwargs",
    [
        {"nonce": -1},
        {"nonce": 2**64},
        {"gas_limit": -5},
        {"amount": 2**256},
        {"gas_price": 1.5},
        {"nonce": True},
    ],
)
def test_out_of_range_values_rejected(kwargs):
    args = {"nonce": 0, "amount": 1, "gas_limit": 21_000, "gas_price": 1}
    args.update(kwargs)
    with pytest.raises(ValueError):
        build_transaction(args["nonce"], RECIPIENT, args["amount"], args["gas_limit"], args["gas_price"])


def test_upper_bounds_are_inclusive():
    tx = build_transaction(2**64 - 1, RECIPIENT, 2**256 - 1, 2**64 - 1, 2**256 - 1)
    assert tx.nonce == 2**64 - 1
