"""
Transaction builder: turns a nonce, a recipient and the grant policy into an
unsigned legacy value-transfer transaction.

Pure and total for in-range inputs; performs no I/O.
"""

from __future__ import annotations

from dataclasses import dataclass

# Klaytn units
PEB = 1
STON = 10**9 * PEB
KLAY = 10**18 * PEB

# Grant policy
GRANT_AMOUNT = 5 * KLAY
GAS_LIMIT = 50_000
GAS_PRICE = 25 * STON

_UINT64_MAX = 2**64 - 1
_UINT256_MAX = 2**256 - 1


@dataclass(frozen=True)
class TransferPolicy:
    amount: int = GRANT_AMOUNT
    gas_limit: int = GAS_LIMIT
    gas_price: int = GAS_PRICE


DEFAULT_POLICY = TransferPolicy()


@dataclass(frozen=True)
class UnsignedTransaction:
    nonce: int
    recipient: str
    amount: int
    gas_limit: int
    gas_price: int
    payload: bytes = b""

    def as_dict(self) -> dict:
        """Field mapping in the shape eth-account signs (legacy, no type)."""
        return {
            "nonce": self.nonce,
            "to": self.recipient,
            "value": self.amount,
            "gas": self.gas_limit,
            "gasPrice": self.gas_price,
            "data": self.payload,
        }


def _check_range(name: str, value: int, upper: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be an integer")
    if not 0 <= value <= upper:
        raise ValueError(f"{name} out of range")


def build_transaction(
    nonce: int,
    recipient: str,
    amount: int,
    gas_limit: int,
    gas_price: int,
) -> UnsignedTransaction:
    _check_range("nonce", nonce, _UINT64_MAX)
    _check_range("gas_limit", gas_limit, _UINT64_MAX)
    _check_range("amount", amount, _UINT256_MAX)
    _check_range("gas_price", gas_price, _UINT256_MAX)
    return UnsignedTransaction(
        nonce=nonce,
        recipient=recipient,
        amount=amount,
        gas_limit=gas_limit,
        gas_price=gas_price,
    )


def build_grant(nonce: int, recipient: str, policy: TransferPolicy = DEFAULT_POLICY) -> UnsignedTransaction:
    """Build the faucet's fixed grant for ``recipient`` at ``nonce``."""
    return build_transaction(nonce, recipient, policy.amount, policy.gas_limit, policy.gas_price)


__all__ = [
    "PEB",
    "STON",
    "KLAY",
    "GRANT_AMOUNT",
    "GAS_LIMIT",
    "GAS_PRICE",
    "TransferPolicy",
    "DEFAULT_POLICY",
    "UnsignedTransaction",
    "build_transaction",
    "build_grant",
]
