"""
Faucet signing identity.

Holds the faucet private key and its derived address, and signs legacy
transactions with the EIP-155 scheme Klaytn uses for them:

    sighash = keccak(rlp([nonce, gasPrice, gas, to, value, data, chainId, 0, 0]))
    v       = chainId * 2 + 35 + recovery_id

Signatures use RFC 6979 deterministic nonces (eth-account / eth-keys), so
signing the same transaction for the same chain twice yields identical bytes.

The key is kept inside an eth-account ``LocalAccount`` and never rendered by
``repr``/``str`` or included in any error message.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from eth_account import Account
from eth_account.signers.local import LocalAccount
from eth_utils import to_checksum_address

from ..errors import InvalidKeyMaterial, SigningFailed
from .tx_builder import UnsignedTransaction

_KEY_RE = re.compile(r"^(0x)?[0-9a-fA-F]{64}$")


@dataclass(frozen=True)
class SignedTransaction:
    transaction: UnsignedTransaction
    chain_id: int
    v: int
    r: int
    s: int
    raw: bytes = field(repr=False)
    tx_hash: str

    @property
    def raw_hex(self) -> str:
        return "0x" + self.raw.hex()


class SignerIdentity:
    """Faucet key + derived address. Immutable once constructed."""

    __slots__ = ("_account",)

    def __init__(self, account: LocalAccount):
        object.__setattr__(self, "_account", account)

    def __setattr__(self, name, value):
        raise AttributeError("SignerIdentity is immutable")

    @classmethod
    def from_hex(cls, secret: str) -> "SignerIdentity":
        """
        Build an identity from a 32-byte hex key (``0x`` prefix optional).
        Raises :class:`InvalidKeyMaterial` for anything else.
        """
        if not isinstance(secret, str):
            raise InvalidKeyMaterial()
        secret = secret.strip()
        if not _KEY_RE.match(secret):
            raise InvalidKeyMaterial()
        try:
            account = Account.from_key(secret if secret.startswith("0x") else "0x" + secret)
        except Exception:
            # zero key or a key outside the secp256k1 group order; the cause
            # is dropped so the key cannot surface in a traceback
            raise InvalidKeyMaterial() from None
        return cls(account)

    @property
    def address(self) -> str:
        return self._account.address

    def sign(self, transaction: UnsignedTransaction, chain_id: int) -> SignedTransaction:
        tx = transaction.as_dict()
        tx["chainId"] = chain_id
        try:
            tx["to"] = to_checksum_address(transaction.recipient)
            signed = self._account.sign_transaction(tx)
        except Exception as exc:
            raise SigningFailed() from exc
        return SignedTransaction(
            transaction=transaction,
            chain_id=chain_id,
            v=signed.v,
            r=signed.r,
            s=signed.s,
            raw=bytes(signed.raw_transaction),
            tx_hash="0x" + bytes(signed.hash).hex(),
        )

    def __repr__(self) -> str:
        return f"SignerIdentity(address={self.address})"

    __str__ = __repr__


__all__ = ["SignerIdentity", "SignedTransaction"]
