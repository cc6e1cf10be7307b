"""
Faucet core: signing identity, transaction builder and the issuer that ties
them to a Klaytn node.
"""

from __future__ import annotations

from .issuer import Issuance, TransactionIssuer, node_connector
from .signer import SignedTransaction, SignerIdentity
from .tx_builder import DEFAULT_POLICY, TransferPolicy, UnsignedTransaction, build_transaction

__all__ = [
    "Issuance",
    "TransactionIssuer",
    "node_connector",
    "SignedTransaction",
    "SignerIdentity",
    "DEFAULT_POLICY",
    "TransferPolicy",
    "UnsignedTransaction",
    "build_transaction",
]
