from __future__ import annotations

"""
Error hierarchy for the Klaytn faucet.

Every failure the faucet can report is one of a closed set of classes rooted
at :class:`FaucetError`. Callers branch on the class (or on ``code``), never
on message text.

Every error has:
  - ``message`` (str): short, human-readable reason, safe to return to clients
  - ``status_code`` (int): HTTP status used by the gateway
  - ``code`` (str): stable machine code (e.g. "nonce_fetch_failed")

Messages never include the faucet private key or the node endpoint; the
underlying cause (if any) is chained via ``raise ... from`` and only shows up
in server-side logs.

Startup errors (``StartupError`` subclasses) are fatal: the CLI prints the
message and exits without serving. Request errors are converted into a
``{"msg": ..., "code": ...}`` response by ``middleware.errors``.
"""

from dataclasses import dataclass
from typing import Any, Dict


@dataclass(eq=False)
class FaucetError(Exception):
    message: str
    status_code: int = 500
    code: str = "server_error"

    def __post_init__(self) -> None:
        super().__init__(self.message)

    def to_body(self) -> Dict[str, Any]:
        return {"msg": self.message, "code": self.code}


# ------------------------------- Startup ------------------------------------ #


class StartupError(FaucetError):
    """Raised while validating process arguments; never reaches HTTP."""


class InvalidArguments(StartupError):
    def __init__(self, message: str = "invalid arguments"):
        super().__init__(message=message, status_code=500, code="invalid_arguments")


class InvalidChainId(StartupError):
    def __init__(self, message: str = "Invalid chainID"):
        super().__init__(message=message, status_code=500, code="invalid_chain_id")


class NodeUnreachable(StartupError):
    def __init__(
        self,
        message: str = "Invalid endpoint. Use the endpoint such as http://127.0.0.1:8551",
    ):
        super().__init__(message=message, status_code=500, code="node_unreachable")


class InvalidKeyMaterial(StartupError):
    def __init__(self, message: str = "Invalid faucet private key"):
        super().__init__(message=message, status_code=500, code="invalid_key")


# ------------------------------- Per request -------------------------------- #


class InvalidRecipient(FaucetError):
    def __init__(self, message: str = "invalid address format"):
        super().__init__(message=message, status_code=400, code="invalid_recipient")


class NodeUnavailable(FaucetError):
    def __init__(self, message: str = "failed to connect to a Klaytn node"):
        super().__init__(message=message, status_code=500, code="node_unavailable")


class NonceFetchFailed(FaucetError):
    def __init__(self, message: str = "failed to get a pending nonce"):
        super().__init__(message=message, status_code=500, code="nonce_fetch_failed")


class SigningFailed(FaucetError):
    def __init__(self, message: str = "fail to sign transaction with the faucet account"):
        super().__init__(message=message, status_code=500, code="signing_failed")


class SubmissionFailed(FaucetError):
    def __init__(self, message: str = "fail to send a transaction"):
        super().__init__(message=message, status_code=500, code="submission_failed")


__all__ = [
    "FaucetError",
    "StartupError",
    "InvalidArguments",
    "InvalidChainId",
    "NodeUnreachable",
    "InvalidKeyMaterial",
    "InvalidRecipient",
    "NodeUnavailable",
    "NonceFetchFailed",
    "SigningFailed",
    "SubmissionFailed",
]
