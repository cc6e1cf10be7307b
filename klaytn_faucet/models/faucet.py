from __future__ import annotations

"""
Faucet models

- FaucetResponse: the hash of the broadcast grant transaction, serialized as
  ``{"txHash": "0x..."}``.
- ErrorResponse: ``{"msg": <reason>, "code": <kind>}`` for 4xx/5xx replies.
"""

from pydantic import BaseModel, ConfigDict, Field

from .common import Hash


class FaucetResponse(BaseModel):
    """Result of a successful grant."""

    tx_hash: Hash = Field(..., alias="txHash", description="Hash of the grant transaction.")

    model_config = ConfigDict(populate_by_name=True, extra="forbid")


class ErrorResponse(BaseModel):
    msg: str = Field(..., description="Short reason, safe to show to users.")
    code: str = Field(..., description="Stable machine-readable error kind.")


__all__ = ["FaucetResponse", "ErrorResponse"]
