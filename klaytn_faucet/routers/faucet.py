from __future__ import annotations

"""
Faucet Router

Endpoint:
  - GET /faucet/{address} : send the fixed grant to ``address``.

Responses:
  - 200 {"txHash": "0x..."}
  - 400 {"msg": "invalid address format", ...}   before any node interaction
  - 500 {"msg": <reason>, ...}                    node / nonce / signing / submit
"""

from fastapi import APIRouter, Depends, Request

from ..errors import InvalidRecipient
from ..logging import get_logger
from ..models.common import ADDRESS_LENGTH
from ..models.faucet import ErrorResponse, FaucetResponse
from ..services.issuer import TransactionIssuer

log = get_logger(__name__)

router = APIRouter(tags=["faucet"])


def get_issuer(request: Request) -> TransactionIssuer:
    return request.app.state.issuer


@router.get(
    "/faucet/{address}",
    summary="Send the faucet grant to an address",
    response_model=FaucetResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def get_faucet(address: str, issuer: TransactionIssuer = Depends(get_issuer)) -> FaucetResponse:
    """
    Transfer the fixed grant from the faucet account to ``address``
    (``0x`` + 40 hex digits) and return the transaction hash.
    """
    if len(address) != ADDRESS_LENGTH:
        raise InvalidRecipient()
    log.debug("GET /faucet", address=address)
    issuance = await issuer.issue(address)
    return FaucetResponse(tx_hash=issuance.tx_hash)
