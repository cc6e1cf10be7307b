from __future__ import annotations

"""
Pydantic models and validators shared by routers and services.
"""

from .common import ADDRESS_LENGTH, Hash, is_address, validate_recipient
from .faucet import ErrorResponse, FaucetResponse

__all__ = [
    "ADDRESS_LENGTH",
    "Hash",
    "is_address",
    "validate_recipient",
    "ErrorResponse",
    "FaucetResponse",
]
