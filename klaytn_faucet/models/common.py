from __future__ import annotations

"""
Common API model types: Address and Hash.

- Address:  0x + 40 hex digits (20 bytes), any letter case; normalized to the
            EIP-55 checksummed form.
- Hash:     0x + 64 hex digits (32 bytes), kept exactly as the node sent it.

Checksums are not enforced on input: a mixed-case address with a wrong
checksum is still a syntactically valid 20-byte account identifier.
"""

import re
from typing import Annotated

from eth_utils import to_checksum_address
from pydantic import AfterValidator

from ..errors import InvalidRecipient

ADDRESS_LENGTH = 42  # "0x" + 40 hex digits

_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")
_HASH_RE = re.compile(r"^0x[0-9a-fA-F]{64}$")


def validate_recipient(value: str) -> str:
    """
    Check that ``value`` is a 20-byte hex account identifier and return its
    checksummed form. Raises :class:`InvalidRecipient` otherwise.
    """
    if not isinstance(value, str) or len(value) != ADDRESS_LENGTH:
        raise InvalidRecipient()
    if not _ADDRESS_RE.match(value):
        raise InvalidRecipient()
    return to_checksum_address(value)


def _validate_hash(v: str) -> str:
    if not isinstance(v, str):
        raise TypeError("hash must be a string")
    if not _HASH_RE.match(v):
        raise ValueError("hash must be 0x + 64 hex chars")
    return v


Hash = Annotated[str, AfterValidator(_validate_hash)]


def is_address(value: str) -> bool:
    try:
        validate_recipient(value)
        return True
    except InvalidRecipient:
        return False


__all__ = ["ADDRESS_LENGTH", "Hash", "validate_recipient", "is_address"]
