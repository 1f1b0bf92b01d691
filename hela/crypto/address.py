"""
HELA Crypto Address Module

Runtime accounts are identified by a 21-byte address (version byte followed
by a truncated SHA-512/256 of the versioned context and public key), shown to
users in bech32 with the `oasis` human-readable part.
"""

from dataclasses import dataclass

import bech32

from ..constants import (
    ADDRESS_HRP,
    ADDRESS_SIZE,
    ADDRESS_VERSION,
    ADDRESS_V0_ED25519_CONTEXT,
)
from ..exceptions import InvalidAddressError
from .hashing import sha512_256


@dataclass(frozen=True)
class Address:
    """Canonical runtime account address."""
    raw: bytes

    def __post_init__(self):
        if len(self.raw) != ADDRESS_SIZE:
            raise InvalidAddressError(
                f"address must be {ADDRESS_SIZE} bytes, got {len(self.raw)}"
            )

    @classmethod
    def from_bech32(cls, text: str) -> "Address":
        """
        Parse a bech32 address string.

        Raises:
            InvalidAddressError: If the string is not a valid address
        """
        hrp, data = bech32.bech32_decode(text)
        if hrp is None or data is None:
            raise InvalidAddressError(f"malformed bech32 address: {text}")
        if hrp != ADDRESS_HRP:
            raise InvalidAddressError(f"unexpected address prefix: {hrp}")
        raw = bech32.convertbits(data, 5, 8, False)
        if raw is None:
            raise InvalidAddressError(f"malformed bech32 payload: {text}")
        return cls(bytes(raw))

    @classmethod
    def from_ed25519_public_key(cls, public_key: bytes) -> "Address":
        """Derive the address of an Ed25519 signer."""
        return cls.from_context(ADDRESS_V0_ED25519_CONTEXT, ADDRESS_VERSION, public_key)

    @classmethod
    def from_context(cls, context: bytes, version: int, data: bytes) -> "Address":
        digest = sha512_256(context, bytes([version]), data)
        return cls(bytes([version]) + digest[:ADDRESS_SIZE - 1])

    @property
    def version(self) -> int:
        return self.raw[0]

    def to_bech32(self) -> str:
        return bech32.bech32_encode(ADDRESS_HRP, bech32.convertbits(self.raw, 8, 5))

    def __str__(self) -> str:
        return self.to_bech32()


def is_valid_address(text: str) -> bool:
    """Check if *text* is a well-formed bech32 account address."""
    try:
        Address.from_bech32(text)
    except InvalidAddressError:
        return False
    return True
