"""
HELA Crypto Module

Cryptographic primitives for the HELA client:
- SHA-512/256 hashing
- Ed25519 signers with domain-separated signatures
- bech32 account addresses
"""

from .hashing import sha512_256
from .address import Address, is_valid_address
from .keys import Ed25519Signer, prepare_signer_message, verify

__all__ = [
    "sha512_256",
    "Address",
    "is_valid_address",
    "Ed25519Signer",
    "prepare_signer_message",
    "verify",
]
