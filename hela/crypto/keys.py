"""
HELA Crypto Keys Module

Ed25519 signing keys for runtime transactions. Messages are domain
separated: the signer signs SHA-512/256(context || message).
"""

import base64
import binascii

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)
from cryptography.exceptions import InvalidSignature

from ..exceptions import InvalidKeyError
from .address import Address
from .hashing import sha512_256


def prepare_signer_message(context: bytes, message: bytes) -> bytes:
    """Domain-separate *message* under *context*."""
    return sha512_256(context, message)


class Ed25519Signer:
    """
    Ed25519 private key bound to its account address.

    Example:
        signer = Ed25519Signer.from_seed(seed)
        sig = signer.context_sign(b"ctx", b"payload")
    """

    def __init__(self, private_key: Ed25519PrivateKey):
        self._key = private_key
        self._public = private_key.public_key().public_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PublicFormat.Raw,
        )
        self._address = Address.from_ed25519_public_key(self._public)

    @classmethod
    def from_seed(cls, seed: bytes) -> "Ed25519Signer":
        """
        Create from a 32-byte seed.

        Raises:
            InvalidKeyError: If the seed has the wrong length
        """
        if len(seed) != 32:
            raise InvalidKeyError(f"Ed25519 seed must be 32 bytes, got {len(seed)}")
        return cls(Ed25519PrivateKey.from_private_bytes(seed))

    @classmethod
    def from_text(cls, text: str) -> "Ed25519Signer":
        """
        Create from a base64 or hex encoded private key.

        Accepts a 32-byte seed or a 64-byte seed||public key (the layout used
        by the "ed25519-raw" export format).
        """
        text = text.strip()
        raw = None
        try:
            raw = bytes.fromhex(text[2:] if text.startswith("0x") else text)
        except ValueError:
            try:
                raw = base64.b64decode(text, validate=True)
            except (binascii.Error, ValueError):
                raise InvalidKeyError("private key is neither hex nor base64")
        if len(raw) == 64:
            raw = raw[:32]
        return cls.from_seed(raw)

    @property
    def public_key(self) -> bytes:
        return self._public

    @property
    def address(self) -> Address:
        return self._address

    def seed(self) -> bytes:
        """
        Export the 32-byte seed.

        WARNING: Handle with extreme care!
        """
        return self._key.private_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PrivateFormat.Raw,
            encryption_algorithm=serialization.NoEncryption(),
        )

    def context_sign(self, context: bytes, message: bytes) -> bytes:
        """Sign *message* under *context*, returning a 64-byte signature."""
        return self._key.sign(prepare_signer_message(context, message))

    def __repr__(self) -> str:
        return f"Ed25519Signer(address={self._address})"


def verify(public_key: bytes, context: bytes, message: bytes, signature: bytes) -> bool:
    """Verify a context signature produced by Ed25519Signer.context_sign."""
    try:
        Ed25519PublicKey.from_public_bytes(public_key).verify(
            signature, prepare_signer_message(context, message)
        )
    except (InvalidSignature, ValueError):
        return False
    return True
