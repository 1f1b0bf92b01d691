"""
HELA Crypto Hashing Module

SHA-512/256 is used everywhere the chain needs a digest: address
derivation, signature domain separation and runtime signature contexts.
"""

from typing import Union

from Crypto.Hash import SHA512


def sha512_256(*chunks: Union[bytes, str]) -> bytes:
    """
    Compute SHA-512/256 over the concatenation of *chunks*.

    Args:
        chunks: Byte strings (str values are UTF-8 encoded)

    Returns:
        32-byte digest
    """
    h = SHA512.new(truncate="256")
    for chunk in chunks:
        if isinstance(chunk, str):
            chunk = chunk.encode('utf-8')
        h.update(chunk)
    return h.digest()

