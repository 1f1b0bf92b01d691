"""
HELA Wallet Keystores

File-backed account storage. Each account's Ed25519 seed is encrypted with
a passphrase (PBKDF2-SHA256 + Fernet) and written to
<config dir>/wallets/<name>.json.
"""

import base64
import json
import os
from pathlib import Path
from typing import Any, Dict

from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from ..constants import WALLET_KDF_ITERATIONS
from ..crypto import Ed25519Signer
from ..exceptions import HelaError


class WalletError(HelaError):
    """Base wallet error."""
    pass


class WalletNotFoundError(WalletError):
    """Wallet file not found."""
    pass


class WalletDecryptionError(WalletError):
    """Failed to decrypt wallet."""
    pass


def _derive_fernet_key(passphrase: str, salt: bytes, iterations: int) -> bytes:
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=32,
        salt=salt,
        iterations=iterations,
    )
    return base64.urlsafe_b64encode(kdf.derive(passphrase.encode()))


def encrypt_key(key_bytes: bytes, passphrase: str) -> Dict[str, Any]:
    """
    Encrypt key bytes with a passphrase.

    Args:
        key_bytes: Key to encrypt
        passphrase: Encryption passphrase

    Returns:
        Dictionary with encrypted data and parameters
    """
    salt = os.urandom(16)
    f = Fernet(_derive_fernet_key(passphrase, salt, WALLET_KDF_ITERATIONS))
    return {
        'ciphertext': base64.b64encode(f.encrypt(key_bytes)).decode('ascii'),
        'salt': salt.hex(),
        'iterations': WALLET_KDF_ITERATIONS,
        'kdf': 'pbkdf2-sha256',
        'cipher': 'fernet',
    }


def decrypt_key(encrypted: Dict[str, Any], passphrase: str) -> bytes:
    """
    Decrypt key bytes with a passphrase.

    Raises:
        WalletDecryptionError: If decryption fails
    """
    if encrypted.get('cipher') != 'fernet':
        raise WalletDecryptionError(f"Unknown cipher: {encrypted.get('cipher')}")
    try:
        salt = bytes.fromhex(encrypted['salt'])
        f = Fernet(_derive_fernet_key(passphrase, salt, encrypted['iterations']))
        return f.decrypt(base64.b64decode(encrypted['ciphertext']))
    except InvalidToken:
        raise WalletDecryptionError("Invalid passphrase")
    except (KeyError, ValueError) as e:
        raise WalletDecryptionError(f"Corrupted keystore: {e}")


def save_keystore(path: Path, signer: Ed25519Signer, passphrase: str) -> None:
    """Encrypt *signer* and write it to *path*."""
    keystore = {
        'address': str(signer.address),
        'algorithm': 'ed25519-raw',
        'crypto': encrypt_key(signer.seed(), passphrase),
    }
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w') as f:
        json.dump(keystore, f, indent=2)
    os.chmod(path, 0o600)


def load_keystore(path: Path, passphrase: str) -> Ed25519Signer:
    """
    Load and decrypt a keystore.

    Raises:
        WalletNotFoundError: If the file does not exist
        WalletDecryptionError: If the passphrase is wrong or the file is damaged
    """
    if not path.exists():
        raise WalletNotFoundError(f"Wallet not found: {path}")

    with open(path, 'r') as f:
        keystore = json.load(f)

    signer = Ed25519Signer.from_seed(decrypt_key(keystore['crypto'], passphrase))
    if keystore.get('address') and keystore['address'] != str(signer.address):
        raise WalletDecryptionError(f"Keystore address mismatch in {path}")
    return signer
