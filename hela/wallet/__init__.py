"""
HELA Wallet

Encrypted file keystores and the deterministic test accounts.
"""

from .base import (
    WalletError,
    WalletNotFoundError,
    WalletDecryptionError,
    encrypt_key,
    decrypt_key,
    save_keystore,
    load_keystore,
)
from .accounts import (
    load_account,
    load_test_account_config,
    parse_test_account_address,
    load_test_account,
)

__all__ = [
    "WalletError",
    "WalletNotFoundError",
    "WalletDecryptionError",
    "encrypt_key",
    "decrypt_key",
    "save_keystore",
    "load_keystore",
    "load_account",
    "load_test_account_config",
    "parse_test_account_address",
    "load_test_account",
]
