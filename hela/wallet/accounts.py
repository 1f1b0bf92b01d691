"""
Account resolution for signing.

Accounts come from two places: the reserved `test:<name>` namespace, which
maps to deterministic, publicly known keys, and the wallet in cli.toml.
"""

import os
from typing import Callable, Optional

from ..config import AccountConfig, CliConfig
from ..constants import (
    TEST_ACCOUNT_NAMES,
    TEST_ACCOUNT_PREFIX,
    TEST_KEY_SEED_PREFIX,
)
from ..crypto import Ed25519Signer, sha512_256
from ..exceptions import AccountNotFound
from ..logger import get_logger
from .base import load_keystore

logger = get_logger(__name__)

PassphraseProvider = Callable[[str], str]


def parse_test_account_address(name: str) -> str:
    """Return the test account name for `test:<name>`, or "" for anything else."""
    if name.startswith(TEST_ACCOUNT_PREFIX):
        return name[len(TEST_ACCOUNT_PREFIX):]
    return ""


def load_test_account(name: str) -> Ed25519Signer:
    """
    Deterministic signer of a well-known test account.

    Raises:
        AccountNotFound: If *name* is not a known test account
    """
    if name not in TEST_ACCOUNT_NAMES:
        raise AccountNotFound(f"{TEST_ACCOUNT_PREFIX}{name}")
    return Ed25519Signer.from_seed(sha512_256(TEST_KEY_SEED_PREFIX + name))


def load_test_account_config(name: str) -> AccountConfig:
    """Wallet-style entry describing a test account."""
    signer = load_test_account(name)
    return AccountConfig(
        address=str(signer.address),
        kind="test",
        description=f"Test account {name}",
    )


def _env_passphrase(name: str) -> str:
    passphrase = os.environ.get("HELA_WALLET_PASSPHRASE")
    if passphrase is None:
        raise AccountNotFound(name)
    return passphrase


def load_account(
    cfg: CliConfig,
    name: str,
    passphrase_provider: Optional[PassphraseProvider] = None,
) -> Ed25519Signer:
    """
    Load the signing key of account *name*.

    Args:
        cfg: Client configuration
        name: Account name (wallet entry or `test:<name>`)
        passphrase_provider: Called with the account name to obtain the
            keystore passphrase; defaults to HELA_WALLET_PASSPHRASE

    Raises:
        AccountNotFound: If the account does not exist
        WalletDecryptionError: If the keystore cannot be decrypted
    """
    if test_name := parse_test_account_address(name):
        return load_test_account(test_name)

    account = cfg.wallet.all.get(name)
    if account is None:
        raise AccountNotFound(name)

    provider = passphrase_provider or _env_passphrase
    signer = load_keystore(cfg.wallet_dir / f"{name}.json", provider(name))
    logger.debug("Loaded account %s (%s)", name, signer.address)
    return signer
