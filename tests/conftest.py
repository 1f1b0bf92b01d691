"""
Shared fixtures: an on-disk cli.toml with one runtime-bearing network and
one bare network, isolated from the user's environment.
"""

import os
import sys
from unittest.mock import MagicMock

import pytest

# ── Path setup ────────────────────────────────────────────────────────
ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from hela.client import BlockHeader, SubmitResult
from hela.config import CliConfig, Denomination, Network, ParaTime
from hela.wallet import load_test_account

RUNTIME_ID = "00" * 31 + "01"
CHAIN_CONTEXT = "ab" * 32


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    for var in ("HELA_NETWORK", "HELA_RUNTIME", "HELA_ACCOUNT", "HELA_CONFIG", "HELA_WALLET_PASSPHRASE"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("HELA_CONFIG_DIR", str(tmp_path / "config-dir"))


@pytest.fixture
def paratime():
    return ParaTime(
        id=RUNTIME_ID,
        description="Stablecoin runtime",
        denominations={"_": Denomination(symbol="HLUSD", decimals=18)},
    )


@pytest.fixture
def cli_config(tmp_path, paratime):
    """Saved config: `testnet` (default, runtime `sapphire`) and `bare` (no runtime)."""
    cfg = CliConfig(path=tmp_path / "cli.toml")
    testnet = Network(chain_context=CHAIN_CONTEXT, rpc="http://localhost:8545")
    testnet.paratimes.add("sapphire", paratime)
    cfg.networks.add("testnet", testnet)
    cfg.networks.add("bare", Network(chain_context=CHAIN_CONTEXT, rpc="http://localhost:9545"))
    cfg.save()
    return cfg


@pytest.fixture
def config_path(cli_config):
    return str(cli_config.path)


@pytest.fixture
def alice():
    return load_test_account("alice")


@pytest.fixture
def bob():
    return load_test_account("bob")


@pytest.fixture
def fake_connection():
    """MagicMock standing in for hela.client.Connection."""
    conn = MagicMock()
    conn.__enter__.return_value = conn
    runtime = conn.runtime.return_value
    runtime.accounts.nonce.return_value = 3
    runtime.core.estimate_gas.return_value = 25000
    runtime.submit_tx.return_value = SubmitResult(hash="cafe", round=11)
    conn.consensus.return_value.get_chain_context.return_value = CHAIN_CONTEXT
    conn.consensus.return_value.get_latest_block.return_value = BlockHeader(round=77)
    return conn
