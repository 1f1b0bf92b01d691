"""
HELA CLI Constants

This module consolidates all global constants and environment configuration
used throughout the client. Constants are organized by category for easy
reference and maintenance.
"""
import ast
import os
from pathlib import Path
from dotenv import dotenv_values

# =============================================================================
# ENVIRONMENT CONFIGURATION
# =============================================================================
# Load environment variables once at module import
_config = dotenv_values(".env")

LOGGER_DEFAULTS = {
    'LOG_LEVEL':                       'WARNING',
    'LOG_FORMAT':                      '%(asctime)s - %(levelname)s - %(name)s - %(message)s',
    'LOG_DATE_FORMAT':                 '%Y-%m-%dT%H:%M:%S',
    'LOG_CONSOLE_HIGHLIGHTING':        'True',
    'LOG_FILE_OUTPUT':                 'False',
}

LOG_MAX_FILE_SIZE = 10 * 1024 * 1024 # 10MB
LOG_BACKUP_COUNT = 5


# ==================================================================================
# CLIENT IDENTITY
# ==================================================================================
CLI_NAME = 'hela'
CLI_VERSION = '0.3.0'

CONFIG_FILENAME = 'cli.toml'
DEFAULT_CONFIG_DIR = Path.home() / '.config' / CLI_NAME
WALLET_DIRNAME = 'wallets'

# Suffix appended to the default entry in list output
DEFAULT_MARKER = ' (*)'


# ==================================================================================
# CHAIN QUERY SENTINELS
# ==================================================================================
# Consensus height meaning "whatever is latest"
HEIGHT_LATEST = 0

# Runtime round meaning "whatever is latest" (max uint64)
ROUND_LATEST = 2 ** 64 - 1

MAX_UINT32 = 2 ** 32 - 1
MAX_UINT64 = 2 ** 64 - 1


# ==================================================================================
# DENOMINATIONS
# ==================================================================================
# Key of the native denomination inside a runtime's denomination table
NATIVE_DENOMINATION_KEY = '_'

# On-chain representation of the native denomination
NATIVE_DENOMINATION = ''

DEFAULT_DENOMINATION_SYMBOL = 'HLUSD'
DEFAULT_DENOMINATION_DECIMALS = 18


# ==================================================================================
# ADDRESSES AND SIGNATURES
# ==================================================================================
ADDRESS_HRP = 'oasis'
ADDRESS_VERSION = 0
ADDRESS_SIZE = 21  # version byte + 20 byte hash
ADDRESS_V0_ED25519_CONTEXT = b'oasis-core/address: staking'

TX_SIGNATURE_CONTEXT_BASE = 'oasis-runtime-sdk/tx: v0'
TEST_ACCOUNT_PREFIX = 'test:'
TEST_KEY_SEED_PREFIX = 'oasis-runtime-sdk/test-keys: '
TEST_ACCOUNT_NAMES = ('alice', 'bob', 'charlie', 'cory')

TRANSACTION_VERSION = 1


# ==================================================================================
# TRANSACTION DEFAULTS
# ==================================================================================
DEFAULT_GAS_PRICE = 0
RPC_TIMEOUT = float(os.environ.get('HELA_RPC_TIMEOUT', '30'))

WALLET_KDF_ITERATIONS = 100000


# ==================================================================================
# CONFIGURATION WRAPPERS
# ==================================================================================
class ConfigString(str):
    """
    String subclass that stores a default value.
    """
    def __new__(cls, value, default):
        obj = str.__new__(cls, value)
        obj._default = default
        return obj

    def default(self):
        return self._default

class ConfigBool(int):
    """
    Int subclass acting as a boolean that stores a default value.
    """
    def __new__(cls, value, default):
        obj = int.__new__(cls, bool(value))
        obj._default = default
        return obj

    def default(self):
        return self._default

    def __repr__(self):
        return str(bool(self))

    def __str__(self):
        return str(bool(self))

    def __eq__(self, other):
        return bool(self) == other

    __hash__ = int.__hash__


# ==================================================================================
# DYNAMIC CONFIGURATION LOADING
# ==================================================================================
namespace = globals()

def parse_bool(v):
    """
    Convert "True"/"False" (any casing, with surrounding whitespace) into bool.
    Avoids exceptions by only calling ast.literal_eval for known literals.
    """
    if not isinstance(v, str):
        return v
    s = v.strip()
    if not s:
        return v
    if s.casefold() in {"true", "false"}:
        return ast.literal_eval(s.title())
    return v

for key, default_raw in LOGGER_DEFAULTS.items():
    # dotenv_values returns strings or None. None is treated as missing.
    raw = _config.get(key)
    value_raw = default_raw if raw is None else raw

    value = parse_bool(value_raw)
    default_val = parse_bool(default_raw)

    if isinstance(value, bool):
        namespace[key] = ConfigBool(value, default_val)
    else:
        namespace[key] = ConfigString(value_raw, default_val)
