"""
HELA CLI Configuration

Loads cli.toml (networks, runtimes, wallet) at startup and persists
changes made by the configuration commands.
"""

from .loader import (
    AccountConfig,
    CliConfig,
    Denomination,
    Network,
    Networks,
    ParaTime,
    ParaTimes,
    Wallet,
    config_directory,
    load_config,
    validate_identifier,
)

__all__ = [
    "AccountConfig",
    "CliConfig",
    "Denomination",
    "Network",
    "Networks",
    "ParaTime",
    "ParaTimes",
    "Wallet",
    "config_directory",
    "load_config",
    "validate_identifier",
]
