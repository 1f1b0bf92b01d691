"""
HELA command-line client.

Selects a network, runtime and account from cli.toml and drives the
stablecoin governance calls of the runtime accounts module.
"""

from .constants import CLI_VERSION

__version__ = CLI_VERSION
