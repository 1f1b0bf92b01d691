"""
Shared click plumbing: the per-invocation context object and the group
class that reports client errors the way click reports usage errors.
"""

import os
from typing import Optional

import click

from ..config import CliConfig, load_config
from ..exceptions import HelaError


class CliContext:
    """State shared by the commands of one invocation."""

    def __init__(self, config_path: Optional[str] = None):
        self.config_path = config_path
        self._config: Optional[CliConfig] = None

    @property
    def config(self) -> CliConfig:
        """cli.toml, loaded on first use."""
        if self._config is None:
            self._config = load_config(self.config_path)
        return self._config


pass_cli = click.make_pass_decorator(CliContext, ensure=True)


def prompt_passphrase(name: str) -> str:
    """Keystore passphrase from HELA_WALLET_PASSPHRASE, else asked for."""
    if passphrase := os.environ.get("HELA_WALLET_PASSPHRASE"):
        return passphrase
    return click.prompt(f"Passphrase for account '{name}'", hide_input=True)


class HelaGroup(click.Group):
    """Group turning HelaError into a ClickException (message on stderr, exit 1)."""

    def invoke(self, ctx):
        try:
            return super().invoke(ctx)
        except HelaError as e:
            raise click.ClickException(str(e)) from e
