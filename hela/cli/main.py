#!/usr/bin/env python3
"""
HELA CLI

Command-line interface for the HELA network and its runtimes.

Usage:
    hela network  list|add|rm|set-default
    hela runtime  list|add|rm|set-default
    hela wallet   import|list|rm|set-default
    hela managest showproposal|showroles|showquorums|initowners|propose|vote
"""

from typing import Optional

import click

from ..constants import CLI_NAME, CLI_VERSION
from ..logger import set_log_level
from .common import CliContext, HelaGroup
from .managest import managest
from .network import network
from .paratime import runtime
from .wallet import wallet

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


@click.group(cls=HelaGroup)
@click.version_option(version=CLI_VERSION, prog_name=CLI_NAME)
@click.option("--config", "config_path", type=click.Path(dir_okay=False), default=None,
              help="Config file to use")
@click.option("--log-level", type=click.Choice(LOG_LEVELS, case_sensitive=False), default=None,
              help="Override LOG_LEVEL")
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[str], log_level: Optional[str]):
    """CLI for interacting with the HELA network."""
    if log_level:
        set_log_level(log_level.upper())
    ctx.obj = CliContext(config_path)


cli.add_command(network)
cli.add_command(runtime)
cli.add_command(wallet)
cli.add_command(managest)


def main():
    cli()


if __name__ == "__main__":
    main()
