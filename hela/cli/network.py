"""
`hela network` - manage configured networks.
"""

import click
from rich.console import Console
from rich.table import Table

from ..config import Denomination, Network
from ..constants import DEFAULT_DENOMINATION_DECIMALS, DEFAULT_DENOMINATION_SYMBOL, DEFAULT_MARKER
from .common import CliContext, HelaGroup, pass_cli


@click.group("network", cls=HelaGroup)
def network():
    """Manage networks."""
    pass


@network.command("list")
@pass_cli
def list_cmd(cli_ctx: CliContext):
    """List configured networks."""
    cfg = cli_ctx.config

    table = Table("Network", "Chain Context", "RPC")
    for name in sorted(cfg.networks.all):
        net = cfg.networks.all[name]
        display = name + DEFAULT_MARKER if cfg.networks.default == name else name
        table.add_row(display, net.chain_context, net.rpc)
    Console().print(table)


@network.command("add")
@click.argument("name")
@click.argument("rpc")
@click.argument("chain_context")
@click.option("--desc", "description", default="", help="Description")
@click.option("--symbol", default=DEFAULT_DENOMINATION_SYMBOL, show_default=True, help="Denomination symbol")
@click.option("--decimals", type=click.IntRange(0, 255), default=DEFAULT_DENOMINATION_DECIMALS,
              show_default=True, help="Denomination decimal places")
@pass_cli
def add_cmd(cli_ctx: CliContext, name: str, rpc: str, chain_context: str, description: str, symbol: str, decimals: int):
    """Add a new network reachable at RPC."""
    cfg = cli_ctx.config
    cfg.networks.add(name, Network(
        chain_context=chain_context,
        rpc=rpc,
        description=description,
        denomination=Denomination(symbol=symbol, decimals=decimals),
    ))
    cfg.save()
    click.echo(click.style(f"✓ Network '{name}' added", fg="green"))


@network.command("rm")
@click.argument("name")
@pass_cli
def rm_cmd(cli_ctx: CliContext, name: str):
    """Remove an existing network."""
    cfg = cli_ctx.config
    cfg.networks.remove(name)
    cfg.save()


@network.command("set-default")
@click.argument("name")
@pass_cli
def set_default_cmd(cli_ctx: CliContext, name: str):
    """Set the default network."""
    cfg = cli_ctx.config
    cfg.networks.set_default(name)
    cfg.save()
