"""
`hela runtime` - manage the runtimes configured under each network.
"""

from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from ..config import Denomination, ParaTime
from ..constants import DEFAULT_MARKER, NATIVE_DENOMINATION_KEY
from ..exceptions import NetworkNotFound
from .common import CliContext, HelaGroup, pass_cli


@click.group("runtime", cls=HelaGroup)
def runtime():
    """Manage runtimes."""
    pass


@runtime.command("list")
@pass_cli
def list_cmd(cli_ctx: CliContext):
    """List configured runtimes."""
    cfg = cli_ctx.config

    rows = []
    for net_name, net in cfg.networks.all.items():
        for pt_name, pt in net.paratimes.all.items():
            display = pt_name + DEFAULT_MARKER if net.paratimes.default == pt_name else pt_name
            rows.append((net_name, display, pt.id))
    rows.sort(key=lambda row: (row[0], row[1]))

    table = Table("Network", "Runtime", "ID")
    for row in rows:
        table.add_row(*row)
    Console().print(table)


@runtime.command("add")
@click.argument("network")
@click.argument("name")
@click.argument("runtime_id", metavar="ID")
@click.option("--desc", "description", default=None, help="Description")
@click.option("--symbol", default=None, help="Native denomination symbol")
@click.option("--exponent", type=click.IntRange(0, 255), default=None, help="Native denomination decimal places")
@pass_cli
def add_cmd(
    cli_ctx: CliContext,
    network: str,
    name: str,
    runtime_id: str,
    description: Optional[str],
    symbol: Optional[str],
    exponent: Optional[int],
):
    """Add a new runtime to NETWORK."""
    cfg = cli_ctx.config
    net = cfg.networks.all.get(network)
    if net is None:
        raise NetworkNotFound(network)

    pt = ParaTime(id=runtime_id)
    pt.validate()

    if description is None:
        description = click.prompt("Description", default="", show_default=False)
    if symbol is None:
        symbol = click.prompt("Denomination symbol", default=net.denomination.symbol)
    if exponent is None:
        exponent = click.prompt(
            "Denomination decimal places",
            type=click.IntRange(0, 255),
            default=net.denomination.decimals,
        )

    pt.description = description
    pt.denominations = {NATIVE_DENOMINATION_KEY: Denomination(symbol=symbol, decimals=exponent)}

    net.paratimes.add(name, pt)
    cfg.save()
    click.echo(click.style(f"✓ Runtime '{name}' added to network '{network}'", fg="green"))


@runtime.command("rm")
@click.argument("network")
@click.argument("name")
@pass_cli
def rm_cmd(cli_ctx: CliContext, network: str, name: str):
    """Remove an existing runtime."""
    cfg = cli_ctx.config
    net = cfg.networks.all.get(network)
    if net is None:
        raise NetworkNotFound(network)

    net.paratimes.remove(name)
    cfg.save()


@runtime.command("set-default")
@click.argument("network")
@click.argument("name")
@pass_cli
def set_default_cmd(cli_ctx: CliContext, network: str, name: str):
    """Set the default runtime of NETWORK."""
    cfg = cli_ctx.config
    net = cfg.networks.all.get(network)
    if net is None:
        raise NetworkNotFound(network)

    net.paratimes.set_default(name)
    cfg.save()
