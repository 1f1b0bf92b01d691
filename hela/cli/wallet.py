"""
`hela wallet` - manage file-backed accounts.

Usage:
    hela wallet import <name> [--ed25519-priv KEY]
    hela wallet list
    hela wallet rm <name> [--yes]
    hela wallet set-default <name>
"""

import os
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from ..config import AccountConfig
from ..constants import DEFAULT_MARKER
from ..crypto import Ed25519Signer
from ..exceptions import AccountNotFound, ConfigurationError
from ..logger import get_logger
from ..wallet import save_keystore
from .common import CliContext, HelaGroup, pass_cli

logger = get_logger(__name__)

MIN_PASSPHRASE_LENGTH = 8


def get_passphrase(confirm: bool = False) -> str:
    """Keystore passphrase from HELA_WALLET_PASSPHRASE or the terminal."""
    passphrase = os.environ.get("HELA_WALLET_PASSPHRASE")
    if passphrase is None:
        passphrase = click.prompt("Passphrase", hide_input=True, confirmation_prompt=confirm)

    if len(passphrase) < MIN_PASSPHRASE_LENGTH:
        raise click.ClickException(f"Passphrase must be at least {MIN_PASSPHRASE_LENGTH} characters")
    return passphrase


@click.group("wallet", cls=HelaGroup)
def wallet():
    """Manage accounts in the local wallet."""
    pass


@wallet.command("import")
@click.argument("name")
@click.option("--ed25519-priv", "private_key", default=None, help="ed25519-raw private key (base64 or hex)")
@click.option("--desc", "description", default="", help="Description")
@pass_cli
def import_cmd(cli_ctx: CliContext, name: str, private_key: Optional[str], description: str):
    """Import an existing Ed25519 private key as account NAME.

    Examples:

        hela wallet import alice --ed25519-priv 0x9f...
    """
    cfg = cli_ctx.config
    if name in cfg.wallet.all:
        raise ConfigurationError(f"account '{name}' already exists")

    if private_key is None:
        private_key = click.prompt("Private key (base64 or hex)", hide_input=True)
    signer = Ed25519Signer.from_text(private_key)
    passphrase = get_passphrase(confirm=True)

    cfg.wallet.add(name, AccountConfig(address=str(signer.address), description=description))
    save_keystore(cfg.wallet_dir / f"{name}.json", signer, passphrase)
    cfg.save()

    logger.info("Imported account %s (%s)", name, signer.address)
    click.echo(click.style("✓ Account imported successfully!", fg="green"))
    click.echo(f"Address: {signer.address}")


@wallet.command("list")
@pass_cli
def list_cmd(cli_ctx: CliContext):
    """List accounts in the wallet."""
    cfg = cli_ctx.config

    table = Table("Account", "Kind", "Address")
    for name in sorted(cfg.wallet.all):
        account = cfg.wallet.all[name]
        display = name + DEFAULT_MARKER if cfg.wallet.default == name else name
        table.add_row(display, f"{account.kind} ({account.algorithm})", account.address)
    Console().print(table)


@wallet.command("rm")
@click.argument("name")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@pass_cli
def rm_cmd(cli_ctx: CliContext, name: str, yes: bool):
    """Remove account NAME and delete its keystore."""
    cfg = cli_ctx.config
    if name not in cfg.wallet.all:
        raise AccountNotFound(name)

    if not yes:
        click.echo(click.style(
            f"WARNING: Removing '{name}' deletes its keystore. This cannot be undone!", fg="red"
        ))
        click.confirm("Remove account?", abort=True)

    cfg.wallet.remove(name)
    cfg.save()
    (cfg.wallet_dir / f"{name}.json").unlink(missing_ok=True)


@wallet.command("set-default")
@click.argument("name")
@pass_cli
def set_default_cmd(cli_ctx: CliContext, name: str):
    """Set the default account."""
    cfg = cli_ctx.config
    cfg.wallet.set_default(name)
    cfg.save()
