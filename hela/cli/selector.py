"""
Network / runtime / account selection.

Every command that talks to a chain takes the same selector options. They
are collected into a SelectorFlags value and resolved against the loaded
configuration by resolve_npa().
"""

import functools
from dataclasses import dataclass
from typing import Optional

import click

from ..config import AccountConfig, CliConfig, Network, ParaTime
from ..constants import HEIGHT_LATEST
from ..exceptions import (
    AccountNotFound,
    NetworkNotFound,
    NoNetworksConfigured,
    NoParaTimeConfigured,
    RuntimeNotFound,
)
from ..logger import get_logger
from ..wallet import load_test_account_config, parse_test_account_address

logger = get_logger(__name__)


@dataclass(frozen=True)
class SelectorFlags:
    """Selector options as given on the command line ("" means not given)."""
    network: str = ""
    runtime: str = ""
    account: str = ""
    no_runtime: bool = False


@dataclass(frozen=True)
class NPASelection:
    """
    Resolved network, runtime and account.

    Fields:
        network_name:  Always set
        network:       Configuration of the selected network
        paratime_name: "" when no runtime is selected
        paratime:      None iff paratime_name is ""
        account_name:  "" when no account is selected
        account:       None iff account_name is ""
    """
    network_name: str
    network: Network
    paratime_name: str = ""
    paratime: Optional[ParaTime] = None
    account_name: str = ""
    account: Optional[AccountConfig] = None

    def must_have_paratime(self) -> ParaTime:
        """
        Raises:
            NoParaTimeConfigured: If no runtime is selected
        """
        if self.paratime is None:
            raise NoParaTimeConfigured()
        return self.paratime

    def must_have_account(self) -> AccountConfig:
        """
        Raises:
            AccountNotFound: If no account is selected
        """
        if self.account is None:
            raise AccountNotFound()
        return self.account


def resolve_npa(cfg: CliConfig, selector: SelectorFlags) -> NPASelection:
    """
    Resolve the selection for one command invocation.

    Flags take precedence over the configured defaults. Reads the
    configuration only.

    Raises:
        NoNetworksConfigured: Neither flag nor default network
        NetworkNotFound: Unknown network
        RuntimeNotFound: Unknown runtime on the selected network
        AccountNotFound: Unknown wallet account or test account
    """
    network_name = selector.network or cfg.networks.default
    if not network_name:
        raise NoNetworksConfigured()
    network = cfg.networks.all.get(network_name)
    if network is None:
        raise NetworkNotFound(network_name)

    paratime_name = ""
    paratime = None
    if not selector.no_runtime:
        paratime_name = selector.runtime or network.paratimes.default
        if paratime_name:
            paratime = network.paratimes.all.get(paratime_name)
            if paratime is None:
                raise RuntimeNotFound(paratime_name)

    account_name = selector.account or cfg.wallet.default
    account = None
    if account_name:
        if test_name := parse_test_account_address(account_name):
            account = load_test_account_config(test_name)
        else:
            account = cfg.wallet.all.get(account_name)
            if account is None:
                raise AccountNotFound(account_name)

    logger.debug(
        "Selected network=%s runtime=%s account=%s",
        network_name, paratime_name or "-", account_name or "-",
    )
    return NPASelection(
        network_name=network_name,
        network=network,
        paratime_name=paratime_name,
        paratime=paratime,
        account_name=account_name,
        account=account,
    )


# ══════════════════════════════════════════════════════════════════════
#  CLICK OPTIONS
# ══════════════════════════════════════════════════════════════════════

def selector_options(func):
    """Add --network/--runtime/--no-runtime/--account and pass `selector`."""

    @click.option("--network", default="", envvar="HELA_NETWORK", help="Network name")
    @click.option("--runtime", "--paratime", "runtime", default="", envvar="HELA_RUNTIME", help="Runtime name")
    @click.option("--no-runtime", is_flag=True, help="Do not select any runtime")
    @click.option("--account", default="", envvar="HELA_ACCOUNT", help="Account name in wallet or test:<name>")
    @click.option("--wallet", default="", hidden=True)
    @functools.wraps(func)
    def wrapper(*args, network, runtime, no_runtime, account, wallet, **kwargs):
        kwargs["selector"] = SelectorFlags(
            network=network,
            runtime=runtime,
            account=account or wallet,
            no_runtime=no_runtime,
        )
        return func(*args, **kwargs)

    return wrapper


def height_option(func):
    """Add --height (consensus height, 0 for latest)."""
    return click.option(
        "--height",
        type=click.IntRange(min=0),
        default=HEIGHT_LATEST,
        show_default=True,
        help="Query at the given consensus height (0 is latest)",
    )(func)
