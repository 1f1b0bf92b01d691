"""
`hela managest` - stablecoin governance commands.

Read commands (showproposal, showroles, showquorums) need a runtime and
print "No runtime specified!" without one. Write commands (initowners,
propose, vote) fail with NoParaTimeConfigured before connecting, loading
keys or decoding their input.
"""

from pathlib import Path
from typing import List, Optional, Tuple

import click

from ..client import connect
from ..governance import (
    ASSIGNABLE_ROLES,
    QUORUM_ACTIONS,
    Action,
    RoleAddress,
    Transaction,
    action_from_string,
    new_init_owners_tx,
    new_propose_tx,
    new_vote_st_tx,
    parse_proposal,
    parse_proposal_id,
    parse_vote,
    role_from_string,
)
from ..helpers import resolve_local_account_or_address
from ..logger import get_logger
from ..wallet import load_account
from .common import CliContext, HelaGroup, pass_cli, prompt_passphrase
from .height import resolve_round
from .selector import NPASelection, height_option, resolve_npa, selector_options
from .transaction import (
    TransactionConfig,
    broadcast_transaction,
    sign_paratime_transaction,
    transaction_options,
)

logger = get_logger(__name__)

NO_RUNTIME_MESSAGE = "No runtime specified!"


@click.group("managest", cls=HelaGroup)
def managest():
    """Manage the stablecoin governance operations."""
    pass


def _runtime_header(npa: NPASelection) -> None:
    click.echo()
    click.echo(f"=== {npa.paratime_name} PARATIME ===")


# ══════════════════════════════════════════════════════════════════════
#  QUERIES
# ══════════════════════════════════════════════════════════════════════

@managest.command("showproposal")
@click.argument("proposal_id", required=False)
@selector_options
@height_option
@pass_cli
def show_proposal_cmd(cli_ctx: CliContext, proposal_id: Optional[str], selector, height: int):
    """Show a proposal; the latest one when no ID is given."""
    npa = resolve_npa(cli_ctx.config, selector)
    if npa.paratime is None:
        click.echo(NO_RUNTIME_MESSAGE)
        return

    wanted = parse_proposal_id(proposal_id) if proposal_id is not None else None

    with connect(npa.network) as conn:
        round_ = resolve_round(conn.consensus(), npa.paratime, height)
        accounts = conn.runtime(npa.paratime).accounts
        if wanted is None:
            wanted = accounts.proposal_id_info(round_)

        _runtime_header(npa)
        click.echo(f"Queried proposal ID is: {wanted}.")
        proposal = accounts.proposal_info(round_, wanted)

    if proposal.content.action is Action.NO_ACTION:
        return

    click.echo(click.style("=================== Proposal ===================", fg="cyan"))
    click.echo(f"Proposal ID: {proposal.id}")
    click.echo(f"Proposal Submitter: {proposal.submitter}")
    click.echo(f"Proposal State: {proposal.state}")
    click.echo("Proposal Content:")
    for key, value in proposal.content.to_display().items():
        click.echo(f"    {key}: {value}")
    if proposal.results:
        click.echo("Results:")
        for option, count in proposal.results.items():
            click.echo(f"    Vote: {option}, Count: {count}")
    click.echo(click.style("================================================", fg="cyan"))


@managest.command("showroles")
@click.argument("role", required=False)
@selector_options
@height_option
@pass_cli
def show_roles_cmd(cli_ctx: CliContext, role: Optional[str], selector, height: int):
    """Show the accounts holding a role, or every non-empty role team."""
    npa = resolve_npa(cli_ctx.config, selector)
    if npa.paratime is None:
        click.echo(NO_RUNTIME_MESSAGE)
        return

    roles = (role_from_string(role),) if role else ASSIGNABLE_ROLES

    with connect(npa.network) as conn:
        round_ = resolve_round(conn.consensus(), npa.paratime, height)
        accounts = conn.runtime(npa.paratime).accounts

        _runtime_header(npa)
        for r in roles:
            team = accounts.roles_team(round_, r)
            if team:
                click.echo(f"{r}: {', '.join(str(addr) for addr in team)}")


@managest.command("showquorums")
@click.argument("action", required=False)
@selector_options
@height_option
@pass_cli
def show_quorums_cmd(cli_ctx: CliContext, action: Optional[str], selector, height: int):
    """Show the quorum of an action, or of every quorum-bearing action."""
    npa = resolve_npa(cli_ctx.config, selector)
    if npa.paratime is None:
        click.echo(NO_RUNTIME_MESSAGE)
        return

    actions = (action_from_string(action),) if action else QUORUM_ACTIONS

    with connect(npa.network) as conn:
        round_ = resolve_round(conn.consensus(), npa.paratime, height)
        accounts = conn.runtime(npa.paratime).accounts

        _runtime_header(npa)
        click.echo("Quorums are:")
        for a in actions:
            quorum = accounts.quorums(round_, a)
            if quorum:
                click.echo(f"{a}: {quorum}%")


# ══════════════════════════════════════════════════════════════════════
#  TRANSACTIONS
# ══════════════════════════════════════════════════════════════════════

def _sign_and_broadcast(cli_ctx: CliContext, npa: NPASelection, tx: Transaction, tx_config: TransactionConfig):
    """Load the signer, then run the pipeline on one connection (none offline)."""
    account = load_account(cli_ctx.config, npa.account_name, prompt_passphrase)

    conn = None if tx_config.offline else connect(npa.network)
    try:
        signed, meta = sign_paratime_transaction(npa, account, conn, tx, tx_config)
        return broadcast_transaction(npa.paratime, conn, signed, meta, tx_config)
    finally:
        if conn is not None:
            conn.close()


def _pair_arguments(args: Tuple[str, ...]) -> List[Tuple[str, str]]:
    if not args or len(args) % 2:
        raise click.UsageError("arguments must be given as <addr> <role> pairs")
    return list(zip(args[::2], args[1::2]))


@managest.command("initowners")
@click.argument("pairs", nargs=-1, metavar="ADDR ROLE [ADDR ROLE]...")
@selector_options
@transaction_options
@pass_cli
def init_owners_cmd(cli_ctx: CliContext, pairs: Tuple[str, ...], selector, tx_config: TransactionConfig):
    """Initialize addresses with roles.

    Can be called only once, by the chain initiator. Roles are Admin,
    MintProposer, MintVoter, BurnProposer, BurnVoter, WhitelistProposer,
    WhitelistVoter, BlacklistProposer, BlacklistVoter, ConfigProposer and
    ConfigVoter.
    """
    cfg = cli_ctx.config
    npa = resolve_npa(cfg, selector)
    npa.must_have_paratime()
    npa.must_have_account()
    tx_config.validate()

    role_addresses = [
        RoleAddress(addr=resolve_local_account_or_address(cfg, addr), role=role_from_string(role))
        for addr, role in _pair_arguments(pairs)
    ]
    tx = new_init_owners_tx(None, role_addresses)
    _sign_and_broadcast(cli_ctx, npa, tx, tx_config)


@managest.command("propose")
@click.argument("proposal_file", type=click.Path(exists=True, dir_okay=False))
@selector_options
@transaction_options
@pass_cli
def propose_cmd(cli_ctx: CliContext, proposal_file: str, selector, tx_config: TransactionConfig):
    """Submit a proposal read from a JSON file.

    The file holds {"action": "<Action>", "data": {...}}.
    """
    cfg = cli_ctx.config
    npa = resolve_npa(cfg, selector)
    paratime = npa.must_have_paratime()
    npa.must_have_account()
    tx_config.validate()

    content = parse_proposal(
        Path(proposal_file).read_bytes(),
        lambda value: resolve_local_account_or_address(cfg, value),
        paratime,
    )
    tx = new_propose_tx(None, content)
    _sign_and_broadcast(cli_ctx, npa, tx, tx_config)


@managest.command("vote")
@click.argument("proposal_id")
@click.argument("option")
@selector_options
@transaction_options
@pass_cli
def vote_cmd(cli_ctx: CliContext, proposal_id: str, option: str, selector, tx_config: TransactionConfig):
    """Vote on a proposal with yes, no or abstain."""
    npa = resolve_npa(cli_ctx.config, selector)
    npa.must_have_paratime()
    npa.must_have_account()
    tx_config.validate()

    tx = new_vote_st_tx(None, parse_vote(proposal_id, option))
    _sign_and_broadcast(cli_ctx, npa, tx, tx_config)
