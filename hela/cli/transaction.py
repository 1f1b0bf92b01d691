"""
Sign-and-broadcast pipeline shared by every write command.

    Resolving -> Connecting -> Building -> Signing -> Broadcasting -> Done

Offline mode never opens a connection: nonce and gas limit come from the
command line, the chain context from the network configuration, and the
signed transaction is exported instead of submitted.
"""

import functools
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

import click

from ..client import Connection, SubmitResult
from ..config import ParaTime
from ..constants import DEFAULT_GAS_PRICE, NATIVE_DENOMINATION, ROUND_LATEST, TX_SIGNATURE_CONTEXT_BASE
from ..crypto import Address, Ed25519Signer, sha512_256
from ..exceptions import TransactionConfigError
from ..governance.transactions import Transaction, UnverifiedTransaction
from ..governance.types import BaseUnits
from ..logger import get_logger
from .selector import NPASelection

logger = get_logger(__name__)


@dataclass(frozen=True)
class TransactionConfig:
    """Transaction options of a write command."""
    offline: bool = False
    nonce: Optional[int] = None
    gas_limit: Optional[int] = None
    gas_price: int = DEFAULT_GAS_PRICE
    fee_denom: str = NATIVE_DENOMINATION
    output_file: Optional[str] = None
    yes: bool = False

    @property
    def export(self) -> bool:
        """Whether the signed transaction is written out rather than submitted."""
        return self.offline or bool(self.output_file)

    def validate(self) -> None:
        """
        Raises:
            TransactionConfigError: Offline without --gas-limit
        """
        if self.offline and self.gas_limit is None:
            raise TransactionConfigError("offline mode requires --gas-limit")


@dataclass(frozen=True)
class TransactionMeta:
    """Signing details kept alongside the signed transaction."""
    signer: Address
    nonce: int
    gas_limit: int
    signature_context: bytes


def signature_context(runtime_id: bytes, chain_context: str) -> bytes:
    """Domain separation context of runtime transactions on one chain."""
    derived = sha512_256(runtime_id, chain_context.encode()).hex()
    return f"{TX_SIGNATURE_CONTEXT_BASE} for chain {derived}".encode()


def _print_summary(npa: NPASelection, tx: Transaction) -> None:
    click.echo(f"Method: {tx.method}")
    click.echo(f"Body:   {tx.body}")
    for signer in tx.signers:
        click.echo(f"Nonce:  {signer.nonce}")
    click.echo(f"Fee:    {tx.fee.amount.amount} (gas limit: {tx.fee.gas})")
    click.echo()
    click.echo(f"Network:  {npa.network_name}")
    click.echo(f"Runtime:  {npa.paratime_name}")
    click.echo(f"Account:  {npa.account_name}")


def sign_paratime_transaction(
    npa: NPASelection,
    account: Ed25519Signer,
    conn: Optional[Connection],
    tx: Transaction,
    tx_config: TransactionConfig,
) -> Tuple[UnverifiedTransaction, TransactionMeta]:
    """
    Fill in nonce and fee, confirm with the user, and sign *tx*.

    Args:
        npa: Selection; must have a runtime
        account: Signer of the selected account
        conn: Open connection, or None in offline mode
        tx: Unsigned transaction from one of the builders
        tx_config: Transaction options

    Raises:
        NoParaTimeConfigured: No runtime selected
        TransactionConfigError: Inconsistent options
        RpcError, ConnectionFailed: Nonce lookup or gas estimation failed
    """
    paratime = npa.must_have_paratime()
    tx_config.validate()
    if conn is None and not tx_config.offline:
        raise TransactionConfigError("a connection is required unless in offline mode")

    if tx_config.nonce is not None:
        nonce = tx_config.nonce
    elif tx_config.offline:
        nonce = 0
    else:
        nonce = conn.runtime(paratime).accounts.nonce(ROUND_LATEST, account.address)
    tx.append_auth_signature(account.public_key, nonce)

    gas_limit = tx_config.gas_limit
    if gas_limit is None:
        gas_limit = conn.runtime(paratime).core.estimate_gas(ROUND_LATEST, tx)
        logger.info("Estimated gas: %d", gas_limit)
    tx.fee.gas = gas_limit
    tx.fee.amount = BaseUnits(gas_limit * tx_config.gas_price, tx_config.fee_denom)

    if tx_config.offline:
        chain_context = npa.network.chain_context
    else:
        chain_context = conn.consensus().get_chain_context()

    if not tx_config.yes:
        _print_summary(npa, tx)
        click.confirm("Sign this transaction?", abort=True)

    context = signature_context(paratime.namespace(), chain_context)
    body = tx.encode()
    signed = UnverifiedTransaction(body=body, signatures=[account.context_sign(context, body)])
    logger.debug("Signed %s as %s (nonce %d)", tx.method, account.address, nonce)

    return signed, TransactionMeta(
        signer=account.address,
        nonce=nonce,
        gas_limit=gas_limit,
        signature_context=context,
    )


def export_transaction(signed: UnverifiedTransaction, output_file: Optional[str]) -> None:
    """Write the CBOR-encoded transaction to *output_file*, or hex to stdout."""
    data = signed.encode()
    if output_file:
        Path(output_file).write_bytes(data)
        click.echo(f"Signed transaction written to {output_file}")
    else:
        click.echo(data.hex())


def broadcast_transaction(
    paratime: ParaTime,
    conn: Optional[Connection],
    signed: UnverifiedTransaction,
    meta: TransactionMeta,
    tx_config: TransactionConfig,
) -> Optional[SubmitResult]:
    """
    Submit *signed*, or export it when offline or --output-file is set.

    Returns:
        SubmitResult, or None when the transaction was exported

    Raises:
        RpcError, ConnectionFailed: Submission failed
    """
    if tx_config.export:
        export_transaction(signed, tx_config.output_file)
        return None

    if conn is None:
        raise TransactionConfigError("a connection is required to broadcast")

    click.echo("Broadcasting transaction...")
    result = conn.runtime(paratime).submit_tx(signed)
    click.echo(click.style("✓ Transaction included in block successfully.", fg="green"))
    if result.round is not None:
        click.echo(f"Round:            {result.round}")
    click.echo(f"Transaction hash: {result.hash}")
    logger.info("Submitted transaction %s from %s (nonce %d)", result.hash, meta.signer, meta.nonce)
    return result


def transaction_options(func):
    """Add the transaction options and pass `tx_config`."""

    @click.option("--offline", is_flag=True, help="Do not connect; sign for later submission")
    @click.option("--nonce", type=click.IntRange(min=0), default=None, help="Override the account nonce")
    @click.option("--gas-limit", type=click.IntRange(min=0), default=None, help="Override the gas limit")
    @click.option("--gas-price", type=click.IntRange(min=0), default=DEFAULT_GAS_PRICE, help="Gas price in base units")
    @click.option("--fee-denom", default=NATIVE_DENOMINATION, help="Fee denomination")
    @click.option("--output-file", "-o", type=click.Path(dir_okay=False), default=None,
                  help="Write the signed transaction to a file instead of submitting it")
    @click.option("--yes", "-y", is_flag=True, help="Answer yes to all questions")
    @functools.wraps(func)
    def wrapper(*args, offline, nonce, gas_limit, gas_price, fee_denom, output_file, yes, **kwargs):
        kwargs["tx_config"] = TransactionConfig(
            offline=offline,
            nonce=nonce,
            gas_limit=gas_limit,
            gas_price=gas_price,
            fee_denom=fee_denom,
            output_file=output_file,
            yes=yes,
        )
        return func(*args, **kwargs)

    return wrapper
