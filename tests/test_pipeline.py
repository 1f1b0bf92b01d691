"""
Sign-and-broadcast pipeline: nonce and gas handling, offline export,
signature contexts and submission.
"""

from unittest.mock import MagicMock

import pytest

from hela.cli.selector import SelectorFlags, resolve_npa
from hela.cli.transaction import (
    TransactionConfig,
    broadcast_transaction,
    sign_paratime_transaction,
    signature_context,
)
from hela.client import RpcError
from hela.constants import ROUND_LATEST
from hela.crypto import verify
from hela.exceptions import NoParaTimeConfigured, TransactionConfigError
from hela.governance import UnverifiedTransaction, VoteOption, VoteProposal, new_vote_st_tx


@pytest.fixture
def npa(cli_config):
    return resolve_npa(cli_config, SelectorFlags(account="test:alice"))


@pytest.fixture
def tx():
    return new_vote_st_tx(None, VoteProposal(id=42, option=VoteOption.YES))


# ══════════════════════════════════════════════════════════════════════
#  ONLINE
# ══════════════════════════════════════════════════════════════════════

class TestOnlineSigning:

    def test_nonce_gas_and_context_from_connection(self, npa, alice, tx, fake_connection):
        signed, meta = sign_paratime_transaction(npa, alice, fake_connection, tx, TransactionConfig(yes=True))

        runtime = fake_connection.runtime.return_value
        runtime.accounts.nonce.assert_called_once_with(ROUND_LATEST, alice.address)
        runtime.core.estimate_gas.assert_called_once()
        fake_connection.consensus.return_value.get_chain_context.assert_called_once()

        assert meta.nonce == 3
        assert meta.gas_limit == 25000
        assert meta.signer == alice.address

        decoded = signed.transaction()
        assert decoded.signers[0].nonce == 3
        assert decoded.fee.gas == 25000

    def test_signature_verifies(self, npa, alice, tx, fake_connection, paratime):
        signed, meta = sign_paratime_transaction(npa, alice, fake_connection, tx, TransactionConfig(yes=True))

        expected = signature_context(paratime.namespace(), npa.network.chain_context)
        assert meta.signature_context == expected
        assert verify(alice.public_key, expected, signed.body, signed.signatures[0])
        assert not verify(alice.public_key, b"other context", signed.body, signed.signatures[0])

    def test_explicit_nonce_and_gas_skip_queries(self, npa, alice, tx, fake_connection):
        cfg = TransactionConfig(nonce=9, gas_limit=1000, gas_price=2, yes=True)
        signed, meta = sign_paratime_transaction(npa, alice, fake_connection, tx, cfg)

        runtime = fake_connection.runtime.return_value
        runtime.accounts.nonce.assert_not_called()
        runtime.core.estimate_gas.assert_not_called()
        assert signed.transaction().fee.amount.amount == 2000
        assert meta.nonce == 9

    def test_rpc_error_propagates(self, npa, alice, tx, fake_connection):
        fake_connection.runtime.return_value.accounts.nonce.side_effect = RpcError(-32000, "boom")
        with pytest.raises(RpcError):
            sign_paratime_transaction(npa, alice, fake_connection, tx, TransactionConfig(yes=True))

    def test_no_runtime(self, cli_config, alice, tx, fake_connection):
        npa = resolve_npa(cli_config, SelectorFlags(no_runtime=True, account="test:alice"))
        with pytest.raises(NoParaTimeConfigured):
            sign_paratime_transaction(npa, alice, fake_connection, tx, TransactionConfig(yes=True))
        fake_connection.runtime.assert_not_called()

    def test_online_requires_connection(self, npa, alice, tx):
        with pytest.raises(TransactionConfigError):
            sign_paratime_transaction(npa, alice, None, tx, TransactionConfig(yes=True))


# ══════════════════════════════════════════════════════════════════════
#  OFFLINE
# ══════════════════════════════════════════════════════════════════════

class TestOffline:

    def test_offline_requires_gas_limit(self, npa, alice, tx):
        with pytest.raises(TransactionConfigError, match="gas-limit"):
            sign_paratime_transaction(npa, alice, None, tx, TransactionConfig(offline=True, yes=True))

    def test_offline_defaults(self, npa, alice, tx, paratime):
        cfg = TransactionConfig(offline=True, gas_limit=1500, yes=True)
        signed, meta = sign_paratime_transaction(npa, alice, None, tx, cfg)

        assert meta.nonce == 0
        assert meta.gas_limit == 1500
        assert meta.signature_context == signature_context(paratime.namespace(), npa.network.chain_context)

    def test_offline_broadcast_exports_file(self, npa, alice, tx, tmp_path):
        out = tmp_path / "vote.cbor"
        cfg = TransactionConfig(offline=True, gas_limit=1500, nonce=5, output_file=str(out), yes=True)
        signed, meta = sign_paratime_transaction(npa, alice, None, tx, cfg)

        assert broadcast_transaction(npa.paratime, None, signed, meta, cfg) is None
        exported = UnverifiedTransaction.decode(out.read_bytes())
        assert exported == signed
        assert exported.transaction().body == {"id": 42, "option": 1}

    def test_offline_broadcast_prints_hex(self, npa, alice, tx, capsys):
        cfg = TransactionConfig(offline=True, gas_limit=1500, yes=True)
        signed, meta = sign_paratime_transaction(npa, alice, None, tx, cfg)

        broadcast_transaction(npa.paratime, None, signed, meta, cfg)
        assert signed.encode().hex() in capsys.readouterr().out

    def test_offline_broadcast_never_touches_connection(self, npa, alice, tx):
        conn = MagicMock()
        cfg = TransactionConfig(offline=True, gas_limit=1500, yes=True)
        signed, meta = sign_paratime_transaction(npa, alice, None, tx, cfg)

        broadcast_transaction(npa.paratime, conn, signed, meta, cfg)
        assert conn.mock_calls == []


# ══════════════════════════════════════════════════════════════════════
#  BROADCAST
# ══════════════════════════════════════════════════════════════════════

class TestBroadcast:

    def test_online_submits(self, npa, alice, tx, fake_connection):
        cfg = TransactionConfig(yes=True)
        signed, meta = sign_paratime_transaction(npa, alice, fake_connection, tx, cfg)

        result = broadcast_transaction(npa.paratime, fake_connection, signed, meta, cfg)
        fake_connection.runtime.return_value.submit_tx.assert_called_once_with(signed)
        assert result.hash == "cafe"

    def test_online_output_file_exports(self, npa, alice, tx, fake_connection, tmp_path):
        cfg = TransactionConfig(output_file=str(tmp_path / "tx.cbor"), yes=True)
        signed, meta = sign_paratime_transaction(npa, alice, fake_connection, tx, cfg)

        assert broadcast_transaction(npa.paratime, fake_connection, signed, meta, cfg) is None
        fake_connection.runtime.return_value.submit_tx.assert_not_called()
        assert (tmp_path / "tx.cbor").exists()

    def test_submit_error_propagates(self, npa, alice, tx, fake_connection):
        fake_connection.runtime.return_value.submit_tx.side_effect = RpcError(-32003, "rejected")
        cfg = TransactionConfig(yes=True)
        signed, meta = sign_paratime_transaction(npa, alice, fake_connection, tx, cfg)

        with pytest.raises(RpcError, match="rejected"):
            broadcast_transaction(npa.paratime, fake_connection, signed, meta, cfg)
