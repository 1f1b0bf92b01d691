"""
JSON-RPC connection against an in-process httpx transport.
"""

import json

import cbor2
import httpx
import pytest

from hela.client import ConnectionFailed, Connection, RpcError
from hela.constants import ROUND_LATEST
from hela.governance import (
    Action,
    AddressData,
    ProposalState,
    Role,
    UnverifiedTransaction,
    VoteOption,
)


def make_connection(cli_config, handler):
    network = cli_config.networks.all["testnet"]
    return Connection(network, client=httpx.Client(transport=httpx.MockTransport(handler)))


def reply(request, result):
    body = json.loads(request.content)
    return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "result": result})


class TestCall:

    def test_request_shape(self, cli_config):
        seen = []

        def handler(request):
            seen.append(request)
            return reply(request, "ab" * 32)

        with make_connection(cli_config, handler) as conn:
            assert conn.consensus().get_chain_context() == "ab" * 32
            conn.consensus().get_chain_context()

        assert str(seen[0].url) == "http://localhost:8545/rpc"
        first, second = (json.loads(r.content) for r in seen)
        assert first["method"] == "consensus.GetChainContext"
        assert first["params"] == []
        assert second["id"] == first["id"] + 1

    def test_error_object(self, cli_config):
        def handler(request):
            return httpx.Response(200, json={
                "jsonrpc": "2.0", "id": 1,
                "error": {"code": -32601, "message": "method not found"},
            })

        conn = make_connection(cli_config, handler)
        with pytest.raises(RpcError) as info:
            conn.call("consensus.Nope")
        assert info.value.code == -32601
        assert "method not found" in str(info.value)

    def test_http_error(self, cli_config):
        conn = make_connection(cli_config, lambda request: httpx.Response(500, text="oops"))
        with pytest.raises(ConnectionFailed, match="HTTP 500"):
            conn.call("consensus.GetChainContext")

    def test_malformed_reply(self, cli_config):
        conn = make_connection(cli_config, lambda request: httpx.Response(200, text="<html>"))
        with pytest.raises(ConnectionFailed, match="malformed"):
            conn.call("consensus.GetChainContext")

    def test_unreachable(self, cli_config):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        conn = make_connection(cli_config, handler)
        with pytest.raises(ConnectionFailed, match="failed to reach"):
            conn.call("consensus.GetChainContext")


def runtime_client(cli_config, paratime, answers, calls=None):
    """Runtime client whose queries are answered from *answers*, keyed by method."""
    def handler(request):
        body = json.loads(request.content)
        params = body["params"][0] if body["params"] else {}
        if calls is not None:
            calls.append((body["method"], params))
        key = params.get("method", body["method"])
        value = answers[key]
        if body["method"] == "runtime.Query":
            value = cbor2.dumps(value).hex()
        return reply(request, value)

    return make_connection(cli_config, handler).runtime(paratime)


class TestRuntimeQueries:

    def test_nonce(self, cli_config, paratime, alice):
        calls = []
        rt = runtime_client(cli_config, paratime, {"accounts.Nonce": 7}, calls)

        assert rt.accounts.nonce(ROUND_LATEST, alice.address) == 7

        method, params = calls[0]
        assert method == "runtime.Query"
        assert params["runtime_id"] == paratime.id
        assert params["round"] == ROUND_LATEST
        assert cbor2.loads(bytes.fromhex(params["args"])) == {"address": alice.address.raw}

    def test_roles_team(self, cli_config, paratime, alice, bob):
        rt = runtime_client(cli_config, paratime, {"accounts.RolesTeam": [alice.address.raw, bob.address.raw]})
        assert rt.accounts.roles_team(5, Role.BURN_VOTER) == [alice.address, bob.address]

    def test_empty_roles_team(self, cli_config, paratime):
        rt = runtime_client(cli_config, paratime, {"accounts.RolesTeam": None})
        assert rt.accounts.roles_team(5, Role.ADMIN) == []

    def test_quorums(self, cli_config, paratime):
        calls = []
        rt = runtime_client(cli_config, paratime, {"accounts.Quorums": 75}, calls)
        assert rt.accounts.quorums(5, Action.MINT) == 75
        assert cbor2.loads(bytes.fromhex(calls[0][1]["args"])) == {"action": Action.MINT.value}

    def test_latest_block(self, cli_config, paratime):
        calls = []
        conn_answers = {"consensus.GetLatestBlock": {"round": 1234, "timestamp": 99}}
        rt = runtime_client(cli_config, paratime, conn_answers, calls)

        header = rt._conn.consensus().get_latest_block(paratime.namespace(), 500)
        assert header.round == 1234
        assert calls[0][1] == {"runtime_id": paratime.id, "height": 500}

    def test_submit(self, cli_config, paratime):
        calls = []
        rt = runtime_client(cli_config, paratime, {"runtime.SubmitTx": {"hash": "beef", "round": 9}}, calls)
        signed = UnverifiedTransaction(body=b"\xa0", signatures=[b"\x00" * 64])

        result = rt.submit_tx(signed)
        assert result.hash == "beef"
        assert result.round == 9
        assert calls[0][1]["data"] == signed.encode().hex()


class TestAccountsModule:

    def test_latest_proposal_id(self, cli_config, paratime):
        calls = []
        rt = runtime_client(cli_config, paratime, {"accounts.ProposalID": 12}, calls)

        assert rt.accounts.proposal_id_info(40) == 12
        assert calls[0][1]["method"] == "accounts.ProposalID"
        assert calls[0][1]["round"] == 40

    def test_proposal(self, cli_config, paratime, alice, bob):
        calls = []
        stored = {
            "id": 5,
            "submitter": alice.address.raw,
            "state": ProposalState.PASSED.value,
            "content": {"action": Action.WHITELIST.value, "data": {"address": bob.address.raw}},
            "results": {VoteOption.YES.value: 3, VoteOption.NO.value: 1},
        }
        rt = runtime_client(cli_config, paratime, {"accounts.Proposal": stored}, calls)

        proposal = rt.accounts.proposal_info(ROUND_LATEST, 5)

        assert cbor2.loads(bytes.fromhex(calls[0][1]["args"])) == {"id": 5}
        assert proposal.id == 5
        assert proposal.submitter == alice.address
        assert proposal.state is ProposalState.PASSED
        assert proposal.content.action is Action.WHITELIST
        assert proposal.content.data == AddressData(address=bob.address)
        assert proposal.results == {VoteOption.YES: 3, VoteOption.NO: 1}

    def test_unused_slot(self, cli_config, paratime):
        stored = {
            "id": 0,
            "submitter": bytes(21),
            "state": 0,
            "content": {"action": Action.NO_ACTION.value, "data": {}},
            "results": {},
        }
        rt = runtime_client(cli_config, paratime, {"accounts.Proposal": stored})

        proposal = rt.accounts.proposal_info(ROUND_LATEST, 99)

        assert proposal.id == 99
        assert proposal.state is None
        assert proposal.content.action is Action.NO_ACTION
        assert proposal.results == {}

    def test_missing_proposal(self, cli_config, paratime):
        rt = runtime_client(cli_config, paratime, {"accounts.Proposal": None})

        proposal = rt.accounts.proposal_info(ROUND_LATEST, 99)

        assert proposal.id == 99
        assert proposal.content.action is Action.NO_ACTION
