"""
Transaction envelopes and the governance transaction builders.
"""

import cbor2
import pytest

from hela.governance import (
    Action,
    AddressData,
    BaseUnits,
    ConfigData,
    Fee,
    MintBurnData,
    ProposalContent,
    Role,
    RoleAddress,
    SetRolesData,
    Transaction,
    UnverifiedTransaction,
    VoteOption,
    VoteProposal,
    decode_proposal_content,
    new_init_owners_tx,
    new_propose_tx,
    new_vote_st_tx,
)


class TestBuilders:

    def test_init_owners(self, alice, bob):
        tx = new_init_owners_tx(None, [
            RoleAddress(addr=bob.address, role=Role.MINT_PROPOSER),
            RoleAddress(addr=alice.address, role=Role.ADMIN),
        ])
        assert tx.method == "accounts.InitOwners"
        assert tx.version == 1
        assert tx.body == [
            {"addr": bob.address.raw, "role": Role.MINT_PROPOSER.value},
            {"addr": alice.address.raw, "role": Role.ADMIN.value},
        ]

    def test_propose(self, alice):
        content = ProposalContent(action=Action.WHITELIST, data=AddressData(address=alice.address))
        tx = new_propose_tx(None, content)
        assert tx.method == "accounts.Propose"
        assert tx.body == {"action": Action.WHITELIST.value, "data": {"address": alice.address.raw}}

    def test_vote(self):
        tx = new_vote_st_tx(None, VoteProposal(id=42, option=VoteOption.YES))
        assert tx.method == "accounts.VoteST"
        assert tx.body == {"id": 42, "option": 1}

    def test_fee_and_signers_left_blank(self):
        tx = new_vote_st_tx(None, VoteProposal(id=1, option=VoteOption.NO))
        assert tx.fee == Fee()
        assert tx.signers == []

    def test_explicit_fee_kept(self):
        fee = Fee(amount=BaseUnits(10, ""), gas=500)
        tx = new_vote_st_tx(fee, VoteProposal(id=1, option=VoteOption.NO))
        assert tx.fee is fee


class TestRoundTrip:

    def test_set_roles_admin(self, alice):
        content = ProposalContent(
            action=Action.SET_ROLES,
            data=SetRolesData(address=alice.address, role=Role.ADMIN),
        )
        decoded = decode_proposal_content(Transaction.decode(new_propose_tx(None, content).encode()))
        assert decoded.action is Action.SET_ROLES
        assert decoded.data == SetRolesData(address=alice.address, role=Role.ADMIN)

    def test_mint(self, bob):
        data = MintBurnData(address=bob.address, amount=BaseUnits(5 * 10 ** 18, ""), meta=b"\x00\xff")
        tx = Transaction.decode(new_propose_tx(None, ProposalContent(Action.MINT, data)).encode())
        assert decode_proposal_content(tx).data == data

    def test_config_omits_unset_quorums(self):
        tx = new_propose_tx(None, ProposalContent(Action.CONFIG, ConfigData(burn_quorum=66)))
        assert tx.body["data"] == {"burn_quorum": 66}
        assert decode_proposal_content(tx).data == ConfigData(burn_quorum=66)


class TestEnvelope:

    def test_wire_layout(self, alice):
        tx = new_vote_st_tx(Fee(amount=BaseUnits(256, ""), gas=1000), VoteProposal(id=7, option=VoteOption.ABSTAIN))
        tx.append_auth_signature(alice.public_key, 4)

        wire = cbor2.loads(tx.encode())
        assert wire["v"] == 1
        assert wire["call"] == {"method": "accounts.VoteST", "body": {"id": 7, "option": 3}}
        assert wire["ai"]["si"] == [{"address_spec": {"signature": {"ed25519": alice.public_key}}, "nonce": 4}]
        assert wire["ai"]["fee"] == {"amount": [b"\x01\x00", b""], "gas": 1000}

    def test_encoding_is_deterministic(self):
        a = new_vote_st_tx(None, VoteProposal(id=1, option=VoteOption.YES)).encode()
        b = new_vote_st_tx(None, VoteProposal(id=1, option=VoteOption.YES)).encode()
        assert a == b

    def test_zero_amount_encodes_empty_quantity(self):
        assert BaseUnits(0, "").to_cbor() == [b"", b""]
        assert BaseUnits.from_cbor([b"", b""]) == BaseUnits(0, "")

    def test_unverified_transaction(self, alice):
        tx = new_vote_st_tx(None, VoteProposal(id=2, option=VoteOption.NO))
        tx.append_auth_signature(alice.public_key, 0)
        signed = UnverifiedTransaction(body=tx.encode(), signatures=[b"\x01" * 64])

        decoded = UnverifiedTransaction.decode(signed.encode())
        assert decoded == signed
        assert decoded.transaction().signers[0].public_key == alice.public_key
        assert cbor2.loads(signed.encode())[1] == [{"signature": b"\x01" * 64}]

    @pytest.mark.parametrize("role", [Role.ADMIN, Role.CONFIG_VOTER])
    def test_role_address_body(self, alice, role):
        ra = RoleAddress(addr=alice.address, role=role)
        assert RoleAddress.from_body(ra.to_body()) == ra
