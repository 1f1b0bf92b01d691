"""
Governance Transactions

Unsigned runtime transaction envelopes and one builder per governance
call. Builders are pure: fee and nonce are left for the signing stage.

Wire format (CBOR, canonical):

    {"v": 1,
     "call": {"method": "accounts.Propose", "body": {...}},
     "ai": {"si": [{"address_spec": {"signature": {"ed25519": pk}}, "nonce": n}],
            "fee": {"amount": [quantity, denom], "gas": g}}}

A signed transaction is the CBOR array [body_bytes, [{"signature": sig}]].
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

import cbor2

from ..constants import TRANSACTION_VERSION
from .types import BaseUnits, ProposalContent, RoleAddress, VoteProposal

METHOD_INIT_OWNERS = "accounts.InitOwners"
METHOD_PROPOSE = "accounts.Propose"
METHOD_VOTE_ST = "accounts.VoteST"


@dataclass
class Fee:
    """Transaction fee; `gas` is the gas limit."""
    amount: BaseUnits = field(default_factory=BaseUnits)
    gas: int = 0

    def to_cbor(self) -> Dict[str, Any]:
        return {"amount": self.amount.to_cbor(), "gas": self.gas}

    @classmethod
    def from_cbor(cls, value: Dict[str, Any]) -> "Fee":
        return cls(amount=BaseUnits.from_cbor(value["amount"]), gas=value.get("gas", 0))


@dataclass
class SignerInfo:
    """Public key and nonce of one signer."""
    public_key: bytes
    nonce: int

    def to_cbor(self) -> Dict[str, Any]:
        return {"address_spec": {"signature": {"ed25519": self.public_key}}, "nonce": self.nonce}

    @classmethod
    def from_cbor(cls, value: Dict[str, Any]) -> "SignerInfo":
        return cls(
            public_key=value["address_spec"]["signature"]["ed25519"],
            nonce=value["nonce"],
        )


@dataclass
class Transaction:
    """Unsigned runtime transaction."""
    method: str
    body: Any
    fee: Fee = field(default_factory=Fee)
    signers: List[SignerInfo] = field(default_factory=list)
    version: int = TRANSACTION_VERSION

    def append_auth_signature(self, public_key: bytes, nonce: int) -> None:
        """Register a signer; the signature itself is produced by the pipeline."""
        self.signers.append(SignerInfo(public_key=public_key, nonce=nonce))

    def to_cbor(self) -> Dict[str, Any]:
        return {
            "v": self.version,
            "call": {"method": self.method, "body": self.body},
            "ai": {
                "si": [s.to_cbor() for s in self.signers],
                "fee": self.fee.to_cbor(),
            },
        }

    @classmethod
    def from_cbor(cls, value: Dict[str, Any]) -> "Transaction":
        auth = value.get("ai", {})
        return cls(
            method=value["call"]["method"],
            body=value["call"].get("body"),
            fee=Fee.from_cbor(auth["fee"]) if "fee" in auth else Fee(),
            signers=[SignerInfo.from_cbor(s) for s in auth.get("si", [])],
            version=value.get("v", TRANSACTION_VERSION),
        )

    def encode(self) -> bytes:
        return cbor2.dumps(self.to_cbor(), canonical=True)

    @classmethod
    def decode(cls, data: bytes) -> "Transaction":
        return cls.from_cbor(cbor2.loads(data))


@dataclass
class UnverifiedTransaction:
    """Serialized transaction body plus one signature per signer."""
    body: bytes
    signatures: List[bytes] = field(default_factory=list)

    def encode(self) -> bytes:
        return cbor2.dumps([self.body, [{"signature": s} for s in self.signatures]], canonical=True)

    @classmethod
    def decode(cls, data: bytes) -> "UnverifiedTransaction":
        body, proofs = cbor2.loads(data)
        return cls(body=body, signatures=[p["signature"] for p in proofs])

    def transaction(self) -> Transaction:
        return Transaction.decode(self.body)


# ══════════════════════════════════════════════════════════════════════
#  BUILDERS
# ══════════════════════════════════════════════════════════════════════

def new_init_owners_tx(fee: Optional[Fee], role_addresses: Sequence[RoleAddress]) -> Transaction:
    """Owner initialization, callable once by the chain initiator."""
    return Transaction(
        method=METHOD_INIT_OWNERS,
        body=[ra.to_body() for ra in role_addresses],
        fee=fee or Fee(),
    )


def new_propose_tx(fee: Optional[Fee], content: ProposalContent) -> Transaction:
    """Submit a governance proposal."""
    return Transaction(method=METHOD_PROPOSE, body=content.to_body(), fee=fee or Fee())


def new_vote_st_tx(fee: Optional[Fee], vote: VoteProposal) -> Transaction:
    """Vote on a stablecoin governance proposal."""
    return Transaction(method=METHOD_VOTE_ST, body=vote.to_body(), fee=fee or Fee())


def decode_proposal_content(tx: Transaction) -> ProposalContent:
    """Inverse of new_propose_tx() for a decoded transaction."""
    return ProposalContent.from_body(tx.body)
