"""
HELA Stablecoin Governance

Provides:
  - Role / Action / VoteOption / ProposalData shapes   (types.py)
  - Proposal document codec and validator              (proposals.py)
  - Transaction envelopes and builders                 (transactions.py)
"""

from .types import (
    ASSIGNABLE_ROLES,
    QUORUM_ACTIONS,
    Action,
    AddressData,
    BaseUnits,
    ConfigData,
    MintBurnData,
    Proposal,
    ProposalContent,
    ProposalState,
    Role,
    RoleAddress,
    SetRolesData,
    VoteOption,
    VoteProposal,
    action_from_string,
    role_from_string,
    vote_from_string,
)
from .proposals import (
    ProposalDataFields,
    parse_proposal,
    parse_proposal_id,
    parse_vote,
)
from .transactions import (
    Fee,
    Transaction,
    UnverifiedTransaction,
    decode_proposal_content,
    new_init_owners_tx,
    new_propose_tx,
    new_vote_st_tx,
)

__all__ = [
    # Types
    "ASSIGNABLE_ROLES",
    "QUORUM_ACTIONS",
    "Action",
    "AddressData",
    "BaseUnits",
    "ConfigData",
    "MintBurnData",
    "Proposal",
    "ProposalContent",
    "ProposalState",
    "Role",
    "RoleAddress",
    "SetRolesData",
    "VoteOption",
    "VoteProposal",
    "action_from_string",
    "role_from_string",
    "vote_from_string",
    # Codec
    "ProposalDataFields",
    "parse_proposal",
    "parse_proposal_id",
    "parse_vote",
    # Transactions
    "Fee",
    "Transaction",
    "UnverifiedTransaction",
    "decode_proposal_content",
    "new_init_owners_tx",
    "new_propose_tx",
    "new_vote_st_tx",
]
