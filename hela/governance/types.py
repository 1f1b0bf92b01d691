"""
Stablecoin Governance Types

Roles, proposal actions, vote options and the proposal payload shapes of
the runtime accounts module. Each payload shape is its own frozen dataclass,
so a proposal can only ever carry the fields its action allows.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union

from ..constants import ADDRESS_SIZE
from ..crypto import Address
from ..exceptions import UnknownAction, UnknownRole, UnknownVoteOption


# ══════════════════════════════════════════════════════════════════════
#  ENUMS
# ══════════════════════════════════════════════════════════════════════

class Role(Enum):
    """Governance role, as numbered by the accounts module."""
    ADMIN = 0
    MINT_PROPOSER = 1
    MINT_VOTER = 2
    BURN_PROPOSER = 3
    BURN_VOTER = 4
    WHITELIST_PROPOSER = 5
    WHITELIST_VOTER = 6
    BLACKLIST_PROPOSER = 7
    BLACKLIST_VOTER = 8
    CONFIG_PROPOSER = 9
    CONFIG_VOTER = 10
    USER = 11  # Sentinel, never assigned through governance

    def __str__(self) -> str:
        return _ROLE_NAMES[self]


_ROLE_NAMES = {
    Role.ADMIN: "Admin",
    Role.MINT_PROPOSER: "MintProposer",
    Role.MINT_VOTER: "MintVoter",
    Role.BURN_PROPOSER: "BurnProposer",
    Role.BURN_VOTER: "BurnVoter",
    Role.WHITELIST_PROPOSER: "WhitelistProposer",
    Role.WHITELIST_VOTER: "WhitelistVoter",
    Role.BLACKLIST_PROPOSER: "BlacklistProposer",
    Role.BLACKLIST_VOTER: "BlacklistVoter",
    Role.CONFIG_PROPOSER: "ConfigProposer",
    Role.CONFIG_VOTER: "ConfigVoter",
    Role.USER: "User",
}

ASSIGNABLE_ROLES: Tuple[Role, ...] = (
    Role.ADMIN,
    Role.MINT_PROPOSER,
    Role.MINT_VOTER,
    Role.BURN_PROPOSER,
    Role.BURN_VOTER,
    Role.WHITELIST_PROPOSER,
    Role.WHITELIST_VOTER,
    Role.BLACKLIST_PROPOSER,
    Role.BLACKLIST_VOTER,
    Role.CONFIG_PROPOSER,
    Role.CONFIG_VOTER,
)

ROLE_COUNT = len(ASSIGNABLE_ROLES)


class Action(Enum):
    """Proposal action."""
    NO_ACTION = 0  # Empty proposal slot
    SET_ROLES = 1
    MINT = 2
    BURN = 3
    WHITELIST = 4
    BLACKLIST = 5
    CONFIG = 6

    def __str__(self) -> str:
        return _ACTION_NAMES[self]


_ACTION_NAMES = {
    Action.NO_ACTION: "NoAction",
    Action.SET_ROLES: "SetRoles",
    Action.MINT: "Mint",
    Action.BURN: "Burn",
    Action.WHITELIST: "Whitelist",
    Action.BLACKLIST: "Blacklist",
    Action.CONFIG: "Config",
}

# Actions that carry a quorum setting
QUORUM_ACTIONS: Tuple[Action, ...] = (
    Action.SET_ROLES,
    Action.MINT,
    Action.BURN,
    Action.WHITELIST,
    Action.BLACKLIST,
    Action.CONFIG,
)


class VoteOption(Enum):
    """Ballot choice."""
    YES = 1
    NO = 2
    ABSTAIN = 3

    def __str__(self) -> str:
        return self.name.lower()


class ProposalState(Enum):
    """On-chain proposal state."""
    ACTIVE = 1
    PASSED = 2
    REJECTED = 3
    EXPIRED = 4

    def __str__(self) -> str:
        return self.name.lower()


def _lookup(names: Dict[Any, str], value: str) -> Optional[Any]:
    wanted = value.strip().lower()
    for member, name in names.items():
        if name.lower() == wanted:
            return member
    return None


def role_from_string(value: str) -> Role:
    """
    Parse an assignable role name (case-insensitive).

    Raises:
        UnknownRole: For unknown names and for the `User` sentinel
    """
    role = _lookup(_ROLE_NAMES, value)
    if role is None or role not in ASSIGNABLE_ROLES:
        raise UnknownRole(value)
    return role


def action_from_string(value: str) -> Action:
    """
    Parse a proposal action name (case-insensitive).

    Raises:
        UnknownAction: For unknown names and for `NoAction`
    """
    action = _lookup(_ACTION_NAMES, value)
    if action is None or action is Action.NO_ACTION:
        raise UnknownAction(value)
    return action


def vote_from_string(value: str) -> VoteOption:
    """
    Parse yes/no/abstain (case-insensitive).

    Raises:
        UnknownVoteOption: For anything else
    """
    try:
        return VoteOption[value.strip().upper()]
    except KeyError:
        raise UnknownVoteOption(value)


# ══════════════════════════════════════════════════════════════════════
#  AMOUNTS
# ══════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class BaseUnits:
    """Amount in base units of a denomination ("" is the native one)."""
    amount: int = 0
    denomination: str = ""

    def to_cbor(self) -> list:
        quantity = self.amount.to_bytes((self.amount.bit_length() + 7) // 8, "big")
        return [quantity, self.denomination.encode()]

    @classmethod
    def from_cbor(cls, value: list) -> "BaseUnits":
        quantity, denomination = value
        return cls(int.from_bytes(quantity, "big"), denomination.decode())


# ══════════════════════════════════════════════════════════════════════
#  PROPOSAL PAYLOADS
# ══════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class MintBurnData:
    """Payload of Mint and Burn proposals."""
    address: Address
    amount: BaseUnits
    meta: bytes = b""

    def to_body(self) -> Dict[str, Any]:
        return {"address": self.address.raw, "amount": self.amount.to_cbor(), "meta": self.meta}

    @classmethod
    def from_body(cls, body: Dict[str, Any]) -> "MintBurnData":
        return cls(
            address=Address(body["address"]),
            amount=BaseUnits.from_cbor(body["amount"]),
            meta=body.get("meta", b""),
        )

    def to_display(self) -> Dict[str, str]:
        return {
            "Address": str(self.address),
            "Amount": f"{self.amount.amount} {self.amount.denomination or '<native>'}",
            "Meta": _display_meta(self.meta),
        }


@dataclass(frozen=True)
class SetRolesData:
    """Payload of SetRoles proposals."""
    address: Address
    role: Role

    def to_body(self) -> Dict[str, Any]:
        return {"address": self.address.raw, "role": self.role.value}

    @classmethod
    def from_body(cls, body: Dict[str, Any]) -> "SetRolesData":
        return cls(address=Address(body["address"]), role=Role(body["role"]))

    def to_display(self) -> Dict[str, str]:
        return {"Address": str(self.address), "Role": str(self.role)}


@dataclass(frozen=True)
class AddressData:
    """Payload of Whitelist and Blacklist proposals."""
    address: Address

    def to_body(self) -> Dict[str, Any]:
        return {"address": self.address.raw}

    @classmethod
    def from_body(cls, body: Dict[str, Any]) -> "AddressData":
        return cls(address=Address(body["address"]))

    def to_display(self) -> Dict[str, str]:
        return {"Address": str(self.address)}


@dataclass(frozen=True)
class ConfigData:
    """Payload of Config proposals; unset quorums stay unchanged on-chain."""
    mint_quorum: Optional[int] = None
    burn_quorum: Optional[int] = None
    whitelist_quorum: Optional[int] = None
    blacklist_quorum: Optional[int] = None
    config_quorum: Optional[int] = None

    _FIELDS = ("mint_quorum", "burn_quorum", "whitelist_quorum", "blacklist_quorum", "config_quorum")

    def to_body(self) -> Dict[str, Any]:
        return {name: getattr(self, name) for name in self._FIELDS if getattr(self, name) is not None}

    @classmethod
    def from_body(cls, body: Dict[str, Any]) -> "ConfigData":
        return cls(**{name: body.get(name) for name in cls._FIELDS})

    def to_display(self) -> Dict[str, str]:
        return {
            name: f"{getattr(self, name)}%"
            for name in self._FIELDS
            if getattr(self, name) is not None
        }


ProposalData = Union[MintBurnData, SetRolesData, AddressData, ConfigData]

# Payload shape expected for each action
DATA_TYPES = {
    Action.SET_ROLES: SetRolesData,
    Action.MINT: MintBurnData,
    Action.BURN: MintBurnData,
    Action.WHITELIST: AddressData,
    Action.BLACKLIST: AddressData,
    Action.CONFIG: ConfigData,
}


def _display_meta(meta: bytes) -> str:
    try:
        return meta.decode("utf-8")
    except UnicodeDecodeError:
        return "0x" + meta.hex()


@dataclass(frozen=True)
class ProposalContent:
    """Action plus its payload."""
    action: Action
    data: Optional[ProposalData] = None

    def to_body(self) -> Dict[str, Any]:
        return {
            "action": self.action.value,
            "data": self.data.to_body() if self.data is not None else {},
        }

    @classmethod
    def from_body(cls, body: Dict[str, Any]) -> "ProposalContent":
        action = Action(body["action"])
        data_type = DATA_TYPES.get(action)
        if data_type is None:
            return cls(action=action)
        return cls(action=action, data=data_type.from_body(body.get("data") or {}))

    def to_display(self) -> Dict[str, str]:
        result = {"Action": str(self.action)}
        if self.data is not None:
            result.update(self.data.to_display())
        return result


# ══════════════════════════════════════════════════════════════════════
#  CHAIN RECORDS
# ══════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Proposal:
    """
    Proposal as stored by the accounts module.

    Fields:
        id:         Chain-assigned identifier (0 before submission)
        submitter:  Address of the proposer
        state:      Current state (None for an unused slot)
        content:    Action and payload
        results:    Vote tallies by option
    """
    id: int
    submitter: Address
    state: Optional[ProposalState]
    content: ProposalContent
    results: Dict[VoteOption, int] = field(default_factory=dict)

    @classmethod
    def empty(cls, proposal_id: int = 0) -> "Proposal":
        """Unused proposal slot; it has no state."""
        return cls(
            id=proposal_id,
            submitter=Address(bytes(ADDRESS_SIZE)),
            state=None,
            content=ProposalContent(action=Action.NO_ACTION),
        )

    @classmethod
    def from_body(cls, body: Optional[Dict[str, Any]], proposal_id: int = 0) -> "Proposal":
        if body is None:
            return cls.empty(proposal_id)
        # Unused slots come back zero-valued, state 0 included
        content = ProposalContent.from_body(body.get("content") or {"action": Action.NO_ACTION.value})
        if content.action is Action.NO_ACTION:
            return cls.empty(body.get("id") or proposal_id)
        return cls(
            id=body["id"],
            submitter=Address(body["submitter"]),
            state=ProposalState(body["state"]),
            content=content,
            results={VoteOption(k): v for k, v in (body.get("results") or {}).items()},
        )


@dataclass(frozen=True)
class VoteProposal:
    """A ballot for one proposal."""
    id: int
    option: VoteOption

    def to_body(self) -> Dict[str, Any]:
        return {"id": self.id, "option": self.option.value}

    @classmethod
    def from_body(cls, body: Dict[str, Any]) -> "VoteProposal":
        return cls(id=body["id"], option=VoteOption(body["option"]))


@dataclass(frozen=True)
class RoleAddress:
    """Address granted a role by an owner-initialization transaction."""
    addr: Address
    role: Role

    def to_body(self) -> Dict[str, Any]:
        return {"addr": self.addr.raw, "role": self.role.value}

    @classmethod
    def from_body(cls, body: Dict[str, Any]) -> "RoleAddress":
        return cls(addr=Address(body["addr"]), role=Role(body["role"]))
