"""
Governance Proposal Codec

Turns a proposal document

    {"action": "Mint", "data": {"address": "...", "amount": "100.5", "meta": "..."}}

into a ProposalContent. The data object is first decoded into
ProposalDataFields, where every field is optional, and then checked against
a closed table of the fields each action accepts. A field outside that set
rejects the whole document before any address or amount is resolved.
"""

import json
from dataclasses import dataclass, fields
from typing import Any, Callable, Dict, FrozenSet, Optional, Tuple, Union

from ..config import ParaTime
from ..constants import MAX_UINT32, NATIVE_DENOMINATION
from ..crypto import Address
from ..exceptions import InvalidProposalFields, InvalidProposalID
from ..helpers import parse_paratime_denomination
from ..logger import get_logger
from .types import (
    Action,
    AddressData,
    BaseUnits,
    ConfigData,
    MintBurnData,
    ProposalContent,
    SetRolesData,
    VoteProposal,
    action_from_string,
    role_from_string,
    vote_from_string,
)

logger = get_logger(__name__)

AddressResolver = Callable[[str], Address]


# ══════════════════════════════════════════════════════════════════════
#  RAW FIELDS
# ══════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class ProposalDataFields:
    """Every field any action may carry, each independently optional."""
    address: Optional[str] = None
    amount: Optional[str] = None
    meta: Optional[str] = None
    role: Optional[str] = None
    mint_quorum: Optional[int] = None
    burn_quorum: Optional[int] = None
    whitelist_quorum: Optional[int] = None
    blacklist_quorum: Optional[int] = None
    config_quorum: Optional[int] = None

    @classmethod
    def from_json(cls, data: Any) -> "ProposalDataFields":
        """
        Decode the `data` object of a proposal document.

        Raises:
            InvalidProposalFields: Unknown keys or values of the wrong type
        """
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise InvalidProposalFields("proposal data must be a JSON object")

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise InvalidProposalFields(f"unknown proposal fields: {', '.join(unknown)}")

        values: Dict[str, Any] = {}
        for name, value in data.items():
            if value is None:
                continue
            if name.endswith("_quorum"):
                if isinstance(value, bool) or not isinstance(value, int):
                    raise InvalidProposalFields(f"'{name}' must be an integer")
            elif not isinstance(value, str):
                raise InvalidProposalFields(f"'{name}' must be a string")
            values[name] = value
        return cls(**values)

    def present(self) -> FrozenSet[str]:
        """Names of the fields that were supplied."""
        return frozenset(f.name for f in fields(self) if getattr(self, f.name) is not None)


_QUORUM_FIELDS = frozenset({
    "mint_quorum",
    "burn_quorum",
    "whitelist_quorum",
    "blacklist_quorum",
    "config_quorum",
})

# Fields each action accepts, and the subset it requires
LEGAL_FIELDS: Dict[Action, FrozenSet[str]] = {
    Action.MINT: frozenset({"address", "amount", "meta"}),
    Action.BURN: frozenset({"address", "amount", "meta"}),
    Action.SET_ROLES: frozenset({"address", "role"}),
    Action.WHITELIST: frozenset({"address"}),
    Action.BLACKLIST: frozenset({"address"}),
    Action.CONFIG: _QUORUM_FIELDS,
}

REQUIRED_FIELDS: Dict[Action, FrozenSet[str]] = {
    Action.MINT: frozenset({"address", "amount"}),
    Action.BURN: frozenset({"address", "amount"}),
    Action.SET_ROLES: frozenset({"address", "role"}),
    Action.WHITELIST: frozenset({"address"}),
    Action.BLACKLIST: frozenset({"address"}),
    Action.CONFIG: frozenset(),
}


def check_fields(action: Action, raw: ProposalDataFields) -> None:
    """
    Enforce the field whitelist of *action*.

    Raises:
        InvalidProposalFields: A foreign field is present or a required one is missing
    """
    present = raw.present()
    foreign = present - LEGAL_FIELDS[action]
    if foreign:
        raise InvalidProposalFields(
            f"invalid input for {action} proposal: unexpected fields {', '.join(sorted(foreign))}"
        )
    missing = REQUIRED_FIELDS[action] - present
    if missing:
        raise InvalidProposalFields(
            f"invalid input for {action} proposal: missing fields {', '.join(sorted(missing))}"
        )


def string_to_meta(value: Optional[str]) -> bytes:
    """
    Decode the proposal `meta` string: `0x`-prefixed hex, otherwise UTF-8 text.

    Raises:
        InvalidProposalFields: Malformed hex
    """
    if not value:
        return b""
    if value.startswith(("0x", "0X")):
        try:
            return bytes.fromhex(value[2:])
        except ValueError:
            raise InvalidProposalFields(f"malformed hex meta: {value}")
    return value.encode("utf-8")


# ══════════════════════════════════════════════════════════════════════
#  DECODING
# ══════════════════════════════════════════════════════════════════════

def decode_envelope(raw: Union[str, bytes]) -> Tuple[str, Any]:
    """
    Split a proposal document into its action string and raw data.

    Raises:
        InvalidProposalFields: Malformed JSON or envelope
    """
    try:
        document = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise InvalidProposalFields(f"malformed proposal document: {e}")

    if not isinstance(document, dict):
        raise InvalidProposalFields("proposal document must be a JSON object")
    extra = sorted(set(document) - {"action", "data"})
    if extra:
        raise InvalidProposalFields(f"unknown proposal document keys: {', '.join(extra)}")

    action = document.get("action")
    if not isinstance(action, str):
        raise InvalidProposalFields("proposal document must name an action")
    return action, document.get("data")


def parse_proposal(
    raw: Union[str, bytes],
    resolve_address: AddressResolver,
    paratime: ParaTime,
) -> ProposalContent:
    """
    Parse and validate a proposal document.

    Args:
        raw: JSON text `{"action": ..., "data": {...}}`
        resolve_address: Maps an account name or address string to an Address
        paratime: Runtime whose native denomination scales `amount`

    Returns:
        ProposalContent ready for new_propose_tx()

    Raises:
        InvalidProposalFields: Malformed document, foreign or missing fields
        UnknownAction: Unknown action name
        UnknownRole: Unknown role name (SetRoles)
        UnresolvableAddress: Address cannot be resolved
        InvalidAmount: Amount cannot be scaled to base units
    """
    action_str, data = decode_envelope(raw)
    action = action_from_string(action_str)
    fields_ = ProposalDataFields.from_json(data)
    check_fields(action, fields_)

    if action in (Action.MINT, Action.BURN):
        payload = MintBurnData(
            address=resolve_address(fields_.address),
            amount=BaseUnits(
                parse_paratime_denomination(paratime, fields_.amount, NATIVE_DENOMINATION),
                NATIVE_DENOMINATION,
            ),
            meta=string_to_meta(fields_.meta),
        )
    elif action is Action.SET_ROLES:
        payload = SetRolesData(
            address=resolve_address(fields_.address),
            role=role_from_string(fields_.role),
        )
    elif action in (Action.WHITELIST, Action.BLACKLIST):
        payload = AddressData(address=resolve_address(fields_.address))
    else:
        payload = ConfigData(
            mint_quorum=fields_.mint_quorum,
            burn_quorum=fields_.burn_quorum,
            whitelist_quorum=fields_.whitelist_quorum,
            blacklist_quorum=fields_.blacklist_quorum,
            config_quorum=fields_.config_quorum,
        )

    logger.debug("Parsed %s proposal: %s", action, payload)
    return ProposalContent(action=action, data=payload)


def parse_proposal_id(value: str) -> int:
    """
    Parse a proposal ID given on the command line.

    Raises:
        InvalidProposalID: Not a decimal unsigned 32-bit integer
    """
    text = value.strip()
    if not text.isdecimal() or not text.isascii():
        raise InvalidProposalID(value)
    proposal_id = int(text)
    if proposal_id > MAX_UINT32:
        raise InvalidProposalID(value)
    return proposal_id


def parse_vote(proposal_id: str, option: str) -> VoteProposal:
    """
    Build the ballot for `vote <proposalID> <option>`.

    Raises:
        InvalidProposalID: Malformed ID
        UnknownVoteOption: Option other than yes/no/abstain
    """
    return VoteProposal(id=parse_proposal_id(proposal_id), option=vote_from_string(option))
