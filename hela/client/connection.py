"""
HELA Chain Connection

JSON-RPC 2.0 over HTTP to a network's node. Binary values travel as hex
strings; runtime query arguments and results are CBOR encoded.

One Connection is opened per command and reused for every call it makes.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import cbor2
import httpx

from ..config import Network, ParaTime
from ..constants import RPC_TIMEOUT
from ..crypto import Address
from ..governance.transactions import Transaction, UnverifiedTransaction
from ..governance.types import Action, Proposal, Role
from ..logger import get_logger
from .exceptions import ConnectionFailed, RpcError

logger = get_logger(__name__)


@dataclass(frozen=True)
class BlockHeader:
    """Runtime block header as returned by consensus.GetLatestBlock."""
    round: int
    timestamp: int = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BlockHeader":
        return cls(round=int(data["round"]), timestamp=int(data.get("timestamp", 0)))


@dataclass(frozen=True)
class SubmitResult:
    """Outcome of runtime.SubmitTx."""
    hash: str
    round: Optional[int] = None


class Connection:
    """
    Connection to one network's RPC endpoint.

    Example:
        with connect(network) as conn:
            context = conn.consensus().get_chain_context()
    """

    def __init__(
        self,
        network: Network,
        client: Optional[httpx.Client] = None,
        timeout: float = RPC_TIMEOUT,
    ):
        self.network = network
        self.url = f"{network.rpc.rstrip('/')}/rpc"
        self._client = client or httpx.Client(timeout=timeout)
        self._request_id = 0

    def call(self, method: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """
        Perform one JSON-RPC call.

        Raises:
            ConnectionFailed: Transport failure or malformed reply
            RpcError: The node returned an error object
        """
        self._request_id += 1
        payload = {
            "jsonrpc": "2.0",
            "method": method,
            "params": [params] if params is not None else [],
            "id": self._request_id,
        }
        logger.debug('--> "POST %s" %s', self.url, method)

        try:
            response = self._client.post(self.url, json=payload)
        except httpx.RequestError as e:
            raise ConnectionFailed(f"failed to reach {self.url}: {e}")

        if response.status_code != 200:
            raise ConnectionFailed(f"{method} failed (HTTP {response.status_code})")

        try:
            result = response.json()
        except ValueError as e:
            raise ConnectionFailed(f"malformed reply to {method}: {e}")

        if "error" in result and result["error"] is not None:
            raise RpcError.from_dict(result["error"])
        logger.debug('<-- %s ok', method)
        return result.get("result")

    def consensus(self) -> "ConsensusClient":
        return ConsensusClient(self)

    def runtime(self, paratime: ParaTime) -> "RuntimeClient":
        return RuntimeClient(self, paratime)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "Connection":
        return self

    def __exit__(self, *exc) -> None:
        self.close()


def connect(network: Network) -> Connection:
    """Open a connection to *network*'s RPC endpoint."""
    logger.info("Connecting to %s", network.rpc)
    return Connection(network)


# ══════════════════════════════════════════════════════════════════════
#  CONSENSUS
# ══════════════════════════════════════════════════════════════════════

class ConsensusClient:
    """Consensus layer queries."""

    def __init__(self, conn: Connection):
        self._conn = conn

    def get_chain_context(self) -> str:
        """Hex-encoded consensus chain domain separation context."""
        return self._conn.call("consensus.GetChainContext")

    def get_latest_block(self, runtime_id: bytes, height: int) -> BlockHeader:
        """
        Latest runtime block as of consensus *height*.

        Public endpoints may refuse historical heights; the error is raised
        unchanged.
        """
        result = self._conn.call(
            "consensus.GetLatestBlock",
            {"runtime_id": runtime_id.hex(), "height": height},
        )
        return BlockHeader.from_dict(result)


# ══════════════════════════════════════════════════════════════════════
#  RUNTIME
# ══════════════════════════════════════════════════════════════════════

class RuntimeClient:
    """Queries and transaction submission for one runtime."""

    def __init__(self, conn: Connection, paratime: ParaTime):
        self._conn = conn
        self.paratime = paratime
        self.accounts = AccountsModule(self)
        self.core = CoreModule(self)

    def query(self, round: int, method: str, args: Any = None) -> Any:
        """Run a read-only runtime query at *round*."""
        result = self._conn.call("runtime.Query", {
            "runtime_id": self.paratime.id,
            "round": round,
            "method": method,
            "args": cbor2.dumps(args, canonical=True).hex(),
        })
        return cbor2.loads(bytes.fromhex(result)) if result else None

    def submit_tx(self, signed: UnverifiedTransaction) -> SubmitResult:
        """Submit a signed transaction and wait for its inclusion."""
        result = self._conn.call("runtime.SubmitTx", {
            "runtime_id": self.paratime.id,
            "data": signed.encode().hex(),
        }) or {}
        return SubmitResult(hash=result.get("hash", ""), round=result.get("round"))


class AccountsModule:
    """Queries of the runtime accounts module."""

    def __init__(self, runtime: RuntimeClient):
        self._rt = runtime

    def proposal_id_info(self, round: int) -> int:
        """ID of the latest proposal."""
        return self._rt.query(round, "accounts.ProposalID")

    def proposal_info(self, round: int, proposal_id: int) -> Proposal:
        body = self._rt.query(round, "accounts.Proposal", {"id": proposal_id})
        return Proposal.from_body(body, proposal_id)

    def roles_team(self, round: int, role: Role) -> List[Address]:
        """Addresses currently holding *role*."""
        team = self._rt.query(round, "accounts.RolesTeam", {"role": role.value}) or []
        return [Address(raw) for raw in team]

    def quorums(self, round: int, action: Action) -> int:
        """Quorum percentage configured for *action*."""
        return self._rt.query(round, "accounts.Quorums", {"action": action.value}) or 0

    def nonce(self, round: int, address: Address) -> int:
        return self._rt.query(round, "accounts.Nonce", {"address": address.raw}) or 0


class CoreModule:
    """Queries of the runtime core module."""

    def __init__(self, runtime: RuntimeClient):
        self._rt = runtime

    def estimate_gas(self, round: int, tx: Transaction) -> int:
        return self._rt.query(round, "core.EstimateGas", {"tx": tx.to_cbor()})
