"""
HELA Chain Client

JSON-RPC connection to a network and its runtimes.
"""

from .connection import (
    AccountsModule,
    BlockHeader,
    Connection,
    ConsensusClient,
    CoreModule,
    RuntimeClient,
    SubmitResult,
    connect,
)
from .exceptions import ConnectionFailed, RpcError

__all__ = [
    "AccountsModule",
    "BlockHeader",
    "Connection",
    "ConsensusClient",
    "CoreModule",
    "RuntimeClient",
    "SubmitResult",
    "connect",
    "ConnectionFailed",
    "RpcError",
]
