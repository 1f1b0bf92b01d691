"""
Chain connection errors.

Raised by hela.client and propagated to the command layer unchanged.
"""

from typing import Any, Optional

from ..exceptions import HelaError


class ConnectionFailed(HelaError):
    """The RPC endpoint could not be reached or returned a non-JSON-RPC reply."""
    pass


class RpcError(HelaError):
    """JSON-RPC error object returned by the node."""

    def __init__(self, code: int, message: str, data: Optional[Any] = None):
        self.code = code
        self.message = message
        self.data = data
        super().__init__(f"RPC error {code}: {message}")

    @classmethod
    def from_dict(cls, error: dict) -> "RpcError":
        return cls(
            code=error.get("code", 0),
            message=error.get("message", "Unknown error"),
            data=error.get("data"),
        )
