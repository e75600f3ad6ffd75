from __future__ import annotations
from typing import Any, Dict, List, Optional

from dfs_core.errors import AccessDenied, Rejected, TransportError

Receipt = Dict[str, Any]

__all__ = [
    "AccessDenied",
    "BaseLedgerTransport",
    "Receipt",
    "Rejected",
    "TransportError",
]


class BaseLedgerTransport:
    """
    Ledger transport contract.

    Calls are synchronous and may block; the gateway runs them off the event
    loop. `call` is a side-effect-free query, `transact` submits a mutation and
    returns its receipt once the ledger accepts it.

    Implementations raise AccessDenied, Rejected or TransportError; any other
    exception escaping a transport is a bug.
    """
    name: str = "base"

    def call(self, function: str, args: List[Any], account: Optional[str] = None) -> Any:
        raise NotImplementedError

    def transact(self, function: str, args: List[Any], account: str) -> Receipt:
        raise NotImplementedError

    def healthz(self) -> dict:
        return {"status": "ok", "transport": self.name}

    def close(self) -> None:
        return
