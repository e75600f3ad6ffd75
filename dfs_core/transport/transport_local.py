# dfs_core/transport/transport_local.py

from __future__ import annotations
import threading
from typing import Any, Dict, List, Optional, Set

from dfs_core.constants import (
    ACCESS_DENIED_REASON,
    FN_ADD,
    FN_ALLOW,
    FN_DISALLOW,
    FN_DISPLAY,
    FN_SHARE_ACCESS,
)
from dfs_core.logger import get_logger
from dfs_core.transport.transport_base import (
    AccessDenied,
    BaseLedgerTransport,
    Receipt,
    Rejected,
    TransportError,
)
from dfs_core.utils import short, tx_hash

log = get_logger("DFS.Transport.Local")


class LocalLedger(BaseLedgerTransport):
    """
    In-process model of the file registry contract.

    Mirrors the contract's storage layout:
      - files:     owner -> [url, ...]
      - ownership: owner -> {user: bool}
      - shares:    owner -> [{"user", "access"}, ...]   (insertion ordered)
      - seen:      owner -> {user}                       (ever listed in shares)
    """

    name = "local"

    def __init__(self, declined: Optional[Set[str]] = None):
        self._lock = threading.Lock()
        self.files: Dict[str, List[str]] = {}
        self.ownership: Dict[str, Dict[str, bool]] = {}
        self.shares: Dict[str, List[Dict[str, Any]]] = {}
        self.seen: Dict[str, Set[str]] = {}
        self.declined: Set[str] = set(declined or ())
        self.block = 0
        self.online = True

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def call(self, function: str, args: List[Any], account: Optional[str] = None) -> Any:
        self._check_online()
        with self._lock:
            if function == FN_DISPLAY:
                (owner,) = args
                return self._display(owner, account)
            if function == FN_SHARE_ACCESS:
                return [dict(entry) for entry in self.shares.get(account or "", [])]
        raise TransportError(f"unknown query function: {function}")

    def _display(self, owner: str, sender: Optional[str]) -> List[str]:
        if owner != sender and not self.ownership.get(owner, {}).get(sender or "", False):
            log.info(f"[LOCAL CALL] display denied owner={short(owner)} sender={short(sender)}")
            raise AccessDenied(ACCESS_DENIED_REASON, {"owner": owner, "caller": sender})
        return list(self.files.get(owner, []))

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def transact(self, function: str, args: List[Any], account: str) -> Receipt:
        self._check_online()
        if not account:
            raise Rejected("missing sender", {"function": function})
        if account in self.declined:
            raise Rejected("User denied transaction signature.", {"function": function, "account": account})

        with self._lock:
            if function == FN_ADD:
                owner, url = args
                self.files.setdefault(owner, []).append(url)
            elif function == FN_ALLOW:
                (user,) = args
                self._allow(account, user)
            elif function == FN_DISALLOW:
                (user,) = args
                self._disallow(account, user)
            else:
                raise Rejected(f"unknown mutation function: {function}")
            self.block += 1
            receipt = {
                "tx_hash": tx_hash(function, account, *map(str, args), str(self.block)),
                "status": "success",
                "block": self.block,
            }

        log.info(f"[LOCAL TX] {function} from={short(account)} block={receipt['block']}")
        return receipt

    def _allow(self, sender: str, user: str) -> None:
        self.ownership.setdefault(sender, {})[user] = True
        if user in self.seen.get(sender, set()):
            for entry in self.shares.get(sender, []):
                if entry["user"] == user:
                    entry["access"] = True
        else:
            self.shares.setdefault(sender, []).append({"user": user, "access": True})
            self.seen.setdefault(sender, set()).add(user)

    def _disallow(self, sender: str, user: str) -> None:
        self.ownership.setdefault(sender, {})[user] = False
        for entry in self.shares.get(sender, []):
            if entry["user"] == user:
                entry["access"] = False

    def _check_online(self) -> None:
        if not self.online:
            raise TransportError("ledger unreachable")

    def healthz(self) -> dict:
        return {"status": "ok" if self.online else "down", "transport": self.name, "block": self.block}
