"""
dfs_core.identity
-----------------
Holds the active caller identity and fans identity changes out to listeners.

Identities are opaque address strings compared exactly; an empty identity is
the disconnected state. Every change bumps `epoch`, which in-flight work uses
to recognise results that belong to a previous identity.
"""

from __future__ import annotations
from typing import Awaitable, Callable, List, Optional

from dfs_core.logger import get_logger
from dfs_core.utils import is_blank, short

log = get_logger("DFS.Identity")

IdentityListener = Callable[[str, str], Awaitable[None]]


class SessionProvider:
    """Wallet/session seam: hands out the accounts the user has unlocked."""

    def request_accounts(self) -> List[str]:
        raise NotImplementedError


class StaticSessionProvider(SessionProvider):
    def __init__(self, accounts: Optional[List[str]] = None):
        self.accounts = list(accounts or [])

    def request_accounts(self) -> List[str]:
        return list(self.accounts)


class IdentityContext:
    def __init__(self, identity: str = ""):
        self._active = "" if is_blank(identity) else identity
        self._epoch = 0
        self._listeners: List[IdentityListener] = []

    @property
    def active(self) -> str:
        return self._active

    @property
    def is_connected(self) -> bool:
        return bool(self._active)

    @property
    def epoch(self) -> int:
        return self._epoch

    def subscribe(self, listener: IdentityListener) -> Callable[[], None]:
        """Register an async listener; returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def switch(self, identity: Optional[str]) -> bool:
        """
        Make `identity` the active one and await every listener in order.

        Returns False when the identity did not change.
        """
        new = "" if is_blank(identity) else identity
        if new == self._active:
            return False

        previous = self._active
        self._active = new
        self._epoch += 1
        log.info(f"[IDENTITY] {short(previous) or '<none>'} → {short(new) or '<none>'} epoch={self._epoch}")

        for listener in list(self._listeners):
            await listener(previous, new)
        return True
