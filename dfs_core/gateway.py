"""
dfs_core.gateway
----------------
Typed async wrapper over a ledger transport.

Four logical operations:
- list_files(owner)            query     (contract `display`)
- list_grants()                query     (contract `shareAccess`)
- register_file(owner, url)    mutation  (contract `add`)
- set_access(grantee, allow)   mutation  (contract `allow` / `disallow`)

Input validation happens before any transport call. Transport calls block, so
they run in a worker thread and only suspend the awaiting workflow.
"""

from __future__ import annotations
import asyncio
from typing import Any, Optional, Tuple

from dfs_core.constants import FN_ADD, FN_ALLOW, FN_DISALLOW, FN_DISPLAY, FN_SHARE_ACCESS
from dfs_core.errors import InvalidInput, TransportError, Unauthenticated
from dfs_core.identity import IdentityContext
from dfs_core.logger import get_logger
from dfs_core.models import AccessGrant
from dfs_core.transport.transport_base import BaseLedgerTransport, Receipt
from dfs_core.utils import is_blank, short

log = get_logger("DFS.Gateway")


class LedgerGateway:
    def __init__(self, transport: BaseLedgerTransport, identity: IdentityContext):
        self.transport = transport
        self.identity = identity

    def _caller(self, caller: Optional[str]) -> str:
        who = self.identity.active if caller is None else caller
        if is_blank(who):
            raise Unauthenticated("no active identity")
        return who

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    async def list_files(self, owner: str, caller: Optional[str] = None) -> Tuple[str, ...]:
        if is_blank(owner):
            raise InvalidInput("owner identity is required")
        who = self._caller(caller)
        log.debug(f"[LEDGER CALL] display owner={short(owner)} caller={short(who)}")
        raw = await asyncio.to_thread(self.transport.call, FN_DISPLAY, [owner], who)
        if raw is None:
            return ()
        if not isinstance(raw, (list, tuple)):
            raise TransportError(f"unexpected display result: {raw!r}"[:200])
        return tuple(str(url) for url in raw)

    async def list_grants(self, caller: Optional[str] = None) -> Tuple[AccessGrant, ...]:
        who = self._caller(caller)
        log.debug(f"[LEDGER CALL] shareAccess caller={short(who)}")
        raw = await asyncio.to_thread(self.transport.call, FN_SHARE_ACCESS, [], who)
        if raw is None:
            return ()
        try:
            return tuple(AccessGrant.from_wire(entry) for entry in raw)
        except (KeyError, TypeError, ValueError) as e:
            raise TransportError(f"unexpected shareAccess result: {raw!r}"[:200]) from e

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    async def register_file(self, owner: str, url: str) -> Receipt:
        who = self._caller(None)
        if is_blank(owner):
            raise InvalidInput("owner identity is required")
        if is_blank(url):
            raise InvalidInput("file url is required")
        log.info(f"[LEDGER TX] add owner={short(owner)} url={url}")
        return await self._transact(FN_ADD, [owner, url], who)

    async def set_access(self, grantee: str, allow: bool) -> Receipt:
        who = self._caller(None)
        if is_blank(grantee):
            raise InvalidInput("grantee identity is required")
        function = FN_ALLOW if allow else FN_DISALLOW
        log.info(f"[LEDGER TX] {function} grantee={short(grantee)} owner={short(who)}")
        return await self._transact(function, [grantee], who)

    async def _transact(self, function: str, args: list, account: str) -> Receipt:
        receipt: Any = await asyncio.to_thread(self.transport.transact, function, args, account)
        return dict(receipt or {})
