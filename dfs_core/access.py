# dfs_core/access.py

from __future__ import annotations
from typing import Optional

from dfs_core.cache import RegistryCache
from dfs_core.errors import DfsError, InvalidInput, Unauthenticated
from dfs_core.gateway import LedgerGateway
from dfs_core.logger import get_logger
from dfs_core.models import AccessResult
from dfs_core.utils import is_blank, short

log = get_logger("DFS.Access")


class AccessControl:
    """
    Grant/revoke workflow.

    The grants slot is never updated optimistically: after the mutation settles
    (either way) the workflow awaits a fresh `shareAccess` query, and only that
    query changes what the cache shows. If the ledger accepted the
    mutation but that query fails, the receipt is still returned and the query
    error rides along as `refresh_error`. Calls for different grantees are not
    serialized here; the ledger orders them.
    """

    def __init__(self, gateway: LedgerGateway, cache: RegistryCache):
        self.gateway = gateway
        self.cache = cache

    async def grant(self, grantee: str) -> AccessResult:
        return await self.set_access(grantee, True)

    async def revoke(self, grantee: str) -> AccessResult:
        return await self.set_access(grantee, False)

    async def set_access(self, grantee: str, allow: bool) -> AccessResult:
        if not self.gateway.identity.is_connected:
            raise Unauthenticated("connect an identity before sharing access")
        if is_blank(grantee):
            raise InvalidInput("grantee identity is required")

        action = "grant" if allow else "revoke"
        failure: Optional[Exception] = None
        receipt: dict = {}
        try:
            receipt = await self.gateway.set_access(grantee, allow)
            log.info(f"[ACCESS] {action} {short(grantee)} accepted tx={receipt.get('tx_hash', '')}")
        except Exception as e:
            log.warning(f"[ACCESS] {action} {short(grantee)} failed: {e}")
            failure = e

        refresh_error: Optional[DfsError] = None
        try:
            grants = await self.cache.refresh_grants()
        except DfsError as e:
            log.warning(f"[ACCESS] grants refresh after {action} failed: {e}")
            refresh_error = e
            grants = None

        if failure is not None:
            raise failure
        return AccessResult(
            grantee=grantee,
            allow=allow,
            receipt=receipt,
            grants=grants,
            refresh_error=refresh_error,
        )
