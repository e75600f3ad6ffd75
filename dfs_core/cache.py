"""
dfs_core.cache
--------------
Client-side mirror of the registry: the caller's own files, the files of the
most recently viewed other identity, and the grants the caller has handed out.

Every slot is replaced wholesale from a fresh ledger query; nothing is patched
incrementally. A slot reads as None until it has been loaded for the current
identity.

Each refresh remembers the identity epoch and cache generation it was issued
under. A response that settles after either has moved on is discarded, so a
late answer for a previous identity never lands in the new identity's slots.
Among responses for the same slot, the last one to settle wins.
"""

from __future__ import annotations
from typing import Optional, Tuple

from dfs_core.errors import InvalidInput, Unauthenticated
from dfs_core.gateway import LedgerGateway
from dfs_core.identity import IdentityContext
from dfs_core.logger import get_logger
from dfs_core.models import AccessGrant, FileRecord, RegistrySnapshot
from dfs_core.utils import is_blank, short

log = get_logger("DFS.Cache")

Token = Tuple[int, int]


class RegistryCache:
    def __init__(self, gateway: LedgerGateway, identity: IdentityContext):
        self.gateway = gateway
        self.identity = identity
        self.version = 0
        self._generation = 0
        self._own: Optional[Tuple[str, ...]] = None
        self._grants: Optional[Tuple[AccessGrant, ...]] = None
        self._other_target = ""
        self._other: Optional[Tuple[str, ...]] = None

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    @property
    def own_files(self) -> Optional[Tuple[str, ...]]:
        return self._own

    @property
    def grants(self) -> Optional[Tuple[AccessGrant, ...]]:
        return self._grants

    @property
    def other_target(self) -> str:
        return self._other_target

    @property
    def other_files(self) -> Optional[Tuple[str, ...]]:
        return self._other

    def files_for(self, identity: str) -> Optional[Tuple[str, ...]]:
        if identity and identity == self.identity.active and self._own is not None:
            return self._own
        if identity and identity == self._other_target:
            return self._other
        return None

    def records_for(self, identity: str) -> Tuple[FileRecord, ...]:
        return tuple(FileRecord(owner=identity, url=url) for url in self.files_for(identity) or ())

    def snapshot(self) -> RegistrySnapshot:
        return RegistrySnapshot(
            identity=self.identity.active,
            version=self.version,
            epoch=self.identity.epoch,
            own_files=self._own,
            grants=self._grants,
            other_target=self._other_target,
            other_files=self._other,
        )

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------
    def reset(self) -> None:
        """Drop every slot; in-flight refreshes issued before this are discarded."""
        self._generation += 1
        self._own = None
        self._grants = None
        self._other_target = ""
        self._other = None
        self.version += 1
        log.info(f"[CACHE] reset generation={self._generation}")

    def _token(self) -> Token:
        return (self.identity.epoch, self._generation)

    def _stale(self, token: Token) -> bool:
        return token != self._token()

    async def refresh_own_files(self) -> Optional[Tuple[str, ...]]:
        caller = self.identity.active
        if not caller:
            return None
        token = self._token()
        try:
            files = await self.gateway.list_files(caller, caller=caller)
        except Exception as e:
            if self._stale(token):
                log.info(f"[CACHE] discarding stale own-files failure for {short(caller)}: {e}")
                return None
            log.warning(f"[CACHE] own files refresh failed for {short(caller)}: {e}")
            raise

        if self._stale(token):
            log.info(f"[CACHE] discarding stale own files for {short(caller)}")
            return None
        self._own = files
        self.version += 1
        log.info(f"[CACHE] own files {short(caller)} count={len(files)} version={self.version}")
        return files

    async def refresh_grants(self) -> Optional[Tuple[AccessGrant, ...]]:
        caller = self.identity.active
        if not caller:
            return None
        token = self._token()
        try:
            grants = await self.gateway.list_grants(caller=caller)
        except Exception as e:
            if self._stale(token):
                log.info(f"[CACHE] discarding stale grants failure for {short(caller)}: {e}")
                return None
            log.warning(f"[CACHE] grants refresh failed for {short(caller)}: {e}")
            raise

        if self._stale(token):
            log.info(f"[CACHE] discarding stale grants for {short(caller)}")
            return None
        self._grants = grants
        self.version += 1
        log.info(f"[CACHE] grants {short(caller)} count={len(grants)} version={self.version}")
        return grants

    async def refresh_other_files(self, target: str) -> Optional[Tuple[str, ...]]:
        """
        Load `target`'s files into the cross-identity slot.

        The slot moves to `target` immediately. On any failure it is cleared to
        an empty sequence before the error propagates, so a denied view never
        keeps showing files from an earlier answer. Returns None when the
        response was superseded by a newer target or identity.
        """
        caller = self.identity.active
        if is_blank(target):
            raise InvalidInput("target identity is required")
        if not caller:
            raise Unauthenticated("no active identity")
        token = self._token()
        if self._other_target != target:
            self._other_target = target
            self._other = None
            self.version += 1

        try:
            files = await self.gateway.list_files(target, caller=caller)
        except Exception as e:
            if self._stale(token) or self._other_target != target:
                log.info(f"[CACHE] discarding stale failure for {short(target)}: {e}")
                return None
            self._other = ()
            self.version += 1
            log.warning(f"[CACHE] other files for {short(target)} cleared: {e}")
            raise

        if self._stale(token) or self._other_target != target:
            log.info(f"[CACHE] discarding stale files for {short(target)}")
            return None
        self._other = files
        self.version += 1
        log.info(f"[CACHE] other files {short(target)} count={len(files)} version={self.version}")
        return files
