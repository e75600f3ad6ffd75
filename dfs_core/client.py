"""
dfs_core.client
---------------
DfsClient: the single coordinator that owns the application state.

Presentation code reads `snapshot()` and `viewer.state`, and drives the
workflows below. Wallet notifications (account switches) come in through
`on_accounts_changed`; nothing else mutates the state.

Every mutation workflow awaits its follow-up refresh before returning, so the
result a caller gets already reflects the ledger's post-mutation state.
"""

from __future__ import annotations
import asyncio
from typing import BinaryIO, Dict, List, Optional

from dfs_core.access import AccessControl
from dfs_core.cache import RegistryCache
from dfs_core.config import DfsConfig, load_config
from dfs_core.errors import ConfigurationError, DfsError, Unauthenticated
from dfs_core.gateway import LedgerGateway
from dfs_core.identity import IdentityContext, SessionProvider
from dfs_core.logger import get_logger, set_level
from dfs_core.models import AccessResult, IdentitySync, RegisterResult, RegistrySnapshot, ViewState
from dfs_core.transport import ledger_transport_factory
from dfs_core.transport.transport_base import BaseLedgerTransport
from dfs_core.upload import PinataUploader
from dfs_core.utils import short
from dfs_core.viewer import CrossIdentityViewer

log = get_logger("DFS.Client")


class DfsClient:
    def __init__(
        self,
        transport: BaseLedgerTransport,
        session: Optional[SessionProvider] = None,
        uploader: Optional[PinataUploader] = None,
    ):
        self.transport = transport
        self.session = session
        self.uploader = uploader
        self.identity = IdentityContext()
        self.gateway = LedgerGateway(transport, self.identity)
        self.cache = RegistryCache(self.gateway, self.identity)
        self.access = AccessControl(self.gateway, self.cache)
        self.viewer = CrossIdentityViewer(self.cache)
        self.last_sync: Optional[IdentitySync] = None
        self._syncs: Dict[int, IdentitySync] = {}
        self.identity.subscribe(self._on_identity_changed)

    @classmethod
    def from_config(
        cls,
        config: Optional[DfsConfig] = None,
        session: Optional[SessionProvider] = None,
    ) -> "DfsClient":
        config = config or load_config()
        set_level(config.log_level)
        uploader = PinataUploader(
            config.pinata_jwt,
            api_url=config.pinata_api_url,
            gateway_base=config.ipfs_gateway,
            timeout=config.upload_timeout,
        )
        return cls(ledger_transport_factory(config), session=session, uploader=uploader)

    # ------------------------------------------------------------------
    # Identity
    # ------------------------------------------------------------------
    async def connect(self) -> IdentitySync:
        """Ask the session provider for accounts and activate the first one."""
        if self.session is None:
            raise ConfigurationError("no session provider configured")
        accounts = await asyncio.to_thread(self.session.request_accounts)
        if not accounts:
            raise Unauthenticated("session provider returned no accounts")
        return await self.switch_identity(accounts[0])

    async def on_accounts_changed(self, accounts: Optional[List[str]]) -> IdentitySync:
        return await self.switch_identity(accounts[0] if accounts else "")

    async def switch_identity(self, identity: Optional[str]) -> IdentitySync:
        """
        Activate `identity` and return the sync run for this very change.

        If another switch lands while this one's refreshes are in flight, the
        returned sync reports what this change saw (late results discarded),
        while `last_sync` keeps describing the identity that is active now.
        """
        epoch = self.identity.epoch + 1
        changed = await self.identity.switch(identity)
        sync = self._syncs.pop(epoch, None) if changed else None
        if sync is None:
            current = self.identity.active
            return IdentitySync(
                previous=current,
                identity=current,
                own_files=self.cache.own_files,
                grants=self.cache.grants,
            )
        return sync

    async def _on_identity_changed(self, previous: str, current: str) -> None:
        epoch = self.identity.epoch
        self.cache.reset()
        self.viewer.reset()

        if not current:
            sync = IdentitySync(previous=previous, identity=current)
            log.info(f"[CLIENT] disconnected from {short(previous)}")
        else:
            results = await asyncio.gather(
                self.cache.refresh_own_files(),
                self.cache.refresh_grants(),
                return_exceptions=True,
            )
            for r in results:
                if isinstance(r, BaseException) and not isinstance(r, DfsError):
                    raise r

            errors = tuple(r for r in results if isinstance(r, DfsError))
            own, grants = (None if isinstance(r, BaseException) else r for r in results)
            for e in errors:
                log.warning(f"[CLIENT] initial sync for {short(current)} failed: {e}")
            sync = IdentitySync(
                previous=previous,
                identity=current,
                own_files=own,
                grants=grants,
                errors=errors,
            )

        self._syncs[epoch] = sync
        if epoch == self.identity.epoch:
            self.last_sync = sync
        else:
            log.info(f"[CLIENT] sync for {short(current)} finished after a newer switch")

    # ------------------------------------------------------------------
    # Files
    # ------------------------------------------------------------------
    async def add_file(self, url: str) -> RegisterResult:
        """Register `url` under the active identity, then reload its file list."""
        receipt = await self.gateway.register_file(self.identity.active, url)
        log.info(f"[CLIENT] saved {url} for {short(self.identity.active)}")
        # the add is final once accepted
        try:
            files = await self.cache.refresh_own_files()
        except DfsError as e:
            log.warning(f"[CLIENT] reload after saving {url} failed: {e}")
            return RegisterResult(url=url, receipt=receipt, refresh_error=e)
        return RegisterResult(url=url, receipt=receipt, files=files)

    async def upload(self, fileobj: Optional[BinaryIO], name: str = "upload") -> str:
        if self.uploader is None:
            raise ConfigurationError("no upload service configured")
        return await asyncio.to_thread(self.uploader.upload, fileobj, name)

    async def upload_and_add(self, fileobj: Optional[BinaryIO], name: str = "upload") -> RegisterResult:
        if not self.identity.is_connected:
            raise Unauthenticated("connect an identity before adding files")
        url = await self.upload(fileobj, name)
        return await self.add_file(url)

    async def refresh_own_files(self):
        return await self.cache.refresh_own_files()

    async def refresh_grants(self):
        return await self.cache.refresh_grants()

    # ------------------------------------------------------------------
    # Sharing / viewing
    # ------------------------------------------------------------------
    async def grant(self, grantee: str) -> AccessResult:
        return await self.access.grant(grantee)

    async def revoke(self, grantee: str) -> AccessResult:
        return await self.access.revoke(grantee)

    async def view_files(self, target: str) -> ViewState:
        return await self.viewer.view_files(target)

    def snapshot(self) -> RegistrySnapshot:
        return self.cache.snapshot()

    def close(self) -> None:
        self.transport.close()
