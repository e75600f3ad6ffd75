# dfs_core/viewer.py

from __future__ import annotations

from dfs_core.cache import RegistryCache
from dfs_core.errors import AccessDenied, DfsError, InvalidInput, Unauthenticated
from dfs_core.logger import get_logger
from dfs_core.models import ViewState, ViewStatus
from dfs_core.utils import is_blank, short

log = get_logger("DFS.Viewer")


class CrossIdentityViewer:
    """
    Read path for files owned by another identity.

    State machine per view:
        UNQUERIED -> LOADING -> LOADED(files) | DENIED | TRANSPORT_ERROR

    LOADED with no files means access was granted and the owner has nothing
    registered; DENIED means the ledger refused. A new call always re-enters
    LOADING; a response for a superseded call leaves the current state alone.
    """

    def __init__(self, cache: RegistryCache):
        self.cache = cache
        self._state = ViewState.unqueried()

    @property
    def state(self) -> ViewState:
        return self._state

    @property
    def status(self) -> ViewStatus:
        return self._state.status

    def reset(self) -> None:
        self._state = ViewState.unqueried()

    async def view_files(self, target: str) -> ViewState:
        if not self.cache.identity.is_connected:
            raise Unauthenticated("connect an identity before viewing files")
        if is_blank(target):
            raise InvalidInput("target identity is required")

        mine = ViewState.loading(target)
        self._state = mine
        log.info(f"[VIEW] loading {short(target)}")

        try:
            files = await self.cache.refresh_other_files(target)
        except AccessDenied as e:
            if self._state is mine:
                self._state = ViewState.denied(target, e)
                log.info(f"[VIEW] {short(target)} denied")
            return self._state
        except Exception as e:
            if self._state is mine:
                self._state = ViewState.transport_error(target, e)
                log.warning(f"[VIEW] {short(target)} failed: {e}")
            if not isinstance(e, DfsError):
                raise
            return self._state

        if self._state is mine:
            if files is None:
                # superseded by an identity change the viewer was not told about
                self._state = ViewState.unqueried()
                log.info(f"[VIEW] {short(target)} discarded after identity change")
            else:
                self._state = ViewState.loaded(target, files)
                log.info(f"[VIEW] {short(target)} loaded count={len(files)}")
        return self._state
