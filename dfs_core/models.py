# dfs_core/models.py

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class FileRecord:
    """
    Pointer to externally stored content, owned by exactly one identity.

    Only the URL is tracked client-side; ordering follows ledger insertion order.
    """
    owner: str
    url: str


@dataclass(frozen=True)
class AccessGrant:
    """
    One entry of the caller's share list: `user` may (or may no longer) read
    the caller's files. Mirrors the ledger entry as returned, duplicates included.
    """
    user: str
    access: bool

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AccessGrant":
        return cls(user=str(data["user"]), access=bool(data["access"]))

    @classmethod
    def from_wire(cls, raw: Any) -> "AccessGrant":
        # Ledger decoders return either {"user", "access"} or a (user, access) tuple
        if isinstance(raw, AccessGrant):
            return raw
        if isinstance(raw, dict):
            return cls.from_dict(raw)
        user, access = raw
        return cls(user=str(user), access=bool(access))


class ViewStatus(str, Enum):
    UNQUERIED = "unqueried"
    LOADING = "loading"
    LOADED = "loaded"
    DENIED = "denied"
    TRANSPORT_ERROR = "transport_error"


@dataclass(frozen=True)
class ViewState:
    status: ViewStatus = ViewStatus.UNQUERIED
    target: str = ""
    files: Tuple[str, ...] = ()
    error: Optional[Exception] = None

    @property
    def is_terminal(self) -> bool:
        return self.status in (ViewStatus.LOADED, ViewStatus.DENIED, ViewStatus.TRANSPORT_ERROR)

    @staticmethod
    def unqueried() -> "ViewState":
        return ViewState()

    @staticmethod
    def loading(target: str) -> "ViewState":
        return ViewState(status=ViewStatus.LOADING, target=target)

    @staticmethod
    def loaded(target: str, files: Tuple[str, ...]) -> "ViewState":
        return ViewState(status=ViewStatus.LOADED, target=target, files=tuple(files))

    @staticmethod
    def denied(target: str, error: Exception) -> "ViewState":
        return ViewState(status=ViewStatus.DENIED, target=target, error=error)

    @staticmethod
    def transport_error(target: str, error: Exception) -> "ViewState":
        return ViewState(status=ViewStatus.TRANSPORT_ERROR, target=target, error=error)


@dataclass(frozen=True)
class RegistrySnapshot:
    """Point-in-time copy of the registry cache handed to presentation."""
    identity: str
    version: int
    epoch: int
    own_files: Optional[Tuple[str, ...]]
    grants: Optional[Tuple[AccessGrant, ...]]
    other_target: str = ""
    other_files: Optional[Tuple[str, ...]] = None

    def files_by_owner(self) -> Dict[str, Tuple[str, ...]]:
        out: Dict[str, Tuple[str, ...]] = {}
        if self.other_target and self.other_files is not None:
            out[self.other_target] = self.other_files
        if self.identity and self.own_files is not None:
            out[self.identity] = self.own_files
        return out


@dataclass(frozen=True)
class AccessResult:
    grantee: str
    allow: bool
    receipt: Dict[str, Any] = field(default_factory=dict)
    grants: Optional[Tuple[AccessGrant, ...]] = None
    # set when the ledger accepted the mutation but the follow-up query failed
    refresh_error: Optional[Exception] = None


@dataclass(frozen=True)
class RegisterResult:
    url: str
    receipt: Dict[str, Any] = field(default_factory=dict)
    files: Optional[Tuple[str, ...]] = None
    refresh_error: Optional[Exception] = None


@dataclass(frozen=True)
class IdentitySync:
    """Outcome of the refreshes run as part of an identity change."""
    previous: str
    identity: str
    own_files: Optional[Tuple[str, ...]] = None
    grants: Optional[Tuple[AccessGrant, ...]] = None
    errors: Tuple[Exception, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.errors
