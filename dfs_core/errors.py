"""
dfs_core.errors
---------------
Error taxonomy shared by the gateway, workflows and transports.

Client-side errors (Unauthenticated, InvalidInput, ConfigurationError) are
raised before any network call. LedgerError subclasses originate from the
ledger or its transport and are surfaced unchanged; nothing retries them.
"""

from __future__ import annotations
from typing import Any, Dict, Optional


class DfsError(Exception):
    code = "dfs_error"

    def __init__(self, message: str = "", details: Optional[Dict[str, Any]] = None):
        super().__init__(message or self.code)
        self.message = message or self.code
        self.details = details or {}


class Unauthenticated(DfsError):
    code = "unauthenticated"


class InvalidInput(DfsError):
    code = "invalid_input"


class ConfigurationError(DfsError, ValueError):
    code = "configuration_error"


class LedgerError(DfsError):
    code = "ledger_error"


class AccessDenied(LedgerError):
    code = "access_denied"


class Rejected(LedgerError):
    code = "rejected"


class TransportError(LedgerError):
    code = "transport_error"


Unreachable = TransportError


class UploadFailed(DfsError):
    code = "upload_failed"
