"""
dfs_core.utils
--------------
Small helpers for receipts and address handling.
Addresses are opaque: nothing here normalizes case or checksums.
"""

from __future__ import annotations
import hashlib
from typing import Optional


def tx_hash(*parts: str) -> str:
    h = hashlib.sha256()
    for p in parts:
        h.update(p.encode("utf-8"))
        h.update(b"\x00")
    return "0x" + h.hexdigest()

def is_blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()

def short(addr: Optional[str]) -> str:
    """Shorten an address for display and logs: 0x1234...abcd."""
    if not addr:
        return ""
    if len(addr) <= 10:
        return addr
    return f"{addr[:6]}...{addr[-4:]}"
