# dfs_core/config.py

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Optional
import os

from dfs_core.constants import (
    DEFAULT_CONTRACT_ADDRESS,
    DEFAULT_IPFS_GATEWAY,
    DEFAULT_LEDGER_URL,
    DEFAULT_PINATA_API_URL,
)
from dfs_core.errors import ConfigurationError

LEDGER_TRANSPORTS = ("local", "http")


@dataclass(frozen=True)
class DfsConfig:
    ledger_transport: str = "local"
    ledger_url: str = DEFAULT_LEDGER_URL
    contract_address: str = DEFAULT_CONTRACT_ADDRESS
    ledger_token: Optional[str] = None
    ledger_timeout: float = 10.0
    pinata_jwt: Optional[str] = None
    pinata_api_url: str = DEFAULT_PINATA_API_URL
    ipfs_gateway: str = DEFAULT_IPFS_GATEWAY
    upload_timeout: float = 60.0
    log_level: str = "INFO"


def _float(key: str, raw: Any) -> float:
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{key} must be a number, got {raw!r}")
    if value <= 0:
        raise ConfigurationError(f"{key} must be positive, got {raw!r}")
    return value


def load_config(config: Dict[str, Any] | None = None) -> DfsConfig:
    """
    Resolve client configuration.

    Explicit keys in `config` win over DFS_* environment variables, which win
    over the defaults baked into DfsConfig.
    """
    config = config or {}

    def pick(key: str, env: str, default: Any = None) -> Any:
        value = config.get(key)
        if value is None:
            value = os.getenv(env)
        if value is None or (isinstance(value, str) and not value.strip()):
            return default
        return value.strip() if isinstance(value, str) else value

    transport = str(pick("ledger_transport", "DFS_LEDGER_TRANSPORT", "local")).lower()
    if transport not in LEDGER_TRANSPORTS:
        raise ConfigurationError(f"Unknown ledger transport: {transport}")

    return DfsConfig(
        ledger_transport=transport,
        ledger_url=str(pick("ledger_url", "DFS_LEDGER_URL", DEFAULT_LEDGER_URL)).rstrip("/"),
        contract_address=pick("contract_address", "DFS_CONTRACT_ADDRESS", DEFAULT_CONTRACT_ADDRESS),
        ledger_token=pick("ledger_token", "DFS_LEDGER_TOKEN"),
        ledger_timeout=_float("ledger_timeout", pick("ledger_timeout", "DFS_LEDGER_TIMEOUT", 10.0)),
        pinata_jwt=pick("pinata_jwt", "DFS_PINATA_JWT"),
        pinata_api_url=pick("pinata_api_url", "DFS_PINATA_API_URL", DEFAULT_PINATA_API_URL),
        ipfs_gateway=str(pick("ipfs_gateway", "DFS_IPFS_GATEWAY", DEFAULT_IPFS_GATEWAY)).rstrip("/"),
        upload_timeout=_float("upload_timeout", pick("upload_timeout", "DFS_UPLOAD_TIMEOUT", 60.0)),
        log_level=str(pick("log_level", "DFS_LOG_LEVEL", "INFO")).upper(),
    )
