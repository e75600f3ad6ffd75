# dfs_core/transport/__init__.py
from __future__ import annotations
from dfs_core.config import DfsConfig, load_config
from dfs_core.transport.transport_base import BaseLedgerTransport
from dfs_core.transport.transport_local import LocalLedger
from dfs_core.transport.transport_http import HTTPLedgerAdapter


def ledger_transport_factory(config: DfsConfig | None = None) -> BaseLedgerTransport:
    """
    mode (DFS_LEDGER_TRANSPORT):
      - "local" → in-process registry contract (dev / tests)
      - "http"  → ledger gateway service at DFS_LEDGER_URL
    """
    config = config or load_config()

    if config.ledger_transport == "http":
        return HTTPLedgerAdapter(
            config.ledger_url,
            contract_address=config.contract_address,
            timeout=config.ledger_timeout,
            token=config.ledger_token,
        )

    return LocalLedger()


__all__ = [
    "BaseLedgerTransport",
    "HTTPLedgerAdapter",
    "LocalLedger",
    "ledger_transport_factory",
]
