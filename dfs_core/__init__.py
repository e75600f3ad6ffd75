"""
DFS Core Package
================
Client core for the decentralized file registry.

Provides:
- Ledger gateway over pluggable transports (in-process, HTTP)
- Registry cache mirroring files and access grants from the ledger
- Grant/revoke workflow and cross-identity viewer
- Pinata upload client and the DfsClient coordinator
"""

from dfs_core.client import DfsClient
from dfs_core.config import DfsConfig, load_config

__all__ = ["DfsClient", "DfsConfig", "load_config"]
