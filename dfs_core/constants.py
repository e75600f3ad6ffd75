# dfs_core/constants.py

# Registry contract entry points
FN_ADD = "add"
FN_ALLOW = "allow"
FN_DISALLOW = "disallow"
FN_DISPLAY = "display"
FN_SHARE_ACCESS = "shareAccess"

# Revert reason raised by `display` when the caller holds no grant
ACCESS_DENIED_REASON = "You don't have access"

DEFAULT_CONTRACT_ADDRESS = "0x5FbDB2315678afecb367f032d93F642f64180aa3"
DEFAULT_LEDGER_URL = "http://127.0.0.1:8545"
DEFAULT_PINATA_API_URL = "https://api.pinata.cloud/pinning/pinFileToIPFS"
DEFAULT_IPFS_GATEWAY = "https://gateway.pinata.cloud/ipfs"
