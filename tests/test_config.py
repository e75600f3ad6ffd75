import pytest

from dfs_core.config import DfsConfig, load_config
from dfs_core.constants import DEFAULT_CONTRACT_ADDRESS
from dfs_core.errors import ConfigurationError

DFS_ENV = [
    "DFS_LEDGER_TRANSPORT", "DFS_LEDGER_URL", "DFS_CONTRACT_ADDRESS", "DFS_LEDGER_TOKEN",
    "DFS_LEDGER_TIMEOUT", "DFS_PINATA_JWT", "DFS_PINATA_API_URL", "DFS_IPFS_GATEWAY",
    "DFS_UPLOAD_TIMEOUT", "DFS_LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in DFS_ENV:
        monkeypatch.delenv(key, raising=False)


def test_defaults():
    cfg = load_config()
    assert cfg == DfsConfig()
    assert cfg.contract_address == DEFAULT_CONTRACT_ADDRESS


def test_env_values(monkeypatch):
    monkeypatch.setenv("DFS_LEDGER_TRANSPORT", "HTTP")
    monkeypatch.setenv("DFS_LEDGER_URL", "http://ledger.test/")
    monkeypatch.setenv("DFS_LEDGER_TIMEOUT", "2.5")
    monkeypatch.setenv("DFS_PINATA_JWT", "secret")
    monkeypatch.setenv("DFS_IPFS_GATEWAY", "https://gw.test/ipfs/")
    cfg = load_config()
    assert cfg.ledger_transport == "http"
    assert cfg.ledger_url == "http://ledger.test"
    assert cfg.ledger_timeout == 2.5
    assert cfg.pinata_jwt == "secret"
    assert cfg.ipfs_gateway == "https://gw.test/ipfs"


def test_overrides_win_over_env(monkeypatch):
    monkeypatch.setenv("DFS_LEDGER_TRANSPORT", "http")
    cfg = load_config({"ledger_transport": "local", "upload_timeout": 5})
    assert cfg.ledger_transport == "local"
    assert cfg.upload_timeout == 5.0


def test_blank_env_falls_back_to_default(monkeypatch):
    monkeypatch.setenv("DFS_PINATA_JWT", "  ")
    assert load_config().pinata_jwt is None


@pytest.mark.parametrize("overrides", [
    {"ledger_transport": "kafka"},
    {"ledger_timeout": "soon"},
    {"upload_timeout": -1},
])
def test_invalid_values(overrides):
    with pytest.raises(ConfigurationError):
        load_config(overrides)


def test_configuration_error_is_value_error():
    with pytest.raises(ValueError):
        load_config({"ledger_transport": "nope"})
