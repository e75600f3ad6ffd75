import json
import logging

from dfs_core.logger import get_logger, set_level


def test_logger_writes_json_lines_to_file(tmp_path):
    path = tmp_path / "logs" / "dfs.log"
    log = get_logger("DFS.Test.File", level="debug", to_file=str(path))
    log.debug("[TEST] hello")
    for h in log.handlers:
        h.flush()

    line = path.read_text().strip().splitlines()[-1]
    record = json.loads(line)
    assert record["level"] == "DEBUG"
    assert record["name"] == "DFS.Test.File"
    assert record["msg"] == "[TEST] hello"
    assert record["ts"].endswith("Z")


def test_handlers_attached_once():
    a = get_logger("DFS.Test.Once")
    b = get_logger("DFS.Test.Once")
    assert a is b
    assert len(a.handlers) == 1
    assert a.level == logging.NOTSET
    assert a.getEffectiveLevel() == logging.INFO


def test_numeric_level_accepted():
    log = get_logger("DFS.Test.Int", logging.DEBUG)
    assert log.level == logging.DEBUG


def test_set_level_reaches_dfs_children():
    log = get_logger("DFS.Test.Child")
    try:
        set_level(logging.WARNING)
        assert not log.isEnabledFor(logging.INFO)
        set_level("debug")
        assert log.isEnabledFor(logging.DEBUG)
    finally:
        set_level("INFO")


def test_env_level_applies_outside_dfs_namespace(monkeypatch):
    monkeypatch.setenv("DFS_LOG_LEVEL", "warning")
    log = get_logger("Tooling.Test.EnvLevel")
    assert log.level == logging.WARNING


def test_env_log_file(tmp_path, monkeypatch):
    path = tmp_path / "env" / "dfs.log"
    monkeypatch.setenv("DFS_LOG_FILE", str(path))
    log = get_logger("DFS.Test.EnvFile", level="info")
    log.info("[TEST] from env")
    for h in log.handlers:
        h.flush()

    record = json.loads(path.read_text().strip().splitlines()[-1])
    assert record["name"] == "DFS.Test.EnvFile"
    assert record["msg"] == "[TEST] from env"
