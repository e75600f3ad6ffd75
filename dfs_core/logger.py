import logging, json, sys, time, os

ROOT = "DFS"

_FIELDS = {
    "ts": "%(asctime)s",
    "level": "%(levelname)s",
    "name": "%(name)s",
    "msg": "%(message)s",
}


def _formatter() -> logging.Formatter:
    formatter = logging.Formatter(fmt=json.dumps(_FIELDS), datefmt="%Y-%m-%dT%H:%M:%SZ")
    formatter.converter = time.gmtime  # UTC timestamps
    return formatter


def _level(level):
    return level.upper() if isinstance(level, str) else level


def _default_level():
    return _level(os.getenv("DFS_LOG_LEVEL") or "INFO")


def set_level(level) -> None:
    """Set the level every DFS.* logger inherits (accepts names or ints)."""
    logging.getLogger(ROOT).setLevel(_level(level))


def get_logger(name="DFS.Core", level=None, to_file=None):
    """
    Structured one-line-per-record logger shared by every DFS component.

    DFS.* loggers inherit their level from the DFS parent, which starts at
    DFS_LOG_LEVEL (default INFO) and is changed with set_level(). An explicit
    `level` pins that one logger. The log file defaults to DFS_LOG_FILE.
    Handlers are attached once per logger name.
    """
    parent = logging.getLogger(ROOT)
    if parent.level == logging.NOTSET:
        parent.setLevel(_default_level())

    logger = logging.getLogger(name)
    if level is not None:
        logger.setLevel(_level(level))
    elif name != ROOT and not name.startswith(ROOT + "."):
        logger.setLevel(_default_level())

    if not logger.handlers:
        formatter = _formatter()
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

        to_file = to_file or os.getenv("DFS_LOG_FILE")
        if to_file:
            os.makedirs(os.path.dirname(to_file) or ".", exist_ok=True)
            file_handler = logging.FileHandler(to_file)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

    return logger
