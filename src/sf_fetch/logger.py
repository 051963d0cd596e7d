import logging

pkg_root = logging.getLogger("sf_fetch")

LOG_LEVELS: dict[str, int] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARN": logging.WARNING,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "FATAL": logging.CRITICAL,
    "CRITICAL": logging.CRITICAL,
}


def getLogger(name: str | None):
    if not name:
        return pkg_root
    return pkg_root.getChild(name)


def parse_log_level(level: str | int) -> int:
    if isinstance(level, int):
        return level
    try:
        return LOG_LEVELS[level.upper()]
    except KeyError:
        raise ValueError(f"Unknown log level {level!r}") from None


def set_log_level(level: str | int | None):
    """Applies a `log_level` option to every logger in the package."""
    if level is None:
        return
    pkg_root.setLevel(parse_log_level(level))
