"""Module-level logger factory.

Provides consistent logging configuration across all pendant teleop modules.
"""

import logging
import sys

_LOGGERS: dict[str, logging.Logger] = {}

_DEFAULT_FORMAT = "[%(asctime)s] [%(name)s] [%(levelname)s] %(message)s"
_DEFAULT_LEVEL = logging.INFO


def get_logger(
    name: str,
    level: int | None = None,
    fmt: str | None = None,
) -> logging.Logger:
    """Get or create a named logger with consistent formatting.

    Args:
        name: Logger name, typically the module name (e.g., 'jog_controller').
        level: Optional log level override (default: INFO).
        fmt: Optional format string override.

    Returns:
        Configured logging.Logger instance.
    """
    if name in _LOGGERS:
        return _LOGGERS[name]

    logger = logging.getLogger(f"pendant.{name}")
    logger.setLevel(level or _DEFAULT_LEVEL)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(level or _DEFAULT_LEVEL)
        handler.setFormatter(logging.Formatter(fmt or _DEFAULT_FORMAT))
        logger.addHandler(handler)

    logger.propagate = False
    _LOGGERS[name] = logger
    return logger


def set_global_level(level: int) -> None:
    """Set log level for all existing pendant loggers.

    Args:
        level: logging.DEBUG, logging.INFO, logging.WARNING, etc.
    """
    for logger in _LOGGERS.values():
        logger.setLevel(level)
        for handler in logger.handlers:
            handler.setLevel(level)


def level_from_name(name: str) -> int:
    """Map a config log level string ('debug', 'INFO', ...) to a logging level."""
    level = logging.getLevelName(str(name).upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {name!r}")
    return level
