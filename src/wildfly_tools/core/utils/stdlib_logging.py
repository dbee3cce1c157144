"""Opt-in file logging for the ``wildfly_tools`` logger hierarchy.

The package never configures logging on import; call
:func:`configure_stdlib_logging` (also exported as
``wildfly_tools.configure_stdlib_logging``) to write records to a file.
"""
from __future__ import annotations

import logging
from pathlib import Path

_CONFIGURED_LOG_PATH: str | None = None
_FILE_HANDLER: logging.Handler | None = None

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
ROOT_LOGGER = "wildfly_tools"


def _level_from_name(name: str) -> int:
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.INFO


def configure_stdlib_logging(*, log_path: Path, level: str = "INFO") -> None:
    """Send ``wildfly_tools`` log records to ``log_path``.

    Idempotent per-process: if already configured for the same file, no-op.
    Only the package logger is touched; the application's root logger keeps
    its own handlers.
    """
    global _CONFIGURED_LOG_PATH, _FILE_HANDLER

    resolved = str(Path(log_path).resolve())
    if _CONFIGURED_LOG_PATH == resolved and _FILE_HANDLER is not None:
        return

    Path(resolved).parent.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(_level_from_name(level))

    # Replace the previously installed file handler when switching paths.
    if _FILE_HANDLER is not None:
        logger.removeHandler(_FILE_HANDLER)
        _FILE_HANDLER.close()
        _FILE_HANDLER = None

    fh = logging.FileHandler(resolved, encoding="utf-8")
    fh.setLevel(_level_from_name(level))
    fh.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(fh)

    _FILE_HANDLER = fh
    _CONFIGURED_LOG_PATH = resolved


def reset_stdlib_logging_for_tests() -> None:
    """Test-only: remove the installed file handler."""
    global _CONFIGURED_LOG_PATH, _FILE_HANDLER
    logger = logging.getLogger(ROOT_LOGGER)
    if _FILE_HANDLER is not None:
        logger.removeHandler(_FILE_HANDLER)
        _FILE_HANDLER.close()
    logger.setLevel(logging.NOTSET)
    _CONFIGURED_LOG_PATH = None
    _FILE_HANDLER = None


__all__ = ["configure_stdlib_logging", "reset_stdlib_logging_for_tests"]
