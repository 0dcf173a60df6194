"""Logging helpers: the cookstack logger hierarchy and per-cookbook context."""

from __future__ import annotations

import logging
from pathlib import Path

_LOGGER_NAME = "cookstack"
_NO_COOKBOOK = "-"

_STREAM_FORMAT = "[cookstack] %(levelname)s %(cookbook)s: %(message)s"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s [%(cookbook)s]: %(message)s"


class CookbookContextFilter(logging.Filter):
    """Stamps ``record.cookbook`` on records logged without a cookbook in scope."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "cookbook"):
            record.cookbook = _NO_COOKBOOK
        return True


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the cookstack hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def for_cookbook(logger: logging.Logger, cookbook_name: str) -> logging.LoggerAdapter:
    """Wrap ``logger`` so every record it emits names ``cookbook_name``."""
    return logging.LoggerAdapter(logger, {"cookbook": cookbook_name})


def _handler(handler: logging.Handler, level: int, fmt: str) -> logging.Handler:
    handler.setLevel(level)
    handler.addFilter(CookbookContextFilter())
    handler.setFormatter(logging.Formatter(fmt))
    return handler


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Send cookstack records to stderr and, when given, to ``log_file``.

    Both sinks include the cookbook each record belongs to. Calling this again
    replaces the handlers installed by the previous call.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    logger.addHandler(_handler(logging.StreamHandler(), level, _STREAM_FORMAT))
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.addHandler(
            _handler(logging.FileHandler(log_file, encoding="utf-8"), level, _FILE_FORMAT)
        )

    return logger


__all__ = ["CookbookContextFilter", "configure_logging", "for_cookbook", "get_logger"]
