"""Client logging setup.

- Logs go to a rotating UTF-8 file (Chinese messages are common).
- The console handler is opt-in so log lines don't interleave with the prompt.
- Handlers are tagged by name, so calling setup_logging() again reconfigures
  them instead of stacking duplicates.

Usage:
    from logging_config import setup_logging
    setup_logging()

Environment overrides (take precedence over arguments):
    GOMOKU_LOG_LEVEL=DEBUG|INFO|WARNING|ERROR
    GOMOKU_LOG_FILE=path/to/file.log
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Iterable
from logging.handlers import RotatingFileHandler
from pathlib import Path

FILE_HANDLER = "gomoku_file"
CONSOLE_HANDLER = "gomoku_console"
DEFAULT_LOG_PATH = Path("logs") / "gomoku.log"

# websockets logs every frame at DEBUG
NOISY_LOGGERS = ("websockets", "asyncio")

_FORMAT = "%(asctime)s %(levelname)-8s %(name)s:%(lineno)d | %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"


def _parse_level(level: str | int) -> int:
    if isinstance(level, int):
        return level
    name = (level or "").strip().upper()
    return logging.getLevelNamesMapping().get(name, logging.INFO)


def _resolve_log_path(log_file: str | None) -> Path:
    path = Path(log_file) if log_file else DEFAULT_LOG_PATH
    if not path.is_absolute():
        path = Path.cwd() / path
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def _named_handler(root: logging.Logger, name: str,
                   factory: Callable[[], logging.Handler]) -> logging.Handler:
    """Return the root handler called ``name``, creating it on first use."""
    for handler in root.handlers:
        if handler.name == name:
            return handler
    handler = factory()
    handler.name = name
    root.addHandler(handler)
    return handler


def setup_logging(
    *,
    level: str | int = "INFO",
    log_file: str | None = None,
    enable_file: bool = True,
    enable_console: bool = False,
    console_level: str | int = "WARNING",
    max_bytes: int = 2 * 1024 * 1024,
    backup_count: int = 5,
    quiet: Iterable[str] = NOISY_LOGGERS,
) -> logging.Logger:
    """Configure the root logger and return it."""
    level = os.environ.get("GOMOKU_LOG_LEVEL") or level
    log_file = os.environ.get("GOMOKU_LOG_FILE") or log_file

    root = logging.getLogger()
    # handlers do the filtering
    root.setLevel(logging.DEBUG)
    formatter = logging.Formatter(fmt=_FORMAT, datefmt=_DATEFMT)

    log_path = None
    if enable_file:
        log_path = _resolve_log_path(log_file)
        file_handler = _named_handler(
            root,
            FILE_HANDLER,
            lambda: RotatingFileHandler(str(log_path), maxBytes=max_bytes,
                                        backupCount=backup_count, encoding="utf-8"),
        )
        file_handler.setFormatter(formatter)
        file_handler.setLevel(_parse_level(level))

    if enable_console:
        console_handler = _named_handler(root, CONSOLE_HANDLER, logging.StreamHandler)
        console_handler.setFormatter(formatter)
        console_handler.setLevel(_parse_level(console_level))

    for name in quiet:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger(__name__).info(
        "Logging initialized | level=%s file=%s console=%s", level, log_path, enable_console,
    )
    return root
