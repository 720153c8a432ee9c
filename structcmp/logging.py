# structcmp/structcmp/logging.py
from __future__ import annotations
import logging as _logging
import os
import sys
from typing import Any

_ANSI = {
    "reset": "\x1b[0m",
    "green": "\x1b[32m",
    "yellow": "\x1b[33m",
    "red": "\x1b[31m",
    "cyan": "\x1b[36m",
    "gray": "\x1b[90m",
}

_COLOR_ENABLED: bool = False
_LOGGER = _logging.getLogger("structcmp")

_LEVELS = {0: _logging.WARNING, 1: _logging.INFO}

def _supports_color() -> bool:
    return sys.stderr.isatty() and (os.environ.get("TERM") not in (None, "dumb"))

def colorize(text: str, color: str) -> str:
    if not _COLOR_ENABLED:
        return text
    return f"{_ANSI.get(color, '')}{text}{_ANSI['reset']}"

def type_name(value: Any) -> str:
    """Short, stable name of a value's class for log lines and error messages."""
    tp = value if isinstance(value, type) else type(value)
    mod = getattr(tp, "__module__", "")
    if mod in ("builtins", "", None):
        return tp.__qualname__
    return f"{mod}.{tp.__qualname__}"

def setup_logging(verbosity: int = 0, log_file: str | None = None) -> None:
    """
    Configure the 'structcmp' logger. Verbosity: 0→WARNING, 1→INFO, 2+→DEBUG.
    Records go to stderr; stdout is reserved for comparison results.
    """
    global _COLOR_ENABLED
    _COLOR_ENABLED = _supports_color()

    level = _LEVELS.get(verbosity, _logging.DEBUG) if verbosity >= 0 else _logging.WARNING

    _LOGGER.handlers.clear()
    _LOGGER.setLevel(level)

    fmt = _logging.Formatter("%(message)s")
    handlers: list[_logging.Handler] = [_logging.StreamHandler(stream=sys.stderr)]
    if log_file:
        handlers.append(_logging.FileHandler(log_file, encoding="utf-8"))

    for h in handlers:
        h.setLevel(level)
        h.setFormatter(fmt)
        _LOGGER.addHandler(h)

def debug_enabled() -> bool:
    return _LOGGER.isEnabledFor(_logging.DEBUG)

def log_info(msg: str) -> None:
    _LOGGER.info(msg)

def log_debug(msg: str) -> None:
    _LOGGER.debug(msg)

def log_warn(msg: str) -> None:
    _LOGGER.warning(f"{colorize('⚠', 'yellow')} {msg}")

def log_err(msg: str) -> None:
    _LOGGER.error(f"{colorize('✖', 'red')} {msg}")

def log_ok(msg: str) -> None:
    _LOGGER.info(f"{colorize('✓', 'green')} {msg}")

def log_step(label: str, value: str = "") -> None:
    arrow = colorize("→", "cyan")
    gray = colorize(value, "gray") if value else ""
    _LOGGER.info(f"{arrow} {label}{(' ' + gray) if gray else ''}")
