"""Process-wide structured logger with VERBOSE and NOTICE levels."""

from __future__ import annotations

import json
import sys
import threading
from typing import Any, Optional

from .prettylog import (
    LEVEL_DEBUG,
    LEVEL_ERROR,
    LEVEL_INFO,
    LEVEL_KEY,
    LEVEL_NOTICE,
    LEVEL_VERBOSE,
    LEVEL_WARN,
    Attr,
    HandlerOptions,
    JSONHandler,
    Record,
    level_string,
    new_handler,
)

LEVEL_NAMES = {
    LEVEL_VERBOSE: "VERBOSE",
    LEVEL_NOTICE: "NOTICE",
}

_USE_PRETTY_PRINT = False
_lock = threading.Lock()
_singleton: Optional["MedLog"] = None


class MedLog:
    """A logger that hands records at or above its level to a handler."""

    def __init__(self, handler: Any) -> None:
        self.handler = handler

    def enabled(self, level: int) -> bool:
        """Return True if records at ``level`` are logged."""
        return self.handler.enabled(level)

    def log(self, level: int, msg: str, *args: Any) -> None:
        """Log ``msg`` at ``level`` with key-value ``args``."""
        if self.enabled(level):
            self.handler.handle(Record(level, msg, args))

    def debug(self, msg: str, *args: Any) -> None:
        """Log at DEBUG."""
        self.log(LEVEL_DEBUG, msg, *args)

    def info(self, msg: str, *args: Any) -> None:
        """Log at INFO."""
        self.log(LEVEL_INFO, msg, *args)

    def warn(self, msg: str, *args: Any) -> None:
        """Log at WARN."""
        self.log(LEVEL_WARN, msg, *args)

    def error(self, msg: str, *args: Any) -> None:
        """Log at ERROR."""
        self.log(LEVEL_ERROR, msg, *args)


class _Stderr:
    def write(self, text: str) -> int:
        sys.stderr.write(text)
        sys.stderr.flush()
        return len(text)


def _name_level(groups: list, attr: Attr) -> Attr:
    if attr.key == LEVEL_KEY and isinstance(attr.value, int) and not isinstance(attr.value, bool):
        return Attr(LEVEL_KEY, LEVEL_NAMES.get(attr.value, level_string(attr.value)))
    return attr


def _sprintf(fmt: str, args: tuple) -> str:
    return fmt % args if args else fmt


def _emit(level: int, msg: str, *args: Any) -> None:
    current = _singleton
    if current is not None:
        current.log(level, msg, *args)


def persist_log(persist: bool) -> None:
    """Accepted for compatibility with the plain logger; has no effect here."""
    del persist


def parse_level(lvl: str) -> int:
    """Map a level name to its numeric level."""
    names = {
        "error": LEVEL_ERROR,
        "err": LEVEL_ERROR,
        "warn": LEVEL_WARN,
        "warning": LEVEL_WARN,
        "notice": LEVEL_NOTICE,
        "info": LEVEL_INFO,
        "debug": LEVEL_DEBUG,
        "verbose": LEVEL_VERBOSE,
    }
    try:
        return names[lvl.lower()]
    except KeyError:
        raise ValueError(f"not a valid Level: {json.dumps(lvl, ensure_ascii=False)}") from None


def init(level: int) -> MedLog:
    """Create the shared logger on first call and return it; later calls return the same one."""
    global _singleton
    with _lock:
        if _singleton is None:
            opts = HandlerOptions(level=level, replace_attr=_name_level)
            handler = new_handler(opts) if _USE_PRETTY_PRINT else JSONHandler(_Stderr(), opts)
            _singleton = MedLog(handler)
        return _singleton


def verbose_slog(msg: str, *args: Any) -> None:
    """Log at VERBOSE with key-value pairs."""
    _emit(LEVEL_VERBOSE, msg, *args)


def verbose_debugf(fmt: str, *args: Any) -> None:
    """Log a formatted message at VERBOSE."""
    _emit(LEVEL_VERBOSE, _sprintf(fmt, args))


def verbose_debug(message: str) -> None:
    """Log a message at VERBOSE."""
    _emit(LEVEL_VERBOSE, str(message))


def verbose(message: str) -> None:
    """Log a message at VERBOSE."""
    _emit(LEVEL_VERBOSE, str(message))


def verbosef(fmt: str, *args: Any) -> None:
    """Log a formatted message at VERBOSE."""
    _emit(LEVEL_VERBOSE, _sprintf(fmt, args))


def debug_slog(msg: str, *args: Any) -> None:
    """Log at DEBUG with key-value pairs."""
    _emit(LEVEL_DEBUG, msg, *args)


def debug(message: str) -> None:
    """Log a message at DEBUG."""
    _emit(LEVEL_DEBUG, str(message))


def debugf(fmt: str, *args: Any) -> None:
    """Log a formatted message at DEBUG."""
    _emit(LEVEL_DEBUG, _sprintf(fmt, args))


def info_slog(msg: str, *args: Any) -> None:
    """Log at INFO with key-value pairs."""
    _emit(LEVEL_INFO, msg, *args)


def info(message: str) -> None:
    """Log a message at INFO."""
    _emit(LEVEL_INFO, str(message))


def infof(fmt: str, *args: Any) -> None:
    """Log a formatted message at INFO."""
    _emit(LEVEL_INFO, _sprintf(fmt, args))


def notice_slog(msg: str, *args: Any) -> None:
    """Log at NOTICE with key-value pairs."""
    _emit(LEVEL_NOTICE, msg, *args)


def notice(message: str) -> None:
    """Log a message at NOTICE."""
    _emit(LEVEL_NOTICE, str(message))


def noticef(fmt: str, *args: Any) -> None:
    """Log a formatted message at NOTICE."""
    _emit(LEVEL_NOTICE, _sprintf(fmt, args))


def warning_slog(msg: str, *args: Any) -> None:
    """Log at WARN with key-value pairs."""
    _emit(LEVEL_WARN, msg, *args)


def warning(message: str) -> None:
    """Log a message at WARN."""
    _emit(LEVEL_WARN, str(message))


def warn(message: str) -> None:
    """Log a message at WARN."""
    _emit(LEVEL_WARN, str(message))


def warnf(fmt: str, *args: Any) -> None:
    """Log a formatted message at WARN."""
    _emit(LEVEL_WARN, _sprintf(fmt, args))


def warningf(fmt: str, *args: Any) -> None:
    """Log a formatted message at WARN."""
    _emit(LEVEL_WARN, _sprintf(fmt, args))


def error_slog(msg: str, *args: Any) -> None:
    """Log at ERROR with key-value pairs."""
    _emit(LEVEL_ERROR, msg, *args)


def error(message: str) -> None:
    """Log a message at ERROR."""
    _emit(LEVEL_ERROR, str(message))


def errorf(fmt: str, *args: Any) -> None:
    """Log a formatted message at ERROR."""
    _emit(LEVEL_ERROR, _sprintf(fmt, args))


class ErrorLogger:
    """Logs everything at ERROR with an ``ERROR:`` prefix."""

    def print(self, message: str) -> None:
        """Log ``message``."""
        errorf("ERROR: %s", message)

    def println(self, *args: Any) -> None:
        """Log the argument."""
        errorf("ERROR: %s", *args)

    def printf(self, fmt: str, *args: Any) -> None:
        """Log the argument; the format string is not used."""
        del fmt
        errorf("ERROR: %s", *args)


def get_error_logger() -> ErrorLogger:
    """Return an :class:`ErrorLogger`."""
    return ErrorLogger()