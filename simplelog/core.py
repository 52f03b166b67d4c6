"""Levelled logging that writes one JSON-style line per message."""

from __future__ import annotations

import json
import re
import sys
import threading
from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum
from typing import Any, Mapping, Optional, Protocol

ERR_NOT_INITIALIZED = "simplelog logger not initialized"
DEFAULT_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S.%L"


class Level(IntEnum):
    """Logging levels; each is a bit that enables output for its level and above."""

    VERBOSE_DEBUG = 1
    DEBUG = 2
    INFO = 4
    NOTICE = 8
    WARN = 16
    ERROR = 32


class NotInitializedError(RuntimeError):
    """Raised when logging before :func:`init` has configured the outputs."""

    def __init__(self) -> None:
        super().__init__(ERR_NOT_INITIALIZED)


class Writer(Protocol):
    def write(self, text: str) -> Any: ...


class _Discard:
    """Sink that drops everything written to it."""

    def write(self, text: str) -> int:
        return len(text)


class _StandardStream:
    """Sink that writes to the interpreter's current stdout or stderr."""

    def __init__(self, name: str) -> None:
        self._name = name

    def write(self, text: str) -> int:
        stream = sys.stdout if self._name == "stdout" else sys.stderr
        stream.write(text)
        stream.flush()
        return len(text)


_DISCARD = _Discard()
_STDOUT = _StandardStream("stdout")
_STDERR = _StandardStream("stderr")


@dataclass
class LogEntry:
    """One parsed log line."""

    time: str = ""
    msg: str = ""
    level: str = ""


@dataclass
class SimpleLog:
    """The configured level and the sink used for each kind of message."""

    log_level: int = 0
    verbose: Optional[Writer] = None
    debug: Optional[Writer] = None
    info: Optional[Writer] = None
    notice: Optional[Writer] = None
    warning: Optional[Writer] = None
    error: Optional[Writer] = None


_lock = threading.Lock()
_timestamp_format = DEFAULT_TIMESTAMP_FORMAT
_messages: list[str] = []
_logger = SimpleLog()


class ArrayWriter:
    """Sink that keeps every line written to it and echoes it to stdout."""

    def write(self, text: str) -> int:
        with _lock:
            _messages.append(text)
        sys.stdout.write(text)
        sys.stdout.flush()
        return len(text)


_array_writer = ArrayWriter()

_ESCAPES = {
    '"': '\\"',
    "\\": "\\\\",
    "\a": "\\a",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\v": "\\v",
}


def _quote(text: str) -> str:
    """Return text as a double-quoted string literal with escapes."""
    parts = []
    for ch in text:
        if ch in _ESCAPES:
            parts.append(_ESCAPES[ch])
        elif ch.isprintable():
            parts.append(ch)
        else:
            code = ord(ch)
            if code < 0x80:
                parts.append(f"\\x{code:02x}")
            elif code < 0x10000:
                parts.append(f"\\u{code:04x}")
            else:
                parts.append(f"\\U{code:08x}")
    return '"' + "".join(parts) + '"'


def _timestamp() -> str:
    now = datetime.now()
    millis = f"{now.microsecond // 1000:03d}"
    pattern = re.sub(
        r"%[%L]",
        lambda m: "%%" if m.group() == "%%" else millis,
        _timestamp_format,
    )
    return now.strftime(pattern)


def _entry(level: str, message: str, vals: Optional[Mapping[str, str]] = None) -> str:
    line = f'{{"time":{_quote(_timestamp())}, "level":{_quote(level)}, "msg":{_quote(message)}'
    if vals:
        line += "".join(f', "{key}":{_quote(str(value))}' for key, value in vals.items())
    return line + "}\n"


def _format(fmt: str, args: tuple) -> str:
    return fmt % args if args else fmt


def _require(stream: Optional[Writer]) -> Writer:
    if stream is None:
        raise NotInitializedError()
    return stream


def _output(stream: Optional[Writer], line: str) -> None:
    _require(stream).write(line)


def set_timestamp_format(fmt: str) -> None:
    """Set the strftime format of entry timestamps; ``%L`` gives milliseconds."""
    global _timestamp_format
    _timestamp_format = fmt


def persist_log(persist: bool) -> None:
    """Keep every non-verbose message in memory as well as printing it, or stop doing so."""
    if persist:
        if _logger.debug is None:
            raise NotInitializedError()
        _logger.debug = _array_writer
        _logger.info = _array_writer
        _logger.notice = _array_writer
        _logger.warning = _array_writer
        _logger.error = _array_writer
    else:
        _set_logging_level(_logger.log_level)


def get_messages() -> list[str]:
    """Return every persisted log line."""
    with _lock:
        return list(_messages)


def get_logs() -> list[LogEntry]:
    """Return the persisted log lines parsed into entries; unparsable lines give empty entries."""
    entries = []
    for line in get_messages():
        try:
            data = json.loads(line)
        except json.JSONDecodeError:
            data = {}
        if not isinstance(data, dict):
            data = {}
        entries.append(
            LogEntry(
                time=_str_field(data, "time"),
                msg=_str_field(data, "msg"),
                level=_str_field(data, "level"),
            )
        )
    return entries


def _str_field(data: dict, key: str) -> str:
    value = data.get(key, "")
    return value if isinstance(value, str) else ""


def log_contains_message(message: str) -> bool:
    """Return True if ``message`` has been logged at any level."""
    return log_contains(message, "")


def log_contains(message: str, level: str) -> bool:
    """Return True if ``message`` has been logged at ``level`` (any level if empty)."""
    for line in get_messages():
        try:
            data = json.loads(line)
        except json.JSONDecodeError as exc:
            raise ValueError(f"Invalid log entry: {line}") from exc
        if not isinstance(data, dict):
            raise ValueError(f"Invalid log entry: {line}")
        if data.get("msg") == message and (not level or data.get("level") == level):
            return True
    return False


def parse_level(lvl: str) -> Level:
    """Map a level name to its :class:`Level`."""
    names = {
        "error": Level.ERROR,
        "err": Level.ERROR,
        "warn": Level.WARN,
        "warning": Level.WARN,
        "notice": Level.NOTICE,
        "info": Level.INFO,
        "debug": Level.DEBUG,
        "verbose": Level.VERBOSE_DEBUG,
    }
    try:
        return names[lvl.lower()]
    except KeyError:
        raise ValueError(f"not a valid Level: {_quote(lvl)}") from None


def logger() -> SimpleLog:
    """Return the shared logger."""
    return _logger


def init(log_level: int) -> SimpleLog:
    """Show only messages at or above ``log_level`` and return the shared logger."""
    _set_logging_level(int(log_level))
    return _logger


def log_level() -> int:
    """Return the configured logging level."""
    return _logger.log_level


def _set_logging_level(level: int) -> None:
    verbose_out: Writer = _DISCARD
    debug_out: Writer = _DISCARD
    info_out: Writer = _DISCARD
    notice_out: Writer = _DISCARD
    warn_out: Writer = _DISCARD

    if level & Level.VERBOSE_DEBUG:
        verbose_out = debug_out = info_out = notice_out = warn_out = _STDOUT
    if level & Level.DEBUG:
        debug_out = info_out = notice_out = warn_out = _STDOUT
    if level & Level.INFO:
        info_out = notice_out = warn_out = _STDOUT
    if level & Level.NOTICE:
        notice_out = warn_out = _STDOUT
    if level & Level.WARN:
        warn_out = _STDOUT

    with _lock:
        _logger.verbose = verbose_out
        _logger.debug = debug_out
        _logger.info = info_out
        _logger.notice = notice_out
        _logger.warning = warn_out
        _logger.error = _STDERR
        _logger.log_level = level


def print_message(stream: Optional[Writer], level: str, message: str) -> None:
    """Write ``message`` to ``stream`` labelled with ``level``."""
    _output(stream, _entry(level, message))


def print_line(stream: Optional[Writer], level: str, *args: Any) -> None:
    """Write the space-joined arguments, newline-terminated, to ``stream``."""
    _output(stream, _entry(level, " ".join(str(arg) for arg in args) + "\n"))


def print_format(stream: Optional[Writer], level: str, fmt: str, *args: Any) -> None:
    """Write the formatted message to ``stream`` labelled with ``level``."""
    _output(stream, _entry(level, _format(fmt, args)))


def verbose_debugf(fmt: str, *args: Any) -> None:
    """Log a formatted message to the verbose debug output."""
    _output(_logger.verbose, _entry("DEBUG", _format(fmt, args)))


def verbose_debug(message: str) -> None:
    """Log a message to the verbose debug output."""
    _output(_logger.verbose, _entry("DEBUG", message))


def verbose_debugm(message: str, vals: Mapping[str, str]) -> None:
    """Log a message with key-value pairs to the verbose debug output."""
    _output(_logger.verbose, _entry("DEBUG", message, vals))


def debugf(fmt: str, *args: Any) -> None:
    """Log a formatted message to the debug output."""
    _output(_logger.debug, _entry("DEBUG", _format(fmt, args)))


def debug(message: str) -> None:
    """Log a message to the debug output."""
    _output(_logger.debug, _entry("DEBUG", message))


def debugm(message: str, vals: Mapping[str, str]) -> None:
    """Log a message with key-value pairs to the debug output."""
    _output(_logger.debug, _entry("DEBUG", message, vals))


def infof(fmt: str, *args: Any) -> None:
    """Log a formatted message to the info output."""
    _output(_logger.info, _entry("INFO", _format(fmt, args)))


def info(message: str) -> None:
    """Log a message to the info output."""
    _output(_logger.info, _entry("INFO", message))


def infom(message: str, vals: Mapping[str, str]) -> None:
    """Log a message with key-value pairs to the info output."""
    _output(_logger.info, _entry("INFO", message, vals))


def noticef(fmt: str, *args: Any) -> None:
    """Log a formatted message to the notice output."""
    _output(_logger.notice, _entry("NOTICE", _format(fmt, args)))


def notice(message: str) -> None:
    """Log a message to the notice output."""
    _output(_logger.notice, _entry("NOTICE", message))


def noticem(message: str, vals: Mapping[str, str]) -> None:
    """Log a message with key-value pairs to the notice output."""
    _output(_logger.notice, _entry("NOTICE", message, vals))


def warningf(fmt: str, *args: Any) -> None:
    """Log a formatted message to the warning output."""
    _output(_logger.warning, _entry("WARNING", _format(fmt, args)))


def warning(message: str) -> None:
    """Log a message to the warning output."""
    _output(_logger.warning, _entry("WARNING", message))


def warningm(message: str, vals: Mapping[str, str]) -> None:
    """Log a message with key-value pairs to the warning output."""
    _output(_logger.warning, _entry("WARNING", message, vals))


def warnf(fmt: str, *args: Any) -> None:
    """Alias of :func:`warningf`."""
    warningf(fmt, *args)


def warn(message: str) -> None:
    """Alias of :func:`warning`."""
    warning(message)


def warnm(message: str, vals: Mapping[str, str]) -> None:
    """Alias of :func:`warningm`."""
    warningm(message, vals)


def errorf(fmt: str, *args: Any) -> None:
    """Log a formatted message to the error output."""
    _output(_logger.error, _entry("ERROR", _format(fmt, args)))


def error(message: str) -> None:
    """Log a message to the error output."""
    _output(_logger.error, _entry("ERROR", message))


def errorm(message: str, vals: Mapping[str, str]) -> None:
    """Log a message with key-value pairs to the error output."""
    _output(_logger.error, _entry("ERROR", message, vals))