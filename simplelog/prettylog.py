"""Structured log records, a JSON handler and a coloured console handler."""

from __future__ import annotations

import io
import json
import sys
import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Iterable, Optional

from .core import Writer

LEVEL_VERBOSE = -5
LEVEL_DEBUG = -4
LEVEL_INFO = 0
LEVEL_NOTICE = 2
LEVEL_WARN = 4
LEVEL_ERROR = 8

TIME_KEY = "time"
LEVEL_KEY = "level"
MESSAGE_KEY = "msg"
BAD_KEY = "!BADKEY"

RESET = "\033[0m"
CYAN = 36
LIGHT_GRAY = 37
DARK_GRAY = 90
LIGHT_RED = 91
LIGHT_YELLOW = 93
LIGHT_BLUE = 94
LIGHT_MAGENTA = 95
WHITE = 97

_HTML_ESCAPES = {
    "<": "\\u003c",
    ">": "\\u003e",
    "&": "\\u0026",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}


def level_string(level: int) -> str:
    """Name a level, e.g. ``INFO`` or ``DEBUG-1`` for levels between the named ones."""

    def named(base: str, offset: int) -> str:
        return base if offset == 0 else f"{base}{offset:+d}"

    if level < LEVEL_INFO:
        return named("DEBUG", level - LEVEL_DEBUG)
    if level < LEVEL_WARN:
        return named("INFO", level - LEVEL_INFO)
    if level < LEVEL_ERROR:
        return named("WARN", level - LEVEL_WARN)
    return named("ERROR", level - LEVEL_ERROR)


def colorizer(color_code: int, value: str) -> str:
    """Wrap ``value`` in an ANSI colour escape."""
    return f"\033[{color_code}m{value}{RESET}"


@dataclass(frozen=True)
class Attr:
    """A key-value pair; the all-empty attribute means "drop this"."""

    key: str = ""
    value: Any = None


ReplaceAttr = Callable[[list, Attr], Attr]


def _now() -> datetime:
    return datetime.now().astimezone()


@dataclass
class Record:
    """One log event; ``args`` holds key-value pairs and/or :class:`Attr` items."""

    level: int
    message: str
    args: tuple = ()
    time: Optional[datetime] = field(default_factory=_now)


@dataclass
class HandlerOptions:
    """Minimum level and an optional attribute rewriter."""

    level: int = LEVEL_INFO
    replace_attr: Optional[ReplaceAttr] = None


_EMPTY = Attr()
_MISSING = object()


def _args_to_attrs(args: Iterable[Any]) -> list[Attr]:
    attrs = []
    items = iter(args)
    for head in items:
        if isinstance(head, Attr):
            attrs.append(head)
        elif isinstance(head, str):
            value = next(items, _MISSING)
            attrs.append(Attr(BAD_KEY, head) if value is _MISSING else Attr(head, value))
        else:
            attrs.append(Attr(BAD_KEY, head))
    return attrs


def _is_level_number(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _format_time(moment: datetime) -> str:
    text = moment.isoformat(timespec="milliseconds")
    return text[: -len("+00:00")] + "Z" if text.endswith("+00:00") else text


def _json_value(value: Any) -> Any:
    if isinstance(value, datetime):
        return _format_time(value)
    return value


class JSONHandler:
    """Writes each record as one JSON object per line."""

    def __init__(self, writer: Writer, opts: Optional[HandlerOptions] = None) -> None:
        self._writer = writer
        self._opts = opts or HandlerOptions()
        self._groups: tuple[str, ...] = ()
        self._preset: tuple[tuple[tuple[str, ...], Attr], ...] = ()

    def _derive(self, groups: tuple[str, ...], preset: tuple) -> "JSONHandler":
        clone = JSONHandler(self._writer, self._opts)
        clone._groups = groups
        clone._preset = preset
        return clone

    def enabled(self, level: int) -> bool:
        """Return True if records at ``level`` are handled."""
        return level >= self._opts.level

    def with_attrs(self, attrs: Iterable[Attr]) -> "JSONHandler":
        """Return a handler that adds ``attrs`` to every record."""
        added = tuple((self._groups, attr) for attr in attrs)
        if not added:
            return self
        return self._derive(self._groups, self._preset + added)

    def with_group(self, name: str) -> "JSONHandler":
        """Return a handler that nests later attributes under ``name``."""
        if not name:
            return self
        return self._derive(self._groups + (name,), self._preset)

    def handle(self, record: Record) -> None:
        """Write ``record`` as a JSON line."""
        replace = self._opts.replace_attr
        out: dict[str, Any] = {}

        builtins = []
        if record.time is not None:
            builtins.append(Attr(TIME_KEY, record.time))
        builtins.append(Attr(LEVEL_KEY, record.level))
        builtins.append(Attr(MESSAGE_KEY, record.message))
        for is_level, attr in zip([False] * (len(builtins) - 2) + [True, False], builtins):
            if replace is not None:
                attr = replace([], attr)
            if not attr.key:
                continue
            value = attr.value
            if is_level and _is_level_number(value):
                value = level_string(value)
            out[attr.key] = _json_value(value)

        pending = list(self._preset)
        pending.extend((self._groups, attr) for attr in _args_to_attrs(record.args))
        for groups, attr in pending:
            if replace is not None:
                attr = replace(list(groups), attr)
            if not attr.key:
                continue
            node = out
            for group in groups:
                child = node.get(group)
                if not isinstance(child, dict):
                    child = node[group] = {}
                node = child
            node[attr.key] = _json_value(attr.value)

        line = json.dumps(out, ensure_ascii=False, default=str, separators=(",", ":"))
        self._writer.write(line + "\n")


def _level_color(level: int) -> int:
    if level <= LEVEL_VERBOSE:
        return LIGHT_GRAY
    if level <= LEVEL_DEBUG:
        return DARK_GRAY
    if level <= LEVEL_INFO:
        return CYAN
    if level < LEVEL_WARN:
        return LIGHT_BLUE
    if level < LEVEL_ERROR:
        return LIGHT_YELLOW
    if level <= LEVEL_ERROR + 1:
        return LIGHT_RED
    return LIGHT_MAGENTA


def _clock(moment: Optional[datetime]) -> str:
    if moment is None:
        return "[00:00:00.000]"
    return f"[{moment:%H:%M:%S}.{moment.microsecond // 1000:03d}]"


def _value_string(value: Any) -> str:
    return level_string(value) if _is_level_number(value) else str(value)


def _marshal(attrs: Any) -> str:
    text = json.dumps(attrs, ensure_ascii=False, sort_keys=True, separators=(",", ":"))
    return "".join(_HTML_ESCAPES.get(ch, ch) for ch in text)


class Handler:
    """Human-readable handler: time, level and message, then the attributes as JSON."""

    def __init__(
        self,
        inner: JSONHandler,
        replace_attr: Optional[ReplaceAttr],
        buffer: io.StringIO,
        lock: threading.Lock,
        writer: Optional[Writer] = None,
        colorize: bool = False,
    ) -> None:
        self._inner = inner
        self.replace_attr = replace_attr
        self._buffer = buffer
        self._lock = lock
        self.writer = writer
        self.colorize = colorize

    def _derive(self, inner: JSONHandler) -> "Handler":
        return Handler(inner, self.replace_attr, self._buffer, self._lock, self.writer, self.colorize)

    def enabled(self, level: int) -> bool:
        """Return True if records at ``level`` are handled."""
        return self._inner.enabled(level)

    def with_attrs(self, attrs: Iterable[Attr]) -> "Handler":
        """Return a handler that adds ``attrs`` to every record."""
        return self._derive(self._inner.with_attrs(attrs))

    def with_group(self, name: str) -> "Handler":
        """Return a handler that nests later attributes under ``name``."""
        return self._derive(self._inner.with_group(name))

    def _replace(self, attr: Attr) -> Attr:
        return self.replace_attr([], attr) if self.replace_attr is not None else attr

    def _compute_attrs(self, record: Record) -> Any:
        with self._lock:
            try:
                self._inner.handle(record)
                text = self._buffer.getvalue()
            finally:
                self._buffer.seek(0)
                self._buffer.truncate()
        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise ValueError(f"error when unmarshaling inner handler's Handle result: {exc}") from exc

    def handle(self, record: Record) -> None:
        """Write ``record`` as one readable line."""

        def paint(code: int, value: str) -> str:
            return colorizer(code, value) if self.colorize else value

        level = ""
        level_attr = self._replace(Attr(LEVEL_KEY, record.level))
        if level_attr != _EMPTY:
            level = paint(_level_color(record.level), _value_string(level_attr.value) + ":")

        timestamp = ""
        time_attr = self._replace(Attr(TIME_KEY, _clock(record.time)))
        if time_attr != _EMPTY:
            timestamp = paint(LIGHT_GRAY, str(time_attr.value))

        msg = ""
        msg_attr = self._replace(Attr(MESSAGE_KEY, record.message))
        if msg_attr != _EMPTY:
            msg = paint(WHITE, str(msg_attr.value))

        payload = _marshal(self._compute_attrs(record))

        parts = [f"{part} " for part in (timestamp, level, msg) if part]
        if payload:
            parts.append(paint(DARK_GRAY, payload))
        writer = self.writer if self.writer is not None else sys.stdout
        writer.write("".join(parts) + "\n")


def suppress_defaults(next_replace: Optional[ReplaceAttr]) -> ReplaceAttr:
    """Return a rewriter that drops time, level and message, then applies ``next_replace``."""

    def replace(groups: list, attr: Attr) -> Attr:
        if attr.key in (TIME_KEY, LEVEL_KEY, MESSAGE_KEY):
            return Attr()
        if next_replace is None:
            return attr
        return next_replace(groups, attr)

    return replace


Option = Callable[[Handler], None]


def new(handler_options: Optional[HandlerOptions], *args: Option) -> Handler:
    """Build a :class:`Handler` and apply each option to it."""
    opts = handler_options or HandlerOptions()
    buffer = io.StringIO()
    inner = JSONHandler(
        buffer,
        HandlerOptions(level=opts.level, replace_attr=suppress_defaults(opts.replace_attr)),
    )
    handler = Handler(inner, opts.replace_attr, buffer, threading.Lock())
    for option in args:
        option(handler)
    return handler


class _Stdout:
    def write(self, text: str) -> int:
        sys.stdout.write(text)
        sys.stdout.flush()
        return len(text)


def new_handler(opts: Optional[HandlerOptions]) -> Handler:
    """Build a coloured handler writing to standard output."""
    return new(opts, with_destination_writer(_Stdout()), with_color())


def with_destination_writer(writer: Writer) -> Option:
    """Option: send output to ``writer``."""

    def apply(handler: Handler) -> None:
        handler.writer = writer

    return apply


def with_color() -> Option:
    """Option: colour the output with ANSI escapes."""

    def apply(handler: Handler) -> None:
        handler.colorize = True

    return apply