import io
import json
from datetime import datetime

from simplelog.prettylog import (
    BAD_KEY,
    LEVEL_DEBUG,
    LEVEL_ERROR,
    LEVEL_INFO,
    LEVEL_VERBOSE,
    RESET,
    Attr,
    HandlerOptions,
    JSONHandler,
    Record,
    colorizer,
    level_string,
    new,
    new_handler,
    suppress_defaults,
    with_color,
    with_destination_writer,
)

FIXED = datetime(2024, 1, 2, 3, 4, 5, 678000)


def test_level_string_named_levels():
    assert level_string(LEVEL_DEBUG) == "DEBUG"
    assert level_string(LEVEL_INFO) == "INFO"
    assert level_string(LEVEL_ERROR) == "ERROR"


def test_level_string_offsets():
    assert level_string(LEVEL_VERBOSE) == "DEBUG-1"
    assert level_string(2) == "INFO+2"
    assert level_string(LEVEL_ERROR + 1) == "ERROR+1"


def test_colorizer_wraps_value():
    painted = colorizer(31, "x")
    assert painted.startswith("\033[31m")
    assert painted.endswith(RESET)
    assert "x" in painted


def test_json_handler_writes_fields():
    buf = io.StringIO()
    handler = JSONHandler(buf, HandlerOptions(level=LEVEL_DEBUG))
    handler.handle(Record(LEVEL_INFO, "hi", ("k", "v")))
    data = json.loads(buf.getvalue())
    assert data["level"] == "INFO"
    assert data["msg"] == "hi"
    assert data["k"] == "v"
    assert list(data)[:3] == ["time", "level", "msg"]


def test_json_handler_enabled():
    handler = JSONHandler(io.StringIO(), HandlerOptions(level=LEVEL_DEBUG))
    assert handler.enabled(LEVEL_DEBUG)
    assert not handler.enabled(LEVEL_VERBOSE)


def test_json_handler_groups_and_attrs():
    buf = io.StringIO()
    handler = JSONHandler(buf).with_group("g").with_attrs([Attr("a", 1)])
    handler.handle(Record(LEVEL_INFO, "m", ("b", 2)))
    data = json.loads(buf.getvalue())
    assert data["g"] == {"a": 1, "b": 2}


def test_json_handler_bad_key():
    buf = io.StringIO()
    JSONHandler(buf).handle(Record(LEVEL_INFO, "m", ("lonely",)))
    assert json.loads(buf.getvalue())[BAD_KEY] == "lonely"


def test_json_handler_replace_attr_drops_time():
    buf = io.StringIO()
    opts = HandlerOptions(replace_attr=lambda groups, a: Attr() if a.key == "time" else a)
    JSONHandler(buf, opts).handle(Record(LEVEL_INFO, "m"))
    data = json.loads(buf.getvalue())
    assert "time" not in data
    assert data["msg"] == "m"


def test_suppress_defaults():
    drop = suppress_defaults(None)
    assert drop([], Attr("time", 1)) == Attr()
    assert drop([], Attr("msg", "x")) == Attr()
    assert drop([], Attr("x", 1)) == Attr("x", 1)
    upper = suppress_defaults(lambda groups, a: Attr(a.key.upper(), a.value))
    assert upper([], Attr("x", 1)) == Attr("X", 1)


def test_pretty_handler_plain_line():
    buf = io.StringIO()
    handler = new(HandlerOptions(level=LEVEL_DEBUG), with_destination_writer(buf))
    handler.handle(Record(LEVEL_INFO, "hello", ("k", "v"), time=FIXED))
    assert buf.getvalue() == '[03:04:05.678] INFO: hello {"k":"v"}\n'


def test_pretty_handler_empty_attrs_and_sorted_keys():
    buf = io.StringIO()
    handler = new(None, with_destination_writer(buf))
    handler.handle(Record(LEVEL_INFO, "a", time=FIXED))
    handler.handle(Record(LEVEL_INFO, "b", ("b", 1, "a", 2), time=FIXED))
    first, second = buf.getvalue().splitlines()
    assert first.endswith("{}")
    assert second.index('"a"') < second.index('"b"')


def test_pretty_handler_colours():
    buf = io.StringIO()
    handler = new(None, with_destination_writer(buf), with_color())
    handler.handle(Record(LEVEL_ERROR + 2, "boom", time=FIXED))
    out = buf.getvalue()
    assert colorizer(95, level_string(LEVEL_ERROR + 2) + ":") in out
    assert colorizer(97, "boom") in out
    assert out.endswith(colorizer(90, "{}") + "\n")


def test_pretty_handler_with_attrs_keeps_writer():
    buf = io.StringIO()
    handler = new(None, with_destination_writer(buf)).with_attrs([Attr("a", 1)])
    handler.handle(Record(LEVEL_INFO, "m", time=FIXED))
    assert buf.getvalue().endswith('{"a":1}\n')


def test_pretty_handler_enabled_follows_options():
    handler = new(HandlerOptions(level=LEVEL_ERROR))
    assert handler.enabled(LEVEL_ERROR)
    assert not handler.enabled(LEVEL_INFO)


def test_new_handler_writes_coloured_stdout(capsys):
    new_handler(None).handle(Record(LEVEL_INFO, "shown", time=FIXED))
    out = capsys.readouterr().out
    assert colorizer(97, "shown") in out
    assert colorizer(36, "INFO:") in out