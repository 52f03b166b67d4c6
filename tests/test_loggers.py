import json

import pytest

from simplelog import core
from simplelog.loggers import (
    get_debug_logger,
    get_error_logger,
    get_info_logger,
    get_notice_logger,
    get_verbose_logger,
    get_warning_logger,
)


def _entries(text):
    return [json.loads(line) for line in text.splitlines() if line.strip()]


def test_debug_logger_print(capsys):
    core.init(core.Level.DEBUG)
    get_debug_logger().print("hello")
    (entry,) = _entries(capsys.readouterr().out)
    assert entry["level"] == "DEBUG"
    assert entry["msg"] == "hello"


def test_info_logger_printf(capsys):
    core.init(core.Level.INFO)
    get_info_logger().printf("value %s", "p1")
    (entry,) = _entries(capsys.readouterr().out)
    assert entry["level"] == "INFO"
    assert entry["msg"] == "value p1"


def test_println_joins_with_spaces_and_newline(capsys):
    core.init(core.Level.DEBUG)
    get_info_logger().println("a", "b")
    (entry,) = _entries(capsys.readouterr().out)
    assert entry["msg"] == "a b\n"


def test_error_logger_writes_to_stderr(capsys):
    core.init(core.Level.ERROR)
    get_error_logger().print("broken")
    captured = capsys.readouterr()
    assert captured.out == ""
    (entry,) = _entries(captured.err)
    assert entry["level"] == "ERROR"
    assert entry["msg"] == "broken"


def test_notice_logger_uses_info_output(capsys):
    core.init(core.Level.NOTICE)
    get_notice_logger().print("quiet")
    assert capsys.readouterr().out == ""
    core.init(core.Level.INFO)
    get_notice_logger().print("loud")
    (entry,) = _entries(capsys.readouterr().out)
    assert entry["level"] == "NOTICE"
    assert entry["msg"] == "loud"


def test_warning_logger_uses_info_output(capsys):
    core.init(core.Level.WARN)
    get_warning_logger().print("quiet")
    assert capsys.readouterr().out == ""
    core.init(core.Level.INFO)
    get_warning_logger().print("loud")
    (entry,) = _entries(capsys.readouterr().out)
    assert entry["level"] == "WARNING"


def test_verbose_logger_uses_debug_output(capsys):
    core.init(core.Level.INFO)
    get_verbose_logger().print("quiet")
    assert capsys.readouterr().out == ""
    core.init(core.Level.DEBUG)
    get_verbose_logger().print("loud")
    (entry,) = _entries(capsys.readouterr().out)
    assert entry["level"] == "DEBUG"
    assert entry["msg"] == "loud"


def test_missing_output_raises(monkeypatch):
    core.init(core.Level.INFO)
    monkeypatch.setattr(core.logger(), "info", None)
    with pytest.raises(core.NotInitializedError):
        get_info_logger().print("x")