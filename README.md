# simplelog

A small levelled logging library. Each entry is written as one JSON line
holding a timestamp, a level and a message. Some calls add extra
key/value pairs to the entry.

The package has four modules:

- `simplelog.core`: module-level logging functions with six levels
  (verbose debug, debug, info, notice, warning, error).
- `simplelog.loggers`: small logger objects with a fixed label and
  `print`, `println` and `printf` methods. They write through `core`.
- `simplelog.medlog`: a process-wide structured logger. It writes JSON
  records to standard error and filters them by a minimum level. It has
  two extra levels, `VERBOSE` below debug and `NOTICE` between info and
  warning.
- `simplelog.prettylog`: log records, a JSON handler, and a coloured,
  human-readable console handler.

The package has no dependencies outside the standard library.

## Installation

```
pip install simplelog
```

## Levelled JSON logging (`simplelog.core`)

```python
from simplelog import core

core.init(core.parse_level("info"))

core.debugf("not shown at level %s", "info")
core.infof("user %s logged in", "alice")
core.noticem("cache refreshed", {"entries": "42"})
core.error("something failed")
```

An entry looks like this:

```
{"time":"2024-05-01 12:00:00.000", "level":"INFO", "msg":"user alice logged in"}
```

The `...m` functions (`debugm`, `infom`, `noticem`, `warningm`, `errorm`,
`verbose_debugm`) add each key/value pair of the mapping to the entry.

### Levels and outputs

`core.Level` has these members: `VERBOSE_DEBUG`, `DEBUG`, `INFO`,
`NOTICE`, `WARN` and `ERROR`.

`core.init(level)` sets where each kind of message goes. When a level is
enabled, its messages and the messages of every level above it go to
standard output. Messages of disabled levels are discarded. Error
messages always go to standard error. `init` returns the shared
`core.SimpleLog`, which is also available from `core.logger()`.
`core.log_level()` returns the level that is configured.

`core.parse_level` accepts these names, in any case:

- `error` or `err`
- `warn` or `warning`
- `notice`
- `info`
- `debug`
- `verbose`

Any other name raises `ValueError`.

Each logging function raises `core.NotInitializedError` if it is called
before `init`.

`warn`, `warnf` and `warnm` are aliases for `warning`, `warningf` and
`warningm`.

### Timestamps

`core.set_timestamp_format(fmt)` takes a `strftime` format. In that
format, `%L` stands for milliseconds. The default is
`"%Y-%m-%d %H:%M:%S.%L"`.

### Capturing messages in tests

```python
core.init(core.parse_level("debug"))
core.persist_log(True)
core.info("hello")
assert core.log_contains_message("hello")
assert core.log_contains("hello", "INFO")
entries = core.get_logs()        # list of LogEntry(time, msg, level)
raw = core.get_messages()        # raw lines as written
```

Once `persist_log(True)` is set, messages at every level except verbose
debug are kept in memory and are also printed to standard output.
`persist_log(False)` puts back the outputs for the configured level.

`log_contains` raises `ValueError` if a stored line is not valid JSON.
`get_logs` turns such a line into an empty `LogEntry`.

### Writing to a chosen stream

`core.print_message(stream, level, message)`,
`core.print_line(stream, level, *args)` and
`core.print_format(stream, level, fmt, *args)` write one entry with the
given label to any object that has a `write(text)` method.

`print_line` joins its arguments with spaces and ends the message with a
newline.

## Per-level logger objects (`simplelog.loggers`)

```python
from simplelog import loggers

log = loggers.get_info_logger()
log.print("plain message")
log.printf("formatted %d", 3)
log.println("joined", "values")
```

Each function returns a `LevelLogger`. The label it writes and the output
it uses are fixed:

| Function             | Label     | Output |
|----------------------|-----------|--------|
| `get_debug_logger`   | `DEBUG`   | debug  |
| `get_verbose_logger` | `DEBUG`   | debug  |
| `get_info_logger`    | `INFO`    | info   |
| `get_notice_logger`  | `NOTICE`  | info   |
| `get_warning_logger` | `WARNING` | info   |
| `get_error_logger`   | `ERROR`   | error  |

## Structured logging (`simplelog.medlog`)

```python
from simplelog import medlog

medlog.init(medlog.parse_level("debug"))
medlog.info_slog("request handled", "path", "/status", "code", 200)
medlog.noticef("queue length %d", 7)
medlog.get_error_logger().print("disk full")
```

Each record is one JSON object on standard error:

```
{"time":"2024-05-01T12:00:00.000+02:00","level":"INFO","msg":"request handled","path":"/status","code":200}
```

The level names are `VERBOSE`, `DEBUG`, `INFO`, `NOTICE`, `WARN` and
`ERROR`. Their numeric values are `LEVEL_VERBOSE`, `LEVEL_DEBUG`,
`LEVEL_INFO`, `LEVEL_NOTICE`, `LEVEL_WARN` and `LEVEL_ERROR` in
`simplelog.prettylog`.

`medlog.parse_level` accepts the same names as `core.parse_level`.

### How `init` behaves

- `medlog.init(level)` creates the shared `MedLog` on its first call.
- Later calls return that same logger. The level passed to them is
  ignored.
- Before `init` has been called, the module-level functions do nothing.
- `medlog.persist_log` has no effect. It exists so that code written for
  `core` keeps working.

### Kinds of logging function

- The `..._slog` functions take key/value pairs after the message.
- The `...f` functions take a `%`-style format.
- The plain functions take a message.

### Error logger

`medlog.ErrorLogger`, returned by `get_error_logger()`, logs at ERROR with
an `ERROR: ` prefix. Its `printf` ignores the format string: it logs its
argument after the prefix.

## Pretty console output (`simplelog.prettylog`)

```python
import sys
from simplelog import prettylog
from simplelog.medlog import MedLog

handler = prettylog.new(
    prettylog.HandlerOptions(level=prettylog.LEVEL_DEBUG),
    prettylog.with_destination_writer(sys.stdout),
    prettylog.with_color(),
)
log = MedLog(handler)
log.info("started", "port", 8080)
```

Each line holds these parts, in order:

1. the time, as `[HH:MM:SS.mmm]`
2. the level
3. the message
4. the remaining attributes, as a JSON object

With `with_color()` set, each part is coloured with ANSI escapes.

`prettylog.new_handler(opts)` builds the same handler with colour, writing
to standard output.

`prettylog.JSONHandler(writer, opts)` writes one compact JSON object per
record. `HandlerOptions.replace_attr` can rewrite attributes or drop them:
returning an empty `Attr()` drops the attribute. Both handlers have
`with_attrs` and `with_group`, which add attributes to every record and
nest attributes under a group.

## What it does not do

The package only writes to standard output, standard error, or a writer
you pass in. It has:

- no log files
- no rotation
- no command-line program

The logger that `medlog.init` creates always uses the JSON handler. To use
the console handler, build a `MedLog` around it yourself, as shown above.