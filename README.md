# defmtview

`defmtview` renders the log frames that embedded firmware emits in a compact
form. The firmware does not send text. It sends an index into a table of
format strings and the argument values in binary. This package covers the
host side once the arguments are known. It parses the format strings, models
the argument values, renders whole frames as text and passes them into
Python's `logging` package.

It needs nothing beyond the Python standard library (3.10 or later).

```
pip install defmtview
```

## Format strings — `defmtview.params`

`parse_format(format)` splits a format string into `Literal` and `Parameter`
fragments. `{{` and `}}` are unescaped. Malformed strings raise `ValueError`.
This includes unknown types, an unclosed `{`, conflicting types for one
argument index, and an index that is never used.

```python
from defmtview.params import parse_format

parse_format("x: {0=0..4:b}, y={=u8}")
```

Each `Parameter` has an `index`, a `ty` (`ParamType`) and an optional `hint`
(`DisplayHint`).

A `ParamType` has a `kind` (a `TypeKind`). Arrays also carry a `length` and
bitfields carry a `bits` range. The types understood are:

* `bool`, `char`, `str`, `istr`
* `i8` … `i128`, `isize`, `u8` … `u128`, `u24`, `usize`
* `f32`, `f64`
* `[u8]`, `[u8; N]`, `?`, `[?]`, `[?; N]`
* bitfields such as `0..4`, with an end of at most 128

The hints are:

| Hint | Meaning |
| --- | --- |
| `b` | binary |
| `x` | hexadecimal, lower case |
| `X` | hexadecimal, upper case |
| `a` | ASCII |
| `?` | debug |
| `µs` | microseconds |

Unknown hints are ignored. An omitted index counts up from 0, and a
parameter with no `=type` is `?`.

`merge_bitfields(params)` merges the bitfields that share an index into one
range covering all of them. Other parameters keep their order, and the merged
bitfields follow, ordered by index. `max_bitfield_range(params)` returns
`(start, end)` over all bitfield parameters, or `None` if there are none.

`Level` lists the log levels `TRACE`, `DEBUG`, `INFO`, `WARN` and `ERROR`.

## Argument values — `defmtview.model`

Decoded values are small frozen dataclasses:

| Class | Holds |
| --- | --- |
| `BoolArg` | a `BoolCell` |
| `F32Arg`, `F64Arg` | a float |
| `UintArg`, `IntArg` | an integer |
| `StrArg` | a string |
| `IStrArg` | an interned string |
| `CharArg` | a character |
| `PreformattedArg` | text formatted on the target |
| `SliceArg` | bytes |
| `FormatArg` | a nested value with its own `format` and `args` |
| `FormatSliceArg` | a tuple of `FormatSliceElement`s |

A `BoolCell` can be filled in later with `set(value)`.

`Tag` gives the origin of a table string: `PRIM`, `DERIVED`, `WRITE`, `STR`,
`TIMESTAMP`, or one of the log-level tags. `Tag.level()` returns the `Level`
for a log-level tag and `None` for the others.

## Symbols — `defmtview.symbol`

Table strings are stored under symbol names that are JSON objects.
`Symbol.demangle(raw)` parses one and checks its fields. It raises
`ValueError` if the fields are missing or are not strings, and it lets
`json`'s decode errors propagate. `Symbol.defmt_tag()` maps a `defmt_*` tag
to a `Tag` and returns `None` for a custom tag.

```python
from defmtview.symbol import Symbol

sym = Symbol.demangle(
    '{"package":"app","disambiguator":"1","tag":"defmt_info","data":"Hello"}'
)
sym.defmt_tag()          # Tag.INFO
sym.data                 # 'Hello'
```

## Frames — `defmtview.frame`

A `Frame` holds the following fields:

* `level`
* `index`
* an optional `timestamp_format` with its `timestamp_args`
* the message `format` with its `args`

```python
from defmtview.frame import Frame
from defmtview.model import FormatArg, UintArg
from defmtview.params import Level

frame = Frame(
    Level.INFO, 0,
    "{=u8:µs}", (UintArg(2),),
    "x={=?}", (FormatArg("Foo {{ x: {=u8} }}", (UintArg(42),)),),
)
frame.display(False)        # '0.000002 INFO x=Foo { x: 42 }'
frame.display_message()     # 'x=Foo { x: 42 }'
frame.display_timestamp()   # '0.000002'
```

`display(colored=True)` colours the level name with ANSI escapes. `str(frame)`
is the same as `display(False)`. `display_timestamp()` returns `None` when
the frame has no timestamp format.

`format_args(format, args, parent_hint)` renders one format string. A
parameter's own hint wins over the hint inherited from the enclosing
parameter. Some cases render specially:

* Bitfields are cut out of their integer.
* Byte slices render as `[1, 2]`, as `b"..."` with the `a` hint, or as
  per-byte hex or binary.
* Signed integers in hex or binary show their 128-bit two's-complement
  pattern.
* Floats use the shortest representation that round-trips.

## Logging integration — `defmtview.logsink`

```python
import logging
from defmtview.logsink import init_logger, log_defmt

init_logger(always_include_location=False, should_log=lambda record: True)
log_defmt(frame, file="src/main.rs", line=12, module_path="app",
          logger=logging.getLogger())
```

`log_defmt` turns a frame into a `logging` record. The record's name is
`defmt@<timestamp>`. `TRACE` is level 5. `is_defmt_frame(record)` recognises
such records, and `DefmtRecord.from_record(record)` wraps them.

`DefmtHandler` sends frame records to standard output and other records to
standard error. Each frame is printed as `<timestamp> <level> <message>`,
followed by a `└─ <module> @ <file>:<line>` line. Other records show the
timestamp `(HOST)`, and they get a location line only with
`always_include_location`. Timestamps are right-aligned to the widest one
seen so far, and at least 8 characters wide.

`init_logger` installs a `DefmtHandler` on the root logger and enables every
level. It raises `RuntimeError` if one is already installed.

`Printer(record, include_location, min_timestamp_width).print_colored(sink)`
prints a single record.

`color_diff(text)` makes the text bold. If the message ends in
`` left: `...` `` and `` right: `...` `` lines, it is shown as a coloured
left/right diff instead.

## Wire-format version — `defmtview.version`

`wire_version(git_hash, package_version)` returns the git hash if one is
given. Otherwise it returns the breaking part of the semantic version:
`"0.2.1"` gives `"0.2"` and `"1.4.0"` gives `"1"`.

`detect_version(repo_dir, package_version)` runs `git rev-parse HEAD` in
`repo_dir` to get the hash. It raises `RuntimeError` if the directory is a
git checkout but `git` cannot be run.

## What this package does not do

The package does not:

* decode raw bytes received from a device into frames. The argument values
  must already be known and be built as `defmtview.model` objects.
* read the format-string table out of a firmware ELF file.
* check a firmware's version against the decoder's.
* provide a command-line tool.