"""Integration of decoded frames with the standard ``logging`` package."""

from __future__ import annotations

import difflib
import logging
import sys
from collections.abc import Callable
from dataclasses import dataclass
from typing import TextIO

from .frame import Frame
from .params import Level

__all__ = [
    "DEFMT_TARGET_MARKER",
    "TRACE",
    "log_defmt",
    "is_defmt_frame",
    "DefmtRecord",
    "Printer",
    "color_diff",
    "DefmtHandler",
    "init_logger",
]

DEFMT_TARGET_MARKER = "defmt@"

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

_LEVEL_NUMBERS = {
    Level.TRACE: TRACE,
    Level.DEBUG: logging.DEBUG,
    Level.INFO: logging.INFO,
    Level.WARN: logging.WARNING,
    Level.ERROR: logging.ERROR,
}

_LEVEL_COLORS = {
    "ERROR": "31",
    "WARN": "33",
    "INFO": "32",
    "DEBUG": "97",
    "TRACE": "90",
}

_RESET = "\x1b[0m"
_BOLD = "1"
_DIMMED = "2"
_RED = "31"
_GREEN = "32"
_REMOVED = "1;48;5;52;31"
_ADDED = "1;48;5;22;32"

_LEFT_START = " left: `"
_RIGHT_START = "right: `"
_END = "`"


def _style(text: str, code: str) -> str:
    return f"\x1b[{code}m{text}{_RESET}"


def _level_name(levelno: int) -> str:
    if levelno >= logging.ERROR:
        return "ERROR"
    if levelno >= logging.WARNING:
        return "WARN"
    if levelno >= logging.INFO:
        return "INFO"
    if levelno >= logging.DEBUG:
        return "DEBUG"
    return "TRACE"


def log_defmt(
    frame: Frame,
    file: str | None = None,
    line: int | None = None,
    module_path: str | None = None,
    logger: logging.Logger | None = None,
) -> None:
    """Emit ``frame`` as a record of ``logger`` (the root logger by default).

    The record's name carries the marker and the rendered timestamp.
    """
    logger = logger if logger is not None else logging.getLogger()
    timestamp = frame.display_timestamp() or ""
    record = logger.makeRecord(
        DEFMT_TARGET_MARKER + timestamp,
        _LEVEL_NUMBERS[frame.level],
        file or "",
        line or 0,
        frame.display_message(),
        (),
        None,
        extra={
            "defmt_file": file,
            "defmt_line": line,
            "defmt_module_path": module_path,
        },
    )
    logger.handle(record)


def is_defmt_frame(record: logging.LogRecord) -> bool:
    """Whether ``record`` was produced by :func:`log_defmt`."""
    return record.name.startswith(DEFMT_TARGET_MARKER)


@dataclass(frozen=True)
class DefmtRecord:
    """A log record that represents a decoded frame."""

    timestamp: str
    record: logging.LogRecord

    @classmethod
    def from_record(cls, record: logging.LogRecord) -> DefmtRecord | None:
        """Wrap ``record`` if it came from :func:`log_defmt`, else return None."""
        if not is_defmt_frame(record):
            return None
        return cls(record.name[len(DEFMT_TARGET_MARKER) :], record)

    @property
    def level(self) -> str:
        return _level_name(self.record.levelno)

    @property
    def args(self) -> str:
        return self.record.getMessage()

    @property
    def module_path(self) -> str | None:
        return getattr(self.record, "defmt_module_path", None)

    @property
    def file(self) -> str | None:
        return getattr(self.record, "defmt_file", None)

    @property
    def line(self) -> int | None:
        return getattr(self.record, "defmt_line", None)


def _print_location(
    sink: TextIO, module_path: str | None, file: str | None, line: int | None
) -> None:
    if file is None:
        return
    location = file if line is None else f"{file}:{line}"
    sink.write(_style(f"└─ {module_path or ''} @ {location}", _DIMMED) + "\n")


@dataclass
class Printer:
    """Renders a :class:`DefmtRecord` for the user.

    Output is ``<timestamp> <level> <args>``, optionally followed by a
    ``└─ <module> @ <file>:<line>`` line.
    """

    record: DefmtRecord
    include_location: bool = False
    min_timestamp_width: int = 0

    def print_colored(self, sink: TextIO) -> None:
        level = self.record.level
        styled_level = _style(f"{level:<5}", _LEVEL_COLORS[level])
        timestamp = f"{self.record.timestamp:>{self.min_timestamp_width}}"
        sink.write(f"{timestamp} {styled_level} {color_diff(self.record.args)}\n")
        if self.include_location:
            _print_location(
                sink, self.record.module_path, self.record.file, self.record.line
            )


def _lines(text: str) -> list[str]:
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def color_diff(text: str) -> str:
    """Bold the text; an assertion message ending in left/right lines becomes a coloured diff."""
    lines = _lines(text)
    if len(lines) > 2:
        left, right = lines[-2], lines[-1]
        if (
            left.startswith(_LEFT_START)
            and left.endswith(_END)
            and right.startswith(_RIGHT_START)
            and right.endswith(_END)
        ):
            left = left[len(_LEFT_START) : len(left) - len(_END)]
            right = right[len(_RIGHT_START) : len(right) - len(_END)]
            opcodes = difflib.SequenceMatcher(None, left, right, autojunk=False).get_opcodes()

            parts = [_style("\n".join(lines[:-2]), _BOLD), "\n"]
            parts.append(
                f"{_style('diff', _BOLD)} {_style('< left', _RED)} / {_style('right >', _GREEN)}\n"
            )
            parts.append(_style("<", _RED))
            for tag, i1, i2, _, _ in opcodes:
                if tag == "equal":
                    parts.append(_style(left[i1:i2], _RED))
                elif tag in ("delete", "replace"):
                    parts.append(_style(left[i1:i2], _REMOVED))
            parts.append("\n")
            parts.append(_style(">", _GREEN))
            for tag, _, _, j1, j2 in opcodes:
                if tag == "equal":
                    parts.append(_style(right[j1:j2], _GREEN))
                elif tag in ("insert", "replace"):
                    parts.append(_style(right[j1:j2], _ADDED))
            return "".join(parts)
    return _style(text, _BOLD)


class DefmtHandler(logging.Handler):
    """Prints frames to stdout and other records to stderr, aligned on the timestamp."""

    def __init__(
        self,
        always_include_location: bool = False,
        should_log: Callable[[logging.LogRecord], bool] | None = None,
        stdout: TextIO | None = None,
        stderr: TextIO | None = None,
    ) -> None:
        super().__init__(level=logging.NOTSET)
        self.always_include_location = always_include_location
        self.should_log = should_log if should_log is not None else (lambda record: True)
        self.stdout = stdout
        self.stderr = stderr
        # grows as longer timestamps are seen
        self.timing_align = 8

    def emit(self, record: logging.LogRecord) -> None:
        try:
            if not self.should_log(record):
                return
            defmt = DefmtRecord.from_record(record)
            if defmt is not None:
                sink = self.stdout if self.stdout is not None else sys.stdout
                self.timing_align = max(self.timing_align, len(defmt.timestamp))
                Printer(
                    defmt, include_location=True, min_timestamp_width=self.timing_align
                ).print_colored(sink)
            else:
                sink = self.stderr if self.stderr is not None else sys.stderr
                level = _level_name(record.levelno)
                styled_level = _style(f"{level:<5}", _LEVEL_COLORS[level])
                timestamp = f"{'(HOST)':>{self.timing_align}}"
                sink.write(f"{timestamp} {styled_level} {record.getMessage()}\n")
                if self.always_include_location:
                    _print_location(sink, record.module, record.pathname, record.lineno)
        except Exception:
            self.handleError(record)


def init_logger(
    always_include_location: bool = False,
    should_log: Callable[[logging.LogRecord], bool] | None = None,
) -> DefmtHandler:
    """Install a :class:`DefmtHandler` on the root logger and enable all levels.

    Raises ``RuntimeError`` if one is already installed.
    """
    root = logging.getLogger()
    if any(isinstance(handler, DefmtHandler) for handler in root.handlers):
        raise RuntimeError("a defmt logger is already installed")
    handler = DefmtHandler(always_include_location, should_log)
    root.addHandler(handler)
    root.setLevel(TRACE)
    return handler