"""Decoded log frames and the rendering of their format strings."""

from __future__ import annotations

import math
import struct
import unicodedata
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Sequence

from .model import (
    Arg,
    BoolArg,
    CharArg,
    F32Arg,
    F64Arg,
    FormatArg,
    FormatSliceArg,
    IntArg,
    IStrArg,
    PreformattedArg,
    SliceArg,
    StrArg,
    UintArg,
)
from .params import DisplayHint, HintKind, Level, Parameter, TypeKind, parse_format

__all__ = ["Frame", "format_args"]

_U128_BITS = 128
_U128_MASK = (1 << _U128_BITS) - 1

_RESET = "\x1b[0m"
_LEVEL_STYLES = {
    Level.TRACE: "\x1b[2m",
    Level.DEBUG: None,
    Level.INFO: "\x1b[32m",
    Level.WARN: "\x1b[33m",
    Level.ERROR: "\x1b[31m",
}


def _paint(text: str, style: str | None) -> str:
    return text if style is None else f"{style}{text}{_RESET}"


@dataclass(frozen=True)
class Frame:
    """A decoded log frame: level, table index, optional timestamp and message."""

    level: Level
    index: int
    timestamp_format: str | None
    timestamp_args: tuple = field(default=())
    format: str = ""
    args: tuple = field(default=())

    def __post_init__(self) -> None:
        object.__setattr__(self, "timestamp_args", tuple(self.timestamp_args))
        object.__setattr__(self, "args", tuple(self.args))

    def display(self, colored: bool) -> str:
        """Render the whole frame: ``<timestamp> <LEVEL> <message>``."""
        level = self.level.value
        if colored:
            level = _paint(level, _LEVEL_STYLES[self.level])
        timestamp = self.display_timestamp()
        prefix = f"{timestamp} " if timestamp is not None else ""
        return f"{prefix}{level} {self.display_message()}"

    def display_timestamp(self) -> str | None:
        """Render the timestamp, or None if the table defines no timestamp."""
        if self.timestamp_format is None:
            return None
        return format_args(self.timestamp_format, self.timestamp_args, None)

    def display_message(self) -> str:
        """Render the message of this frame."""
        return format_args(self.format, self.args, None)

    def __str__(self) -> str:
        return self.display(False)


# -- floats ------------------------------------------------------------------


def _shortest_digits(value: float, single: bool) -> tuple[str, int]:
    """Shortest decimal digits and exponent that round-trip ``value``."""
    text = repr(value)
    if single:
        for precision in range(1, 10):
            candidate = f"{value:.{precision - 1}e}"
            packed = struct.pack("<f", float(candidate))
            if struct.unpack("<f", packed)[0] == value:
                text = candidate
                break
    _, digit_tuple, exponent = Decimal(text).as_tuple()
    digits = "".join(map(str, digit_tuple)).lstrip("0") or "0"
    stripped = digits.rstrip("0") or "0"
    exponent = int(exponent) + (len(digits) - len(stripped))
    return stripped, exponent


def _format_float(value: float, single: bool) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    if value == 0:
        return "-0.0" if math.copysign(1.0, value) < 0 else "0.0"
    sign = "-" if value < 0 else ""
    digits, k = _shortest_digits(abs(value), single)
    length = len(digits)
    kk = length + k
    limit, low = (13, -6) if single else (16, -5)
    if 0 <= k and kk <= limit:
        body = digits + "0" * k + ".0"
    elif 0 < kk <= limit:
        body = f"{digits[:kk]}.{digits[kk:]}"
    elif low < kk <= 0:
        body = "0." + "0" * (-kk) + digits
    elif length == 1:
        body = f"{digits}e{kk - 1}"
    else:
        body = f"{digits[0]}.{digits[1:]}e{kk - 1}"
    return sign + body


# -- integers, bytes and strings ---------------------------------------------


def _format_u128(value: int, hint: DisplayHint | None) -> str:
    kind = hint.kind if hint is not None else None
    if kind is HintKind.BINARY:
        return format(value, "#b")
    if kind is HintKind.HEXADECIMAL:
        return "0x" + format(value, "X" if hint.uppercase else "x")
    if kind is HintKind.MICROSECONDS:
        seconds, micros = divmod(value, 1_000_000)
        return f"{seconds}.{micros:06}"
    return str(value)


def _format_i128(value: int, hint: DisplayHint | None) -> str:
    kind = hint.kind if hint is not None else None
    if kind in (HintKind.BINARY, HintKind.HEXADECIMAL):
        # radix formatting of signed values shows the two's complement pattern
        return _format_u128(value & _U128_MASK, hint)
    return str(value)


_ASCII_ESCAPES = {
    ord("\t"): "\\t",
    ord("\n"): "\\n",
    ord("\r"): "\\r",
    ord(" "): " ",
    ord('"'): '\\"',
    ord("\\"): "\\\\",
}


def _format_bytes(data: bytes, hint: DisplayHint | None) -> str:
    kind = hint.kind if hint is not None else None
    if kind is HintKind.ASCII:
        parts = []
        for byte in data:
            if byte in _ASCII_ESCAPES:
                parts.append(_ASCII_ESCAPES[byte])
            elif 0x21 <= byte <= 0x7E:
                parts.append(chr(byte))
            else:
                parts.append(f"\\x{byte:02x}")
        return 'b"' + "".join(parts) + '"'
    if kind in (HintKind.HEXADECIMAL, HintKind.BINARY):
        return "[" + ", ".join(_format_u128(byte, hint) for byte in data) + "]"
    return "[" + ", ".join(str(byte) for byte in data) + "]"


_STR_ESCAPES = {"\t": "\\t", "\r": "\\r", "\n": "\\n", "\\": "\\\\", '"': '\\"', "\0": "\\0"}


def _debug_str(text: str) -> str:
    parts = []
    for char in text:
        if char in _STR_ESCAPES:
            parts.append(_STR_ESCAPES[char])
        elif char != " " and unicodedata.category(char) in (
            "Cc", "Cf", "Cs", "Co", "Cn", "Zl", "Zp", "Zs"
        ):
            parts.append(f"\\u{{{ord(char):x}}}")
        else:
            parts.append(char)
    return '"' + "".join(parts) + '"'


def _format_str(text: str, hint: DisplayHint | None) -> str:
    if hint is not None and hint.kind is HintKind.DEBUG:
        return _debug_str(text)
    return text


def _format_bitfield(value: int, param: Parameter, hint: DisplayHint | None) -> str:
    bits = param.ty.bits
    assert bits is not None
    left_zeroes = _U128_BITS - bits.stop
    right_zeroes = left_zeroes + bits.start
    field_value = ((value << left_zeroes) & _U128_MASK) >> right_zeroes
    if hint is not None and hint.kind is HintKind.ASCII:
        raw = field_value.to_bytes(16, "big")[right_zeroes // 8 :]
        return _format_bytes(raw, hint)
    return _format_u128(field_value, hint)


def _format_slice(arg: FormatSliceArg, hint: DisplayHint | None) -> str:
    elements = arg.elements
    if (
        hint is not None
        and hint.kind is HintKind.ASCII
        and any(e.format == "{=u8}" for e in elements)
    ):
        values = []
        for element in elements:
            if len(element.args) != 1 or not isinstance(element.args[0], UintArg):
                raise ValueError("format slice element should hold exactly one integer")
            value = element.args[0].value
            if not 0 <= value <= 0xFF:
                raise ValueError("the value must be in u8 range")
            values.append(value)
        return _format_bytes(bytes(values), hint)
    rendered = (format_args(e.format, e.args, hint) for e in elements)
    return "[" + ", ".join(rendered) + "]"


def _format_arg(arg: Arg, param: Parameter, hint: DisplayHint | None) -> str:
    if isinstance(arg, BoolArg):
        return str(arg.cell)
    if isinstance(arg, F32Arg):
        return _format_float(arg.value, single=True)
    if isinstance(arg, F64Arg):
        return _format_float(arg.value, single=False)
    if isinstance(arg, UintArg):
        if param.ty.kind is TypeKind.BIT_FIELD:
            return _format_bitfield(arg.value, param, hint)
        return _format_u128(arg.value, hint)
    if isinstance(arg, IntArg):
        return _format_i128(arg.value, hint)
    if isinstance(arg, (StrArg, PreformattedArg, IStrArg)):
        return _format_str(arg.value, hint)
    if isinstance(arg, FormatArg):
        return format_args(arg.format, arg.args, hint)
    if isinstance(arg, FormatSliceArg):
        return _format_slice(arg, hint)
    if isinstance(arg, SliceArg):
        return _format_bytes(arg.data, hint)
    if isinstance(arg, CharArg):
        return arg.value
    raise TypeError(f"unsupported argument {arg!r}")


def format_args(
    format: str, args: Sequence[Arg], parent_hint: DisplayHint | None = None
) -> str:
    """Render ``format`` with ``args``.

    A parameter's own hint takes precedence over ``parent_hint``, which is
    inherited from the enclosing parameter.
    """
    parts = []
    for fragment in parse_format(format):
        if isinstance(fragment, Parameter):
            hint = fragment.hint if fragment.hint is not None else parent_hint
            parts.append(_format_arg(args[fragment.index], fragment, hint))
        else:
            parts.append(fragment.text)
    return "".join(parts)