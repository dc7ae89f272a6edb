"""Format-string grammar: parameters, types, display hints and bitfield merging."""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

__all__ = [
    "Level",
    "HintKind",
    "DisplayHint",
    "TypeKind",
    "ParamType",
    "Parameter",
    "Literal",
    "parse_format",
    "merge_bitfields",
    "max_bitfield_range",
]


class Level(Enum):
    """Log level of a frame."""

    TRACE = "TRACE"
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"


class HintKind(Enum):
    """The kind of a display hint (the part after ``:`` in a parameter)."""

    BINARY = "b"
    HEXADECIMAL = "x"
    ASCII = "a"
    DEBUG = "?"
    MICROSECONDS = "µs"


@dataclass(frozen=True)
class DisplayHint:
    """How a value should be rendered; ``uppercase`` only matters for hexadecimal."""

    kind: HintKind
    uppercase: bool = False


class TypeKind(Enum):
    """The wire type of a parameter."""

    BOOL = "bool"
    FORMAT = "?"
    FORMAT_SLICE = "[?]"
    FORMAT_ARRAY = "[?;N]"
    I8 = "i8"
    I16 = "i16"
    I32 = "i32"
    I64 = "i64"
    I128 = "i128"
    ISIZE = "isize"
    U8 = "u8"
    U16 = "u16"
    U24 = "u24"
    U32 = "u32"
    U64 = "u64"
    U128 = "u128"
    USIZE = "usize"
    F32 = "f32"
    F64 = "f64"
    STR = "str"
    ISTR = "istr"
    U8_SLICE = "[u8]"
    U8_ARRAY = "[u8;N]"
    BIT_FIELD = "bitfield"
    CHAR = "char"
    DEBUG = "__internal_Debug"
    DISPLAY = "__internal_Display"


@dataclass(frozen=True)
class ParamType:
    """A parameter type; arrays carry ``length``, bitfields carry ``bits``."""

    kind: TypeKind
    length: int | None = None
    bits: range | None = None


@dataclass(frozen=True)
class Parameter:
    """A ``{...}`` placeholder in a format string."""

    index: int
    ty: ParamType
    hint: DisplayHint | None = None


@dataclass(frozen=True)
class Literal:
    """Literal text between parameters, with ``{{`` and ``}}`` already unescaped."""

    text: str


_SIMPLE_TYPES = {
    kind.value: kind
    for kind in TypeKind
    if kind not in (TypeKind.FORMAT_ARRAY, TypeKind.U8_ARRAY, TypeKind.BIT_FIELD)
}

_HINTS = {
    "b": DisplayHint(HintKind.BINARY),
    "x": DisplayHint(HintKind.HEXADECIMAL, uppercase=False),
    "X": DisplayHint(HintKind.HEXADECIMAL, uppercase=True),
    "a": DisplayHint(HintKind.ASCII),
    "?": DisplayHint(HintKind.DEBUG),
    "µs": DisplayHint(HintKind.MICROSECONDS),
}

_PARAM_RE = re.compile(r"^(?P<index>\d+)?(?:=(?P<type>[^:]*))?(?::(?P<hint>.*))?$", re.S)
_SLICE_RE = re.compile(r"^\[\s*(u8|\?)\s*\]$")
_ARRAY_RE = re.compile(r"^\[\s*(u8|\?)\s*;\s*(\d+)\s*\]$")
_BITFIELD_RE = re.compile(r"^(\d+)\.\.(\d+)$")


def _parse_type(text: str) -> ParamType:
    text = text.strip()
    if text in ("[u8]", "[?]"):
        return ParamType(_SIMPLE_TYPES[text])
    if text in _SIMPLE_TYPES:
        return ParamType(_SIMPLE_TYPES[text])
    if match := _SLICE_RE.match(text):
        kind = TypeKind.U8_SLICE if match.group(1) == "u8" else TypeKind.FORMAT_SLICE
        return ParamType(kind)
    if match := _ARRAY_RE.match(text):
        kind = TypeKind.U8_ARRAY if match.group(1) == "u8" else TypeKind.FORMAT_ARRAY
        return ParamType(kind, length=int(match.group(2)))
    if match := _BITFIELD_RE.match(text):
        start, end = int(match.group(1)), int(match.group(2))
        if start >= end:
            raise ValueError(f"bitfield range {start}..{end} is empty")
        if end > 128:
            raise ValueError(f"bitfield range {start}..{end} exceeds 128 bits")
        return ParamType(TypeKind.BIT_FIELD, bits=range(start, end))
    raise ValueError(f"unknown parameter type {text!r}")


def _parse_param(content: str, implicit_index: int) -> tuple[Parameter, bool]:
    """Parse the inside of ``{...}``; the flag tells whether the index was implicit."""
    match = _PARAM_RE.match(content)
    if match is None:
        raise ValueError(f"malformed parameter {{{content}}}")
    index_text, type_text, hint_text = match.group("index", "type", "hint")
    if type_text is None:
        ty = ParamType(TypeKind.FORMAT)
    elif not type_text.strip():
        raise ValueError(f"missing type in parameter {{{content}}}")
    else:
        ty = _parse_type(type_text)
    # unknown hints are tolerated and ignored for forwards compatibility
    hint = _HINTS.get(hint_text) if hint_text else None
    if index_text is None:
        return Parameter(implicit_index, ty, hint), True
    return Parameter(int(index_text), ty, hint), False


def _check_params(params: list[Parameter]) -> None:
    types: dict[int, ParamType] = {}
    for param in params:
        if param.ty.kind is TypeKind.BIT_FIELD:
            previous = types.setdefault(param.index, param.ty)
            if previous.kind is not TypeKind.BIT_FIELD:
                raise ValueError(f"conflicting types for argument {param.index}")
            continue
        previous = types.setdefault(param.index, param.ty)
        if previous != param.ty:
            raise ValueError(f"conflicting types for argument {param.index}")
    if types:
        missing = set(range(max(types) + 1)) - types.keys()
        if missing:
            raise ValueError(f"argument {min(missing)} is not used in this format string")


def parse_format(format: str) -> list[Literal | Parameter]:
    """Split a format string into literals and parameters.

    Raises ``ValueError`` on malformed input.
    """
    fragments: list[Literal | Parameter] = []
    literal: list[str] = []
    implicit_index = 0
    pos = 0
    length = len(format)

    def flush() -> None:
        if literal:
            fragments.append(Literal("".join(literal)))
            literal.clear()

    while pos < length:
        char = format[pos]
        if char == "{":
            if format.startswith("{{", pos):
                literal.append("{")
                pos += 2
                continue
            end = format.find("}", pos + 1)
            if end == -1:
                raise ValueError("unclosed `{` in format string")
            content = format[pos + 1 : end]
            if "{" in content:
                raise ValueError("nested `{` in format string")
            param, implicit = _parse_param(content, implicit_index)
            if implicit:
                implicit_index += 1
            flush()
            fragments.append(param)
            pos = end + 1
        elif char == "}":
            if format.startswith("}}", pos):
                literal.append("}")
                pos += 2
                continue
            raise ValueError("unmatched `}` in format string")
        else:
            literal.append(char)
            pos += 1
    flush()

    _check_params([f for f in fragments if isinstance(f, Parameter)])
    return fragments


def max_bitfield_range(params: Iterable[Parameter]) -> tuple[int, int] | None:
    """Smallest start and largest end over the bitfield parameters, or None."""
    ranges = [p.ty.bits for p in params if p.ty.kind is TypeKind.BIT_FIELD and p.ty.bits]
    if not ranges:
        return None
    return min(r.start for r in ranges), max(r.stop for r in ranges)


def merge_bitfields(params: Iterable[Parameter]) -> list[Parameter]:
    """Merge bitfields sharing an index into one covering range.

    Non-bitfield parameters keep their order; merged bitfields follow, by index.
    """
    params = list(params)
    bitfield_indices = sorted(
        {p.index for p in params if p.ty.kind is TypeKind.BIT_FIELD}
    )
    merged = []
    for index in bitfield_indices:
        group = [
            p for p in params if p.ty.kind is TypeKind.BIT_FIELD and p.index == index
        ]
        bounds = max_bitfield_range(group)
        assert bounds is not None
        start, end = bounds
        merged.append(
            Parameter(index, ParamType(TypeKind.BIT_FIELD, bits=range(start, end)))
        )
    rest = [p for p in params if p.ty.kind is not TypeKind.BIT_FIELD]
    return rest + merged