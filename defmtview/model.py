"""Table tags and the decoded argument values of a log frame."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Union

from .params import Level

__all__ = [
    "Tag",
    "BoolCell",
    "BoolArg",
    "F32Arg",
    "F64Arg",
    "UintArg",
    "IntArg",
    "StrArg",
    "IStrArg",
    "FormatArg",
    "FormatSliceElement",
    "FormatSliceArg",
    "SliceArg",
    "CharArg",
    "PreformattedArg",
    "Arg",
]


class Tag(Enum):
    """Origin of a format string in the table."""

    PRIM = "prim"
    DERIVED = "derived"
    WRITE = "write"
    STR = "str"
    TIMESTAMP = "timestamp"
    TRACE = "trace"
    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"

    def level(self) -> Level | None:
        """The log level for log-statement tags, else None."""
        return _TAG_LEVELS.get(self)


_TAG_LEVELS = {
    Tag.TRACE: Level.TRACE,
    Tag.DEBUG: Level.DEBUG,
    Tag.INFO: Level.INFO,
    Tag.WARN: Level.WARN,
    Tag.ERROR: Level.ERROR,
}


@dataclass(eq=True)
class BoolCell:
    """A boolean filled in after the packed flag byte has been read."""

    value: bool = False

    def set(self, value: bool) -> None:
        self.value = bool(value)

    def __str__(self) -> str:
        return "true" if self.value else "false"


@dataclass(frozen=True)
class BoolArg:
    cell: BoolCell = field(default_factory=BoolCell)

    @property
    def value(self) -> bool:
        return self.cell.value


@dataclass(frozen=True)
class F32Arg:
    value: float


@dataclass(frozen=True)
class F64Arg:
    value: float


@dataclass(frozen=True)
class UintArg:
    value: int


@dataclass(frozen=True)
class IntArg:
    value: int


@dataclass(frozen=True)
class StrArg:
    value: str


@dataclass(frozen=True)
class IStrArg:
    """An interned string looked up in the table."""

    value: str


@dataclass(frozen=True)
class FormatArg:
    """A nested value with its own format string."""

    format: str
    args: tuple = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "args", tuple(self.args))


@dataclass(frozen=True)
class FormatSliceElement:
    """One element of a format slice; ``format`` is the variant for enums."""

    format: str
    args: tuple = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "args", tuple(self.args))


@dataclass(frozen=True)
class FormatSliceArg:
    elements: tuple = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "elements", tuple(self.elements))


@dataclass(frozen=True)
class SliceArg:
    """A slice or array of bytes."""

    data: bytes = b""

    def __post_init__(self) -> None:
        object.__setattr__(self, "data", bytes(self.data))


@dataclass(frozen=True)
class CharArg:
    value: str


@dataclass(frozen=True)
class PreformattedArg:
    """Text already formatted on the target."""

    value: str


Arg = Union[
    BoolArg,
    F32Arg,
    F64Arg,
    UintArg,
    IntArg,
    StrArg,
    IStrArg,
    FormatArg,
    FormatSliceArg,
    SliceArg,
    CharArg,
    PreformattedArg,
]