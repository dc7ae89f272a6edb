"""Symbols in the ``.defmt`` section, whose names are JSON objects."""

from __future__ import annotations

import json
from dataclasses import dataclass

from .model import Tag

__all__ = ["Symbol"]

_TAGS = {
    "defmt_prim": Tag.PRIM,
    "defmt_derived": Tag.DERIVED,
    "defmt_write": Tag.WRITE,
    "defmt_timestamp": Tag.TIMESTAMP,
    "defmt_str": Tag.STR,
    "defmt_trace": Tag.TRACE,
    "defmt_debug": Tag.DEBUG,
    "defmt_info": Tag.INFO,
    "defmt_warn": Tag.WARN,
    "defmt_error": Tag.ERROR,
}

_FIELDS = ("package", "disambiguator", "tag", "data")


@dataclass(frozen=True)
class Symbol:
    """A demangled symbol.

    ``package`` and ``disambiguator`` keep names unique, ``tag`` categorises the
    symbol and ``data`` holds the payload (usually a format string).
    """

    package: str
    disambiguator: str
    tag: str
    data: str

    @classmethod
    def demangle(cls, raw: str) -> Symbol:
        """Parse a JSON symbol name; raises ``ValueError`` if it is not a valid symbol."""
        obj = json.loads(raw)
        if not isinstance(obj, dict):
            raise ValueError("symbol is not a JSON object")
        values = {}
        for name in _FIELDS:
            if name not in obj:
                raise ValueError(f"missing field `{name}`")
            if not isinstance(obj[name], str):
                raise ValueError(f"field `{name}` is not a string")
            values[name] = obj[name]
        return cls(**values)

    def defmt_tag(self) -> Tag | None:
        """The table tag for ``defmt_*`` tags, or None for a custom tag."""
        return _TAGS.get(self.tag)