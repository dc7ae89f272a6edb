import json

import pytest

from defmtview.model import Tag
from defmtview.symbol import Symbol


def mangle(tag, data="Hello {=u8}", **extra):
    obj = {"package": "app", "disambiguator": "1234", "tag": tag, "data": data}
    obj.update(extra)
    return json.dumps(obj)


def test_demangle_fields():
    sym = Symbol.demangle(mangle("defmt_info", "The answer is {=u8}!"))
    assert sym == Symbol("app", "1234", "defmt_info", "The answer is {=u8}!")
    assert sym.data == "The answer is {=u8}!"


@pytest.mark.parametrize(
    "tag, expected",
    [
        ("defmt_prim", Tag.PRIM),
        ("defmt_derived", Tag.DERIVED),
        ("defmt_write", Tag.WRITE),
        ("defmt_timestamp", Tag.TIMESTAMP),
        ("defmt_str", Tag.STR),
        ("defmt_trace", Tag.TRACE),
        ("defmt_debug", Tag.DEBUG),
        ("defmt_info", Tag.INFO),
        ("defmt_warn", Tag.WARN),
        ("defmt_error", Tag.ERROR),
    ],
)
def test_known_tags(tag, expected):
    assert Symbol.demangle(mangle(tag)).defmt_tag() is expected


def test_custom_tag():
    sym = Symbol.demangle(mangle("mytool_marker"))
    assert sym.defmt_tag() is None
    assert sym.tag == "mytool_marker"


def test_unknown_fields_are_ignored():
    sym = Symbol.demangle(mangle("defmt_warn", extra_field="x"))
    assert sym.defmt_tag() is Tag.WARN


def test_missing_field():
    with pytest.raises(ValueError):
        Symbol.demangle(json.dumps({"package": "app", "tag": "defmt_info", "data": ""}))


def test_wrong_field_type():
    with pytest.raises(ValueError):
        Symbol.demangle(mangle("defmt_info", data=5))


@pytest.mark.parametrize("raw", ["not json", "[1, 2]", "_defmt_version_ = 0.2"])
def test_invalid_symbol(raw):
    with pytest.raises(ValueError):
        Symbol.demangle(raw)