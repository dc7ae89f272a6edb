import pytest

from defmtview.params import (
    DisplayHint,
    HintKind,
    Literal,
    Parameter,
    ParamType,
    TypeKind,
    max_bitfield_range,
    merge_bitfields,
    parse_format,
)


def bitfield(index, start, end):
    return Parameter(index, ParamType(TypeKind.BIT_FIELD, bits=range(start, end)))


def test_merge_bitfields_simple():
    params = [bitfield(0, 0, 3), bitfield(0, 4, 7)]
    assert merge_bitfields(params) == [bitfield(0, 0, 7)]


def test_merge_bitfields_overlap():
    params = [bitfield(0, 1, 3), bitfield(0, 2, 5)]
    assert merge_bitfields(params) == [bitfield(0, 1, 5)]


def test_merge_bitfields_multiple_indices():
    params = [bitfield(0, 0, 3), bitfield(1, 1, 3), bitfield(1, 4, 5)]
    assert merge_bitfields(params) == [bitfield(0, 0, 3), bitfield(1, 1, 5)]


def test_merge_bitfields_overlap_non_consecutive_indices():
    u8 = Parameter(1, ParamType(TypeKind.U8))
    params = [bitfield(0, 0, 3), u8, bitfield(2, 1, 4), bitfield(2, 4, 5)]
    assert merge_bitfields(params) == [u8, bitfield(0, 0, 3), bitfield(2, 1, 5)]


def test_merge_bitfields_empty():
    assert merge_bitfields([]) == []


def test_max_bitfield_range():
    assert max_bitfield_range([bitfield(0, 3, 8), bitfield(0, 0, 4)]) == (0, 8)
    assert max_bitfield_range([Parameter(0, ParamType(TypeKind.U8))]) is None


def test_parse_simple_parameter():
    assert parse_format("The answer is {=u8}!") == [
        Literal("The answer is "),
        Parameter(0, ParamType(TypeKind.U8)),
        Literal("!"),
    ]


def test_parse_escaped_braces():
    assert parse_format("Foo {{ x: {=u8} }}") == [
        Literal("Foo { x: "),
        Parameter(0, ParamType(TypeKind.U8)),
        Literal(" }"),
    ]


def test_parse_no_parameters():
    assert parse_format("Hello, world!") == [Literal("Hello, world!")]


def test_parse_explicit_indices():
    params = [
        f for f in parse_format("The answer is {1=u16} {0=u8} {1=u16}!")
        if isinstance(f, Parameter)
    ]
    assert [p.index for p in params] == [1, 0, 1]
    assert params[0].ty == ParamType(TypeKind.U16)


def test_parse_implicit_indices_increase():
    params = [f for f in parse_format("{=u8} {=u16} {=bool}") if isinstance(f, Parameter)]
    assert [p.index for p in params] == [0, 1, 2]


def test_parse_format_type_and_hints():
    frags = parse_format("{} {:x} {=?} {:?}")
    params = [f for f in frags if isinstance(f, Parameter)]
    assert all(p.ty.kind is TypeKind.FORMAT for p in params)
    assert params[1].hint == DisplayHint(HintKind.HEXADECIMAL)
    assert params[3].hint == DisplayHint(HintKind.DEBUG)


@pytest.mark.parametrize(
    "text, hint",
    [
        ("{=u8:x}", DisplayHint(HintKind.HEXADECIMAL, uppercase=False)),
        ("{=u8:X}", DisplayHint(HintKind.HEXADECIMAL, uppercase=True)),
        ("{=u8:b}", DisplayHint(HintKind.BINARY)),
        ("{=u8:a}", DisplayHint(HintKind.ASCII)),
        ("{=u8:µs}", DisplayHint(HintKind.MICROSECONDS)),
        ("{=u8:zz}", None),
    ],
)
def test_parse_hints(text, hint):
    (param,) = parse_format(text)
    assert param.hint == hint


def test_parse_bitfield():
    frags = parse_format("x: {0=0..4:b}, y: {0=3..8:b}")
    params = [f for f in frags if isinstance(f, Parameter)]
    assert params[0] == Parameter(
        0, ParamType(TypeKind.BIT_FIELD, bits=range(0, 4)), DisplayHint(HintKind.BINARY)
    )
    assert params[1].ty.bits == range(3, 8)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("{=[u8]}", ParamType(TypeKind.U8_SLICE)),
        ("{=[u8; 3]}", ParamType(TypeKind.U8_ARRAY, length=3)),
        ("{=[?]}", ParamType(TypeKind.FORMAT_SLICE)),
        ("{=[?;4]}", ParamType(TypeKind.FORMAT_ARRAY, length=4)),
        ("{=istr}", ParamType(TypeKind.ISTR)),
        ("{=str}", ParamType(TypeKind.STR)),
        ("{=char}", ParamType(TypeKind.CHAR)),
        ("{=u24}", ParamType(TypeKind.U24)),
        ("{=isize}", ParamType(TypeKind.ISIZE)),
        ("{=f64}", ParamType(TypeKind.F64)),
    ],
)
def test_parse_types(text, expected):
    (param,) = parse_format(text)
    assert param.ty == expected


@pytest.mark.parametrize(
    "text",
    ["{=u8", "oops }", "{=foo}", "{=4..2}", "{=0..129}", "{1=u8}", "{0=u8} {0=u16}", "{=}"],
)
def test_parse_errors(text):
    with pytest.raises(ValueError):
        parse_format(text)