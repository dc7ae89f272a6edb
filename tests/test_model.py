import pytest

from defmtview.model import (
    BoolArg,
    BoolCell,
    FormatArg,
    FormatSliceArg,
    FormatSliceElement,
    IntArg,
    SliceArg,
    Tag,
    UintArg,
)
from defmtview.params import Level


@pytest.mark.parametrize(
    "tag, level",
    [
        (Tag.TRACE, Level.TRACE),
        (Tag.DEBUG, Level.DEBUG),
        (Tag.INFO, Level.INFO),
        (Tag.WARN, Level.WARN),
        (Tag.ERROR, Level.ERROR),
    ],
)
def test_log_tags_have_level(tag, level):
    assert tag.level() is level


@pytest.mark.parametrize(
    "tag", [Tag.PRIM, Tag.DERIVED, Tag.WRITE, Tag.STR, Tag.TIMESTAMP]
)
def test_other_tags_have_no_level(tag):
    assert tag.level() is None


def test_bool_cell_starts_false_and_sets():
    cell = BoolCell()
    assert str(cell) == "false"
    cell.set(True)
    assert str(cell) == "true"
    assert cell.value is True


def test_bool_cell_equality_by_value():
    a, b = BoolCell(), BoolCell()
    assert a == b
    a.set(True)
    assert a != b
    b.set(True)
    assert a == b


def test_bool_arg_sees_later_set():
    cell = BoolCell()
    arg = BoolArg(cell)
    assert arg.value is False
    cell.set(True)
    assert arg.value is True
    assert arg == BoolArg(BoolCell(True))


def test_format_arg_normalises_args():
    arg = FormatArg("Foo {{ x: {=u8} }}", [UintArg(42)])
    assert arg.args == (UintArg(42),)
    assert arg == FormatArg("Foo {{ x: {=u8} }}", (UintArg(42),))


def test_format_slice_normalises_elements():
    element = FormatSliceElement("{=u8}", [UintArg(1)])
    arg = FormatSliceArg([element])
    assert arg.elements == (element,)


def test_slice_arg_converts_to_bytes():
    assert SliceArg([23, 42]).data == bytes([23, 42])


def test_uint_and_int_differ():
    assert UintArg(1) != IntArg(1)
    assert IntArg(-1) == IntArg(-1)