"""Tests for sheetmap.coerce — cell value normalisation and field converters."""
import datetime as dt
from decimal import Decimal
from typing import Optional, Union

import pytest

from sheetmap.coerce import (
    converter_for,
    is_blank,
    passthrough,
    to_bool,
    to_date,
    to_datetime,
    to_float,
    to_generic,
    to_int,
    to_str,
    to_text,
    to_time,
)


def test_is_blank():
    assert is_blank(None)
    assert is_blank("")
    assert is_blank("   ")
    assert not is_blank(0)
    assert not is_blank(False)
    assert not is_blank("x")


def test_to_generic_keeps_semantic_types():
    d = dt.date(2024, 1, 31)
    assert to_generic(3) == 3
    assert to_generic(2.5) == 2.5
    assert to_generic(True) is True
    assert to_generic("abc") == "abc"
    assert to_generic(d) is d
    assert to_generic(Decimal("1.25")) == 1.25
    assert to_generic(None) is None


def test_to_generic_keeps_empty_and_whitespace_text():
    assert to_generic("") == ""
    assert to_generic("  ") == "  "
    assert to_str("") == ""
    assert to_text("  ") == "  "


def test_non_text_converters_read_blank_text_as_empty():
    assert to_int("") is None
    assert to_float("  ") is None
    assert to_bool("") is None
    assert to_date(" ") is None


def test_to_int_variants():
    assert to_int(30) == 30
    assert to_int(30.0) == 30
    assert to_int("30") == 30
    assert to_int(" 30.0 ") == 30
    assert to_int(None) is None
    with pytest.raises(ValueError):
        to_int(30.5)
    with pytest.raises(ValueError):
        to_int("thirty")
    with pytest.raises(TypeError):
        to_int(dt.date(2024, 1, 1))


def test_to_float_and_str():
    assert to_float("1.5") == 1.5
    assert to_float(2) == 2.0
    assert to_str(30.0) == "30"
    assert to_str(30.5) == "30.5"
    assert to_str(dt.date(2024, 2, 1)) == "2024-02-01"
    assert to_str(None) is None
    assert to_text(None) == ""


def test_to_bool():
    assert to_bool(True) is True
    assert to_bool("yes") is True
    assert to_bool("FALSE") is False
    assert to_bool(1) is True
    assert to_bool(0.0) is False
    with pytest.raises(ValueError):
        to_bool("maybe")
    with pytest.raises(ValueError):
        to_bool(2)


def test_date_and_time_converters():
    stamp = dt.datetime(2024, 3, 4, 5, 6, 7)
    assert to_date(stamp) == dt.date(2024, 3, 4)
    assert to_date("2024-03-04") == dt.date(2024, 3, 4)
    assert to_datetime(dt.date(2024, 3, 4)) == dt.datetime(2024, 3, 4)
    assert to_datetime("2024-03-04T05:06:07") == stamp
    assert to_time(stamp) == dt.time(5, 6, 7)
    assert to_time("05:06") == dt.time(5, 6)
    with pytest.raises(ValueError):
        to_date("not a date")


def test_converter_for_annotations():
    assert converter_for(int) is to_int
    assert converter_for(str) is to_text
    assert converter_for(Optional[str]) is to_str
    assert converter_for(Optional[int]) is to_int
    assert converter_for(dt.date) is to_date
    assert converter_for(Union[int, str]) is passthrough
    assert converter_for(list) is passthrough
