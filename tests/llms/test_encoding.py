from __future__ import annotations

import pytest

from polygate.llms.encoding import encode_control_value


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("true", True),
        ("false", False),
        ("  true ", True),
        ("42", 42),
        ("-7", -7),
        ("+5", 5),
        ("3.5", 3.5),
        (".5", 0.5),
        ("5.", 5.0),
        ("1e3", 1000.0),
        ("-2.5E-2", -0.025),
        ("high", "high"),
        ("  medium  ", "medium"),
    ],
)
def test_encode_control_value_examples(raw, expected):
    value = encode_control_value(raw)
    assert value == expected
    assert type(value) is type(expected)


@pytest.mark.parametrize("raw", ["True", "FALSE", "nan", "NaN", "inf", "-Infinity", "1_000", "0x10", ""])
def test_encode_control_value_falls_back_to_trimmed_string(raw):
    assert encode_control_value(f" {raw} ") == raw


def test_encode_control_value_overflowing_float_stays_string():
    assert encode_control_value("1e999") == "1e999"


def test_encode_control_value_integer_outside_i64_becomes_float():
    assert encode_control_value("9223372036854775807") == 9223372036854775807
    value = encode_control_value("9223372036854775808")
    assert isinstance(value, float)
    assert value == pytest.approx(9.223372036854775808e18)


def test_encode_control_value_is_deterministic():
    assert encode_control_value("0.1") == encode_control_value("0.1")
