"""Tests for the display codec and the total arithmetic helpers."""

import math

import pytest

from scicalc import numeric
from scicalc.numeric import format_number, parse_number


@pytest.mark.parametrize(
    "value, expected",
    [
        (20.0, "20"),
        (-2.5, "-2.5"),
        (123.5, "123.5"),
        (0.1 + 0.2, "0.30000000000000004"),
        (math.pi, "3.141592653589793"),
        (1e16, "10000000000000000"),
        (1e21, "1e+21"),
        (1.5e-7, "1.5e-7"),
        (0.000001, "0.000001"),
        (-0.0, "0"),
        (math.nan, "NaN"),
        (math.inf, "Infinity"),
        (-math.inf, "-Infinity"),
    ],
)
def test_format_number(value, expected):
    assert format_number(value) == expected


def test_parse_number_reads_leading_prefix():
    assert parse_number("0.") == 0.0
    assert parse_number("123.5") == 123.5
    assert parse_number("-7") == -7.0
    assert parse_number("12abc") == 12.0
    assert parse_number("1e3") == 1000.0
    assert parse_number("Infinity") == math.inf
    assert parse_number("-Infinity") == -math.inf


def test_parse_number_without_digits_is_nan():
    for text in ["", "-", "Na", "NaN", "abc"]:
        assert math.isnan(parse_number(text)), text


def test_divide_by_zero_returns_zero():
    # Known oddity kept on purpose: x ÷ 0 shows 0.
    assert numeric.divide(5, 0) == 0
    assert numeric.divide(-5, -0.0) == 0
    assert numeric.divide(0, 0) == 0
    assert numeric.divide(9, 3) == 3


def test_power_follows_ieee_pow():
    assert numeric.power(2, 10) == 1024
    assert numeric.power(4, 0.5) == 2
    assert numeric.power(2, -1) == 0.5
    assert math.isnan(numeric.power(-8, 1 / 3))
    assert numeric.power(10, 400) == math.inf
    assert numeric.power(-10, 401) == -math.inf
    assert numeric.power(0, -1) == math.inf
    assert numeric.power(math.nan, 0) == 1
    assert math.isnan(numeric.power(1, math.nan))
    assert math.isnan(numeric.power(-1, math.inf))


def test_remainder_sign_follows_dividend():
    assert numeric.remainder(7, 3) == 1
    assert numeric.remainder(-7, 3) == -1
    assert numeric.remainder(7, -3) == 1
    assert numeric.remainder(5.5, 2) == 1.5
    assert math.isnan(numeric.remainder(1, 0))
    assert math.isnan(numeric.remainder(math.inf, 2))


def test_unary_degenerate_results_do_not_raise():
    assert numeric.log10(0) == -math.inf
    assert math.isnan(numeric.log10(-1))
    assert numeric.ln(1) == 0
    assert math.isnan(numeric.ln(-1))
    assert math.isnan(numeric.sqrt(-4))
    assert numeric.reciprocal(0) == math.inf
    assert numeric.reciprocal(-0.0) == -math.inf
    assert math.isnan(numeric.sin(math.inf))
    assert math.isnan(numeric.tan(-math.inf))
    assert numeric.square(1e200) == math.inf


def test_factorial():
    assert numeric.factorial(5) == 120
    assert numeric.factorial(-3) == 0
    assert numeric.factorial(0) == 1
    assert numeric.factorial(1) == 1
    assert numeric.factorial(5.9) == 120
    assert math.isfinite(numeric.factorial(170))
    assert numeric.factorial(171) == math.inf
    assert numeric.factorial(math.inf) == math.inf
    assert math.isnan(numeric.factorial(math.nan))


def test_power_accepts_int_arguments():
    assert numeric.power(-10, 401) == -math.inf
    assert numeric.power(10, 401) == math.inf
    assert numeric.power(0, -3) == math.inf
    assert numeric.power(-0.0, -3) == -math.inf
    assert numeric.power(0, -2) == math.inf
