"""
=============================================================================
MODULE NAME: numeric.py
=============================================================================

INPUT FILES:
- None (pure functions over floats and display strings).

OUTPUT FILES:
- None.

NOTES:
- Every function here is total: domain errors come back as NaN, overflow as
  +/-Infinity. Python's math module raises in many of these cases
  (math.sqrt(-1), math.log10(0), math.pow overflow, 1 / 0.0), so each helper
  maps the exception cases onto IEEE-754 results before calling into math.
- format_number / parse_number define the display codec: numbers are shown
  the way a browser stringifies them ("20", "0.1", "1e+21", "NaN").
=============================================================================
"""

from __future__ import annotations

import math
import re
from decimal import Decimal
from typing import Tuple

NAN = math.nan
INF = math.inf

# Longest leading numeric prefix, the same prefix a browser's parseFloat reads.
_NUMERIC_PREFIX = re.compile(
    r"^[ \t\n\r]*([+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?))"
)

# Decimal exponents rendered without scientific notation.
_PLAIN_MAX_EXPONENT = 21
_PLAIN_MIN_EXPONENT = -6


def parse_number(text: str) -> float:
    """Parse the leading number in ``text``; NaN when there is none."""
    match = _NUMERIC_PREFIX.match(text or "")
    if not match:
        return NAN
    return float(match.group(1))


def _shortest_digits(value: float) -> Tuple[str, int]:
    """Return (digits, exponent) with value == int(digits) * 10**exponent."""
    _, digit_tuple, exponent = Decimal(repr(value)).as_tuple()
    digits = "".join(str(d) for d in digit_tuple)
    stripped = digits.rstrip("0")
    exponent += len(digits) - len(stripped)
    return stripped, exponent


def format_number(value: float) -> str:
    """Render a float for the display.

    Integers have no fractional part, -0 renders as "0", and the shortest
    round-tripping digits are used. Magnitudes of 1e21 and above or below
    1e-6 switch to exponent form (``1e+21``, ``1.5e-7``).
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == 0:
        return "0"

    sign = "-" if value < 0 else ""
    digits, exponent = _shortest_digits(abs(value))
    k = len(digits)
    point = k + exponent

    if k <= point <= _PLAIN_MAX_EXPONENT:
        body = digits + "0" * (point - k)
    elif 0 < point <= _PLAIN_MAX_EXPONENT:
        body = f"{digits[:point]}.{digits[point:]}"
    elif _PLAIN_MIN_EXPONENT < point <= 0:
        body = "0." + "0" * (-point) + digits
    else:
        power = point - 1
        mantissa = digits[0] if k == 1 else f"{digits[0]}.{digits[1:]}"
        body = f"{mantissa}e{'+' if power >= 0 else '-'}{abs(power)}"
    return sign + body


def _is_odd_integer(value: float) -> bool:
    value = float(value)
    return math.isfinite(value) and value.is_integer() and value % 2 == 1


# ---------------------------------------------------------------------------
# Binary operations
# ---------------------------------------------------------------------------


def add(a: float, b: float) -> float:
    return a + b


def subtract(a: float, b: float) -> float:
    return a - b


def multiply(a: float, b: float) -> float:
    return a * b


def divide(a: float, b: float) -> float:
    """Divide ``a`` by ``b``; a zero divisor yields 0 instead of Infinity."""
    if b == 0:
        return 0.0
    return a / b


def power(base: float, exponent: float) -> float:
    """IEEE-754 ``pow``: NaN on domain errors, signed Infinity on overflow."""
    if math.isnan(exponent):
        return NAN
    if exponent == 0:
        return 1.0
    if math.isinf(exponent) and abs(base) == 1:
        return NAN
    if base == 0 and exponent < 0:
        return math.copysign(INF, base) if _is_odd_integer(exponent) else INF
    try:
        return math.pow(base, exponent)
    except ValueError:
        return NAN
    except OverflowError:
        if base < 0 and _is_odd_integer(exponent):
            return -INF
        return INF


def remainder(a: float, b: float) -> float:
    """Truncated remainder; the sign follows the dividend."""
    if b == 0 or math.isnan(a) or math.isnan(b) or math.isinf(a):
        return NAN
    return math.fmod(a, b)


# ---------------------------------------------------------------------------
# Unary operations
# ---------------------------------------------------------------------------


def to_radians(degrees: float) -> float:
    return (degrees * math.pi) / 180


def sin(x: float) -> float:
    return NAN if math.isinf(x) else math.sin(x)


def cos(x: float) -> float:
    return NAN if math.isinf(x) else math.cos(x)


def tan(x: float) -> float:
    return NAN if math.isinf(x) else math.tan(x)


def log10(x: float) -> float:
    if math.isnan(x) or x < 0:
        return NAN
    if x == 0:
        return -INF
    return math.log10(x)


def ln(x: float) -> float:
    if math.isnan(x) or x < 0:
        return NAN
    if x == 0:
        return -INF
    return math.log(x)


def sqrt(x: float) -> float:
    # -0.0 passes through: math.sqrt(-0.0) == -0.0
    if x < 0:
        return NAN
    return math.sqrt(x)


def square(x: float) -> float:
    return x * x


def cube(x: float) -> float:
    return x * x * x


def reciprocal(x: float) -> float:
    if x == 0:
        return math.copysign(INF, x)
    return 1 / x


def floor(x: float) -> float:
    """math.floor that passes NaN and Infinity through instead of raising."""
    if not math.isfinite(x):
        return x
    return float(math.floor(x))


# 171! no longer fits in a double.
_FACTORIAL_LIMIT = 170


def factorial(x: float) -> float:
    """Factorial of ``floor(x)``: 0 for negatives, Infinity past 170!."""
    n = floor(x)
    if math.isnan(n):
        return NAN
    if n < 0:
        return 0.0
    if n > _FACTORIAL_LIMIT:
        return INF
    result = 1.0
    for i in range(2, int(n) + 1):
        result *= i
    return result
