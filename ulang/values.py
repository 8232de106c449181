"""Helpers for ulang's single value type, the 64-bit float.

Every runtime value is a Python `float`. This module holds the rules for
turning values into text for `print`, parsing text read by `input`, and
the power operator.
"""

from __future__ import annotations

import math
import re

# Integral values below this magnitude print as plain integers; larger ones
# fall through to repr(), which already omits the '.0' (e.g. '1e+16').
_INTEGRAL_LIMIT = 1e16

_NUMBER_TEXT = re.compile(r'[+-]?(?:(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf|infinity|nan)', re.IGNORECASE)


def format_number(value: float) -> str:
    """Render a value the way `print` shows it.

    Integral values drop the fractional part (`4`, not `4.0`); everything
    else uses the shortest representation that round-trips.
    """
    if math.isfinite(value) and value.is_integer() and abs(value) < _INTEGRAL_LIMIT:
        return str(int(value))
    return repr(value)


def parse_number(text: str) -> float:
    """Parse one line of user input as a number.

    Surrounding whitespace is ignored. Raises ValueError if the remaining
    text is not a decimal number (optionally signed, with exponent) or one
    of inf/infinity/nan.
    """
    stripped = text.strip()
    if not _NUMBER_TEXT.fullmatch(stripped):
        raise ValueError(f"cannot parse number from {text!r}")
    return float(stripped)


def power(base: float, exponent: float) -> float:
    """Raise `base` to `exponent` without leaving the float domain.

    A result with no real value (negative base, fractional exponent) is
    nan; overflow gives an infinity carrying the sign of the exact result.
    """
    try:
        return math.pow(base, exponent)
    except ValueError:
        return math.nan
    except OverflowError:
        if base < 0 and exponent.is_integer() and int(exponent) % 2 == 1:
            return -math.inf
        return math.inf
