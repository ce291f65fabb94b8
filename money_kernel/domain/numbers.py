"""
Numbers -- exact rational and fixed-scale decimal arithmetic helpers.

Responsibility:
    Bridges the three number representations the kernel works with:
    ``int`` (unscaled values), ``Fraction`` (exact intermediate results)
    and ``Decimal`` (fixed-scale amounts, scale = digits after the point).
    Every scale reduction in the kernel goes through ``rational_to_scale``
    or ``rational_to_exact_decimal``.

Invariants enforced:
    - No floats: ``to_rational`` rejects ``float`` (and ``bool``).
    - No silent rounding: ``RoundingMode.UNNECESSARY`` raises
      ``RoundingNecessaryError`` whenever digits would be discarded.
    - Decimals produced here always have a non-negative scale.

Failure modes:
    - NumberFormatError on malformed, NaN or infinite input.
    - RoundingNecessaryError when an exact result is required but the
      value does not terminate at the requested scale.
"""

from __future__ import annotations

import decimal
import re
from decimal import Decimal, InvalidOperation
from enum import Enum
from fractions import Fraction

from money_kernel.exceptions import NumberFormatError, RoundingNecessaryError

NumberLike = int | str | Decimal | Fraction


class RoundingMode(str, Enum):
    """
    Rounding modes for scale reduction.

    Values mirror the ``decimal`` module constants where one exists, so
    ``RoundingMode(decimal.ROUND_HALF_UP)`` is ``RoundingMode.HALF_UP``.
    """

    UNNECESSARY = "UNNECESSARY"
    UP = decimal.ROUND_UP
    DOWN = decimal.ROUND_DOWN
    CEILING = decimal.ROUND_CEILING
    FLOOR = decimal.ROUND_FLOOR
    HALF_UP = decimal.ROUND_HALF_UP
    HALF_DOWN = decimal.ROUND_HALF_DOWN
    HALF_EVEN = decimal.ROUND_HALF_EVEN
    HALF_CEILING = "HALF_CEILING"
    HALF_FLOOR = "HALF_FLOOR"

    @classmethod
    def _missing_(cls, value: object) -> RoundingMode | None:
        # Also accept member names, e.g. "HALF_UP" from YAML configuration
        if isinstance(value, str):
            return cls.__members__.get(value.strip().upper())
        return None


_FRACTION_PATTERN = re.compile(r"^\s*([+-]?\d+)\s*/\s*(\d+)\s*$")


def to_rational(value: NumberLike) -> Fraction:
    """
    Convert a number-like value to an exact Fraction.

    Accepts ``int``, ``Decimal``, ``Fraction`` and strings in decimal
    (``"1.25"``, ``"-3e2"``) or fraction (``"123/456"``) notation.

    Raises:
        TypeError: For ``float``, ``bool`` or any other type.
        NumberFormatError: For malformed, NaN or infinite values, or a zero
            fraction denominator.
    """
    if isinstance(value, Fraction):
        return value
    if isinstance(value, bool) or isinstance(value, float):
        raise TypeError(
            f"Refusing to build an exact amount from {type(value).__name__} "
            f"{value!r}; pass a str, int or Decimal instead"
        )
    if isinstance(value, int):
        return Fraction(value)
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise NumberFormatError(value)
        return Fraction(value)
    if isinstance(value, str):
        match = _FRACTION_PATTERN.match(value)
        if match:
            denominator = int(match.group(2))
            if denominator == 0:
                raise NumberFormatError(value)
            return Fraction(int(match.group(1)), denominator)
        try:
            parsed = Decimal(value.strip())
        except InvalidOperation as e:
            raise NumberFormatError(value) from e
        if not parsed.is_finite():
            raise NumberFormatError(value)
        return Fraction(parsed)
    raise TypeError(f"Unsupported number type: {type(value).__name__}")


def decimal_scale(value: Decimal) -> int:
    """
    Number of digits after the decimal point (never negative).

    Raises:
        NumberFormatError: For NaN or an infinity.
    """
    exponent = value.as_tuple().exponent
    if not isinstance(exponent, int):
        raise NumberFormatError(value)
    return max(0, -exponent)


def decimal_from_unscaled(unscaled: int, scale: int) -> Decimal:
    """Build ``unscaled * 10**-scale`` exactly, independent of context precision."""
    sign = 1 if unscaled < 0 else 0
    digits = tuple(int(c) for c in str(abs(unscaled)))
    return Decimal((sign, digits, -scale))


def unscaled_value(value: Decimal) -> int:
    """The integer holding all digits of ``value`` at its own scale."""
    scale = decimal_scale(value)
    # a finite Decimal times 10**scale is always integral
    return int(Fraction(value) * 10**scale)


def to_decimal(value: NumberLike) -> Decimal:
    """Exact Decimal at the value's own minimal-or-given scale."""
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise NumberFormatError(value)
        if value.as_tuple().exponent > 0:
            return decimal_from_unscaled(unscaled_value(value), 0)
        return value
    return rational_to_exact_decimal(to_rational(value))


def _round_quotient(numerator: int, denominator: int, rounding_mode: RoundingMode) -> int:
    """Divide two integers (positive denominator), rounding the quotient."""
    q, r = divmod(numerator, denominator)
    if r == 0:
        return q

    # q is the floor, q + 1 the ceiling
    positive = numerator > 0

    if rounding_mode is RoundingMode.UNNECESSARY:
        raise RoundingNecessaryError()
    if rounding_mode is RoundingMode.FLOOR:
        return q
    if rounding_mode is RoundingMode.CEILING:
        return q + 1
    if rounding_mode is RoundingMode.DOWN:
        return q if positive else q + 1
    if rounding_mode is RoundingMode.UP:
        return q + 1 if positive else q

    twice = 2 * r
    if twice < denominator:
        return q
    if twice > denominator:
        return q + 1

    # Exactly half-way
    if rounding_mode is RoundingMode.HALF_UP:
        return q + 1 if positive else q
    if rounding_mode is RoundingMode.HALF_DOWN:
        return q if positive else q + 1
    if rounding_mode is RoundingMode.HALF_EVEN:
        return q if q % 2 == 0 else q + 1
    if rounding_mode is RoundingMode.HALF_CEILING:
        return q + 1
    if rounding_mode is RoundingMode.HALF_FLOOR:
        return q
    raise ValueError(f"Unsupported rounding mode: {rounding_mode!r}")


def rational_to_scale(
    value: Fraction,
    scale: int,
    rounding_mode: RoundingMode | str = RoundingMode.UNNECESSARY,
) -> Decimal:
    """
    Convert an exact Fraction to a Decimal with exactly ``scale`` digits.

    Raises:
        RoundingNecessaryError: If ``rounding_mode`` is UNNECESSARY and the
            value is not representable at ``scale``.
    """
    mode = RoundingMode(rounding_mode)
    unscaled = _round_quotient(value.numerator * 10**scale, value.denominator, mode)
    return decimal_from_unscaled(unscaled, scale)


def rational_to_exact_decimal(value: Fraction) -> Decimal:
    """
    Convert a Fraction to the minimal-scale Decimal that represents it exactly.

    Raises:
        RoundingNecessaryError: If the fraction does not terminate in base 10
            (its reduced denominator has a prime factor other than 2 or 5).
    """
    denominator = value.denominator
    twos = fives = 0
    while denominator % 2 == 0:
        denominator //= 2
        twos += 1
    while denominator % 5 == 0:
        denominator //= 5
        fives += 1
    if denominator != 1:
        raise RoundingNecessaryError(
            f"{format_rational(value)} has a non-terminating decimal expansion."
        )
    return rational_to_scale(value, max(twos, fives))


def strip_trailing_zeros(value: Decimal) -> Decimal:
    """Remove fractional trailing zeros, never going below scale 0."""
    return rational_to_exact_decimal(Fraction(value))


def format_rational(value: Fraction) -> str:
    """Render as ``"n/d"``, or ``"n"`` for integers."""
    if value.denominator == 1:
        return str(value.numerator)
    return f"{value.numerator}/{value.denominator}"


def compare(a: Fraction, b: Fraction) -> int:
    """Three-way comparison returning -1, 0 or 1."""
    return (a > b) - (a < b)


def is_cash_step(step: int) -> bool:
    """True when ``step`` is a positive product of the factors 2 and 5 only."""
    if step < 1:
        return False
    for factor in (2, 5):
        while step % factor == 0:
            step //= factor
    return step == 1
