"""
RationalMoney -- an exact monetary amount with no scale at all.

Chains of operations (splitting a payment, stacking percentage discounts)
run on RationalMoney without any rounding; ``to(context, rounding_mode)``
is the single point where the exact fraction becomes a Money.
"""

from __future__ import annotations

from dataclasses import dataclass
from fractions import Fraction

from money_kernel.domain.abstract_money import AbstractMoney
from money_kernel.domain.currency import Currency, resolve_currency
from money_kernel.domain.numbers import (
    NumberLike,
    format_rational,
    rational_to_exact_decimal,
    to_rational,
)
from money_kernel.exceptions import RoundingNecessaryError


@dataclass(frozen=True, slots=True)
class RationalMoney(AbstractMoney):
    """
    Exact monetary amount as a Fraction.

    Guarantees:
        - Arithmetic never rounds and never raises RoundingNecessaryError.
        - Operands in another currency raise CurrencyMismatchError.
    """

    amount: Fraction
    currency: Currency

    @classmethod
    def of(cls, amount: NumberLike, currency: Currency | str | int) -> RationalMoney:
        """``RationalMoney.of("123/456", "GBP")`` or ``RationalMoney.of("9.99", "USD")``."""
        return cls(to_rational(amount), resolve_currency(currency))

    def to_fraction(self) -> Fraction:
        return self.amount

    def plus(self, that: AbstractMoney | NumberLike) -> RationalMoney:
        return RationalMoney(self.amount + self._operand(that), self.currency)

    def minus(self, that: AbstractMoney | NumberLike) -> RationalMoney:
        return RationalMoney(self.amount - self._operand(that), self.currency)

    def multiplied_by(self, that: NumberLike) -> RationalMoney:
        if isinstance(that, AbstractMoney):
            raise TypeError("Cannot multiply money by money.")
        return RationalMoney(self.amount * to_rational(that), self.currency)

    def divided_by(self, that: NumberLike) -> RationalMoney:
        if isinstance(that, AbstractMoney):
            raise TypeError("Cannot divide money by money.")
        return RationalMoney(self.amount / to_rational(that), self.currency)

    def abs(self) -> RationalMoney:
        return RationalMoney(abs(self.amount), self.currency)

    def negated(self) -> RationalMoney:
        return RationalMoney(-self.amount, self.currency)

    def __add__(self, other: AbstractMoney | NumberLike) -> RationalMoney:
        return self.plus(other)

    def __radd__(self, other: NumberLike) -> RationalMoney:
        return self.plus(other)

    def __sub__(self, other: AbstractMoney | NumberLike) -> RationalMoney:
        return self.minus(other)

    def __mul__(self, other: NumberLike) -> RationalMoney:
        return self.multiplied_by(other)

    def __rmul__(self, other: NumberLike) -> RationalMoney:
        return self.multiplied_by(other)

    def __truediv__(self, other: NumberLike) -> RationalMoney:
        return self.divided_by(other)

    def __neg__(self) -> RationalMoney:
        return self.negated()

    def __abs__(self) -> RationalMoney:
        return self.abs()

    def __str__(self) -> str:
        try:
            rendered = f"{rational_to_exact_decimal(self.amount):f}"
        except RoundingNecessaryError:
            rendered = format_rational(self.amount)
        return f"{self.currency.code} {rendered}"

    def __repr__(self) -> str:
        return f"RationalMoney({str(self)!r})"
