"""
Money -- a fixed-scale monetary amount in one currency.

Responsibility:
    The value object for amounts that are actually held, paid or shown:
    a Decimal with a definite scale, a Currency and a cash step.  All
    arithmetic computes the exact rational result first and then
    collapses it back to the receiver's scale and step, so an operation
    either stays exact or the caller names a RoundingMode.

Architecture position:
    Kernel > Domain -- pure value object.  Builds on numbers/ and context/;
    conversion takes the exchange rate as a plain number, never a provider.

Invariants enforced:
    - Arithmetic preserves the receiver's scale and step.
    - No silent rounding: UNNECESSARY (the default) raises
      RoundingNecessaryError when digits would be discarded.
    - Money of different currencies never combine (CurrencyMismatchError).
    - Allocation never creates or loses money: the parts always sum to
      the original amount.

Failure modes:
    - CurrencyMismatchError, RoundingNecessaryError (see above).
    - UnknownCurrencyError when a currency code cannot be resolved.
    - MoneyParseError for a malformed "<CODE> <amount>" string.
    - InvalidArgumentError for bad scale, step or allocation ratios.

Audit relevance:
    ``str(money)`` ("USD 12.34") and ``Money.parse`` round-trip exactly,
    scale included, so the textual form is safe to persist and log.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from fractions import Fraction
from functools import reduce
from math import gcd
from typing import TYPE_CHECKING

from money_kernel.domain.abstract_money import AbstractMoney
from money_kernel.domain.context import (
    CashContext,
    Context,
    CustomContext,
    DefaultContext,
    ExactContext,
    collapse,
    step_fits_scale,
)
from money_kernel.domain.currency import Currency, resolve_currency
from money_kernel.domain.numbers import (
    NumberLike,
    RoundingMode,
    decimal_from_unscaled,
    decimal_scale,
    to_decimal,
    to_rational,
    unscaled_value,
)
from money_kernel.domain.rational_money import RationalMoney
from money_kernel.exceptions import (
    CurrencyMismatchError,
    InvalidArgumentError,
    MoneyParseError,
)

if TYPE_CHECKING:
    from money_kernel.services.currency_provider import CurrencyProvider


def _truncated_divmod(dividend: int, divisor: int) -> tuple[int, int]:
    # Quotient rounds toward zero; remainder takes the dividend's sign
    q = abs(dividend) // abs(divisor)
    if (dividend < 0) != (divisor < 0):
        q = -q
    return q, dividend - q * divisor


def _integral(value: NumberLike, operation: str) -> int:
    rational = to_rational(value)
    if rational.denominator != 1:
        raise InvalidArgumentError(f"{operation}() requires an integer, got {value!r}.")
    return rational.numerator


def _check_ratios(ratios: tuple[int, ...], operation: str) -> int:
    if not ratios:
        raise InvalidArgumentError(f"Cannot {operation}() an empty list of ratios.")
    for ratio in ratios:
        if ratio < 0:
            raise InvalidArgumentError(f"Cannot {operation}() negative ratios.")
    total = sum(ratios)
    if total == 0:
        raise InvalidArgumentError(f"Cannot {operation}() to zero ratios only.")
    return total


@dataclass(frozen=True, slots=True)
class Money(AbstractMoney):
    """
    Fixed-scale monetary amount.

    Contract:
        ``amount`` is a finite Decimal with a non-negative exponent-derived
        scale; its unscaled value is a multiple of ``step``.

    Guarantees:
        - Immutable and hashable.
        - ``Money.parse(str(m))`` equals ``m``, scale included.

    Non-goals:
        - Does NOT look up exchange rates; see CurrencyConverter.
        - Does NOT use floats anywhere.
    """

    amount: Decimal
    currency: Currency
    step: int = 1

    # -- construction ----------------------------------------------------------

    @classmethod
    def of(
        cls,
        amount: NumberLike,
        currency: Currency | str | int,
        scale: int | None = None,
        rounding_mode: RoundingMode | str = RoundingMode.UNNECESSARY,
        step: int = 1,
    ) -> Money:
        """
        Build a Money at the currency's default scale, or at ``scale``.

        Raises:
            UnknownCurrencyError: If the currency code is unknown.
            RoundingNecessaryError: If the amount does not fit the scale
                and ``rounding_mode`` is UNNECESSARY.
            InvalidArgumentError: For a negative scale or invalid step.
        """
        context: Context
        if scale is not None:
            context = CustomContext(scale, step)
        elif step != 1:
            context = CashContext(step)
        else:
            context = DefaultContext()
        return cls.create(amount, currency, context, rounding_mode)

    @classmethod
    def create(
        cls,
        amount: NumberLike,
        currency: Currency | str | int,
        context: Context,
        rounding_mode: RoundingMode | str = RoundingMode.UNNECESSARY,
    ) -> Money:
        """Build a Money through an explicit Context."""
        currency = resolve_currency(currency)
        value = context.apply_to(to_rational(amount), currency, rounding_mode)
        return cls(value, currency, context.step)

    @classmethod
    def of_minor(
        cls,
        amount_minor: NumberLike,
        currency: Currency | str | int,
        context: Context | None = None,
        rounding_mode: RoundingMode | str = RoundingMode.UNNECESSARY,
    ) -> Money:
        """Build from a count of minor units: ``of_minor(1234, "USD")`` is USD 12.34."""
        currency = resolve_currency(currency)
        amount = to_rational(amount_minor) / 10**currency.default_fraction_digits
        return cls.create(amount, currency, context or DefaultContext(), rounding_mode)

    @classmethod
    def zero(
        cls,
        currency: Currency | str | int,
        fraction_digits: int | None = None,
    ) -> Money:
        currency = resolve_currency(currency)
        scale = (
            currency.default_fraction_digits
            if fraction_digits is None
            else fraction_digits
        )
        if scale < 0:
            raise InvalidArgumentError.invalid_scale(scale)
        return cls(decimal_from_unscaled(0, scale), currency)

    @classmethod
    def parse(
        cls,
        text: str,
        currency_provider: CurrencyProvider | None = None,
    ) -> Money:
        """
        Parse ``"<CODE> <amount>"``, keeping the scale of the amount.

        Splits on the last space, so ``"USD 12.34"`` is USD 12.34 at scale 2.

        Raises:
            MoneyParseError: If there is no space or the amount is not a
                finite decimal.
            UnknownCurrencyError: If the code is unknown.
        """
        code, separator, amount_text = text.strip().rpartition(" ")
        code = code.strip()
        if not separator or not code:
            raise MoneyParseError(text, "expected '<CODE> <amount>'")
        try:
            parsed = Decimal(amount_text)
        except InvalidOperation as e:
            raise MoneyParseError(text, f"invalid amount {amount_text!r}") from e
        if not parsed.is_finite():
            raise MoneyParseError(text, f"invalid amount {amount_text!r}")

        currency = resolve_currency(code, currency_provider)
        return cls(to_decimal(parsed), currency)

    # -- accessors -------------------------------------------------------------

    def to_fraction(self) -> Fraction:
        return Fraction(self.amount)

    @property
    def scale(self) -> int:
        return decimal_scale(self.amount)

    @property
    def unscaled_amount(self) -> int:
        """All digits of the amount as an integer: USD 12.34 -> 1234."""
        return unscaled_value(self.amount)

    @property
    def minor_amount(self) -> Decimal:
        """
        The amount in minor units of the currency.

        USD 12.34 -> 1234; USD 12.345 (scale 3) -> 1234.5.
        """
        digits = self.currency.default_fraction_digits
        scale = self.scale
        if scale >= digits:
            return decimal_from_unscaled(self.unscaled_amount, scale - digits)
        return decimal_from_unscaled(self.unscaled_amount * 10 ** (digits - scale), 0)

    @property
    def context(self) -> Context:
        """The context that keeps this money's scale and step."""
        if step_fits_scale(self.scale, self.step):
            return CustomContext(self.scale, self.step)
        # steps such as 8 or 40 only come from a CashContext
        return CashContext(self.step)

    def _collapse(self, value: Fraction, rounding_mode: RoundingMode | str) -> Money:
        amount = collapse(value, self.scale, self.step, rounding_mode)
        return Money(amount, self.currency, self.step)

    # -- arithmetic ------------------------------------------------------------

    def plus(
        self,
        that: AbstractMoney | NumberLike,
        rounding_mode: RoundingMode | str = RoundingMode.UNNECESSARY,
    ) -> Money:
        """
        Add a money in the same currency, or a bare number.

        Raises:
            CurrencyMismatchError: If ``that`` is money in another currency.
            RoundingNecessaryError: If the sum does not fit this scale.
        """
        return self._collapse(self.to_fraction() + self._operand(that), rounding_mode)

    def minus(
        self,
        that: AbstractMoney | NumberLike,
        rounding_mode: RoundingMode | str = RoundingMode.UNNECESSARY,
    ) -> Money:
        return self._collapse(self.to_fraction() - self._operand(that), rounding_mode)

    def multiplied_by(
        self,
        that: NumberLike,
        rounding_mode: RoundingMode | str = RoundingMode.UNNECESSARY,
    ) -> Money:
        if isinstance(that, AbstractMoney):
            raise TypeError("Cannot multiply money by money.")
        return self._collapse(self.to_fraction() * to_rational(that), rounding_mode)

    def divided_by(
        self,
        that: NumberLike,
        rounding_mode: RoundingMode | str = RoundingMode.UNNECESSARY,
    ) -> Money:
        """
        Raises:
            ZeroDivisionError: If ``that`` is zero.
            RoundingNecessaryError: If the quotient does not fit this scale.
        """
        if isinstance(that, AbstractMoney):
            raise TypeError("Cannot divide money by money.")
        return self._collapse(self.to_fraction() / to_rational(that), rounding_mode)

    def quotient(self, that: NumberLike) -> Money:
        """Integer division in units of the step, truncated toward zero."""
        return self.quotient_and_remainder(that)[0]

    def quotient_and_remainder(self, that: NumberLike) -> tuple[Money, Money]:
        """
        Divide in units of the step; the remainder keeps the sign of self.

        USD 10.00 by 3 -> (USD 3.33, USD 0.01).

        Raises:
            ZeroDivisionError: If ``that`` is zero.
        """
        divisor = _integral(that, "quotient_and_remainder")
        if divisor == 0:
            raise ZeroDivisionError("Division by zero.")
        scale = self.scale
        q, r = _truncated_divmod(self.unscaled_amount // self.step, divisor)
        return (
            Money(decimal_from_unscaled(q * self.step, scale), self.currency, self.step),
            Money(decimal_from_unscaled(r * self.step, scale), self.currency, self.step),
        )

    def allocate(self, *ratios: int) -> list[Money]:
        """
        Split by ratios, handing out the leftover one step at a time.

        ``Money.of("100", "USD").allocate(1, 2)`` -> [USD 33.34, USD 66.66].
        The leftover goes to the first parts, in order, so the parts sum to
        exactly this amount.

        Raises:
            InvalidArgumentError: For no ratios, a negative ratio, or all
                ratios zero.
        """
        total = _check_ratios(ratios, "allocate")

        unit = Money(decimal_from_unscaled(self.step, self.scale), self.currency, self.step)
        if self.is_negative():
            unit = unit.negated()

        monies = []
        remainder = self
        for ratio in ratios:
            money = self.multiplied_by(ratio).quotient(total)
            remainder = remainder.minus(money)
            monies.append(money)

        for i, money in enumerate(monies):
            if remainder.is_zero():
                break
            monies[i] = money.plus(unit)
            remainder = remainder.minus(unit)

        return monies

    def allocate_with_remainder(self, *ratios: int) -> list[Money]:
        """
        Split by ratios without distributing the leftover.

        Returns one Money per ratio, followed by the remainder.
        ``Money.of("100", "USD").allocate_with_remainder(1, 2)`` ->
        [USD 33.33, USD 66.66, USD 0.01].
        """
        _check_ratios(ratios, "allocate_with_remainder")

        divisor = reduce(gcd, ratios)
        simplified = [ratio // divisor for ratio in ratios]
        total = sum(simplified)

        _, remainder = self.quotient_and_remainder(total)
        to_allocate = self.minus(remainder)

        monies = [to_allocate.multiplied_by(ratio).divided_by(total) for ratio in simplified]
        monies.append(remainder)
        return monies

    def split(self, parts: int) -> list[Money]:
        """Split into ``parts`` near-equal monies; the first ones get the leftover."""
        if parts < 1:
            raise InvalidArgumentError("Cannot split() into less than 1 part.")
        return self.allocate(*([1] * parts))

    def split_with_remainder(self, parts: int) -> list[Money]:
        if parts < 1:
            raise InvalidArgumentError("Cannot split_with_remainder() into less than 1 part.")
        return self.allocate_with_remainder(*([1] * parts))

    def abs(self) -> Money:
        return self if self.amount >= 0 else self.negated()

    def negated(self) -> Money:
        return Money(
            decimal_from_unscaled(-self.unscaled_amount, self.scale),
            self.currency,
            self.step,
        )

    # -- conversion ------------------------------------------------------------

    def converted_to(
        self,
        currency: Currency | str | int,
        exchange_rate: NumberLike,
        context: Context | None = None,
        rounding_mode: RoundingMode | str = RoundingMode.UNNECESSARY,
    ) -> Money:
        """
        Convert with an explicit rate, exact unless a context says otherwise.

        ``context`` defaults to ExactContext, so a rate that produces a
        non-terminating amount raises RoundingNecessaryError.
        """
        currency = resolve_currency(currency)
        amount = self.to_fraction() * to_rational(exchange_rate)
        return Money.create(amount, currency, context or ExactContext(), rounding_mode)

    def to_rational(self) -> RationalMoney:
        return RationalMoney(self.to_fraction(), self.currency)

    def format_to(self, locale: str, allow_whole_number: bool = False) -> str:
        """Locale-aware rendering, e.g. ``format_to("en_US")`` -> "$1,234.50"."""
        from money_kernel.domain.formatter import MoneyLocaleFormatter

        return MoneyLocaleFormatter(locale, allow_whole_number).format(self)

    # -- aggregates ------------------------------------------------------------

    @classmethod
    def min(cls, money: Money, *monies: Money) -> Money:
        """The smallest money; the earliest wins ties."""
        result = money
        for candidate in monies:
            if candidate.is_less_than(result):
                result = candidate
        return result

    @classmethod
    def max(cls, money: Money, *monies: Money) -> Money:
        """The largest money; the earliest wins ties."""
        result = money
        for candidate in monies:
            if candidate.is_greater_than(result):
                result = candidate
        return result

    @classmethod
    def total(cls, money: Money, *monies: Money) -> Money:
        """
        Sum of one or more monies, at the largest scale among them.

        The finer-scaled operand is always the augend, so
        ``total(EUR 1.1, EUR 2.22)`` is EUR 3.32.

        Raises:
            CurrencyMismatchError: If any currency differs from the first.
        """
        result = money
        for other in monies:
            if other.currency != money.currency:
                raise CurrencyMismatchError(money.currency.code, other.currency.code)
            if other.scale > result.scale:
                result = other.plus(result)
            else:
                result = result.plus(other)
        return result

    # -- operators -------------------------------------------------------------

    def __add__(self, other: AbstractMoney | NumberLike) -> Money:
        return self.plus(other)

    def __radd__(self, other: NumberLike) -> Money:
        # sum() starts from 0
        return self.plus(other)

    def __sub__(self, other: AbstractMoney | NumberLike) -> Money:
        return self.minus(other)

    def __mul__(self, other: NumberLike) -> Money:
        return self.multiplied_by(other)

    def __rmul__(self, other: NumberLike) -> Money:
        return self.multiplied_by(other)

    def __truediv__(self, other: NumberLike) -> Money:
        return self.divided_by(other)

    def __neg__(self) -> Money:
        return self.negated()

    def __pos__(self) -> Money:
        return self

    def __abs__(self) -> Money:
        return self.abs()

    def __str__(self) -> str:
        return f"{self.currency.code} {self.amount:f}"

    def __repr__(self) -> str:
        return f"Money({str(self)!r})"
