"""
Formatting -- locale-aware rendering of Money through Babel.

The number of fraction digits always follows the money itself (its
scale), never the currency's CLDR default, so ``USD 1.5000`` at scale 4
renders all four digits.
"""

from __future__ import annotations

import copy
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from babel import Locale
from babel.numbers import format_currency

if TYPE_CHECKING:
    from money_kernel.domain.money import Money


class MoneyFormatter(ABC):
    """Turns a Money into display text."""

    @abstractmethod
    def format(self, money: Money) -> str:
        ...


class MoneyLocaleFormatter(MoneyFormatter):
    """
    Standard currency format of a locale.

    ``MoneyLocaleFormatter("en_US").format(Money.of("1234.5", "USD"))`` is
    ``"$1,234.50"``; ``MoneyLocaleFormatter("fr_FR")`` gives
    ``"1 234,50\xa0$US"``.  With ``allow_whole_number=True`` a whole
    amount drops its fraction digits (``"$1,234"``).
    """

    def __init__(self, locale: str | Locale, allow_whole_number: bool = False):
        self.locale = Locale.parse(locale)
        self.allow_whole_number = allow_whole_number
        self._pattern = self.locale.currency_formats["standard"]

    def format(self, money: Money) -> str:
        digits = money.scale
        if self.allow_whole_number and money.amount == money.amount.to_integral_value():
            digits = 0

        pattern = copy.copy(self._pattern)
        pattern.frac_prec = (digits, digits)
        return pattern.apply(
            money.amount,
            self.locale,
            currency=money.currency.code,
            currency_digits=False,
        )


class MoneyNumberFormatter(MoneyFormatter):
    """
    Explicit CLDR number pattern, e.g. ``"¤#,##0.00"`` or ``"#,##0.000 ¤¤"``.

    The pattern alone decides the fraction digits.
    """

    def __init__(self, pattern: str, locale: str | Locale = "en_US"):
        self.pattern = pattern
        self.locale = Locale.parse(locale)

    def format(self, money: Money) -> str:
        return format_currency(
            money.amount,
            money.currency.code,
            format=self.pattern,
            locale=self.locale,
            currency_digits=False,
        )
