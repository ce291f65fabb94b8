"""
Pure domain layer.

Value objects and rounding policies with NO dependencies on:
- Database
- Exchange rate sources
- I/O (apart from the packaged ISO tables, reached through the
  shared currency provider)

Money, RationalMoney, Currency and every Context are immutable.
MoneyBag is the one mutable aggregate.
"""

from money_kernel.domain.abstract_money import AbstractMoney
from money_kernel.domain.context import (
    AutoContext,
    CashContext,
    Context,
    CustomContext,
    DefaultContext,
    ExactContext,
    PrecisionContext,
)
from money_kernel.domain.currency import Currency, CurrencyType, resolve_currency
from money_kernel.domain.formatter import (
    MoneyFormatter,
    MoneyLocaleFormatter,
    MoneyNumberFormatter,
)
from money_kernel.domain.money import Money
from money_kernel.domain.money_bag import MoneyBag
from money_kernel.domain.numbers import NumberLike, RoundingMode
from money_kernel.domain.rational_money import RationalMoney

__all__ = [
    "AbstractMoney",
    "AutoContext",
    "CashContext",
    "Context",
    "Currency",
    "CurrencyType",
    "CustomContext",
    "DefaultContext",
    "ExactContext",
    "Money",
    "MoneyBag",
    "MoneyFormatter",
    "MoneyLocaleFormatter",
    "MoneyNumberFormatter",
    "NumberLike",
    "PrecisionContext",
    "RationalMoney",
    "RoundingMode",
    "resolve_currency",
]
