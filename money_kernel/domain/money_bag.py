"""MoneyBag -- mutable multi-currency accumulator."""

from __future__ import annotations

from typing import TYPE_CHECKING

from money_kernel.domain.context import Context, DefaultContext
from money_kernel.domain.currency import Currency, resolve_currency
from money_kernel.domain.money import Money
from money_kernel.domain.numbers import RoundingMode
from money_kernel.domain.rational_money import RationalMoney

if TYPE_CHECKING:
    from money_kernel.services.currency_converter import CurrencyConverter


class MoneyBag:
    """
    Holds at most one Money per currency code.

    Contract:
        ``get`` never fails for a resolvable currency: an absent currency
        reads as zero at its default scale.  ``add`` stores
        ``money.plus(existing)``, so the money being added decides the
        resulting scale; ``subtract`` stores ``money.negated().plus(existing)``.

    Non-goals:
        - Entries are never removed; a currency subtracted to zero stays
          in the bag as a zero Money.
        - Not thread-safe; callers synchronise shared bags.
    """

    def __init__(self) -> None:
        self._monies: dict[str, Money] = {}

    def _find(self, currency: object) -> Money | None:
        if isinstance(currency, Currency):
            return self._monies.get(currency.code)
        if isinstance(currency, str):
            return self._monies.get(currency)
        if isinstance(currency, int):
            # entries are keyed by alphabetic code
            return next(
                (money for money in self._monies.values() if money.currency.numeric_code == currency),
                None,
            )
        return None

    def get(self, currency: Currency | str | int) -> Money:
        """
        Raises:
            UnknownCurrencyError: If the currency is absent and its code
                cannot be resolved.
        """
        existing = self._find(currency)
        if existing is not None:
            return existing
        return Money.zero(resolve_currency(currency))

    def add(self, money: Money) -> MoneyBag:
        existing = self._monies.get(money.currency.code)
        self._monies[money.currency.code] = (
            money if existing is None else money.plus(existing)
        )
        return self

    def subtract(self, money: Money) -> MoneyBag:
        return self.add(money.negated())

    def monies(self) -> list[Money]:
        return list(self._monies.values())

    def get_total(
        self,
        currency: Currency | str | int,
        converter: CurrencyConverter,
        context: Context | None = None,
        rounding_mode: RoundingMode | str = RoundingMode.UNNECESSARY,
    ) -> Money:
        """
        Convert every entry to ``currency`` and sum, starting from zero.

        Conversions are summed exactly; the total is rounded once, through
        ``context`` (default: the currency's default scale).

        Raises:
            CurrencyConversionError: If a rate is missing.
            RoundingNecessaryError: If the exact total needs rounding and
                ``rounding_mode`` is UNNECESSARY.
        """
        currency = resolve_currency(currency)
        total = RationalMoney.of(0, currency)
        for money in self._monies.values():
            total = total.plus(converter.convert_to_rational(money, currency))
        return total.to(context or DefaultContext(), rounding_mode)

    def __len__(self) -> int:
        return len(self._monies)

    def __contains__(self, currency: object) -> bool:
        return self._find(currency) is not None
