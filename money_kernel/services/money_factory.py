"""MoneyFactory -- builds Money through an injected currency provider and context."""

from __future__ import annotations

from money_kernel.domain.context import Context, DefaultContext
from money_kernel.domain.currency import Currency
from money_kernel.domain.money import Money
from money_kernel.domain.numbers import NumberLike, RoundingMode
from money_kernel.services.currency_provider import CurrencyProvider, get_iso_currency_provider


class MoneyFactory:
    """
    Money construction with project-wide defaults.

    Codes are resolved through ``currency_provider`` (default: the shared
    ISO provider), so custom currencies can be created by code:

        factory = MoneyFactory(CurrencyProviderChain([iso, customs]))
        factory.of("0.00012", "BTC")
    """

    def __init__(
        self,
        currency_provider: CurrencyProvider | None = None,
        default_context: Context | None = None,
        default_rounding_mode: RoundingMode | str = RoundingMode.UNNECESSARY,
    ):
        self.currency_provider = currency_provider or get_iso_currency_provider()
        self.default_context = default_context or DefaultContext()
        self.default_rounding_mode = RoundingMode(default_rounding_mode)

    def _currency(self, currency: Currency | str | int) -> Currency:
        if isinstance(currency, Currency):
            return currency
        return self.currency_provider.get_currency(currency)

    def of(
        self,
        amount: NumberLike,
        currency: Currency | str | int,
        context: Context | None = None,
        rounding_mode: RoundingMode | str | None = None,
    ) -> Money:
        """
        Raises:
            UnknownCurrencyError: If the provider does not know the code.
            RoundingNecessaryError: If the amount needs rounding and the
                effective rounding mode is UNNECESSARY.
        """
        return Money.create(
            amount,
            self._currency(currency),
            context or self.default_context,
            self.default_rounding_mode if rounding_mode is None else rounding_mode,
        )

    def of_minor(
        self,
        amount_minor: NumberLike,
        currency: Currency | str | int,
        context: Context | None = None,
        rounding_mode: RoundingMode | str | None = None,
    ) -> Money:
        return Money.of_minor(
            amount_minor,
            self._currency(currency),
            context or self.default_context,
            self.default_rounding_mode if rounding_mode is None else rounding_mode,
        )

    def zero(self, currency: Currency | str | int, fraction_digits: int | None = None) -> Money:
        return Money.zero(self._currency(currency), fraction_digits)
