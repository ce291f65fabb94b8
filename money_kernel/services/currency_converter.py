"""
CurrencyConverter -- converts monies with rates from an ExchangeRateProvider.

Conversion is exact until the very end: every amount is multiplied by its
rate as a Fraction, and only the final result goes through a Context.
"""

from __future__ import annotations

from fractions import Fraction

from money_kernel.domain.abstract_money import AbstractMoney
from money_kernel.domain.context import Context, DefaultContext
from money_kernel.domain.currency import Currency, resolve_currency
from money_kernel.domain.money import Money
from money_kernel.domain.money_bag import MoneyBag
from money_kernel.domain.numbers import RoundingMode
from money_kernel.domain.rational_money import RationalMoney
from money_kernel.logging_config import LogContext, get_logger
from money_kernel.services.exchange_rate_provider import ExchangeRateProvider

logger = get_logger("services.currency_converter")


class CurrencyConverter:
    """
    Converts a Money, RationalMoney or MoneyBag into a target currency.

    Contract:
        A Money already in the target currency is returned unchanged and
        the provider is not consulted.

    Non-goals:
        - Does NOT cache rates; wrap the provider in a
          CachedExchangeRateProvider.
    """

    def __init__(self, provider: ExchangeRateProvider, context: Context | None = None):
        self._provider = provider
        self._context = context or DefaultContext()

    @property
    def provider(self) -> ExchangeRateProvider:
        return self._provider

    def convert(
        self,
        money: AbstractMoney | MoneyBag,
        currency: Currency | str | int,
        context: Context | None = None,
        rounding_mode: RoundingMode | str = RoundingMode.UNNECESSARY,
    ) -> Money:
        """
        Convert to ``currency`` through ``context`` (default: the
        converter's context, itself defaulting to DefaultContext).

        Raises:
            CurrencyConversionError: If the provider has no rate.
            RoundingNecessaryError: If the result needs rounding and
                ``rounding_mode`` is UNNECESSARY.
        """
        currency = resolve_currency(currency)
        if isinstance(money, Money) and money.currency == currency:
            return money

        with LogContext.bind(operation="currency_conversion"):
            return self.convert_to_rational(money, currency).to(
                context or self._context, rounding_mode
            )

    def convert_to_rational(
        self,
        money: AbstractMoney | MoneyBag,
        currency: Currency | str | int,
    ) -> RationalMoney:
        """Exact conversion, no rounding at all."""
        currency = resolve_currency(currency)
        monies = money.monies() if isinstance(money, MoneyBag) else [money]

        total = Fraction(0)
        with LogContext.bind(operation="currency_conversion"):
            for contained in monies:
                amount = contained.to_fraction()
                source_code = contained.currency.code
                if source_code != currency.code:
                    rate = self._provider.get_exchange_rate(source_code, currency.code)
                    logger.debug(
                        "currency_converted",
                        extra={
                            "source_currency": source_code,
                            "target_currency": currency.code,
                            "rate": rate,
                        },
                    )
                    amount *= rate
                total += amount

        return RationalMoney(total, currency)
