"""
ExchangeRateProvider family -- where conversion rates come from.

Responsibility:
    ``get_exchange_rate(source, target)`` returns the exact rational rate
    such that ``source_amount * rate == target_amount``.  Providers are
    composable: an in-memory table, a memoising cache, a fall-through
    chain, and a base-currency deriver that computes cross rates.

Architecture position:
    Kernel > Services.  Consumed by CurrencyConverter and MoneyComparator.
    Takes currency codes, never Money.

Invariants enforced:
    - Rates are exact Fractions; floats are rejected on input.
    - Configured rates are strictly positive.
    - A chain only falls through on ``CurrencyConversionError``.

Failure modes:
    - CurrencyConversionError when no rate exists for the pair.
    - InvalidArgumentError for a non-positive configured rate.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from fractions import Fraction

from money_kernel.domain.currency import Currency
from money_kernel.domain.numbers import NumberLike, to_rational
from money_kernel.exceptions import CurrencyConversionError, InvalidArgumentError
from money_kernel.logging_config import get_logger

logger = get_logger("services.exchange_rate_provider")


def _code(currency: Currency | str) -> str:
    return currency.code if isinstance(currency, Currency) else currency


class ExchangeRateProvider(ABC):
    """Source of exchange rates between two currency codes."""

    @abstractmethod
    def get_exchange_rate(self, source_currency_code: str, target_currency_code: str) -> Fraction:
        """
        Raises:
            CurrencyConversionError: If the rate is not available.
        """


class ConfigurableExchangeRateProvider(ExchangeRateProvider):
    """
    In-memory table of directional rates.

    Setting EUR->USD does NOT make USD->EUR available; wrap in a
    BaseCurrencyExchangeRateProvider to derive reciprocals and crosses.
    """

    def __init__(self) -> None:
        self._rates: dict[tuple[str, str], Fraction] = {}

    def set_exchange_rate(
        self,
        source_currency: Currency | str,
        target_currency: Currency | str,
        exchange_rate: NumberLike,
    ) -> ConfigurableExchangeRateProvider:
        rate = to_rational(exchange_rate)
        if rate <= 0:
            raise InvalidArgumentError(f"Exchange rates must be positive, got {exchange_rate!r}.")
        self._rates[(_code(source_currency), _code(target_currency))] = rate
        return self

    def get_exchange_rate(self, source_currency_code: str, target_currency_code: str) -> Fraction:
        try:
            return self._rates[(source_currency_code, target_currency_code)]
        except KeyError:
            raise CurrencyConversionError.exchange_rate_not_available(
                source_currency_code, target_currency_code
            ) from None


class CachedExchangeRateProvider(ExchangeRateProvider):
    """
    Memoises rates from a slower provider, per currency pair.

    Failures are not cached: a missing rate is asked for again next time.
    """

    def __init__(self, provider: ExchangeRateProvider):
        self._provider = provider
        self._cache: dict[tuple[str, str], Fraction] = {}

    def get_exchange_rate(self, source_currency_code: str, target_currency_code: str) -> Fraction:
        key = (source_currency_code, target_currency_code)
        rate = self._cache.get(key)
        if rate is not None:
            return rate

        logger.debug(
            "exchange_rate_cache_miss",
            extra={"source_currency": source_currency_code, "target_currency": target_currency_code},
        )
        rate = self._provider.get_exchange_rate(source_currency_code, target_currency_code)
        self._cache[key] = rate
        return rate

    def invalidate(self) -> None:
        """Drop every cached rate."""
        self._cache.clear()


class ExchangeRateProviderChain(ExchangeRateProvider):
    """Asks each provider in turn; the first rate found wins."""

    def __init__(self, providers: list[ExchangeRateProvider] | None = None):
        self._providers: list[ExchangeRateProvider] = list(providers or ())

    def add_exchange_rate_provider(self, provider: ExchangeRateProvider) -> ExchangeRateProviderChain:
        self.remove_exchange_rate_provider(provider)
        self._providers.append(provider)
        return self

    def remove_exchange_rate_provider(
        self, provider: ExchangeRateProvider
    ) -> ExchangeRateProviderChain:
        self._providers = [p for p in self._providers if p is not provider]
        return self

    def get_exchange_rate(self, source_currency_code: str, target_currency_code: str) -> Fraction:
        for provider in self._providers:
            try:
                return provider.get_exchange_rate(source_currency_code, target_currency_code)
            except CurrencyConversionError:
                logger.debug(
                    "exchange_rate_provider_fallthrough",
                    extra={
                        "source_currency": source_currency_code,
                        "target_currency": target_currency_code,
                        "provider": type(provider).__name__,
                    },
                )
        raise CurrencyConversionError.exchange_rate_not_available(
            source_currency_code, target_currency_code
        )


class BaseCurrencyExchangeRateProvider(ExchangeRateProvider):
    """
    Derives any pair from rates quoted against one base currency.

    With EUR as base and rates EUR->USD, EUR->GBP available:
        - EUR -> USD is the quoted rate
        - USD -> EUR is 1 / (EUR -> USD)
        - USD -> GBP is (EUR -> GBP) / (EUR -> USD)
    """

    def __init__(self, provider: ExchangeRateProvider, base_currency: Currency | str):
        self._provider = provider
        self._base_currency_code = _code(base_currency)

    @property
    def base_currency_code(self) -> str:
        return self._base_currency_code

    def get_exchange_rate(self, source_currency_code: str, target_currency_code: str) -> Fraction:
        base = self._base_currency_code
        if source_currency_code == base:
            return self._provider.get_exchange_rate(base, target_currency_code)
        if target_currency_code == base:
            return 1 / self._provider.get_exchange_rate(base, source_currency_code)

        base_to_source = self._provider.get_exchange_rate(base, source_currency_code)
        base_to_target = self._provider.get_exchange_rate(base, target_currency_code)
        return base_to_target / base_to_source
