"""Services for the money kernel: currency lookup, exchange rates, conversion."""

from money_kernel.services.currency_converter import CurrencyConverter
from money_kernel.services.currency_provider import (
    ConfigurableCurrencyProvider,
    CurrencyProvider,
    CurrencyProviderChain,
    ISOCurrencyProvider,
    get_iso_currency_provider,
)
from money_kernel.services.database_exchange_rate_provider import (
    DatabaseExchangeRateProvider,
    DatabaseProviderConfiguration,
)
from money_kernel.services.exchange_rate_provider import (
    BaseCurrencyExchangeRateProvider,
    CachedExchangeRateProvider,
    ConfigurableExchangeRateProvider,
    ExchangeRateProvider,
    ExchangeRateProviderChain,
)
from money_kernel.services.money_comparator import MoneyComparator
from money_kernel.services.money_factory import MoneyFactory

__all__ = [
    "BaseCurrencyExchangeRateProvider",
    "CachedExchangeRateProvider",
    "ConfigurableCurrencyProvider",
    "ConfigurableExchangeRateProvider",
    "CurrencyConverter",
    "CurrencyProvider",
    "CurrencyProviderChain",
    "DatabaseExchangeRateProvider",
    "DatabaseProviderConfiguration",
    "ExchangeRateProvider",
    "ExchangeRateProviderChain",
    "ISOCurrencyProvider",
    "MoneyComparator",
    "MoneyFactory",
    "get_iso_currency_provider",
]
