"""
money_config -- YAML configuration for the money kernel.

Responsibility:
    Loads a configuration document (custom currencies, configured exchange
    rates, defaults) and builds the kernel objects it describes: a
    currency provider, an exchange rate provider and a MoneyFactory.

Architecture position:
    Configuration -- sits above ``money_kernel``.  The kernel MUST NEVER
    import from ``money_config``.

Failure modes:
    - ``ConfigurationError`` -- no path given and ``MONEY_KERNEL_CONFIG``
      unset, or invalid values in the document.
    - ``FileNotFoundError`` / ``yaml.YAMLError`` propagate from loading.

Audit relevance:
    Every successful ``load_configuration()`` call emits a
    ``MONEY_CONFIG_TRACE`` log entry with the config id, version and
    checksum, so rates used for a conversion can be traced back to the
    exact document that defined them.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from money_config.loader import (
    ConfigurationError,
    load_yaml_file,
    parse_configuration,
)
from money_config.schema import CurrencyDef, ExchangeRateDef, MoneyConfiguration
from money_kernel.domain.context import DefaultContext
from money_kernel.domain.currency import Currency, CurrencyType
from money_kernel.services.currency_provider import (
    ConfigurableCurrencyProvider,
    CurrencyProvider,
    CurrencyProviderChain,
    get_iso_currency_provider,
)
from money_kernel.services.exchange_rate_provider import (
    BaseCurrencyExchangeRateProvider,
    CachedExchangeRateProvider,
    ConfigurableExchangeRateProvider,
    ExchangeRateProvider,
    ExchangeRateProviderChain,
)
from money_kernel.services.money_factory import MoneyFactory

_logger = logging.getLogger("money_kernel.config")

CONFIG_ENV_VAR = "MONEY_KERNEL_CONFIG"


def load_configuration(path: Path | str | None = None) -> MoneyConfiguration:
    """
    Load and validate a configuration file.

    ``path`` defaults to the file named by the ``MONEY_KERNEL_CONFIG``
    environment variable.

    Raises:
        ConfigurationError: If no file is named, or the document is invalid.
        FileNotFoundError: If the file does not exist.
    """
    if path is None:
        env_path = os.environ.get(CONFIG_ENV_VAR)
        if not env_path:
            raise ConfigurationError(
                f"No configuration path given and {CONFIG_ENV_VAR} is not set"
            )
        path = env_path

    path = Path(path)
    config = parse_configuration(load_yaml_file(path))

    _logger.info(
        "MONEY_CONFIG_TRACE",
        extra={
            "trace_type": "MONEY_CONFIG_TRACE",
            "config_id": config.config_id,
            "config_version": config.version,
            "checksum": config.checksum,
            "path": str(path),
            "currency_count": len(config.currencies),
            "exchange_rate_count": len(config.exchange_rates),
        },
    )
    return config


def build_currency_provider(config: MoneyConfiguration) -> CurrencyProvider:
    """ISO currencies first, then the configured custom currencies."""
    iso = get_iso_currency_provider()
    if not config.currencies:
        return iso

    customs = ConfigurableCurrencyProvider(
        [
            Currency(
                code=c.code,
                numeric_code=c.numeric_code,
                name=c.name,
                default_fraction_digits=c.fraction_digits,
                currency_type=CurrencyType.CUSTOM,
            )
            for c in config.currencies
        ]
    )
    return CurrencyProviderChain([iso, customs])


def build_exchange_rate_provider(config: MoneyConfiguration) -> ExchangeRateProvider:
    """
    Configured rates, optionally completed by base-currency derivation.

    With ``base_currency`` set, direct rates win and any other pair is
    derived from the base-currency rates.  ``cache_exchange_rates`` wraps
    the result in a CachedExchangeRateProvider.
    """
    configured = ConfigurableExchangeRateProvider()
    for rate in config.exchange_rates:
        configured.set_exchange_rate(rate.source, rate.target, rate.rate)

    provider: ExchangeRateProvider = configured
    if config.base_currency is not None:
        provider = ExchangeRateProviderChain(
            [configured, BaseCurrencyExchangeRateProvider(configured, config.base_currency)]
        )
    if config.cache_exchange_rates:
        provider = CachedExchangeRateProvider(provider)
    return provider


def build_money_factory(config: MoneyConfiguration) -> MoneyFactory:
    return MoneyFactory(
        currency_provider=build_currency_provider(config),
        default_context=DefaultContext(),
        default_rounding_mode=config.default_rounding_mode,
    )


__all__ = [
    "CONFIG_ENV_VAR",
    "ConfigurationError",
    "CurrencyDef",
    "ExchangeRateDef",
    "MoneyConfiguration",
    "build_currency_provider",
    "build_exchange_rate_provider",
    "build_money_factory",
    "load_configuration",
]
