"""
CurrencyProvider family -- resolve currency codes to Currency objects.

Responsibility:
    Maps alphabetic codes (and, for ISO, numeric codes and countries) to
    ``Currency`` instances.  ``ISOCurrencyProvider`` serves the packaged
    ISO 4217 tables; ``ConfigurableCurrencyProvider`` holds custom
    currencies registered at runtime; ``CurrencyProviderChain`` combines
    several providers in priority order.

Architecture position:
    Kernel > Services.  May import from domain/ and the packaged data/
    tables.  Domain value objects reach the shared ISO provider only
    through ``get_iso_currency_provider()``.

Invariants enforced:
    - The ISO tables are read at most once per provider instance, under a
      lock, on first use.
    - Repeated lookups of the same ISO code return the same instance.
    - A chain only falls through on ``UnknownCurrencyError``; any other
      error from a delegate propagates unchanged.

Failure modes:
    - UnknownCurrencyError for an unknown code, numeric code or country,
      or for a country that uses zero or several currencies.
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from importlib import resources

import yaml

from money_kernel.domain.currency import Currency, CurrencyType
from money_kernel.exceptions import UnknownCurrencyError
from money_kernel.logging_config import get_logger

logger = get_logger("services.currency_provider")

_DATA_PACKAGE = "money_kernel.data"
_CURRENCIES_FILE = "iso_currencies.yaml"
_COUNTRIES_FILE = "country_currencies.yaml"


class CurrencyProvider(ABC):
    """
    Source of Currency instances.

    Contract:
        ``get_currency`` returns the Currency for a code or raises
        ``UnknownCurrencyError``; it never returns None.
    """

    @abstractmethod
    def get_currency(self, currency_code: str | int) -> Currency:
        """
        Raises:
            UnknownCurrencyError: If the code is not known to this provider.
        """

    @abstractmethod
    def get_available_currencies(self) -> dict[str, Currency]:
        """All currencies this provider can return, keyed by code."""


def _read_table(file_name: str) -> dict:
    text = resources.files(_DATA_PACKAGE).joinpath(file_name).read_text(encoding="utf-8")
    return yaml.safe_load(text)


class ISOCurrencyProvider(CurrencyProvider):
    """
    Currencies from the packaged ISO 4217 tables.

    Lookups accept an alphabetic code (``"EUR"``) or a numeric code
    (``978``).  Country lookups use ISO 3166-1 alpha-2 codes.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._loaded = False
        self._currency_data: dict[str, tuple[int, str, int]] = {}
        self._numeric_to_code: dict[int, str] = {}
        self._country_to_codes: dict[str, list[str]] = {}
        self._currencies: dict[str, Currency] = {}

    def _ensure_loaded(self) -> None:
        if self._loaded:
            return
        with self._lock:
            if self._loaded:
                return
            currencies = _read_table(_CURRENCIES_FILE)["currencies"]
            countries = _read_table(_COUNTRIES_FILE)["countries"]

            for code, entry in currencies.items():
                numeric = int(entry["numeric"])
                self._currency_data[code] = (
                    numeric,
                    entry["name"],
                    int(entry["fraction_digits"]),
                )
                self._numeric_to_code[numeric] = code

            for country, codes in countries.items():
                self._country_to_codes[str(country)] = list(codes)

            self._loaded = True

        logger.debug(
            "iso_currency_tables_loaded",
            extra={
                "currency_count": len(self._currency_data),
                "country_count": len(self._country_to_codes),
            },
        )

    def _intern(self, code: str) -> Currency:
        currency = self._currencies.get(code)
        if currency is not None:
            return currency
        with self._lock:
            currency = self._currencies.get(code)
            if currency is None:
                numeric, name, digits = self._currency_data[code]
                currency = Currency(
                    code=code,
                    numeric_code=numeric,
                    name=name,
                    default_fraction_digits=digits,
                    currency_type=CurrencyType.ISO_CURRENT,
                )
                self._currencies[code] = currency
        return currency

    def get_currency(self, currency_code: str | int) -> Currency:
        """
        Return the ISO currency for an alphabetic or numeric code.

        Raises:
            UnknownCurrencyError: If the code is not an ISO 4217 code.
        """
        if isinstance(currency_code, int) and not isinstance(currency_code, bool):
            return self.get_currency_by_numeric_code(currency_code)

        self._ensure_loaded()
        if currency_code not in self._currency_data:
            raise UnknownCurrencyError.unknown_currency(currency_code)
        return self._intern(currency_code)

    def get_currency_by_numeric_code(self, numeric_code: int) -> Currency:
        self._ensure_loaded()
        code = self._numeric_to_code.get(numeric_code)
        if code is None:
            raise UnknownCurrencyError.unknown_currency(numeric_code)
        return self._intern(code)

    def get_currencies_for_country(self, country_code: str) -> list[Currency]:
        """Currencies in use in a country; empty for an unknown country."""
        self._ensure_loaded()
        codes = self._country_to_codes.get(country_code, [])
        return [self._intern(code) for code in codes if code in self._currency_data]

    def get_currency_for_country(self, country_code: str) -> Currency:
        """
        The single currency in use in a country.

        Raises:
            UnknownCurrencyError: If the country uses no currency, or more
                than one (e.g. ``"CH"``: CHE, CHF, CHW).
        """
        currencies = self.get_currencies_for_country(country_code)
        if not currencies:
            raise UnknownCurrencyError.no_currency_for_country(country_code)
        if len(currencies) > 1:
            raise UnknownCurrencyError.no_single_currency_for_country(
                country_code, [c.code for c in currencies]
            )
        return currencies[0]

    def get_available_currencies(self) -> dict[str, Currency]:
        self._ensure_loaded()
        return {code: self._intern(code) for code in self._currency_data}


_shared_iso_provider: ISOCurrencyProvider | None = None
_shared_lock = threading.Lock()


def get_iso_currency_provider() -> ISOCurrencyProvider:
    """The process-wide ISO provider, created on first call."""
    global _shared_iso_provider
    if _shared_iso_provider is None:
        with _shared_lock:
            if _shared_iso_provider is None:
                _shared_iso_provider = ISOCurrencyProvider()
    return _shared_iso_provider


class ConfigurableCurrencyProvider(CurrencyProvider):
    """
    Runtime registry of currencies, typically custom ones.

    Not thread-safe for concurrent mutation; configure before sharing.
    """

    def __init__(self, currencies: list[Currency] | None = None):
        self._currencies: dict[str, Currency] = {}
        for currency in currencies or ():
            self.add_currency(currency)

    def add_currency(self, currency: Currency) -> ConfigurableCurrencyProvider:
        self._currencies[currency.code] = currency
        return self

    def remove_currency(self, currency: Currency | str) -> ConfigurableCurrencyProvider:
        code = currency.code if isinstance(currency, Currency) else currency
        self._currencies.pop(code, None)
        return self

    def get_currency(self, currency_code: str | int) -> Currency:
        if isinstance(currency_code, int):
            for currency in self._currencies.values():
                if currency.numeric_code == currency_code:
                    return currency
            raise UnknownCurrencyError.unknown_currency(currency_code)

        currency = self._currencies.get(currency_code)
        if currency is None:
            raise UnknownCurrencyError.unknown_currency(currency_code)
        return currency

    def get_available_currencies(self) -> dict[str, Currency]:
        return dict(self._currencies)


class CurrencyProviderChain(CurrencyProvider):
    """
    Tries each delegate in order and returns the first match.

    Guarantees:
        - Only ``UnknownCurrencyError`` moves the lookup to the next
          delegate.
        - ``get_available_currencies`` merges all delegates, the earlier
          provider winning on duplicate codes.
    """

    def __init__(self, providers: list[CurrencyProvider] | None = None):
        self._providers: list[CurrencyProvider] = list(providers or ())

    def add_currency_provider(self, provider: CurrencyProvider) -> CurrencyProviderChain:
        self.remove_currency_provider(provider)
        self._providers.append(provider)
        return self

    def remove_currency_provider(self, provider: CurrencyProvider) -> CurrencyProviderChain:
        self._providers = [p for p in self._providers if p is not provider]
        return self

    def get_currency(self, currency_code: str | int) -> Currency:
        for provider in self._providers:
            try:
                return provider.get_currency(currency_code)
            except UnknownCurrencyError:
                logger.debug(
                    "currency_provider_fallthrough",
                    extra={
                        "currency_code": currency_code,
                        "provider": type(provider).__name__,
                    },
                )
        raise UnknownCurrencyError.unknown_currency(currency_code)

    def get_available_currencies(self) -> dict[str, Currency]:
        merged: dict[str, Currency] = {}
        for provider in self._providers:
            for code, currency in provider.get_available_currencies().items():
                merged.setdefault(code, currency)
        return merged
