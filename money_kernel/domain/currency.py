"""Currency -- ISO 4217 and custom currency value object."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from money_kernel.exceptions import InvalidArgumentError

if TYPE_CHECKING:
    from money_kernel.services.currency_provider import CurrencyProvider


class CurrencyType(Enum):
    """Where a currency definition comes from."""

    ISO_CURRENT = "iso_current"
    ISO_HISTORICAL = "iso_historical"
    CUSTOM = "custom"


@dataclass(frozen=True, slots=True, eq=False)
class Currency:
    """
    Currency value object.

    Contract:
        Identified by its alphabetic ``code``. Two currencies are equal when
        their codes match, whatever their other attributes.

    Guarantees:
        - Immutable and hashable (hash of the code)
        - default_fraction_digits is never negative

    Non-goals:
        - Does NOT validate the code against ISO 4217; custom currencies
          (crypto, loyalty points) are first-class.
        - Does NOT know exchange rates.
    """

    code: str
    numeric_code: int
    name: str
    default_fraction_digits: int
    currency_type: CurrencyType = CurrencyType.CUSTOM

    def __post_init__(self) -> None:
        if self.default_fraction_digits < 0:
            raise InvalidArgumentError(
                "The default fraction digits cannot be less than zero."
            )

    @classmethod
    def of(cls, currency_code: str | int) -> Currency:
        """ISO currency by alphabetic or numeric code (interned instance)."""
        from money_kernel.services.currency_provider import get_iso_currency_provider

        return get_iso_currency_provider().get_currency(currency_code)

    @classmethod
    def of_numeric_code(cls, numeric_code: int) -> Currency:
        from money_kernel.services.currency_provider import get_iso_currency_provider

        return get_iso_currency_provider().get_currency_by_numeric_code(numeric_code)

    @classmethod
    def of_country(cls, country_code: str) -> Currency:
        """The single ISO currency in use in a country (ISO 3166 alpha-2)."""
        from money_kernel.services.currency_provider import get_iso_currency_provider

        return get_iso_currency_provider().get_currency_for_country(country_code)

    def is_equal_to(self, other: Currency | str) -> bool:
        other_code = other.code if isinstance(other, Currency) else other
        return other_code == self.code

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Currency):
            return NotImplemented
        return self.code == other.code

    def __hash__(self) -> int:
        return hash(self.code)

    def __str__(self) -> str:
        return self.code

    def __repr__(self) -> str:
        return f"Currency({self.code!r})"


def resolve_currency(
    currency: Currency | str | int,
    provider: CurrencyProvider | None = None,
) -> Currency:
    """
    Turn a Currency, alphabetic code or numeric code into a Currency.

    Codes are looked up in ``provider``, defaulting to the shared ISO
    provider.

    Raises:
        UnknownCurrencyError: If the code is not known to the provider.
    """
    if isinstance(currency, Currency):
        return currency
    if provider is None:
        from money_kernel.services.currency_provider import get_iso_currency_provider

        provider = get_iso_currency_provider()
    return provider.get_currency(currency)
