"""
Unit tests for Currency and the ISO currency tables.

Verifies:
- Equality and hashing by code
- ISO lookups by code, numeric code and country
- Instance interning
- Custom currency construction rules
"""

import pytest

from money_kernel.domain.currency import Currency, CurrencyType, resolve_currency
from money_kernel.exceptions import InvalidArgumentError, UnknownCurrencyError


class TestCurrencyValueObject:
    """Tests for the Currency dataclass itself."""

    def test_equality_by_code(self, bitcoin):
        other = Currency("BTC", 999, "Another name", 2)
        assert bitcoin == other
        assert hash(bitcoin) == hash(other)

    def test_inequality(self, bitcoin):
        assert bitcoin != Currency.of("EUR")

    def test_str_is_code(self, bitcoin):
        assert str(bitcoin) == "BTC"
        assert repr(bitcoin) == "Currency('BTC')"

    def test_is_equal_to_code(self, bitcoin):
        assert bitcoin.is_equal_to("BTC")
        assert bitcoin.is_equal_to(Currency("BTC", 0, "Bitcoin", 8))
        assert not bitcoin.is_equal_to("ETH")

    def test_negative_fraction_digits_rejected(self):
        with pytest.raises(InvalidArgumentError):
            Currency("XYZ", 0, "Broken", -1)

    def test_default_type_is_custom(self):
        assert Currency("PTS", 0, "Points", 0).currency_type is CurrencyType.CUSTOM

    def test_immutable(self, bitcoin):
        with pytest.raises(AttributeError):
            bitcoin.code = "ETH"


class TestIsoLookups:
    """Tests for Currency.of and friends (shared ISO provider)."""

    def test_of_code(self):
        eur = Currency.of("EUR")
        assert eur.code == "EUR"
        assert eur.numeric_code == 978
        assert eur.name == "Euro"
        assert eur.default_fraction_digits == 2
        assert eur.currency_type is CurrencyType.ISO_CURRENT

    def test_of_numeric_code(self):
        assert Currency.of(840).code == "USD"
        assert Currency.of_numeric_code(392).code == "JPY"

    @pytest.mark.parametrize(
        ("code", "digits"),
        [("JPY", 0), ("KWD", 3), ("CLF", 4), ("USD", 2)],
    )
    def test_fraction_digits(self, code, digits):
        assert Currency.of(code).default_fraction_digits == digits

    def test_interned(self):
        assert Currency.of("GBP") is Currency.of("GBP")
        assert Currency.of("GBP") is Currency.of(826)

    def test_unknown_code(self):
        with pytest.raises(UnknownCurrencyError) as exc_info:
            Currency.of("XXY")
        assert exc_info.value.currency_code == "XXY"
        assert exc_info.value.code == "UNKNOWN_CURRENCY"

    def test_unknown_numeric_code(self):
        with pytest.raises(UnknownCurrencyError):
            Currency.of(1)

    def test_of_country(self):
        assert Currency.of_country("FR").code == "EUR"
        assert Currency.of_country("JP").code == "JPY"
        assert Currency.of_country("NO").code == "NOK"

    def test_of_country_several_currencies(self):
        with pytest.raises(UnknownCurrencyError, match="CHE, CHF, CHW"):
            Currency.of_country("CH")

    def test_of_country_unknown(self):
        with pytest.raises(UnknownCurrencyError):
            Currency.of_country("XX")


class TestResolveCurrency:
    def test_passthrough(self, bitcoin):
        assert resolve_currency(bitcoin) is bitcoin

    def test_code(self):
        assert resolve_currency("USD") is Currency.of("USD")

    def test_custom_provider(self, custom_provider, bitcoin):
        assert resolve_currency("BTC", custom_provider) == bitcoin

    def test_custom_provider_unknown(self, custom_provider):
        with pytest.raises(UnknownCurrencyError):
            resolve_currency("USD", custom_provider)
