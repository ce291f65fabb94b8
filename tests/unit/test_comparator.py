"""Unit tests for MoneyComparator: directional, exact, cross-currency comparison."""

import pytest

from money_kernel.domain.money import Money
from money_kernel.exceptions import CurrencyConversionError
from money_kernel.services.exchange_rate_provider import ExchangeRateProvider
from money_kernel.services.money_comparator import MoneyComparator


class _FailingProvider(ExchangeRateProvider):
    def get_exchange_rate(self, source_currency_code, target_currency_code):
        raise AssertionError("provider must not be consulted")


class TestMoneyComparator:
    def test_same_currency_skips_provider(self):
        comparator = MoneyComparator(_FailingProvider())
        assert comparator.compare(Money.of("1", "USD"), Money.of("2", "USD")) == -1
        assert comparator.is_equal(Money.of("1", "USD"), Money.of("1.0", "USD", scale=1))

    def test_cross_currency(self, rate_provider):
        comparator = MoneyComparator(rate_provider)
        # 10 EUR = 11 USD
        assert comparator.is_equal(Money.of("10", "EUR"), Money.of("11", "USD"))
        assert comparator.is_greater(Money.of("10", "EUR"), Money.of("10.99", "USD"))
        assert comparator.is_less(Money.of("10", "EUR"), Money.of("11.01", "USD"))
        assert comparator.is_less_or_equal(Money.of("10", "EUR"), Money.of("11", "USD"))
        assert comparator.is_greater_or_equal(Money.of("10", "EUR"), Money.of("11", "USD"))

    def test_directional(self, rate_provider):
        """EUR->USD is 1.1 but USD->EUR is 0.9, so the two directions disagree."""
        comparator = MoneyComparator(rate_provider)
        eur = Money.of("10", "EUR")
        usd = Money.of("11", "USD")
        assert comparator.compare(eur, usd) == 0
        # 11 USD * 0.9 = 9.90 EUR
        assert comparator.compare(usd, eur) == -1

    def test_missing_rate(self, rate_provider):
        comparator = MoneyComparator(rate_provider)
        with pytest.raises(CurrencyConversionError):
            comparator.compare(Money.of("1", "GBP"), Money.of("1", "EUR"))

    def test_min_max(self, rate_provider):
        comparator = MoneyComparator(rate_provider)
        eur = Money.of("10", "EUR")
        jpy = Money.of("1500", "JPY")
        gbp = Money.of("9", "GBP")
        # EUR 10 is JPY 1600 and GBP 8.50
        assert comparator.min(eur, jpy) is jpy
        assert comparator.max(eur, gbp) is gbp

    def test_min_max_first_wins_ties(self, rate_provider):
        comparator = MoneyComparator(rate_provider)
        eur = Money.of("10", "EUR")
        usd = Money.of("11", "USD")
        assert comparator.min(eur, usd) is eur
        assert comparator.max(eur, usd) is eur

    def test_min_single(self, rate_provider):
        money = Money.of("1", "EUR")
        assert MoneyComparator(rate_provider).min(money) is money
