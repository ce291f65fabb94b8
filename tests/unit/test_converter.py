"""Unit tests for CurrencyConverter."""

from fractions import Fraction

import pytest

from money_kernel.domain.context import CustomContext, ExactContext
from money_kernel.domain.money import Money
from money_kernel.domain.money_bag import MoneyBag
from money_kernel.domain.numbers import RoundingMode
from money_kernel.domain.rational_money import RationalMoney
from money_kernel.exceptions import CurrencyConversionError, RoundingNecessaryError
from money_kernel.logging_config import LogContext
from money_kernel.services.currency_converter import CurrencyConverter
from money_kernel.services.exchange_rate_provider import ExchangeRateProvider


class _FailingProvider(ExchangeRateProvider):
    def get_exchange_rate(self, source_currency_code, target_currency_code):
        raise AssertionError("provider must not be consulted")


class TestConvert:
    def test_convert(self, rate_provider):
        converter = CurrencyConverter(rate_provider)
        assert str(converter.convert(Money.of("10", "EUR"), "USD")) == "USD 11.00"

    def test_same_currency_returns_input(self):
        converter = CurrencyConverter(_FailingProvider())
        money = Money.of("1.5", "USD", scale=4)
        assert converter.convert(money, "USD") is money

    def test_rounding_required(self, rate_provider):
        converter = CurrencyConverter(rate_provider)
        with pytest.raises(RoundingNecessaryError):
            converter.convert(Money.of("0.01", "EUR"), "GBP")
        result = converter.convert(Money.of("0.01", "EUR"), "GBP", rounding_mode=RoundingMode.DOWN)
        assert str(result) == "GBP 0.00"

    def test_context_argument(self, rate_provider):
        converter = CurrencyConverter(rate_provider)
        result = converter.convert(Money.of("0.01", "EUR"), "GBP", ExactContext())
        assert str(result) == "GBP 0.0085"

    def test_converter_default_context(self, rate_provider):
        converter = CurrencyConverter(rate_provider, CustomContext(4))
        assert str(converter.convert(Money.of("0.01", "EUR"), "GBP")) == "GBP 0.0085"

    def test_rational_money_input(self, rate_provider):
        converter = CurrencyConverter(rate_provider)
        result = converter.convert(RationalMoney.of("1/11", "EUR"), "USD")
        assert str(result) == "USD 0.10"

    def test_same_currency_rational_goes_through_context(self):
        converter = CurrencyConverter(_FailingProvider())
        result = converter.convert(RationalMoney.of("1/4", "USD"), "USD", ExactContext())
        assert str(result) == "USD 0.25"

    def test_money_bag_input(self, rate_provider):
        bag = MoneyBag().add(Money.of("10", "EUR")).add(Money.of("2", "USD"))
        result = CurrencyConverter(rate_provider).convert(bag, "USD")
        assert str(result) == "USD 13.00"

    def test_missing_rate(self, rate_provider):
        with pytest.raises(CurrencyConversionError):
            CurrencyConverter(rate_provider).convert(Money.of("1", "GBP"), "JPY")

    def test_conversion_logged(self, rate_provider, captured_logs):
        CurrencyConverter(rate_provider).convert(Money.of("10", "EUR"), "USD")
        logs = [r for r in captured_logs() if r["message"] == "currency_converted"]
        assert len(logs) == 1
        assert logs[0]["source_currency"] == "EUR"
        assert logs[0]["target_currency"] == "USD"
        assert logs[0]["rate"] == "11/10"

    def test_conversion_records_carry_operation(self, rate_provider, captured_logs):
        LogContext.set(correlation_id="req-7")
        CurrencyConverter(rate_provider).convert(Money.of("10", "EUR"), "USD")
        record = next(r for r in captured_logs() if r["message"] == "currency_converted")
        assert record["operation"] == "currency_conversion"
        assert record["correlation_id"] == "req-7"
        # the binding ends with the call
        assert LogContext.get_all() == {"correlation_id": "req-7"}


class TestConvertToRational:
    def test_exact(self, rate_provider):
        result = CurrencyConverter(rate_provider).convert_to_rational(Money.of("1", "EUR"), "GBP")
        assert result.amount == Fraction(17, 20)
        assert result.currency.code == "GBP"

    def test_bag(self, rate_provider):
        bag = MoneyBag().add(Money.of("1", "USD")).add(Money.of("1", "EUR"))
        result = CurrencyConverter(rate_provider).convert_to_rational(bag, "EUR")
        assert result.amount == Fraction(19, 10)
