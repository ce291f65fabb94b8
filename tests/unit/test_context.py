"""
Unit tests for the Context family.

Verifies:
- Scale selection per context
- Cash step rounding
- Eager validation of scale and step
- Exact contexts never round
- Value equality of contexts
"""

from decimal import Decimal
from fractions import Fraction

import pytest

from money_kernel.domain.context import (
    AutoContext,
    CashContext,
    CustomContext,
    DefaultContext,
    ExactContext,
    PrecisionContext,
    collapse,
)
from money_kernel.domain.currency import Currency
from money_kernel.domain.numbers import RoundingMode
from money_kernel.exceptions import InvalidArgumentError, RoundingNecessaryError


@pytest.fixture
def usd():
    return Currency.of("USD")


@pytest.fixture
def jpy():
    return Currency.of("JPY")


class TestCollapse:
    def test_step_one(self):
        assert collapse(Fraction("1.234"), 2, 1, RoundingMode.DOWN) == Decimal("1.23")

    def test_step_result_is_multiple_of_step(self):
        result = collapse(Fraction("1.23"), 2, 5, RoundingMode.HALF_UP)
        assert str(result) == "1.25"

    def test_step_larger_than_scale_unit(self):
        # CZK-style whole units at scale 2
        assert str(collapse(Fraction("12.49"), 2, 100, RoundingMode.HALF_UP)) == "12.00"
        assert str(collapse(Fraction("12.50"), 2, 100, RoundingMode.HALF_UP)) == "13.00"


class TestDefaultContext:
    def test_uses_currency_scale(self, usd, jpy):
        ctx = DefaultContext()
        assert str(ctx.apply_to("1.5", usd)) == "1.50"
        assert str(ctx.apply_to("150", jpy)) == "150"

    def test_rounding_needed(self, usd):
        with pytest.raises(RoundingNecessaryError):
            DefaultContext().apply_to("1.234", usd)

    def test_rounding_mode_applied(self, usd):
        assert str(DefaultContext().apply_to("1.235", usd, RoundingMode.HALF_EVEN)) == "1.24"

    def test_attributes(self):
        ctx = DefaultContext()
        assert ctx.step == 1
        assert ctx.is_fixed_scale

    def test_equality(self):
        assert DefaultContext() == DefaultContext()


class TestCashContext:
    def test_round_down_to_five_cents(self, usd):
        assert str(CashContext(5).apply_to("3.37", usd, RoundingMode.DOWN)) == "3.35"

    def test_round_up_to_five_cents(self, usd):
        assert str(CashContext(5).apply_to("3.37", usd, RoundingMode.UP)) == "3.40"

    def test_exact_multiple_needs_no_mode(self, usd):
        assert str(CashContext(5).apply_to("3.35", usd)) == "3.35"

    def test_not_multiple_raises(self, usd):
        with pytest.raises(RoundingNecessaryError):
            CashContext(5).apply_to("3.37", usd)

    @pytest.mark.parametrize("step", [0, -5, 3, 7, 15])
    def test_invalid_step(self, step):
        with pytest.raises(InvalidArgumentError):
            CashContext(step)

    @pytest.mark.parametrize("step", [1, 2, 5, 10, 20, 25, 50, 100])
    def test_valid_step(self, step):
        assert CashContext(step).step == step

    def test_equality(self):
        assert CashContext(5) == CashContext(5)
        assert CashContext(5) != CashContext(10)
        assert hash(CashContext(5)) == hash(CashContext(5))


class TestCustomContext:
    def test_scale_independent_of_currency(self, jpy):
        assert str(CustomContext(2).apply_to("150", jpy)) == "150.00"

    def test_scale_and_step(self, usd):
        ctx = CustomContext(4, 25)
        assert str(ctx.apply_to("1.00013", usd, RoundingMode.HALF_UP)) == "1.0000"
        assert str(ctx.apply_to("1.00013", usd, RoundingMode.UP)) == "1.0025"

    def test_negative_scale(self):
        with pytest.raises(InvalidArgumentError, match="Invalid scale: -1"):
            CustomContext(-1)

    def test_step_below_one(self):
        with pytest.raises(InvalidArgumentError, match="Invalid step: 0"):
            CustomContext(2, 0)

    def test_step_incompatible_with_scale(self):
        with pytest.raises(InvalidArgumentError):
            CustomContext(2, 3)

    def test_step_multiple_of_power(self):
        assert CustomContext(1, 100).step == 100

    def test_precision_alias(self):
        assert PrecisionContext is CustomContext

    def test_equality(self):
        assert CustomContext(2) == CustomContext(2, 1)
        assert CustomContext(2) != CustomContext(3)


class TestExactContexts:
    @pytest.mark.parametrize("context_type", [ExactContext, AutoContext])
    def test_terminating(self, context_type, usd):
        assert str(context_type().apply_to(Fraction(1, 8), usd)) == "0.125"

    @pytest.mark.parametrize("context_type", [ExactContext, AutoContext])
    def test_non_terminating(self, context_type, usd):
        with pytest.raises(RoundingNecessaryError):
            context_type().apply_to(Fraction(1, 3), usd)

    @pytest.mark.parametrize("context_type", [ExactContext, AutoContext])
    def test_rounding_mode_rejected(self, context_type, usd):
        with pytest.raises(InvalidArgumentError, match="UNNECESSARY"):
            context_type().apply_to("1", usd, RoundingMode.HALF_UP)

    def test_auto_strips_trailing_zeros(self, usd):
        assert str(AutoContext().apply_to("1.50", usd)) == "1.5"

    def test_whole_number(self, usd):
        assert str(ExactContext().apply_to("100.00", usd)) == "100"

    def test_not_fixed_scale(self):
        assert not ExactContext().is_fixed_scale
        assert not AutoContext().is_fixed_scale
        assert ExactContext().step == 1
