"""
Property-based tests for the money kernel.

Properties checked:
- Arithmetic keeps the receiver's scale
- Allocation and splitting never create or lose money
- Money.parse(str(m)) == m, scale included
- Rounding a value that already fits is the identity under every mode
- Cash contexts always produce multiples of the step
- RationalMoney chains are exact
"""

from decimal import Decimal
from fractions import Fraction

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from money_kernel.domain.context import CashContext
from money_kernel.domain.currency import Currency
from money_kernel.domain.money import Money
from money_kernel.domain.numbers import RoundingMode, rational_to_scale
from money_kernel.domain.rational_money import RationalMoney

pytestmark = pytest.mark.slow

CURRENCIES = ["USD", "EUR", "JPY", "BHD", "CLF"]

unscaled_amounts = st.integers(min_value=-10**12, max_value=10**12)
scales = st.integers(min_value=0, max_value=6)
ratios = st.lists(st.integers(min_value=0, max_value=1000), min_size=1, max_size=10).filter(
    lambda r: sum(r) > 0
)
rounding_modes = st.sampled_from(list(RoundingMode))


@st.composite
def monies(draw, scale=None):
    code = draw(st.sampled_from(CURRENCIES))
    money_scale = draw(scales) if scale is None else scale
    unscaled = draw(unscaled_amounts)
    return Money.of(Fraction(unscaled, 10**money_scale), code, scale=money_scale)


class TestScaleProperties:
    @given(money=monies(), other=unscaled_amounts)
    def test_plus_minus_keep_scale(self, money, other):
        # an integer operand always fits the receiver's scale
        assert money.plus(other).scale == money.scale
        assert money.minus(other).scale == money.scale

    @given(money=monies(), factor=st.integers(min_value=-1000, max_value=1000))
    def test_integer_multiplication_keeps_scale(self, money, factor):
        result = money.multiplied_by(factor)
        assert result.scale == money.scale
        assert result.to_fraction() == money.to_fraction() * factor

    @given(money=monies(), divisor=st.integers(min_value=1, max_value=1000), mode=rounding_modes)
    def test_division_rounds_to_scale(self, money, divisor, mode):
        if mode is RoundingMode.UNNECESSARY:
            return
        result = money.divided_by(divisor, mode)
        assert result.scale == money.scale
        # never more than one unit of the last digit away
        assert abs(result.to_fraction() - money.to_fraction() / divisor) < Fraction(1, 10**money.scale)


class TestAllocationProperties:
    @given(money=monies(), ratio_list=ratios)
    def test_allocate_sums_to_original(self, money, ratio_list):
        parts = money.allocate(*ratio_list)
        assert len(parts) == len(ratio_list)
        assert Money.total(*parts).is_equal_to(money)
        assert all(part.scale == money.scale for part in parts)

    @given(money=monies(), ratio_list=ratios)
    def test_allocate_with_remainder_sums_to_original(self, money, ratio_list):
        parts = money.allocate_with_remainder(*ratio_list)
        assert len(parts) == len(ratio_list) + 1
        assert Money.total(*parts).is_equal_to(money)

    @given(money=monies(), parts=st.integers(min_value=1, max_value=50))
    def test_split_parts_differ_by_at_most_one_unit(self, money, parts):
        pieces = money.split(parts)
        assert Money.total(*pieces).is_equal_to(money)
        unscaled = [piece.unscaled_amount for piece in pieces]
        assert max(unscaled) - min(unscaled) <= 1


class TestRoundTripProperties:
    @given(money=monies())
    def test_parse_round_trip(self, money):
        parsed = Money.parse(str(money))
        assert parsed == money
        assert parsed.scale == money.scale

    @given(unscaled=unscaled_amounts, scale=scales, mode=rounding_modes)
    def test_rounding_fitting_value_is_identity(self, unscaled, scale, mode):
        value = Fraction(unscaled, 10**scale)
        result = rational_to_scale(value, scale, mode)
        assert Fraction(result) == value
        assert result == Decimal(unscaled).scaleb(-scale)

    @given(
        unscaled=unscaled_amounts,
        step=st.sampled_from([2, 5, 10, 20, 25, 50, 100]),
        mode=rounding_modes,
    )
    def test_cash_context_yields_multiples_of_step(self, unscaled, step, mode):
        if mode is RoundingMode.UNNECESSARY:
            return
        usd = Currency.of("USD")
        amount = CashContext(step).apply_to(Fraction(unscaled, 1000), usd, mode)
        money = Money(amount, usd, step)
        assert money.scale == 2
        assert money.unscaled_amount % step == 0


class TestRationalProperties:
    @settings(max_examples=50)
    @given(
        numerator=st.integers(min_value=-10**9, max_value=10**9),
        divisor=st.integers(min_value=1, max_value=10**6),
    )
    def test_divide_then_multiply_is_exact(self, numerator, divisor):
        money = RationalMoney.of(numerator, "EUR")
        assert money.divided_by(divisor).multiplied_by(divisor) == money
