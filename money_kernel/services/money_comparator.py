"""
MoneyComparator -- compares monies across currencies without rounding.

Comparison is directional: ``compare(a, b)`` converts ``a`` into ``b``'s
currency with the rate a->b and compares exactly.  With non-reciprocal
rates ``compare(a, b)`` and ``-compare(b, a)`` can disagree.
"""

from __future__ import annotations

from money_kernel.domain.money import Money
from money_kernel.domain.numbers import compare
from money_kernel.services.exchange_rate_provider import ExchangeRateProvider


class MoneyComparator:
    """
    Currency-aware comparison of Money.

    Guarantees:
        - Same-currency comparisons never consult the provider.
        - ``min``/``max`` scan left to right; the first element wins ties.

    Raises (every method):
        CurrencyConversionError: If a needed rate is not available.
    """

    def __init__(self, provider: ExchangeRateProvider):
        self._provider = provider

    def compare(self, a: Money, b: Money) -> int:
        a_code = a.currency.code
        b_code = b.currency.code
        if a_code == b_code:
            return a.compare_to(b)

        rate = self._provider.get_exchange_rate(a_code, b_code)
        return compare(a.to_fraction() * rate, b.to_fraction())

    def is_equal(self, a: Money, b: Money) -> bool:
        return self.compare(a, b) == 0

    def is_less(self, a: Money, b: Money) -> bool:
        return self.compare(a, b) < 0

    def is_less_or_equal(self, a: Money, b: Money) -> bool:
        return self.compare(a, b) <= 0

    def is_greater(self, a: Money, b: Money) -> bool:
        return self.compare(a, b) > 0

    def is_greater_or_equal(self, a: Money, b: Money) -> bool:
        return self.compare(a, b) >= 0

    def min(self, money: Money, *monies: Money) -> Money:
        result = money
        for candidate in monies:
            if self.is_greater(result, candidate):
                result = candidate
        return result

    def max(self, money: Money, *monies: Money) -> Money:
        result = money
        for candidate in monies:
            if self.is_less(result, candidate):
                result = candidate
        return result
