"""
AbstractMoney -- behaviour shared by Money and RationalMoney.

Responsibility:
    Currency-checked operand extraction and the comparison family
    (``compare_to``, ``is_less_than`` ... and the ``< <= > >=`` operators),
    plus sign predicates.  Both monetary types hold an exact ``amount``
    and a ``currency``; everything here works on the exact rational value
    of the amount.

Invariants enforced:
    - A monetary operand in another currency raises CurrencyMismatchError,
      never a silent conversion.
    - Comparisons never round.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from fractions import Fraction
from typing import TYPE_CHECKING

from money_kernel.domain.numbers import NumberLike, RoundingMode, compare, to_rational
from money_kernel.exceptions import CurrencyMismatchError

if TYPE_CHECKING:
    from money_kernel.domain.context import Context
    from money_kernel.domain.currency import Currency
    from money_kernel.domain.money import Money


class AbstractMoney(ABC):
    """Base class for monetary amounts tied to a single Currency."""

    __slots__ = ()

    currency: Currency

    @abstractmethod
    def to_fraction(self) -> Fraction:
        """The exact amount as a Fraction."""

    def _operand(self, that: AbstractMoney | NumberLike) -> Fraction:
        if isinstance(that, AbstractMoney):
            if that.currency != self.currency:
                raise CurrencyMismatchError(self.currency.code, that.currency.code)
            return that.to_fraction()
        return to_rational(that)

    def to(
        self,
        context: Context,
        rounding_mode: RoundingMode | str = RoundingMode.UNNECESSARY,
    ) -> Money:
        """
        Materialise as a Money in the given context.

        Raises:
            RoundingNecessaryError: If the context needs rounding and
                ``rounding_mode`` is UNNECESSARY.
        """
        from money_kernel.domain.money import Money

        return Money.create(self.to_fraction(), self.currency, context, rounding_mode)

    # -- sign ----------------------------------------------------------------

    @property
    def sign(self) -> int:
        return compare(self.to_fraction(), Fraction(0))

    def is_zero(self) -> bool:
        return self.sign == 0

    def is_positive(self) -> bool:
        return self.sign > 0

    def is_positive_or_zero(self) -> bool:
        return self.sign >= 0

    def is_negative(self) -> bool:
        return self.sign < 0

    def is_negative_or_zero(self) -> bool:
        return self.sign <= 0

    # -- comparison ----------------------------------------------------------

    def compare_to(self, that: AbstractMoney | NumberLike) -> int:
        """
        Three-way comparison: -1, 0 or 1.

        Raises:
            CurrencyMismatchError: If ``that`` is money in another currency.
        """
        return compare(self.to_fraction(), self._operand(that))

    def is_equal_to(self, that: AbstractMoney | NumberLike) -> bool:
        return self.compare_to(that) == 0

    def is_less_than(self, that: AbstractMoney | NumberLike) -> bool:
        return self.compare_to(that) < 0

    def is_less_than_or_equal_to(self, that: AbstractMoney | NumberLike) -> bool:
        return self.compare_to(that) <= 0

    def is_greater_than(self, that: AbstractMoney | NumberLike) -> bool:
        return self.compare_to(that) > 0

    def is_greater_than_or_equal_to(self, that: AbstractMoney | NumberLike) -> bool:
        return self.compare_to(that) >= 0

    def __lt__(self, other: object) -> bool:
        return self.is_less_than(other)  # type: ignore[arg-type]

    def __le__(self, other: object) -> bool:
        return self.is_less_than_or_equal_to(other)  # type: ignore[arg-type]

    def __gt__(self, other: object) -> bool:
        return self.is_greater_than(other)  # type: ignore[arg-type]

    def __ge__(self, other: object) -> bool:
        return self.is_greater_than_or_equal_to(other)  # type: ignore[arg-type]
