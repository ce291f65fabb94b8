"""
Context family -- how an exact amount collapses to a fixed-scale Decimal.

Responsibility:
    A Context decides the scale (digits after the point) and the step
    (smallest increment, in units of that scale) of a monetary amount, and
    applies a RoundingMode to reach them.  Every Money is produced through
    a Context.

Architecture position:
    Kernel > Domain -- pure functions over numbers, no I/O.

Invariants enforced:
    - Collapse algorithm: for step 1 the amount is converted at scale; for
      step > 1 it is divided by the step, converted at scale, then
      multiplied back by the step, so the unscaled result is always a
      multiple of the step.
    - Scale and step are validated when the context is built, never
      lazily on first use.
    - ExactContext and AutoContext never round: any mode other than
      UNNECESSARY is rejected.

Failure modes:
    - InvalidArgumentError for a negative scale, a step below 1, a step
      incompatible with decimal rounding, or a rounding mode given to an
      exact context.
    - RoundingNecessaryError when UNNECESSARY is used and digits would be
      discarded, or when an exact context meets a non-terminating value.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal
from fractions import Fraction

from money_kernel.domain.currency import Currency
from money_kernel.domain.numbers import (
    NumberLike,
    RoundingMode,
    decimal_from_unscaled,
    is_cash_step,
    rational_to_exact_decimal,
    rational_to_scale,
    to_rational,
    unscaled_value,
)
from money_kernel.exceptions import InvalidArgumentError


def collapse(
    amount: Fraction,
    scale: int,
    step: int,
    rounding_mode: RoundingMode | str,
) -> Decimal:
    """Round ``amount`` to ``scale`` digits, in increments of ``step``."""
    if step == 1:
        return rational_to_scale(amount, scale, rounding_mode)
    stepped = rational_to_scale(amount / step, scale, rounding_mode)
    return decimal_from_unscaled(unscaled_value(stepped) * step, scale)


def step_fits_scale(scale: int, step: int) -> bool:
    """Whether ``step`` divides 10**scale or is a multiple of it."""
    power = 10**scale
    return power % step == 0 or step % power == 0


class Context(ABC):
    """
    Strategy that turns an exact amount into a Money-ready Decimal.

    Contract:
        ``apply_to`` returns a Decimal whose scale is determined by the
        context (and possibly the currency), rounded with the given mode.
        Every context exposes ``step``: the smallest increment, in units
        of the last digit (1 unless a cash step applies).
    """

    __slots__ = ()

    @abstractmethod
    def apply_to(
        self,
        amount: NumberLike,
        currency: Currency,
        rounding_mode: RoundingMode | str = RoundingMode.UNNECESSARY,
    ) -> Decimal:
        """
        Raises:
            RoundingNecessaryError: If rounding is needed under UNNECESSARY.
        """

    @property
    @abstractmethod
    def is_fixed_scale(self) -> bool:
        """True when every amount in this context shares one scale."""


@dataclass(frozen=True, slots=True)
class DefaultContext(Context):
    """Scale is the currency's default fraction digits, step 1."""

    def apply_to(
        self,
        amount: NumberLike,
        currency: Currency,
        rounding_mode: RoundingMode | str = RoundingMode.UNNECESSARY,
    ) -> Decimal:
        return collapse(
            to_rational(amount), currency.default_fraction_digits, 1, rounding_mode
        )

    @property
    def step(self) -> int:
        return 1

    @property
    def is_fixed_scale(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class CashContext(Context):
    """
    Currency default scale with a cash step.

    ``CashContext(5)`` on CHF gives amounts in multiples of 0.05; on CZK
    ``CashContext(100)`` gives whole korunas.
    """

    step: int

    def __post_init__(self) -> None:
        if not is_cash_step(self.step):
            raise InvalidArgumentError.invalid_step(self.step)

    def apply_to(
        self,
        amount: NumberLike,
        currency: Currency,
        rounding_mode: RoundingMode | str = RoundingMode.UNNECESSARY,
    ) -> Decimal:
        return collapse(
            to_rational(amount),
            currency.default_fraction_digits,
            self.step,
            rounding_mode,
        )

    @property
    def is_fixed_scale(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class CustomContext(Context):
    """Explicit scale and step, independent of the currency."""

    scale: int
    step: int = 1

    def __post_init__(self) -> None:
        if self.scale < 0:
            raise InvalidArgumentError.invalid_scale(self.scale)
        if self.step < 1:
            raise InvalidArgumentError.invalid_step(self.step)
        if not step_fits_scale(self.scale, self.step):
            raise InvalidArgumentError.invalid_step(self.step)

    def apply_to(
        self,
        amount: NumberLike,
        currency: Currency,
        rounding_mode: RoundingMode | str = RoundingMode.UNNECESSARY,
    ) -> Decimal:
        return collapse(to_rational(amount), self.scale, self.step, rounding_mode)

    @property
    def is_fixed_scale(self) -> bool:
        return True


PrecisionContext = CustomContext


def _require_unnecessary(context: Context, rounding_mode: RoundingMode | str) -> None:
    if RoundingMode(rounding_mode) is not RoundingMode.UNNECESSARY:
        raise InvalidArgumentError(
            f"{type(context).__name__} only supports RoundingMode.UNNECESSARY."
        )


@dataclass(frozen=True, slots=True)
class ExactContext(Context):
    """
    Keeps the amount exact at the smallest scale that represents it.

    ``1/8`` becomes ``0.125``; ``123/456`` raises RoundingNecessaryError.
    """

    def apply_to(
        self,
        amount: NumberLike,
        currency: Currency,
        rounding_mode: RoundingMode | str = RoundingMode.UNNECESSARY,
    ) -> Decimal:
        _require_unnecessary(self, rounding_mode)
        return rational_to_exact_decimal(to_rational(amount))

    @property
    def step(self) -> int:
        return 1

    @property
    def is_fixed_scale(self) -> bool:
        return False


@dataclass(frozen=True, slots=True)
class AutoContext(Context):
    """Minimal exact scale, trailing zeros stripped ("1.50" -> "1.5")."""

    def apply_to(
        self,
        amount: NumberLike,
        currency: Currency,
        rounding_mode: RoundingMode | str = RoundingMode.UNNECESSARY,
    ) -> Decimal:
        _require_unnecessary(self, rounding_mode)
        return rational_to_exact_decimal(to_rational(amount))

    @property
    def step(self) -> int:
        return 1

    @property
    def is_fixed_scale(self) -> bool:
        return False
