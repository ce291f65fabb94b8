"""
Money Kernel

Exact monetary arithmetic for Python:
- ISO 4217 and custom currencies
- Fixed-scale Money with explicit rounding (never silent)
- Exact RationalMoney for rounding-free intermediate results
- Cash rounding via contexts with a step
- Currency conversion through composable exchange rate providers
- Locale-aware formatting
"""

from money_kernel.domain import (
    AutoContext,
    CashContext,
    Context,
    Currency,
    CurrencyType,
    CustomContext,
    DefaultContext,
    ExactContext,
    Money,
    MoneyBag,
    PrecisionContext,
    RationalMoney,
    RoundingMode,
)

__version__ = "0.1.0"

__all__ = [
    "AutoContext",
    "CashContext",
    "Context",
    "Currency",
    "CurrencyType",
    "CustomContext",
    "DefaultContext",
    "ExactContext",
    "Money",
    "MoneyBag",
    "PrecisionContext",
    "RationalMoney",
    "RoundingMode",
]
