"""
MoneyConfiguration schema.

The human-authored configuration artifact: custom currencies, configured
exchange rates and project-wide defaults.  YAML files are parsed into
these types by the loader; the builders in ``money_config`` turn them
into kernel providers and factories.
"""

from __future__ import annotations

from dataclasses import dataclass

# ---------------------------------------------------------------------------
# Currencies
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CurrencyDef:
    """A custom (non-ISO) currency, e.g. a crypto asset or loyalty points."""

    code: str
    name: str
    fraction_digits: int
    numeric_code: int = 0


# ---------------------------------------------------------------------------
# Exchange rates
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ExchangeRateDef:
    """One directional rate: ``source amount * rate = target amount``."""

    source: str
    target: str
    rate: str  # exact decimal or "n/d" text, never a float


# ---------------------------------------------------------------------------
# Root
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class MoneyConfiguration:
    """Complete, validated configuration."""

    config_id: str
    version: int
    currencies: tuple[CurrencyDef, ...] = ()
    exchange_rates: tuple[ExchangeRateDef, ...] = ()
    base_currency: str | None = None
    default_rounding_mode: str = "UNNECESSARY"
    cache_exchange_rates: bool = False
    checksum: str = ""
