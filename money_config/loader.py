"""
Configuration Loader (``money_config.loader``).

Responsibility
--------------
Loads a YAML configuration file and parses it into the frozen dataclasses
of ``money_config.schema``.  Runtime callers go through
``money_config.load_configuration()``.

Invariants enforced
-------------------
* Every parse error raises ``ConfigurationError`` naming the offending
  entry; there are no silent defaults for required fields.
* Rates are never floats: a rate must be written as a quoted decimal, an
  integer or an ``"n/d"`` fraction.
* ``compute_checksum`` produces a deterministic SHA-256 hash of the raw
  document for change detection.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Invalid or missing values  -> ``ConfigurationError``.
"""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any

import yaml

from money_config.schema import CurrencyDef, ExchangeRateDef, MoneyConfiguration
from money_kernel.domain.numbers import RoundingMode, to_rational
from money_kernel.exceptions import MoneyError


class ConfigurationError(MoneyError):
    """The configuration document is invalid."""

    code: str = "CONFIGURATION_INVALID"


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path) as f:
        return yaml.safe_load(f) or {}


def _require(data: dict[str, Any], key: str, where: str) -> Any:
    if key not in data or data[key] is None:
        raise ConfigurationError(f"{where}: missing required key {key!r}")
    return data[key]


def parse_currency(data: dict[str, Any]) -> CurrencyDef:
    """Parse a CurrencyDef from a dict."""
    code = str(_require(data, "code", "currency"))
    where = f"currency {code}"
    fraction_digits = _require(data, "fraction_digits", where)
    if not isinstance(fraction_digits, int) or fraction_digits < 0:
        raise ConfigurationError(f"{where}: fraction_digits must be a non-negative integer")
    return CurrencyDef(
        code=code,
        name=str(data.get("name", code)),
        fraction_digits=fraction_digits,
        numeric_code=int(data.get("numeric_code", 0)),
    )


def parse_exchange_rate(data: dict[str, Any]) -> ExchangeRateDef:
    """
    Parse an ExchangeRateDef from a dict.

    Raises:
        ConfigurationError: if the rate is a float, malformed, or not
            strictly positive.
    """
    source = str(_require(data, "source", "exchange rate"))
    target = str(_require(data, "target", "exchange rate"))
    where = f"exchange rate {source}->{target}"
    rate = _require(data, "rate", where)

    if isinstance(rate, float):
        raise ConfigurationError(f"{where}: write the rate as a quoted string, not a float")
    try:
        value = to_rational(rate if isinstance(rate, int) else str(rate))
    except (MoneyError, TypeError) as e:
        raise ConfigurationError(f"{where}: invalid rate {rate!r}") from e
    if value <= 0:
        raise ConfigurationError(f"{where}: rate must be positive")

    return ExchangeRateDef(source=source, target=target, rate=str(rate))


def parse_configuration(data: dict[str, Any], checksum: str | None = None) -> MoneyConfiguration:
    """
    Parse a whole configuration document.

    ``checksum`` defaults to ``compute_checksum(data)``.
    """
    rounding_mode = str(data.get("default_rounding_mode", RoundingMode.UNNECESSARY.value))
    try:
        RoundingMode(rounding_mode)
    except ValueError as e:
        raise ConfigurationError(f"unknown default_rounding_mode {rounding_mode!r}") from e

    currencies = tuple(parse_currency(c) for c in data.get("currencies") or ())
    codes = [c.code for c in currencies]
    duplicates = sorted({code for code in codes if codes.count(code) > 1})
    if duplicates:
        raise ConfigurationError(f"duplicate currency codes: {', '.join(duplicates)}")

    base_currency = data.get("base_currency")

    return MoneyConfiguration(
        config_id=str(data.get("config_id", "default")),
        version=int(data.get("version", 1)),
        currencies=currencies,
        exchange_rates=tuple(parse_exchange_rate(r) for r in data.get("exchange_rates") or ()),
        base_currency=str(base_currency) if base_currency is not None else None,
        default_rounding_mode=RoundingMode(rounding_mode).name,
        cache_exchange_rates=bool(data.get("cache_exchange_rates", False)),
        checksum=checksum if checksum is not None else compute_checksum(data),
    )


def compute_checksum(data: dict[str, Any]) -> str:
    """
    Compute SHA-256 checksum of canonical JSON serialization.

    Identical ``data`` always produces identical checksums.
    """
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()
