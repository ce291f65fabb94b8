"""
DatabaseExchangeRateProvider -- exchange rates read from a SQL table.

Responsibility:
    Runs one parameterised SELECT per lookup against a table described by
    a ``DatabaseProviderConfiguration``.  Either side of the pair may be a
    column or a fixed code (a table that only holds EUR->X rates needs no
    source column).

Architecture position:
    Kernel > Services.  Uses SQLAlchemy Core (``text``) so any table
    layout works; the default layout is ``models.exchange_rate``.

Invariants enforced:
    - Table and column names are plain SQL identifiers, checked when the
      provider is built.  Values are always bound parameters.
    - Configuration errors surface at construction, never on first lookup.

Failure modes:
    - InvalidArgumentError for missing or contradictory configuration.
    - CurrencyConversionError when no row matches, or when a lookup asks
      for a currency other than a fixed one.
    - SQLAlchemy errors propagate unchanged: the query is blocking and is
      never retried.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import Decimal
from fractions import Fraction
from typing import Any

from sqlalchemy import text
from sqlalchemy.engine import Engine

from money_kernel.domain.numbers import to_rational
from money_kernel.exceptions import CurrencyConversionError, InvalidArgumentError
from money_kernel.logging_config import LogContext, get_logger
from money_kernel.services.exchange_rate_provider import ExchangeRateProvider

logger = get_logger("services.database_exchange_rate_provider")

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)?$")


@dataclass(frozen=True, slots=True)
class DatabaseProviderConfiguration:
    """
    Where the rates live.

    Exactly one of ``source_currency_column_name`` / ``source_currency_code``
    must be set, likewise for the target, and the two sides cannot both be
    fixed codes.  ``where_conditions`` is an extra SQL condition that may
    reference named parameters supplied through ``set_parameters``.
    """

    table_name: str | None = "exchange_rates"
    exchange_rate_column_name: str | None = "rate"
    source_currency_column_name: str | None = "source_currency"
    target_currency_column_name: str | None = "target_currency"
    source_currency_code: str | None = None
    target_currency_code: str | None = None
    where_conditions: str | None = None


def _identifier(value: str, field_name: str) -> str:
    if not _IDENTIFIER.match(value):
        raise InvalidArgumentError(f"Invalid configuration: {field_name} {value!r} is not a SQL identifier.")
    return value


def _to_rate(value: Any) -> Fraction:
    if isinstance(value, float):
        # SQLite hands back NUMERIC columns as REAL
        return to_rational(Decimal(repr(value)))
    if isinstance(value, (bytes, bytearray)):
        value = value.decode()
    return to_rational(value)


class DatabaseExchangeRateProvider(ExchangeRateProvider):
    """
    Reads rates with one SELECT per lookup.

    Usage:
        provider = DatabaseExchangeRateProvider(engine, DatabaseProviderConfiguration(
            table_name="rates",
            source_currency_code="EUR",
            target_currency_column_name="currency",
            where_conditions="year = :year",
        ))
        provider.set_parameters(year=2024)

    Wrap in a CachedExchangeRateProvider to avoid a query per conversion.
    """

    def __init__(self, engine: Engine, configuration: DatabaseProviderConfiguration | None = None):
        configuration = configuration or DatabaseProviderConfiguration()

        if configuration.table_name is None:
            raise InvalidArgumentError("Invalid configuration: table_name is not set.")
        if configuration.exchange_rate_column_name is None:
            raise InvalidArgumentError("Invalid configuration: exchange_rate_column_name is not set.")
        if configuration.source_currency_code is not None and configuration.target_currency_code is not None:
            raise InvalidArgumentError(
                "Invalid configuration: source_currency_code and target_currency_code cannot be both set."
            )

        conditions: list[str] = []
        if configuration.where_conditions is not None:
            conditions.append(f"({configuration.where_conditions})")

        if configuration.source_currency_code is None:
            if configuration.source_currency_column_name is None:
                raise InvalidArgumentError(
                    "Invalid configuration: one of source_currency_code or "
                    "source_currency_column_name must be set."
                )
            column = _identifier(configuration.source_currency_column_name, "source_currency_column_name")
            conditions.append(f"{column} = :source_currency_code")

        if configuration.target_currency_code is None:
            if configuration.target_currency_column_name is None:
                raise InvalidArgumentError(
                    "Invalid configuration: one of target_currency_code or "
                    "target_currency_column_name must be set."
                )
            column = _identifier(configuration.target_currency_column_name, "target_currency_column_name")
            conditions.append(f"{column} = :target_currency_code")

        table = _identifier(configuration.table_name, "table_name")
        rate_column = _identifier(configuration.exchange_rate_column_name, "exchange_rate_column_name")

        sql = f"SELECT {rate_column} FROM {table}"
        if conditions:
            sql += " WHERE " + " AND ".join(conditions)

        self._engine = engine
        self._configuration = configuration
        self._statement = text(sql)
        self._parameters: dict[str, Any] = {}

    @property
    def configuration(self) -> DatabaseProviderConfiguration:
        return self._configuration

    def set_parameters(self, **parameters: Any) -> DatabaseExchangeRateProvider:
        """Values for the named parameters used in ``where_conditions``."""
        self._parameters = dict(parameters)
        return self

    def get_exchange_rate(self, source_currency_code: str, target_currency_code: str) -> Fraction:
        """
        Raises:
            CurrencyConversionError: If the pair does not match a fixed
                currency, or no row is found.
        """
        with LogContext.bind(operation="database_exchange_rate_lookup"):
            return self._lookup(source_currency_code, target_currency_code)

    def _lookup(self, source_currency_code: str, target_currency_code: str) -> Fraction:
        configuration = self._configuration
        parameters = dict(self._parameters)

        if configuration.source_currency_code is not None:
            if source_currency_code != configuration.source_currency_code:
                raise CurrencyConversionError.exchange_rate_not_available(
                    source_currency_code,
                    target_currency_code,
                    f"source currency must be {configuration.source_currency_code}",
                )
        else:
            parameters["source_currency_code"] = source_currency_code

        if configuration.target_currency_code is not None:
            if target_currency_code != configuration.target_currency_code:
                raise CurrencyConversionError.exchange_rate_not_available(
                    source_currency_code,
                    target_currency_code,
                    f"target currency must be {configuration.target_currency_code}",
                )
        else:
            parameters["target_currency_code"] = target_currency_code

        with self._engine.connect() as connection:
            row = connection.execute(self._statement, parameters).first()

        if row is None:
            info = None
            if self._parameters:
                info = "parameters: " + ", ".join(
                    f"{name}={value!r}" for name, value in self._parameters.items()
                )
            logger.info(
                "database_exchange_rate_not_found",
                extra={
                    "source_currency": source_currency_code,
                    "target_currency": target_currency_code,
                    "table": configuration.table_name,
                },
            )
            raise CurrencyConversionError.exchange_rate_not_available(
                source_currency_code, target_currency_code, info
            )

        rate = _to_rate(row[0])
        logger.debug(
            "database_exchange_rate_loaded",
            extra={
                "source_currency": source_currency_code,
                "target_currency": target_currency_code,
                "rate": rate,
            },
        )
        return rate
