"""
Pytest fixtures for the money kernel test suite.

Provides:
- Structured logging configured for every test session
- Fresh currency and exchange rate providers (never the shared singleton)
- An in-memory SQLite engine with the kernel tables
- Log capture as parsed JSON dicts
"""

import json
import logging
from io import StringIO

import pytest

from money_kernel.db.engine import create_engine_from_url, create_tables, drop_tables
from money_kernel.domain.currency import Currency, CurrencyType
from money_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from money_kernel.services.currency_provider import (
    ConfigurableCurrencyProvider,
    ISOCurrencyProvider,
)
from money_kernel.services.exchange_rate_provider import ConfigurableExchangeRateProvider


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture money_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs):
            provider.get_exchange_rate("EUR", "USD")
            logs = captured_logs()
            assert any(r["message"] == "exchange_rate_cache_miss" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("money_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records
    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Currency fixtures
# =============================================================================


@pytest.fixture
def iso_provider() -> ISOCurrencyProvider:
    """A fresh ISO provider, independent of the process-wide one."""
    return ISOCurrencyProvider()


@pytest.fixture
def bitcoin() -> Currency:
    return Currency(
        code="BTC",
        numeric_code=0,
        name="Bitcoin",
        default_fraction_digits=8,
        currency_type=CurrencyType.CUSTOM,
    )


@pytest.fixture
def custom_provider(bitcoin) -> ConfigurableCurrencyProvider:
    return ConfigurableCurrencyProvider([bitcoin])


# =============================================================================
# Exchange rate fixtures
# =============================================================================


@pytest.fixture
def rate_provider() -> ConfigurableExchangeRateProvider:
    """EUR-based rates plus one deliberately non-reciprocal USD->EUR rate."""
    provider = ConfigurableExchangeRateProvider()
    provider.set_exchange_rate("EUR", "USD", "1.1")
    provider.set_exchange_rate("EUR", "GBP", "0.85")
    provider.set_exchange_rate("EUR", "JPY", "160")
    provider.set_exchange_rate("USD", "EUR", "0.9")
    return provider


# =============================================================================
# Database fixtures
# =============================================================================


@pytest.fixture
def engine():
    """In-memory SQLite engine with the kernel tables created."""
    engine = create_engine_from_url("sqlite+pysqlite:///:memory:")
    create_tables(engine)
    yield engine
    drop_tables(engine)
    engine.dispose()
