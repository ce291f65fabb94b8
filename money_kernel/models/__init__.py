"""ORM models for the money kernel."""

from money_kernel.models.exchange_rate import ExchangeRateRecord

__all__ = ["ExchangeRateRecord"]
