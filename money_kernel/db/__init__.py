"""Database layer - engine helpers, base class and column types."""

from money_kernel.db.base import Base
from money_kernel.db.engine import create_engine_from_url, create_tables, drop_tables
from money_kernel.db.types import CurrencyColumn

__all__ = [
    "Base",
    "CurrencyColumn",
    "create_engine_from_url",
    "create_tables",
    "drop_tables",
]
