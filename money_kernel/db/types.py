"""
Module: money_kernel.db.types
Responsibility: Column types for storing monetary values.  ``CurrencyColumn``
    persists a Currency as its alphabetic code and loads it back through a
    CurrencyProvider.
Architecture position: Kernel > DB.  May import from domain/ value objects
    and the currency provider; MUST NOT import from models/.

Failure modes:
    - UnknownCurrencyError when a stored code is not known to the provider.
    - TypeError when binding something other than a Currency or a code.
"""

from sqlalchemy import String
from sqlalchemy.types import TypeDecorator

from money_kernel.domain.currency import Currency, resolve_currency


class CurrencyColumn(TypeDecorator):
    """
    Currency stored as its code.

    Contract:
        Binds a Currency (or a bare code) as the code string; loads the code
        back as a Currency resolved through ``provider`` (default: ISO).

    Guarantees:
        - None passes through unchanged in both directions.
        - cache_ok=True enables SQLAlchemy statement caching.
    """

    impl = String(16)
    cache_ok = True

    def __init__(self, provider=None, **kwargs):
        self.provider = provider
        super().__init__(**kwargs)

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if isinstance(value, Currency):
            return value.code
        if isinstance(value, str):
            return value
        raise TypeError(f"Cannot store {type(value).__name__} as a currency code")

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return resolve_currency(value, self.provider)
