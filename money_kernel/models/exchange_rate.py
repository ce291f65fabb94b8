"""
Module: money_kernel.models.exchange_rate
Responsibility: ORM mapping for the default ``exchange_rates`` table read by
    DatabaseExchangeRateProvider.  Each row is one directional rate between
    two currencies.
Architecture position: Kernel > Models.  May import from db/ only.

Invariants enforced:
    - rate is stored as Numeric(38, 18), never as a float column type.
    - One row per (source_currency, target_currency) pair, enforced by a
      unique constraint; the provider reads whichever row matches.

Failure modes:
    - IntegrityError on a duplicate pair.
    - UnknownCurrencyError when loading a row whose code is not ISO 4217
      (custom currencies need a CurrencyColumn bound to another provider).
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import Numeric, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from money_kernel.db.base import Base
from money_kernel.db.types import CurrencyColumn
from money_kernel.domain.currency import Currency


class ExchangeRateRecord(Base):
    """
    Exchange rate row -- ``source amount * rate = target amount``.

    Non-goals:
        - Does NOT store the reverse direction; insert a second row or use
          a BaseCurrencyExchangeRateProvider.
        - Does NOT keep history; ``effective_at`` is informational.
    """

    __tablename__ = "exchange_rates"

    __table_args__ = (
        UniqueConstraint("source_currency", "target_currency", name="uq_rate_pair"),
    )

    source_currency: Mapped[Currency] = mapped_column(CurrencyColumn(), nullable=False)

    target_currency: Mapped[Currency] = mapped_column(CurrencyColumn(), nullable=False)

    rate: Mapped[Decimal] = mapped_column(Numeric(38, 18), nullable=False)

    effective_at: Mapped[datetime | None] = mapped_column(nullable=True)

    # Rate provider, e.g. "ECB" or "manual"
    source: Mapped[str | None] = mapped_column(String(50), nullable=True)

    def __repr__(self) -> str:
        return f"<ExchangeRateRecord {self.source_currency}/{self.target_currency} = {self.rate}>"
