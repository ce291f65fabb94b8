"""
Module: money_kernel.db.base
Responsibility: Declarative base class for the kernel's SQLAlchemy ORM models.
    Provides the integer primary key convention and the type annotation map
    that keeps rates exact.
Architecture position: Kernel > DB.  Lowest-level import target for models/.
    MUST NOT import from models/, services/ or domain/.

Invariants enforced:
    - Decimal maps to Numeric(38, 18): exchange rates keep 18 fractional
      digits.  NEVER use float for rates or amounts.
    - datetime maps to DateTime(timezone=True).
"""

from datetime import datetime
from decimal import Decimal
from typing import ClassVar

from sqlalchemy import DateTime, Integer, Numeric
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """
    Declarative base for all money_kernel models.

    Guarantees:
        - id is an autoincrementing integer primary key.
        - Decimal columns default to Numeric(38, 18).
        - datetime columns are always timezone-aware.
    """

    type_annotation_map: ClassVar[dict] = {
        Decimal: Numeric(38, 18),
        datetime: DateTime(timezone=True),
    }

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
