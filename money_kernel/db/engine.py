"""
Module: money_kernel.db.engine
Responsibility: Engine construction and schema management for the tables
    the kernel ships (currently only ``exchange_rates``).
Architecture position: Kernel > DB.  Imports models/ only inside
    create_tables/drop_tables so that Base.metadata is populated.

Failure modes:
    - sqlalchemy.exc.ArgumentError on a malformed database URL.
    - OperationalError if the database is unreachable.
"""

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine

from money_kernel.logging_config import get_logger

logger = get_logger("db.engine")


def create_engine_from_url(database_url: str, echo: bool = False) -> Engine:
    """
    Build an Engine for ``database_url`` (any SQLAlchemy dialect).

    pre-ping is enabled so a long-lived provider survives dropped
    connections.
    """
    engine = create_engine(database_url, echo=echo, pool_pre_ping=True)
    logger.info("database_engine_created", extra={"dialect": engine.dialect.name})
    return engine


def create_tables(engine: Engine) -> None:
    """Create every kernel table that does not exist yet."""
    from money_kernel.db.base import Base
    from money_kernel.models import exchange_rate  # noqa: F401

    Base.metadata.create_all(engine)
    logger.info("database_tables_created", extra={"tables": sorted(Base.metadata.tables)})


def drop_tables(engine: Engine) -> None:
    """Drop every kernel table.  FOR TESTING ONLY."""
    from money_kernel.db.base import Base
    from money_kernel.models import exchange_rate  # noqa: F401

    Base.metadata.drop_all(engine)
