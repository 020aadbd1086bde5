"""Database initialization utilities."""
from typing import Optional

from sqlalchemy.engine import Engine

from residence_engine.core.logging import get_logger
from residence_engine.models import Base

logger = get_logger(__name__)


def _resolve(bind: Optional[Engine]) -> Engine:
    if bind is not None:
        return bind
    from residence_engine.db.session import engine
    return engine


def init_db(bind: Optional[Engine] = None) -> None:
    """
    Create all tables that do not exist yet.

    Suitable for development and tests; production schemas are managed
    by migrations.
    """
    bind = _resolve(bind)
    Base.metadata.create_all(bind=bind)
    logger.info("Database tables ensured", extra={"table_count": len(Base.metadata.tables)})


def drop_db(bind: Optional[Engine] = None) -> None:
    """
    Drop all database tables.

    WARNING: This will delete all data!
    """
    Base.metadata.drop_all(bind=_resolve(bind))
    logger.warning("All database tables dropped")


def reset_db(bind: Optional[Engine] = None) -> None:
    """Drop and recreate all tables."""
    logger.warning("Resetting database...")
    drop_db(bind)
    init_db(bind)
