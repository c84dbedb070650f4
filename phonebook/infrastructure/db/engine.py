from __future__ import annotations

import logging
from functools import lru_cache

from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase


logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    pass


@lru_cache(maxsize=4)
def get_engine(dsn: str):
    return create_engine(dsn, future=True, pool_pre_ping=True)


def init_db(engine) -> None:
    # Registers the tables on Base.metadata.
    from phonebook.infrastructure.db.models import accounts, contacts  # noqa: F401

    with engine.begin() as conn:
        conn.exec_driver_sql("CREATE SCHEMA IF NOT EXISTS public")
    Base.metadata.create_all(engine)
    logger.info("init_db: tables ensured count=%s", len(Base.metadata.tables))
