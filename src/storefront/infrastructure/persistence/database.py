"""Engine and session factory for the authoritative store.

SQLite needs two adjustments to give checkout the transactions it
relies on:

- pysqlite's own transaction handling is switched off and every
  transaction starts with ``BEGIN IMMEDIATE``, so the write lock is
  taken up front and two checkouts serialize instead of deadlocking on
  a lock upgrade.
- the driver's busy timeout bounds how long a transaction waits for
  that lock.  Hitting it surfaces as OperationalError, which the unit
  of work reports as a transient failure.
"""

from __future__ import annotations

from sqlalchemy import Engine, create_engine, event
from sqlalchemy.orm import Session, sessionmaker

from storefront.infrastructure.persistence.tables import Base


def build_engine(database_url: str, lock_timeout_seconds: float = 5.0) -> Engine:
    if database_url.startswith("sqlite"):
        engine = create_engine(
            database_url,
            connect_args={"timeout": lock_timeout_seconds, "check_same_thread": False},
        )
        _use_immediate_transactions(engine)
        return engine

    return create_engine(
        database_url,
        pool_pre_ping=True,
        pool_timeout=lock_timeout_seconds,
    )


def build_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, expire_on_commit=False)


def create_schema(engine: Engine) -> None:
    Base.metadata.create_all(engine)


def _use_immediate_transactions(engine: Engine) -> None:

    @event.listens_for(engine, "connect")
    def _disable_driver_transactions(dbapi_connection, connection_record) -> None:
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _begin_immediate(conn) -> None:
        conn.exec_driver_sql("BEGIN IMMEDIATE")
