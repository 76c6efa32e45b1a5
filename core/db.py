"""
core/db.py -- Shared SQLAlchemy engine construction for the FormBot stores.

auth/store.py and forms/store.py each own their tables but build their
engine here, so both apply the same timeout policy:

  SQLite:  connect_args["timeout"] bounds how long a connection waits on a
           locked database before raising OperationalError.
  Others:  pool_timeout bounds how long a request waits for a pooled
           connection before raising sqlalchemy.exc.TimeoutError.

api/main.py maps both exceptions to 503 store_unavailable.

Layer rule: core/ is the kernel. No imports from api/, auth/, or forms/.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine


def _set_wal_mode(dbapi_conn, connection_record) -> None:
    """Enable WAL journal mode for concurrent read safety.

    Set per-connection because SQLite PRAGMAs are not inherited by new
    connections from the pool. In-memory databases ignore it.
    """
    dbapi_conn.execute("PRAGMA journal_mode=WAL")


def create_store_engine(db_url: str, timeout: float = 5.0) -> Engine:
    """Return an Engine for db_url with bounded waits."""
    if db_url.startswith("sqlite"):
        engine = create_engine(db_url, connect_args={"check_same_thread": False, "timeout": timeout})
        event.listen(engine, "connect", _set_wal_mode)
        return engine
    return create_engine(db_url, pool_timeout=timeout, pool_pre_ping=True)


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def new_id() -> str:
    """Opaque document identifier (32 hex chars)."""
    return uuid.uuid4().hex
