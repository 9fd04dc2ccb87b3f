"""Database layer - engine, base class and the key-value table."""

from ledger_kernel.db.base import Base
from ledger_kernel.db.engine import (
    create_tables,
    get_engine,
    get_session,
    get_session_factory,
    init_engine_from_url,
    reset_engine,
    session_scope,
)
from ledger_kernel.db.models import StoredValue

__all__ = [
    "Base",
    "StoredValue",
    "create_tables",
    "get_engine",
    "get_session",
    "get_session_factory",
    "init_engine_from_url",
    "reset_engine",
    "session_scope",
]
