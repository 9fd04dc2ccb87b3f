"""
Module: ledger_kernel.db.models
Responsibility: ORM persistence for the key-value durable store.  Every day
    record, month record, catalog list and setting is one row.
Architecture position: Kernel > DB.  May import from db/base.py only.

Key namespaces:
    day:YYYY-MM-DD       DayRecord dict
    month:YYYY-MM        StockRecord dict
    catalog:products     list of Product dicts
    catalog:stock_items  list of StockItem dicts
    settings:<name>      scalar setting (pin, sync flag, language, view mode)
"""

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import JSON, Index
from sqlalchemy.orm import Mapped, mapped_column

from ledger_kernel.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class StoredValue(Base):
    """One key of the durable store with its JSON value."""

    __tablename__ = "ledger_kv"

    __table_args__ = (Index("idx_ledger_kv_namespace", "namespace"),)

    key: Mapped[str] = mapped_column(primary_key=True)

    # Prefix before the first ":" so a namespace can be listed without LIKE
    namespace: Mapped[str] = mapped_column(nullable=False)

    value: Mapped[Any] = mapped_column(JSON, nullable=True)

    updated_at: Mapped[datetime] = mapped_column(
        default=_utcnow,
        onupdate=_utcnow,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<StoredValue {self.key}>"
