"""
KeyValueStore -- JSON values keyed by string, persisted through SQLAlchemy.

Responsibility:
    The durable store collaborator.  Reads and writes single keys of the
    ``ledger_kv`` table, each write in its own transaction.

Architecture position:
    Kernel > Services -- imperative shell.  Only ``LedgerStore`` and the
    snapshot importer talk to it.

Failure modes:
    - SQLAlchemy errors propagate; the failed transaction is rolled back by
      ``session_scope``.
"""

from __future__ import annotations

from typing import Any, Mapping

from sqlalchemy import delete, select
from sqlalchemy.orm import Session, sessionmaker

from ledger_kernel.db.engine import session_scope
from ledger_kernel.db.models import StoredValue
from ledger_kernel.logging_config import get_logger

logger = get_logger("services.kv_store")


def namespace_of(key: str) -> str:
    return key.split(":", 1)[0]


class KeyValueStore:
    """
    Durable key-value access.

    Contract:
        ``put`` is an upsert that commits immediately.  ``get`` returns
        ``default`` for absent keys.  ``replace_namespaces`` swaps whole
        namespaces in one transaction.
    """

    def __init__(self, session_factory: sessionmaker[Session]):
        self._session_factory = session_factory

    def get(self, key: str, default: Any = None) -> Any:
        with session_scope(self._session_factory) as session:
            row = session.get(StoredValue, key)
            return default if row is None else row.value

    def put(self, key: str, value: Any) -> None:
        with session_scope(self._session_factory) as session:
            self._upsert(session, key, value)
        logger.debug("kv_put", extra={"key": key})

    def items(self, namespace: str) -> dict[str, Any]:
        """All keys of a namespace, with the ``namespace:`` prefix stripped."""
        prefix = f"{namespace}:"
        with session_scope(self._session_factory) as session:
            rows = session.execute(
                select(StoredValue).where(StoredValue.namespace == namespace)
            ).scalars()
            return {row.key[len(prefix):]: row.value for row in rows}

    def replace_namespaces(self, values: Mapping[str, Any], namespaces: tuple[str, ...]) -> None:
        """
        Delete every key in ``namespaces`` and write ``values`` atomically.

        Preconditions:
            Every key in ``values`` belongs to one of ``namespaces``.
        """
        for key in values:
            if namespace_of(key) not in namespaces:
                raise ValueError(f"Key {key!r} is outside {namespaces}")
        with session_scope(self._session_factory) as session:
            session.execute(
                delete(StoredValue).where(StoredValue.namespace.in_(namespaces))
            )
            session.flush()
            for key, value in values.items():
                session.add(StoredValue(key=key, namespace=namespace_of(key), value=value))
        logger.info(
            "kv_namespaces_replaced",
            extra={"namespaces": list(namespaces), "key_count": len(values)},
        )

    @staticmethod
    def _upsert(session: Session, key: str, value: Any) -> None:
        row = session.get(StoredValue, key)
        if row is None:
            session.add(StoredValue(key=key, namespace=namespace_of(key), value=value))
        else:
            row.value = value
