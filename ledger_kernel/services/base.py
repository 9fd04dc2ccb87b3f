"""
BaseService -- abstract base for kernel services that mutate the ledger.

Responsibility:
    Provides the common constructor for every service that writes through
    the ``LedgerStore``.  Services never talk to the key-value table
    directly; the store owns persistence.
"""

from abc import ABC

from ledger_kernel.services.ledger_store import LedgerStore


class BaseService(ABC):
    """
    Abstract base class for kernel services.

    Contract:
        Accepts a loaded ``LedgerStore`` from the caller and mutates state
        only through its ``put_*`` / ``set_*`` methods.

    Non-goals:
        - Does NOT load or reload the store.
        - Does NOT own session (view) state; that is passed in explicitly.
    """

    def __init__(self, store: LedgerStore):
        """
        Initialize the service.

        Args:
            store: Loaded ledger store shared by all services.
        """
        self.store = store
