"""
Typed exception hierarchy for the ledger kernel.

Every error carries a class-level ``code`` (machine-readable, stable) and
stores its context as attributes so it survives structured logging.

    LedgerKernelError (base)
    |
    +-- DateKeyError
    |   +-- InvalidDateKeyError
    |
    +-- SyncError
    |   +-- SyncFailedError
    |   +-- SyncTimeoutError
    |
    +-- SnapshotError
    |   +-- SnapshotImportError
    |
    +-- CatalogError
    |   +-- ProductNotFoundError
    |   +-- DuplicateProductError
    |
    +-- AccessError
        +-- PinFormatError

Not everything that goes wrong is an exception here. Non-numeric input
coerces to zero, a wrong PIN is a ``False`` return with an error flag, and
edits against a locked day are ignored. Only failures the caller has to act
on are raised.

Usage:
    try:
        sync_service.sync_now()
    except SyncTimeoutError as e:
        notify_user(f"Sync of {e.record_key} timed out after {e.timeout}s")
    except SyncError as e:
        log.warning("sync failed: %s", e.code)
"""


class LedgerKernelError(Exception):
    """
    Base exception for all ledger kernel errors.

    All subclasses have a ``code`` class attribute for machine-readable
    identification.
    """

    code: str = "LEDGER_KERNEL_ERROR"


# Date keys


class DateKeyError(LedgerKernelError):
    """Base exception for day/month key errors."""

    code: str = "DATE_KEY_ERROR"


class InvalidDateKeyError(DateKeyError):
    """A key is not a valid ``YYYY-MM-DD`` date or ``YYYY-MM`` month."""

    code: str = "INVALID_DATE_KEY"

    def __init__(self, key: str, expected: str = "YYYY-MM-DD"):
        self.key = key
        self.expected = expected
        super().__init__(f"Invalid date key {key!r}, expected {expected}")


# Sync


class SyncError(LedgerKernelError):
    """Base exception for mirroring a record to the external store."""

    code: str = "SYNC_ERROR"

    def __init__(self, record_key: str, message: str | None = None):
        self.record_key = record_key
        super().__init__(message or f"Sync failed for {record_key}")


class SyncFailedError(SyncError):
    """The external store rejected or failed the mirror call."""

    code: str = "SYNC_FAILED"

    def __init__(self, record_key: str, reason: str):
        self.reason = reason
        super().__init__(record_key, f"Sync failed for {record_key}: {reason}")


class SyncTimeoutError(SyncError):
    """The mirror call did not finish within the configured timeout."""

    code: str = "SYNC_TIMEOUT"

    def __init__(self, record_key: str, timeout: float):
        self.timeout = timeout
        super().__init__(
            record_key, f"Sync of {record_key} timed out after {timeout}s"
        )


# Snapshot


class SnapshotError(LedgerKernelError):
    """Base exception for export/import of full-state snapshots."""

    code: str = "SNAPSHOT_ERROR"


class SnapshotImportError(SnapshotError):
    """A snapshot could not be parsed; in-memory state was left untouched."""

    code: str = "SNAPSHOT_IMPORT_FAILED"

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Snapshot import failed: {reason}")


# Catalog


class CatalogError(LedgerKernelError):
    """Base exception for catalog management."""

    code: str = "CATALOG_ERROR"


class ProductNotFoundError(CatalogError):
    """No product or stock item with the given id."""

    code: str = "PRODUCT_NOT_FOUND"

    def __init__(self, product_id: str):
        self.product_id = product_id
        super().__init__(f"Catalog item not found: {product_id}")


class DuplicateProductError(CatalogError):
    """A catalog item with the given id already exists."""

    code: str = "DUPLICATE_PRODUCT"

    def __init__(self, product_id: str):
        self.product_id = product_id
        super().__init__(f"Catalog item already exists: {product_id}")


# Access


class AccessError(LedgerKernelError):
    """Base exception for the PIN gate."""

    code: str = "ACCESS_ERROR"


class PinFormatError(AccessError):
    """A PIN is not exactly four digits."""

    code: str = "PIN_FORMAT"

    def __init__(self, length: int):
        self.length = length
        super().__init__(f"PIN must be 4 digits (got {length} characters)")
