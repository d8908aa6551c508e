"""
Cost Tracker - Error Types

PURPOSE: Failure taxonomy for the persistent cost store
SCOPE: Exceptions raised by database.py and managers.py, handled in app.py
DEPENDENCIES: None
"""


class CostStoreError(Exception):
    """Base exception for cost store errors."""
    pass


class StorageUnavailable(CostStoreError):
    """The database could not be opened or upgraded."""
    pass


class WriteFailed(CostStoreError):
    """A write transaction against the costs table was rejected."""
    pass


class ReadFailed(CostStoreError):
    """A read transaction against the costs table failed."""
    pass
