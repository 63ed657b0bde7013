"""
Exceptions for Splitt.

The allocation engine and the store operations never raise; these cover the
I/O collaborators around them.
"""


class SplittError(Exception):
    """Base exception for all Splitt errors."""
    pass


class ReceiptImportError(SplittError):
    """Raised when a receipt cannot be uploaded or its payload is malformed."""
    pass


class PersistenceError(SplittError):
    """Raised when the bill state cannot be written."""
    pass
