"""Domain exceptions with no web-framework dependencies."""

from __future__ import annotations


class StorageError(Exception):
    """Raised when the persistence backend rejects or fails an operation.

    The original driver exception is kept as ``__cause__``.
    """
