# src/algoimpact/domain/errors.py
"""
Domain Errors - Balance Impact Exceptions

This module defines the exceptions raised by the balance impact system.
Lookups that find nothing are not errors (they return None); these exceptions
represent ledger query service failures that callers must handle.
"""

from typing import Optional


class DomainError(Exception):
    """Base exception for domain errors."""
    pass


class IndexerError(DomainError):
    """Raised when the ledger query service cannot answer a lookup."""
    pass


class IndexerUnavailableError(IndexerError):
    """Raised when the indexer times out or cannot be reached."""
    pass


class IndexerResponseError(IndexerError):
    """Raised when the indexer answers with an error status or an unreadable body."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
