# src/algoimpact/adapters/indexer/__init__.py
"""
Indexer Adapters - Ledger Query Service

This package contains the ledger query service interface, its HTTP
implementation against the Indexer v2 API, and the JSON codec.
"""

from algoimpact.adapters.indexer.base import LedgerQueryService
from algoimpact.adapters.indexer.client import IndexerClient

__all__ = [
    "LedgerQueryService",
    "IndexerClient",
]
