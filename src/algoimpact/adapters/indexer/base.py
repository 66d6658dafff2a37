# src/algoimpact/adapters/indexer/base.py
"""
Base Ledger Query Service Interface

This module defines the abstract base class for ledger query services. The
balance impact core only ever talks to the ledger through these coroutines.

Files that USE this module:
- algoimpact.adapters.indexer.client (IndexerClient implements LedgerQueryService)
- algoimpact.application.* (services depend on the interface only)
- tests.fakes (in-memory implementation for tests)

Files that this module USES:
- algoimpact.domain.models (return types)
"""
from abc import ABC, abstractmethod
from typing import Optional

from algoimpact.domain.models import AssetParams, Block, Transaction, TransactionPage


class LedgerQueryService(ABC):
    @abstractmethod
    async def lookup_transaction_by_id(self, txn_id: str) -> Optional[Transaction]:
        """Return the confirmed transaction with this id, or None if unknown."""
        raise NotImplementedError

    @abstractmethod
    async def lookup_block(self, round: int) -> Optional[Block]:
        """Return the block at this round, or None if unknown or not yet confirmed."""
        raise NotImplementedError

    @abstractmethod
    async def lookup_asset_by_id(self, asset_id: int) -> Optional[AssetParams]:
        """Return the parameters of this asset, or None if unknown."""
        raise NotImplementedError

    async def search_transactions(
        self,
        address: Optional[str] = None,
        tx_type: Optional[str] = None,
        min_round: Optional[int] = None,
        max_round: Optional[int] = None,
        limit: Optional[int] = None,
        next_token: Optional[str] = None,
    ) -> TransactionPage:
        """Return one page of transaction history matching the filters."""
        raise NotImplementedError
