# src/algoimpact/application/asset_cache.py
"""
Asset Cache - Memoized Asset Metadata

This module keeps the decimal precision and unit name of every asset seen so
far, so that each asset is fetched from the ledger query service at most once.
Asset parameters are treated as immutable for the lifetime of the cache; the
cache grows monotonically and is only emptied by an explicit clear().

There is no locking: everything runs on one event loop. Two computations
missing the same asset at the same time may both fetch it; the results are
identical, so the second write is harmless.

Files that USE this module:
- algoimpact.application.normalizer (resolves decimals and unit names)
- algoimpact.application.balance_impact (owns a resolver per calculator)
- tests.test_asset_cache (unit tests)

Files that this module USES:
- algoimpact.adapters.indexer.base (LedgerQueryService for lookups)
- algoimpact.domain.models (AssetMetadata, ALGO constants)
"""
from __future__ import annotations

import logging
from typing import Dict, Optional

from algoimpact.adapters.indexer.base import LedgerQueryService
from algoimpact.domain.models import ALGO_ASSET_ID, ALGO_METADATA, AssetMetadata

logger = logging.getLogger(__name__)


class AssetCache:
    """In-memory mapping from asset id to AssetMetadata."""

    def __init__(self):
        self._cache: Dict[int, AssetMetadata] = {}

    def get(self, asset_id: int) -> Optional[AssetMetadata]:
        return self._cache.get(asset_id)

    def set(self, asset_id: int, metadata: AssetMetadata) -> None:
        self._cache[asset_id] = metadata

    def has(self, asset_id: int) -> bool:
        return asset_id in self._cache

    def clear(self) -> None:
        self._cache.clear()

    @property
    def size(self) -> int:
        return len(self._cache)

    def __len__(self) -> int:
        return len(self._cache)

    def __contains__(self, asset_id: object) -> bool:
        return asset_id in self._cache


# Process-wide cache used when a caller does not bring its own
asset_cache = AssetCache()


class AssetMetadataResolver:
    """Cache-or-fetch access to asset metadata."""

    def __init__(self, indexer: LedgerQueryService, cache: Optional[AssetCache] = None):
        """
        Args:
            indexer: Ledger query service used on cache misses
            cache: Cache to read and populate (defaults to the process-wide asset_cache)
        """
        self.indexer = indexer
        self.cache = asset_cache if cache is None else cache

    async def get_metadata(self, asset_id: int) -> AssetMetadata:
        """
        Get the metadata of an asset.

        ALGO is answered from constants. Any other asset is read from the cache,
        or fetched once from the ledger query service and stored before being
        returned. An asset the service does not know gets decimals=0 and its
        id as unit name; that fallback is not cached.

        Raises:
            IndexerError: If the ledger query service fails
        """
        if asset_id == ALGO_ASSET_ID:
            return ALGO_METADATA

        cached = self.cache.get(asset_id)
        if cached is not None:
            return cached

        params = await self.indexer.lookup_asset_by_id(asset_id)
        if params is None:
            logger.warning("Asset %d not found on indexer, using 0 decimals", asset_id)
            return AssetMetadata(decimals=0, unit_name=str(asset_id), resolved=False)

        metadata = AssetMetadata.from_params(params)
        self.cache.set(asset_id, metadata)
        logger.debug("Cached asset %d: %s", asset_id, metadata)
        return metadata

    async def get_decimals(self, asset_id: int) -> int:
        return (await self.get_metadata(asset_id)).decimals

    async def get_unit_name(self, asset_id: int) -> str:
        return (await self.get_metadata(asset_id)).unit_name
