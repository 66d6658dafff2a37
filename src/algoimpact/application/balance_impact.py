# src/algoimpact/application/balance_impact.py
"""
Balance Impact Service - Public Computation Entry Points

This module wires the group resolver, the delta accumulator and the balance
normalizer together. It exposes BalanceImpactCalculator, which holds the ledger
query service and the asset cache, plus two module-level facades for one-off
calls.

Inputs that cannot be resolved (unknown transaction id, transaction without a
group, missing block) give None instead of raising, so stream processors can
skip and continue. Ledger query service failures propagate.

Files that USE this module:
- algoimpact.app (streaming driver computes group impacts)
- algoimpact (package exports the facades)
- tests.test_balance_impact (unit tests)

Files that this module USES:
- algoimpact.application.asset_cache (AssetCache, AssetMetadataResolver)
- algoimpact.application.deltas (accumulation)
- algoimpact.application.group_resolver (group discovery)
- algoimpact.application.normalizer (normalize_with_unresolved)
- algoimpact.adapters.indexer.base (LedgerQueryService)
- algoimpact.domain.models (options and results)
"""
from __future__ import annotations

import logging
from typing import Optional, Union

from algoimpact.adapters.indexer.base import LedgerQueryService
from algoimpact.application.asset_cache import AssetCache, AssetMetadataResolver
from algoimpact.application.deltas import accumulate_transactions
from algoimpact.application.group_resolver import (
    lookup_group_by_id,
    lookup_txn_group_by_txn,
    lookup_txn_group_by_txn_id,
)
from algoimpact.application.normalizer import normalize_with_unresolved
from algoimpact.domain.models import (
    Block,
    GroupBalanceImpactResult,
    ImpactOptions,
    LookupGroupResult,
    Transaction,
    TransactionBalanceImpactResult,
)

logger = logging.getLogger(__name__)


class BalanceImpactCalculator:
    """
    Computes balance impacts of transactions and groups.

    One calculator can serve any number of computations; they all share its
    asset cache.
    """

    def __init__(self, indexer: LedgerQueryService, cache: Optional[AssetCache] = None):
        """
        Args:
            indexer: Ledger query service for transaction, block and asset lookups
            cache: Asset cache (defaults to the process-wide asset_cache)
        """
        self.indexer = indexer
        self.resolver = AssetMetadataResolver(indexer, cache)

    @property
    def cache(self) -> AssetCache:
        return self.resolver.cache

    async def transaction_impact(
        self,
        txn_id: Optional[str] = None,
        txn: Optional[Transaction] = None,
        block: Optional[Block] = None,
        options: Optional[ImpactOptions] = None,
    ) -> Optional[TransactionBalanceImpactResult]:
        """
        Compute the balance impact of one transaction (inner transactions included).

        Args:
            txn_id: Id of the transaction to look up (ignored when txn is given)
            txn: Transaction object
            block: Optional block to find txn_id in instead of querying the indexer
            options: Computation options

        Returns:
            TransactionBalanceImpactResult, or None if the transaction cannot be resolved
        """
        options = options or ImpactOptions()

        transaction = txn
        if transaction is None and txn_id:
            if block is not None:
                transaction = block.find_transaction(txn_id)
            else:
                transaction = await self.indexer.lookup_transaction_by_id(txn_id)

        if transaction is None:
            logger.info("No transaction to compute (txn_id=%s)", txn_id)
            return None

        raw, asset_ids = accumulate_transactions([transaction], options.include_fees)
        impact, unresolved = await normalize_with_unresolved(
            raw,
            asset_ids,
            self.resolver,
            convert_decimals=options.convert_decimals,
            unit_name_keys=options.unit_name_keys,
        )
        return TransactionBalanceImpactResult(
            balance_impact=impact, transaction=transaction, unresolved_assets=unresolved
        )

    async def resolve_group(
        self,
        txn_id: Optional[str] = None,
        txn: Optional[Transaction] = None,
        group_id: Optional[Union[str, bytes]] = None,
        round: Optional[int] = None,
        block: Optional[Block] = None,
    ) -> Optional[LookupGroupResult]:
        """Pick the group lookup matching the given selector (txn_id, then txn, then group_id + round)."""
        if txn_id:
            return await lookup_txn_group_by_txn_id(self.indexer, txn_id, block=block)
        if txn is not None:
            return await lookup_txn_group_by_txn(self.indexer, txn, block=block)
        if group_id and round is not None:
            return await lookup_group_by_id(self.indexer, group_id, round, block=block)

        logger.debug("No group selector given (txn_id, txn or group_id + round)")
        return None

    async def group_impact(
        self,
        txn_id: Optional[str] = None,
        txn: Optional[Transaction] = None,
        group_id: Optional[Union[str, bytes]] = None,
        round: Optional[int] = None,
        block: Optional[Block] = None,
        options: Optional[ImpactOptions] = None,
    ) -> Optional[GroupBalanceImpactResult]:
        """
        Compute the combined balance impact of an atomic group.

        Args:
            txn_id: Id of any member transaction
            txn: Any member transaction (needs group and confirmed_round)
            group_id: Group id (base64 string or bytes), together with round
            round: Round the group was confirmed in
            block: Optional block of that round, to skip the block request
            options: Computation options

        Returns:
            GroupBalanceImpactResult, or None if the group cannot be resolved.
            A group id with no members in the block gives an empty group and
            an empty impact.
        """
        options = options or ImpactOptions()

        result = await self.resolve_group(txn_id=txn_id, txn=txn, group_id=group_id, round=round, block=block)
        if result is None:
            return None

        raw, asset_ids = accumulate_transactions(result.group, options.include_fees)
        impact, unresolved = await normalize_with_unresolved(
            raw,
            asset_ids,
            self.resolver,
            convert_decimals=options.convert_decimals,
            unit_name_keys=options.unit_name_keys,
        )
        logger.debug(
            "Group at round %d: %d transaction(s), %d account(s) impacted",
            result.block.round, len(result.group), len(impact),
        )
        return GroupBalanceImpactResult(
            balance_impact=impact, group=result.group, block=result.block, unresolved_assets=unresolved
        )


async def calculate_transaction_balance_impact(
    indexer: LedgerQueryService,
    txn_id: Optional[str] = None,
    txn: Optional[Transaction] = None,
    block: Optional[Block] = None,
    convert_decimals: bool = False,
    unit_name_keys: bool = False,
    include_fees: bool = False,
    cache: Optional[AssetCache] = None,
) -> Optional[TransactionBalanceImpactResult]:
    """One-off form of BalanceImpactCalculator.transaction_impact."""
    options = ImpactOptions(
        convert_decimals=convert_decimals,
        unit_name_keys=unit_name_keys,
        include_fees=include_fees,
    )
    return await BalanceImpactCalculator(indexer, cache).transaction_impact(
        txn_id=txn_id, txn=txn, block=block, options=options
    )


async def calculate_group_balance_impact(
    indexer: LedgerQueryService,
    txn_id: Optional[str] = None,
    txn: Optional[Transaction] = None,
    group_id: Optional[Union[str, bytes]] = None,
    round: Optional[int] = None,
    block: Optional[Block] = None,
    convert_decimals: bool = False,
    unit_name_keys: bool = False,
    include_fees: bool = False,
    cache: Optional[AssetCache] = None,
) -> Optional[GroupBalanceImpactResult]:
    """One-off form of BalanceImpactCalculator.group_impact."""
    options = ImpactOptions(
        convert_decimals=convert_decimals,
        unit_name_keys=unit_name_keys,
        include_fees=include_fees,
    )
    return await BalanceImpactCalculator(indexer, cache).group_impact(
        txn_id=txn_id, txn=txn, group_id=group_id, round=round, block=block, options=options
    )
