# src/algoimpact/application/__init__.py
"""
Application Layer - Balance Impact Computation

This package contains the services that compute balance impacts.
No direct I/O - ledger lookups go through the LedgerQueryService interface.
"""

from algoimpact.application.asset_cache import AssetCache, AssetMetadataResolver, asset_cache
from algoimpact.application.balance_impact import (
    BalanceImpactCalculator,
    calculate_group_balance_impact,
    calculate_transaction_balance_impact,
)
from algoimpact.application.deltas import accumulate_transactions, add_balance_change, process_transaction
from algoimpact.application.group_resolver import (
    lookup_group_by_id,
    lookup_txn_group_by_txn,
    lookup_txn_group_by_txn_id,
)
from algoimpact.application.normalizer import (
    normalize_balances,
    normalize_with_unresolved,
    scale_amount,
    unscale_amount,
)

__all__ = [
    "AssetCache",
    "AssetMetadataResolver",
    "asset_cache",
    "BalanceImpactCalculator",
    "calculate_group_balance_impact",
    "calculate_transaction_balance_impact",
    "accumulate_transactions",
    "add_balance_change",
    "process_transaction",
    "lookup_group_by_id",
    "lookup_txn_group_by_txn",
    "lookup_txn_group_by_txn_id",
    "normalize_balances",
    "normalize_with_unresolved",
    "scale_amount",
    "unscale_amount",
]
