# src/algoimpact/__init__.py
"""
algoimpact - Balance Impact of Ledger Transactions

Computes the net per-account, per-asset balance change produced by a single
transaction or a whole atomic transaction group, inner transactions, clawbacks
and close-outs included.
"""

__version__ = "1.0.0"

from algoimpact.application import (
    AssetCache,
    BalanceImpactCalculator,
    asset_cache,
    calculate_group_balance_impact,
    calculate_transaction_balance_impact,
)
from algoimpact.domain import ImpactOptions

__all__ = [
    "AssetCache",
    "BalanceImpactCalculator",
    "ImpactOptions",
    "asset_cache",
    "calculate_group_balance_impact",
    "calculate_transaction_balance_impact",
]
