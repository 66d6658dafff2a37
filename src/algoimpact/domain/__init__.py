# src/algoimpact/domain/__init__.py
"""
Domain Layer - Pure Ledger Objects

This package contains domain models and errors.
No dependencies on infrastructure or external systems.
"""

from algoimpact.domain.models import (
    ALGO_ASSET_ID,
    ALGO_DECIMALS,
    ALGO_METADATA,
    ALGO_UNIT_NAME,
    AssetMetadata,
    AssetParams,
    AssetTransferFields,
    BalanceImpact,
    Block,
    GroupBalanceImpactResult,
    ImpactOptions,
    LookupGroupResult,
    PaymentFields,
    RawBalanceDeltas,
    Transaction,
    TransactionBalanceImpactResult,
    TransactionPage,
    encode_group_id,
)
from algoimpact.domain.errors import (
    DomainError,
    IndexerError,
    IndexerResponseError,
    IndexerUnavailableError,
)

__all__ = [
    "ALGO_ASSET_ID",
    "ALGO_DECIMALS",
    "ALGO_METADATA",
    "ALGO_UNIT_NAME",
    "AssetMetadata",
    "AssetParams",
    "AssetTransferFields",
    "BalanceImpact",
    "Block",
    "GroupBalanceImpactResult",
    "ImpactOptions",
    "LookupGroupResult",
    "PaymentFields",
    "RawBalanceDeltas",
    "Transaction",
    "TransactionBalanceImpactResult",
    "TransactionPage",
    "encode_group_id",
    "DomainError",
    "IndexerError",
    "IndexerResponseError",
    "IndexerUnavailableError",
]
