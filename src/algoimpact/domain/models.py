# src/algoimpact/domain/models.py
"""
Domain Models - Ledger Objects and Computation Results

This module contains the domain models the balance impact computation works on:
- Transactions (with payment / asset transfer fields and inner transactions)
- Blocks
- Asset parameters and cached asset metadata
- Computation options and results

Files that USE this module:
- algoimpact.application.* (all services use domain models)
- algoimpact.adapters.indexer.* (the indexer codec builds domain models)
- tests.* (tests use domain models for test data)

Files that this module USES:
- None (pure domain layer, no external dependencies)
"""

from __future__ import annotations  # Enable postponed evaluation of annotations

import base64  # Canonical encoding for group identifiers
from dataclasses import dataclass  # Decorator for creating data classes
from typing import Dict, FrozenSet, Optional, Tuple, Union  # Type hints

# Native coin of the ledger, never looked up on the indexer
ALGO_ASSET_ID = 0
ALGO_DECIMALS = 6
ALGO_UNIT_NAME = "ALGO"

TX_TYPE_PAYMENT = "pay"
TX_TYPE_ASSET_TRANSFER = "axfer"

AssetKey = Union[int, str]  # asset id, or unit name when unit_name_keys is set
RawBalanceDeltas = Dict[str, Dict[int, int]]
BalanceImpact = Dict[str, Dict[AssetKey, float]]


def encode_group_id(group: Union[bytes, str]) -> str:
    """
    Return the canonical base64 form of a group identifier.

    Accepts raw bytes or an already base64-encoded string. Strings are decoded
    and re-encoded so that equal ids always compare equal.

    Raises:
        ValueError: If a string is not valid base64 (binascii.Error included)
    """
    if isinstance(group, str):
        group = base64.b64decode(group, validate=True)
    return base64.b64encode(group).decode("ascii")


@dataclass(frozen=True)
class PaymentFields:
    """Native coin transfer fields of a payment transaction."""
    receiver: str
    amount: int = 0
    close_remainder_to: Optional[str] = None
    close_amount: Optional[int] = None


@dataclass(frozen=True)
class AssetTransferFields:
    """
    Asset transfer fields.

    Attributes:
        asset_id: Identifier of the transferred asset
        amount: Amount in the asset's base units
        receiver: Account credited with the amount
        sender: Clawback source (the account debited instead of the outer sender)
        close_to: Account receiving the remaining holding when closing out
        close_amount: Amount swept to close_to
    """
    asset_id: int
    amount: int
    receiver: str
    sender: Optional[str] = None
    close_to: Optional[str] = None
    close_amount: Optional[int] = None


@dataclass(frozen=True)
class Transaction:
    """
    Confirmed (or inner) ledger transaction.

    Inner transactions share the same shape and are usually missing id,
    group and confirmed_round.
    """
    sender: str
    tx_type: str
    id: Optional[str] = None
    fee: int = 0
    group: Optional[bytes] = None
    confirmed_round: Optional[int] = None
    round_time: Optional[int] = None
    payment: Optional[PaymentFields] = None
    asset_transfer: Optional[AssetTransferFields] = None
    inner_txns: Tuple[Transaction, ...] = ()

    @property
    def group_b64(self) -> Optional[str]:
        """Base64-encoded group id, or None for ungrouped transactions."""
        if not self.group:
            return None
        return encode_group_id(self.group)


@dataclass(frozen=True)
class Block:
    """Transactions confirmed together at one round."""
    round: int
    timestamp: Optional[int] = None
    transactions: Tuple[Transaction, ...] = ()

    def find_transaction(self, txn_id: str) -> Optional[Transaction]:
        """Return the top-level transaction with the given id, if present."""
        for txn in self.transactions:
            if txn.id == txn_id:
                return txn
        return None


@dataclass(frozen=True)
class TransactionPage:
    """One page of a transaction search."""
    transactions: Tuple[Transaction, ...]
    next_token: Optional[str] = None


@dataclass(frozen=True)
class AssetParams:
    """Asset parameters as reported by the ledger query service."""
    asset_id: int
    decimals: int
    unit_name: Optional[str] = None
    name: Optional[str] = None


@dataclass(frozen=True)
class AssetMetadata:
    """
    Decimal precision and display unit name of an asset.

    resolved is False for the placeholder used when the ledger query service
    does not know the asset.
    """
    decimals: int
    unit_name: str
    resolved: bool = True

    @classmethod
    def from_params(cls, params: AssetParams) -> AssetMetadata:
        """
        Build metadata from indexer asset parameters.

        The unit name falls back to the stringified asset id when the asset
        has none.
        """
        return cls(
            decimals=params.decimals,
            unit_name=params.unit_name or str(params.asset_id),
        )


ALGO_METADATA = AssetMetadata(decimals=ALGO_DECIMALS, unit_name=ALGO_UNIT_NAME)


@dataclass(frozen=True)
class ImpactOptions:
    """
    Options recognized by the balance impact computations.

    Attributes:
        convert_decimals: Scale integer amounts by each asset's decimal precision
        unit_name_keys: Key results by unit name instead of numeric asset id
        include_fees: Include fee debits in the computed impact
    """
    convert_decimals: bool = False
    unit_name_keys: bool = False
    include_fees: bool = False


@dataclass(frozen=True)
class LookupGroupResult:
    """Members of an atomic group plus the block they were found in."""
    group: Tuple[Transaction, ...]
    block: Block


@dataclass(frozen=True)
class TransactionBalanceImpactResult:
    balance_impact: BalanceImpact
    transaction: Transaction
    unresolved_assets: FrozenSet[int] = frozenset()


@dataclass(frozen=True)
class GroupBalanceImpactResult:
    balance_impact: BalanceImpact
    group: Tuple[Transaction, ...]
    block: Block
    unresolved_assets: FrozenSet[int] = frozenset()
