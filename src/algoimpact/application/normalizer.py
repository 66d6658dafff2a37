# src/algoimpact/application/normalizer.py
"""
Balance Normalizer - Raw Deltas to Balance Impact

Turns the integer deltas produced by the accumulator into the externally
visible balance impact: optionally scaled by each asset's decimals, optionally
keyed by unit name, with zero entries and empty accounts removed.

Metadata for all touched assets is resolved up front (decimals in one pass,
unit names in a separate pass) so an asset appearing under many accounts costs
one lookup.

Files that USE this module:
- algoimpact.application.balance_impact (normalizes every computation)
- tests.test_normalizer (unit tests)

Files that this module USES:
- algoimpact.application.asset_cache (AssetMetadataResolver)
- algoimpact.domain.models (RawBalanceDeltas, BalanceImpact)
"""
from __future__ import annotations

import logging
from decimal import Decimal
from typing import Dict, FrozenSet, Iterable, Set, Tuple

from algoimpact.application.asset_cache import AssetMetadataResolver
from algoimpact.domain.models import AssetKey, BalanceImpact, RawBalanceDeltas

logger = logging.getLogger(__name__)


def scale_amount(raw: int, decimals: int) -> float:
    """
    Convert base units to whole units (raw / 10**decimals).

    The division is done in decimal arithmetic and converted to float once, so
    the result is the float closest to the exact quotient.
    """
    if decimals == 0:
        return float(raw)
    return float(Decimal(raw).scaleb(-decimals))


def unscale_amount(value: float, decimals: int) -> int:
    """Convert whole units back to base units (inverse of scale_amount)."""
    return int(Decimal(repr(value)).scaleb(decimals).to_integral_value())


async def normalize_balances(
    raw_balances: RawBalanceDeltas,
    asset_ids: Iterable[int],
    resolver: AssetMetadataResolver,
    convert_decimals: bool = False,
    unit_name_keys: bool = False,
) -> BalanceImpact:
    """
    Build the balance impact from raw deltas.

    Args:
        raw_balances: Integer deltas per account per asset id
        asset_ids: Asset ids touched while accumulating
        resolver: Metadata resolver (cache-or-fetch)
        convert_decimals: Divide amounts by 10**decimals of their asset
        unit_name_keys: Key amounts by unit name instead of asset id

    Returns:
        New mapping account -> {asset key: amount}, without zero amounts
        or empty accounts

    Raises:
        IndexerError: If asset metadata cannot be fetched
    """
    impact, _ = await normalize_with_unresolved(
        raw_balances,
        asset_ids,
        resolver,
        convert_decimals=convert_decimals,
        unit_name_keys=unit_name_keys,
    )
    return impact


async def normalize_with_unresolved(
    raw_balances: RawBalanceDeltas,
    asset_ids: Iterable[int],
    resolver: AssetMetadataResolver,
    convert_decimals: bool = False,
    unit_name_keys: bool = False,
) -> Tuple[BalanceImpact, FrozenSet[int]]:
    """
    Same as normalize_balances, also returning the ids of assets the ledger
    query service did not know. Their amounts are left in base units and,
    with unit_name_keys, stay keyed by numeric asset id.

    With unit_name_keys, a unit name shared by several touched assets is
    given to the lowest asset id only (ALGO wins over any asset named ALGO);
    the others stay keyed by numeric asset id.
    """
    touched = sorted(set(asset_ids))
    unresolved: Set[int] = set()

    decimals_map: Dict[int, int] = {}
    if convert_decimals:
        for asset_id in touched:
            metadata = await resolver.get_metadata(asset_id)
            if not metadata.resolved:
                unresolved.add(asset_id)
            decimals_map[asset_id] = metadata.decimals

    keys: Dict[int, AssetKey] = {}
    if unit_name_keys:
        owners: Dict[str, int] = {}
        for asset_id in touched:
            metadata = await resolver.get_metadata(asset_id)
            if not metadata.resolved:
                unresolved.add(asset_id)
                keys[asset_id] = asset_id
                continue
            owner = owners.setdefault(metadata.unit_name, asset_id)
            if owner != asset_id:
                logger.warning(
                    "Unit name %r of asset %d already used by asset %d, keeping numeric key",
                    metadata.unit_name, asset_id, owner,
                )
                keys[asset_id] = asset_id
                continue
            keys[asset_id] = metadata.unit_name

    result: BalanceImpact = {}
    for account, assets in raw_balances.items():
        entries: Dict[AssetKey, float] = {}
        for asset_id, raw_amount in assets.items():
            if convert_decimals:
                amount = scale_amount(raw_amount, decimals_map.get(asset_id, 0))
            else:
                amount = float(raw_amount)

            if amount == 0:
                continue

            key: AssetKey = keys.get(asset_id, asset_id) if unit_name_keys else asset_id
            entries[key] = amount
        if entries:
            result[account] = entries

    return result, frozenset(unresolved)
