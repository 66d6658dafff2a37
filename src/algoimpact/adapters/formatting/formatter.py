# src/algoimpact/adapters/formatting/formatter.py
"""
Impact Formatter - JSON Line Reports

This module turns group balance impacts into the one-line JSON records printed
by the streaming driver: timestamp, acting account, an ALGO-per-asset rate and
the address's impact entries.

The rate is a reporting heuristic (absolute ALGO delta divided by the other
asset's delta, rounded), not part of the computation itself.

Files that USE this module:
- algoimpact.app (prints one line per swap-like group)
- tests.test_formatter (unit tests)

Files that this module USES:
- algoimpact.domain.models (GroupBalanceImpactResult, constants)
"""
from __future__ import annotations

import json
import math
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from algoimpact.domain.models import (
    ALGO_UNIT_NAME,
    TX_TYPE_ASSET_TRANSFER,
    TX_TYPE_PAYMENT,
    GroupBalanceImpactResult,
)


def _fmt_ts(round_time: Optional[int]) -> str:
    """
    Format a round time (unix seconds) as an ISO-8601 UTC timestamp.

    Missing round times format as the epoch.
    """
    dt = datetime.fromtimestamp(round_time or 0, tz=timezone.utc)
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def impact_record(
    address: str,
    result: GroupBalanceImpactResult,
    round_time: Optional[int] = None,
) -> Optional[Dict[str, Any]]:
    """
    Build the report record of a group for one address.

    Only groups where the address moved ALGO and at least one other asset are
    reported; the first non-ALGO entry is used for the rate.

    Args:
        address: Account the report is about
        result: Group balance impact computed with unit name keys
        round_time: Confirmation time of the group (unix seconds)

    Returns:
        Dict with ts, acct, rate, the impact entries and txId, or None
    """
    entries = result.balance_impact.get(address)
    if not entries:
        return None

    keys = [str(k) for k in entries]
    if len(keys) < 2 or ALGO_UNIT_NAME not in keys:
        return None

    by_name = {str(k): v for k, v in entries.items()}
    other_key = next(k for k in keys if k != ALGO_UNIT_NAME)
    rate = _round_half_up(abs(by_name[ALGO_UNIT_NAME] / by_name[other_key]))

    payment = next(
        (
            t for t in result.group
            if t.tx_type in (TX_TYPE_ASSET_TRANSFER, TX_TYPE_PAYMENT) and t.sender == address
        ),
        None,
    )

    record: Dict[str, Any] = {
        "ts": _fmt_ts(round_time),
        "acct": payment.sender[:8] if payment else None,
        "rate": rate,
    }
    record.update(by_name)
    record["txId"] = payment.id if payment else None
    return record


def format_impact_line(record: Dict[str, Any]) -> str:
    """Serialize a report record as one compact JSON line."""
    return json.dumps(record, ensure_ascii=False, separators=(",", ":"))
