# src/algoimpact/application/deltas.py
"""
Delta Accumulator - Raw Balance Changes of Transactions

Walks a transaction and its inner transactions depth-first and adds the signed
integer balance change of every (account, asset id) pair into a caller-owned
mapping. Amounts stay in network base units as Python ints; no floats and no
network calls happen here.

Files that USE this module:
- algoimpact.application.balance_impact (accumulates single transactions and groups)
- tests.test_deltas (unit tests)

Files that this module USES:
- algoimpact.domain.models (Transaction, RawBalanceDeltas, ALGO_ASSET_ID)
"""
from __future__ import annotations

from typing import Iterable, Set, Tuple

from algoimpact.domain.models import ALGO_ASSET_ID, RawBalanceDeltas, Transaction


def add_balance_change(balances: RawBalanceDeltas, account: str, asset_id: int, amount: int) -> None:
    """Add a signed amount to one account's balance of one asset."""
    assets = balances.setdefault(account, {})
    assets[asset_id] = assets.get(asset_id, 0) + amount


def _transfer(balances: RawBalanceDeltas, source: str, destination: str, asset_id: int, amount: int) -> None:
    add_balance_change(balances, source, asset_id, -amount)
    add_balance_change(balances, destination, asset_id, amount)


def process_transaction(
    txn: Transaction,
    balances: RawBalanceDeltas,
    include_fees: bool = False,
) -> Set[int]:
    """
    Accumulate the balance changes caused by a transaction.

    Rules, in order:
    - fee: debited from the sender in ALGO (only with include_fees)
    - payment: sender -> receiver; close_amount sender -> close_remainder_to
    - asset transfer: effective sender -> receiver, where the effective sender
      is the clawback source when one is given; close_amount -> close_to
    - inner transactions, recursively, in declared order

    Args:
        txn: Transaction to process
        balances: Delta mapping to add into (mutated)
        include_fees: Debit transaction fees from senders

    Returns:
        Set of asset ids touched by the transaction and its inner transactions
    """
    asset_ids: Set[int] = set()

    if include_fees and txn.fee:
        add_balance_change(balances, txn.sender, ALGO_ASSET_ID, -txn.fee)
        asset_ids.add(ALGO_ASSET_ID)

    pay = txn.payment
    if pay is not None:
        _transfer(balances, txn.sender, pay.receiver, ALGO_ASSET_ID, pay.amount)
        asset_ids.add(ALGO_ASSET_ID)

        # Closing an account sweeps its remaining balance in the same transaction
        if pay.close_remainder_to and pay.close_amount:
            _transfer(balances, txn.sender, pay.close_remainder_to, ALGO_ASSET_ID, pay.close_amount)

    axfer = txn.asset_transfer
    if axfer is not None:
        # For clawback the named sender is the account being debited
        effective_sender = axfer.sender or txn.sender
        _transfer(balances, effective_sender, axfer.receiver, axfer.asset_id, axfer.amount)
        asset_ids.add(axfer.asset_id)

        if axfer.close_to and axfer.close_amount:
            _transfer(balances, effective_sender, axfer.close_to, axfer.asset_id, axfer.close_amount)

    for inner in txn.inner_txns:
        asset_ids |= process_transaction(inner, balances, include_fees)

    return asset_ids


def accumulate_transactions(
    txns: Iterable[Transaction],
    include_fees: bool = False,
) -> Tuple[RawBalanceDeltas, Set[int]]:
    """
    Accumulate several transactions (e.g. the members of a group) into one delta map.

    Returns:
        (raw balance deltas, touched asset ids)
    """
    balances: RawBalanceDeltas = {}
    asset_ids: Set[int] = set()
    for txn in txns:
        asset_ids |= process_transaction(txn, balances, include_fees)
    return balances, asset_ids
