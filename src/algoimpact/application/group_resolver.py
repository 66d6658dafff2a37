# src/algoimpact/application/group_resolver.py
"""
Group Resolver - Atomic Group Discovery

Finds all transactions sharing an atomic group id, starting from a transaction
id, a transaction object, or a group id + round. All three entry points end in
lookup_group_by_id, which filters the transactions of the group's block.

Every entry point accepts an already fetched block; when one is given it is
used as is and no block request is made, so callers can keep a per-round block
cache across many group lookups.

Files that USE this module:
- algoimpact.application.balance_impact (group facade)
- tests.test_group_resolver (unit tests)

Files that this module USES:
- algoimpact.adapters.indexer.base (LedgerQueryService for lookups)
- algoimpact.domain.models (Block, Transaction, LookupGroupResult)
"""
from __future__ import annotations

import logging
from typing import Optional, Union

from algoimpact.adapters.indexer.base import LedgerQueryService
from algoimpact.domain.models import Block, LookupGroupResult, Transaction, encode_group_id

logger = logging.getLogger(__name__)


async def lookup_group_by_id(
    indexer: LedgerQueryService,
    group_id: Union[str, bytes],
    round: int,
    block: Optional[Block] = None,
) -> Optional[LookupGroupResult]:
    """
    Get the members of a group from the block at `round`.

    Args:
        indexer: Ledger query service (only used when no block is supplied)
        group_id: Group id, base64 string or raw bytes
        round: Round the group was confirmed in
        block: Optional block to search instead of fetching one

    Returns:
        LookupGroupResult (with an empty group if nothing matches), or None if
        the group id is not valid base64 or the block cannot be found
    """
    try:
        wanted = encode_group_id(group_id)
    except ValueError:
        logger.debug("Malformed group id %r", group_id)
        return None

    if block is None:
        block = await indexer.lookup_block(round)
        if block is None:
            logger.info("Block %d not found", round)
            return None
    elif block.round != round:
        logger.warning("Supplied block is round %d, group lookup asked for round %d", block.round, round)

    group = tuple(txn for txn in block.transactions if txn.group and txn.group_b64 == wanted)
    logger.debug("Group %s at round %d has %d transaction(s)", wanted, round, len(group))
    return LookupGroupResult(group=group, block=block)


async def lookup_txn_group_by_txn(
    indexer: LedgerQueryService,
    txn: Transaction,
    block: Optional[Block] = None,
) -> Optional[LookupGroupResult]:
    """
    Get the group a transaction belongs to.

    Returns:
        LookupGroupResult, or None if the transaction has no group id or no
        confirmed round
    """
    if not txn.group or not txn.confirmed_round:
        logger.debug("Transaction %s has no group or confirmed round", txn.id)
        return None

    return await lookup_group_by_id(indexer, txn.group, txn.confirmed_round, block=block)


async def lookup_txn_group_by_txn_id(
    indexer: LedgerQueryService,
    txn_id: str,
    block: Optional[Block] = None,
) -> Optional[LookupGroupResult]:
    """
    Get the group of the transaction with the given id.

    The transaction is taken from `block` when one is supplied, otherwise it is
    fetched from the ledger query service.

    Returns:
        LookupGroupResult, or None if the transaction cannot be found or is
        not part of a group
    """
    if block is not None:
        txn = block.find_transaction(txn_id)
    else:
        txn = await indexer.lookup_transaction_by_id(txn_id)

    if txn is None:
        logger.info("Transaction %s not found", txn_id)
        return None

    return await lookup_txn_group_by_txn(indexer, txn, block=block)
