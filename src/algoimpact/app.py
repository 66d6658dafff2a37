# src/algoimpact/app.py
"""
Application Entry Point - Group Impact Streaming Driver

This module is the composition root of the command line driver. It walks the
asset transfer history of one address, computes the balance impact of every
group the address took part in, and prints a JSON line for each group where
the address exchanged ALGO for another asset.

Usage:
    python -m algoimpact ADDRESS [LIMIT] [MIN_ROUND] [MAX_ROUND]

Files that USE this module:
- algoimpact.__main__ (python -m algoimpact)

Files that this module USES:
- algoimpact.shared.logging_conf (setup_logging for logging configuration)
- algoimpact.shared.pacing (Pacer between history pages)
- algoimpact.shared.validators (validate_address for the address argument)
- algoimpact.config (settings for indexer and driver options)
- algoimpact.adapters.indexer (IndexerClient)
- algoimpact.adapters.formatting (impact_record, format_impact_line)
- algoimpact.application.balance_impact (BalanceImpactCalculator)
"""

from __future__ import annotations  # Enable postponed evaluation of annotations for forward references

import asyncio  # Event loop for the indexer coroutines
import logging  # Standard library for logging messages and errors
import sys  # Command line arguments, stdout and exit codes
from collections import OrderedDict  # Bounded per-round block cache
from typing import List, Optional, Set, TextIO

from algoimpact.adapters.formatting.formatter import format_impact_line, impact_record
from algoimpact.adapters.indexer.base import LedgerQueryService
from algoimpact.adapters.indexer.client import IndexerClient
from algoimpact.application.asset_cache import AssetCache
from algoimpact.application.balance_impact import BalanceImpactCalculator
from algoimpact.config import settings
from algoimpact.domain.errors import IndexerError
from algoimpact.domain.models import TX_TYPE_ASSET_TRANSFER, Block, ImpactOptions, Transaction
from algoimpact.shared.logging_conf import setup_logging
from algoimpact.shared.pacing import Pacer
from algoimpact.shared.validators import validate_address

logger = logging.getLogger(__name__)

USAGE = "usage: python -m algoimpact ADDRESS [LIMIT] [MIN_ROUND] [MAX_ROUND]"


class BlockCache:
    """Least-recently-used cache of blocks by round."""

    def __init__(self, max_size: int):
        self.max_size = max_size
        self._blocks: OrderedDict[int, Block] = OrderedDict()

    def get(self, round: int) -> Optional[Block]:
        block = self._blocks.get(round)
        if block is not None:
            self._blocks.move_to_end(round)
        return block

    def put(self, block: Block) -> None:
        self._blocks[block.round] = block
        self._blocks.move_to_end(block.round)
        while len(self._blocks) > self.max_size:
            self._blocks.popitem(last=False)

    def __len__(self) -> int:
        return len(self._blocks)


class GroupImpactStreamer:
    """Streams the group impacts of one address's transfer history."""

    def __init__(
        self,
        indexer: LedgerQueryService,
        address: str,
        options: ImpactOptions,
        out: TextIO,
        pacer: Optional[Pacer] = None,
        block_cache_size: int = 256,
        cache: Optional[AssetCache] = None,
    ):
        self.indexer = indexer
        self.address = address
        self.options = options
        self.out = out
        self.pacer = pacer or Pacer(0.0)
        self.calculator = BalanceImpactCalculator(indexer, cache)
        self.blocks = BlockCache(block_cache_size)
        self.processed_groups: Set[str] = set()
        self.lines_written = 0

    async def process_transaction(self, txn: Transaction) -> None:
        """Compute and report the group of one history entry (once per group)."""
        group_id = txn.group_b64
        if group_id is None or txn.confirmed_round is None:
            return
        if group_id in self.processed_groups:
            return

        round = txn.confirmed_round
        cached = self.blocks.get(round)
        result = await self.calculator.group_impact(
            group_id=group_id,
            round=round,
            block=cached,
            options=self.options,
        )
        if result is not None and cached is None:
            self.blocks.put(result.block)

        if result is not None:
            if result.unresolved_assets:
                logger.warning(
                    "Group %s: asset(s) %s unknown to the indexer, amounts left in base units",
                    group_id, sorted(result.unresolved_assets),
                )
            record =impact_record(self.address, result, round_time=txn.round_time)
            if record is not None:
                self.out.write(format_impact_line(record) + "\n")
                self.out.flush()
                self.lines_written += 1

        self.processed_groups.add(group_id)

    async def run(
        self,
        limit: Optional[int] = None,
        min_round: Optional[int] = None,
        max_round: Optional[int] = None,
    ) -> int:
        """
        Walk every history page and process its transactions.

        Returns:
            Number of JSON lines written
        """
        next_token: Optional[str] = None
        page_no = 0
        while True:
            await self.pacer.wait()
            page = await self.indexer.search_transactions(
                address=self.address,
                tx_type=TX_TYPE_ASSET_TRANSFER,
                min_round=min_round,
                max_round=max_round,
                limit=limit,
                next_token=next_token,
            )
            page_no += 1
            logger.info("Page %d: %d transaction(s)", page_no, len(page.transactions))

            for txn in page.transactions:
                await self.process_transaction(txn)

            if not page.next_token or not page.transactions:
                break
            next_token = page.next_token

        logger.info(
            "Done: %d group(s) processed, %d line(s) written",
            len(self.processed_groups), self.lines_written,
        )
        return self.lines_written


def _parse_int_arg(args: List[str], index: int) -> Optional[int]:
    if len(args) <= index or not args[index]:
        return None
    return int(args[index])


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run the streaming driver.

    Args:
        argv: Arguments after the program name (defaults to sys.argv[1:])

    Returns:
        Process exit code
    """
    args = sys.argv[1:] if argv is None else argv

    setup_logging(
        level=settings.log_level,
        log_file=settings.log_file,
        log_dir=settings.log_dir,
        log_stdout=settings.log_stdout,
        max_bytes=settings.log_max_bytes,
        backup_count=settings.log_backup_count,
    )

    if not args:
        logger.error("Please provide an address as the first argument")
        print(USAGE, file=sys.stderr)
        return 1

    address = args[0]
    if not validate_address(address):
        logger.error("Invalid address provided: %s", address)
        return 1

    try:
        limit = _parse_int_arg(args, 1)
        min_round = _parse_int_arg(args, 2)
        max_round = _parse_int_arg(args, 3)
    except ValueError:
        logger.error("LIMIT, MIN_ROUND and MAX_ROUND must be integers")
        print(USAGE, file=sys.stderr)
        return 1

    options = ImpactOptions(
        convert_decimals=settings.convert_decimals,
        unit_name_keys=settings.unit_name_keys,
        include_fees=settings.include_fees,
    )
    streamer = GroupImpactStreamer(
        IndexerClient(),
        address,
        options,
        out=sys.stdout,
        pacer=Pacer(settings.page_pause_seconds),
        block_cache_size=settings.block_cache_size,
    )
    logger.info("Streaming group impacts of %s from %s", address, settings.indexer_url)

    try:
        asyncio.run(streamer.run(limit=limit, min_round=min_round, max_round=max_round))
    except IndexerError as e:
        logger.error("Indexer failure, stopping: %s", e)
        return 2
    except KeyboardInterrupt:
        logger.info("Stopped by user (KeyboardInterrupt)")
        return 130
    return 0


if __name__ == "__main__":
    sys.exit(main())
