"""
Balance Impact Tests - Unit Tests for the Computation Entry Points

This module contains end-to-end tests of BalanceImpactCalculator and the
module-level facades against the in-memory ledger.

Files that USE this module:
- pytest (test runner executes these tests)

Files that this module USES:
- algoimpact.application.balance_impact (classes and functions under test)
- fakes (FakeIndexer, builders, group ids)
"""
import pytest  # Testing framework for writing and running tests

from unittest.mock import AsyncMock  # Async mocks for failing lookups

from algoimpact.application.asset_cache import AssetCache
from algoimpact.application.balance_impact import (
    BalanceImpactCalculator,
    calculate_group_balance_impact,
    calculate_transaction_balance_impact,
)
from algoimpact.domain.errors import IndexerResponseError
from algoimpact.domain.models import AssetParams, Block, ImpactOptions
from fakes import GROUP_A, GROUP_A_B64, FakeIndexer, appl, axfer, pay

ROUND = 41_000_000
USDC = AssetParams(asset_id=31566704, decimals=6, unit_name="USDC")

# Swap: TRADER pays 2 ALGO to POOL, POOL's app sends 3.5 USDC back
SWAP_PAY = pay("TRADER", "POOL", 2_000_000, fee=1_000, id="SWAP1", group=GROUP_A, confirmed_round=ROUND)
SWAP_CALL = appl(
    "TRADER",
    fee=2_000,
    id="SWAP2",
    group=GROUP_A,
    confirmed_round=ROUND,
    inner_txns=[axfer("POOL", "TRADER", USDC.asset_id, 3_500_000, fee=0)],
)
SIMPLE = pay("S", "R", 1_000_000, fee=1_000, id="SIMPLE", confirmed_round=ROUND)
BLOCK = Block(round=ROUND, transactions=(SIMPLE, SWAP_PAY, SWAP_CALL))


@pytest.fixture
def indexer():
    return FakeIndexer(transactions=[SIMPLE, SWAP_PAY, SWAP_CALL], blocks=[BLOCK], assets=[USDC])


@pytest.fixture
def calculator(indexer):
    return BalanceImpactCalculator(indexer, AssetCache())


class TestTransactionImpact:
    @pytest.mark.asyncio
    async def test_simple_payment_scenario(self, calculator):
        options = ImpactOptions(convert_decimals=True, unit_name_keys=True, include_fees=True)
        result = await calculator.transaction_impact(txn=SIMPLE, options=options)

        assert result.balance_impact == {"S": {"ALGO": -1.001}, "R": {"ALGO": 1.0}}
        assert result.transaction is SIMPLE

    @pytest.mark.asyncio
    async def test_defaults_are_raw_ids_without_fees(self, calculator, indexer):
        result = await calculator.transaction_impact(txn_id="SIMPLE")

        assert result.balance_impact == {"S": {0: -1_000_000.0}, "R": {0: 1_000_000.0}}
        assert indexer.calls == [("transaction", "SIMPLE")]

    @pytest.mark.asyncio
    async def test_inner_transactions_counted(self, calculator):
        options = ImpactOptions(convert_decimals=True, unit_name_keys=True)
        result = await calculator.transaction_impact(txn=SWAP_CALL, options=options)

        assert result.balance_impact == {"POOL": {"USDC": -3.5}, "TRADER": {"USDC": 3.5}}

    @pytest.mark.asyncio
    async def test_unknown_asset_listed_on_result(self, calculator):
        mystery = axfer("S", "R", 424242, 7)
        options = ImpactOptions(convert_decimals=True, unit_name_keys=True)
        result = await calculator.transaction_impact(txn=mystery, options=options)

        assert result.balance_impact == {"S": {424242: -7.0}, "R": {424242: 7.0}}
        assert result.unresolved_assets == frozenset({424242})

    @pytest.mark.asyncio
    async def test_known_assets_leave_nothing_unresolved(self, calculator):
        options = ImpactOptions(convert_decimals=True, unit_name_keys=True)
        result = await calculator.transaction_impact(txn=SWAP_CALL, options=options)
        assert result.unresolved_assets == frozenset()

    @pytest.mark.asyncio
    async def test_txn_id_from_supplied_block(self, calculator, indexer):
        result = await calculator.transaction_impact(txn_id="SIMPLE", block=BLOCK)
        assert result.transaction is SIMPLE
        assert indexer.calls == []

    @pytest.mark.asyncio
    async def test_unknown_txn_id(self, calculator):
        assert await calculator.transaction_impact(txn_id="UNKNOWN") is None

    @pytest.mark.asyncio
    async def test_nothing_selected(self, calculator):
        assert await calculator.transaction_impact() is None


class TestGroupImpact:
    @pytest.mark.asyncio
    async def test_swap_by_group_id(self, calculator):
        options = ImpactOptions(convert_decimals=True, unit_name_keys=True, include_fees=True)
        result = await calculator.group_impact(group_id=GROUP_A_B64, round=ROUND, options=options)

        assert result.group == (SWAP_PAY, SWAP_CALL)
        assert result.block is BLOCK
        assert result.balance_impact == {
            "TRADER": {"ALGO": -2.003, "USDC": 3.5},
            "POOL": {"ALGO": 2.0, "USDC": -3.5},
        }

    @pytest.mark.asyncio
    async def test_by_txn_id_and_txn_agree(self, calculator):
        by_id = await calculator.group_impact(txn_id="SWAP2")
        by_txn = await calculator.group_impact(txn=SWAP_PAY)
        by_group = await calculator.group_impact(group_id=GROUP_A, round=ROUND)

        assert by_id.balance_impact == by_txn.balance_impact == by_group.balance_impact
        assert by_id.group == by_txn.group == by_group.group

    @pytest.mark.asyncio
    async def test_txn_id_takes_precedence(self, calculator, indexer):
        await calculator.group_impact(txn_id="SWAP1", group_id="ignored", round=1)
        assert indexer.calls[0] == ("transaction", "SWAP1")

    @pytest.mark.asyncio
    async def test_supplied_block_skips_fetch(self, calculator, indexer):
        result = await calculator.group_impact(group_id=GROUP_A_B64, round=ROUND, block=BLOCK)
        assert result.group == (SWAP_PAY, SWAP_CALL)
        assert indexer.count("block") == 0

    @pytest.mark.asyncio
    async def test_no_matching_members(self, calculator):
        result = await calculator.group_impact(group_id=b"Q" * 32, round=ROUND)

        assert result is not None
        assert result.group == ()
        assert result.balance_impact == {}

    @pytest.mark.asyncio
    async def test_unknown_txn_id(self, calculator):
        assert await calculator.group_impact(txn_id="UNKNOWN") is None

    @pytest.mark.asyncio
    async def test_ungrouped_txn(self, calculator):
        assert await calculator.group_impact(txn=SIMPLE) is None

    @pytest.mark.asyncio
    async def test_malformed_group_id(self):
        calculator = BalanceImpactCalculator(FakeIndexer(blocks=[Block(round=5)]), AssetCache())
        assert await calculator.group_impact(group_id="abc", round=5) is None

    @pytest.mark.asyncio
    async def test_group_id_without_round(self, calculator, indexer):
        assert await calculator.group_impact(group_id=GROUP_A_B64) is None
        assert indexer.calls == []

    @pytest.mark.asyncio
    async def test_conservation_across_group(self, calculator):
        result = await calculator.group_impact(group_id=GROUP_A_B64, round=ROUND)
        totals = {}
        for entries in result.balance_impact.values():
            for key, amount in entries.items():
                totals[key] = totals.get(key, 0) + amount
        assert all(total == 0 for total in totals.values())

    @pytest.mark.asyncio
    async def test_indexer_failure_propagates(self, calculator, indexer):
        indexer.lookup_block = AsyncMock(side_effect=IndexerResponseError("boom", status_code=500))
        with pytest.raises(IndexerResponseError):
            await calculator.group_impact(group_id=GROUP_A_B64, round=ROUND)


class TestFacades:
    @pytest.mark.asyncio
    async def test_transaction_facade(self, indexer):
        result = await calculate_transaction_balance_impact(
            indexer, txn=SIMPLE, convert_decimals=True, unit_name_keys=True, include_fees=True, cache=AssetCache()
        )
        assert result.balance_impact == {"S": {"ALGO": -1.001}, "R": {"ALGO": 1.0}}

    @pytest.mark.asyncio
    async def test_group_facade_shares_cache(self, indexer):
        cache = AssetCache()
        for _ in range(3):
            await calculate_group_balance_impact(
                indexer, group_id=GROUP_A_B64, round=ROUND, convert_decimals=True, cache=cache
            )
        assert cache.has(USDC.asset_id)
        assert indexer.count("asset") == 1

    @pytest.mark.asyncio
    async def test_group_facade_unknown_id(self, indexer):
        assert await calculate_group_balance_impact(indexer, txn_id="UNKNOWN", cache=AssetCache()) is None
