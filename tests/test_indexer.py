"""
Indexer Adapter Tests - Unit Tests for the Indexer Client and Codec

This module contains unit tests for decoding indexer JSON into domain models
and for IndexerClient's HTTP handling (404s, errors, headers, coroutines).

Files that USE this module:
- pytest (test runner executes these tests)

Files that this module USES:
- algoimpact.adapters.indexer.client (IndexerClient)
- algoimpact.adapters.indexer.codec (decoders)
- unittest.mock (Mock for HTTP mocking)
- pytest (testing framework)
"""
import base64

import pytest  # Testing framework for writing and running tests

from unittest.mock import Mock, patch  # Mock objects and patching for testing without real API calls
import requests  # HTTP library (used for mocking responses)

from algoimpact.adapters.indexer.client import IndexerClient
from algoimpact.adapters.indexer.codec import decode_asset, decode_block, decode_transaction
from algoimpact.domain.errors import IndexerResponseError, IndexerUnavailableError

GROUP = base64.b64encode(b"G" * 32).decode()

APPL_JSON = {
    "id": "APPLTXID",
    "sender": "USER",
    "tx-type": "appl",
    "fee": 2000,
    "group": GROUP,
    "confirmed-round": 123,
    "round-time": 1700000000,
    "inner-txns": [
        {
            "sender": "APP",
            "tx-type": "pay",
            "fee": 0,
            "payment-transaction": {
                "receiver": "USER",
                "amount": 5000,
                "close-amount": 0,
            },
        },
        {
            "sender": "APP",
            "tx-type": "axfer",
            "asset-transfer-transaction": {
                "asset-id": 31566704,
                "amount": 7,
                "receiver": "USER",
                "sender": "VICTIM",
                "close-to": "SINK",
                "close-amount": 3,
            },
        },
    ],
}


def _response(status_code=200, payload=None):
    resp = Mock()
    resp.status_code = status_code
    resp.json.return_value = payload
    if status_code >= 400:
        resp.raise_for_status.side_effect = requests.exceptions.HTTPError(response=resp)
    else:
        resp.raise_for_status.return_value = None
    return resp


class TestCodec:
    def test_decode_transaction_with_inner(self):
        txn = decode_transaction(APPL_JSON)

        assert txn.id == "APPLTXID"
        assert txn.tx_type == "appl"
        assert txn.fee == 2000
        assert txn.group == b"G" * 32
        assert txn.group_b64 == GROUP
        assert txn.confirmed_round == 123
        assert len(txn.inner_txns) == 2

        inner_pay, inner_axfer = txn.inner_txns
        assert inner_pay.id is None
        assert inner_pay.payment.amount == 5000
        assert inner_pay.payment.close_remainder_to is None
        assert inner_axfer.asset_transfer.sender == "VICTIM"
        assert inner_axfer.asset_transfer.close_to == "SINK"
        assert inner_axfer.asset_transfer.close_amount == 3

    def test_decode_block(self):
        block = decode_block({"round": 123, "timestamp": 1700000000, "transactions": [APPL_JSON]})
        assert block.round == 123
        assert block.find_transaction("APPLTXID").sender == "USER"
        assert block.find_transaction("OTHER") is None

    def test_decode_block_without_transactions(self):
        assert decode_block({"round": 5}).transactions == ()

    def test_decode_asset(self):
        asset = decode_asset({"index": 9, "params": {"decimals": 2, "unit-name": "GEM", "name": "Gem"}})
        assert (asset.asset_id, asset.decimals, asset.unit_name, asset.name) == (9, 2, "GEM", "Gem")

    def test_decode_asset_without_unit_name(self):
        asset = decode_asset({"index": 9, "params": {"decimals": 0}})
        assert asset.unit_name is None


class TestIndexerClient:
    def test_init_with_arguments(self):
        client = IndexerClient(base_url="http://localhost:8980/", token="secret", timeout=3)
        assert client.base_url == "http://localhost:8980"
        assert client.timeout == 3
        assert client.headers["X-Indexer-API-Token"] == "secret"

    def test_init_without_token(self):
        client = IndexerClient(base_url="http://localhost:8980", token="")
        assert "X-Indexer-API-Token" not in client.headers

    @patch('algoimpact.adapters.indexer.client.requests.get')
    def test_get_transaction(self, mock_get):
        mock_get.return_value = _response(payload={"transaction": APPL_JSON, "current-round": 200})

        client = IndexerClient(base_url="http://idx", token="")
        txn = client.get_transaction("APPLTXID")

        assert txn.id == "APPLTXID"
        args, kwargs = mock_get.call_args
        assert args[0] == "http://idx/v2/transactions/APPLTXID"
        assert kwargs["timeout"] == client.timeout

    @patch('algoimpact.adapters.indexer.client.requests.get')
    def test_not_found_is_none(self, mock_get):
        mock_get.return_value = _response(status_code=404, payload={"message": "no transaction found"})

        client = IndexerClient(base_url="http://idx", token="")
        assert client.get_transaction("MISSING") is None
        assert client.get_block(1) is None
        assert client.get_asset(1) is None

    @patch('algoimpact.adapters.indexer.client.requests.get')
    def test_get_asset_includes_all(self, mock_get):
        mock_get.return_value = _response(payload={"asset": {"index": 5, "params": {"decimals": 3}}})

        asset = IndexerClient(base_url="http://idx", token="").get_asset(5)

        assert asset.decimals == 3
        assert mock_get.call_args.kwargs["params"] == {"include-all": "true"}

    @patch('algoimpact.adapters.indexer.client.requests.get')
    def test_server_error(self, mock_get):
        mock_get.return_value = _response(status_code=500, payload={})

        with pytest.raises(IndexerResponseError, match="500") as excinfo:
            IndexerClient(base_url="http://idx", token="").get_block(1)
        assert excinfo.value.status_code == 500

    @patch('algoimpact.adapters.indexer.client.requests.get')
    def test_timeout(self, mock_get):
        mock_get.side_effect = requests.exceptions.Timeout("slow")

        with pytest.raises(IndexerUnavailableError, match="timeout"):
            IndexerClient(base_url="http://idx", token="").get_block(1)

    @patch('algoimpact.adapters.indexer.client.requests.get')
    def test_connection_error(self, mock_get):
        mock_get.side_effect = requests.exceptions.ConnectionError("refused")

        with pytest.raises(IndexerUnavailableError, match="request failed"):
            IndexerClient(base_url="http://idx", token="").get_block(1)

    @patch('algoimpact.adapters.indexer.client.requests.get')
    def test_invalid_json(self, mock_get):
        resp = _response(payload=None)
        resp.json.side_effect = ValueError("Invalid JSON")
        mock_get.return_value = resp

        with pytest.raises(IndexerResponseError, match="invalid JSON"):
            IndexerClient(base_url="http://idx", token="").get_block(1)

    @patch('algoimpact.adapters.indexer.client.requests.get')
    def test_non_object_json(self, mock_get):
        mock_get.return_value = _response(payload=["not", "an", "object"])

        with pytest.raises(IndexerResponseError, match="non-object"):
            IndexerClient(base_url="http://idx", token="").get_block(1)

    @patch('algoimpact.adapters.indexer.client.requests.get')
    def test_search_drops_unset_filters(self, mock_get):
        mock_get.return_value = _response(payload={"transactions": [APPL_JSON], "next-token": "abc"})

        page = IndexerClient(base_url="http://idx", token="").search(address="USER", tx_type="axfer", limit=10)

        assert page.next_token == "abc"
        assert len(page.transactions) == 1
        assert mock_get.call_args.kwargs["params"] == {"address": "USER", "tx-type": "axfer", "limit": 10}

    @pytest.mark.asyncio
    @patch('algoimpact.adapters.indexer.client.requests.get')
    async def test_lookup_coroutines(self, mock_get):
        mock_get.return_value = _response(payload={"round": 77, "transactions": [APPL_JSON]})

        client = IndexerClient(base_url="http://idx", token="")
        block = await client.lookup_block(77)

        assert block.round == 77
        assert block.transactions[0].id == "APPLTXID"
