# src/algoimpact/adapters/indexer/client.py
"""
Indexer API Client - Ledger Lookups over HTTP

This module implements the ledger query service against the Indexer v2 REST
API. Requests are made with the blocking `requests` library; the coroutine
interface runs each request in the default executor so the event loop is only
suspended at the three lookups the core needs (plus transaction search).

Not-found answers (HTTP 404) become None. Every other failure is raised as an
IndexerError and left to the caller: there is no retry here.

Files that USE this module:
- algoimpact.app (creates the IndexerClient for the streaming driver)
- tests.test_indexer (client unit tests)

Files that this module USES:
- algoimpact.adapters.indexer.base (LedgerQueryService interface)
- algoimpact.adapters.indexer.codec (JSON decoding)
- algoimpact.config (settings for URL, token and timeout)
- algoimpact.domain.errors (IndexerError hierarchy)
"""
import asyncio
import logging
from functools import partial
from typing import Any, Dict, Optional

import requests

from algoimpact.adapters.indexer.base import LedgerQueryService
from algoimpact.adapters.indexer.codec import (
    decode_asset,
    decode_block,
    decode_transaction,
    decode_transaction_page,
)
from algoimpact.config import settings
from algoimpact.domain.errors import IndexerResponseError, IndexerUnavailableError
from algoimpact.domain.models import AssetParams, Block, Transaction, TransactionPage

log = logging.getLogger(__name__)


class IndexerClient(LedgerQueryService):
    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        timeout: Optional[int] = None,
    ):
        """
        Initialize the indexer client.

        Args:
            base_url: Optional indexer URL (defaults to settings.indexer_url)
            token: Optional API token (defaults to settings.indexer_token)
            timeout: Optional HTTP timeout in seconds (defaults to settings.http_timeout_seconds)
        """
        self.base_url = (base_url or settings.indexer_url).rstrip("/")
        self.token = settings.indexer_token if token is None else token
        self.timeout = timeout or settings.http_timeout_seconds
        self.headers: Dict[str, str] = {"Accept": "application/json"}
        if self.token:
            self.headers["X-Indexer-API-Token"] = self.token

    def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Optional[Dict[str, Any]]:
        """
        GET a JSON object from the indexer.

        Returns:
            Decoded JSON object, or None when the indexer answers 404

        Raises:
            IndexerUnavailableError: On timeout or connection failure
            IndexerResponseError: On any other HTTP error or a non-object body
        """
        url = f"{self.base_url}{path}"
        try:
            log.debug("GET %s params=%s", url, params)
            resp = requests.get(url, params=params, headers=self.headers, timeout=self.timeout)
            if resp.status_code == 404:
                log.debug("Indexer returned 404 for %s", path)
                return None
            resp.raise_for_status()
            data = resp.json()
        except requests.exceptions.Timeout as e:
            log.warning("Indexer timeout after %d seconds: %s", self.timeout, path)
            raise IndexerUnavailableError(f"Indexer timeout after {self.timeout}s: {path}") from e
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            log.error("Indexer HTTP error %s for %s", status, path)
            raise IndexerResponseError(f"Indexer HTTP error {status}: {path}", status_code=status) from e
        except requests.exceptions.RequestException as e:
            log.warning("Indexer request failed (network/connection error): %s", e)
            raise IndexerUnavailableError(f"Indexer request failed: {e}") from e
        except ValueError as e:
            log.error("Indexer returned invalid JSON for %s: %s", path, e)
            raise IndexerResponseError(f"Indexer returned invalid JSON: {e}") from e

        if not isinstance(data, dict):
            log.error("Indexer unexpected response type for %s: %r", path, type(data))
            raise IndexerResponseError(f"Indexer returned non-object JSON for {path}")
        return data

    # --- blocking lookups ---

    def get_transaction(self, txn_id: str) -> Optional[Transaction]:
        data = self._get(f"/v2/transactions/{txn_id}")
        if data is None or not data.get("transaction"):
            return None
        return decode_transaction(data["transaction"])

    def get_block(self, round: int) -> Optional[Block]:
        data = self._get(f"/v2/blocks/{int(round)}")
        if data is None:
            return None
        return decode_block(data)

    def get_asset(self, asset_id: int) -> Optional[AssetParams]:
        data = self._get(f"/v2/assets/{int(asset_id)}", params={"include-all": "true"})
        if data is None or not data.get("asset"):
            return None
        asset = decode_asset(data["asset"])
        log.info("Fetched asset %d: decimals=%d unit=%s", asset.asset_id, asset.decimals, asset.unit_name)
        return asset

    def search(
        self,
        address: Optional[str] = None,
        tx_type: Optional[str] = None,
        min_round: Optional[int] = None,
        max_round: Optional[int] = None,
        limit: Optional[int] = None,
        next_token: Optional[str] = None,
    ) -> TransactionPage:
        params = {
            "address": address,
            "tx-type": tx_type,
            "min-round": min_round,
            "max-round": max_round,
            "limit": limit,
            "next": next_token,
        }
        data = self._get("/v2/transactions", params={k: v for k, v in params.items() if v is not None})
        if data is None:
            return TransactionPage(transactions=())
        return decode_transaction_page(data)

    # --- LedgerQueryService ---

    async def _run(self, func, *args, **kwargs):
        # Run the blocking request in the default executor
        loop = asyncio.get_event_loop()
        return await loop.run_in_executor(None, partial(func, *args, **kwargs))

    async def lookup_transaction_by_id(self, txn_id: str) -> Optional[Transaction]:
        return await self._run(self.get_transaction, txn_id)

    async def lookup_block(self, round: int) -> Optional[Block]:
        return await self._run(self.get_block, round)

    async def lookup_asset_by_id(self, asset_id: int) -> Optional[AssetParams]:
        return await self._run(self.get_asset, asset_id)

    async def search_transactions(
        self,
        address: Optional[str] = None,
        tx_type: Optional[str] = None,
        min_round: Optional[int] = None,
        max_round: Optional[int] = None,
        limit: Optional[int] = None,
        next_token: Optional[str] = None,
    ) -> TransactionPage:
        return await self._run(
            self.search,
            address=address,
            tx_type=tx_type,
            min_round=min_round,
            max_round=max_round,
            limit=limit,
            next_token=next_token,
        )
