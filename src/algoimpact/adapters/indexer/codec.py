# src/algoimpact/adapters/indexer/codec.py
"""
Indexer JSON Codec - Indexer v2 Responses to Domain Models

The indexer REST API returns kebab-case JSON objects with base64-encoded
binary fields. These helpers turn them into the frozen domain dataclasses.

Files that USE this module:
- algoimpact.adapters.indexer.client (decodes every response)
- tests.test_indexer (codec unit tests)

Files that this module USES:
- algoimpact.domain.models (target dataclasses)
"""
from __future__ import annotations

import base64
from typing import Any, Dict, Mapping, Optional

from algoimpact.domain.models import (
    AssetParams,
    AssetTransferFields,
    Block,
    PaymentFields,
    Transaction,
    TransactionPage,
)


def _opt_int(node: Mapping[str, Any], key: str) -> Optional[int]:
    value = node.get(key)
    if value is None:
        return None
    return int(value)


def _decode_group(value: Optional[str]) -> Optional[bytes]:
    if not value:
        return None
    return base64.b64decode(value)


def decode_payment(node: Mapping[str, Any]) -> PaymentFields:
    return PaymentFields(
        receiver=node["receiver"],
        amount=int(node.get("amount", 0)),
        close_remainder_to=node.get("close-remainder-to"),
        close_amount=_opt_int(node, "close-amount"),
    )


def decode_asset_transfer(node: Mapping[str, Any]) -> AssetTransferFields:
    return AssetTransferFields(
        asset_id=int(node["asset-id"]),
        amount=int(node.get("amount", 0)),
        receiver=node["receiver"],
        sender=node.get("sender"),
        close_to=node.get("close-to"),
        close_amount=_opt_int(node, "close-amount"),
    )


def decode_transaction(node: Mapping[str, Any]) -> Transaction:
    """
    Decode one indexer transaction object, inner transactions included.

    Args:
        node: JSON object as returned under "transaction" / "transactions"

    Returns:
        Transaction domain model

    Raises:
        KeyError: If a required field (sender, tx-type, receiver...) is missing
    """
    pay = node.get("payment-transaction")
    axfer = node.get("asset-transfer-transaction")
    return Transaction(
        id=node.get("id"),
        sender=node["sender"],
        tx_type=node["tx-type"],
        fee=int(node.get("fee", 0)),
        group=_decode_group(node.get("group")),
        confirmed_round=_opt_int(node, "confirmed-round"),
        round_time=_opt_int(node, "round-time"),
        payment=decode_payment(pay) if pay else None,
        asset_transfer=decode_asset_transfer(axfer) if axfer else None,
        inner_txns=tuple(decode_transaction(inner) for inner in node.get("inner-txns") or ()),
    )


def decode_block(node: Mapping[str, Any]) -> Block:
    return Block(
        round=int(node["round"]),
        timestamp=_opt_int(node, "timestamp"),
        transactions=tuple(decode_transaction(t) for t in node.get("transactions") or ()),
    )


def decode_asset(node: Mapping[str, Any]) -> AssetParams:
    """Decode an indexer asset object ({"index": ..., "params": {...}})."""
    params: Dict[str, Any] = node.get("params") or {}
    return AssetParams(
        asset_id=int(node["index"]),
        decimals=int(params.get("decimals", 0)),
        unit_name=params.get("unit-name"),
        name=params.get("name"),
    )


def decode_transaction_page(data: Mapping[str, Any]) -> TransactionPage:
    return TransactionPage(
        transactions=tuple(decode_transaction(t) for t in data.get("transactions") or ()),
        next_token=data.get("next-token") or None,
    )
