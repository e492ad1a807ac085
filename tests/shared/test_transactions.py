from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path

import pytest

from nim_cli.shared.exceptions import TransactionSourceError
from nim_cli.shared.transactions import (
    UNKNOWN_MERCHANT,
    Transaction,
    coerce_transactions,
    extract_records,
    load_transactions_file,
    parse_amount,
    parse_timestamp,
)


@pytest.mark.parametrize(
    "value, expected",
    [
        (12, 12.0),
        (9.99, 9.99),
        (" 15.50 ", 15.5),
        ("abc", None),
        (None, None),
        (True, None),
        ({"value": 1}, None),
        ("NaN", None),
        (" inf ", None),
        ("-Infinity", None),
        (float("nan"), None),
        (float("inf"), None),
    ],
)
def test_parse_amount(value, expected) -> None:
    assert parse_amount(value) == expected


def test_parse_timestamp_variants() -> None:
    assert parse_timestamp("2025-03-01T10:30:00Z") == datetime(2025, 3, 1, 10, 30, tzinfo=timezone.utc)
    assert parse_timestamp("2025-03-01") == datetime(2025, 3, 1, tzinfo=timezone.utc)
    assert parse_timestamp("2025-03-01T12:00:00+02:00") == datetime(2025, 3, 1, 10, tzinfo=timezone.utc)
    assert parse_timestamp(datetime(2025, 3, 1)).tzinfo is timezone.utc
    assert parse_timestamp("03/01/2025") is None
    assert parse_timestamp("") is None
    assert parse_timestamp(1740787200) is None


def test_transaction_from_mapping() -> None:
    txn = Transaction.from_mapping(
        {
            "id": "tx_1",
            "type": "send",
            "amount": "42.10",
            "description": "Lyft Ride",
            "createdAt": "2025-02-01T08:00:00Z",
            "status": "completed",
            "currency": "USD",
        }
    )
    assert txn.amount == 42.10
    assert txn.date == datetime(2025, 2, 1, 8, tzinfo=timezone.utc)
    assert txn.merchant == "Lyft Ride"


def test_merchant_fallbacks() -> None:
    assert Transaction.from_mapping({"recipient": "@bob"}).merchant == "@bob"
    assert Transaction.from_mapping({"counterparty": "Landlord LLC"}).merchant == "Landlord LLC"
    assert Transaction.from_mapping({}).merchant == UNKNOWN_MERCHANT


def test_coerce_transactions_skips_non_mappings() -> None:
    records = coerce_transactions([{"id": "a"}, "junk", None, 5, {"id": "b"}])
    assert [record.id for record in records] == ["a", "b"]


def test_extract_records_accepts_list_or_wrapper() -> None:
    assert extract_records([{"id": "a"}, "junk"]) == [{"id": "a"}]
    assert extract_records({"transactions": [{"id": "b"}]}) == [{"id": "b"}]


@pytest.mark.parametrize("payload", [{"items": []}, "transactions", {"transactions": {"id": "a"}}])
def test_extract_records_rejects_other_shapes(payload) -> None:
    with pytest.raises(TransactionSourceError):
        extract_records(payload)


def test_load_transactions_file(tmp_path: Path) -> None:
    export = tmp_path / "export.json"
    export.write_text(json.dumps({"transactions": [{"id": "tx_1", "amount": 5}]}), encoding="utf-8")

    assert load_transactions_file(export) == [{"id": "tx_1", "amount": 5}]


def test_load_transactions_file_errors(tmp_path: Path) -> None:
    with pytest.raises(TransactionSourceError, match="Unable to read"):
        load_transactions_file(tmp_path / "missing.json")

    broken = tmp_path / "broken.json"
    broken.write_text("[1, 2", encoding="utf-8")
    with pytest.raises(TransactionSourceError, match="not valid JSON"):
        load_transactions_file(broken)
