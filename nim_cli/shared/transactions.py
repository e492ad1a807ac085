"""Transaction records and helpers for reading banking API exports.

Records arrive as loosely typed JSON mappings, either from a banking API
`get_transactions` payload or from the mock generators. Parsing is lenient on
purpose: a field that is missing or malformed becomes ``None``/empty instead of
failing the whole batch, and each analyzer decides what an unusable record
means for it. Only file-level problems raise.
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable, Mapping

from dateutil.parser import isoparse

from .exceptions import TransactionSourceError

SEND = "send"
RECEIVE = "receive"

UNKNOWN_MERCHANT = "Unknown"

_DATE_FIELDS = ("date", "createdAt", "created_at")
_MERCHANT_FALLBACK_FIELDS = ("recipient", "counterparty")


@dataclass(frozen=True, slots=True)
class Transaction:
    id: str
    type: str
    amount: float | None
    description: str
    date: datetime | None
    status: str
    currency: str
    recipient: str

    @property
    def merchant(self) -> str:
        """Label used to identify a recurring payee."""

        if self.description:
            return self.description
        if self.recipient:
            return self.recipient
        return UNKNOWN_MERCHANT

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> Transaction:
        recipient = ""
        for key in _MERCHANT_FALLBACK_FIELDS:
            recipient = _text(raw.get(key))
            if recipient:
                break
        date_value = None
        for key in _DATE_FIELDS:
            if key in raw:
                date_value = raw[key]
                break
        return cls(
            id=_text(raw.get("id")),
            type=_text(raw.get("type")),
            amount=parse_amount(raw.get("amount")),
            description=_text(raw.get("description")),
            date=parse_timestamp(date_value),
            status=_text(raw.get("status")),
            currency=_text(raw.get("currency")),
            recipient=recipient,
        )


def coerce_transactions(records: Iterable[Any]) -> list[Transaction]:
    """Convert raw records into Transactions, dropping entries that are not mappings."""

    return [Transaction.from_mapping(record) for record in records if isinstance(record, Mapping)]


def parse_amount(value: Any) -> float | None:
    """Return a finite float amount, or ``None`` for anything else (NaN and inf included)."""

    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        amount = float(value)
    elif isinstance(value, str):
        try:
            amount = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return amount if math.isfinite(amount) else None


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC."""

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        try:
            parsed = isoparse(value.strip())
        except (ValueError, OverflowError):
            return None
    else:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def extract_records(payload: Any) -> list[Mapping[str, Any]]:
    """Return transaction mappings from a bare list or a ``{"transactions": [...]}`` payload."""

    if isinstance(payload, Mapping):
        payload = payload.get("transactions")
        if payload is None:
            raise TransactionSourceError("Transaction payload has no 'transactions' array.")
    if not isinstance(payload, list):
        raise TransactionSourceError("Transaction payload must be a list of transaction objects.")
    return [record for record in payload if isinstance(record, Mapping)]


def load_transactions_file(path: str | Path) -> list[Mapping[str, Any]]:
    """Read a JSON export of banking transactions from disk."""

    source = Path(path).expanduser()
    try:
        text = source.read_text(encoding="utf-8")
    except OSError as exc:
        raise TransactionSourceError(f"Unable to read transactions from {source}: {exc}") from exc
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise TransactionSourceError(f"{source} is not valid JSON: {exc}") from exc
    return extract_records(payload)


def _text(value: Any) -> str:
    if isinstance(value, str):
        return value
    return ""
