"""Shared pytest fixtures for nim-analyze tests.

Transactions are built as plain dicts in the same shape a banking API export
uses, so every test goes through the lenient parsing path the tools use in
production. ``NOW`` pins the clock for anything that depends on "today".
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

import pytest

from nim_cli.shared import paths
from nim_cli.shared.config import AppConfig, load_config
from nim_cli.shared.logging import Logger, get_logger

NOW = datetime(2025, 7, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture()
def now() -> datetime:
    return NOW


@pytest.fixture()
def app_config(tmp_path: Path) -> AppConfig:
    """Return an AppConfig with defaults and a fixed mock seed."""

    env = {
        paths.CONFIG_FILE_ENV: str(tmp_path / "config.yaml"),
        "NIMCLI_MOCK_SEED": "7",
    }
    return load_config(env=env)


@pytest.fixture()
def logger() -> Logger:
    return get_logger(verbose=False)


@pytest.fixture()
def make_txn() -> Callable[..., dict[str, Any]]:
    """Build a transaction dict; ``when`` may be a datetime or an ISO string."""

    counter = {"value": 0}

    def _factory(
        description: str,
        amount: Any,
        when: datetime | str,
        *,
        tx_type: str = "send",
        **extra: Any,
    ) -> dict[str, Any]:
        counter["value"] += 1
        date_value = when.isoformat() if isinstance(when, datetime) else when
        record = {
            "id": f"tx_test_{counter['value']}",
            "type": tx_type,
            "amount": amount,
            "description": description,
            "date": date_value,
            "status": "completed",
            "currency": "USD",
        }
        record.update(extra)
        return record

    return _factory


@pytest.fixture()
def series() -> Callable[[datetime, list[int]], list[datetime]]:
    """Return datetimes starting at ``start`` separated by the given day gaps."""

    def _series(start: datetime, gaps: list[int]) -> list[datetime]:
        dates = [start]
        for gap in gaps:
            dates.append(dates[-1] + timedelta(days=gap))
        return dates

    return _series
