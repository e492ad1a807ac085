"""Resolve the transaction list an analyzer should run against."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Sequence

from .types import AnalysisContext, AnalysisError

MockGenerator = Callable[[random.Random], list[dict[str, Any]]]


@dataclass(frozen=True)
class TransactionSource:
    """Materialised transaction records plus where they came from."""

    records: Sequence[Mapping[str, Any]]
    is_mock: bool


def resolve_source(context: AnalysisContext, generate_mock: MockGenerator) -> TransactionSource:
    """Return caller-supplied records, or synthetic ones when mock mode is on."""

    if context.use_mock:
        rng = random.Random(context.app_config.mock.seed)
        records = generate_mock(rng)
        context.logger.info(f"Generated {len(records)} mock transactions for analysis")
        return TransactionSource(records=records, is_mock=True)

    if context.transactions is None:
        raise AnalysisError(
            "No transaction data supplied. Pass --input with a transactions export or enable mock data."
        )
    records = list(context.transactions)
    context.logger.debug(f"Analyzing {len(records)} supplied transactions")
    return TransactionSource(records=records, is_mock=False)
