"""Common metric helpers for nim-analyze."""

from __future__ import annotations

import math
from typing import Any


def safe_float(value: Any) -> float:
    """Convert pandas/numpy scalar to float for JSON compatibility."""

    if value is None:
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def ratio(numerator: float, denominator: float) -> float:
    """Safe ratio helper returning 0 when denominator is zero or negative."""

    if denominator <= 0:
        return 0.0
    return numerator / denominator


def percentage(part: float, whole: float) -> float:
    """Return ``part`` as a percentage of ``whole`` (0 when whole is 0)."""

    if whole <= 0:
        return 0.0
    return part / whole * 100


def round_cents(value: float) -> float:
    """Round to two decimals, halves away from zero."""

    return math.copysign(math.floor(abs(value) * 100 + 0.5), value) / 100


def format_amount(value: float) -> str:
    """Fixed-point two-decimal string used for grouping keys and payloads."""

    return f"{value:.2f}"
