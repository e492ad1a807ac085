"""Analyzer module exports."""

from . import spending_summary, subscription_detect

__all__ = [
    "spending_summary",
    "subscription_detect",
]
