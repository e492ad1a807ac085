from __future__ import annotations

import pytest

from nim_cli.nim_analyze.categories import (
    CATEGORY_ORDER,
    OTHER,
    categorize_transaction,
)


@pytest.mark.parametrize(
    "description, expected",
    [
        ("Starbucks Coffee", "Food & Dining"),
        ("Whole Foods Market", "Food & Dining"),
        ("DoorDash - Pizza Delivery", "Food & Dining"),
        ("UBER RIDE", "Transportation"),
        ("Metro Card Reload", "Transportation"),
        ("Amazon Prime", "Shopping"),
        ("Nike Store", "Shopping"),
        ("Netflix Subscription", "Entertainment"),
        ("Steam Games", "Entertainment"),
        ("Phone Bill", "Bills & Utilities"),
        ("Internet Service", "Bills & Utilities"),
        ("Payroll Deposit", "Other"),
        ("", "Other"),
    ],
)
def test_categorize_transaction(description: str, expected: str) -> None:
    assert categorize_transaction(description) == expected


def test_first_matching_category_wins() -> None:
    # "coffee" (food) outranks "store" (shopping); "gas" outranks "bill".
    assert categorize_transaction("Coffee Store") == "Food & Dining"
    assert categorize_transaction("Gas Bill") == "Transportation"


def test_categorize_handles_missing_description() -> None:
    assert categorize_transaction(None) == OTHER  # type: ignore[arg-type]


def test_category_order_ends_with_other() -> None:
    assert CATEGORY_ORDER[0] == "Food & Dining"
    assert CATEGORY_ORDER[-1] == OTHER
    assert len(CATEGORY_ORDER) == 6
