"""Keyword-based spending categories shared by the analyzers."""

from __future__ import annotations

FOOD_AND_DINING = "Food & Dining"
TRANSPORTATION = "Transportation"
SHOPPING = "Shopping"
ENTERTAINMENT = "Entertainment"
BILLS_AND_UTILITIES = "Bills & Utilities"
OTHER = "Other"

# Evaluated top to bottom; the first category with a matching keyword wins.
CATEGORY_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    (
        FOOD_AND_DINING,
        ("starbucks", "coffee", "chipotle", "pizza", "food", "doordash", "restaurant", "cafe"),
    ),
    (TRANSPORTATION, ("uber", "lyft", "gas", "metro", "parking")),
    (SHOPPING, ("amazon", "target", "nike", "store")),
    (ENTERTAINMENT, ("netflix", "spotify", "movie", "steam", "hulu", "disney")),
    (BILLS_AND_UTILITIES, ("bill", "electric", "internet", "phone")),
)

CATEGORY_ORDER: tuple[str, ...] = tuple(name for name, _ in CATEGORY_KEYWORDS) + (OTHER,)


def categorize_transaction(description: str) -> str:
    """Return the spending category for a transaction description."""

    text = (description or "").lower()
    for category, keywords in CATEGORY_KEYWORDS:
        if any(keyword in text for keyword in keywords):
            return category
    return OTHER
