"""Synthetic banking transactions for demos and offline testing.

The generators return plain dicts shaped like a banking API export so they can
flow through exactly the same parsing path as live data.
"""

from __future__ import annotations

import random
from datetime import datetime, timedelta
from typing import Any

from .metrics import round_cents

# (description, base amount, type)
SPENDING_TEMPLATES: tuple[tuple[str, float, str], ...] = (
    ("Starbucks Coffee", 8.50, "send"),
    ("Chipotle Mexican Grill", 15.75, "send"),
    ("Whole Foods Market", 67.30, "send"),
    ("DoorDash - Pizza Delivery", 32.50, "send"),
    ("Local Coffee Shop", 6.25, "send"),
    ("Uber Ride", 18.50, "send"),
    ("Gas Station", 45.00, "send"),
    ("Lyft Ride", 22.75, "send"),
    ("Metro Card Reload", 30.00, "send"),
    ("Amazon.com", 89.99, "send"),
    ("Target Store", 54.25, "send"),
    ("Nike Store", 125.00, "send"),
    ("Netflix Subscription", 15.99, "send"),
    ("Spotify Premium", 10.99, "send"),
    ("Movie Theater", 28.50, "send"),
    ("Steam Games", 59.99, "send"),
    ("Electric Bill Payment", 125.50, "send"),
    ("Internet Service", 79.99, "send"),
    ("Phone Bill", 65.00, "send"),
    ("Payroll Deposit", 2500.00, "receive"),
    ("Freelance Payment", 450.00, "receive"),
    ("Refund from Amazon", 29.99, "receive"),
    ("Payment from @alice", 75.00, "receive"),
)

# (merchant, amount, days between payments)
SUBSCRIPTION_TEMPLATES: tuple[tuple[str, float, int], ...] = (
    ("Netflix Subscription", 15.99, 30),
    ("Spotify Premium", 10.99, 30),
    ("Amazon Prime", 14.99, 30),
    ("Adobe Creative Cloud", 54.99, 30),
    ("Planet Fitness", 24.99, 30),
    ("New York Times Digital", 17.00, 30),
    ("Hulu (No Ads)", 17.99, 30),
    ("iCloud Storage 200GB", 2.99, 30),
    ("GitHub Pro", 7.00, 30),
    ("Dropbox Plus", 11.99, 30),
    ("Annual Software License", 299.00, 365),
    ("Quarterly Insurance", 450.00, 90),
    ("Biweekly Meal Delivery", 89.99, 14),
)

ONE_TIME_PURCHASES: tuple[str, ...] = (
    "Whole Foods Market",
    "Target Store",
    "Uber Ride",
    "Amazon.com",
    "Starbucks Coffee",
    "Gas Station",
)


def generate_spending_transactions(
    days: int,
    *,
    now: datetime,
    rng: random.Random,
) -> list[dict[str, Any]]:
    """Return 30-40 random transactions spread over the last ``days`` days."""

    span = max(days, 1)
    transactions: list[dict[str, Any]] = []
    for index in range(30 + rng.randrange(11)):
        description, base_amount, tx_type = rng.choice(SPENDING_TEMPLATES)
        tx_date = now - timedelta(days=rng.randrange(span))
        variance = 0.8 + rng.random() * 0.4
        transactions.append(
            _record(
                f"tx_mock_{index}",
                tx_type=tx_type,
                amount=round_cents(base_amount * variance),
                description=description,
                when=tx_date,
            )
        )
    return transactions


def generate_subscription_transactions(
    months: int,
    *,
    now: datetime,
    rng: random.Random,
    price_variance: float = 0.0,
) -> list[dict[str, Any]]:
    """Return recurring payments for 5-8 subscriptions plus one-off purchases.

    This departs from the mock feed the agent starter shipped with, which
    jittered every charge by up to 2% and drew templates with replacement.
    Jittered charges split one subscription across several (merchant, amount)
    groups, and repeated draws double up a merchant, so by default charges are
    exact and templates are distinct. Pass ``price_variance=0.02`` to get the
    old jitter back.
    """

    days_to_generate = months * 30
    transactions: list[dict[str, Any]] = []

    selected = rng.sample(SUBSCRIPTION_TEMPLATES, 5 + rng.randrange(4))
    for merchant, amount, frequency in selected:
        for occurrence in range(days_to_generate // frequency):
            days_ago = occurrence * frequency
            variance = 1 - price_variance + rng.random() * 2 * price_variance
            transactions.append(
                _record(
                    f"tx_sub_{merchant}_{occurrence}",
                    tx_type="send",
                    amount=round_cents(amount * variance),
                    description=merchant,
                    when=now - timedelta(days=days_ago),
                )
            )

    for index in range(20):
        purchase = rng.choice(ONE_TIME_PURCHASES)
        days_ago = rng.randrange(max(days_to_generate, 1))
        transactions.append(
            _record(
                f"tx_once_{index}",
                tx_type="send",
                amount=round_cents(10.00 + rng.random() * 90.00),
                description=purchase,
                when=now - timedelta(days=days_ago),
            )
        )
    return transactions


def _record(tx_id: str, *, tx_type: str, amount: float, description: str, when: datetime) -> dict[str, Any]:
    return {
        "id": tx_id,
        "type": tx_type,
        "amount": amount,
        "description": description,
        "date": when.isoformat(timespec="seconds"),
        "status": "completed",
        "currency": "USD",
    }
