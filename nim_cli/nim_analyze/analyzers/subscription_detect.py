"""Subscription detection analyzer.

Recurring payments are found by grouping outgoing transactions on
(merchant, amount rounded to cents) and keeping groups whose payment
intervals are regular: at least 70% of the gaps must sit within 20% of the
mean gap. Surviving groups are classified by mean gap into a billing
frequency, which drives the next-payment estimate and the monthly cost
normalisation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, time, timedelta, timezone
from typing import Any, Callable, Mapping, Sequence

from dateutil.relativedelta import relativedelta

from nim_cli.shared.transactions import SEND, coerce_transactions

from .. import mock_data
from ..metrics import format_amount, round_cents
from ..sources import resolve_source
from ..types import AnalysisContext, AnalysisResult, TableSeries

DEFAULT_MIN_AMOUNT = 1.00
DEFAULT_MAX_AMOUNT = 999.99

INTERVAL_TOLERANCE = 0.2
REGULAR_SHARE = 0.7
HIGH_CONFIDENCE_OCCURRENCES = 4
MEDIUM_CONFIDENCE_OCCURRENCES = 3
INACTIVE_AFTER_DAYS = 90
INACTIVE_MAX_OCCURRENCES = 3
SAVINGS_TIP_THRESHOLD = 50
SAVINGS_TIP_SHARE = 0.1

UNKNOWN = "unknown"
IRREGULAR = "irregular"
NO_SUBSCRIPTIONS_MESSAGE = "No subscriptions were detected in your transaction history."

# Checked in order; boundaries overlap, so the order decides e.g. that 7 days is biweekly.
FREQUENCY_RANGES: tuple[tuple[str, float, float], ...] = (
    ("monthly", 25, 35),
    ("quarterly", 80, 100),
    ("semi-annual", 170, 190),
    ("annual", 350, 380),
    ("biweekly", 7, 14),
    ("weekly", 1, 7),
)

NEXT_PAYMENT_DAYS: dict[str, int] = {"weekly": 7, "biweekly": 14}
NEXT_PAYMENT_MONTHS: dict[str, int] = {"monthly": 1, "quarterly": 3, "semi-annual": 6, "annual": 12}

# 2.167 ~ 26/12 and 4.333 ~ 52/12; kept as literals so totals stay stable.
MONTHLY_NORMALISERS: dict[str, Callable[[float], float]] = {
    "monthly": lambda amount: amount,
    "quarterly": lambda amount: amount / 3,
    "semi-annual": lambda amount: amount / 6,
    "annual": lambda amount: amount / 12,
    "biweekly": lambda amount: amount * 2.167,
    "weekly": lambda amount: amount * 4.333,
}

OVERLAP_BUCKETS: tuple[tuple[str, tuple[str, ...]], ...] = (
    (
        "streaming",
        ("netflix", "hulu", "disney", "prime", "spotify", "hbo", "apple tv", "youtube premium"),
    ),
    ("music", ("spotify", "apple music", "youtube music", "tidal", "pandora")),
    ("cloud", ("dropbox", "google one", "icloud", "onedrive")),
    ("fitness", ("peloton", "classpass", "apple fitness", "strava", "planet fitness")),
    ("software", ("adobe", "github", "office")),
)


@dataclass(frozen=True)
class SubscriptionCandidate:
    merchant: str
    amount: float
    dates: Sequence[datetime]
    frequency: str
    last_occurrence: datetime
    estimated_next: datetime | None
    total_paid: float
    confidence: str

    @property
    def occurrences(self) -> int:
        return len(self.dates)

    def estimated_next_label(self) -> str:
        if self.estimated_next is None:
            return UNKNOWN
        return self.estimated_next.date().isoformat()

    def to_payload(self) -> dict[str, Any]:
        return {
            "merchant": self.merchant,
            "amount": self.amount,
            "frequency": self.frequency,
            "occurrences": self.occurrences,
            "last_occurrence": self.last_occurrence.date().isoformat(),
            "estimated_next": self.estimated_next_label(),
            "total_paid": self.total_paid,
            "confidence": self.confidence,
            "dates": [value.date().isoformat() for value in self.dates],
        }


@dataclass(frozen=True)
class SubscriptionReport:
    subscriptions: Sequence[SubscriptionCandidate] = field(default_factory=tuple)
    total_monthly_cost: float = 0.0
    warnings: Sequence[str] = field(default_factory=tuple)


def analyze_subscriptions(
    transactions: Sequence[Mapping[str, Any]],
    cutoff: datetime | None,
    min_amount: float | None = DEFAULT_MIN_AMOUNT,
    max_amount: float | None = DEFAULT_MAX_AMOUNT,
    *,
    now: datetime | None = None,
) -> SubscriptionReport:
    """Detect recurring payments and summarise their monthly cost."""

    subscriptions = detect_subscriptions(transactions, cutoff, min_amount, max_amount)
    total_monthly_cost = calculate_total_monthly_cost(subscriptions)
    warnings = generate_warnings(subscriptions, now=now)
    return SubscriptionReport(
        subscriptions=tuple(subscriptions),
        total_monthly_cost=total_monthly_cost,
        warnings=tuple(warnings),
    )


def detect_subscriptions(
    transactions: Sequence[Mapping[str, Any]],
    cutoff: datetime | None,
    min_amount: float | None = DEFAULT_MIN_AMOUNT,
    max_amount: float | None = DEFAULT_MAX_AMOUNT,
) -> list[SubscriptionCandidate]:
    lower = DEFAULT_MIN_AMOUNT if min_amount is None else min_amount
    upper = DEFAULT_MAX_AMOUNT if max_amount is None else max_amount
    cutoff = _as_aware(cutoff) if cutoff is not None else None

    # dicts keep insertion order, so groups report in order of first appearance.
    groups: dict[tuple[str, str], list[datetime]] = {}
    for record in coerce_transactions(transactions):
        if record.type != SEND:
            continue
        if record.amount is None or record.amount < lower or record.amount > upper:
            continue
        if record.date is None:
            continue
        if cutoff is not None and record.date < cutoff:
            continue
        key = (record.merchant, format_amount(record.amount))
        groups.setdefault(key, []).append(record.date)

    subscriptions: list[SubscriptionCandidate] = []
    for (merchant, amount_key), dates in groups.items():
        if len(dates) < 2:
            continue
        dates = sorted(dates)
        intervals = payment_intervals(dates)
        if not is_regular_pattern(intervals):
            continue

        amount = float(amount_key)
        frequency = detect_frequency(intervals)
        last = dates[-1]
        subscriptions.append(
            SubscriptionCandidate(
                merchant=merchant,
                amount=amount,
                dates=tuple(dates),
                frequency=frequency,
                last_occurrence=last,
                estimated_next=estimate_next_payment(last, frequency),
                total_paid=round_cents(amount * len(dates)),
                confidence=calculate_confidence(len(dates), intervals),
            )
        )
    return subscriptions


def payment_intervals(dates: Sequence[datetime]) -> list[int]:
    """Whole days between consecutive (sorted) payment dates."""

    return [(later - earlier).days for earlier, later in zip(dates, dates[1:])]


def is_regular_pattern(intervals: Sequence[int]) -> bool:
    if not intervals:
        return False
    average = sum(intervals) / len(intervals)
    tolerance = average * INTERVAL_TOLERANCE
    within = sum(1 for interval in intervals if abs(interval - average) <= tolerance)
    return within / len(intervals) >= REGULAR_SHARE


def detect_frequency(intervals: Sequence[int]) -> str:
    if not intervals:
        return UNKNOWN
    average = sum(intervals) / len(intervals)
    for frequency, low, high in FREQUENCY_RANGES:
        if low <= average <= high:
            return frequency
    return IRREGULAR


def estimate_next_payment(last_payment: datetime, frequency: str) -> datetime | None:
    if frequency in NEXT_PAYMENT_DAYS:
        return last_payment + timedelta(days=NEXT_PAYMENT_DAYS[frequency])
    if frequency in NEXT_PAYMENT_MONTHS:
        return shift_months(last_payment, NEXT_PAYMENT_MONTHS[frequency])
    return None


def shift_months(value: datetime, months: int) -> datetime:
    """Move ``value`` by whole calendar months, carrying day overflow forward.

    Days past the end of the target month roll into the next one, so Jan 31
    plus one month is Mar 3 (Mar 2 in leap years) rather than Feb 28.
    """

    first_of_month = value.replace(day=1) + relativedelta(months=months)
    return first_of_month + timedelta(days=value.day - 1)


def calculate_confidence(occurrences: int, intervals: Sequence[int]) -> str:
    # Only regular groups reach this point, so the regularity re-check always
    # passes; it stays so that relaxing the upstream filter keeps working.
    if occurrences >= HIGH_CONFIDENCE_OCCURRENCES and is_regular_pattern(intervals):
        return "high"
    if occurrences >= MEDIUM_CONFIDENCE_OCCURRENCES:
        return "medium"
    return "low"


def monthly_equivalent(amount: float, frequency: str) -> float:
    """Normalise a charge to its monthly cost (0 for irregular/unknown)."""

    normalise = MONTHLY_NORMALISERS.get(frequency)
    if normalise is None:
        return 0.0
    return normalise(amount)


def calculate_total_monthly_cost(subscriptions: Sequence[SubscriptionCandidate]) -> float:
    total = sum(monthly_equivalent(sub.amount, sub.frequency) for sub in subscriptions)
    return round_cents(total)


def generate_warnings(
    subscriptions: Sequence[SubscriptionCandidate],
    *,
    now: datetime | None = None,
) -> list[str]:
    if not subscriptions:
        return [NO_SUBSCRIPTIONS_MESSAGE]

    now = _as_aware(now) if now is not None else datetime.now(timezone.utc)
    total_monthly = calculate_total_monthly_cost(subscriptions)
    warnings = [f"You are spending approximately ${total_monthly:.2f} per month on subscriptions."]

    for bucket, keywords in OVERLAP_BUCKETS:
        merchants = [
            sub.merchant
            for sub in subscriptions
            if any(keyword in sub.merchant.lower() for keyword in keywords)
        ]
        if len(merchants) > 1:
            warnings.append(
                f"You have multiple {bucket} subscriptions: {', '.join(merchants)}. "
                "Consider consolidating."
            )

    for sub in subscriptions:
        last_paid = sub.last_occurrence.date()
        last_paid_midnight = datetime.combine(last_paid, time.min, tzinfo=timezone.utc)
        if (
            sub.occurrences < INACTIVE_MAX_OCCURRENCES
            and now - last_paid_midnight > timedelta(days=INACTIVE_AFTER_DAYS)
        ):
            warnings.append(
                f"Subscription to '{sub.merchant}' seems inactive (last paid {last_paid.isoformat()}). "
                "Consider cancelling if you no longer use it."
            )

    if total_monthly > SAVINGS_TIP_THRESHOLD:
        savings = round_cents(total_monthly * SAVINGS_TIP_SHARE)
        warnings.append(
            f"Tip: Cancelling just 10% of your subscriptions could save you ${savings:.2f} monthly!"
        )
    return warnings


def analyze(context: AnalysisContext) -> AnalysisResult:
    settings = context.app_config.analysis
    months = int(context.options.get("timeframe_months") or settings.timeframe_months)
    min_amount = float(context.options.get("min_amount") or settings.min_amount)
    max_amount = float(context.options.get("max_amount") or settings.max_amount)
    cutoff = shift_months(context.now, -months)

    source = resolve_source(
        context,
        lambda rng: mock_data.generate_subscription_transactions(months, now=context.now, rng=rng),
    )
    report = analyze_subscriptions(
        source.records,
        cutoff,
        min_amount,
        max_amount,
        now=context.now,
    )
    context.logger.debug(
        f"subscriptions: {len(report.subscriptions)} recurring groups from "
        f"{len(source.records)} records since {cutoff.date().isoformat()}"
    )

    json_payload = {
        "analysis_period": f"{months} months",
        "total_transactions_scanned": len(source.records),
        "subscriptions_found": len(report.subscriptions),
        "subscriptions": [sub.to_payload() for sub in report.subscriptions],
        "total_monthly_cost": report.total_monthly_cost,
        "warnings": list(report.warnings),
        "data_source": {"is_mock": source.is_mock},
        "generated_at": context.now.isoformat(timespec="seconds"),
    }

    return AnalysisResult(
        title="Subscription Detection",
        summary=list(report.warnings),
        tables=[_build_table(report.subscriptions)] if report.subscriptions else [],
        json_payload=json_payload,
    )


def _build_table(subscriptions: Sequence[SubscriptionCandidate]) -> TableSeries:
    rows: list[list[Any]] = []
    for sub in subscriptions:
        rows.append(
            [
                sub.merchant,
                sub.amount,
                sub.frequency,
                sub.occurrences,
                sub.last_occurrence.date().isoformat(),
                sub.estimated_next_label(),
                sub.total_paid,
                sub.confidence,
            ]
        )
    return TableSeries(
        name="subscriptions",
        columns=[
            "Merchant",
            "Amount",
            "Frequency",
            "Occurrences",
            "Last Paid",
            "Next Estimate",
            "Total Paid",
            "Confidence",
        ],
        rows=rows,
        metadata={"unit": "USD"},
    )


def _as_aware(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
