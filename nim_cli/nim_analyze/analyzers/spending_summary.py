"""Spending summary analyzer."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence

import pandas as pd

from nim_cli.shared.transactions import RECEIVE, SEND, coerce_transactions

from .. import mock_data
from ..categories import CATEGORY_ORDER, categorize_transaction
from ..metrics import format_amount, percentage, ratio, safe_float
from ..sources import resolve_source
from ..types import AnalysisContext, AnalysisResult, TableSeries

TOP_CATEGORY_LIMIT = 5
LOW_VELOCITY_PER_WEEK = 2
HIGH_VELOCITY_PER_WEEK = 7
EMPTY_MESSAGE = "No transactions found in the specified period"


@dataclass(frozen=True)
class CategorySummary:
    category: str
    amount: float
    count: int
    percentage: float


@dataclass(frozen=True)
class SpendingSummary:
    """Result of a spending analysis.

    An empty input produces a summary carrying only ``message``; the numeric
    fields are then meaningless and left out of ``to_payload``.
    """

    total_spent: float = 0.0
    total_received: float = 0.0
    net_cash_flow: float = 0.0
    spend_count: int = 0
    receive_count: int = 0
    avg_daily_spend: float = 0.0
    velocity: str = "low"
    top_categories: Sequence[CategorySummary] = field(default_factory=tuple)
    insights: Sequence[str] = field(default_factory=tuple)
    message: str | None = None

    def is_empty(self) -> bool:
        return self.message is not None

    def to_payload(self) -> dict[str, Any]:
        if self.is_empty():
            return {"summary": self.message}
        return {
            "total_spent": format_amount(self.total_spent),
            "total_received": format_amount(self.total_received),
            "net_cash_flow": format_amount(self.net_cash_flow),
            "spend_count": self.spend_count,
            "receive_count": self.receive_count,
            "avg_daily_spend": format_amount(self.avg_daily_spend),
            "velocity": self.velocity,
            "top_categories": [
                {
                    "category": entry.category,
                    "amount": format_amount(entry.amount),
                    "count": entry.count,
                    "percentage": f"{entry.percentage:.1f}%",
                }
                for entry in self.top_categories
            ],
            "insights": list(self.insights),
        }


def analyze_spending(transactions: Sequence[Mapping[str, Any]], days: int) -> SpendingSummary:
    """Summarise totals, category mix, and velocity for a transaction list."""

    if len(transactions) == 0:
        return SpendingSummary(message=EMPTY_MESSAGE)

    frame = _build_frame(transactions)
    spend = frame[frame["type"] == SEND]
    receive = frame[frame["type"] == RECEIVE]

    total_spent = safe_float(spend["amount"].sum())
    total_received = safe_float(receive["amount"].sum())
    spend_count = int(len(spend))

    avg_daily_spend = ratio(total_spent, days)
    net_cash_flow = total_received - total_spent
    categories = _rank_categories(spend, total_spent)
    top_categories = categories[:TOP_CATEGORY_LIMIT]

    return SpendingSummary(
        total_spent=total_spent,
        total_received=total_received,
        net_cash_flow=net_cash_flow,
        spend_count=spend_count,
        receive_count=int(len(receive)),
        avg_daily_spend=avg_daily_spend,
        velocity=calculate_velocity(spend_count, days),
        top_categories=tuple(top_categories),
        insights=tuple(
            _build_insights(
                spend_count=spend_count,
                days=days,
                avg_daily_spend=avg_daily_spend,
                net_cash_flow=net_cash_flow,
                top_categories=top_categories,
            )
        ),
    )


def calculate_velocity(transaction_count: int, days: int) -> str:
    """Classify spending frequency from transactions per week."""

    per_week = ratio(transaction_count, days) * 7
    if per_week < LOW_VELOCITY_PER_WEEK:
        return "low"
    if per_week < HIGH_VELOCITY_PER_WEEK:
        return "moderate"
    return "high"


def analyze(context: AnalysisContext) -> AnalysisResult:
    days = int(context.options.get("days") or context.app_config.analysis.spending_days)

    source = resolve_source(
        context,
        lambda rng: mock_data.generate_spending_transactions(days, now=context.now, rng=rng),
    )
    summary = analyze_spending(source.records, days)
    context.logger.debug(
        f"spending: {summary.spend_count} outgoing, {summary.receive_count} incoming "
        f"of {len(source.records)} records"
    )

    json_payload = {
        "period_days": days,
        "total_transactions": len(source.records),
        "analysis": summary.to_payload(),
        "data_source": {"is_mock": source.is_mock},
        "generated_at": context.now.isoformat(timespec="seconds"),
    }

    if summary.is_empty():
        return AnalysisResult(
            title="Spending Analysis",
            summary=[summary.message or EMPTY_MESSAGE],
            tables=[],
            json_payload=json_payload,
        )

    return AnalysisResult(
        title="Spending Analysis",
        summary=_build_summary(summary),
        tables=[_build_table(summary.top_categories)],
        json_payload=json_payload,
    )


def _build_frame(transactions: Sequence[Mapping[str, Any]]) -> pd.DataFrame:
    rows = [
        {
            "type": record.type,
            "amount": record.amount if record.amount is not None else 0.0,
            "category": categorize_transaction(record.description),
        }
        for record in coerce_transactions(transactions)
    ]
    frame = pd.DataFrame(rows, columns=["type", "amount", "category"])
    frame["amount"] = frame["amount"].astype(float)
    return frame


def _rank_categories(spend: pd.DataFrame, total_spent: float) -> list[CategorySummary]:
    if spend.empty:
        return []
    grouped = spend.groupby("category", sort=False)["amount"].agg(["sum", "count"])
    categories = [
        CategorySummary(
            category=str(name),
            amount=safe_float(row["sum"]),
            count=int(row["count"]),
            percentage=percentage(safe_float(row["sum"]), total_spent),
        )
        for name, row in grouped.iterrows()
    ]
    categories.sort(key=lambda entry: (-entry.amount, CATEGORY_ORDER.index(entry.category)))
    return categories


def _build_insights(
    *,
    spend_count: int,
    days: int,
    avg_daily_spend: float,
    net_cash_flow: float,
    top_categories: Sequence[CategorySummary],
) -> list[str]:
    insights = [
        f"You made {spend_count} spending transactions over {days} days",
        f"Average daily spend: ${avg_daily_spend:.2f}",
    ]
    if net_cash_flow > 0:
        insights.append(f"Great! You're cash flow positive with ${net_cash_flow:.2f} net income")
    elif net_cash_flow < 0:
        insights.append(f"You spent ${abs(net_cash_flow):.2f} more than you received this period")

    if top_categories:
        top = top_categories[0]
        insights.append(
            f"Your biggest spending category is {top.category} ({top.percentage:.0f}% of spending)"
        )
    return insights


def _build_table(categories: Sequence[CategorySummary]) -> TableSeries:
    rows = [
        [
            entry.category,
            round(entry.amount, 2),
            entry.count,
            round(entry.percentage, 1),
        ]
        for entry in categories
    ]
    return TableSeries(
        name="top_categories",
        columns=["Category", "Amount", "Count", "Share (%)"],
        rows=rows,
        metadata={"unit": "USD"},
    )


def _build_summary(summary: SpendingSummary) -> list[str]:
    lines = list(summary.insights)
    lines.append(f"Spending velocity: {summary.velocity}.")
    return lines
