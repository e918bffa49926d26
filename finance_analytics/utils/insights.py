from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional, Sequence

from finance_analytics.utils.analyzer import FinancialAnalytics
from finance_analytics.utils.normalization import Record, category_label, format_amount, is_active

OVER_BUDGET_PCT = 100.0
APPROACHING_BUDGET_PCT = 80.0
WELL_WITHIN_BUDGET_PCT = 50.0
HIGH_SPENDING_SHARE_PCT = 30.0
MANY_ACTIVE_EXPENSES = 10
UNDERSPEND_RATIO = 0.5


@dataclass
class Insight:
    """A single human-readable observation about the analyzed finances."""

    type: str
    title: str
    message: str
    action: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        # Remove None values for cleaner JSON responses
        return {k: v for k, v in data.items() if v is not None}


def _utilization_insight(utilization: float) -> Optional[Insight]:
    if utilization > OVER_BUDGET_PCT:
        return Insight(
            type="warning",
            title="Over Budget",
            message=(
                f"You've exceeded your total budget by {utilization - 100:.1f}%. "
                "Consider reviewing your spending."
            ),
            action="Review Budgets",
        )
    if utilization > APPROACHING_BUDGET_PCT:
        return Insight(
            type="warning",
            title="Approaching Budget Limit",
            message=f"You've used {utilization:.1f}% of your budget. Monitor spending closely.",
            action="Monitor Spending",
        )
    if utilization < WELL_WITHIN_BUDGET_PCT:
        return Insight(
            type="success",
            title="Well Within Budget",
            message=f"You're using only {utilization:.1f}% of your budget. Great financial discipline!",
        )
    return None


def generate_insights(
    analytics: FinancialAnalytics,
    expenses: Sequence[Record] = (),
    currency: str = "USD",
) -> List[Insight]:
    """
    Derive warnings, tips and highlights from an analytics result.

    `expenses` should be the same (filtered) expense list the analytics were
    computed from; it is only used to count active recurring expenses.
    """
    insights: List[Insight] = []

    utilization = _utilization_insight(analytics.budget_utilization)
    if utilization:
        insights.append(utilization)

    over_budget = [
        item for item in analytics.budget_vs_actual if item.budgeted > 0 and item.actual > item.budgeted
    ]
    if over_budget:
        worst = max(over_budget, key=lambda item: item.variance)
        insights.append(
            Insight(
                type="warning",
                title="Category Over Budget",
                message=(
                    f"{category_label(worst.category)} is over budget by "
                    f"{format_amount(abs(worst.variance), currency)}."
                ),
                action="Review Category",
            )
        )

    total_spending = analytics.total_costs + analytics.total_expenses
    if analytics.top_categories and total_spending > 0:
        top = analytics.top_categories[0]
        share = top.total / total_spending * 100
        if share > HIGH_SPENDING_SHARE_PCT:
            insights.append(
                Insight(
                    type="info",
                    title="High Spending Category",
                    message=f"{category_label(top.category)} accounts for {share:.1f}% of your total spending.",
                    action="Analyze Category",
                )
            )

    active_count = sum(1 for e in expenses if is_active(e))
    if active_count > MANY_ACTIVE_EXPENSES:
        insights.append(
            Insight(
                type="info",
                title="Multiple Active Expenses",
                message=(
                    f"You have {active_count} active recurring expenses. "
                    "Consider reviewing subscriptions for potential savings."
                ),
                action="Review Expenses",
            )
        )

    underspent = [
        item
        for item in analytics.category_breakdown
        if item.budgets > 0 and item.costs + item.expenses < item.budgets * UNDERSPEND_RATIO
    ]
    if underspent:
        best = max(underspent, key=lambda item: item.budgets - (item.costs + item.expenses))
        savings = best.budgets - (best.costs + best.expenses)
        insights.append(
            Insight(
                type="success",
                title="Savings Opportunity",
                message=(
                    f"{category_label(best.category)} is under budget. "
                    f"You could save up to {format_amount(savings, currency)}."
                ),
                action="Optimize Budget",
            )
        )

    return insights
