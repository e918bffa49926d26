from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional, Sequence

from finance_analytics.utils.normalization import (
    CATEGORIES,
    Record,
    active_in_month,
    by_category,
    filter_currency,
    filter_project,
    is_active,
    month_label,
    open_ended_until,
    same_month,
    sum_amounts,
    sum_monthly,
    trend_months,
)

logger = logging.getLogger(__name__)

TOP_CATEGORY_LIMIT = 5


@dataclass
class CategoryBreakdown:
    """Spending and budget totals for a single category."""

    category: str
    costs: float
    expenses: float
    budgets: float
    percentage: float


@dataclass
class MonthlyTrend:
    month: str
    period: str
    costs: float
    expenses: float
    budgets: float


@dataclass
class BudgetVsActual:
    category: str
    budgeted: float
    actual: float
    variance: float
    percentage: float


@dataclass
class CategorySpending:
    category: str
    total: float
    count: int


@dataclass
class FinancialAnalytics:
    """Aggregated view of costs, recurring expenses and budgets in one currency."""

    total_costs: float = 0.0
    total_expenses: float = 0.0
    total_budgets: float = 0.0
    budget_utilization: float = 0.0
    category_breakdown: List[CategoryBreakdown] = field(default_factory=list)
    monthly_trend: List[MonthlyTrend] = field(default_factory=list)
    budget_vs_actual: List[BudgetVsActual] = field(default_factory=list)
    top_categories: List[CategorySpending] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _percentage(part: float, whole: float) -> float:
    return part / whole * 100 if whole > 0 else 0.0


def calculate_monthly_trend(
    costs: Sequence[Record],
    expenses: Sequence[Record],
    budgets: Sequence[Record],
    now: Optional[date] = None,
) -> List[MonthlyTrend]:
    """
    Trailing six-month view, oldest month first.

    Costs count toward the month they were incurred in. Active expenses and
    budgets count toward every month whose first day falls inside their
    start/end window; records without an end date run until the end of next
    year.
    """
    open_end = open_ended_until(now)
    trend = []
    for month in trend_months(now):
        trend.append(
            MonthlyTrend(
                month=month_label(month),
                period=month.strftime("%Y-%m"),
                costs=sum_amounts(c for c in costs if same_month(c.get("date"), month)),
                expenses=sum_monthly(e for e in expenses if active_in_month(e, month, open_end)),
                budgets=sum_amounts(b for b in budgets if active_in_month(b, month, open_end)),
            )
        )
    return trend


def calculate_financial_analytics(
    costs: Sequence[Record],
    expenses: Sequence[Record],
    budgets: Sequence[Record],
    currency: str = "USD",
    project_id: Optional[str] = None,
    now: Optional[date] = None,
) -> FinancialAnalytics:
    """
    Roll costs, recurring expenses and budgets up into a FinancialAnalytics.

    Only records in `currency` are considered; there is no conversion. When
    `project_id` is given the records are further restricted to that project
    ("unassigned" selects records with no project). Recurring expenses are
    projected onto a month, budgets are summed as-is. Malformed amounts count
    as zero and empty denominators yield zero percentages.
    """
    filtered_costs = filter_project(filter_currency(costs, currency), project_id)
    filtered_expenses = filter_project(filter_currency(expenses, currency), project_id)
    filtered_budgets = filter_project(filter_currency(budgets, currency), project_id)

    logger.debug(
        "Analyzing %d costs, %d expenses, %d budgets in %s (project=%s)",
        len(filtered_costs),
        len(filtered_expenses),
        len(filtered_budgets),
        currency,
        project_id,
    )

    total_costs = sum_amounts(filtered_costs)
    total_expenses = sum_monthly(filtered_expenses)
    total_budgets = sum_amounts(filtered_budgets)
    grand_total = total_costs + total_expenses

    category_breakdown: List[CategoryBreakdown] = []
    budget_vs_actual: List[BudgetVsActual] = []
    spending: List[CategorySpending] = []

    for category in CATEGORIES:
        category_costs = by_category(filtered_costs, category)
        category_expenses = by_category(filtered_expenses, category)

        cost_total = sum_amounts(category_costs)
        expense_total = sum_monthly(category_expenses)
        budget_total = sum_amounts(by_category(filtered_budgets, category))
        actual = cost_total + expense_total

        category_breakdown.append(
            CategoryBreakdown(
                category=category,
                costs=cost_total,
                expenses=expense_total,
                budgets=budget_total,
                percentage=_percentage(actual, grand_total),
            )
        )
        budget_vs_actual.append(
            BudgetVsActual(
                category=category,
                budgeted=budget_total,
                actual=actual,
                variance=actual - budget_total,
                percentage=_percentage(actual, budget_total),
            )
        )
        spending.append(
            CategorySpending(
                category=category,
                total=actual,
                count=len(category_costs) + sum(1 for e in category_expenses if is_active(e)),
            )
        )

    # sorted() is stable, so ties keep category order
    top_categories = sorted(spending, key=lambda item: item.total, reverse=True)[:TOP_CATEGORY_LIMIT]

    return FinancialAnalytics(
        total_costs=total_costs,
        total_expenses=total_expenses,
        total_budgets=total_budgets,
        budget_utilization=_percentage(total_costs, total_budgets),
        category_breakdown=category_breakdown,
        monthly_trend=calculate_monthly_trend(filtered_costs, filtered_expenses, filtered_budgets, now),
        budget_vs_actual=budget_vs_actual,
        top_categories=top_categories,
    )
