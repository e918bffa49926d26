"""
Project-scoped financial analytics.

Specializes the general analyzer for a single project: task cost estimates
are folded in to forecast where the project will land against its budget.
Amount coercion and the monthly projection come from the shared
normalization helpers.
"""
from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from datetime import date
from typing import Any, Dict, List, Mapping, Optional, Sequence

from finance_analytics.utils.normalization import (
    CATEGORIES,
    Record,
    by_category,
    filter_currency,
    is_active,
    month_label,
    same_month,
    sum_amounts,
    sum_monthly,
    to_monthly,
    to_number,
    trend_months,
)

logger = logging.getLogger(__name__)

# Task estimates carry no category of their own.
ESTIMATE_CATEGORY = "other"


@dataclass
class ProjectFinancialSummary:
    total_budget: float
    total_spent: float
    total_estimated: float
    monthly_expenses: float
    remaining: float
    currency: str
    budget_utilization: float
    estimated_completion: float
    variance: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ProjectCostBreakdown:
    category: str
    budgeted: float
    spent: float
    estimated: float
    remaining: float
    percentage: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ProjectExpenseAnalysis:
    total_expenses: float = 0.0
    monthly_expenses: float = 0.0
    by_category: List[Dict[str, Any]] = field(default_factory=list)
    by_frequency: List[Dict[str, Any]] = field(default_factory=list)
    trends: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ProjectTaskEstimate:
    task_id: Optional[str]
    task_title: Optional[str]
    estimated_cost: Dict[str, Any]
    status: Optional[str]
    priority: Optional[str]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _estimate(task: Record) -> Optional[Record]:
    estimate = task.get("estimated_cost")
    return estimate if isinstance(estimate, Mapping) and estimate else None


def _tasks_in_currency(tasks: Sequence[Record], currency: str) -> List[Record]:
    return [t for t in tasks if (_estimate(t) or {}).get("currency") == currency]


def _sum_estimates(tasks: Sequence[Record]) -> float:
    return sum((to_number(_estimate(t).get("amount")) for t in tasks), 0.0)


def calculate_project_financial_summary(
    costs: Sequence[Record],
    expenses: Sequence[Record],
    budgets: Sequence[Record],
    tasks: Sequence[Record],
    currency: str = "USD",
) -> ProjectFinancialSummary:
    """Budget, spend and task-estimate forecast for one project."""
    filtered_costs = filter_currency(costs, currency)
    filtered_expenses = filter_currency(expenses, currency)
    filtered_budgets = filter_currency(budgets, currency)

    total_spent = sum_amounts(filtered_costs)
    total_estimated = _sum_estimates(_tasks_in_currency(tasks, currency))
    total_budget = sum_amounts(filtered_budgets)
    estimated_completion = total_spent + total_estimated

    return ProjectFinancialSummary(
        total_budget=total_budget,
        total_spent=total_spent,
        total_estimated=total_estimated,
        monthly_expenses=sum_monthly(filtered_expenses),
        remaining=total_budget - total_spent,
        currency=currency,
        budget_utilization=total_spent / total_budget * 100 if total_budget > 0 else 0.0,
        estimated_completion=estimated_completion,
        variance=total_budget - estimated_completion,
    )


def calculate_project_cost_breakdown(
    costs: Sequence[Record],
    budgets: Sequence[Record],
    tasks: Sequence[Record],
    currency: str = "USD",
) -> List[ProjectCostBreakdown]:
    """Per-category budget vs spend; categories with no activity are left out."""
    filtered_costs = filter_currency(costs, currency)
    filtered_budgets = filter_currency(budgets, currency)
    estimated_total = _sum_estimates(_tasks_in_currency(tasks, currency))

    breakdown = []
    for category in CATEGORIES:
        budgeted = sum_amounts(by_category(filtered_budgets, category))
        spent = sum_amounts(by_category(filtered_costs, category))
        estimated = estimated_total if category == ESTIMATE_CATEGORY else 0.0
        if not (budgeted > 0 or spent > 0 or estimated > 0):
            continue

        planned = budgeted + estimated
        breakdown.append(
            ProjectCostBreakdown(
                category=category,
                budgeted=budgeted,
                spent=spent,
                estimated=estimated,
                remaining=budgeted - spent,
                percentage=spent / planned * 100 if planned > 0 else 0.0,
            )
        )
    return breakdown


def calculate_project_expense_analysis(
    expenses: Sequence[Record],
    currency: str = "USD",
    now: Optional[date] = None,
) -> ProjectExpenseAnalysis:
    """
    Breakdown of a project's active recurring expenses.

    Category and frequency groupings use raw amounts in first-seen order.
    The trend places each expense in the month it started, projected onto a
    month.
    """
    active = [e for e in filter_currency(expenses, currency) if is_active(e)]
    total_expenses = sum_amounts(active)

    categories: Dict[str, float] = {}
    frequencies: Dict[str, Dict[str, Any]] = {}
    for expense in active:
        amount = to_number(expense.get("amount"))
        category = expense.get("category")
        categories[category] = categories.get(category, 0.0) + amount

        bucket = frequencies.setdefault(expense.get("frequency"), {"amount": 0.0, "count": 0})
        bucket["amount"] += amount
        bucket["count"] += 1

    trends = [
        {
            "month": month_label(month),
            "amount": sum(
                (
                    to_monthly(e.get("amount"), e.get("frequency"))
                    for e in active
                    if same_month(e.get("start_date"), month)
                ),
                0.0,
            ),
        }
        for month in trend_months(now)
    ]

    logger.debug("Analyzed %d active project expenses in %s", len(active), currency)

    return ProjectExpenseAnalysis(
        total_expenses=total_expenses,
        monthly_expenses=sum_monthly(active),
        by_category=[
            {
                "category": category,
                "amount": amount,
                "percentage": amount / total_expenses * 100 if total_expenses > 0 else 0.0,
            }
            for category, amount in categories.items()
        ],
        by_frequency=[
            {"frequency": frequency, "amount": data["amount"], "count": data["count"]}
            for frequency, data in frequencies.items()
        ],
        trends=trends,
    )


def get_project_task_estimates(
    tasks: Sequence[Record],
    currency: str = "USD",
) -> List[ProjectTaskEstimate]:
    return [
        ProjectTaskEstimate(
            task_id=task.get("uid"),
            task_title=task.get("title"),
            estimated_cost={
                "amount": to_number(_estimate(task).get("amount")),
                "currency": currency,
            },
            status=task.get("status"),
            priority=task.get("priority"),
        )
        for task in _tasks_in_currency(tasks, currency)
    ]
