from datetime import date

import pytest

from finance_analytics.utils.project_analyzer import (
    calculate_project_cost_breakdown,
    calculate_project_expense_analysis,
    calculate_project_financial_summary,
    get_project_task_estimates,
)

NOW = date(2024, 3, 20)

project_costs = [
    {"amount": "300.00", "currency": "USD", "category": "education", "date": "2024-02-10", "project_id": "p1"},
    {"amount": 200, "currency": "USD", "category": "other", "date": "2024-03-01", "project_id": "p1"},
    {"amount": 999, "currency": "EUR", "category": "other", "date": "2024-03-01", "project_id": "p1"},
]
project_expenses = [
    {
        "amount": 10,
        "currency": "USD",
        "category": "utilities",
        "frequency": "daily",
        "is_active": True,
        "start_date": "2024-03-05",
    },
    {
        "amount": 120,
        "currency": "USD",
        "category": "education",
        "frequency": "yearly",
        "is_active": True,
        "start_date": "2024-01-01",
    },
    {
        "amount": 50,
        "currency": "USD",
        "category": "utilities",
        "frequency": "daily",
        "is_active": True,
        "start_date": "2023-12-01",
    },
    {
        "amount": 70,
        "currency": "USD",
        "category": "food",
        "frequency": "monthly",
        "is_active": False,
        "start_date": "2024-03-01",
    },
]
project_budgets = [
    {"amount": 1000, "currency": "USD", "category": "education", "period": "monthly", "start_date": "2024-01-01"},
    {"amount": "500", "currency": "USD", "category": "other", "period": "monthly", "start_date": "2024-01-01"},
]
project_tasks = [
    {"uid": "t1", "title": "Design", "status": "todo", "priority": "high",
     "estimated_cost": {"amount": "150", "currency": "USD"}},
    {"uid": "t2", "title": "Build", "status": "in_progress", "priority": "medium",
     "estimated_cost": {"amount": 350, "currency": "USD"}},
    {"uid": "t3", "title": "Translate", "status": "todo", "priority": "low",
     "estimated_cost": {"amount": 80, "currency": "EUR"}},
    {"uid": "t4", "title": "Review", "status": "done", "priority": "low"},
]


def test_project_financial_summary():
    summary = calculate_project_financial_summary(
        project_costs, project_expenses, project_budgets, project_tasks, "USD"
    )

    assert summary.total_budget == 1500
    assert summary.total_spent == 500
    assert summary.total_estimated == 500
    assert summary.remaining == 1000
    assert summary.currency == "USD"
    assert summary.budget_utilization == pytest.approx(100 * 500 / 1500)
    assert summary.estimated_completion == 1000
    assert summary.variance == 500
    # 10*30 + 120/12 + 50*30, the inactive expense is ignored
    assert summary.monthly_expenses == pytest.approx(1810)


def test_project_financial_summary_without_budget():
    summary = calculate_project_financial_summary(project_costs, [], [], [], "USD")
    assert summary.budget_utilization == 0
    assert summary.variance == -500


def test_project_cost_breakdown_skips_empty_categories():
    breakdown = calculate_project_cost_breakdown(project_costs, project_budgets, project_tasks, "USD")
    by_category = {item.category: item for item in breakdown}

    assert list(by_category) == ["education", "other"]

    education = by_category["education"]
    assert education.budgeted == 1000
    assert education.spent == 300
    assert education.estimated == 0
    assert education.remaining == 700
    assert education.percentage == pytest.approx(30)

    other = by_category["other"]
    assert other.budgeted == 500
    assert other.spent == 200
    assert other.estimated == 500
    assert other.remaining == 300
    assert other.percentage == pytest.approx(20)


def test_project_cost_breakdown_estimates_only():
    breakdown = calculate_project_cost_breakdown([], [], project_tasks, "USD")
    assert len(breakdown) == 1
    assert breakdown[0].category == "other"
    assert breakdown[0].percentage == 0


def test_project_expense_analysis():
    analysis = calculate_project_expense_analysis(project_expenses, "USD", now=NOW)

    assert analysis.total_expenses == 180
    assert analysis.monthly_expenses == pytest.approx(1810)
    assert [entry["category"] for entry in analysis.by_category] == ["utilities", "education"]
    assert analysis.by_category[0]["amount"] == 60
    assert analysis.by_category[0]["percentage"] == pytest.approx(100 * 60 / 180)
    assert analysis.by_frequency == [
        {"frequency": "daily", "amount": 60, "count": 2},
        {"frequency": "yearly", "amount": 120, "count": 1},
    ]

    trends = analysis.trends
    assert len(trends) == 6
    assert trends[-1]["month"] == "Mar 2024"
    assert trends[-1]["amount"] == pytest.approx(300)
    assert trends[-3]["amount"] == pytest.approx(10)
    assert trends[-4]["amount"] == pytest.approx(1500)
    assert trends[0]["amount"] == 0


def test_project_expense_analysis_empty():
    analysis = calculate_project_expense_analysis([], "USD", now=NOW)
    assert analysis.total_expenses == 0
    assert analysis.by_category == []
    assert analysis.by_frequency == []
    assert all(entry["amount"] == 0 for entry in analysis.trends)


def test_project_task_estimates():
    estimates = get_project_task_estimates(project_tasks, "USD")

    assert [e.task_id for e in estimates] == ["t1", "t2"]
    assert estimates[0].estimated_cost == {"amount": 150.0, "currency": "USD"}
    assert estimates[1].status == "in_progress"
    assert estimates[1].priority == "medium"
    assert get_project_task_estimates(project_tasks, "EUR")[0].task_title == "Translate"
    assert get_project_task_estimates(project_tasks, "GBP") == []
