import pytest
from fastapi.testclient import TestClient

from finance_analytics.main import app

client = TestClient(app)

payload = {
    "costs": [
        {"amount": "250.00", "currency": "USD", "category": "food", "date": "2024-03-15T00:00:00.000Z", "projectId": "p1"},
        {"amount": 40, "currency": "USD", "category": "food", "date": "2024-03-16", "projectId": "p2"},
    ],
    "expenses": [
        {
            "amount": 60,
            "currency": "USD",
            "category": "food",
            "frequency": "weekly",
            "isActive": True,
            "startDate": "2024-01-01",
            "projectId": "p1",
        }
    ],
    "budgets": [
        {
            "amount": "1000",
            "currency": "USD",
            "category": "food",
            "period": "monthly",
            "startDate": "2024-01-01",
            "projectId": "p1",
        }
    ],
    "currency": "USD",
    "asOf": "2024-03-20",
}


def test_root_and_health():
    assert client.get("/").status_code == 200
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_financial_analytics_endpoint():
    response = client.post("/api/analytics/financial", json={**payload, "projectId": "p1"})
    assert response.status_code == 200

    data = response.json()
    assert data["total_costs"] == 250
    assert data["total_expenses"] == pytest.approx(259.8)
    assert data["total_budgets"] == 1000
    assert data["budget_utilization"] == pytest.approx(25)
    assert len(data["category_breakdown"]) == 10
    assert data["monthly_trend"][-1]["month"] == "Mar 2024"


def test_financial_analytics_all_projects():
    data = client.post("/api/analytics/financial", json=payload).json()
    assert data["total_costs"] == 290


def test_unsupported_currency_is_rejected():
    response = client.post("/api/analytics/financial", json={**payload, "currency": "JPY"})
    assert response.status_code == 422


def test_insights_endpoint():
    response = client.post("/api/analytics/insights", json=payload)
    assert response.status_code == 200
    data = response.json()
    assert data["analytics"]["total_budgets"] == 1000
    assert any(insight["title"] == "Well Within Budget" for insight in data["insights"])


def test_project_summary_endpoint():
    body = {
        "costs": payload["costs"],
        "expenses": payload["expenses"],
        "budgets": payload["budgets"],
        "tasks": [
            {"uid": "t1", "title": "Design", "status": "todo", "priority": "high", "projectId": "p1",
             "estimatedCost": {"amount": "100", "currency": "USD"}},
        ],
        "asOf": "2024-03-20",
    }
    response = client.post("/api/projects/p1/summary", json=body)
    assert response.status_code == 200

    data = response.json()
    assert data["summary"]["total_spent"] == 250
    assert data["summary"]["total_estimated"] == 100
    assert data["summary"]["variance"] == 650
    assert data["task_estimates"][0]["task_id"] == "t1"
    assert data["expense_analysis"]["trends"][3]["amount"] == pytest.approx(259.8)
    assert [item["category"] for item in data["cost_breakdown"]] == ["food", "other"]


def test_report_downloads():
    pdf = client.post("/api/reports/financial/pdf", json=payload)
    assert pdf.status_code == 200
    assert pdf.headers["content-type"] == "application/pdf"
    assert pdf.content.startswith(b"%PDF")
    assert "attachment" in pdf.headers["content-disposition"]

    csv_response = client.post("/api/reports/financial/csv", json=payload)
    assert csv_response.status_code == 200
    assert csv_response.text.startswith("category,label,costs")


def test_unusual_amounts_count_as_zero():
    costs = [
        {"amount": {"value": 5}, "currency": "USD", "category": "food", "date": "2024-03-15"},
        {"amount": True, "currency": "USD", "category": "food", "date": "2024-03-15"},
        {"amount": [7], "currency": "USD", "category": "food", "date": "2024-03-15"},
        {"amount": 10 ** 400, "currency": "USD", "category": "food", "date": "2024-03-15"},
    ]
    response = client.post(
        "/api/analytics/financial",
        json={"costs": costs, "expenses": [], "budgets": [], "asOf": "2024-03-20"},
    )
    assert response.status_code == 200
    assert response.json()["total_costs"] == 0


def test_expense_only_active_when_flag_is_true():
    expenses = [
        {**payload["expenses"][0], "isActive": flag}
        for flag in ("yes", "true", 1, "1", None)
    ]
    response = client.post(
        "/api/analytics/financial",
        json={"costs": [], "expenses": expenses, "budgets": [], "asOf": "2024-03-20"},
    )
    assert response.status_code == 200
    assert response.json()["total_expenses"] == 0
