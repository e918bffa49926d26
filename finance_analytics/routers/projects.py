"""
Projects Router
Financial summary of a single project, including task cost estimates
"""
import logging
from typing import Dict, List

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from finance_analytics.core.config import settings
from finance_analytics.models.finance import ProjectAnalyticsRequest, dump_records
from finance_analytics.utils.project_analyzer import (
    calculate_project_cost_breakdown,
    calculate_project_expense_analysis,
    calculate_project_financial_summary,
    get_project_task_estimates,
)

router = APIRouter()
logger = logging.getLogger(__name__)


def _for_project(records: List[BaseModel], project_id: str) -> List[dict]:
    # Untagged records are taken to belong to the requested project
    return [r for r in dump_records(records) if r.get("project_id") in (None, "", project_id)]


@router.post("/{project_id}/summary")
def project_summary(project_id: str, request: ProjectAnalyticsRequest) -> Dict:
    """
    Summary, cost breakdown, expense analysis and task estimates for a project.
    Records belonging to other projects are ignored.
    """
    try:
        currency = request.currency or settings.DEFAULT_CURRENCY
        costs = _for_project(request.costs, project_id)
        expenses = _for_project(request.expenses, project_id)
        budgets = _for_project(request.budgets, project_id)
        tasks = _for_project(request.tasks, project_id)
        logger.info(f"Project {project_id}: {len(costs)} costs, {len(expenses)} expenses, {len(tasks)} tasks")

        return {
            "project_id": project_id,
            "summary": calculate_project_financial_summary(costs, expenses, budgets, tasks, currency).to_dict(),
            "cost_breakdown": [
                item.to_dict() for item in calculate_project_cost_breakdown(costs, budgets, tasks, currency)
            ],
            "expense_analysis": calculate_project_expense_analysis(expenses, currency, now=request.as_of).to_dict(),
            "task_estimates": [item.to_dict() for item in get_project_task_estimates(tasks, currency)],
        }
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error summarizing project {project_id}: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Internal server error: {str(e)}")
