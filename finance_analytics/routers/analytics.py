import logging
from typing import Dict

from fastapi import APIRouter, HTTPException

from finance_analytics.core.config import settings
from finance_analytics.models.finance import AnalyticsRequest, dump_records
from finance_analytics.utils.analyzer import FinancialAnalytics, calculate_financial_analytics
from finance_analytics.utils.insights import generate_insights
from finance_analytics.utils.normalization import filter_currency, filter_project

router = APIRouter()
logger = logging.getLogger(__name__)


def run_analytics(request: AnalyticsRequest) -> FinancialAnalytics:
    """Shared by the analytics and report routes."""
    return calculate_financial_analytics(
        dump_records(request.costs),
        dump_records(request.expenses),
        dump_records(request.budgets),
        currency=request.currency or settings.DEFAULT_CURRENCY,
        project_id=request.project_id,
        now=request.as_of,
    )


@router.post("/financial")
def financial_analytics(request: AnalyticsRequest) -> Dict:
    """
    Aggregate the supplied costs, expenses and budgets for one currency
    (and optionally one project) into totals, breakdowns and a 6-month trend.
    """
    try:
        logger.info(
            f"Calculating analytics for {len(request.costs)} costs, {len(request.expenses)} expenses, "
            f"{len(request.budgets)} budgets"
        )
        return run_analytics(request).to_dict()
    except Exception as e:
        logger.error(f"Error calculating analytics: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error calculating analytics: {str(e)}")


@router.post("/insights")
def financial_insights(request: AnalyticsRequest) -> Dict:
    """Analytics plus rule-based insights (budget warnings, savings opportunities)."""
    try:
        currency = request.currency or settings.DEFAULT_CURRENCY
        analytics = run_analytics(request)
        expenses = filter_project(filter_currency(dump_records(request.expenses), currency), request.project_id)
        insights = generate_insights(analytics, expenses, currency=currency)
        return {
            "analytics": analytics.to_dict(),
            "insights": [insight.to_dict() for insight in insights],
        }
    except Exception as e:
        logger.error(f"Error generating insights: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error generating insights: {str(e)}")
