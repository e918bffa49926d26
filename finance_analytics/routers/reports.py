import logging
from datetime import datetime

from fastapi import APIRouter, HTTPException
from fastapi.responses import Response

from finance_analytics.core.config import settings
from finance_analytics.models.finance import AnalyticsRequest
from finance_analytics.routers.analytics import run_analytics
from finance_analytics.utils import pdf_report

router = APIRouter()
logger = logging.getLogger(__name__)


def _filename(request: AnalyticsRequest, extension: str) -> str:
    scope = request.project_id or "all"
    return f"financial_report_{scope}_{datetime.now():%Y%m%d}.{extension}"


@router.post("/financial/pdf")
def financial_report_pdf(request: AnalyticsRequest) -> Response:
    """
    Render the financial analytics for the supplied records as a PDF download.
    """
    try:
        analytics = run_analytics(request)
        pdf_bytes = pdf_report.build_financial_report_pdf(
            analytics,
            currency=request.currency or settings.DEFAULT_CURRENCY,
            title=settings.REPORT_TITLE,
        )
        logger.info(f"PDF report generated: {len(pdf_bytes)} bytes")
    except Exception as e:
        logger.error(f"Error generating PDF report: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error generating PDF report: {str(e)}")

    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{_filename(request, "pdf")}"'},
    )


@router.post("/financial/csv")
def financial_report_csv(request: AnalyticsRequest) -> Response:
    """Category breakdown of the financial analytics as a CSV download."""
    try:
        csv_text = pdf_report.build_financial_report_csv(run_analytics(request))
    except Exception as e:
        logger.error(f"Error generating CSV report: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error generating CSV report: {str(e)}")

    return Response(
        content=csv_text,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{_filename(request, "csv")}"'},
    )
