import csv
import io
from datetime import datetime
from typing import Optional

from fpdf import FPDF
from fpdf.enums import XPos, YPos

from finance_analytics.utils.analyzer import FinancialAnalytics
from finance_analytics.utils.normalization import category_label, format_amount

LINE_HEIGHT = 8
TABLE_WIDTHS = (60, 35, 35, 35, 25)


def _heading(pdf: FPDF, text: str) -> None:
    pdf.ln(4)
    pdf.set_font("Helvetica", "B", 12)
    pdf.cell(0, LINE_HEIGHT, text, new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.set_font("Helvetica", "", 10)


def _row(pdf: FPDF, values, bold: bool = False) -> None:
    pdf.set_font("Helvetica", "B" if bold else "", 10)
    for width, value in zip(TABLE_WIDTHS, values):
        pdf.cell(width, LINE_HEIGHT, str(value), border=1)
    pdf.ln(LINE_HEIGHT)


def build_financial_report_pdf(
    analytics: FinancialAnalytics,
    currency: str = "USD",
    title: str = "Financial Report",
    generated_at: Optional[datetime] = None,
) -> bytes:
    """Render an analytics result to a PDF document and return its bytes."""
    generated_at = generated_at or datetime.now()

    pdf = FPDF()
    pdf.add_page()
    pdf.set_font("Helvetica", "B", 16)
    pdf.cell(0, 10, title, new_x=XPos.LMARGIN, new_y=YPos.NEXT)

    pdf.set_font("Helvetica", "I", 9)
    pdf.cell(0, 6, f"Generated on {generated_at:%B %d, %Y %H:%M}", new_x=XPos.LMARGIN, new_y=YPos.NEXT)

    # Core fonts are latin-1 only, so amounts use the ISO code instead of the symbol
    def money(value) -> str:
        return format_amount(value, currency, symbol=False)

    _heading(pdf, "Financial Overview")
    remaining = analytics.total_budgets - (analytics.total_costs + analytics.total_expenses)
    for label, value in (
        ("Total Costs", money(analytics.total_costs)),
        ("Total Expenses (monthly)", money(analytics.total_expenses)),
        ("Total Budgets", money(analytics.total_budgets)),
        ("Budget Utilization", f"{analytics.budget_utilization:.1f}%"),
        ("Remaining Budget", money(remaining)),
    ):
        pdf.cell(70, LINE_HEIGHT, f"{label}:")
        pdf.cell(0, LINE_HEIGHT, value, new_x=XPos.LMARGIN, new_y=YPos.NEXT)

    _heading(pdf, "Category Breakdown")
    _row(pdf, ("Category", "Costs", "Expenses", "Budgets", "Share"), bold=True)
    for item in analytics.category_breakdown:
        _row(
            pdf,
            (
                category_label(item.category),
                money(item.costs),
                money(item.expenses),
                money(item.budgets),
                f"{item.percentage:.1f}%",
            ),
        )

    _heading(pdf, "Monthly Trend")
    _row(pdf, ("Month", "Costs", "Expenses", "Budgets", ""), bold=True)
    for entry in analytics.monthly_trend:
        _row(pdf, (entry.month, money(entry.costs), money(entry.expenses), money(entry.budgets), ""))

    _heading(pdf, "Top Categories")
    if analytics.top_categories:
        for rank, item in enumerate(analytics.top_categories, start=1):
            pdf.cell(
                0,
                LINE_HEIGHT,
                f"{rank}. {category_label(item.category)}: {money(item.total)} ({item.count} records)",
                new_x=XPos.LMARGIN,
                new_y=YPos.NEXT,
            )
    else:
        pdf.cell(0, LINE_HEIGHT, "None", new_x=XPos.LMARGIN, new_y=YPos.NEXT)

    return bytes(pdf.output())


def build_financial_report_csv(analytics: FinancialAnalytics) -> str:
    output = io.StringIO()
    writer = csv.DictWriter(
        output,
        fieldnames=["category", "label", "costs", "expenses", "budgets", "percentage"],
    )
    writer.writeheader()
    for item in analytics.category_breakdown:
        writer.writerow({
            "category": item.category,
            "label": category_label(item.category),
            "costs": round(item.costs, 2),
            "expenses": round(item.expenses, 2),
            "budgets": round(item.budgets, 2),
            "percentage": round(item.percentage, 2),
        })
    return output.getvalue()
