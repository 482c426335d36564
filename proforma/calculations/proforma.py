"""
Pro Forma Calculations

Single-period pro forma: gross rent roll, vacancy, operating expenses,
NOI, debt service and cash flow.

Revenue and debt service are both scaled by the same period factor
(12 for yearly, 3 for quarterly). Nothing is rounded here; rounding to
cents happens only when results are formatted for display.
"""

import math
from typing import List, Tuple

from proforma.calculations.amortization import (
    amortization_months,
    calculate_payment,
    monthly_rate,
)
from proforma.schemas import InputState, PeriodType, ResultSet


RESULT_LABELS = (
    ("gross_revenue", "Gross Revenue"),
    ("vacancy_loss", "Vacancy Loss"),
    ("effective_revenue", "Effective Revenue"),
    ("opex", "Operating Expenses"),
    ("noi", "Net Operating Income (NOI)"),
    ("debt_service", "Debt Service"),
    ("cash_flow", "Cash Flow"),
)


def period_factor(period_type: str) -> int:
    """Months of rent and loan payments per reporting period."""
    return 12 if period_type == PeriodType.yearly else 3


def loan_payment(inputs: InputState) -> float:
    """Monthly payment on the loan described by inputs."""
    return calculate_payment(
        inputs.loan_amount,
        monthly_rate(inputs.interest_rate),
        amortization_months(inputs.amortization_years),
    )


def compute(inputs: InputState) -> ResultSet:
    """
    Calculate the pro forma for one input snapshot.

    Never raises: invalid or degenerate inputs (NaN fields, a 0% rate)
    yield NaN or infinite values in the result.

    Args:
        inputs: Assumption set

    Returns:
        Fully populated ResultSet
    """
    factor = period_factor(inputs.period_type)

    gross_revenue = inputs.rent * inputs.unit_count * factor
    vacancy_loss = gross_revenue * inputs.vacancy_rate
    effective_revenue = gross_revenue - vacancy_loss
    opex = effective_revenue * inputs.opex_rate
    noi = effective_revenue - opex

    debt_service = loan_payment(inputs) * factor
    cash_flow = noi - debt_service

    return ResultSet(
        gross_revenue=gross_revenue,
        vacancy_loss=vacancy_loss,
        effective_revenue=effective_revenue,
        opex=opex,
        noi=noi,
        debt_service=debt_service,
        cash_flow=cash_flow,
    )


def format_currency(value: float) -> str:
    """Format a dollar amount to cents, e.g. $1234.50."""
    if math.isnan(value):
        return "$NaN"
    if math.isinf(value):
        return "$Infinity" if value > 0 else "$-Infinity"
    return f"${value:.2f}"


def result_rows(results: ResultSet) -> List[Tuple[str, str]]:
    """Labelled, formatted result lines in display order."""
    return [
        (label, format_currency(getattr(results, field)))
        for field, label in RESULT_LABELS
    ]
