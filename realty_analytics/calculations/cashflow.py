"""
Cash Flow Projections

Month-by-month rental cash flow with growth that steps up at calendar-year
boundaries.
"""

import calendar
from datetime import date
from decimal import Decimal
from typing import List, Dict, Optional

from dateutil.relativedelta import relativedelta

from realty_analytics.calculations.money import (
    Number,
    ZERO,
    ONE,
    HUNDRED,
    to_decimal,
    round_money,
)
from realty_analytics.exceptions import ValidationError

DEFAULT_PROJECTION_MONTHS = 12
DEFAULT_VACANCY_RATE = Decimal("5")
DEFAULT_RENT_GROWTH_RATE = Decimal("2")
DEFAULT_EXPENSE_GROWTH_RATE = Decimal("3")


def generate_monthly_dates(start_date: date, num_months: int) -> List[date]:
    """Generate first-of-month dates for each projected month."""
    first = start_date.replace(day=1)
    return [first + relativedelta(months=i) for i in range(num_months)]


def calculate_escalation_factor(annual_rate: Number, year_offset: int) -> Decimal:
    """
    Growth multiplier after a number of whole calendar years.

    Args:
        annual_rate: Annual growth in percent (e.g. 3 for 3%)
        year_offset: Completed calendar-year boundaries since the start
    """
    return (ONE + to_decimal(annual_rate) / HUNDRED) ** int(year_offset)


def project_cash_flows(
    monthly_rent: Number,
    monthly_expenses: Number,
    projection_months: int = DEFAULT_PROJECTION_MONTHS,
    vacancy_rate: Number = DEFAULT_VACANCY_RATE,
    rent_growth_rate: Number = DEFAULT_RENT_GROWTH_RATE,
    expense_growth_rate: Number = DEFAULT_EXPENSE_GROWTH_RATE,
    start_date: Optional[date] = None,
) -> Dict:
    """
    Project monthly income, expenses and cumulative cash flow.

    Month i sits (start month + i) // 12 calendar years after the start, and
    growth compounds once per year boundary rather than pro rata.

    Returns:
        Dict with the monthly series and the projection totals
    """
    for label, rate in (("Rent", rent_growth_rate), ("Expense", expense_growth_rate)):
        if to_decimal(rate) <= -HUNDRED:
            raise ValidationError(f"{label} growth rate must be greater than -100")

    start_date = start_date or date.today()
    rent = to_decimal(monthly_rent)
    expenses = to_decimal(monthly_expenses)
    occupancy = ONE - to_decimal(vacancy_rate) / HUNDRED
    start_month_index = start_date.month - 1

    months = []
    cumulative = ZERO
    total_income = ZERO
    total_expenses = ZERO

    for i, period_date in enumerate(generate_monthly_dates(start_date, projection_months)):
        year_offset = (start_month_index + i) // 12

        income = rent * calculate_escalation_factor(rent_growth_rate, year_offset) * occupancy
        expense = expenses * calculate_escalation_factor(expense_growth_rate, year_offset)
        net = income - expense

        cumulative += net
        total_income += income
        total_expenses += expense

        months.append(
            {
                "month": i + 1,
                "month_name": calendar.month_name[period_date.month],
                "year": period_date.year,
                "income": round_money(income),
                "expenses": round_money(expense),
                "net_cash_flow": round_money(net),
                "cumulative_cash_flow": round_money(cumulative),
            }
        )

    total_cash_flow = total_income - total_expenses
    average = total_cash_flow / projection_months if projection_months else ZERO

    return {
        "projections": months,
        "total_projected_income": round_money(total_income),
        "total_projected_expenses": round_money(total_expenses),
        "total_projected_cash_flow": round_money(total_cash_flow),
        "average_monthly_cash_flow": round_money(average),
    }
