"""
Loan Amortization Calculations

Monthly payment, yearly amortization summary, full mortgage breakdown and
affordability. Rates are annual percentages (6 means 6%).
"""

from decimal import Decimal
from typing import List, Dict, Optional

from realty_analytics.calculations.money import (
    Number,
    ZERO,
    ONE,
    HUNDRED,
    to_decimal,
    round_money,
)

# Annual PMI charge as a fraction of the principal.
PMI_ANNUAL_RATE = Decimal("0.005")

# Standard back-end debt-to-income ceiling.
DEFAULT_MAX_DTI = Decimal("0.43")


def monthly_rate(annual_rate: Number) -> Decimal:
    """Convert an annual percentage rate to a monthly decimal rate."""
    return to_decimal(annual_rate) / HUNDRED / 12


def calculate_monthly_payment(
    principal: Number, annual_rate: Number, term_years: int
) -> Decimal:
    """
    Calculate the monthly principal and interest payment.

    M = P * r * (1 + r)^n / ((1 + r)^n - 1)

    Args:
        principal: Loan principal amount
        annual_rate: Annual interest rate in percent (e.g. 6 for 6%)
        term_years: Loan term in years

    Returns:
        Monthly payment at full precision. Zero when the principal is not
        positive; straight-line principal / n when the rate is not positive.
    """
    principal = to_decimal(principal)
    annual_rate = to_decimal(annual_rate)
    n = int(term_years) * 12

    if principal <= 0 or n <= 0:
        return ZERO
    if annual_rate <= 0:
        return principal / n

    r = monthly_rate(annual_rate)
    growth = (ONE + r) ** n

    return principal * r * growth / (growth - ONE)


def generate_amortization_summary(
    principal: Number, annual_rate: Number, term_years: int
) -> List[Dict]:
    """
    Summarize the amortization schedule year by year.

    Each year runs up to twelve monthly payments and stops early once the
    balance is paid off.

    Returns:
        List of {year, principal_paid, interest_paid, remaining_balance}
    """
    balance = to_decimal(principal)
    r = monthly_rate(annual_rate) if to_decimal(annual_rate) > 0 else ZERO
    payment = calculate_monthly_payment(principal, annual_rate, term_years)
    summary = []

    if balance <= 0:
        return summary

    for year in range(1, int(term_years) + 1):
        yearly_principal = ZERO
        yearly_interest = ZERO

        for _ in range(12):
            if balance <= 0:
                break

            interest = balance * r
            principal_pmt = min(payment - interest, balance)

            yearly_interest += interest
            yearly_principal += principal_pmt
            balance -= principal_pmt

        summary.append(
            {
                "year": year,
                "principal_paid": round_money(yearly_principal),
                "interest_paid": round_money(yearly_interest),
                "remaining_balance": max(ZERO, round_money(balance)),
            }
        )

        if balance <= 0:
            break

    return summary


def calculate_mortgage(
    principal: Number,
    annual_rate: Number,
    term_years: int,
    include_pmi: bool = False,
    annual_property_tax: Optional[Number] = None,
    annual_insurance: Optional[Number] = None,
) -> Dict:
    """
    Full monthly mortgage breakdown with an amortization summary.

    PMI is charged at 0.5% of the principal per year, only when requested.
    Optional fields (PMI, tax, insurance) are None when they contribute nothing.
    """
    principal = to_decimal(principal)
    principal_interest = calculate_monthly_payment(principal, annual_rate, term_years)

    monthly_pmi = principal * PMI_ANNUAL_RATE / 12 if include_pmi else ZERO
    monthly_tax = to_decimal(annual_property_tax) / 12
    monthly_insurance = to_decimal(annual_insurance) / 12

    total_monthly = principal_interest + monthly_pmi + monthly_tax + monthly_insurance

    total_cost = principal_interest * int(term_years) * 12
    total_interest = total_cost - principal

    return {
        "monthly_principal_interest": round_money(principal_interest),
        "monthly_pmi": round_money(monthly_pmi) if monthly_pmi > 0 else None,
        "monthly_property_tax": round_money(monthly_tax) if monthly_tax > 0 else None,
        "monthly_insurance": (
            round_money(monthly_insurance) if monthly_insurance > 0 else None
        ),
        "total_monthly_payment": round_money(total_monthly),
        "total_interest": round_money(total_interest),
        "total_cost": round_money(total_cost),
        "amortization_summary": generate_amortization_summary(
            principal, annual_rate, term_years
        ),
    }


def calculate_affordability(
    monthly_income: Number,
    monthly_debt: Number,
    down_payment: Number,
    annual_rate: Number,
    term_years: int,
    max_dti_ratio: Optional[Number] = None,
) -> Dict:
    """
    Maximum affordable purchase price for a given income.

    The housing budget is income * DTI ceiling minus existing debt; the
    mortgage formula is inverted to turn that budget into a loan amount.
    """
    monthly_income = to_decimal(monthly_income)
    monthly_debt = to_decimal(monthly_debt)
    down_payment = to_decimal(down_payment)
    dti = DEFAULT_MAX_DTI if max_dti_ratio is None else to_decimal(max_dti_ratio)

    max_monthly_payment = max(ZERO, monthly_income * dti - monthly_debt)
    n = int(term_years) * 12

    if to_decimal(annual_rate) <= 0:
        max_loan = max_monthly_payment * n
    else:
        r = monthly_rate(annual_rate)
        growth = (ONE + r) ** n
        max_loan = max_monthly_payment * (growth - ONE) / (r * growth)

    return {
        "max_property_price": round_money(max_loan + down_payment),
        "max_monthly_payment": round_money(max_monthly_payment),
        "max_loan_amount": round_money(max_loan),
        "down_payment": round_money(down_payment),
        "dti_ratio": dti,
        "monthly_income": round_money(monthly_income),
        "monthly_debt": round_money(monthly_debt),
    }
