"""
Rental Return Calculations

First-year ROI for a leveraged rental purchase and gross/net rental yield.
Rates are percentages (5 means 5%).
"""

from decimal import Decimal
from typing import Dict, Optional

from realty_analytics.calculations.amortization import calculate_monthly_payment
from realty_analytics.calculations.money import (
    Number,
    ZERO,
    ONE,
    HUNDRED,
    to_decimal,
    round_money,
    percent,
)
from realty_analytics.exceptions import ValidationError

# Industry-typical defaults applied when an input is omitted.
DEFAULT_DOWN_PAYMENT_RATIO = Decimal("0.20")
DEFAULT_CLOSING_COSTS_RATIO = Decimal("0.03")
DEFAULT_PROPERTY_TAX_RATIO = Decimal("0.012")
DEFAULT_INSURANCE_RATIO = Decimal("0.005")
DEFAULT_MAINTENANCE_RATIO = Decimal("0.10")  # of annual rent
DEFAULT_VACANCY_RATE = Decimal("5")
DEFAULT_MANAGEMENT_FEE_RATE = Decimal("10")
DEFAULT_INTEREST_RATE = Decimal("7")
DEFAULT_LOAN_TERM_YEARS = 30


def calculate_roi(
    purchase_price: Number,
    monthly_rent: Number,
    down_payment: Optional[Number] = None,
    closing_costs: Optional[Number] = None,
    renovation_costs: Optional[Number] = None,
    annual_property_tax: Optional[Number] = None,
    annual_insurance: Optional[Number] = None,
    monthly_hoa: Optional[Number] = None,
    annual_maintenance: Optional[Number] = None,
    vacancy_rate: Optional[Number] = None,
    management_fee_rate: Optional[Number] = None,
    interest_rate: Optional[Number] = None,
    loan_term_years: Optional[int] = None,
) -> Dict:
    """
    Calculate first-year investment metrics for a rental purchase.

    Omitted inputs fall back to the DEFAULT_* constants above. First-year ROI
    is reported as equal to cash-on-cash return.

    Raises:
        ValidationError: if purchase_price is not positive
    """
    price = to_decimal(purchase_price)
    if price <= 0:
        raise ValidationError("Purchase price must be greater than 0")

    rent = to_decimal(monthly_rent)
    annual_rent = rent * 12

    def _or(value, default):
        return default if value is None else to_decimal(value)

    down = _or(down_payment, price * DEFAULT_DOWN_PAYMENT_RATIO)
    closing = _or(closing_costs, price * DEFAULT_CLOSING_COSTS_RATIO)
    renovation = _or(renovation_costs, ZERO)
    property_tax = _or(annual_property_tax, price * DEFAULT_PROPERTY_TAX_RATIO)
    insurance = _or(annual_insurance, price * DEFAULT_INSURANCE_RATIO)
    hoa = _or(monthly_hoa, ZERO)
    maintenance = _or(annual_maintenance, annual_rent * DEFAULT_MAINTENANCE_RATIO)
    vacancy = _or(vacancy_rate, DEFAULT_VACANCY_RATE)
    fee_rate = _or(management_fee_rate, DEFAULT_MANAGEMENT_FEE_RATE)
    rate = _or(interest_rate, DEFAULT_INTEREST_RATE)
    term = DEFAULT_LOAN_TERM_YEARS if loan_term_years is None else int(loan_term_years)

    loan_amount = price - down
    monthly_mortgage = calculate_monthly_payment(loan_amount, rate, term)

    effective_gross_income = annual_rent * (ONE - vacancy / HUNDRED)
    management_fee = effective_gross_income * fee_rate / HUNDRED
    operating_expenses = property_tax + insurance + hoa * 12 + maintenance + management_fee

    noi = effective_gross_income - operating_expenses
    annual_cash_flow = noi - monthly_mortgage * 12
    total_investment = down + closing + renovation

    cap_rate = percent(noi, price)
    cash_on_cash = percent(annual_cash_flow, total_investment)
    gross_rent_multiplier = price / annual_rent if annual_rent > 0 else None

    return {
        "total_investment": round_money(total_investment),
        "loan_amount": round_money(loan_amount),
        "monthly_mortgage": round_money(monthly_mortgage),
        "annual_gross_income": round_money(effective_gross_income),
        "annual_operating_expenses": round_money(operating_expenses),
        "net_operating_income": round_money(noi),
        "annual_cash_flow": round_money(annual_cash_flow),
        "monthly_cash_flow": round_money(annual_cash_flow / 12),
        "cap_rate": round_money(cap_rate),
        "cash_on_cash_return": round_money(cash_on_cash),
        "roi": round_money(cash_on_cash),
        "gross_rent_multiplier": (
            round_money(gross_rent_multiplier)
            if gross_rent_multiplier is not None
            else None
        ),
    }


def calculate_rental_yield(
    purchase_price: Number,
    monthly_rent: Number,
    annual_expenses: Optional[Number] = None,
) -> Dict:
    """Gross and net rental yield as a percentage of purchase price."""
    price = to_decimal(purchase_price)
    if price <= 0:
        raise ValidationError("Purchase price must be greater than 0")

    annual_gross = to_decimal(monthly_rent) * 12
    annual_net = annual_gross - to_decimal(annual_expenses)

    return {
        "gross_yield": round_money(percent(annual_gross, price)),
        "net_yield": round_money(percent(annual_net, price)),
        "annual_gross_income": round_money(annual_gross),
        "annual_net_income": round_money(annual_net),
    }
