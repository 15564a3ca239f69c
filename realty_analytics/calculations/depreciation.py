"""
Depreciation Calculations

Straight-line tax depreciation of rental real estate.
"""

import enum
from datetime import date
from decimal import Decimal
from typing import Dict, Optional

from realty_analytics.calculations.money import Number, ZERO, to_decimal, round_money

DEFAULT_LAND_VALUE_RATIO = Decimal("0.20")
SCHEDULE_PREVIEW_YEARS = 5


class FinancialPropertyType(str, enum.Enum):
    """Property classes with distinct depreciation periods."""

    RESIDENTIAL_SINGLE = "RESIDENTIAL_SINGLE"
    RESIDENTIAL_MULTI = "RESIDENTIAL_MULTI"
    COMMERCIAL = "COMMERCIAL"
    INDUSTRIAL = "INDUSTRIAL"
    MIXED_USE = "MIXED_USE"


# Residential is 27.5 years, rounded down.
DEFAULT_DEPRECIATION_YEARS = 27

DEPRECIATION_YEARS = {
    FinancialPropertyType.RESIDENTIAL_SINGLE: 27,
    FinancialPropertyType.RESIDENTIAL_MULTI: 27,
    FinancialPropertyType.COMMERCIAL: 39,
    FinancialPropertyType.INDUSTRIAL: 39,
    FinancialPropertyType.MIXED_USE: 39,
}


def get_depreciation_years(property_type) -> int:
    """Recovery period in years for a property type, residential when unknown."""
    try:
        return DEPRECIATION_YEARS[FinancialPropertyType(property_type)]
    except ValueError:
        return DEFAULT_DEPRECIATION_YEARS


def straight_line_depreciation(basis: Number, years: int) -> Decimal:
    """Annual straight-line depreciation at full precision."""
    if not years:
        return ZERO
    return to_decimal(basis) / int(years)


def calculate_depreciation(
    purchase_price: Number,
    property_type,
    land_value: Optional[Number] = None,
    improvement_costs: Optional[Number] = None,
    start_date: Optional[date] = None,
) -> Dict:
    """
    Depreciable basis, annual and monthly depreciation, and a five-year preview.

    Args:
        purchase_price: Total purchase price
        property_type: FinancialPropertyType (or its string value)
        land_value: Non-depreciable land portion; defaults to 20% of price
        improvement_costs: Capital improvements added to the basis
        start_date: Date the property was placed in service
    """
    price = to_decimal(purchase_price)
    land = price * DEFAULT_LAND_VALUE_RATIO if land_value is None else to_decimal(land_value)

    years = get_depreciation_years(property_type)
    basis = price - land + to_decimal(improvement_costs)
    annual = straight_line_depreciation(basis, years)

    schedule = []
    accumulated = ZERO
    for year in range(1, SCHEDULE_PREVIEW_YEARS + 1):
        accumulated += annual
        schedule.append(
            {
                "year": year,
                "depreciation": round_money(annual),
                "accumulated_depreciation": round_money(accumulated),
                "remaining_basis": round_money(basis - accumulated),
            }
        )

    return {
        "depreciable_basis": round_money(basis),
        "depreciation_years": years,
        "annual_depreciation": round_money(annual),
        "monthly_depreciation": round_money(annual / 12),
        "start_date": start_date or date.today(),
        "schedule": schedule,
    }
