"""
Stored cash flow projections.

Each request stores a new snapshot; earlier projections for the same
property are kept as history.
"""

import logging
from datetime import date
from typing import List, Optional

from sqlalchemy.orm import Session

from realty_analytics.calculations.cashflow import (
    DEFAULT_EXPENSE_GROWTH_RATE,
    DEFAULT_PROJECTION_MONTHS,
    DEFAULT_RENT_GROWTH_RATE,
    DEFAULT_VACANCY_RATE,
    project_cash_flows,
)
from realty_analytics.calculations.money import Number, round_money, money_str
from realty_analytics.db.database import atomic
from realty_analytics.db.models import CashFlowProjection
from realty_analytics.services.valuation import get_property

logger = logging.getLogger(__name__)

MONEY_KEYS = ("income", "expenses", "net_cash_flow", "cumulative_cash_flow")


def _serialize_month(row: dict) -> dict:
    return {
        key: money_str(value) if key in MONEY_KEYS else value
        for key, value in row.items()
    }


def create_cash_flow_projection(
    db: Session,
    property_id: str,
    monthly_rent: Number,
    monthly_expenses: Number,
    projection_months: int = DEFAULT_PROJECTION_MONTHS,
    vacancy_rate: Optional[Number] = None,
    rent_growth_rate: Optional[Number] = None,
    expense_growth_rate: Optional[Number] = None,
    start_date: Optional[date] = None,
) -> CashFlowProjection:
    """
    Project and store a property's monthly cash flow.

    Raises:
        NotFoundError: if the property does not exist
    """
    get_property(db, property_id)

    vacancy_rate = DEFAULT_VACANCY_RATE if vacancy_rate is None else vacancy_rate
    rent_growth_rate = (
        DEFAULT_RENT_GROWTH_RATE if rent_growth_rate is None else rent_growth_rate
    )
    expense_growth_rate = (
        DEFAULT_EXPENSE_GROWTH_RATE if expense_growth_rate is None else expense_growth_rate
    )

    result = project_cash_flows(
        monthly_rent=monthly_rent,
        monthly_expenses=monthly_expenses,
        projection_months=projection_months,
        vacancy_rate=vacancy_rate,
        rent_growth_rate=rent_growth_rate,
        expense_growth_rate=expense_growth_rate,
        start_date=start_date,
    )

    with atomic(db):
        projection = CashFlowProjection(
            property_id=property_id,
            projection_months=projection_months,
            vacancy_rate=round_money(vacancy_rate),
            rent_growth_rate=round_money(rent_growth_rate),
            expense_growth_rate=round_money(expense_growth_rate),
            base_monthly_rent=round_money(monthly_rent),
            base_monthly_expense=round_money(monthly_expenses),
            projections=[_serialize_month(row) for row in result["projections"]],
            total_projected_income=result["total_projected_income"],
            total_projected_expenses=result["total_projected_expenses"],
            total_projected_cash_flow=result["total_projected_cash_flow"],
            average_monthly_cash_flow=result["average_monthly_cash_flow"],
        )
        db.add(projection)

    db.refresh(projection)
    logger.info(
        f"Stored {projection_months}-month projection {projection.id} "
        f"for property {property_id}"
    )
    return projection


def list_cash_flow_projections(db: Session, property_id: str) -> List[CashFlowProjection]:
    """All stored projections for a property, newest first."""
    get_property(db, property_id)
    return (
        db.query(CashFlowProjection)
        .filter(CashFlowProjection.property_id == property_id)
        .order_by(CashFlowProjection.created_at.desc(), CashFlowProjection.id.desc())
        .all()
    )
