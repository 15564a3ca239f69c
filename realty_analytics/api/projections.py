"""
Cash flow projection endpoints.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.orm import Session

from realty_analytics.auth.dependencies import get_current_user_id
from realty_analytics.calculations.cashflow import DEFAULT_PROJECTION_MONTHS
from realty_analytics.db.database import get_db
from realty_analytics.services import cash_flow as cash_flow_service

router = APIRouter()


class CashFlowProjectionInput(BaseModel):
    """Assumptions for a projection. Rates are annual percentages."""

    property_id: str
    monthly_rent: Decimal = Field(ge=0)
    monthly_expenses: Decimal = Field(ge=0)
    projection_months: int = Field(default=DEFAULT_PROJECTION_MONTHS, ge=1, le=360)
    vacancy_rate: Optional[Decimal] = Field(default=None, ge=0, le=100)
    rent_growth_rate: Optional[Decimal] = Field(default=None, gt=-100)
    expense_growth_rate: Optional[Decimal] = Field(default=None, gt=-100)
    start_date: Optional[date] = None


class ProjectedMonth(BaseModel):
    month: int
    month_name: str
    year: int
    income: Decimal
    expenses: Decimal
    net_cash_flow: Decimal
    cumulative_cash_flow: Decimal


class CashFlowProjectionResponse(BaseModel):
    id: str
    property_id: str
    projection_months: int
    vacancy_rate: Decimal
    rent_growth_rate: Decimal
    expense_growth_rate: Decimal
    base_monthly_rent: Decimal
    base_monthly_expense: Decimal
    projections: List[ProjectedMonth]
    total_projected_income: Decimal
    total_projected_expenses: Decimal
    total_projected_cash_flow: Decimal
    average_monthly_cash_flow: Decimal
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CashFlowProjectionListResponse(BaseModel):
    property_id: str
    projections: List[CashFlowProjectionResponse]
    total: int


@router.post("", response_model=CashFlowProjectionResponse, status_code=201)
async def create_projection(
    inputs: CashFlowProjectionInput,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """Project monthly cash flow and store it as a new snapshot."""
    return cash_flow_service.create_cash_flow_projection(db, **inputs.model_dump())


@router.get("/{property_id}", response_model=CashFlowProjectionListResponse)
async def list_projections(
    property_id: str,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """All stored projections for a property, newest first."""
    projections = cash_flow_service.list_cash_flow_projections(db, property_id)
    return {
        "property_id": property_id,
        "projections": projections,
        "total": len(projections),
    }
