"""
Investment portfolio endpoints.

Every route is scoped to the authenticated user; other users' portfolios
respond as not found.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.orm import Session

from realty_analytics.auth.dependencies import get_current_user_id
from realty_analytics.calculations.depreciation import FinancialPropertyType
from realty_analytics.db.database import get_db
from realty_analytics.services import portfolio as portfolio_service

router = APIRouter()


class PortfolioCreate(BaseModel):
    """Schema for creating a portfolio."""

    name: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None


class PortfolioUpdate(BaseModel):
    """Schema for updating portfolio metadata."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None


class PortfolioPropertyCreate(BaseModel):
    """Schema for adding a property to a portfolio."""

    property_id: str
    purchase_price: Decimal = Field(gt=0)
    purchase_date: date
    down_payment: Optional[Decimal] = Field(default=None, ge=0)
    closing_costs: Optional[Decimal] = Field(default=None, ge=0)
    renovation_costs: Optional[Decimal] = Field(default=None, ge=0)
    loan_amount: Optional[Decimal] = Field(default=None, ge=0)
    interest_rate: Optional[Decimal] = Field(default=None, ge=0)
    loan_term_years: Optional[int] = Field(default=None, ge=1, le=50)
    monthly_rent: Optional[Decimal] = Field(default=None, ge=0)
    current_value: Optional[Decimal] = Field(default=None, ge=0)
    depreciation_type: Optional[FinancialPropertyType] = None
    land_value: Optional[Decimal] = Field(default=None, ge=0)


class PortfolioPropertyUpdate(BaseModel):
    """Schema for updating a portfolio member. Only provided fields change."""

    current_value: Optional[Decimal] = Field(default=None, ge=0)
    monthly_rent: Optional[Decimal] = Field(default=None, ge=0)
    down_payment: Optional[Decimal] = Field(default=None, ge=0)
    closing_costs: Optional[Decimal] = Field(default=None, ge=0)
    renovation_costs: Optional[Decimal] = Field(default=None, ge=0)
    loan_amount: Optional[Decimal] = Field(default=None, ge=0)
    interest_rate: Optional[Decimal] = Field(default=None, ge=0)
    loan_term_years: Optional[int] = Field(default=None, ge=1, le=50)
    land_value: Optional[Decimal] = Field(default=None, ge=0)


class PortfolioPropertyResponse(BaseModel):
    id: str
    property_id: str
    purchase_price: Decimal
    purchase_date: date
    down_payment: Optional[Decimal] = None
    closing_costs: Optional[Decimal] = None
    renovation_costs: Optional[Decimal] = None
    loan_amount: Optional[Decimal] = None
    interest_rate: Optional[Decimal] = None
    loan_term_years: Optional[int] = None
    monthly_payment: Optional[Decimal] = None
    monthly_rent: Optional[Decimal] = None
    current_value: Optional[Decimal] = None
    value_date: Optional[datetime] = None
    depreciation_type: Optional[FinancialPropertyType] = None
    depreciation_years: Optional[int] = None
    depreciation_start_date: Optional[date] = None
    land_value: Optional[Decimal] = None

    model_config = ConfigDict(from_attributes=True)


class PortfolioResponse(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    total_value: Optional[Decimal] = None
    total_equity: Optional[Decimal] = None
    total_income: Optional[Decimal] = None
    total_expenses: Optional[Decimal] = None
    cash_flow: Optional[Decimal] = None
    overall_roi: Optional[Decimal] = None
    cash_on_cash: Optional[Decimal] = None
    last_calculated_at: Optional[datetime] = None
    created_at: datetime
    properties: List[PortfolioPropertyResponse] = []

    model_config = ConfigDict(from_attributes=True)


class PortfolioListResponse(BaseModel):
    portfolios: List[PortfolioResponse]
    total: int


@router.post("", response_model=PortfolioResponse, status_code=201)
async def create_portfolio(
    data: PortfolioCreate,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """Create an empty portfolio."""
    return portfolio_service.create_portfolio(db, user_id, data.name, data.description)


@router.get("", response_model=PortfolioListResponse)
async def list_portfolios(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """List the user's portfolios, newest first."""
    portfolios = portfolio_service.list_portfolios(db, user_id)
    return {"portfolios": portfolios, "total": len(portfolios)}


@router.get("/{portfolio_id}", response_model=PortfolioResponse)
async def get_portfolio(
    portfolio_id: str,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """Get a portfolio with freshly recalculated aggregates."""
    return portfolio_service.get_portfolio(db, portfolio_id, user_id)


@router.put("/{portfolio_id}", response_model=PortfolioResponse)
async def update_portfolio(
    portfolio_id: str,
    data: PortfolioUpdate,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    return portfolio_service.update_portfolio(
        db, portfolio_id, user_id, data.model_dump(exclude_unset=True)
    )


@router.delete("/{portfolio_id}")
async def delete_portfolio(
    portfolio_id: str,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """Delete a portfolio and its memberships."""
    portfolio_service.delete_portfolio(db, portfolio_id, user_id)
    return {"deleted": True, "id": portfolio_id}


@router.post(
    "/{portfolio_id}/properties", response_model=PortfolioResponse, status_code=201
)
async def add_portfolio_property(
    portfolio_id: str,
    data: PortfolioPropertyCreate,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """Add a property to the portfolio and return the recalculated portfolio."""
    return portfolio_service.add_property(db, portfolio_id, user_id, data.model_dump())


@router.patch(
    "/{portfolio_id}/properties/{property_id}", response_model=PortfolioResponse
)
async def update_portfolio_property(
    portfolio_id: str,
    property_id: str,
    data: PortfolioPropertyUpdate,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    return portfolio_service.update_property(
        db, portfolio_id, property_id, user_id, data.model_dump(exclude_unset=True)
    )


@router.delete("/{portfolio_id}/properties/{property_id}")
async def remove_portfolio_property(
    portfolio_id: str,
    property_id: str,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    portfolio_service.remove_property(db, portfolio_id, property_id, user_id)
    return {"deleted": True, "portfolio_id": portfolio_id, "property_id": property_id}
