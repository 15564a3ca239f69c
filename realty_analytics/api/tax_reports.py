"""
Yearly tax report endpoints.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.orm import Session

from realty_analytics.auth.dependencies import get_current_user_id
from realty_analytics.db.database import get_db
from realty_analytics.services import tax_report as tax_service

router = APIRouter()


class TaxReportRequest(BaseModel):
    tax_year: int = Field(ge=1900, le=2100)


class PropertyTaxDetail(BaseModel):
    property_id: str
    address: str
    income: Decimal
    expenses: Decimal
    depreciation: Decimal
    net_income: Decimal


class TaxReportResponse(BaseModel):
    id: str
    tax_year: int
    start_date: date
    end_date: date

    rental_income: Decimal
    other_income: Decimal
    total_income: Decimal

    mortgage_interest: Decimal
    property_taxes: Decimal
    insurance: Decimal
    repairs: Decimal
    maintenance: Decimal
    utilities: Decimal
    management: Decimal
    professional: Decimal
    depreciation: Decimal
    other_expenses: Decimal
    total_expenses: Decimal

    net_income: Decimal
    property_details: List[PropertyTaxDetail] = []
    status: str
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class TaxReportListResponse(BaseModel):
    reports: List[TaxReportResponse]
    total: int


@router.post("", response_model=TaxReportResponse)
async def generate_tax_report(
    request: TaxReportRequest,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """
    Get the tax report for a year, generating it on first request.

    An existing report is returned as stored; use the regenerate route to
    pick up ledger changes made since.
    """
    return tax_service.generate_tax_report(db, user_id, request.tax_year)


@router.get("", response_model=TaxReportListResponse)
async def list_tax_reports(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    reports = tax_service.list_tax_reports(db, user_id)
    return {"reports": reports, "total": len(reports)}


@router.post("/{tax_year}/regenerate", response_model=TaxReportResponse)
async def regenerate_tax_report(
    tax_year: int,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """Rebuild an existing report from the current ledgers."""
    return tax_service.regenerate_tax_report(db, user_id, tax_year)
