"""
Down-payment assistance program search.
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from sqlalchemy.orm import Session

from realty_analytics.auth.dependencies import get_current_user_id
from realty_analytics.db.database import get_db
from realty_analytics.db.models import DownPaymentProgram
from realty_analytics.services.down_payment import BuyerProfile, find_programs

router = APIRouter()


class DownPaymentProgramResponse(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    program_type: str
    state: Optional[str] = None
    county: Optional[str] = None
    city: Optional[str] = None
    max_income: Optional[Decimal] = None
    max_purchase_price: Optional[Decimal] = None
    first_time_buyer: bool
    min_credit_score: Optional[int] = None
    max_amount: Optional[Decimal] = None
    percentage_of_price: Optional[Decimal] = None
    application_url: Optional[str] = None
    deadline: Optional[datetime] = None
    is_eligible: bool


class DownPaymentProgramListResponse(BaseModel):
    programs: List[DownPaymentProgramResponse]
    total: int
    eligible_count: int


def program_to_response(
    program: DownPaymentProgram, eligible: bool
) -> DownPaymentProgramResponse:
    """Convert a catalog program and its eligibility to the response schema."""
    return DownPaymentProgramResponse(
        id=program.id,
        name=program.name,
        description=program.description,
        program_type=program.program_type,
        state=program.state,
        county=program.county,
        city=program.city,
        max_income=program.max_income,
        max_purchase_price=program.max_purchase_price,
        first_time_buyer=program.first_time_buyer,
        min_credit_score=program.min_credit_score,
        max_amount=program.max_amount,
        percentage_of_price=program.percentage_of_price,
        application_url=program.application_url,
        deadline=program.deadline,
        is_eligible=eligible,
    )


@router.get("/down-payment-programs", response_model=DownPaymentProgramListResponse)
async def list_down_payment_programs(
    state: Optional[str] = None,
    city: Optional[str] = None,
    income: Optional[Decimal] = Query(default=None, ge=0),
    purchase_price: Optional[Decimal] = Query(default=None, ge=0),
    first_time_buyer: Optional[bool] = None,
    credit_score: Optional[int] = Query(default=None, ge=300, le=850),
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """Active programs for the buyer's area, each flagged eligible or not."""
    buyer = BuyerProfile(
        state=state,
        city=city,
        income=income,
        purchase_price=purchase_price,
        first_time_buyer=first_time_buyer,
        credit_score=credit_score,
    )
    matches = find_programs(db, buyer)

    programs = [program_to_response(program, eligible) for program, eligible in matches]
    return {
        "programs": programs,
        "total": len(programs),
        "eligible_count": sum(1 for _, eligible in matches if eligible),
    }
