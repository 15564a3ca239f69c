"""
Down-payment assistance program matching.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional, Tuple

from sqlalchemy import or_
from sqlalchemy.orm import Session

from realty_analytics.db.models import DownPaymentProgram

FEDERAL_SCOPE = "FEDERAL"


@dataclass
class BuyerProfile:
    """Buyer facts a program's eligibility rules are checked against."""

    state: Optional[str] = None
    city: Optional[str] = None
    income: Optional[Decimal] = None
    purchase_price: Optional[Decimal] = None
    first_time_buyer: Optional[bool] = None
    credit_score: Optional[int] = None


def is_eligible(program: DownPaymentProgram, buyer: BuyerProfile) -> bool:
    """
    Check a buyer against a program.

    A threshold only applies when both the program and the buyer state it.
    A first-time-buyer program rejects only buyers who explicitly are not
    first-time buyers.
    """
    if buyer.income is not None and program.max_income is not None:
        if buyer.income > program.max_income:
            return False

    if buyer.purchase_price is not None and program.max_purchase_price is not None:
        if buyer.purchase_price > program.max_purchase_price:
            return False

    if program.first_time_buyer and buyer.first_time_buyer is False:
        return False

    if buyer.credit_score is not None and program.min_credit_score is not None:
        if buyer.credit_score < program.min_credit_score:
            return False

    return True


def find_programs(
    db: Session, buyer: BuyerProfile
) -> List[Tuple[DownPaymentProgram, bool]]:
    """
    Active programs covering the buyer's geography, with eligibility.

    State matches the buyer's state, FEDERAL or no state; city matches the
    buyer's city or no city. Both filters apply when both are given.
    """
    query = db.query(DownPaymentProgram).filter(DownPaymentProgram.is_active == True)

    if buyer.state:
        query = query.filter(
            or_(
                DownPaymentProgram.state == buyer.state,
                DownPaymentProgram.state == FEDERAL_SCOPE,
                DownPaymentProgram.state.is_(None),
            )
        )

    if buyer.city:
        query = query.filter(
            or_(
                DownPaymentProgram.city == buyer.city,
                DownPaymentProgram.city.is_(None),
            )
        )

    programs = query.order_by(
        DownPaymentProgram.state.asc(), DownPaymentProgram.name.asc()
    ).all()

    return [(program, is_eligible(program, buyer)) for program in programs]
