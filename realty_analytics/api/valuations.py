"""
Property valuation and price history endpoints.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Literal, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, ConfigDict
from sqlalchemy.orm import Session

from realty_analytics.auth.dependencies import get_current_user_id
from realty_analytics.db.database import get_db
from realty_analytics.db.models import MarketTrend
from realty_analytics.services.price_history import get_price_history
from realty_analytics.services.valuation import get_property_valuation

router = APIRouter()


class ValuationRequest(BaseModel):
    property_id: str
    method: Literal["COMPARABLE", "INCOME", "COST"] = "COMPARABLE"


class ComparableSale(BaseModel):
    address: str
    price: Decimal
    square_meters: int
    sold_date: str
    bedrooms: Optional[int] = None
    bathrooms: Optional[int] = None
    distance_km: float


class ValuationResponse(BaseModel):
    id: str
    property_id: str
    estimated_value: Decimal
    confidence_low: Decimal
    confidence_high: Decimal
    confidence_level: int
    comparable_sales: List[ComparableSale]
    market_data: Dict[str, Any]
    property_details: Dict[str, Any]
    valuation_method: str
    model_version: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PriceHistoryEntry(BaseModel):
    id: str
    price: Decimal
    price_per_sqm: Optional[Decimal] = None
    event_type: str
    event_date: datetime
    days_on_market: Optional[int] = None
    market_trend: Optional[MarketTrend] = None

    model_config = ConfigDict(from_attributes=True)


class PriceHistoryResponse(BaseModel):
    property_id: str
    history: List[PriceHistoryEntry]
    price_change_percent: Optional[Decimal] = None
    avg_price_per_sqm: Optional[Decimal] = None
    current_trend: MarketTrend


@router.post("/valuation", response_model=ValuationResponse)
async def create_valuation(
    request: ValuationRequest,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """
    Get a property valuation.

    Reuses the latest valuation when it is younger than the cache window,
    otherwise produces and stores a new one.
    """
    return get_property_valuation(db, request.property_id, method=request.method)


@router.get("/price-history", response_model=PriceHistoryResponse)
async def price_history(
    property_id: str = Query(...),
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """Price timeline with change percentage and current market trend."""
    return get_price_history(db, property_id, start_date=start_date, end_date=end_date)
