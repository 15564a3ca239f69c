"""
Price analytics over a property's listing timeline.
"""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Dict, Optional

from sqlalchemy.orm import Session

from realty_analytics.calculations.money import to_decimal, round_money, percent
from realty_analytics.db.database import atomic
from realty_analytics.db.models import PriceHistory, PriceEventType, MarketTrend
from realty_analytics.services.valuation import get_property

logger = logging.getLogger(__name__)


def seed_listing_entry(db: Session, prop) -> PriceHistory:
    """Record the current listing as the first LISTED event."""
    price_per_sqm = None
    if prop.square_meters:
        price_per_sqm = round_money(to_decimal(prop.base_price) / prop.square_meters)

    with atomic(db):
        entry = PriceHistory(
            property_id=prop.id,
            price=round_money(prop.base_price),
            price_per_sqm=price_per_sqm,
            event_type=PriceEventType.LISTED.value,
            event_date=prop.published_at or prop.created_at,
            days_on_market=0,
            market_trend=MarketTrend.STABLE,
        )
        db.add(entry)

    logger.info(f"Seeded price history for property {prop.id}")
    return entry


def get_price_history(
    db: Session,
    property_id: str,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
) -> Dict:
    """
    Price timeline for a property within an optional date window.

    A property without any history is seeded with a LISTED entry built from
    its current listing before the window is applied.

    Raises:
        NotFoundError: if the property does not exist
    """
    prop = get_property(db, property_id)

    has_history = (
        db.query(PriceHistory.id).filter(PriceHistory.property_id == property_id).first()
    )
    if not has_history:
        seed_listing_entry(db, prop)

    query = db.query(PriceHistory).filter(PriceHistory.property_id == property_id)
    if start_date:
        query = query.filter(PriceHistory.event_date >= start_date)
    if end_date:
        query = query.filter(PriceHistory.event_date <= end_date)
    history = query.order_by(PriceHistory.event_date.asc()).all()

    price_change_percent: Optional[Decimal] = None
    if len(history) >= 2:
        first_price = to_decimal(history[0].price)
        last_price = to_decimal(history[-1].price)
        price_change_percent = round_money(percent(last_price - first_price, first_price))

    avg_price_per_sqm: Optional[Decimal] = None
    if prop.square_meters:
        avg_price_per_sqm = round_money(to_decimal(prop.base_price) / prop.square_meters)

    current_trend = MarketTrend.STABLE
    if history and history[-1].market_trend:
        current_trend = history[-1].market_trend

    return {
        "property_id": property_id,
        "history": history,
        "price_change_percent": price_change_percent,
        "avg_price_per_sqm": avg_price_per_sqm,
        "current_trend": current_trend,
    }
