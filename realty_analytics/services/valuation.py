"""
Property valuation service.

Valuations are produced by a pluggable ValuationProvider. The bundled
SyntheticComparableProvider derives a seeded, reproducible estimate from the
listing itself; a live market-data provider can replace it without touching
callers.
"""

import logging
import random
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from decimal import Decimal
from typing import List, Dict, Optional

from sqlalchemy.orm import Session

from realty_analytics.calculations.money import to_decimal, round_money, money_str
from realty_analytics.config import get_settings
from realty_analytics.db.database import atomic
from realty_analytics.db.models import Property, PropertyValuation, MarketTrend, utcnow
from realty_analytics.exceptions import NotFoundError

logger = logging.getLogger(__name__)

VALUATION_METHODS = ("COMPARABLE", "INCOME", "COST")
DEFAULT_SQUARE_METERS = 100


@dataclass
class ValuationEstimate:
    """Provider output, ready to persist."""

    estimated_value: Decimal
    confidence_low: Decimal
    confidence_high: Decimal
    confidence_level: int
    valuation_method: str
    model_version: str
    comparable_sales: List[Dict] = field(default_factory=list)
    market_data: Dict = field(default_factory=dict)
    property_details: Dict = field(default_factory=dict)


class ValuationProvider(ABC):
    """Produces a value estimate for a property."""

    @abstractmethod
    def estimate(self, prop: Property, method: str, now: datetime) -> ValuationEstimate:
        raise NotImplementedError


class SyntheticComparableProvider(ValuationProvider):
    """
    Comparable-sales approximation built from the listing's own fields.

    The random stream is seeded (by default from the property id), so the
    same property always yields the same comparables and estimate.
    """

    def __init__(
        self,
        seed: Optional[int] = None,
        comparable_count: int = 5,
        model_version: str = "1.0.0",
    ):
        self.seed = seed
        self.comparable_count = comparable_count
        self.model_version = model_version

    def _rng(self, prop: Property) -> random.Random:
        return random.Random(self.seed if self.seed is not None else prop.id)

    @staticmethod
    def _uniform(rng: random.Random, low: str, spread: str) -> Decimal:
        return Decimal(low) + Decimal(repr(rng.random())) * Decimal(spread)

    def generate_comparables(
        self, prop: Property, rng: random.Random, now: datetime
    ) -> List[Dict]:
        base_price = to_decimal(prop.base_price)
        square_meters = prop.square_meters or DEFAULT_SQUARE_METERS
        comparables = []

        for i in range(self.comparable_count):
            price_variation = self._uniform(rng, "0.85", "0.30")
            size_variation = self._uniform(rng, "0.90", "0.20")
            sold_date = now - timedelta(days=rng.random() * 180)

            comparables.append(
                {
                    "address": f"{100 + i * 10} Nearby Street, {prop.city}",
                    "price": str((base_price * price_variation).quantize(Decimal("1"))),
                    "square_meters": int(
                        (square_meters * size_variation).quantize(Decimal("1"))
                    ),
                    "sold_date": sold_date.date().isoformat(),
                    "bedrooms": prop.bedrooms or 3,
                    "bathrooms": prop.bathrooms or 2,
                    "distance_km": round(rng.random() * 5, 1),
                }
            )

        return comparables

    def estimate(self, prop: Property, method: str, now: datetime) -> ValuationEstimate:
        rng = self._rng(prop)
        base_price = to_decimal(prop.base_price)
        square_meters = prop.square_meters or DEFAULT_SQUARE_METERS

        price_per_sqm = base_price / square_meters
        market_adjustment = self._uniform(rng, "0.95", "0.10")
        estimated_value = base_price * market_adjustment

        comparables = self.generate_comparables(prop, rng, now)

        confidence_level = min(85, 60 + len(comparables) * 5)
        confidence_range = estimated_value * (
            Decimal("0.1") - Decimal(confidence_level) / 1000
        )

        return ValuationEstimate(
            estimated_value=round_money(estimated_value),
            confidence_low=round_money(estimated_value - confidence_range),
            confidence_high=round_money(estimated_value + confidence_range),
            confidence_level=confidence_level,
            valuation_method=method,
            model_version=self.model_version,
            comparable_sales=comparables,
            market_data={
                "trend": MarketTrend.STABLE.value,
                "avg_price_per_sqm": money_str(price_per_sqm),
                "inventory": rng.randint(10, 59),
            },
            property_details={
                "size": square_meters,
                "bedrooms": prop.bedrooms,
                "bathrooms": prop.bathrooms,
                "year_built": prop.year_built,
            },
        )


# Singleton instance
_valuation_provider: Optional[ValuationProvider] = None


def get_valuation_provider() -> ValuationProvider:
    """Get the configured valuation provider singleton."""
    global _valuation_provider
    if _valuation_provider is None:
        settings = get_settings()
        _valuation_provider = SyntheticComparableProvider(
            seed=settings.valuation_random_seed,
            comparable_count=settings.valuation_comparable_count,
            model_version=settings.valuation_model_version,
        )
    return _valuation_provider


def get_property(db: Session, property_id: str) -> Property:
    """Load a catalog property or raise NotFoundError."""
    prop = db.query(Property).filter(Property.id == property_id).first()
    if not prop:
        raise NotFoundError(f"Property {property_id} not found")
    return prop


def latest_valuation(db: Session, property_id: str) -> Optional[PropertyValuation]:
    return (
        db.query(PropertyValuation)
        .filter(PropertyValuation.property_id == property_id)
        .order_by(PropertyValuation.created_at.desc())
        .first()
    )


def get_property_valuation(
    db: Session,
    property_id: str,
    method: str = "COMPARABLE",
    provider: Optional[ValuationProvider] = None,
    now: Optional[datetime] = None,
) -> PropertyValuation:
    """
    Return a valuation for a property, reusing one younger than the cache window.

    Args:
        db: Database session
        property_id: Catalog property id
        method: COMPARABLE, INCOME or COST
        provider: Valuation strategy; defaults to the configured provider
        now: Reference time (defaults to the current UTC time)

    Raises:
        NotFoundError: if the property does not exist
    """
    settings = get_settings()
    now = now or utcnow()
    prop = get_property(db, property_id)

    recent = latest_valuation(db, property_id)
    if recent and now - recent.created_at < timedelta(hours=settings.valuation_cache_hours):
        logger.debug(f"Valuation cache hit for property {property_id}")
        return recent

    estimate = (provider or get_valuation_provider()).estimate(prop, method, now)

    with atomic(db):
        valuation = PropertyValuation(
            property_id=prop.id,
            estimated_value=estimate.estimated_value,
            confidence_low=estimate.confidence_low,
            confidence_high=estimate.confidence_high,
            confidence_level=estimate.confidence_level,
            comparable_sales=estimate.comparable_sales,
            market_data=estimate.market_data,
            property_details=estimate.property_details,
            valuation_method=estimate.valuation_method,
            model_version=estimate.model_version,
            created_at=now,
            updated_at=now,
        )
        db.add(valuation)

    db.refresh(valuation)
    logger.info(
        f"Created valuation {valuation.id} for property {property_id}: "
        f"{valuation.estimated_value} ({valuation.confidence_level}% confidence)"
    )
    return valuation
