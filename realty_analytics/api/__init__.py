"""
API routes for the analytics engine.
"""

from fastapi import APIRouter

from realty_analytics.api import (
    calculators,
    portfolios,
    programs,
    projections,
    tax_reports,
    valuations,
)

router = APIRouter(prefix="/financial-tools")

# Include sub-routers
router.include_router(valuations.router, tags=["valuations"])
router.include_router(calculators.router, prefix="/calculator", tags=["calculators"])
router.include_router(portfolios.router, prefix="/portfolios", tags=["portfolios"])
router.include_router(programs.router, tags=["down-payment"])
router.include_router(tax_reports.router, prefix="/tax-reports", tags=["tax"])
router.include_router(
    projections.router, prefix="/cash-flow-projection", tags=["cash-flow"]
)
