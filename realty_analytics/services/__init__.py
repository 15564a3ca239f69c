"""
Stateful analytics services backed by the database.
"""

from realty_analytics.services.valuation import get_property_valuation
from realty_analytics.services.price_history import get_price_history
from realty_analytics.services import portfolio
from realty_analytics.services.down_payment import BuyerProfile, find_programs
from realty_analytics.services.tax_report import (
    generate_tax_report,
    regenerate_tax_report,
    list_tax_reports,
)
from realty_analytics.services.cash_flow import (
    create_cash_flow_projection,
    list_cash_flow_projections,
)

__all__ = [
    "get_property_valuation",
    "get_price_history",
    "portfolio",
    "BuyerProfile",
    "find_programs",
    "generate_tax_report",
    "regenerate_tax_report",
    "list_tax_reports",
    "create_cash_flow_projection",
    "list_cash_flow_projections",
]
