"""
Financial Calculation Engine

Pure calculation modules for real estate investment analysis. No I/O; all
money is Decimal and rounded to cents only on output.
"""

from realty_analytics.calculations import (
    amortization,
    cashflow,
    depreciation,
    loans,
    portfolio,
    returns,
    tax,
)

__all__ = [
    "amortization",
    "cashflow",
    "depreciation",
    "loans",
    "portfolio",
    "returns",
    "tax",
]
