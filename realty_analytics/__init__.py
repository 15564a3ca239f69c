"""
Real estate investment analytics engine.

Valuations, price analytics, investment calculators, portfolio tracking,
tax reporting and cash flow projections.
"""

__version__ = "0.1.0"
