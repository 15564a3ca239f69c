"""
Database configuration and models.
"""

from realty_analytics.db.database import engine, SessionLocal, get_db, atomic
from realty_analytics.db.models import Base

__all__ = ["engine", "SessionLocal", "get_db", "atomic", "Base"]
