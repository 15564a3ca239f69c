"""
SQLAlchemy ORM models for the analytics engine.

properties, leases, rent_payments and expenses belong to the surrounding
platform and are only read here. Every other table is owned by the engine.
"""

import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    Column,
    String,
    Integer,
    Numeric,
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    JSON,
    Text,
    UniqueConstraint,
    Enum as SQLEnum,
)
from sqlalchemy.orm import declarative_base, relationship

from realty_analytics.calculations.depreciation import FinancialPropertyType

Base = declarative_base()


def generate_uuid():
    return str(uuid.uuid4())


def utcnow() -> datetime:
    """Naive UTC timestamp, matching what the database stores."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class MarketTrend(str, enum.Enum):
    """Direction of the local market at a price event."""

    UP = "UP"
    DOWN = "DOWN"
    STABLE = "STABLE"


class PriceEventType(str, enum.Enum):
    """Listing lifecycle events recorded in price history."""

    LISTED = "LISTED"
    PRICE_CHANGE = "PRICE_CHANGE"
    SOLD = "SOLD"
    DELISTED = "DELISTED"
    RELISTED = "RELISTED"


class RentPaymentStatus(str, enum.Enum):
    PENDING = "PENDING"
    PAID = "PAID"
    PARTIAL = "PARTIAL"
    OVERDUE = "OVERDUE"
    CANCELLED = "CANCELLED"


class TaxReportStatus(str, enum.Enum):
    DRAFT = "DRAFT"
    FINAL = "FINAL"
    EXPORTED = "EXPORTED"


class TimestampMixin:
    """Audit timestamps on all models."""

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)


# ---------------------------------------------------------------------------
# Platform records (read-only for the engine)
# ---------------------------------------------------------------------------


class Property(TimestampMixin, Base):
    """A listed property from the platform catalog."""

    __tablename__ = "properties"

    id = Column(String, primary_key=True, default=generate_uuid)
    owner_id = Column(String, nullable=True, index=True)
    title = Column(String(255))

    # Address
    address = Column(String(255))
    city = Column(String(100))
    state = Column(String(50))
    country = Column(String(2))

    # Listing details
    base_price = Column(Numeric(14, 2), nullable=False)
    square_meters = Column(Integer)
    bedrooms = Column(Integer)
    bathrooms = Column(Integer)
    year_built = Column(Integer)
    published_at = Column(DateTime)

    # Relationships
    valuations = relationship(
        "PropertyValuation",
        back_populates="property",
        cascade="all, delete-orphan",
        lazy="dynamic",
    )
    price_history = relationship(
        "PriceHistory",
        back_populates="property",
        cascade="all, delete-orphan",
        lazy="dynamic",
    )
    leases = relationship("Lease", back_populates="property", lazy="dynamic")


class Lease(TimestampMixin, Base):
    """Lease between a landlord and a tenant."""

    __tablename__ = "leases"

    id = Column(String, primary_key=True, default=generate_uuid)
    property_id = Column(String, ForeignKey("properties.id"), nullable=False, index=True)
    landlord_id = Column(String, nullable=False, index=True)
    tenant_id = Column(String)

    monthly_rent = Column(Numeric(12, 2))
    start_date = Column(Date)
    end_date = Column(Date)
    status = Column(String(20), default="ACTIVE")

    # Relationships
    property = relationship("Property", back_populates="leases")
    rent_payments = relationship(
        "RentPayment", back_populates="lease", cascade="all, delete-orphan"
    )


class RentPayment(TimestampMixin, Base):
    """A scheduled or collected rent payment."""

    __tablename__ = "rent_payments"

    id = Column(String, primary_key=True, default=generate_uuid)
    lease_id = Column(String, ForeignKey("leases.id"), nullable=False, index=True)
    due_date = Column(Date, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    status = Column(String(20), default=RentPaymentStatus.PENDING.value, index=True)
    paid_at = Column(DateTime)
    paid_amount = Column(Numeric(12, 2))

    # Relationships
    lease = relationship("Lease", back_populates="rent_payments")


class Expense(TimestampMixin, Base):
    """Landlord expense-ledger entry."""

    __tablename__ = "expenses"

    id = Column(String, primary_key=True, default=generate_uuid)
    landlord_id = Column(String, nullable=False, index=True)
    property_id = Column(String, ForeignKey("properties.id"), nullable=True, index=True)
    category = Column(String(32), nullable=False, index=True)
    description = Column(String(255))
    amount = Column(Numeric(12, 2), nullable=False)
    expense_date = Column(DateTime, nullable=False, index=True)


# ---------------------------------------------------------------------------
# Engine-owned records
# ---------------------------------------------------------------------------


class PropertyValuation(TimestampMixin, Base):
    """Point-in-time value estimate. Never updated; superseded by newer rows."""

    __tablename__ = "property_valuations"

    id = Column(String, primary_key=True, default=generate_uuid)
    property_id = Column(String, ForeignKey("properties.id"), nullable=False, index=True)

    estimated_value = Column(Numeric(14, 2), nullable=False)
    confidence_low = Column(Numeric(14, 2), nullable=False)
    confidence_high = Column(Numeric(14, 2), nullable=False)
    confidence_level = Column(Integer, nullable=False)

    # Snapshots (money stored as decimal strings)
    comparable_sales = Column(JSON, default=list)
    market_data = Column(JSON, default=dict)
    property_details = Column(JSON, default=dict)

    valuation_method = Column(String(20), default="COMPARABLE", nullable=False)
    model_version = Column(String(20))

    # Relationships
    property = relationship("Property", back_populates="valuations")


class PriceHistory(Base):
    """A price event on a property's listing timeline."""

    __tablename__ = "price_history"

    id = Column(String, primary_key=True, default=generate_uuid)
    property_id = Column(String, ForeignKey("properties.id"), nullable=False, index=True)
    price = Column(Numeric(14, 2), nullable=False)
    price_per_sqm = Column(Numeric(10, 2))
    event_type = Column(String(20), nullable=False)
    event_date = Column(DateTime, nullable=False, index=True)
    days_on_market = Column(Integer)
    market_trend = Column(SQLEnum(MarketTrend))
    created_at = Column(DateTime, default=utcnow, nullable=False)

    # Relationships
    property = relationship("Property", back_populates="price_history")


class InvestmentPortfolio(TimestampMixin, Base):
    """A user's group of investment properties with derived aggregates."""

    __tablename__ = "investment_portfolios"

    id = Column(String, primary_key=True, default=generate_uuid)
    user_id = Column(String, nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text)

    # Aggregates (recomputed from members, never edited directly)
    total_value = Column(Numeric(14, 2))
    total_equity = Column(Numeric(14, 2))
    total_income = Column(Numeric(14, 2))
    total_expenses = Column(Numeric(14, 2))
    cash_flow = Column(Numeric(14, 2))
    overall_roi = Column(Numeric(10, 2))
    cash_on_cash = Column(Numeric(10, 2))
    last_calculated_at = Column(DateTime)

    # Relationships
    properties = relationship(
        "PortfolioProperty",
        back_populates="portfolio",
        cascade="all, delete-orphan",
        order_by="PortfolioProperty.created_at",
    )


class PortfolioProperty(TimestampMixin, Base):
    """Membership of a property in a portfolio, with its purchase and loan terms."""

    __tablename__ = "portfolio_properties"
    __table_args__ = (
        UniqueConstraint("portfolio_id", "property_id", name="uq_portfolio_property"),
    )

    id = Column(String, primary_key=True, default=generate_uuid)
    portfolio_id = Column(
        String, ForeignKey("investment_portfolios.id"), nullable=False, index=True
    )
    property_id = Column(String, ForeignKey("properties.id"), nullable=False, index=True)

    # Acquisition
    purchase_price = Column(Numeric(14, 2), nullable=False)
    purchase_date = Column(Date, nullable=False)
    closing_costs = Column(Numeric(12, 2))
    renovation_costs = Column(Numeric(12, 2))
    down_payment = Column(Numeric(12, 2))

    # Financing
    loan_amount = Column(Numeric(14, 2))
    interest_rate = Column(Numeric(6, 3))
    loan_term_years = Column(Integer)
    monthly_payment = Column(Numeric(10, 2))

    # Operations
    monthly_rent = Column(Numeric(10, 2))
    current_value = Column(Numeric(14, 2))
    value_date = Column(DateTime)

    # Depreciation
    depreciation_type = Column(SQLEnum(FinancialPropertyType))
    depreciation_years = Column(Integer)
    depreciation_start_date = Column(Date)
    land_value = Column(Numeric(14, 2))

    # Relationships
    portfolio = relationship("InvestmentPortfolio", back_populates="properties")
    property = relationship("Property")


class DownPaymentProgram(TimestampMixin, Base):
    """Down-payment assistance program in the catalog."""

    __tablename__ = "down_payment_programs"

    id = Column(String, primary_key=True, default=generate_uuid)
    name = Column(String(255), nullable=False)
    description = Column(Text)
    program_type = Column(String(50), nullable=False)

    # Geographic scope; FEDERAL or NULL state and NULL city match everywhere
    state = Column(String(50))
    county = Column(String(100))
    city = Column(String(100))

    # Eligibility
    max_income = Column(Numeric(12, 2))
    max_purchase_price = Column(Numeric(14, 2))
    first_time_buyer = Column(Boolean, default=True, nullable=False)
    min_credit_score = Column(Integer)

    # Assistance terms
    max_amount = Column(Numeric(12, 2))
    percentage_of_price = Column(Numeric(5, 2))
    application_url = Column(String(500))
    deadline = Column(DateTime)
    is_active = Column(Boolean, default=True, nullable=False)


class TaxReport(TimestampMixin, Base):
    """Yearly rental income and deduction summary for one user."""

    __tablename__ = "tax_reports"
    __table_args__ = (
        UniqueConstraint("user_id", "tax_year", name="uq_tax_report_user_year"),
    )

    id = Column(String, primary_key=True, default=generate_uuid)
    user_id = Column(String, nullable=False, index=True)
    tax_year = Column(Integer, nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)

    # Income
    rental_income = Column(Numeric(14, 2), default=0, nullable=False)
    other_income = Column(Numeric(12, 2), default=0, nullable=False)
    total_income = Column(Numeric(14, 2), default=0, nullable=False)

    # Deductions
    mortgage_interest = Column(Numeric(12, 2), default=0, nullable=False)
    property_taxes = Column(Numeric(12, 2), default=0, nullable=False)
    insurance = Column(Numeric(12, 2), default=0, nullable=False)
    repairs = Column(Numeric(12, 2), default=0, nullable=False)
    maintenance = Column(Numeric(12, 2), default=0, nullable=False)
    utilities = Column(Numeric(12, 2), default=0, nullable=False)
    management = Column(Numeric(12, 2), default=0, nullable=False)
    professional = Column(Numeric(12, 2), default=0, nullable=False)
    depreciation = Column(Numeric(12, 2), default=0, nullable=False)
    other_expenses = Column(Numeric(12, 2), default=0, nullable=False)
    total_expenses = Column(Numeric(14, 2), default=0, nullable=False)

    net_income = Column(Numeric(14, 2), default=0, nullable=False)
    property_details = Column(JSON, default=list)
    status = Column(String(20), default=TaxReportStatus.DRAFT.value, nullable=False)
    notes = Column(Text)


class CashFlowProjection(TimestampMixin, Base):
    """Stored monthly cash flow projection. Snapshots accumulate per property."""

    __tablename__ = "cash_flow_projections"

    id = Column(String, primary_key=True, default=generate_uuid)
    property_id = Column(String, ForeignKey("properties.id"), nullable=False, index=True)

    # Assumptions
    projection_months = Column(Integer, default=12, nullable=False)
    vacancy_rate = Column(Numeric(5, 2), nullable=False)
    rent_growth_rate = Column(Numeric(5, 2), nullable=False)
    expense_growth_rate = Column(Numeric(5, 2), nullable=False)
    base_monthly_rent = Column(Numeric(10, 2), nullable=False)
    base_monthly_expense = Column(Numeric(10, 2), nullable=False)

    # Results (monthly rows with money as decimal strings)
    projections = Column(JSON, nullable=False)
    total_projected_income = Column(Numeric(14, 2), nullable=False)
    total_projected_expenses = Column(Numeric(14, 2), nullable=False)
    total_projected_cash_flow = Column(Numeric(14, 2), nullable=False)
    average_monthly_cash_flow = Column(Numeric(12, 2), nullable=False)
