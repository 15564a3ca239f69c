"""
Portfolio tracker.

Portfolios are always scoped to their owner: a portfolio belonging to
someone else is reported as not found. Every mutation and the recalculation
that follows it run in one transaction, serialized per portfolio id.
"""

import logging
import threading
from contextlib import contextmanager
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional, Generator

from sqlalchemy.orm import Session

from realty_analytics.calculations.amortization import calculate_monthly_payment
from realty_analytics.calculations.depreciation import get_depreciation_years
from realty_analytics.calculations.money import round_money
from realty_analytics.calculations.portfolio import Holding, summarize_holdings
from realty_analytics.db.database import atomic
from realty_analytics.db.models import InvestmentPortfolio, PortfolioProperty, utcnow
from realty_analytics.exceptions import ConflictError, NotFoundError
from realty_analytics.services.valuation import get_property

logger = logging.getLogger(__name__)

MONEY_FIELDS = (
    "purchase_price",
    "closing_costs",
    "renovation_costs",
    "down_payment",
    "loan_amount",
    "monthly_rent",
    "current_value",
    "land_value",
)


class _LockEntry:
    """A portfolio lock and the number of callers holding or waiting on it."""

    def __init__(self):
        self.lock = threading.Lock()
        self.users = 0


_locks: Dict[str, _LockEntry] = {}
_locks_guard = threading.Lock()


@contextmanager
def _portfolio_lock(portfolio_id: str) -> Generator[None, None, None]:
    """Serialize work on one portfolio id; the entry is dropped once unused."""
    with _locks_guard:
        entry = _locks.get(portfolio_id)
        if entry is None:
            entry = _locks[portfolio_id] = _LockEntry()
        entry.users += 1
    try:
        with entry.lock:
            yield
    finally:
        with _locks_guard:
            entry.users -= 1
            if entry.users == 0:
                del _locks[portfolio_id]


def has_loan_terms(loan_amount, interest_rate, loan_term_years) -> bool:
    """A payment can be derived: positive amount and term, any known rate."""
    return (
        loan_amount is not None
        and loan_amount > 0
        and interest_rate is not None
        and loan_term_years is not None
        and loan_term_years > 0
    )


@contextmanager
def portfolio_transaction(
    db: Session, portfolio_id: str, user_id: str
) -> Generator[InvestmentPortfolio, None, None]:
    """
    Lock an owned portfolio for a read-modify-write cycle.

    Holds the in-process lock for the portfolio id and a row lock on
    backends that support SELECT ... FOR UPDATE, and commits or rolls back
    everything done inside the block.
    """
    with _portfolio_lock(portfolio_id):
        with atomic(db):
            portfolio = (
                db.query(InvestmentPortfolio)
                .filter(
                    InvestmentPortfolio.id == portfolio_id,
                    InvestmentPortfolio.user_id == user_id,
                )
                .with_for_update()
                .first()
            )
            if not portfolio:
                raise NotFoundError(f"Portfolio {portfolio_id} not found")
            yield portfolio


def _holding(member: PortfolioProperty) -> Holding:
    return Holding(
        purchase_price=member.purchase_price,
        current_value=member.current_value,
        loan_amount=member.loan_amount,
        monthly_rent=member.monthly_rent,
        monthly_payment=member.monthly_payment,
        down_payment=member.down_payment,
        closing_costs=member.closing_costs,
        renovation_costs=member.renovation_costs,
    )


def recalculate_portfolio(db: Session, portfolio: InvestmentPortfolio) -> Dict[str, Decimal]:
    """
    Recompute and store a portfolio's aggregates from its current members.

    Runs inside the caller's transaction.
    """
    db.flush()
    members = (
        db.query(PortfolioProperty)
        .filter(PortfolioProperty.portfolio_id == portfolio.id)
        .all()
    )
    metrics = summarize_holdings(_holding(m) for m in members)

    portfolio.total_value = metrics["total_value"]
    portfolio.total_equity = metrics["total_equity"]
    portfolio.total_income = metrics["total_income"]
    portfolio.total_expenses = metrics["total_expenses"]
    portfolio.cash_flow = metrics["cash_flow"]
    portfolio.overall_roi = metrics["overall_roi"]
    portfolio.cash_on_cash = metrics["cash_on_cash"]
    portfolio.last_calculated_at = utcnow()

    logger.info(
        f"Recalculated portfolio {portfolio.id}: {len(members)} properties, "
        f"value={metrics['total_value']} cash_flow={metrics['cash_flow']}"
    )
    return metrics


def create_portfolio(
    db: Session, user_id: str, name: str, description: Optional[str] = None
) -> InvestmentPortfolio:
    with atomic(db):
        portfolio = InvestmentPortfolio(user_id=user_id, name=name, description=description)
        db.add(portfolio)
    db.refresh(portfolio)
    logger.info(f"Created portfolio {portfolio.id} for user {user_id}")
    return portfolio


def list_portfolios(db: Session, user_id: str) -> List[InvestmentPortfolio]:
    """Portfolios owned by a user, newest first."""
    return (
        db.query(InvestmentPortfolio)
        .filter(InvestmentPortfolio.user_id == user_id)
        .order_by(InvestmentPortfolio.created_at.desc())
        .all()
    )


def get_portfolio(db: Session, portfolio_id: str, user_id: str) -> InvestmentPortfolio:
    """Fetch an owned portfolio, recalculating its aggregates first."""
    with portfolio_transaction(db, portfolio_id, user_id) as portfolio:
        recalculate_portfolio(db, portfolio)
    db.refresh(portfolio)
    return portfolio


def update_portfolio(
    db: Session, portfolio_id: str, user_id: str, changes: Dict
) -> InvestmentPortfolio:
    """Update name and/or description."""
    with portfolio_transaction(db, portfolio_id, user_id) as portfolio:
        for field in ("name", "description"):
            if field in changes:
                setattr(portfolio, field, changes[field])
    db.refresh(portfolio)
    return portfolio


def delete_portfolio(db: Session, portfolio_id: str, user_id: str) -> None:
    with portfolio_transaction(db, portfolio_id, user_id) as portfolio:
        db.delete(portfolio)
    logger.info(f"Deleted portfolio {portfolio_id}")


def add_property(
    db: Session, portfolio_id: str, user_id: str, data: Dict
) -> InvestmentPortfolio:
    """
    Add a catalog property to a portfolio and recalculate.

    With a positive loan amount and term and a known rate, 0% included, the
    monthly payment is derived with the mortgage formula. A depreciation type fixes the
    recovery period and starts depreciation on the purchase date.

    Raises:
        NotFoundError: portfolio or property missing
        ConflictError: property already in the portfolio
    """
    property_id = data["property_id"]

    with portfolio_transaction(db, portfolio_id, user_id) as portfolio:
        get_property(db, property_id)

        existing = (
            db.query(PortfolioProperty)
            .filter(
                PortfolioProperty.portfolio_id == portfolio_id,
                PortfolioProperty.property_id == property_id,
            )
            .first()
        )
        if existing:
            raise ConflictError("Property already in portfolio")

        member = PortfolioProperty(
            portfolio_id=portfolio_id,
            property_id=property_id,
            purchase_date=data["purchase_date"],
            interest_rate=data.get("interest_rate"),
            loan_term_years=data.get("loan_term_years"),
        )
        for field in MONEY_FIELDS:
            if data.get(field) is not None:
                setattr(member, field, round_money(data[field]))

        if has_loan_terms(
            data.get("loan_amount"), data.get("interest_rate"), data.get("loan_term_years")
        ):
            member.monthly_payment = round_money(
                calculate_monthly_payment(
                    data["loan_amount"], data["interest_rate"], data["loan_term_years"]
                )
            )

        depreciation_type = data.get("depreciation_type")
        if depreciation_type:
            member.depreciation_type = depreciation_type
            member.depreciation_years = get_depreciation_years(depreciation_type)
            member.depreciation_start_date = data["purchase_date"]

        db.add(member)
        recalculate_portfolio(db, portfolio)

    logger.info(f"Added property {property_id} to portfolio {portfolio_id}")
    db.refresh(portfolio)
    return portfolio


def _get_member(db: Session, portfolio_id: str, property_id: str) -> PortfolioProperty:
    member = (
        db.query(PortfolioProperty)
        .filter(
            PortfolioProperty.portfolio_id == portfolio_id,
            PortfolioProperty.property_id == property_id,
        )
        .first()
    )
    if not member:
        raise NotFoundError("Property not found in portfolio")
    return member


def update_property(
    db: Session, portfolio_id: str, property_id: str, user_id: str, changes: Dict
) -> InvestmentPortfolio:
    """
    Change a member's value, rent or costs and recalculate.

    A new current value stamps value_date; changed loan terms re-derive the
    monthly payment.
    """
    with portfolio_transaction(db, portfolio_id, user_id) as portfolio:
        member = _get_member(db, portfolio_id, property_id)

        for field, value in changes.items():
            if field in MONEY_FIELDS:
                setattr(member, field, None if value is None else round_money(value))
            elif field in ("interest_rate", "loan_term_years"):
                setattr(member, field, value)

        if "current_value" in changes:
            member.value_date = utcnow()

        if {"loan_amount", "interest_rate", "loan_term_years"} & set(changes):
            if has_loan_terms(member.loan_amount, member.interest_rate, member.loan_term_years):
                member.monthly_payment = round_money(
                    calculate_monthly_payment(
                        member.loan_amount, member.interest_rate, member.loan_term_years
                    )
                )
            else:
                member.monthly_payment = None

        recalculate_portfolio(db, portfolio)

    db.refresh(portfolio)
    return portfolio


def remove_property(db: Session, portfolio_id: str, property_id: str, user_id: str) -> None:
    """Remove a member and recalculate the remaining aggregates."""
    with portfolio_transaction(db, portfolio_id, user_id) as portfolio:
        member = _get_member(db, portfolio_id, property_id)
        db.delete(member)
        recalculate_portfolio(db, portfolio)
    logger.info(f"Removed property {property_id} from portfolio {portfolio_id}")
