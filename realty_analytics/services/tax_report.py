"""
Yearly rental tax report generation.

Reports are unique per (user, tax year). Generating an existing report
returns it unchanged even if the ledgers have moved on since; callers that
want fresh figures use regenerate_tax_report explicitly.
"""

import logging
from collections import defaultdict
from datetime import date, datetime
from decimal import Decimal
from typing import Dict, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from realty_analytics.calculations.depreciation import straight_line_depreciation
from realty_analytics.calculations.money import ZERO, to_decimal, round_money, money_str
from realty_analytics.calculations.tax import TAX_BUCKETS, bucket_expenses
from realty_analytics.db.database import atomic
from realty_analytics.db.models import (
    Expense,
    InvestmentPortfolio,
    Lease,
    PortfolioProperty,
    RentPayment,
    RentPaymentStatus,
    TaxReport,
    TaxReportStatus,
)
from realty_analytics.exceptions import NotFoundError

logger = logging.getLogger(__name__)


def tax_year_bounds(tax_year: int):
    """Inclusive first/last day and the exclusive upper instant of a tax year."""
    return date(tax_year, 1, 1), date(tax_year, 12, 31), datetime(tax_year + 1, 1, 1)


def _member_depreciation(member: PortfolioProperty) -> Decimal:
    if not (member.depreciation_type and member.depreciation_years):
        return ZERO
    basis = to_decimal(member.purchase_price) - to_decimal(member.land_value)
    return straight_line_depreciation(basis, member.depreciation_years)


def compile_tax_figures(db: Session, user_id: str, tax_year: int) -> Dict:
    """
    Gather a user's rental income, bucketed expenses and depreciation for a year.

    Income is PAID rent collected within the year on the user's leases;
    depreciation covers portfolio properties bought by year end that declare
    depreciation parameters.
    """
    start, end, upper = tax_year_bounds(tax_year)
    year_start = datetime(tax_year, 1, 1)

    members = (
        db.query(PortfolioProperty)
        .join(InvestmentPortfolio)
        .filter(
            InvestmentPortfolio.user_id == user_id,
            PortfolioProperty.purchase_date <= end,
        )
        .all()
    )

    payments = (
        db.query(RentPayment, Lease.property_id)
        .join(Lease)
        .filter(
            Lease.landlord_id == user_id,
            RentPayment.status == RentPaymentStatus.PAID.value,
            RentPayment.paid_at >= year_start,
            RentPayment.paid_at < upper,
        )
        .all()
    )

    expenses = (
        db.query(Expense)
        .filter(
            Expense.landlord_id == user_id,
            Expense.expense_date >= year_start,
            Expense.expense_date < upper,
        )
        .all()
    )

    income_by_property: Dict[str, Decimal] = defaultdict(lambda: ZERO)
    rental_income = ZERO
    for payment, property_id in payments:
        amount = to_decimal(
            payment.paid_amount if payment.paid_amount is not None else payment.amount
        )
        rental_income += amount
        income_by_property[property_id] += amount

    expenses_by_property: Dict[str, Decimal] = defaultdict(lambda: ZERO)
    for expense in expenses:
        if expense.property_id:
            expenses_by_property[expense.property_id] += to_decimal(expense.amount)

    buckets = bucket_expenses((e.category, e.amount) for e in expenses)

    depreciation = ZERO
    property_details: List[Dict] = []
    seen = set()
    for member in members:
        member_depreciation = _member_depreciation(member)
        depreciation += member_depreciation

        # A property held in two portfolios is reported once
        if member.property_id in seen:
            continue
        seen.add(member.property_id)

        income = income_by_property[member.property_id]
        costs = expenses_by_property[member.property_id]
        property_details.append(
            {
                "property_id": member.property_id,
                "address": (member.property.address if member.property else None)
                or "Unknown",
                "income": money_str(income),
                "expenses": money_str(costs),
                "depreciation": money_str(member_depreciation),
                "net_income": money_str(income - costs - member_depreciation),
            }
        )

    total_expenses = sum(buckets.values(), ZERO) + depreciation

    figures = {bucket: round_money(buckets[bucket]) for bucket in TAX_BUCKETS}
    figures.update(
        {
            "start_date": start,
            "end_date": end,
            "rental_income": round_money(rental_income),
            "other_income": round_money(ZERO),
            "total_income": round_money(rental_income),
            "depreciation": round_money(depreciation),
            "total_expenses": round_money(total_expenses),
            "net_income": round_money(rental_income - total_expenses),
            "property_details": property_details,
        }
    )
    return figures


def find_tax_report(db: Session, user_id: str, tax_year: int) -> Optional[TaxReport]:
    return (
        db.query(TaxReport)
        .filter(TaxReport.user_id == user_id, TaxReport.tax_year == tax_year)
        .first()
    )


def generate_tax_report(db: Session, user_id: str, tax_year: int) -> TaxReport:
    """
    Return the user's report for a tax year, creating it on first request.

    An existing report is returned as stored. A concurrent request that
    loses the insert race gets the winner's report.
    """
    report = find_tax_report(db, user_id, tax_year)
    if report:
        logger.debug(f"Returning existing {tax_year} tax report for user {user_id}")
        return report

    figures = compile_tax_figures(db, user_id, tax_year)
    try:
        with atomic(db):
            report = TaxReport(
                user_id=user_id,
                tax_year=tax_year,
                status=TaxReportStatus.DRAFT.value,
                **figures,
            )
            db.add(report)
    except IntegrityError:
        logger.info(f"Tax report {tax_year} for user {user_id} created concurrently")
        report = find_tax_report(db, user_id, tax_year)
        if report is None:
            raise
        return report

    db.refresh(report)
    logger.info(
        f"Generated {tax_year} tax report {report.id} for user {user_id}: "
        f"net income {report.net_income}"
    )
    return report


def regenerate_tax_report(db: Session, user_id: str, tax_year: int) -> TaxReport:
    """
    Rebuild an existing report from the current ledgers.

    Keeps the report id and resets its status to DRAFT.

    Raises:
        NotFoundError: if no report exists for that year
    """
    with atomic(db):
        report = (
            db.query(TaxReport)
            .filter(TaxReport.user_id == user_id, TaxReport.tax_year == tax_year)
            .with_for_update()
            .first()
        )
        if not report:
            raise NotFoundError(f"No tax report for {tax_year}")

        for field, value in compile_tax_figures(db, user_id, tax_year).items():
            setattr(report, field, value)
        report.status = TaxReportStatus.DRAFT.value

    db.refresh(report)
    logger.info(f"Regenerated {tax_year} tax report {report.id} for user {user_id}")
    return report


def list_tax_reports(db: Session, user_id: str) -> List[TaxReport]:
    """A user's reports, newest tax year first."""
    return (
        db.query(TaxReport)
        .filter(TaxReport.user_id == user_id)
        .order_by(TaxReport.tax_year.desc())
        .all()
    )
