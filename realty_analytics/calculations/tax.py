"""
Tax Report Calculations

Maps expense-ledger categories onto Schedule E style deduction buckets.
"""

import enum
from decimal import Decimal
from typing import Iterable, Dict, Tuple

from realty_analytics.calculations.money import Number, ZERO, to_decimal


class ExpenseCategory(str, enum.Enum):
    """Landlord expense-ledger categories."""

    MAINTENANCE = "MAINTENANCE"
    INSURANCE = "INSURANCE"
    TAXES = "TAXES"
    UTILITIES = "UTILITIES"
    MORTGAGE = "MORTGAGE"
    MANAGEMENT_FEES = "MANAGEMENT_FEES"
    LEGAL = "LEGAL"
    ADVERTISING = "ADVERTISING"
    SUPPLIES = "SUPPLIES"
    TRAVEL = "TRAVEL"
    OTHER = "OTHER"


TAX_BUCKETS = (
    "mortgage_interest",
    "property_taxes",
    "insurance",
    "repairs",
    "maintenance",
    "utilities",
    "management",
    "professional",
    "other_expenses",
)

OTHER_BUCKET = "other_expenses"
HALF = Decimal("0.5")

# Category -> ((bucket, share), ...). Unlisted categories land in OTHER_BUCKET.
EXPENSE_BUCKET_MAP = {
    ExpenseCategory.MORTGAGE: (("mortgage_interest", Decimal("1")),),
    ExpenseCategory.TAXES: (("property_taxes", Decimal("1")),),
    ExpenseCategory.INSURANCE: (("insurance", Decimal("1")),),
    ExpenseCategory.MAINTENANCE: (("repairs", HALF), ("maintenance", HALF)),
    ExpenseCategory.UTILITIES: (("utilities", Decimal("1")),),
    ExpenseCategory.MANAGEMENT_FEES: (("management", Decimal("1")),),
    ExpenseCategory.LEGAL: (("professional", Decimal("1")),),
}


def bucket_shares(category) -> Tuple[Tuple[str, Decimal], ...]:
    """Bucket split for a single category."""
    try:
        key = ExpenseCategory(category)
    except ValueError:
        return ((OTHER_BUCKET, Decimal("1")),)
    return EXPENSE_BUCKET_MAP.get(key, ((OTHER_BUCKET, Decimal("1")),))


def bucket_expenses(entries: Iterable[Tuple[str, Number]]) -> Dict[str, Decimal]:
    """
    Sum (category, amount) pairs into the tax buckets.

    Every bucket is present in the result, zero when nothing maps to it.
    """
    totals = {bucket: ZERO for bucket in TAX_BUCKETS}
    for category, amount in entries:
        amount = to_decimal(amount)
        for bucket, share in bucket_shares(category):
            totals[bucket] += amount * share
    return totals
