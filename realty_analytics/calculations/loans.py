"""
Loan Comparison

Ranks competing loan offers by total cost of borrowing and works out how
long a lower monthly payment takes to recover higher upfront costs.
"""

import math
from dataclasses import dataclass
from decimal import Decimal
from typing import List, Dict, Optional

from realty_analytics.calculations.amortization import calculate_monthly_payment
from realty_analytics.calculations.money import HUNDRED, to_decimal, round_money
from realty_analytics.exceptions import ValidationError


@dataclass
class LoanOption:
    """A single loan offer."""

    lender_name: str
    loan_amount: Decimal
    interest_rate: Decimal  # annual percent
    loan_term_years: int
    origination_fee: Decimal = Decimal("0")
    closing_costs: Decimal = Decimal("0")
    points: Decimal = Decimal("0")  # percent of loan amount

    @property
    def upfront_costs(self) -> Decimal:
        return (
            to_decimal(self.origination_fee)
            + to_decimal(self.closing_costs)
            + to_decimal(self.points) * to_decimal(self.loan_amount) / HUNDRED
        )


def _evaluate(loan: LoanOption) -> Dict:
    amount = to_decimal(loan.loan_amount)
    term = int(loan.loan_term_years)

    if amount <= 0:
        raise ValidationError(f"Loan amount for {loan.lender_name} must be greater than 0")
    if term <= 0:
        raise ValidationError(f"Loan term for {loan.lender_name} must be at least 1 year")

    monthly = calculate_monthly_payment(amount, loan.interest_rate, term)
    total_payments = monthly * term * 12
    total_interest = total_payments - amount
    upfront = loan.upfront_costs

    return {
        "lender_name": loan.lender_name,
        "monthly_payment": monthly,
        "total_interest": total_interest,
        "upfront_costs": upfront,
        "total_cost": total_payments + upfront,
        # APR approximation
        "effective_rate": (total_interest + upfront) / amount / term * HUNDRED,
    }


def break_even_months(cheapest: Dict, option: Dict) -> Optional[int]:
    """
    Months until an option's lower payment offsets its extra upfront cost.

    None when the option's monthly payment is not lower than the cheapest
    option's, since the two cost curves never cross.
    """
    monthly_diff = cheapest["monthly_payment"] - option["monthly_payment"]
    if monthly_diff <= 0:
        return None
    upfront_diff = option["upfront_costs"] - cheapest["upfront_costs"]
    return math.ceil(upfront_diff / monthly_diff)


def compare_loans(loans: List[LoanOption]) -> List[Dict]:
    """
    Evaluate and rank loan offers.

    Results are sorted ascending by total cost (payments plus upfront costs)
    and ranked 1..N. Every option after the cheapest gets break_even_months
    when its monthly payment undercuts the cheapest option's.

    Raises:
        ValidationError: if no loans are given or a loan has no amount/term
    """
    if not loans:
        raise ValidationError("At least one loan option is required")

    results = sorted((_evaluate(loan) for loan in loans), key=lambda r: r["total_cost"])

    cheapest = results[0]
    output = []
    for rank, result in enumerate(results, start=1):
        output.append(
            {
                "lender_name": result["lender_name"],
                "monthly_payment": round_money(result["monthly_payment"]),
                "total_interest": round_money(result["total_interest"]),
                "upfront_costs": round_money(result["upfront_costs"]),
                "total_cost": round_money(result["total_cost"]),
                "effective_rate": round_money(result["effective_rate"]),
                "rank": rank,
                "break_even_months": (
                    break_even_months(cheapest, result) if rank > 1 else None
                ),
            }
        )

    return output
