"""
Portfolio Aggregation

Rolls member holdings up into portfolio-level value, equity, income and
return figures.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Dict, Optional

from realty_analytics.calculations.money import ZERO, to_decimal, round_money, percent


@dataclass
class Holding:
    """The figures of one portfolio member that feed the aggregates."""

    purchase_price: Decimal
    current_value: Optional[Decimal] = None
    loan_amount: Optional[Decimal] = None
    monthly_rent: Optional[Decimal] = None
    monthly_payment: Optional[Decimal] = None
    down_payment: Optional[Decimal] = None
    closing_costs: Optional[Decimal] = None
    renovation_costs: Optional[Decimal] = None

    @property
    def value(self) -> Decimal:
        """Current value, falling back to the purchase price."""
        if self.current_value is None:
            return to_decimal(self.purchase_price)
        return to_decimal(self.current_value)

    @property
    def equity(self) -> Decimal:
        return self.value - to_decimal(self.loan_amount)

    @property
    def invested(self) -> Decimal:
        return (
            to_decimal(self.down_payment)
            + to_decimal(self.closing_costs)
            + to_decimal(self.renovation_costs)
        )


def summarize_holdings(holdings: Iterable[Holding]) -> Dict[str, Decimal]:
    """
    Aggregate holdings into portfolio metrics.

    Income and expenses are annualized rent and debt service. ROI and
    cash-on-cash are both cash flow over total cash invested, and zero when
    nothing has been invested.
    """
    total_value = ZERO
    total_equity = ZERO
    total_income = ZERO
    total_expenses = ZERO
    total_investment = ZERO

    for holding in holdings:
        total_value += holding.value
        total_equity += holding.equity
        total_income += to_decimal(holding.monthly_rent) * 12
        total_expenses += to_decimal(holding.monthly_payment) * 12
        total_investment += holding.invested

    cash_flow = total_income - total_expenses
    cash_on_cash = percent(cash_flow, total_investment) if total_investment > 0 else ZERO

    return {
        "total_value": round_money(total_value),
        "total_equity": round_money(total_equity),
        "total_income": round_money(total_income),
        "total_expenses": round_money(total_expenses),
        "total_investment": round_money(total_investment),
        "cash_flow": round_money(cash_flow),
        "overall_roi": round_money(cash_on_cash),
        "cash_on_cash": round_money(cash_on_cash),
    }
