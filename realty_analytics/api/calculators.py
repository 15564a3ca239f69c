"""
Investment calculator endpoints.

Stateless: each endpoint validates its inputs and returns the calculator
output directly. No authentication required.
"""

from datetime import date
from decimal import Decimal
from typing import List, Optional

from fastapi import APIRouter
from pydantic import BaseModel, Field

from realty_analytics.calculations import amortization, depreciation, loans, returns
from realty_analytics.calculations.depreciation import FinancialPropertyType

router = APIRouter()


# ---------------------------------------------------------------------------
# ROI
# ---------------------------------------------------------------------------


class ROIInput(BaseModel):
    """Rental purchase; omitted fields use industry-typical defaults."""

    purchase_price: Decimal
    monthly_rent: Decimal = Field(ge=0)
    down_payment: Optional[Decimal] = Field(default=None, ge=0)
    closing_costs: Optional[Decimal] = Field(default=None, ge=0)
    renovation_costs: Optional[Decimal] = Field(default=None, ge=0)
    annual_property_tax: Optional[Decimal] = Field(default=None, ge=0)
    annual_insurance: Optional[Decimal] = Field(default=None, ge=0)
    monthly_hoa: Optional[Decimal] = Field(default=None, ge=0)
    annual_maintenance: Optional[Decimal] = Field(default=None, ge=0)
    vacancy_rate: Optional[Decimal] = Field(default=None, ge=0, le=100)
    management_fee_rate: Optional[Decimal] = Field(default=None, ge=0, le=100)
    interest_rate: Optional[Decimal] = Field(default=None, ge=0)
    loan_term_years: Optional[int] = Field(default=None, ge=1, le=50)


class ROIResponse(BaseModel):
    total_investment: Decimal
    loan_amount: Decimal
    monthly_mortgage: Decimal
    annual_gross_income: Decimal
    annual_operating_expenses: Decimal
    net_operating_income: Decimal
    annual_cash_flow: Decimal
    monthly_cash_flow: Decimal
    cap_rate: Decimal
    cash_on_cash_return: Decimal
    roi: Decimal
    gross_rent_multiplier: Optional[Decimal] = None


@router.post("/roi", response_model=ROIResponse)
async def calculate_roi(inputs: ROIInput):
    """First-year return metrics for a rental purchase."""
    return returns.calculate_roi(**inputs.model_dump())


# ---------------------------------------------------------------------------
# Mortgage
# ---------------------------------------------------------------------------


class MortgageInput(BaseModel):
    principal: Decimal = Field(ge=0)
    interest_rate: Decimal = Field(ge=0)
    loan_term_years: int = Field(ge=1, le=50)
    include_pmi: bool = False
    annual_property_tax: Optional[Decimal] = Field(default=None, ge=0)
    annual_insurance: Optional[Decimal] = Field(default=None, ge=0)


class AmortizationYear(BaseModel):
    year: int
    principal_paid: Decimal
    interest_paid: Decimal
    remaining_balance: Decimal


class MortgageResponse(BaseModel):
    monthly_principal_interest: Decimal
    monthly_pmi: Optional[Decimal] = None
    monthly_property_tax: Optional[Decimal] = None
    monthly_insurance: Optional[Decimal] = None
    total_monthly_payment: Decimal
    total_interest: Decimal
    total_cost: Decimal
    amortization_summary: List[AmortizationYear]


@router.post("/mortgage", response_model=MortgageResponse)
async def calculate_mortgage(inputs: MortgageInput):
    """Monthly payment breakdown with a yearly amortization summary."""
    return amortization.calculate_mortgage(
        principal=inputs.principal,
        annual_rate=inputs.interest_rate,
        term_years=inputs.loan_term_years,
        include_pmi=inputs.include_pmi,
        annual_property_tax=inputs.annual_property_tax,
        annual_insurance=inputs.annual_insurance,
    )


# ---------------------------------------------------------------------------
# Rental yield
# ---------------------------------------------------------------------------


class RentalYieldInput(BaseModel):
    purchase_price: Decimal
    monthly_rent: Decimal = Field(ge=0)
    annual_expenses: Optional[Decimal] = Field(default=None, ge=0)


class RentalYieldResponse(BaseModel):
    gross_yield: Decimal
    net_yield: Decimal
    annual_gross_income: Decimal
    annual_net_income: Decimal


@router.post("/rental-yield", response_model=RentalYieldResponse)
async def calculate_rental_yield(inputs: RentalYieldInput):
    return returns.calculate_rental_yield(
        purchase_price=inputs.purchase_price,
        monthly_rent=inputs.monthly_rent,
        annual_expenses=inputs.annual_expenses,
    )


# ---------------------------------------------------------------------------
# Depreciation
# ---------------------------------------------------------------------------


class DepreciationInput(BaseModel):
    purchase_price: Decimal = Field(gt=0)
    property_type: FinancialPropertyType
    land_value: Optional[Decimal] = Field(default=None, ge=0)
    improvement_costs: Optional[Decimal] = Field(default=None, ge=0)
    start_date: Optional[date] = None


class DepreciationYear(BaseModel):
    year: int
    depreciation: Decimal
    accumulated_depreciation: Decimal
    remaining_basis: Decimal


class DepreciationResponse(BaseModel):
    depreciable_basis: Decimal
    depreciation_years: int
    annual_depreciation: Decimal
    monthly_depreciation: Decimal
    start_date: date
    schedule: List[DepreciationYear]


@router.post("/depreciation", response_model=DepreciationResponse)
async def calculate_depreciation(inputs: DepreciationInput):
    """Straight-line depreciation with a five-year preview schedule."""
    return depreciation.calculate_depreciation(
        purchase_price=inputs.purchase_price,
        property_type=inputs.property_type,
        land_value=inputs.land_value,
        improvement_costs=inputs.improvement_costs,
        start_date=inputs.start_date,
    )


# ---------------------------------------------------------------------------
# Loan comparison
# ---------------------------------------------------------------------------


class LoanOptionInput(BaseModel):
    lender_name: str
    loan_amount: Decimal
    interest_rate: Decimal = Field(ge=0)
    loan_term_years: int
    origination_fee: Decimal = Field(default=Decimal("0"), ge=0)
    closing_costs: Decimal = Field(default=Decimal("0"), ge=0)
    points: Decimal = Field(default=Decimal("0"), ge=0)


class LoanComparisonInput(BaseModel):
    loans: List[LoanOptionInput]


class LoanComparisonResult(BaseModel):
    lender_name: str
    monthly_payment: Decimal
    total_interest: Decimal
    upfront_costs: Decimal
    total_cost: Decimal
    effective_rate: Decimal
    rank: int
    break_even_months: Optional[int] = None


class LoanComparisonResponse(BaseModel):
    comparisons: List[LoanComparisonResult]
    best_option: str


@router.post("/loan-comparison", response_model=LoanComparisonResponse)
async def compare_loans(inputs: LoanComparisonInput):
    """Rank loan offers by total cost of borrowing."""
    results = loans.compare_loans(
        [loans.LoanOption(**loan.model_dump()) for loan in inputs.loans]
    )
    return {"comparisons": results, "best_option": results[0]["lender_name"]}


# ---------------------------------------------------------------------------
# Affordability
# ---------------------------------------------------------------------------


class AffordabilityInput(BaseModel):
    monthly_income: Decimal = Field(ge=0)
    monthly_debt: Decimal = Field(default=Decimal("0"), ge=0)
    down_payment: Decimal = Field(default=Decimal("0"), ge=0)
    interest_rate: Decimal = Field(ge=0)
    loan_term_years: int = Field(default=30, ge=1, le=50)
    max_dti_ratio: Optional[Decimal] = Field(default=None, gt=0, le=1)


class AffordabilityResponse(BaseModel):
    max_property_price: Decimal
    max_monthly_payment: Decimal
    max_loan_amount: Decimal
    down_payment: Decimal
    dti_ratio: Decimal
    monthly_income: Decimal
    monthly_debt: Decimal


@router.post("/affordability", response_model=AffordabilityResponse)
async def calculate_affordability(inputs: AffordabilityInput):
    return amortization.calculate_affordability(
        monthly_income=inputs.monthly_income,
        monthly_debt=inputs.monthly_debt,
        down_payment=inputs.down_payment,
        annual_rate=inputs.interest_rate,
        term_years=inputs.loan_term_years,
        max_dti_ratio=inputs.max_dti_ratio,
    )
