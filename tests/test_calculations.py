"""
Tests for the financial calculation engine.
"""

import pytest
from datetime import date
from decimal import Decimal

from realty_analytics.calculations.amortization import (
    calculate_monthly_payment,
    generate_amortization_summary,
    calculate_mortgage,
    calculate_affordability,
)
from realty_analytics.calculations.cashflow import (
    calculate_escalation_factor,
    generate_monthly_dates,
    project_cash_flows,
)
from realty_analytics.calculations.depreciation import (
    FinancialPropertyType,
    calculate_depreciation,
    get_depreciation_years,
)
from realty_analytics.calculations.loans import LoanOption, compare_loans
from realty_analytics.calculations.money import round_money, to_decimal
from realty_analytics.calculations.portfolio import Holding, summarize_holdings
from realty_analytics.calculations.returns import calculate_roi, calculate_rental_yield
from realty_analytics.calculations.tax import bucket_expenses, bucket_shares, TAX_BUCKETS
from realty_analytics.exceptions import ValidationError


class TestMoney:
    """Test Decimal helpers."""

    def test_float_input_has_no_binary_artefacts(self):
        assert to_decimal(0.1) == Decimal("0.1")

    def test_none_is_zero(self):
        assert to_decimal(None) == Decimal("0")

    def test_round_half_up(self):
        assert round_money(Decimal("5.095")) == Decimal("5.10")
        assert round_money(Decimal("-5.095")) == Decimal("-5.10")


class TestMortgage:
    """Test payment and amortization calculations."""

    def test_monthly_payment_worked_example(self):
        """$300k at 6% over 30 years."""
        payment = calculate_monthly_payment(300000, 6, 30)
        assert round_money(payment) == Decimal("1798.65")

    def test_zero_rate_is_straight_line(self):
        payment = calculate_monthly_payment(120000, 0, 10)
        assert payment == Decimal("1000")

    def test_non_positive_principal_returns_zero(self):
        assert calculate_monthly_payment(0, 6, 30) == 0
        assert calculate_monthly_payment(-5000, 6, 30) == 0

    @pytest.mark.parametrize(
        "principal,rate,years",
        [(300000, 6, 30), (185000, Decimal("4.25"), 15), (50000, 0, 5), (999.99, 12, 1)],
    )
    def test_amortization_conserves_principal(self, principal, rate, years):
        """Principal paid over the schedule adds back up to the loan amount."""
        summary = generate_amortization_summary(principal, rate, years)

        total_principal = sum(row["principal_paid"] for row in summary)
        assert abs(total_principal - to_decimal(principal)) <= Decimal("0.01") * len(summary)
        assert summary[-1]["remaining_balance"] == Decimal("0.00")
        assert len(summary) == years

    def test_remaining_balance_never_increases(self):
        summary = generate_amortization_summary(250000, 7, 30)
        balances = [row["remaining_balance"] for row in summary]
        assert balances == sorted(balances, reverse=True)

    def test_empty_summary_without_principal(self):
        assert generate_amortization_summary(0, 6, 30) == []

    def test_mortgage_breakdown_with_pmi_tax_and_insurance(self):
        result = calculate_mortgage(
            principal=300000,
            annual_rate=6,
            term_years=30,
            include_pmi=True,
            annual_property_tax=3600,
            annual_insurance=1200,
        )
        assert result["monthly_principal_interest"] == Decimal("1798.65")
        assert result["monthly_pmi"] == Decimal("125.00")
        assert result["monthly_property_tax"] == Decimal("300.00")
        assert result["monthly_insurance"] == Decimal("100.00")
        assert result["total_monthly_payment"] == Decimal("2323.65")
        assert result["total_cost"] - result["total_interest"] == Decimal("300000.00")
        assert len(result["amortization_summary"]) == 30

    def test_optional_charges_omitted_by_default(self):
        result = calculate_mortgage(principal=300000, annual_rate=6, term_years=30)
        assert result["monthly_pmi"] is None
        assert result["monthly_property_tax"] is None
        assert result["monthly_insurance"] is None
        assert result["total_monthly_payment"] == result["monthly_principal_interest"]


class TestAffordability:
    """Test maximum purchase price estimation."""

    def test_zero_rate_affordability(self):
        result = calculate_affordability(
            monthly_income=10000,
            monthly_debt=500,
            down_payment=50000,
            annual_rate=0,
            term_years=30,
        )
        assert result["max_monthly_payment"] == Decimal("3800.00")
        assert result["max_loan_amount"] == Decimal("1368000.00")
        assert result["max_property_price"] == Decimal("1418000.00")

    def test_max_loan_inverts_payment_formula(self):
        result = calculate_affordability(
            monthly_income=8000, monthly_debt=0, down_payment=0, annual_rate=6, term_years=30
        )
        payment = calculate_monthly_payment(result["max_loan_amount"], 6, 30)
        assert abs(payment - result["max_monthly_payment"]) < Decimal("0.01")

    def test_debt_above_budget_floors_at_zero(self):
        result = calculate_affordability(
            monthly_income=3000, monthly_debt=2000, down_payment=20000, annual_rate=6, term_years=30
        )
        assert result["max_monthly_payment"] == Decimal("0.00")
        assert result["max_property_price"] == Decimal("20000.00")


class TestROI:
    """Test rental purchase return metrics."""

    def test_worked_example_with_defaults(self):
        """$200k purchase at $1,500/month rent, everything else defaulted."""
        result = calculate_roi(purchase_price=200000, monthly_rent=1500)

        assert result["loan_amount"] == Decimal("160000.00")
        assert result["total_investment"] == Decimal("46000.00")
        assert result["monthly_mortgage"] == Decimal("1064.48")
        assert result["annual_gross_income"] == Decimal("17100.00")
        assert result["net_operating_income"] == Decimal("10190.00")
        assert Decimal("-2584.5") < result["annual_cash_flow"] < Decimal("-2583")
        assert result["cap_rate"] == Decimal("5.10")
        assert result["cash_on_cash_return"] == Decimal("-5.62")
        assert result["roi"] == result["cash_on_cash_return"]
        assert result["gross_rent_multiplier"] == Decimal("11.11")

    def test_overrides_replace_defaults(self):
        result = calculate_roi(
            purchase_price=200000,
            monthly_rent=1500,
            down_payment=200000,
            closing_costs=0,
            annual_property_tax=0,
            annual_insurance=0,
            annual_maintenance=0,
            vacancy_rate=0,
            management_fee_rate=0,
        )
        assert result["loan_amount"] == Decimal("0.00")
        assert result["monthly_mortgage"] == Decimal("0.00")
        assert result["net_operating_income"] == Decimal("18000.00")
        assert result["cash_on_cash_return"] == Decimal("9.00")

    def test_zero_rent_has_no_rent_multiplier(self):
        result = calculate_roi(purchase_price=200000, monthly_rent=0)
        assert result["gross_rent_multiplier"] is None

    def test_rejects_non_positive_price(self):
        with pytest.raises(ValidationError):
            calculate_roi(purchase_price=0, monthly_rent=1500)


class TestRentalYield:
    """Test gross and net yield."""

    def test_gross_and_net_yield(self):
        result = calculate_rental_yield(200000, 1500, annual_expenses=6000)
        assert result["gross_yield"] == Decimal("9.00")
        assert result["net_yield"] == Decimal("6.00")
        assert result["annual_gross_income"] == Decimal("18000.00")
        assert result["annual_net_income"] == Decimal("12000.00")

    def test_net_equals_gross_without_expenses(self):
        result = calculate_rental_yield(300000, 2000)
        assert result["net_yield"] == result["gross_yield"]

    def test_rejects_non_positive_price(self):
        with pytest.raises(ValidationError):
            calculate_rental_yield(0, 1500)


class TestDepreciation:
    """Test straight-line depreciation."""

    def test_worked_example_residential(self):
        result = calculate_depreciation(275000, FinancialPropertyType.RESIDENTIAL_SINGLE)
        assert result["depreciable_basis"] == Decimal("220000.00")
        assert result["depreciation_years"] == 27
        assert result["annual_depreciation"] == Decimal("8148.15")
        assert result["monthly_depreciation"] == Decimal("679.01")

    def test_five_year_preview_schedule(self):
        result = calculate_depreciation(275000, "RESIDENTIAL_SINGLE")
        schedule = result["schedule"]
        assert [row["year"] for row in schedule] == [1, 2, 3, 4, 5]
        assert schedule[-1]["accumulated_depreciation"] == Decimal("40740.74")
        assert schedule[-1]["remaining_basis"] == Decimal("179259.26")

    def test_land_and_improvements(self):
        result = calculate_depreciation(
            500000,
            FinancialPropertyType.COMMERCIAL,
            land_value=110000,
            improvement_costs=0,
        )
        assert result["depreciation_years"] == 39
        assert result["depreciable_basis"] == Decimal("390000.00")
        assert result["annual_depreciation"] == Decimal("10000.00")

        improved = calculate_depreciation(
            500000, FinancialPropertyType.COMMERCIAL, land_value=110000, improvement_costs=39000
        )
        assert improved["annual_depreciation"] == Decimal("11000.00")

    @pytest.mark.parametrize(
        "property_type,years",
        [
            ("RESIDENTIAL_SINGLE", 27),
            ("RESIDENTIAL_MULTI", 27),
            ("COMMERCIAL", 39),
            ("INDUSTRIAL", 39),
            ("MIXED_USE", 39),
        ],
    )
    def test_recovery_periods(self, property_type, years):
        assert get_depreciation_years(property_type) == years

    def test_unknown_type_uses_residential_period(self):
        assert get_depreciation_years("FARMLAND") == 27
        assert calculate_depreciation(275000, "FARMLAND")["annual_depreciation"] == Decimal("8148.15")

    def test_start_date_is_echoed(self):
        result = calculate_depreciation(
            275000, "RESIDENTIAL_MULTI", start_date=date(2024, 7, 1)
        )
        assert result["start_date"] == date(2024, 7, 1)


class TestLoanComparison:
    """Test ranking of loan offers."""

    def test_ranked_by_total_cost(self):
        results = compare_loans(
            [
                LoanOption("Bank A", Decimal("200000"), Decimal("6"), 30),
                LoanOption(
                    "Bank B",
                    Decimal("200000"),
                    Decimal("5.75"),
                    30,
                    origination_fee=Decimal("1000"),
                    points=Decimal("1"),
                ),
                LoanOption(
                    "Bank C",
                    Decimal("200000"),
                    Decimal("6.5"),
                    30,
                    origination_fee=Decimal("1500"),
                ),
            ]
        )

        assert [r["lender_name"] for r in results] == ["Bank B", "Bank A", "Bank C"]
        assert [r["rank"] for r in results] == [1, 2, 3]
        totals = [r["total_cost"] for r in results]
        assert totals == sorted(totals)
        assert results[0]["upfront_costs"] == Decimal("3000.00")

    def test_higher_upfront_and_payment_never_outranks(self):
        results = compare_loans(
            [
                LoanOption("Pricey", Decimal("150000"), Decimal("7"), 30, closing_costs=Decimal("5000")),
                LoanOption("Cheap", Decimal("150000"), Decimal("6"), 30, closing_costs=Decimal("1000")),
            ]
        )
        assert results[0]["lender_name"] == "Cheap"
        assert results[1]["break_even_months"] is None

    def test_break_even_for_lower_payment_option(self):
        """A 30-year loan with fees against a cheaper-overall 15-year loan."""
        results = compare_loans(
            [
                LoanOption("Thirty", Decimal("200000"), Decimal("5.5"), 30, origination_fee=Decimal("2000")),
                LoanOption("Fifteen", Decimal("200000"), Decimal("6"), 15),
            ]
        )
        assert results[0]["lender_name"] == "Fifteen"
        assert results[0]["break_even_months"] is None
        assert results[1]["monthly_payment"] < results[0]["monthly_payment"]
        assert results[1]["break_even_months"] == 4

    def test_effective_rate(self):
        results = compare_loans([LoanOption("Only", Decimal("100000"), Decimal("0"), 10, closing_costs=Decimal("1000"))])
        assert results[0]["total_interest"] == Decimal("0.00")
        assert results[0]["effective_rate"] == Decimal("0.10")

    def test_empty_list_rejected(self):
        with pytest.raises(ValidationError):
            compare_loans([])

    def test_zero_amount_rejected(self):
        with pytest.raises(ValidationError):
            compare_loans([LoanOption("Nothing", Decimal("0"), Decimal("5"), 30)])


class TestCashFlowProjection:
    """Test month-by-month projections."""

    def test_monthly_dates(self):
        dates = generate_monthly_dates(date(2025, 1, 31), 3)
        assert dates == [date(2025, 1, 1), date(2025, 2, 1), date(2025, 3, 1)]

    def test_escalation_factor(self):
        assert calculate_escalation_factor(3, 0) == Decimal("1")
        assert calculate_escalation_factor(10, 2) == Decimal("1.21")

    def test_growth_steps_at_calendar_year_boundary(self):
        result = project_cash_flows(
            monthly_rent=1000,
            monthly_expenses=200,
            projection_months=4,
            vacancy_rate=0,
            rent_growth_rate=10,
            expense_growth_rate=0,
            start_date=date(2025, 11, 15),
        )
        months = result["projections"]

        assert [m["month_name"] for m in months] == [
            "November", "December", "January", "February",
        ]
        assert [m["year"] for m in months] == [2025, 2025, 2026, 2026]
        assert [m["income"] for m in months] == [
            Decimal("1000.00"), Decimal("1000.00"), Decimal("1100.00"), Decimal("1100.00"),
        ]
        assert [m["net_cash_flow"] for m in months] == [
            Decimal("800.00"), Decimal("800.00"), Decimal("900.00"), Decimal("900.00"),
        ]
        assert months[-1]["cumulative_cash_flow"] == Decimal("3400.00")
        assert result["total_projected_income"] == Decimal("4200.00")
        assert result["total_projected_expenses"] == Decimal("800.00")
        assert result["total_projected_cash_flow"] == Decimal("3400.00")
        assert result["average_monthly_cash_flow"] == Decimal("850.00")

    def test_no_growth_within_first_calendar_year(self):
        result = project_cash_flows(
            monthly_rent=2000,
            monthly_expenses=500,
            projection_months=12,
            start_date=date(2025, 1, 1),
        )
        incomes = {m["income"] for m in result["projections"]}
        # Default 5% vacancy, no step-up until January 2026
        assert incomes == {Decimal("1900.00")}

    def test_expenses_compound_yearly(self):
        result = project_cash_flows(
            monthly_rent=0,
            monthly_expenses=100,
            projection_months=25,
            expense_growth_rate=10,
            start_date=date(2025, 1, 1),
        )
        assert result["projections"][0]["expenses"] == Decimal("100.00")
        assert result["projections"][12]["expenses"] == Decimal("110.00")
        assert result["projections"][24]["expenses"] == Decimal("121.00")

    @pytest.mark.parametrize("field", ["rent_growth_rate", "expense_growth_rate"])
    def test_growth_rate_must_exceed_total_loss(self, field):
        with pytest.raises(ValidationError):
            project_cash_flows(
                monthly_rent=1000,
                monthly_expenses=200,
                start_date=date(2025, 1, 1),
                **{field: -100},
            )


class TestTaxBuckets:
    """Test expense category to tax bucket mapping."""

    def test_maintenance_split_evenly(self):
        shares = dict(bucket_shares("MAINTENANCE"))
        assert shares == {"repairs": Decimal("0.5"), "maintenance": Decimal("0.5")}

    def test_unknown_category_is_other(self):
        assert bucket_shares("CRYPTO") == (("other_expenses", Decimal("1")),)

    def test_bucket_totals(self):
        totals = bucket_expenses(
            [
                ("MAINTENANCE", Decimal("1000")),
                ("TAXES", Decimal("3000")),
                ("LEGAL", Decimal("500")),
                ("ADVERTISING", Decimal("200")),
                ("SOMETHING_NEW", Decimal("100")),
            ]
        )
        assert set(totals) == set(TAX_BUCKETS)
        assert totals["repairs"] == Decimal("500")
        assert totals["maintenance"] == Decimal("500")
        assert totals["property_taxes"] == Decimal("3000")
        assert totals["professional"] == Decimal("500")
        assert totals["other_expenses"] == Decimal("300")
        assert totals["mortgage_interest"] == Decimal("0")


class TestPortfolioAggregation:
    """Test portfolio roll-up."""

    def test_summarize_holdings(self):
        metrics = summarize_holdings(
            [
                Holding(
                    purchase_price=Decimal("200000"),
                    current_value=Decimal("220000"),
                    loan_amount=Decimal("160000"),
                    monthly_rent=Decimal("1500"),
                    monthly_payment=Decimal("1000"),
                    down_payment=Decimal("40000"),
                    closing_costs=Decimal("6000"),
                ),
                Holding(
                    purchase_price=Decimal("100000"),
                    monthly_rent=Decimal("900"),
                    down_payment=Decimal("100000"),
                ),
            ]
        )
        assert metrics["total_value"] == Decimal("320000.00")
        assert metrics["total_equity"] == Decimal("160000.00")
        assert metrics["total_income"] == Decimal("28800.00")
        assert metrics["total_expenses"] == Decimal("12000.00")
        assert metrics["total_investment"] == Decimal("146000.00")
        assert metrics["cash_flow"] == Decimal("16800.00")
        assert metrics["cash_on_cash"] == Decimal("11.51")
        assert metrics["overall_roi"] == metrics["cash_on_cash"]

    def test_no_investment_means_zero_returns(self):
        metrics = summarize_holdings(
            [Holding(purchase_price=Decimal("100000"), monthly_rent=Decimal("800"))]
        )
        assert metrics["cash_flow"] == Decimal("9600.00")
        assert metrics["overall_roi"] == Decimal("0.00")
        assert metrics["cash_on_cash"] == Decimal("0.00")

    def test_empty_portfolio(self):
        metrics = summarize_holdings([])
        assert all(value == Decimal("0") for value in metrics.values())
