"""Unit tests for the monthly summary"""

from datetime import date
from decimal import Decimal

import pytest

from economy_calc.data_models import EconomyData, Income, Loan
from economy_calc.engine import compute_amortization
from economy_calc.summary import monthly_price_growth, summarize_month
from economy_calc.taxes import calculate_economy_taxes

EPSILON = Decimal("0.000001")


def test_income_and_tax(plan_economy, cache):
    summary = summarize_month(plan_economy, cache=cache)
    taxes = calculate_economy_taxes(plan_economy, cache=cache)

    assert summary.gross_monthly_income == Decimal("50000")
    assert summary.monthly_tax == taxes.total_taxes / 12
    assert summary.net_monthly_income == summary.gross_monthly_income - summary.monthly_tax


def test_expense_groups(plan_economy, cache):
    summary = summarize_month(plan_economy, cache=cache)

    assert summary.housing_fixed == Decimal("3200")
    assert summary.personal_fixed == Decimal("1100")
    assert summary.living_costs == Decimal("5500")
    assert summary.total_expenses == Decimal("9800") + summary.loan_totals.total
    assert summary.balance == summary.net_monthly_income - summary.total_expenses


def test_loans_use_first_payment(plan_economy, cache):
    summary = summarize_month(plan_economy, cache=cache)
    condo = plan_economy.active_house().housing_loan
    first = compute_amortization(condo).rows[0]

    assert [b.description for b in summary.loans] == ["Student loan", "Condo loan"]
    condo_row = summary.loans[1]
    assert abs(condo_row.interest - first.interest) < EPSILON
    assert abs(condo_row.principal - first.principal) < EPSILON
    assert condo_row.fee == Decimal("15")
    assert summary.loan_totals.fee == Decimal("15")


def test_equity_highlight(plan_economy, cache):
    summary = summarize_month(plan_economy, Decimal("2"), cache=cache)
    highlight = summary.equity_highlight
    condo_row = summary.loans[1]

    # 480 000 (loan 400 000 plus 80 000 equity) growing 2 % a year
    assert Decimal("792") < highlight.price_growth < Decimal("793")
    assert highlight.principal == condo_row.principal
    assert highlight.combined == highlight.principal + highlight.price_growth


def test_monthly_price_growth_zero(plan_economy):
    loan = plan_economy.active_house().as_housing_loan()

    assert monthly_price_growth(loan, Decimal("0")) == 0


def test_no_house_no_highlight(cache):
    economy = EconomyData(incomes=[Income("Salary", Decimal("360000"))])
    summary = summarize_month(economy, cache=cache)

    assert summary.equity_highlight is None
    assert summary.loans == []
    assert summary.total_expenses == 0
    assert summary.gross_monthly_income == Decimal("30000")


@pytest.mark.parametrize("terms_per_year", [12, 4, 1])
def test_loan_cost_is_converted_to_monthly(cache, terms_per_year):
    """120 000 interest-free over 10 years costs 1 000 a month however it is paid"""
    loan = Loan(
        description="Family loan",
        loan_amount=Decimal("120000"),
        interest_rate=Decimal("0"),
        term_years=10,
        terms_per_year=terms_per_year,
        start_date=date(2024, 1, 1),
    )
    summary = summarize_month(EconomyData(incomes=[Income("Salary", Decimal("360000"))], loans=[loan]), cache=cache)

    assert summary.loan_totals.principal == Decimal("1000")
    assert summary.loan_totals.total == Decimal("1000")
    assert summary.total_expenses == Decimal("1000")


def test_quarterly_interest_is_spread_over_three_months(cache):
    loan = Loan(
        description="Quarterly",
        loan_amount=Decimal("100000"),
        interest_rate=Decimal("8"),
        term_years=5,
        terms_per_year=4,
        monthly_fee=Decimal("50"),
        start_date=date(2024, 1, 1),
    )
    summary = summarize_month(EconomyData(loans=[loan]), cache=cache)

    # 2 % of 100 000 per quarter
    assert summary.loans[0].interest == Decimal("2000") / 3
    assert summary.loans[0].fee == Decimal("50")
