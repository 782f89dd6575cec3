"""Progressive income-tax calculation.

``calculate_annual_taxes`` computes one year's tax for a household from its
income records and the loans whose first-year interest is deductible. The
model is the Norwegian personal tax: a flat tax on net income (alminnelig
inntekt) after the standard deduction (minstefradrag) and the interest
deduction, a social security levy (trygdeavgift) on gross income, and a step
tax (trinnskatt) on gross income in marginal brackets. All constants come from
:mod:`economy_calc.tax_rules`.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Iterable, List, Optional

from .cache import AmortizationCache, default_cache
from .data_models import EconomyData, Income, Loan, LoanInterestRow, TaxBreakdown
from .engine import first_year_interest
from .tax_rules import TaxRules, load_tax_rules
from .utils import ZERO, to_decimal

HUNDRED = Decimal(100)
MONTHS_PER_YEAR = Decimal(12)


def calculate_annual_taxes(
    incomes: Iterable[Income],
    loans: Iterable[Loan],
    rules: Optional[TaxRules] = None,
    cache: Optional[AmortizationCache] = None,
) -> TaxBreakdown:
    """Calculate one year's taxes.

    Tax-free incomes are summed into ``tax_free_income`` but neither taxed nor
    added to ``net_annual_income``; callers deriving monthly cash add
    ``tax_free_income / 12`` themselves.
    """
    if rules is None:
        rules = load_tax_rules()
    if cache is None:
        cache = default_cache()

    total_income = ZERO
    tax_free_income = ZERO
    for income in incomes:
        amount = to_decimal(income.amount)
        if income.tax_free:
            tax_free_income += amount
        else:
            total_income += amount

    loan_rows: List[LoanInterestRow] = []
    for loan in loans:
        paid_interest = first_year_interest(cache.get(loan))
        loan_rows.append(
            LoanInterestRow(
                description=loan.description,
                paid_interest=paid_interest,
                tax_deduction=paid_interest * rules.interest_deduction_rate,
            )
        )
    total_paid_interest = sum((r.paid_interest for r in loan_rows), ZERO)
    total_interest_deduction = total_paid_interest * rules.interest_deduction_rate

    minstefradrag = min(total_income * rules.standard_deduction_rate, rules.standard_deduction_cap)
    total_deductions = minstefradrag + total_interest_deduction
    alminnelig = max(total_income - total_deductions, ZERO)

    skatt_alminnelig = alminnelig * rules.general_rate
    trygdeavgift = total_income * rules.social_security_rate
    step_taxes = [bracket.tax(total_income) for bracket in rules.step_brackets]
    trinnskatt = sum(step_taxes, ZERO)

    total_taxes = skatt_alminnelig + trygdeavgift + trinnskatt
    net_annual_income = total_income - total_taxes
    effective_tax_rate = total_taxes / total_income * HUNDRED if total_income else ZERO

    return TaxBreakdown(
        total_income=total_income,
        tax_free_income=tax_free_income,
        total_paid_interest=total_paid_interest,
        total_interest_deduction=total_interest_deduction,
        minstefradrag=minstefradrag,
        total_deductions=total_deductions,
        alminnelig=alminnelig,
        skatt_alminnelig=skatt_alminnelig,
        trygdeavgift=trygdeavgift,
        step_taxes=step_taxes,
        trinnskatt=trinnskatt,
        total_taxes=total_taxes,
        net_annual_income=net_annual_income,
        net_monthly_income=net_annual_income / MONTHS_PER_YEAR,
        effective_tax_rate=effective_tax_rate,
        loan_rows=loan_rows,
        tax_year=rules.year,
    )


def calculate_economy_taxes(
    economy: EconomyData,
    rules: Optional[TaxRules] = None,
    cache: Optional[AmortizationCache] = None,
) -> TaxBreakdown:
    """Taxes for the whole economy: general loans plus the active housing loan."""
    return calculate_annual_taxes(economy.incomes, economy.all_loans(), rules, cache)


def calculate_monthly_tax_distribution(annual_taxes: Decimal, on_date: date) -> Decimal:
    """Spread ``annual_taxes`` over the months remaining in the year, ``on_date`` included."""
    months_left = 12 - (on_date.month - 1)
    return to_decimal(annual_taxes) / Decimal(months_left)
