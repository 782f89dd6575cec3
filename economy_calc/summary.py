"""Monthly overview of the household economy.

Combines the tax engine and each loan's first scheduled payment into the
figures shown on the summary page: gross and net monthly income, monthly tax,
loan costs split into interest, principal and fees, fixed and living costs,
the resulting balance, and how much equity the active housing loan builds per
month through principal payments and house-price growth.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional

from .cache import AmortizationCache, default_cache
from .data_models import EconomyData, HousingLoan, Loan, TaxBreakdown
from .tax_rules import TaxRules
from .taxes import calculate_economy_taxes
from .utils import ZERO, to_decimal

MONTHS = Decimal(12)


@dataclass
class LoanMonthlyBreakdown:
    description: str
    interest: Decimal
    principal: Decimal
    fee: Decimal

    @property
    def total(self) -> Decimal:
        return self.interest + self.principal + self.fee


@dataclass
class EquityHighlight:
    description: str
    principal: Decimal
    price_growth: Decimal

    @property
    def combined(self) -> Decimal:
        return self.principal + self.price_growth


@dataclass
class MonthlySummary:
    gross_monthly_income: Decimal
    monthly_tax: Decimal
    net_monthly_income: Decimal
    loans: List[LoanMonthlyBreakdown]
    housing_fixed: Decimal
    personal_fixed: Decimal
    living_costs: Decimal
    total_expenses: Decimal
    balance: Decimal
    taxes: TaxBreakdown
    equity_highlight: Optional[EquityHighlight] = None
    loan_totals: LoanMonthlyBreakdown = field(
        default_factory=lambda: LoanMonthlyBreakdown("Total", ZERO, ZERO, ZERO)
    )


def monthly_loan_breakdown(loan: Loan, cache: AmortizationCache) -> LoanMonthlyBreakdown:
    """Interest, principal and fee of the loan's first payment, per month.

    Interest and principal are paid ``terms_per_year`` times a year, so they are
    scaled by ``terms_per_year / 12``; the fee is already a monthly amount.
    """
    schedule = cache.get(loan)
    if not schedule.rows:
        return LoanMonthlyBreakdown(loan.description, ZERO, ZERO, to_decimal(loan.monthly_fee))
    first = schedule.rows[0]
    terms = Decimal(loan.terms_per_year)
    return LoanMonthlyBreakdown(
        loan.description,
        first.interest * terms / MONTHS,
        first.principal * terms / MONTHS,
        first.fee,
    )


def monthly_price_growth(loan: HousingLoan, growth_pct: Decimal) -> Decimal:
    """First month's value increase of the home at ``growth_pct`` a year."""
    monthly_rate = (1 + to_decimal(growth_pct) / Decimal(100)) ** (Decimal(1) / MONTHS) - 1
    return loan.base_home_value * monthly_rate


def summarize_month(
    economy: EconomyData,
    price_growth_pct: Decimal = Decimal("2"),
    rules: Optional[TaxRules] = None,
    cache: Optional[AmortizationCache] = None,
) -> MonthlySummary:
    if cache is None:
        cache = default_cache()
    taxes = calculate_economy_taxes(economy, rules, cache)

    gross_monthly = sum((to_decimal(i.amount) for i in economy.incomes), ZERO) / MONTHS
    monthly_tax = taxes.total_taxes / MONTHS
    net_monthly = gross_monthly - monthly_tax

    loans = [monthly_loan_breakdown(loan, cache) for loan in economy.all_loans()]
    totals = LoanMonthlyBreakdown(
        "Total",
        sum((b.interest for b in loans), ZERO),
        sum((b.principal for b in loans), ZERO),
        sum((b.fee for b in loans), ZERO),
    )

    fixed = economy.all_fixed_expenses()
    housing_fixed = sum((to_decimal(f.amount) for f in fixed if f.category == "housing"), ZERO)
    personal_fixed = sum((to_decimal(f.amount) for f in fixed if f.category == "personal"), ZERO)
    living = sum((to_decimal(c.amount) for c in economy.living_costs), ZERO)
    total_expenses = housing_fixed + personal_fixed + living + totals.total

    highlight = None
    house = economy.active_house()
    if house is not None:
        housing_loan = house.as_housing_loan()
        highlight = EquityHighlight(
            description=housing_loan.description,
            principal=monthly_loan_breakdown(housing_loan, cache).principal,
            price_growth=monthly_price_growth(housing_loan, price_growth_pct),
        )

    return MonthlySummary(
        gross_monthly_income=gross_monthly,
        monthly_tax=monthly_tax,
        net_monthly_income=net_monthly,
        loans=loans,
        housing_fixed=housing_fixed,
        personal_fixed=personal_fixed,
        living_costs=living,
        total_expenses=total_expenses,
        balance=net_monthly - total_expenses,
        taxes=taxes,
        equity_highlight=highlight,
        loan_totals=totals,
    )
