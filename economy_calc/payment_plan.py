"""Month-by-month cash-flow projection.

``generate_payment_plan`` simulates the household economy for a number of
years: net income after tax (with an annual raise every August), flat fixed
and living costs, and the actual interest, principal and fee paid on every
loan that month according to its amortization schedule.
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import List, Optional

from .cache import AmortizationCache, default_cache
from .data_models import EconomyData, Income, MonthlyPlanRow
from .engine import row_for_month
from .tax_rules import TaxRules, load_tax_rules
from .taxes import calculate_annual_taxes
from .utils import ZERO, add_months, first_of_month, format_month_year, months_between, to_decimal

logger = logging.getLogger(__name__)

RAISE_MONTH = 8  # August


def generate_payment_plan(
    economy: EconomyData,
    salary_growth_pct: Decimal,
    start_date: date,
    years: int = 30,
    rules: Optional[TaxRules] = None,
    cache: Optional[AmortizationCache] = None,
) -> List[MonthlyPlanRow]:
    """Project income, expenses and balance for ``years * 12`` months.

    Parameters
    ----------
    economy: EconomyData
        The household economy. The active house (if any) is resolved once; its
        loan is the primary housing loan whose principal is added back in
        ``balance_plus_principal``.
    salary_growth_pct: Decimal
        Annual raise in percent, applied to taxable income every August except
        in the first simulated month. Tax-free income does not grow.
    start_date: date
        First simulated month (normalized to the 1st).
    years: int
        Horizon in years.
    """
    if rules is None:
        rules = load_tax_rules()
    if cache is None:
        cache = default_cache()

    growth_factor = 1 + to_decimal(salary_growth_pct) / Decimal(100)
    start = first_of_month(start_date)
    total_months = max(years, 0) * 12

    house = economy.active_house()
    housing_loan = house.housing_loan if house is not None else None
    loans = economy.all_loans()
    schedules = [(loan, cache.get(loan), first_of_month(loan.start_date)) for loan in loans]

    base_costs = sum((to_decimal(e.amount) for e in economy.all_fixed_expenses()), ZERO)
    base_costs += sum((to_decimal(c.amount) for c in economy.living_costs), ZERO)

    taxable_income = sum((to_decimal(i.amount) for i in economy.incomes if not i.tax_free), ZERO)
    monthly_tax_free = sum((to_decimal(i.amount) for i in economy.incomes if i.tax_free), ZERO) / Decimal(12)

    rows: List[MonthlyPlanRow] = []
    for i in range(total_months):
        current = add_months(start, i)
        if current.month == RAISE_MONTH and i != 0:
            taxable_income *= growth_factor

        taxes = calculate_annual_taxes([Income(source="Total", amount=taxable_income)], loans, rules, cache)
        income = taxes.net_monthly_income + monthly_tax_free

        total_interest = ZERO
        total_principal = ZERO
        total_fees = ZERO
        housing_principal = ZERO
        for loan, schedule, loan_start in schedules:
            row = row_for_month(schedule, months_between(loan_start, current))
            if row is None:
                continue
            total_interest += row.interest
            total_principal += row.principal
            total_fees += row.fee
            if loan is housing_loan:
                housing_principal += row.principal

        expenses = base_costs + total_interest + total_principal + total_fees
        balance = income - expenses
        rows.append(
            MonthlyPlanRow(
                month=format_month_year(current),
                date=current,
                income=income,
                expenses=expenses,
                balance=balance,
                total_interest=total_interest,
                total_principal=total_principal,
                balance_plus_principal=balance + housing_principal,
            )
        )

    logger.debug("Payment plan generated", extra={"months": len(rows), "loans": len(loans)})
    return rows
