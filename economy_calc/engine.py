"""Core amortization engine for the economy calculator.

This module implements the fixed-annuity ("annuitetslån") schedule used for
every loan in the household economy: a constant per-term payment whose split
between interest and principal shifts as the balance declines. Results are
returned as an ``AmortizationResult`` holding the per-term rows, a rollup per
calendar year and schedule-wide totals.

The helpers at the bottom answer the two lookups the projectors need: the
remaining balance after a number of terms (clamped to the schedule) and the
row paid in a given month (``None`` outside the schedule).
"""

from __future__ import annotations

from decimal import Decimal, getcontext
from typing import List, Optional

from .data_models import (
    AmortizationResult,
    AmortizationRow,
    AmortizationTotals,
    Loan,
    YearSummary,
)
from .utils import ZERO, add_months, first_of_month, format_month_year, to_decimal

getcontext().prec = 28  # increase precision for financial calculations


def _calculate_annuity_payment(principal: Decimal, rate_per_term: Decimal, terms: int) -> Decimal:
    """Return the constant per-term payment for an annuity loan.

    The formula is:

        payment = P * i / (1 - (1 + i)^-n)

    where ``P`` is the principal, ``i`` is the interest rate per term and
    ``n`` is the number of terms. When the interest rate is zero, the
    payment simplifies to ``P / n``.
    """
    if terms <= 0:
        raise ValueError("Number of terms must be positive")
    if rate_per_term == 0:
        return principal / Decimal(terms)
    return principal * rate_per_term / (1 - (1 + rate_per_term) ** -terms)


def compute_amortization(loan: Loan) -> AmortizationResult:
    """Compute the full amortization schedule for a loan.

    Parameters
    ----------
    loan: Loan
        The loan to amortize. Only the numeric fields and ``start_date`` are
        used; ``description`` does not affect the math.

    Returns
    -------
    AmortizationResult
        Per-term rows, the first 12 rows, one ``YearSummary`` per calendar
        year touched by the schedule and the totals of those summaries. A loan
        without terms yields an empty result with zero totals.
    """
    number_of_terms = loan.term_years * loan.terms_per_year
    if number_of_terms <= 0:
        return AmortizationResult()

    balance = to_decimal(loan.loan_amount)
    fee = to_decimal(loan.monthly_fee)
    rate_per_term = to_decimal(loan.interest_rate) / Decimal(100) / Decimal(loan.terms_per_year)
    term_payment = _calculate_annuity_payment(balance, rate_per_term, number_of_terms)

    rows: List[AmortizationRow] = []
    year_summaries: List[YearSummary] = []
    year_interest = year_principal = year_fees = year_paid = ZERO

    current_date = first_of_month(loan.start_date)
    for term in range(1, number_of_terms + 1):
        interest = balance * rate_per_term
        # principal never exceeds the remaining balance
        principal = min(term_payment - interest, balance)
        balance -= principal
        payment = principal + interest + fee

        rows.append(
            AmortizationRow(
                term=term,
                date=current_date,
                label=format_month_year(current_date),
                payment=payment,
                interest=interest,
                principal=principal,
                fee=fee,
                balance=balance,
            )
        )

        year_interest += interest
        year_principal += principal
        year_fees += fee
        year_paid += payment

        next_date = add_months(current_date, 1)
        if next_date.year != current_date.year or term == number_of_terms:
            year_summaries.append(
                YearSummary(
                    year=current_date.year,
                    total_interest=year_interest,
                    total_principal=year_principal,
                    total_fees=year_fees,
                    total_paid=year_paid,
                    end_balance=balance,
                )
            )
            year_interest = year_principal = year_fees = year_paid = ZERO
        current_date = next_date

    totals = AmortizationTotals()
    for summary in year_summaries:
        totals.total_interest += summary.total_interest
        totals.total_principal += summary.total_principal
        totals.total_fees += summary.total_fees
        totals.total_paid += summary.total_paid

    return AmortizationResult(
        rows=rows,
        first_12_months=rows[:12],
        year_summaries=year_summaries,
        totals=totals,
    )


def balance_after_term(result: AmortizationResult, terms: int, loan_amount: Decimal) -> Decimal:
    """Remaining balance after ``terms`` payments.

    ``terms <= 0`` is the start of the schedule (the full loan amount). Asking
    past the end clamps to the last row instead of extrapolating.
    """
    if terms <= 0 or not result.rows:
        return to_decimal(loan_amount)
    index = min(terms, len(result.rows)) - 1
    return result.rows[index].balance


def row_for_month(result: AmortizationResult, offset: int) -> Optional[AmortizationRow]:
    """The row paid ``offset`` months after the first payment, or ``None``."""
    if offset < 0 or offset >= len(result.rows):
        return None
    return result.rows[offset]


def first_year_interest(result: AmortizationResult) -> Decimal:
    """Interest paid over the first 12 terms (the tax-deductible figure)."""
    return sum((row.interest for row in result.first_12_months), ZERO)
