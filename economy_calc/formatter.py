"""Output helpers for the economy calculator.

This module renders amortization schedules, tax breakdowns, payment plans,
equity tables and the monthly summary as simple tab separated text tables.
Amounts are rounded to whole kroner for display only; the underlying results
keep full precision.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

import click

from .data_models import AmortizationResult, EquityPoint, MonthlyPlanRow, TaxBreakdown
from .summary import MonthlySummary


def kr(value: Decimal) -> str:
    """Format an amount as whole kroner with a thousands separator."""
    # "+ 0" turns a rounded -0 into 0
    rounded = Decimal(value).quantize(Decimal("1"), rounding=ROUND_HALF_UP) + 0
    return f"{rounded:,}".replace(",", " ")


def print_schedule(result: AmortizationResult, max_rows: int = 120) -> None:
    """Print per-term rows followed by the totals.

    Long schedules are cut after ``max_rows`` rows to avoid flooding the
    terminal.
    """
    headers = ["Term", "Month", "Payment", "Interest", "Principal", "Fee", "Balance"]
    click.echo("\t".join(headers))
    for row in result.rows[:max_rows]:
        click.echo(
            "\t".join(
                [
                    str(row.term),
                    row.label,
                    kr(row.payment),
                    kr(row.interest),
                    kr(row.principal),
                    kr(row.fee),
                    kr(row.balance),
                ]
            )
        )
    if len(result.rows) > max_rows:
        click.echo(f"... {len(result.rows) - max_rows} more rows")
    print_totals(result)


def print_year_summaries(result: AmortizationResult) -> None:
    click.echo("\t".join(["Year", "Interest", "Principal", "Fees", "Paid", "End balance"]))
    for year in result.year_summaries:
        click.echo(
            "\t".join(
                [
                    str(year.year),
                    kr(year.total_interest),
                    kr(year.total_principal),
                    kr(year.total_fees),
                    kr(year.total_paid),
                    kr(year.end_balance),
                ]
            )
        )
    print_totals(result)


def print_totals(result: AmortizationResult) -> None:
    totals = result.totals
    click.echo("-" * 72)
    click.echo(f"Total interest     : {kr(totals.total_interest)}")
    click.echo(f"Total principal    : {kr(totals.total_principal)}")
    click.echo(f"Total fees         : {kr(totals.total_fees)}")
    click.echo(f"Total paid         : {kr(totals.total_paid)}")
    click.echo("-" * 72)


def print_tax_breakdown(tax: TaxBreakdown) -> None:
    click.echo(f"Taxes {tax.tax_year}")
    click.echo("-" * 72)
    click.echo(f"Gross income       : {kr(tax.total_income)}")
    if tax.tax_free_income:
        click.echo(f"Tax-free income    : {kr(tax.tax_free_income)}")
    for row in tax.loan_rows:
        click.echo(f"  Interest {row.description:<20s}: {kr(row.paid_interest)} (deduction {kr(row.tax_deduction)})")
    click.echo(f"Interest deduction : {kr(tax.total_interest_deduction)}")
    click.echo(f"Minstefradrag      : {kr(tax.minstefradrag)}")
    click.echo(f"Total deductions   : {kr(tax.total_deductions)}")
    click.echo(f"Alminnelig inntekt : {kr(tax.alminnelig)}")
    click.echo(f"Skatt alminnelig   : {kr(tax.skatt_alminnelig)}")
    click.echo(f"Trygdeavgift       : {kr(tax.trygdeavgift)}")
    for step, amount in enumerate(tax.step_taxes, start=1):
        click.echo(f"  Trinn {step}          : {kr(amount)}")
    click.echo(f"Trinnskatt         : {kr(tax.trinnskatt)}")
    click.echo(f"Total taxes        : {kr(tax.total_taxes)}")
    click.echo(f"Net annual income  : {kr(tax.net_annual_income)}")
    click.echo(f"Net monthly income : {kr(tax.net_monthly_income)}")
    click.echo(f"Effective tax rate : {tax.effective_tax_rate:.2f}%")
    click.echo("-" * 72)


def print_payment_plan(rows: Iterable[MonthlyPlanRow]) -> None:
    headers = ["Month", "Income", "Expenses", "Balance", "Interest", "Principal", "Balance+principal"]
    click.echo("\t".join(headers))
    for row in rows:
        click.echo(
            "\t".join(
                [
                    row.month,
                    kr(row.income),
                    kr(row.expenses),
                    kr(row.balance),
                    kr(row.total_interest),
                    kr(row.total_principal),
                    kr(row.balance_plus_principal),
                ]
            )
        )


def print_equity(points: Iterable[EquityPoint]) -> None:
    click.echo("\t".join(["When", "Month", "Home value", "Remaining debt", "Equity"]))
    for point in points:
        click.echo(
            "\t".join(
                [
                    point.label,
                    point.date.strftime("%Y-%m"),
                    kr(point.home_value),
                    kr(point.remaining_debt),
                    kr(point.equity),
                ]
            )
        )


def print_monthly_summary(summary: MonthlySummary) -> None:
    click.echo("Monthly summary")
    click.echo("-" * 72)
    click.echo(f"Gross income       : {kr(summary.gross_monthly_income)}")
    click.echo(f"Tax                : {kr(summary.monthly_tax)}")
    click.echo(f"Net income         : {kr(summary.net_monthly_income)}")
    for loan in summary.loans:
        click.echo(
            f"  {loan.description:<18s}: {kr(loan.total)} "
            f"(interest {kr(loan.interest)}, principal {kr(loan.principal)}, fee {kr(loan.fee)})"
        )
    click.echo(f"Loan payments      : {kr(summary.loan_totals.total)}")
    click.echo(f"Fixed - housing    : {kr(summary.housing_fixed)}")
    click.echo(f"Fixed - personal   : {kr(summary.personal_fixed)}")
    click.echo(f"Living costs       : {kr(summary.living_costs)}")
    click.echo(f"Total expenses     : {kr(summary.total_expenses)}")
    click.echo(f"Balance            : {kr(summary.balance)}")
    highlight = summary.equity_highlight
    if highlight is not None:
        click.echo(
            f"Equity build-up    : {kr(highlight.combined)} "
            f"(principal {kr(highlight.principal)}, price growth {kr(highlight.price_growth)})"
        )
    click.echo("-" * 72)
