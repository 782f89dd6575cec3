"""Command-line interface for the economy calculator.

This module uses the ``click`` library to implement a multi-command interface.
Users can compute the amortization schedule of a single loan, or point the
other commands at an economy document (the JSON saved by the web app) to see
taxes, the monthly payment plan, equity development and a monthly summary.
Results can be printed to the terminal or exported to JSON/CSV files.
"""

from __future__ import annotations

import csv
import json
import logging
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, List, Optional

import click

from .cache import get_or_compute_amortization
from .data_models import AmortizationResult, EconomyData, Loan, MonthlyPlanRow
from .equity import equity_series, project_equity, standard_checkpoints
from .exceptions import EconomyCalcError
from .formatter import (
    print_equity,
    print_monthly_summary,
    print_payment_plan,
    print_schedule,
    print_tax_breakdown,
    print_year_summaries,
)
from .logging_config import setup_logging
from .payment_plan import generate_payment_plan
from .providers import living_costs_from_budget
from .serialization import (
    amortization_to_dict,
    equity_point_to_dict,
    load_economy,
    plan_row_to_dict,
    tax_breakdown_to_dict,
)
from .settings import get_settings
from .summary import summarize_month
from .tax_rules import load_tax_rules
from .taxes import calculate_economy_taxes
from .utils import decimal_from_str, parse_date, parse_year_month

logger = logging.getLogger(__name__)


def parse_amount(value: str) -> Decimal:
    """Parse a numeric string with optional suffixes.

    Accepts plain numbers ("3200000") and shorthand with ``k``/``m`` suffixes
    (e.g., "3.2m" meaning 3 200 000). Returns a Decimal.
    """
    value = value.strip().lower().replace(",", "").replace(" ", "")
    factor = Decimal(1)
    if value.endswith("k"):
        factor = Decimal(1_000)
        value = value[:-1]
    elif value.endswith("m"):
        factor = Decimal(1_000_000)
        value = value[:-1]
    try:
        return decimal_from_str(value) * factor
    except ValueError:
        raise click.BadParameter(f"Invalid amount: {value}")


def _parse_day(value: Optional[str], default: date) -> date:
    if not value:
        return default
    try:
        return parse_date(value)
    except ValueError as exc:
        raise click.BadParameter(str(exc))


def _load(path: str) -> EconomyData:
    try:
        return load_economy(Path(path))
    except EconomyCalcError as exc:
        raise click.ClickException(str(exc))


def _write_json(path: Path, data: Any) -> None:
    with path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
    logger.info("Exported JSON", extra={"path": str(path)})
    click.echo(f"Exported to {path}")


def export_schedule_to_csv(path: Path, result: AmortizationResult) -> None:
    """Export the per-term rows to a CSV file."""
    header = ["Term", "Month", "Payment", "Interest", "Principal", "Fee", "Balance"]
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(header)
        for r in result.rows:
            writer.writerow(
                [r.term, r.date.strftime("%Y-%m"), float(r.payment), float(r.interest), float(r.principal), float(r.fee), float(r.balance)]
            )
    logger.info("Exported CSV", extra={"path": str(path), "rows": len(result.rows)})
    click.echo(f"Exported to {path}")


def export_plan_to_csv(path: Path, rows: List[MonthlyPlanRow]) -> None:
    header = ["Month", "Income", "Expenses", "Balance", "Interest", "Principal", "BalancePlusPrincipal"]
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(header)
        for r in rows:
            writer.writerow(
                [
                    r.date.strftime("%Y-%m"),
                    float(r.income),
                    float(r.expenses),
                    float(r.balance),
                    float(r.total_interest),
                    float(r.total_principal),
                    float(r.balance_plus_principal),
                ]
            )
    logger.info("Exported CSV", extra={"path": str(path), "rows": len(rows)})
    click.echo(f"Exported to {path}")


@click.group()
@click.option("--log-level", "log_level", default=None, help="Logging level (default from settings)")
def cli(log_level: Optional[str]) -> None:
    """A household economy calculator: loans, taxes, cash flow and equity."""
    settings = get_settings()
    setup_logging(log_level or settings.log_level, settings.log_json, settings.service_name)


@cli.command()
@click.option("--amount", "-a", "amount", required=True, help="Loan amount, e.g. 3.2m")
@click.option("--rate", "-r", "rate", required=True, type=float, help="Annual interest rate (percent)")
@click.option("--years", "-y", "years", required=True, type=int, help="Loan term in years")
@click.option("--terms-per-year", "terms_per_year", default=12, show_default=True, type=int, help="Payments per year")
@click.option("--fee", "fee", default="0", help="Fee added to each payment")
@click.option("--start-date", "-s", "start_date", required=True, help="First payment month (YYYY-MM)")
@click.option("--description", "description", default="Lån", help="Loan label")
@click.option("--yearly", is_flag=True, help="Show one row per calendar year")
@click.option("--output", "output", type=str, help="Output file path (.json or .csv)")
def schedule(
    amount: str,
    rate: float,
    years: int,
    terms_per_year: int,
    fee: str,
    start_date: str,
    description: str,
    yearly: bool,
    output: Optional[str],
) -> None:
    """Compute and print the amortization schedule of one loan."""
    try:
        start = parse_year_month(start_date)
    except ValueError as exc:
        raise click.BadParameter(str(exc))
    loan = Loan(
        description=description,
        loan_amount=parse_amount(amount),
        interest_rate=decimal_from_str(str(rate)),
        term_years=years,
        terms_per_year=terms_per_year,
        monthly_fee=parse_amount(fee),
        start_date=start,
    )
    result = get_or_compute_amortization(loan)
    if output:
        path = Path(output)
        if path.suffix.lower() == ".json":
            _write_json(path, amortization_to_dict(result))
        elif path.suffix.lower() == ".csv":
            export_schedule_to_csv(path, result)
        else:
            raise click.BadParameter("Unsupported output format; use .json or .csv")
    elif yearly:
        print_year_summaries(result)
    else:
        print_schedule(result)


@cli.command()
@click.option("--economy", "economy_path", required=True, type=click.Path(exists=True, dir_okay=False), help="Economy JSON document")
@click.option("--tax-year", "tax_year", type=int, default=None, help="Tax rules to apply")
@click.option("--output", "output", type=str, help="Output file path (.json)")
def taxes(economy_path: str, tax_year: Optional[int], output: Optional[str]) -> None:
    """Compute this year's taxes for an economy."""
    economy = _load(economy_path)
    try:
        rules = load_tax_rules(tax_year or get_settings().tax_year)
    except EconomyCalcError as exc:
        raise click.BadParameter(str(exc))
    breakdown = calculate_economy_taxes(economy, rules)
    if output:
        _write_json(Path(output), tax_breakdown_to_dict(breakdown))
    else:
        print_tax_breakdown(breakdown)


@cli.command()
@click.option("--economy", "economy_path", required=True, type=click.Path(exists=True, dir_okay=False), help="Economy JSON document")
@click.option("--growth", "growth", type=float, default=None, help="Annual salary growth (percent)")
@click.option("--start-date", "-s", "start_date", default=None, help="First month (YYYY-MM, default this month)")
@click.option("--years", "years", type=int, default=None, help="Horizon in years")
@click.option("--output", "output", type=str, help="Output file path (.json or .csv)")
def plan(
    economy_path: str,
    growth: Optional[float],
    start_date: Optional[str],
    years: Optional[int],
    output: Optional[str],
) -> None:
    """Project the monthly cash flow of an economy."""
    settings = get_settings()
    economy = _load(economy_path)
    growth_pct = decimal_from_str(str(growth)) if growth is not None else settings.default_salary_growth_pct
    start = _parse_day(start_date, date.today())
    rows = generate_payment_plan(
        economy,
        growth_pct,
        start,
        years if years is not None else settings.plan_years,
        load_tax_rules(settings.tax_year),
    )
    if output:
        path = Path(output)
        if path.suffix.lower() == ".json":
            _write_json(path, [plan_row_to_dict(r) for r in rows])
        elif path.suffix.lower() == ".csv":
            export_plan_to_csv(path, rows)
        else:
            raise click.BadParameter("Unsupported output format; use .json or .csv")
    else:
        print_payment_plan(rows)


@cli.command()
@click.option("--economy", "economy_path", required=True, type=click.Path(exists=True, dir_okay=False), help="Economy JSON document")
@click.option("--growth", "growth", type=float, default=None, help="Annual house-price growth (percent)")
@click.option("--years", "years", type=int, default=10, show_default=True, help="Years of monthly rows to show")
@click.option("--today", "today", default=None, help="Reference date for the 'today' snapshot (YYYY-MM-DD)")
@click.option("--output", "output", type=str, help="Output file path (.json)")
def equity(
    economy_path: str,
    growth: Optional[float],
    years: int,
    today: Optional[str],
    output: Optional[str],
) -> None:
    """Show equity development for the active house."""
    economy = _load(economy_path)
    house = economy.active_house()
    if house is None:
        raise click.ClickException("No active house in the economy document")
    loan = house.as_housing_loan()
    growth_pct = decimal_from_str(str(growth)) if growth is not None else house.purchase.expected_growth_pct
    snapshots = project_equity(loan, growth_pct, standard_checkpoints(loan, _parse_day(today, date.today())))
    series = equity_series(loan, growth_pct, years)
    if output:
        data: Dict[str, Any] = {
            "house": house.name,
            "snapshots": [equity_point_to_dict(p) for p in snapshots],
            "monthly": [equity_point_to_dict(p) for p in series],
        }
        _write_json(Path(output), data)
    else:
        click.echo(house.name)
        print_equity(snapshots)
        click.echo("")
        print_equity(series)


@cli.command()
@click.option("--economy", "economy_path", required=True, type=click.Path(exists=True, dir_okay=False), help="Economy JSON document")
@click.option("--growth", "growth", type=float, default=None, help="Annual house-price growth (percent)")
def summary(economy_path: str, growth: Optional[float]) -> None:
    """Print the monthly summary of an economy."""
    settings = get_settings()
    economy = _load(economy_path)
    growth_pct = decimal_from_str(str(growth)) if growth is not None else settings.default_price_growth_pct
    print_monthly_summary(summarize_month(economy, growth_pct, load_tax_rules(settings.tax_year)))


@cli.command()
@click.option("--payload", "payload_path", required=True, type=click.Path(exists=True, dir_okay=False), help="Saved reference-budget response")
def budget(payload_path: str) -> None:
    """List monthly living costs from a reference-budget response."""
    with Path(payload_path).open("r", encoding="utf-8") as f:
        try:
            payload = json.load(f)
        except json.JSONDecodeError as exc:
            raise click.ClickException(f"{payload_path} is not valid JSON: {exc}")
    try:
        costs = living_costs_from_budget(payload)
    except EconomyCalcError as exc:
        raise click.ClickException(str(exc))
    for cost in costs:
        click.echo(f"{cost.description}\t{cost.amount}")
    click.echo(f"Total\t{sum((c.amount for c in costs), Decimal(0))}")


if __name__ == "__main__":
    cli()
