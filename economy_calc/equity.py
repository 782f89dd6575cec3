"""Home equity projections.

Equity is the market value of the home minus the remaining housing debt. The
home value starts at ``loan_amount + capital`` when the loan starts and grows
with compound annual price growth; the debt follows the loan's amortization
schedule. Lookups past the end of the schedule clamp to its last balance.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Iterable, List, Optional

from .cache import AmortizationCache, default_cache
from .data_models import EquityPoint, EquitySnapshot, HousingLoan
from .engine import balance_after_term
from .utils import add_months, first_of_month, format_month_year, months_between, to_decimal

logger = logging.getLogger(__name__)

MONTHS_PER_YEAR = Decimal(12)


@dataclass(frozen=True)
class EquityCheckpoint:
    """A named point in time, counted in months from the loan's first payment."""

    label: str
    month_offset: int


def _growth_base(growth_pct: Decimal) -> Decimal:
    return 1 + to_decimal(growth_pct) / Decimal(100)


def home_value_at(loan: HousingLoan, growth_pct: Decimal, years: Decimal) -> Decimal:
    """Market-adjusted home value ``years`` (possibly fractional) after loan start."""
    years = to_decimal(years)
    if years == 0:
        return loan.base_home_value
    return loan.base_home_value * _growth_base(growth_pct) ** years


def remaining_debt_at(loan: HousingLoan, month_offset: int, cache: Optional[AmortizationCache] = None) -> Decimal:
    if cache is None:
        cache = default_cache()
    return balance_after_term(cache.get(loan), month_offset, loan.loan_amount)


def standard_checkpoints(loan: HousingLoan, today: date) -> List[EquityCheckpoint]:
    """At start, today, and one, two and five years after the loan started."""
    elapsed = max(months_between(first_of_month(loan.start_date), today), 0)
    return [
        EquityCheckpoint("start", 0),
        EquityCheckpoint("today", elapsed),
        EquityCheckpoint("+1 year", 12),
        EquityCheckpoint("+2 years", 24),
        EquityCheckpoint("+5 years", 60),
    ]


def project_equity(
    housing_loan: HousingLoan,
    growth_pct: Decimal,
    horizon: Iterable[EquityCheckpoint],
    cache: Optional[AmortizationCache] = None,
) -> List[EquitySnapshot]:
    """Equity snapshots at each checkpoint of ``horizon``.

    Each checkpoint is clamped on its own: negative offsets count as the start
    and offsets beyond the schedule use its final balance, while the home value
    keeps growing.
    """
    if cache is None:
        cache = default_cache()
    start = first_of_month(housing_loan.start_date)
    snapshots: List[EquitySnapshot] = []
    for checkpoint in horizon:
        offset = max(checkpoint.month_offset, 0)
        home_value = home_value_at(housing_loan, growth_pct, Decimal(offset) / MONTHS_PER_YEAR)
        debt = remaining_debt_at(housing_loan, offset, cache)
        snapshots.append(
            EquitySnapshot(
                label=checkpoint.label,
                month_offset=offset,
                date=add_months(start, offset),
                home_value=home_value,
                remaining_debt=debt,
                equity=home_value - debt,
            )
        )
    return snapshots


def equity_series(
    housing_loan: HousingLoan,
    growth_pct: Decimal,
    years_to_show: int,
    cache: Optional[AmortizationCache] = None,
) -> List[EquityPoint]:
    """Month-by-month equity for tabular display.

    Row ``i`` is labelled with the month of payment ``i + 1`` and carries the
    balance after that payment and a home value grown by ``i + 1`` monthly
    factors ``(1 + g)^(1/12)``. The series stops when the loan is paid off.
    """
    if cache is None:
        cache = default_cache()
    schedule = cache.get(housing_loan)
    count = min(max(years_to_show, 0) * housing_loan.terms_per_year, housing_loan.number_of_terms, len(schedule.rows))
    monthly_growth = _growth_base(growth_pct) ** (Decimal(1) / MONTHS_PER_YEAR)

    start = first_of_month(housing_loan.start_date)
    home_value = housing_loan.base_home_value
    points: List[EquityPoint] = []
    for i in range(count):
        home_value *= monthly_growth
        row = schedule.rows[i]
        current = add_months(start, i)
        points.append(
            EquityPoint(
                label=format_month_year(current),
                month_offset=i + 1,
                date=current,
                home_value=home_value,
                remaining_debt=row.balance,
                equity=home_value - row.balance,
            )
        )
    logger.debug("Equity series generated", extra={"rows": len(points)})
    return points
