"""Data models for the economy calculator.

This module defines dataclasses representing the household economy (incomes,
loans, houses, fixed expenses and living costs) and the derived structures the
engines return: amortization schedules, tax breakdowns, monthly plan rows and
equity points. Using dataclasses makes it easy to construct, inspect and
serialize these structures.

Input records are never mutated by the engines; every computation returns new
objects.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import List, Optional

ZERO = Decimal("0")

EXPENSE_CATEGORIES = ("housing", "personal")


@dataclass
class Loan:
    """A generic amortizing (annuity) loan.

    Attributes
    ----------
    description: str
        Label shown in tables; also part of the amortization cache key.
    loan_amount: Decimal
        Principal borrowed.
    interest_rate: Decimal
        Nominal annual interest rate in percent (4.5 means 4.5 %).
    term_years: int
        Loan term in years.
    terms_per_year: int
        Number of payments per year.
    monthly_fee: Decimal
        Flat fee added to every payment.
    start_date: date
        First payment month. Schedules normalize it to the first day.
    """

    description: str
    loan_amount: Decimal
    interest_rate: Decimal
    term_years: int
    terms_per_year: int
    start_date: date
    monthly_fee: Decimal = ZERO

    @property
    def number_of_terms(self) -> int:
        return self.term_years * self.terms_per_year


@dataclass
class HousingLoan(Loan):
    """A loan financing a home; ``capital`` is the buyer's own equity."""

    capital: Decimal = ZERO

    @property
    def base_home_value(self) -> Decimal:
        """Home value at loan inception (loan plus equity)."""
        return self.loan_amount + self.capital


@dataclass
class Income:
    source: str
    amount: Decimal  # annual
    tax_free: bool = False


@dataclass
class FixedExpense:
    description: str
    amount: Decimal  # monthly
    category: str = "personal"  # 'housing' or 'personal'


@dataclass
class LivingCost:
    description: str
    amount: Decimal  # monthly


@dataclass
class HousePurchase:
    price: Decimal = ZERO
    equity_used: Decimal = ZERO  # share of personal equity put into this purchase
    expected_growth_pct: Decimal = Decimal("2")
    closing_costs: Decimal = ZERO


# field name -> label used when the costs are listed as fixed expenses
HOUSE_COST_LABELS = (
    ("hoa", "Felleskost"),
    ("electricity", "Strøm"),
    ("internet", "Internett"),
    ("insurance", "Forsikring"),
    ("property_tax", "Eiendomsskatt"),
    ("maintenance", "Vedlikehold"),
    ("other", "Annet (bolig)"),
)


@dataclass
class HouseMonthlyCosts:
    hoa: Decimal = ZERO
    electricity: Decimal = ZERO
    internet: Decimal = ZERO
    insurance: Decimal = ZERO
    property_tax: Decimal = ZERO
    maintenance: Decimal = ZERO
    other: Decimal = ZERO

    def as_fixed_expenses(self) -> List[FixedExpense]:
        """Return one housing expense per non-zero cost field."""
        expenses = []
        for name, label in HOUSE_COST_LABELS:
            amount = getattr(self, name)
            if amount:
                expenses.append(FixedExpense(description=label, amount=amount, category="housing"))
        return expenses


@dataclass
class House:
    """A house option: purchase terms, its housing loan and running costs."""

    id: str
    name: str
    housing_loan: Loan
    purchase: HousePurchase = field(default_factory=HousePurchase)
    monthly_costs: HouseMonthlyCosts = field(default_factory=HouseMonthlyCosts)

    def as_housing_loan(self) -> HousingLoan:
        """The housing loan with the purchase equity attached as capital."""
        loan = self.housing_loan
        return HousingLoan(
            description=loan.description,
            loan_amount=loan.loan_amount,
            interest_rate=loan.interest_rate,
            term_years=loan.term_years,
            terms_per_year=loan.terms_per_year,
            start_date=loan.start_date,
            monthly_fee=loan.monthly_fee,
            capital=self.purchase.equity_used,
        )


@dataclass
class EconomyData:
    """The household economy: the aggregate every calculation starts from."""

    incomes: List[Income] = field(default_factory=list)
    loans: List[Loan] = field(default_factory=list)  # non-housing loans
    fixed_expenses: List[FixedExpense] = field(default_factory=list)
    living_costs: List[LivingCost] = field(default_factory=list)
    personal_equity: Decimal = ZERO
    houses: List[House] = field(default_factory=list)
    active_house_id: str = ""

    def active_house(self) -> Optional[House]:
        for house in self.houses:
            if house.id == self.active_house_id:
                return house
        return None

    def all_loans(self) -> List[Loan]:
        """General loans followed by the active house's loan, if any."""
        loans = list(self.loans)
        house = self.active_house()
        if house is not None:
            loans.append(house.housing_loan)
        return loans

    def all_fixed_expenses(self) -> List[FixedExpense]:
        """Own fixed expenses plus the running costs of the active house."""
        expenses = list(self.fixed_expenses)
        house = self.active_house()
        if house is not None:
            expenses.extend(house.monthly_costs.as_fixed_expenses())
        return expenses


@dataclass
class AmortizationRow:
    """One term of an amortization schedule."""

    term: int
    date: date
    label: str
    payment: Decimal
    interest: Decimal
    principal: Decimal
    fee: Decimal
    balance: Decimal


@dataclass
class YearSummary:
    year: int
    total_interest: Decimal
    total_principal: Decimal
    total_fees: Decimal
    total_paid: Decimal
    end_balance: Decimal


@dataclass
class AmortizationTotals:
    total_interest: Decimal = ZERO
    total_principal: Decimal = ZERO
    total_fees: Decimal = ZERO
    total_paid: Decimal = ZERO


@dataclass
class AmortizationResult:
    """A full schedule: per-term rows, yearly rollups and totals.

    ``first_12_months`` is a slice of ``rows`` kept for convenience.
    """

    rows: List[AmortizationRow] = field(default_factory=list)
    first_12_months: List[AmortizationRow] = field(default_factory=list)
    year_summaries: List[YearSummary] = field(default_factory=list)
    totals: AmortizationTotals = field(default_factory=AmortizationTotals)


@dataclass
class LoanInterestRow:
    description: str
    paid_interest: Decimal
    tax_deduction: Decimal


@dataclass
class TaxBreakdown:
    """One year's tax computation with every intermediate value."""

    total_income: Decimal
    tax_free_income: Decimal
    total_paid_interest: Decimal
    total_interest_deduction: Decimal
    minstefradrag: Decimal
    total_deductions: Decimal
    alminnelig: Decimal
    skatt_alminnelig: Decimal
    trygdeavgift: Decimal
    step_taxes: List[Decimal]
    trinnskatt: Decimal
    total_taxes: Decimal
    net_annual_income: Decimal
    net_monthly_income: Decimal
    effective_tax_rate: Decimal
    loan_rows: List[LoanInterestRow] = field(default_factory=list)
    tax_year: int = 0


@dataclass
class MonthlyPlanRow:
    """One simulated month of the cash-flow projection."""

    month: str
    date: date
    income: Decimal
    expenses: Decimal
    balance: Decimal
    total_interest: Decimal
    total_principal: Decimal
    balance_plus_principal: Decimal


@dataclass
class EquityPoint:
    """Home value, remaining debt and equity at one point in time."""

    label: str
    month_offset: int
    date: date
    home_value: Decimal
    remaining_debt: Decimal
    equity: Decimal


# Fixed-horizon snapshots and monthly series rows share the same shape.
EquitySnapshot = EquityPoint
