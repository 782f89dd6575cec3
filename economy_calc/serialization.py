"""Conversion between economy documents and dataclasses.

Economy documents use the camelCase JSON layout of the browser store
(``loanAmount``, ``termsPerYear``, ``activeHouseId``...). Monetary fields are
coerced with :func:`economy_calc.utils.to_decimal`; structural problems (a
record that is not an object, an unparsable date, an unknown expense category)
raise ``InvalidEconomyDataError``.

The ``*_to_dict`` helpers turn results into JSON-serialisable dictionaries
with floats, as used by the CLI exports and the web API.
"""

from __future__ import annotations

import json
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from .data_models import (
    EXPENSE_CATEGORIES,
    AmortizationResult,
    EconomyData,
    EquityPoint,
    FixedExpense,
    House,
    HouseMonthlyCosts,
    HousePurchase,
    HousingLoan,
    Income,
    LivingCost,
    Loan,
    MonthlyPlanRow,
    TaxBreakdown,
)
from .exceptions import InvalidEconomyDataError
from .utils import parse_date, to_decimal, to_int

HOUSE_COST_FIELDS = {
    "hoa": "hoa",
    "electricity": "electricity",
    "internet": "internet",
    "insurance": "insurance",
    "propertyTax": "property_tax",
    "maintenance": "maintenance",
    "other": "other",
}


def _require_mapping(value: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise InvalidEconomyDataError(f"{what} must be an object, got {type(value).__name__}")
    return value


def _list(data: Mapping[str, Any], key: str) -> List[Any]:
    value = data.get(key) or []
    if not isinstance(value, list):
        raise InvalidEconomyDataError(f"'{key}' must be a list")
    return value


def _date(value: Any, what: str, default: Optional[date] = None) -> date:
    if value in (None, "") and default is not None:
        return default
    try:
        return parse_date(value)
    except ValueError as exc:
        raise InvalidEconomyDataError(f"{what}: invalid date {value!r}") from exc


def loan_from_dict(data: Mapping[str, Any], today: Optional[date] = None) -> Loan:
    data = _require_mapping(data, "loan")
    return Loan(
        description=str(data.get("description") or ""),
        loan_amount=to_decimal(data.get("loanAmount")),
        interest_rate=to_decimal(data.get("interestRate")),
        term_years=to_int(data.get("termYears")),
        terms_per_year=to_int(data.get("termsPerYear"), 12),
        monthly_fee=to_decimal(data.get("monthlyFee")),
        start_date=_date(data.get("startDate"), "loan start", today or date.today()),
    )


def housing_loan_from_dict(data: Mapping[str, Any], today: Optional[date] = None) -> HousingLoan:
    loan = loan_from_dict(data, today)
    return HousingLoan(
        description=loan.description,
        loan_amount=loan.loan_amount,
        interest_rate=loan.interest_rate,
        term_years=loan.term_years,
        terms_per_year=loan.terms_per_year,
        monthly_fee=loan.monthly_fee,
        start_date=loan.start_date,
        capital=to_decimal(data.get("capital")),
    )


def _fixed_expense_from_dict(data: Mapping[str, Any]) -> FixedExpense:
    data = _require_mapping(data, "fixed expense")
    category = data.get("category") or "personal"
    if category not in EXPENSE_CATEGORIES:
        raise InvalidEconomyDataError(f"Unknown expense category {category!r}")
    return FixedExpense(
        description=str(data.get("description") or ""),
        amount=to_decimal(data.get("amount")),
        category=category,
    )


def house_from_dict(data: Mapping[str, Any], today: Optional[date] = None) -> House:
    data = _require_mapping(data, "house")
    purchase = _require_mapping(data.get("purchase") or {}, "purchase")
    costs = _require_mapping(data.get("houseMonthlyCosts") or {}, "houseMonthlyCosts")
    return House(
        id=str(data.get("id") or ""),
        name=str(data.get("name") or ""),
        housing_loan=loan_from_dict(data.get("housingLoan") or {}, today),
        purchase=HousePurchase(
            price=to_decimal(purchase.get("price")),
            equity_used=to_decimal(purchase.get("equityUsed")),
            expected_growth_pct=to_decimal(purchase.get("expectedGrowthPct"), Decimal("2")),
            closing_costs=to_decimal(purchase.get("closingCosts")),
        ),
        monthly_costs=HouseMonthlyCosts(
            **{attr: to_decimal(costs.get(key)) for key, attr in HOUSE_COST_FIELDS.items()}
        ),
    )


def economy_from_dict(data: Mapping[str, Any], today: Optional[date] = None) -> EconomyData:
    """Build ``EconomyData`` from a stored document.

    A legacy top-level ``fixedExpenses`` list (mixed categories) is merged with
    ``personalFixedExpenses``.
    """
    data = _require_mapping(data, "economy")
    incomes = [
        Income(
            source=str(_require_mapping(item, "income").get("source") or ""),
            amount=to_decimal(item.get("amount")),
            tax_free=bool(item.get("taxFree")),
        )
        for item in _list(data, "incomes")
    ]
    fixed = [
        _fixed_expense_from_dict(item)
        for item in _list(data, "personalFixedExpenses") + _list(data, "fixedExpenses")
    ]
    living = [
        LivingCost(
            description=str(_require_mapping(item, "living cost").get("description") or ""),
            amount=to_decimal(item.get("amount")),
        )
        for item in _list(data, "livingCosts")
    ]
    return EconomyData(
        incomes=incomes,
        loans=[loan_from_dict(item, today) for item in _list(data, "loans")],
        fixed_expenses=fixed,
        living_costs=living,
        personal_equity=to_decimal(data.get("personalEquity")),
        houses=[house_from_dict(item, today) for item in _list(data, "houses")],
        active_house_id=str(data.get("activeHouseId") or ""),
    )


def load_economy(path: Path, today: Optional[date] = None) -> EconomyData:
    """Read an economy document from a JSON file."""
    with Path(path).open("r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as exc:
            raise InvalidEconomyDataError(f"{path} is not valid JSON: {exc}") from exc
    return economy_from_dict(data, today)


def loan_to_dict(loan: Loan) -> Dict[str, Any]:
    data = {
        "description": loan.description,
        "loanAmount": float(loan.loan_amount),
        "interestRate": float(loan.interest_rate),
        "termYears": loan.term_years,
        "termsPerYear": loan.terms_per_year,
        "monthlyFee": float(loan.monthly_fee),
        "startDate": loan.start_date.isoformat(),
    }
    if isinstance(loan, HousingLoan):
        data["capital"] = float(loan.capital)
    return data


def economy_to_dict(economy: EconomyData) -> Dict[str, Any]:
    """Inverse of :func:`economy_from_dict` (all fixed expenses are written as personal list)."""
    return {
        "incomes": [
            {"source": i.source, "amount": float(i.amount), "taxFree": i.tax_free} for i in economy.incomes
        ],
        "loans": [loan_to_dict(loan) for loan in economy.loans],
        "personalFixedExpenses": [
            {"description": f.description, "amount": float(f.amount), "category": f.category}
            for f in economy.fixed_expenses
        ],
        "livingCosts": [{"description": c.description, "amount": float(c.amount)} for c in economy.living_costs],
        "personalEquity": float(economy.personal_equity),
        "houses": [
            {
                "id": h.id,
                "name": h.name,
                "purchase": {
                    "price": float(h.purchase.price),
                    "equityUsed": float(h.purchase.equity_used),
                    "expectedGrowthPct": float(h.purchase.expected_growth_pct),
                    "closingCosts": float(h.purchase.closing_costs),
                },
                "housingLoan": loan_to_dict(h.housing_loan),
                "houseMonthlyCosts": {
                    key: float(getattr(h.monthly_costs, attr)) for key, attr in HOUSE_COST_FIELDS.items()
                },
            }
            for h in economy.houses
        ],
        "activeHouseId": economy.active_house_id,
    }


def amortization_to_dict(result: AmortizationResult) -> Dict[str, Any]:
    return {
        "monthly": [
            {
                "term": r.term,
                "date": r.label,
                "payment": float(r.payment),
                "interest": float(r.interest),
                "principal": float(r.principal),
                "fee": float(r.fee),
                "balance": float(r.balance),
            }
            for r in result.rows
        ],
        "yearGroups": [
            {
                "year": y.year,
                "totalInterest": float(y.total_interest),
                "totalPrincipal": float(y.total_principal),
                "totalFees": float(y.total_fees),
                "totalPaid": float(y.total_paid),
                "endBalance": float(y.end_balance),
            }
            for y in result.year_summaries
        ],
        "totals": {
            "totalInterest": float(result.totals.total_interest),
            "totalPrincipal": float(result.totals.total_principal),
            "totalFees": float(result.totals.total_fees),
            "totalPaid": float(result.totals.total_paid),
        },
    }


def tax_breakdown_to_dict(tax: TaxBreakdown) -> Dict[str, Any]:
    return {
        "taxYear": tax.tax_year,
        "totalIncome": float(tax.total_income),
        "taxFreeIncome": float(tax.tax_free_income),
        "totalPaidInterest": float(tax.total_paid_interest),
        "totalInterestDeduction": float(tax.total_interest_deduction),
        "minstefradrag": float(tax.minstefradrag),
        "totalDeductions": float(tax.total_deductions),
        "alminnelig": float(tax.alminnelig),
        "skattAlminnelig": float(tax.skatt_alminnelig),
        "trygdeavgift": float(tax.trygdeavgift),
        "trinnskatt": float(tax.trinnskatt),
        "stepTaxes": [float(s) for s in tax.step_taxes],
        "totalTaxes": float(tax.total_taxes),
        "netAnnualIncome": float(tax.net_annual_income),
        "netMonthlyIncome": float(tax.net_monthly_income),
        "effectiveTaxRate": float(tax.effective_tax_rate),
        "loanRows": [
            {
                "description": r.description,
                "paidInterest": float(r.paid_interest),
                "taxDeduction": float(r.tax_deduction),
            }
            for r in tax.loan_rows
        ],
    }


def plan_row_to_dict(row: MonthlyPlanRow) -> Dict[str, Any]:
    return {
        "month": row.month,
        "income": float(row.income),
        "expenses": float(row.expenses),
        "balance": float(row.balance),
        "totalInterest": float(row.total_interest),
        "totalPrincipal": float(row.total_principal),
        "balancePlusPrincipal": float(row.balance_plus_principal),
    }


def equity_point_to_dict(point: EquityPoint) -> Dict[str, Any]:
    return {
        "label": point.label,
        "monthOffset": point.month_offset,
        "date": point.date.strftime("%Y-%m"),
        "homeValue": float(point.home_value),
        "remainingDebt": float(point.remaining_debt),
        "equity": float(point.equity),
    }
