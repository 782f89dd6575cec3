"""Pytest fixtures for testing"""

import json
from datetime import date
from decimal import Decimal

import pytest

from economy_calc.cache import AmortizationCache
from economy_calc.data_models import (
    EconomyData,
    FixedExpense,
    House,
    HouseMonthlyCosts,
    HousePurchase,
    HousingLoan,
    Income,
    LivingCost,
    Loan,
)
from economy_calc.settings import get_settings


@pytest.fixture
def cache() -> AmortizationCache:
    """Fresh cache so tests never share schedules"""
    return AmortizationCache()


@pytest.fixture
def housing_loan() -> Loan:
    return Loan(
        description="Boliglån",
        loan_amount=Decimal("320000"),
        interest_rate=Decimal("3.6"),
        term_years=10,
        terms_per_year=12,
        monthly_fee=Decimal("25"),
        start_date=date(2024, 1, 1),
    )


@pytest.fixture
def car_loan() -> Loan:
    return Loan(
        description="Car loan",
        loan_amount=Decimal("60000"),
        interest_rate=Decimal("6.5"),
        term_years=5,
        terms_per_year=12,
        start_date=date(2024, 1, 1),
    )


@pytest.fixture
def tax_economy(housing_loan: Loan, car_loan: Loan) -> EconomyData:
    """Two taxable incomes, one tax-free, a car loan and an active starter home"""
    house = House(
        id="test-house-1",
        name="Starter home",
        housing_loan=housing_loan,
        purchase=HousePurchase(
            price=Decimal("370000"),
            equity_used=Decimal("50000"),
            expected_growth_pct=Decimal("2"),
        ),
    )
    return EconomyData(
        incomes=[
            Income("Salary", Decimal("620000")),
            Income("Bonus", Decimal("35000")),
            Income("Child support", Decimal("24000"), tax_free=True),
        ],
        loans=[car_loan],
        personal_equity=Decimal("100000"),
        houses=[house],
        active_house_id="test-house-1",
    )


@pytest.fixture
def plan_economy() -> EconomyData:
    """Condo with monthly costs, a student loan, fixed and living costs"""
    condo_loan = Loan(
        description="Condo loan",
        loan_amount=Decimal("400000"),
        interest_rate=Decimal("3.2"),
        term_years=8,
        terms_per_year=12,
        monthly_fee=Decimal("15"),
        start_date=date(2024, 1, 1),
    )
    student_loan = Loan(
        description="Student loan",
        loan_amount=Decimal("120000"),
        interest_rate=Decimal("2.5"),
        term_years=10,
        terms_per_year=12,
        start_date=date(2024, 1, 1),
    )
    house = House(
        id="test-house-1",
        name="Test Condo",
        housing_loan=condo_loan,
        purchase=HousePurchase(price=Decimal("480000"), equity_used=Decimal("80000")),
        monthly_costs=HouseMonthlyCosts(hoa=Decimal("2000"), electricity=Decimal("800"), internet=Decimal("400")),
    )
    return EconomyData(
        incomes=[Income("Salary", Decimal("540000")), Income("Freelance", Decimal("60000"))],
        loans=[student_loan],
        fixed_expenses=[FixedExpense("Insurance", Decimal("1100"), "personal")],
        living_costs=[LivingCost("Groceries", Decimal("4500")), LivingCost("Transport", Decimal("1000"))],
        personal_equity=Decimal("100000"),
        houses=[house],
        active_house_id="test-house-1",
    )


@pytest.fixture
def equity_loan() -> HousingLoan:
    return HousingLoan(
        description="Boliglån",
        loan_amount=Decimal("300000"),
        interest_rate=Decimal("4"),
        term_years=5,
        terms_per_year=12,
        start_date=date(2024, 3, 15),
        capital=Decimal("100000"),
    )


@pytest.fixture
def economy_document() -> dict:
    """Economy in the stored camelCase layout"""
    return {
        "incomes": [
            {"source": "Salary", "amount": 620000},
            {"source": "Bonus", "amount": "35000"},
            {"source": "Child support", "amount": 24000, "taxFree": True},
        ],
        "loans": [
            {
                "description": "Car loan",
                "loanAmount": 60000,
                "interestRate": 6.5,
                "termYears": 5,
                "termsPerYear": 12,
                "startDate": "2024-01-01",
            }
        ],
        "personalFixedExpenses": [{"description": "Insurance", "amount": 1100, "category": "personal"}],
        "livingCosts": [{"description": "Groceries", "amount": 4500}],
        "personalEquity": 100000,
        "houses": [
            {
                "id": "test-house-1",
                "name": "Starter home",
                "purchase": {"price": 370000, "equityUsed": 50000, "expectedGrowthPct": 2, "closingCosts": 0},
                "housingLoan": {
                    "description": "Boliglån",
                    "loanAmount": 320000,
                    "interestRate": 3.6,
                    "termYears": 10,
                    "termsPerYear": 12,
                    "monthlyFee": 25,
                    "startDate": "2024-01-01",
                },
                "houseMonthlyCosts": {"hoa": 2000, "electricity": 800},
            }
        ],
        "activeHouseId": "test-house-1",
    }


@pytest.fixture
def quiet_settings(monkeypatch):
    """Settings from a clean environment with plain WARNING logging and in-memory storage"""
    monkeypatch.setenv("ECONOMY_CALC_LOG_LEVEL", "WARNING")
    monkeypatch.setenv("ECONOMY_CALC_LOG_JSON", "false")
    monkeypatch.setenv("ECONOMY_CALC_DATABASE_URL", "sqlite://")
    get_settings.cache_clear()
    yield get_settings()
    get_settings.cache_clear()


@pytest.fixture
def economy_file(tmp_path, economy_document):
    path = tmp_path / "economy.json"
    path.write_text(json.dumps(economy_document, ensure_ascii=False), encoding="utf-8")
    return path
