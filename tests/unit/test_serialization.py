"""Unit tests for economy documents and result serialization"""

import json
from datetime import date
from decimal import Decimal

import pytest

from economy_calc.data_models import HousingLoan
from economy_calc.engine import compute_amortization
from economy_calc.exceptions import InvalidEconomyDataError
from economy_calc.serialization import (
    amortization_to_dict,
    economy_from_dict,
    economy_to_dict,
    equity_point_to_dict,
    housing_loan_from_dict,
    load_economy,
    loan_from_dict,
    tax_breakdown_to_dict,
)
from economy_calc.equity import equity_series
from economy_calc.taxes import calculate_economy_taxes


def test_economy_from_document(economy_document):
    economy = economy_from_dict(economy_document)

    assert [i.amount for i in economy.incomes] == [Decimal("620000"), Decimal("35000"), Decimal("24000")]
    assert economy.incomes[2].tax_free is True
    assert economy.loans[0].interest_rate == Decimal("6.5")
    assert economy.loans[0].start_date == date(2024, 1, 1)
    assert economy.personal_equity == Decimal("100000")

    house = economy.active_house()
    assert house.name == "Starter home"
    assert house.purchase.equity_used == Decimal("50000")
    assert house.housing_loan.monthly_fee == Decimal("25")
    assert house.monthly_costs.hoa == Decimal("2000")
    assert house.monthly_costs.internet == 0


def test_economy_helpers_include_active_house(economy_document):
    economy = economy_from_dict(economy_document)

    assert [loan.description for loan in economy.all_loans()] == ["Car loan", "Boliglån"]
    expenses = economy.all_fixed_expenses()
    assert [(e.description, e.category) for e in expenses] == [
        ("Insurance", "personal"),
        ("Felleskost", "housing"),
        ("Strøm", "housing"),
    ]


def test_inactive_house_is_ignored(economy_document):
    economy_document["activeHouseId"] = "other"
    economy = economy_from_dict(economy_document)

    assert economy.active_house() is None
    assert [loan.description for loan in economy.all_loans()] == ["Car loan"]
    assert len(economy.all_fixed_expenses()) == 1


def test_document_matches_hand_built_economy(economy_document, tax_economy, cache):
    """The stored layout and the fixture describe the same household"""
    from_document = calculate_economy_taxes(economy_from_dict(economy_document), cache=cache)
    from_fixture = calculate_economy_taxes(tax_economy, cache=cache)

    assert from_document.total_taxes == from_fixture.total_taxes


def test_legacy_fixed_expenses_are_merged(economy_document):
    economy_document["fixedExpenses"] = [{"description": "Parking", "amount": 600, "category": "housing"}]
    economy = economy_from_dict(economy_document)

    assert [e.description for e in economy.fixed_expenses] == ["Insurance", "Parking"]


def test_loan_defaults():
    loan = loan_from_dict({"description": "Lån", "loanAmount": "abc", "termYears": 3}, today=date(2025, 2, 3))

    assert loan.loan_amount == 0
    assert loan.terms_per_year == 12
    assert loan.monthly_fee == 0
    assert loan.start_date == date(2025, 2, 3)


def test_housing_loan_capital():
    loan = housing_loan_from_dict(
        {"loanAmount": 300000, "interestRate": 4, "termYears": 5, "startDate": "2024-03", "capital": 100000}
    )

    assert isinstance(loan, HousingLoan)
    assert loan.base_home_value == Decimal("400000")
    assert loan.start_date == date(2024, 3, 1)


@pytest.mark.parametrize(
    "document",
    [
        [],
        {"incomes": {"source": "Salary"}},
        {"loans": ["not a loan"]},
        {"loans": [{"startDate": "someday"}]},
        {"personalFixedExpenses": [{"description": "Gym", "amount": 300, "category": "leisure"}]},
        {"houses": [{"id": "h", "purchase": "cheap"}]},
    ],
)
def test_invalid_documents(document):
    with pytest.raises(InvalidEconomyDataError):
        economy_from_dict(document)


def test_document_round_trip(economy_document):
    economy = economy_from_dict(economy_document)

    assert economy_from_dict(economy_to_dict(economy)) == economy


def test_load_economy(tmp_path, economy_document):
    path = tmp_path / "economy.json"
    path.write_text(json.dumps(economy_document), encoding="utf-8")

    assert load_economy(path).active_house_id == "test-house-1"

    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(InvalidEconomyDataError):
        load_economy(path)


def test_amortization_to_dict(housing_loan):
    data = amortization_to_dict(compute_amortization(housing_loan))

    assert len(data["monthly"]) == 120
    assert data["monthly"][0]["date"] == "jan 2024"
    assert data["monthly"][0]["interest"] == 960.0
    assert [y["year"] for y in data["yearGroups"]] == list(range(2024, 2034))
    assert data["totals"]["totalFees"] == 3000.0
    json.dumps(data)


def test_tax_breakdown_to_dict(tax_economy, cache):
    data = tax_breakdown_to_dict(calculate_economy_taxes(tax_economy, cache=cache))

    assert data["taxYear"] == 2025
    assert data["totalIncome"] == 655000.0
    assert len(data["stepTaxes"]) == 5
    assert [r["description"] for r in data["loanRows"]] == ["Car loan", "Boliglån"]
    json.dumps(data)


def test_equity_point_to_dict(equity_loan, cache):
    data = equity_point_to_dict(equity_series(equity_loan, Decimal("3"), 1, cache)[0])

    assert data["label"] == "mar 2024"
    assert data["date"] == "2024-03"
    assert data["monthOffset"] == 1
