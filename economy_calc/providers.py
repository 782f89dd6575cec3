"""Shaping of payloads from the listing and reference-budget services.

The services themselves (fetching a listing page and extracting fields with a
language model, querying the household reference budget) live outside this
package. These helpers turn their already-fetched payloads into economy
records. Individual fields are coerced leniently (missing or non-numeric
amounts become 0, a missing growth rate becomes 2 %), but a payload that does
not have the expected structure raises ``ProviderResponseError``.
"""

from __future__ import annotations

import logging
import uuid
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional

from .data_models import House, HouseMonthlyCosts, HousePurchase, LivingCost, Loan
from .exceptions import ProviderResponseError
from .utils import ZERO, to_amount, to_decimal, to_int

logger = logging.getLogger(__name__)

DEFAULT_GROWTH_PCT = Decimal("2")
DEFAULT_HOUSING_RATE = Decimal("4.5")
DEFAULT_HOUSING_TERM_YEARS = 25
DEFAULT_BUDGET_YEAR = "2025"

BUDGET_NUMBER_FIELDS = (
    "inntekt",
    "antall_biler",
    "antall_elbiler",
    "alder0",
    "barnehage0",
    "sfo0",
    "sfogratis0",
    "gravid0",
    "student0",
    "pensjonist0",
)
BUDGET_SECTIONS = ("individspesifikke", "husholdsspesifikke")


def house_from_listing(record: Mapping[str, Any], today: Optional[date] = None, house_id: Optional[str] = None) -> House:
    """Build a house option from an extracted listing record.

    Common debt is folded into the closing costs. The housing loan covers the
    price plus closing costs (no equity allocated yet) at a default rate.
    """
    if not isinstance(record, Mapping):
        raise ProviderResponseError("Listing extraction did not return an object")
    today = today or date.today()

    price = to_amount(record.get("price"))
    closing_costs = to_amount(record.get("closingCosts"))
    common_debt = to_amount(record.get("commonDebt"))
    growth = to_decimal(record.get("expectedGrowthPct"), DEFAULT_GROWTH_PCT)

    purchase = HousePurchase(
        price=price,
        equity_used=ZERO,
        expected_growth_pct=growth,
        closing_costs=closing_costs + common_debt,
    )
    costs = HouseMonthlyCosts(
        hoa=to_amount(record.get("hoa")),
        electricity=to_amount(record.get("electricity")),
        internet=to_amount(record.get("internet")),
        insurance=to_amount(record.get("insurance")),
        property_tax=to_amount(record.get("propertyTax")),
        maintenance=to_amount(record.get("maintenance")),
        other=to_amount(record.get("other")),
    )
    loan_amount = price - purchase.equity_used + closing_costs
    name = str(record.get("name") or "").strip() or "Finn-bolig"

    return House(
        id=house_id or str(uuid.uuid4()),
        name=name,
        purchase=purchase,
        monthly_costs=costs,
        housing_loan=Loan(
            description="Boliglån",
            loan_amount=max(loan_amount, ZERO),
            interest_rate=DEFAULT_HOUSING_RATE,
            term_years=DEFAULT_HOUSING_TERM_YEARS,
            terms_per_year=12,
            start_date=today,
        ),
    )


def normalize_budget_query(fields: Mapping[str, Any]) -> Dict[str, str]:
    """Normalize the demographic inputs for a reference-budget lookup."""
    query = {"select_year": str(fields.get("select_year") or DEFAULT_BUDGET_YEAR)}
    for name in BUDGET_NUMBER_FIELDS:
        query[name] = str(max(to_int(fields.get(name)), 0))
    query["kjonn0"] = "k" if fields.get("kjonn0") == "k" else "m"
    # The service only accepts Norwegian
    query["lang"] = "no"
    return query


def living_costs_from_budget(payload: Any) -> List[LivingCost]:
    """Turn a reference-budget response into monthly living costs.

    Items with a zero amount are dropped. Descriptions come from
    ``utgifterBeskrivelser`` and fall back to the item key.
    """
    if not isinstance(payload, Mapping) or not isinstance(payload.get("utgifter"), Mapping):
        logger.warning("Reference budget payload without expense section")
        raise ProviderResponseError("Reference budget response has no 'utgifter' section")

    expenses = payload["utgifter"]
    descriptions = payload.get("utgifterBeskrivelser") or {}
    costs: List[LivingCost] = []
    for section in BUDGET_SECTIONS:
        items = expenses.get(section) or {}
        if not isinstance(items, Mapping):
            raise ProviderResponseError(f"Reference budget section '{section}' is not an object")
        labels = descriptions.get(section) or {}
        for key, value in items.items():
            amount = to_amount(value)
            if not amount:
                continue
            label = labels.get(key) if isinstance(labels, Mapping) else None
            description = label.get("beskrivelse") if isinstance(label, Mapping) else None
            costs.append(LivingCost(description=description or key, amount=amount))
    return costs
