"""Versioned personal-tax rules.

Bracket edges, rates and deduction limits change every tax year, so they are
kept as data here instead of inside the tax engine. ``load_tax_rules`` returns
the rules registered for a year; ``TaxRules.replace`` derives a variant with
some values overridden (useful for "what if" calculations and tests).
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Optional, Tuple

from .exceptions import UnknownTaxYearError


@dataclass(frozen=True)
class TaxBracket:
    """Marginal bracket: income between ``lower`` and ``upper`` taxed at ``rate``."""

    lower: Decimal
    upper: Optional[Decimal]  # None means unbounded
    rate: Decimal

    def amount_within(self, income: Decimal) -> Decimal:
        top = income if self.upper is None else min(income, self.upper)
        return max(top - self.lower, Decimal("0"))

    def tax(self, income: Decimal) -> Decimal:
        return self.amount_within(income) * self.rate


@dataclass(frozen=True)
class TaxRules:
    year: int
    general_rate: Decimal  # on alminnelig inntekt (net base)
    social_security_rate: Decimal  # trygdeavgift, on gross income
    interest_deduction_rate: Decimal
    standard_deduction_rate: Decimal  # minstefradrag share of income
    standard_deduction_cap: Decimal
    step_brackets: Tuple[TaxBracket, ...]

    def replace(self, **changes) -> "TaxRules":
        return dataclasses.replace(self, **changes)


TAX_RULES_2025 = TaxRules(
    year=2025,
    general_rate=Decimal("0.1772"),
    social_security_rate=Decimal("0.077"),
    interest_deduction_rate=Decimal("0.22"),
    standard_deduction_rate=Decimal("0.46"),
    standard_deduction_cap=Decimal("92000"),
    step_brackets=(
        TaxBracket(Decimal("217400"), Decimal("306050"), Decimal("0.017")),
        TaxBracket(Decimal("306050"), Decimal("697150"), Decimal("0.04")),
        TaxBracket(Decimal("697150"), Decimal("942400"), Decimal("0.137")),
        TaxBracket(Decimal("942400"), Decimal("1410750"), Decimal("0.167")),
        TaxBracket(Decimal("1410750"), None, Decimal("0.177")),
    ),
)

_REGISTRY: Dict[int, TaxRules] = {TAX_RULES_2025.year: TAX_RULES_2025}

DEFAULT_TAX_YEAR = TAX_RULES_2025.year


def register_tax_rules(rules: TaxRules) -> None:
    _REGISTRY[rules.year] = rules


def available_tax_years() -> Tuple[int, ...]:
    return tuple(sorted(_REGISTRY))


def load_tax_rules(year: int = DEFAULT_TAX_YEAR) -> TaxRules:
    try:
        return _REGISTRY[year]
    except KeyError:
        raise UnknownTaxYearError(
            f"No tax rules for {year}; available: {', '.join(map(str, available_tax_years()))}"
        ) from None
