"""Memoization of amortization schedules.

Schedules are looked up per named loan many times while rendering a single
view (taxes, the monthly plan, equity tables), so every read goes through an
``AmortizationCache``. Keys are built from every field that identifies a loan
instance; changing any of them produces a miss and a fresh computation.
Results are shared and must be treated as read-only.

A cache may be bounded with ``max_entries``; the least recently used schedule
is evicted first.
"""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from typing import Dict, Optional

from .data_models import AmortizationResult, Loan
from .engine import compute_amortization
from .utils import first_of_month, to_decimal

logger = logging.getLogger(__name__)


def build_loan_cache_key(loan: Loan, include_description: bool = True) -> str:
    """Return a deterministic key for ``loan``.

    Numbers are normalized so ``Decimal("4.50")`` and ``Decimal("4.5")`` map to
    the same entry. Only the start month counts, as schedules begin on the 1st.
    """
    parts = [
        to_decimal(loan.loan_amount).normalize(),
        to_decimal(loan.interest_rate).normalize(),
        loan.term_years,
        loan.terms_per_year,
        to_decimal(loan.monthly_fee).normalize(),
        first_of_month(loan.start_date).isoformat(),
    ]
    if include_description:
        parts.insert(0, loan.description)
    return "|".join(str(p) for p in parts)


class AmortizationCache:
    """Thread-safe map from loan key to computed schedule.

    Unbounded unless ``max_entries`` is given.
    """

    def __init__(self, *, include_description: bool = True, max_entries: Optional[int] = None) -> None:
        if max_entries is not None and max_entries < 1:
            raise ValueError("max_entries must be positive")
        self._entries: "OrderedDict[str, AmortizationResult]" = OrderedDict()
        self._lock = threading.Lock()
        self._include_description = include_description
        self.max_entries = max_entries
        self.hits = 0
        self.misses = 0
        self.evictions = 0

    def get(self, loan: Loan) -> AmortizationResult:
        key = build_loan_cache_key(loan, self._include_description)
        with self._lock:
            cached = self._entries.get(key)
            if cached is not None:
                self._entries.move_to_end(key)
                self.hits += 1
                return cached
        # Computed outside the lock; a racing thread computes the same value.
        result = compute_amortization(loan)
        with self._lock:
            self.misses += 1
            cached = self._entries.setdefault(key, result)
            self._entries.move_to_end(key)
            if self.max_entries is not None:
                while len(self._entries) > self.max_entries:
                    self._entries.popitem(last=False)
                    self.evictions += 1
        logger.debug("Amortization computed", extra={"cache_key": key, "terms": len(result.rows)})
        return cached

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self.hits = 0
            self.misses = 0
            self.evictions = 0

    def stats(self) -> Dict[str, int]:
        with self._lock:
            return {
                "entries": len(self._entries),
                "hits": self.hits,
                "misses": self.misses,
                "evictions": self.evictions,
            }

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


_default_cache = AmortizationCache()


def default_cache() -> AmortizationCache:
    return _default_cache


def get_or_compute_amortization(loan: Loan) -> AmortizationResult:
    """Cached variant of :func:`compute_amortization` using the shared cache."""
    return _default_cache.get(loan)
