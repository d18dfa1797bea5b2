"""Headline figures for a set of debts."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Iterable

from ..money import ZERO, to_cents
from .payoff import Debt


@dataclass(frozen=True, slots=True)
class DebtSummary:
    count: int
    total_debt: Decimal
    total_min_payments: Decimal
    weighted_apr: Decimal

    def to_dict(self) -> dict[str, Any]:
        return {
            "count": self.count,
            "total_debt": float(self.total_debt),
            "total_min_payments": float(self.total_min_payments),
            "weighted_apr": float(self.weighted_apr),
        }


def summarize_debts(debts: Iterable[Debt]) -> DebtSummary:
    """Return totals and the balance-weighted average APR.

    The weighted APR is zero when there is no outstanding balance.
    """

    items = list(debts)
    total_debt = sum((d.balance for d in items), ZERO)
    total_min = sum((d.min_payment for d in items), ZERO)
    if total_debt > 0:
        weighted = sum((d.interest_rate_apr * d.balance for d in items), ZERO) / total_debt
    else:
        weighted = ZERO
    return DebtSummary(
        count=len(items),
        total_debt=total_debt,
        total_min_payments=total_min,
        weighted_apr=to_cents(weighted),
    )
