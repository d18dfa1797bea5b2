"""Side-by-side payoff projections.

``compare_extra_payments`` answers "what does another $50 a month buy me?"
by running the simulator once per extra amount and measuring each plan
against the minimum-only baseline. ``compare_strategies`` runs avalanche and
snowball on the same inputs.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Iterable, Sequence

from ..money import ZERO, AmountLike, to_decimal
from .payoff import DEFAULT_HORIZON_MONTHS, Debt, PayoffPlan, SimulationInput, simulate


@dataclass(frozen=True, slots=True)
class PlanComparison:
    """A plan measured against the minimum-only baseline."""

    plan: PayoffPlan
    months_saved: int
    interest_saved: Decimal

    def to_dict(self) -> dict[str, Any]:
        data = self.plan.to_dict()
        data["months_saved"] = self.months_saved
        data["interest_saved"] = int(self.interest_saved)
        return data


@dataclass(frozen=True, slots=True)
class StrategyComparison:
    avalanche: PayoffPlan
    snowball: PayoffPlan

    @property
    def recommended(self) -> str:
        """Cheaper strategy by interest paid; ties go to avalanche."""

        if self.snowball.interest_cents < self.avalanche.interest_cents:
            return "snowball"
        return "avalanche"

    @property
    def interest_difference(self) -> Decimal:
        return abs(self.avalanche.total_interest_paid - self.snowball.total_interest_paid)

    def to_dict(self) -> dict[str, Any]:
        return {
            "avalanche": self.avalanche.to_dict(),
            "snowball": self.snowball.to_dict(),
            "recommended": self.recommended,
            "interest_difference": int(self.interest_difference),
        }


def compare_extra_payments(
    debts: Sequence[Debt],
    extras: Iterable[AmountLike],
    *,
    method: str = "avalanche",
    today: date | None = None,
    horizon_months: int = DEFAULT_HORIZON_MONTHS,
) -> list[PlanComparison]:
    """Simulate each extra amount and report savings over paying minimums only."""

    baseline = simulate(
        SimulationInput(debts=tuple(debts), extra_monthly_payment=ZERO, method=method),
        today=today,
        horizon_months=horizon_months,
    )
    amounts = sorted({to_decimal(extra, field="extras") for extra in extras})

    results: list[PlanComparison] = []
    for amount in amounts:
        if amount == 0:
            plan = baseline
        else:
            plan = simulate(
                SimulationInput(debts=tuple(debts), extra_monthly_payment=amount, method=method),
                today=today,
                horizon_months=horizon_months,
            )
        results.append(
            PlanComparison(
                plan=plan,
                months_saved=baseline.months_to_payoff - plan.months_to_payoff,
                interest_saved=baseline.total_interest_paid - plan.total_interest_paid,
            )
        )
    return results


def compare_strategies(
    debts: Sequence[Debt],
    extra_payment: AmountLike = ZERO,
    *,
    today: date | None = None,
    horizon_months: int = DEFAULT_HORIZON_MONTHS,
) -> StrategyComparison:
    plans = {
        method: simulate(
            SimulationInput(debts=tuple(debts), extra_monthly_payment=extra_payment, method=method),
            today=today,
            horizon_months=horizon_months,
        )
        for method in ("avalanche", "snowball")
    }
    return StrategyComparison(avalanche=plans["avalanche"], snowball=plans["snowball"])
