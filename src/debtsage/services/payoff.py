"""Debt payoff amortization simulator.

Debts are projected month by month. Every open debt accrues one month of
interest and receives its minimum payment (capped at what is owed), then the
remaining payment capacity (the extra budget plus any minimums no longer
needed) goes to the single highest-priority debt that still has a balance.
The priority order is fixed before the first month: highest APR first for the
avalanche method, smallest balance first for the snowball method.

Amounts are Decimals rounded to cents, so balances never drift; APRs are
kept exactly as given. The run stops when every balance is at or below one
cent or when the planning horizon (600 months by default) is reached; the
latter is reported on the returned plan rather than raised.
"""

from __future__ import annotations

from calendar import monthrange
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any, Callable, Iterable, Mapping, Sequence

from ..exceptions import InvalidInputError
from ..logging_config import get_logger
from ..money import MAX_APR, ZERO, AmountLike, parse_decimal, round_whole, to_cents, to_decimal

logger = get_logger(__name__)

DEFAULT_HORIZON_MONTHS = 600
PAYOFF_EPSILON = Decimal("0.01")

DEBT_TYPES = ("credit_card", "personal_loan", "auto_loan", "student_loan", "other")

# Payoff methods and the one-line description shown next to them.
METHODS: dict[str, str] = {
    "avalanche": "highest APR first",
    "snowball": "smallest balance first",
}

# Input aliases accepted by ``Debt.from_mapping``; the first key is canonical.
_FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "interest_rate_apr": ("interest_rate_apr", "interestRateAPR", "interest", "apr"),
    "min_payment": ("min_payment", "minPayment", "minimum_payment"),
}


@dataclass(frozen=True, slots=True)
class Debt:
    """A debt as supplied by the caller; never modified by the simulator."""

    id: str
    name: str
    balance: Decimal
    interest_rate_apr: Decimal
    min_payment: Decimal
    type: str = "other"

    def __post_init__(self) -> None:
        object.__setattr__(self, "id", str(self.id))
        object.__setattr__(self, "name", str(self.name).strip() or f"Debt {self.id}")
        # APRs keep their full precision (6.875 stays 6.875); amounts are cents.
        amounts = {
            "balance": to_decimal(self.balance, field="balance"),
            "interest_rate_apr": parse_decimal(
                self.interest_rate_apr, field="interest_rate_apr", limit=MAX_APR
            ),
            "min_payment": to_decimal(self.min_payment, field="min_payment"),
        }
        for name, value in amounts.items():
            if value < 0:
                raise InvalidInputError(
                    f"{self.name}: {name.replace('_', ' ')} cannot be negative.", field=name
                )
            object.__setattr__(self, name, value)
        if self.type not in DEBT_TYPES:
            raise InvalidInputError(
                f"{self.name}: unknown debt type {self.type!r}.", field="type"
            )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Debt":
        """Build a debt from a plain record, accepting camelCase field names."""

        values: dict[str, Any] = {}
        for canonical, aliases in _FIELD_ALIASES.items():
            for key in aliases:
                if key in data:
                    values[canonical] = data[key]
                    break
            else:
                raise InvalidInputError(f"Missing required field {canonical!r}.", field=canonical)
        if "balance" not in data:
            raise InvalidInputError("Missing required field 'balance'.", field="balance")
        return cls(
            id=data.get("id", ""),
            name=data.get("name", ""),
            balance=data["balance"],
            type=data.get("type") or "other",
            **values,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "balance": float(self.balance),
            "interest_rate_apr": float(self.interest_rate_apr),
            "min_payment": float(self.min_payment),
            "type": self.type,
        }


@dataclass(frozen=True, slots=True)
class SimulationInput:
    """Debts plus the monthly budget available beyond their minimums."""

    debts: tuple[Debt, ...]
    extra_monthly_payment: Decimal = ZERO
    method: str = "avalanche"

    def __post_init__(self) -> None:
        object.__setattr__(self, "debts", tuple(self.debts))
        object.__setattr__(
            self,
            "extra_monthly_payment",
            to_decimal(self.extra_monthly_payment, field="extra_payment"),
        )


@dataclass(frozen=True, slots=True)
class RankedDebt:
    """A debt's position in the payoff order."""

    debt_id: str
    name: str
    rank: int
    interest_rate_apr: Decimal
    balance: Decimal
    type: str
    payoff_month: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "debt_id": self.debt_id,
            "name": self.name,
            "rank": self.rank,
            "interest_rate_apr": float(self.interest_rate_apr),
            "balance": float(self.balance),
            "type": self.type,
            "payoff_month": self.payoff_month,
        }


@dataclass(frozen=True, slots=True)
class PayoffPlan:
    """Result of a payoff simulation."""

    method: str
    extra_payment: Decimal
    total_interest_paid: Decimal
    months_to_payoff: int
    payoff_date: date
    order: tuple[RankedDebt, ...]
    horizon_exceeded: bool = False
    remaining_balance: Decimal = ZERO
    interest_cents: Decimal = field(default=ZERO, repr=False)

    def to_dict(self) -> dict[str, Any]:
        return {
            "method": self.method,
            "extra_payment": float(self.extra_payment),
            "total_interest_paid": int(self.total_interest_paid),
            "months_to_payoff": self.months_to_payoff,
            "payoff_date": self.payoff_date.isoformat(),
            "order": [entry.to_dict() for entry in self.order],
            "horizon_exceeded": self.horizon_exceeded,
            "remaining_balance": float(self.remaining_balance),
        }


@dataclass(slots=True)
class _WorkingDebt:
    debt: Debt
    balance: Decimal
    paid_off_month: int | None = None

    @property
    def monthly_rate(self) -> Decimal:
        return self.debt.interest_rate_apr / Decimal(100) / Decimal(12)


_SORT_KEYS: dict[str, Callable[[Debt], Any]] = {
    "avalanche": lambda debt: -debt.interest_rate_apr,
    "snowball": lambda debt: debt.balance,
}


def add_months(value: date, months: int) -> date:
    """Return ``value`` shifted by ``months``, clamping to the month's last day."""

    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    return value.replace(year=year, month=month, day=min(value.day, monthrange(year, month)[1]))


def priority_order(debts: Iterable[Debt], method: str = "avalanche") -> list[Debt]:
    """Return ``debts`` in the order extra payments are concentrated.

    ``sorted`` is stable, so debts with equal keys keep their input order.
    """

    try:
        key = _SORT_KEYS[method]
    except KeyError:
        raise InvalidInputError(
            f"Invalid debt payoff strategy {method!r}.", field="method"
        ) from None
    return sorted(debts, key=key)


def validate_input(sim: SimulationInput) -> None:
    """Raise :class:`InvalidInputError` when ``sim`` cannot be simulated."""

    if not sim.debts:
        raise InvalidInputError("no debts to simulate", field="debts")
    if sim.method not in _SORT_KEYS:
        raise InvalidInputError(f"Invalid debt payoff strategy {sim.method!r}.", field="method")
    if sim.extra_monthly_payment < 0:
        raise InvalidInputError("Extra payment cannot be negative.", field="extra_payment")

    seen: set[str] = set()
    for debt in sim.debts:
        if debt.id in seen:
            raise InvalidInputError(f"Duplicate debt id {debt.id!r}.", field="debts")
        seen.add(debt.id)

    capacity = sim.extra_monthly_payment + sum((d.min_payment for d in sim.debts), ZERO)
    if capacity <= 0 and any(d.balance > 0 for d in sim.debts):
        raise InvalidInputError("insufficient total payment", field="extra_payment")


def _pay_minimum(entry: _WorkingDebt) -> tuple[Decimal, Decimal]:
    """Accrue a month of interest and pay the minimum; return (paid, interest)."""

    interest = to_cents(entry.balance * entry.monthly_rate)
    payment = min(entry.debt.min_payment, entry.balance + interest)
    principal = max(ZERO, payment - interest)
    entry.balance = max(ZERO, entry.balance - principal)
    return payment, interest


def simulate(
    sim: SimulationInput,
    *,
    today: date | None = None,
    horizon_months: int = DEFAULT_HORIZON_MONTHS,
) -> PayoffPlan:
    """Project month-by-month payments until every debt is repaid.

    Raises :class:`InvalidInputError` before any work is done when the input
    is empty or can never make progress. Hitting ``horizon_months`` is not an
    error: the partial plan is returned with ``horizon_exceeded`` set.
    """

    validate_input(sim)
    if horizon_months <= 0:
        raise InvalidInputError("Planning horizon must be at least one month.")

    start = today or date.today()
    working = [_WorkingDebt(debt=debt, balance=debt.balance) for debt in sim.debts]
    by_id = {entry.debt.id: entry for entry in working}
    ordered = priority_order(sim.debts, sim.method)
    priority = [by_id[debt.id] for debt in ordered]

    for entry in working:
        if entry.balance <= PAYOFF_EPSILON:
            entry.paid_off_month = 0

    capacity = sim.extra_monthly_payment + sum((d.min_payment for d in sim.debts), ZERO)
    months = 0
    total_interest = ZERO

    while any(entry.balance > PAYOFF_EPSILON for entry in working) and months < horizon_months:
        months += 1
        applied = ZERO

        for entry in working:
            if entry.balance <= 0:
                continue
            paid, interest = _pay_minimum(entry)
            applied += paid
            total_interest += interest

        leftover = capacity - applied
        if leftover > 0:
            target = next((entry for entry in priority if entry.balance > 0), None)
            if target is not None:
                target.balance -= min(leftover, target.balance)

        for entry in working:
            if entry.paid_off_month is None and entry.balance <= PAYOFF_EPSILON:
                entry.paid_off_month = months

    remaining = sum((entry.balance for entry in working), ZERO)
    horizon_exceeded = any(entry.balance > PAYOFF_EPSILON for entry in working)
    if horizon_exceeded:
        logger.warning(
            "Payoff not reached within %s months; %s still owed",
            horizon_months,
            remaining,
            extra={"method": sim.method, "debts": len(working)},
        )
    else:
        logger.debug(
            "Simulated %s debts: %s months, %s interest",
            len(working),
            months,
            total_interest,
        )

    order = tuple(
        RankedDebt(
            debt_id=entry.debt.id,
            name=entry.debt.name,
            rank=rank,
            interest_rate_apr=entry.debt.interest_rate_apr,
            balance=entry.debt.balance,
            type=entry.debt.type,
            payoff_month=entry.paid_off_month,
        )
        for rank, entry in enumerate(priority, start=1)
    )

    return PayoffPlan(
        method=sim.method,
        extra_payment=sim.extra_monthly_payment,
        total_interest_paid=round_whole(total_interest),
        months_to_payoff=months,
        payoff_date=add_months(start, months),
        order=order,
        horizon_exceeded=horizon_exceeded,
        remaining_balance=remaining,
        interest_cents=total_interest,
    )


def build_input(
    debts: Sequence[Debt | Mapping[str, Any]],
    extra_payment: AmountLike = ZERO,
    method: str = "avalanche",
) -> SimulationInput:
    """Convenience constructor accepting Debt objects or plain records."""

    return SimulationInput(
        debts=tuple(d if isinstance(d, Debt) else Debt.from_mapping(d) for d in debts),
        extra_monthly_payment=extra_payment,
        method=method,
    )
