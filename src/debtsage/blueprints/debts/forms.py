"""Request parsing and validation for the payoff simulator endpoints."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Mapping

from ...exceptions import InvalidInputError
from ...money import ZERO, to_decimal
from ...services.payoff import METHODS, Debt, SimulationInput
from ...services.scenarios import load_scenario


@dataclass(slots=True)
class DebtForm:
    """One debt row from the simulator form and its validation errors."""

    data: Mapping[str, Any]
    position: int = 0
    errors: Dict[str, List[str]] = field(default_factory=dict, init=False)
    debt: Debt | None = field(default=None, init=False)

    def validate(self) -> bool:
        self.errors.clear()
        self.debt = None

        if not isinstance(self.data, Mapping):
            self.errors.setdefault("debt", []).append("Each debt must be an object.")
            return False

        name = str(self.data.get("name") or "").strip()
        if not name:
            self.errors.setdefault("name", []).append("Enter the creditor or account name.")

        try:
            debt = Debt.from_mapping(
                {**self.data, "id": self.data.get("id") or str(self.position + 1)}
            )
        except InvalidInputError as exc:
            self.errors.setdefault(exc.field or "debt", []).append(exc.message)
        else:
            if not self.errors:
                self.debt = debt

        return not self.errors


@dataclass(slots=True)
class SimulationForm:
    """Simulator request: a debt list (or sample scenario) plus an extra payment."""

    payload: Mapping[str, Any]
    default_extra: Decimal = ZERO
    errors: Dict[str, List[str]] = field(default_factory=dict, init=False)
    debts: List[Debt] = field(default_factory=list, init=False)
    extra_payment: Decimal = field(default=ZERO, init=False)
    method: str = field(default="avalanche", init=False)

    def validate(self) -> bool:
        """Validate the payload returning True when a simulation can be built."""

        self.errors.clear()
        self.debts = []

        self.method = str(self.payload.get("method") or "avalanche")
        if self.method not in METHODS:
            self.errors.setdefault("method", []).append("Choose a payoff strategy.")

        raw_extra = self.payload.get("extra_payment", self.payload.get("extraPayment"))
        if raw_extra is None or raw_extra == "":
            self.extra_payment = self.default_extra
        else:
            try:
                self.extra_payment = to_decimal(raw_extra, field="extra_payment")
            except InvalidInputError as exc:
                self.errors.setdefault("extra_payment", []).append(exc.message)
            else:
                if self.extra_payment < 0:
                    self.errors.setdefault("extra_payment", []).append(
                        "Amount must be at least zero."
                    )

        scenario = self.payload.get("scenario")
        if scenario:
            try:
                self.debts = list(load_scenario(str(scenario)))
            except InvalidInputError as exc:
                self.errors.setdefault("scenario", []).append(exc.message)
            return not self.errors

        rows = self.payload.get("debts")
        if not rows:
            self.errors.setdefault("debts", []).append("Add at least one debt.")
            return False
        if not isinstance(rows, list):
            self.errors.setdefault("debts", []).append("Debts must be a list.")
            return False

        for position, row in enumerate(rows):
            row_form = DebtForm(row, position=position)
            if row_form.validate() and row_form.debt is not None:
                self.debts.append(row_form.debt)
            else:
                for name, messages in row_form.errors.items():
                    self.errors.setdefault(f"debts[{position}].{name}", []).extend(messages)

        return not self.errors

    def to_input(self) -> SimulationInput:
        return SimulationInput(
            debts=tuple(self.debts),
            extra_monthly_payment=self.extra_payment,
            method=self.method,
        )

    @property
    def error_messages(self) -> Iterable[str]:
        """Flattened iterable of error strings for summaries."""

        for messages in self.errors.values():
            yield from messages
