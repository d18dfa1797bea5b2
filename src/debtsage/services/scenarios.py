"""Sample debt scenarios for trying the payoff simulator without real data."""

from __future__ import annotations

import re
from typing import Any

from ..exceptions import InvalidInputError
from .payoff import Debt

SAMPLE_SCENARIOS: dict[str, tuple[dict[str, Any], ...]] = {
    "creditCardStack": (
        {"id": "1", "name": "Chase Sapphire", "balance": "3500", "interest_rate_apr": "24.99", "min_payment": "105", "type": "credit_card"},
        {"id": "2", "name": "Capital One", "balance": "1200", "interest_rate_apr": "22.49", "min_payment": "35", "type": "credit_card"},
        {"id": "3", "name": "Store Card", "balance": "450", "interest_rate_apr": "27.99", "min_payment": "25", "type": "credit_card"},
    ),
    "autoAndPersonal": (
        {"id": "1", "name": "Auto Loan", "balance": "18500", "interest_rate_apr": "6.25", "min_payment": "385", "type": "auto_loan"},
        {"id": "2", "name": "Personal Loan", "balance": "8200", "interest_rate_apr": "14.99", "min_payment": "245", "type": "personal_loan"},
    ),
    "studentLoans": (
        {"id": "1", "name": "Federal Loan 1", "balance": "12500", "interest_rate_apr": "4.53", "min_payment": "145", "type": "student_loan"},
        {"id": "2", "name": "Federal Loan 2", "balance": "8900", "interest_rate_apr": "5.28", "min_payment": "105", "type": "student_loan"},
        {"id": "3", "name": "Private Loan", "balance": "15600", "interest_rate_apr": "8.75", "min_payment": "185", "type": "student_loan"},
    ),
}


def list_scenarios() -> list[str]:
    return list(SAMPLE_SCENARIOS)


def scenario_label(name: str) -> str:
    """Return a human label, e.g. ``creditCardStack`` -> ``credit card stack``."""

    return re.sub(r"([A-Z])", r" \1", name).strip().lower()


def load_scenario(name: str) -> tuple[Debt, ...]:
    """Return fresh Debt records for the named sample scenario."""

    try:
        records = SAMPLE_SCENARIOS[name]
    except KeyError:
        choices = ", ".join(SAMPLE_SCENARIOS)
        raise InvalidInputError(
            f"Unknown scenario {name!r}; choose one of: {choices}.", field="scenario"
        ) from None
    return tuple(Debt(**record) for record in records)
