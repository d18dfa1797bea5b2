"""Pytest configuration and shared fixtures for DebtSage tests.

Provides a Flask app wired with the testing config (inline jobs, logs under
a temporary directory), plus debt factories for engine-level tests.
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from debtsage import create_app
from debtsage.services.events import clear_subscribers
from debtsage.services.jobs import clear_jobs, set_async_execution
from debtsage.services.payoff import Debt
from debtsage.services.scenarios import load_scenario

# =============================================================================
# Application Fixtures
# =============================================================================


@pytest.fixture
def app(tmp_path, monkeypatch):
    """Create an app whose data directory lives under ``tmp_path``."""

    monkeypatch.setenv("DEBTSAGE_DATA_DIR", str(tmp_path))
    monkeypatch.delenv("DEBTSAGE_HORIZON_MONTHS", raising=False)
    monkeypatch.delenv("DEBTSAGE_DEFAULT_EXTRA_PAYMENT", raising=False)
    app = create_app("testing")

    clear_jobs()
    clear_subscribers()

    yield app

    set_async_execution(True)
    clear_jobs()
    clear_subscribers()


@pytest.fixture
def client(app):
    with app.test_client() as client:
        yield client


@pytest.fixture
def runner(app):
    return app.test_cli_runner()


# =============================================================================
# Test Data Factories
# =============================================================================


@pytest.fixture
def debt_factory():
    """Factory for building Debt records with sensible defaults.

    Returns:
        Callable: Function that creates Debt instances with sequential ids
    """

    counter = {"next": 1}

    def _create_debt(
        name: str = "Test Debt",
        balance: str | Decimal = "1000",
        apr: str | Decimal = "18",
        min_payment: str | Decimal = "25",
        debt_type: str = "other",
        debt_id: str | None = None,
    ) -> Debt:
        if debt_id is None:
            debt_id = str(counter["next"])
            counter["next"] += 1
        return Debt(
            id=debt_id,
            name=name,
            balance=balance,
            interest_rate_apr=apr,
            min_payment=min_payment,
            type=debt_type,
        )

    return _create_debt


@pytest.fixture
def credit_card_stack():
    """Chase Sapphire, Capital One and Store Card sample debts."""

    return load_scenario("creditCardStack")


@pytest.fixture
def debt_payload():
    """Serialize debts the way the browser form posts them."""

    def _serialize(debts) -> list[dict]:
        return [
            {
                "id": debt.id,
                "name": debt.name,
                "balance": str(debt.balance),
                "interestRateAPR": str(debt.interest_rate_apr),
                "minPayment": str(debt.min_payment),
                "type": debt.type,
            }
            for debt in debts
        ]

    return _serialize
