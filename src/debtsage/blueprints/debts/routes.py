"""Payoff simulator routes."""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Mapping

from flask import current_app, jsonify, request

from ...config import BaseConfig
from ...exceptions import InvalidInputError
from ...logging_config import get_logger
from ...money import format_currency, format_years
from ...services.comparisons import compare_extra_payments, compare_strategies
from ...services.events import SIMULATION_COMPLETED, emit
from ...services.jobs import enqueue, get_job
from ...services.payoff import PayoffPlan, SimulationInput, simulate, validate_input
from ...services.scenarios import SAMPLE_SCENARIOS, load_scenario, scenario_label
from ...services.summary import summarize_debts
from . import bp
from .forms import SimulationForm

logger = get_logger(__name__)

DEFAULT_COMPARISON_EXTRAS = (Decimal("0"), Decimal("50"), Decimal("100"))

# Engine messages rewritten as instructions for the person filling the form.
_USER_MESSAGES = {
    "no debts to simulate": "Add at least one debt.",
    "insufficient total payment": "Total payment must be greater than $0.",
}


def _config() -> BaseConfig:
    return current_app.config["DEBTSAGE_CONFIG"]


def _user_message(exc: InvalidInputError) -> str:
    return _USER_MESSAGES.get(exc.message, exc.message)


def _error_response(message: str, errors: Mapping[str, Any] | None = None, status: int = 400):
    return jsonify({"error": message, "errors": dict(errors or {})}), status


def _json_payload() -> dict[str, Any] | None:
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else None


def _validated_form(payload: Mapping[str, Any]) -> SimulationForm:
    form = SimulationForm(payload, default_extra=_config().DEFAULT_EXTRA_PAYMENT)
    form.validate()
    return form


def plan_message(plan: PayoffPlan, horizon_months: int) -> str:
    """Text shown to the user once a plan has been calculated."""

    if plan.horizon_exceeded:
        years = format_years(horizon_months).removesuffix(".0")
        return (
            f"Payoff exceeds the {years}-year planning horizon. "
            f"{format_currency(plan.remaining_balance)} would still be owed after "
            f"{plan.months_to_payoff} months."
        )
    return (
        f"Debt payoff calculated! Pay off in {plan.months_to_payoff} months "
        f"({format_years(plan.months_to_payoff)} years). "
        f"Total interest: {format_currency(plan.total_interest_paid)}"
    )


def _run_simulation(sim: SimulationInput, horizon_months: int) -> dict[str, Any]:
    """Simulate, announce completion and return the plan payload."""

    plan = simulate(sim, horizon_months=horizon_months)
    emit(SIMULATION_COMPLETED)
    logger.info(
        "Payoff simulated",
        extra={
            "method": plan.method,
            "debts": len(plan.order),
            "months": plan.months_to_payoff,
            "horizon_exceeded": plan.horizon_exceeded,
        },
    )
    data = plan.to_dict()
    data["message"] = plan_message(plan, horizon_months)
    return data


@bp.get("/scenarios")
def list_sample_scenarios():
    """List the sample debt sets available to the simulator."""

    return jsonify(
        [
            {
                "name": name,
                "label": scenario_label(name),
                "debts": [debt.to_dict() for debt in load_scenario(name)],
            }
            for name in SAMPLE_SCENARIOS
        ]
    )


@bp.get("/scenarios/<name>")
def get_sample_scenario(name: str):
    try:
        debts = load_scenario(name)
    except InvalidInputError as exc:
        return jsonify({"error": "scenario_not_found", "message": exc.message}), 404
    label = scenario_label(name)
    return jsonify(
        {
            "name": name,
            "label": label,
            "debts": [debt.to_dict() for debt in debts],
            "message": f"Loaded {label} scenario",
        }
    )


@bp.post("/simulate")
def simulate_payoff():
    """Run the payoff simulator and return the plan."""

    payload = _json_payload()
    if payload is None:
        return _error_response("Expected a JSON object body.")

    form = _validated_form(payload)
    if form.errors:
        return _error_response(next(iter(form.error_messages)), form.errors)

    try:
        result = _run_simulation(form.to_input(), _config().HORIZON_MONTHS)
    except InvalidInputError as exc:
        message = _user_message(exc)
        return _error_response(message, {exc.field or "debts": [message]})
    return jsonify(result)


@bp.post("/summary")
def summarize():
    """Return totals and the weighted APR for the posted debts."""

    payload = _json_payload()
    if payload is None:
        return _error_response("Expected a JSON object body.")
    form = _validated_form(payload)
    if form.errors:
        return _error_response(next(iter(form.error_messages)), form.errors)
    return jsonify(summarize_debts(form.debts).to_dict())


@bp.post("/compare")
def compare():
    """Compare extra payment amounts and the two payoff strategies."""

    payload = _json_payload()
    if payload is None:
        return _error_response("Expected a JSON object body.")
    form = _validated_form(payload)
    if form.errors:
        return _error_response(next(iter(form.error_messages)), form.errors)

    extras = payload.get("extras") or list(DEFAULT_COMPARISON_EXTRAS)
    if not isinstance(extras, list):
        return _error_response("Extras must be a list of amounts.", {"extras": ["Enter a list."]})
    horizon = _config().HORIZON_MONTHS

    try:
        ladder = compare_extra_payments(
            form.debts,
            [*extras, form.extra_payment],
            method=form.method,
            horizon_months=horizon,
        )
        strategies = compare_strategies(form.debts, form.extra_payment, horizon_months=horizon)
    except InvalidInputError as exc:
        message = _user_message(exc)
        return _error_response(message, {exc.field or "debts": [message]})

    return jsonify(
        {
            "extra_payments": [entry.to_dict() for entry in ladder],
            "strategies": strategies.to_dict(),
        }
    )


@bp.post("/simulate/jobs")
def queue_simulation():
    """Queue the simulation as a background job for slow clients."""

    payload = _json_payload()
    if payload is None:
        return _error_response("Expected a JSON object body.")
    form = _validated_form(payload)
    if form.errors:
        return _error_response(next(iter(form.error_messages)), form.errors)

    sim = form.to_input()
    try:
        validate_input(sim)
    except InvalidInputError as exc:
        message = _user_message(exc)
        return _error_response(message, {exc.field or "debts": [message]})

    job = enqueue(
        "payoff-simulation",
        _run_simulation,
        metadata={"debts": len(form.debts), "method": form.method},
        sim=sim,
        horizon_months=_config().HORIZON_MONTHS,
    )
    return jsonify(job.to_dict()), 202


@bp.get("/jobs/<job_id>")
def job_status(job_id: str):
    """Expose job status for queued simulations."""

    job = get_job(job_id)
    if job is None:
        return jsonify({"error": "job_not_found", "job_id": job_id}), 404
    return jsonify(job)
