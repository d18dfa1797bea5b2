"""Flask CLI commands for DebtSage."""

from __future__ import annotations

import click
from flask import current_app

from .exceptions import InvalidInputError
from .money import format_currency, format_percentage, format_years, to_decimal
from .services.events import SIMULATION_COMPLETED, emit
from .services.payoff import METHODS, SimulationInput, simulate
from .services.scenarios import SAMPLE_SCENARIOS, load_scenario, scenario_label


def init_app(app) -> None:
    """Register CLI commands on the Flask app."""

    @app.cli.command("debtsage-scenarios")
    def debtsage_scenarios() -> None:
        """List the sample debt scenarios."""

        for name in SAMPLE_SCENARIOS:
            debts = load_scenario(name)
            click.echo(f"{name} ({scenario_label(name)})")
            for debt in debts:
                click.echo(
                    f"  - {debt.name}: {format_currency(debt.balance, cents=True)} "
                    f"at {format_percentage(debt.interest_rate_apr)}, "
                    f"min {format_currency(debt.min_payment, cents=True)}"
                )

    @app.cli.command("debtsage-simulate")
    @click.option(
        "--scenario",
        type=click.Choice(list(SAMPLE_SCENARIOS)),
        default="creditCardStack",
        show_default=True,
        help="Sample debt set to simulate",
    )
    @click.option("--extra", type=str, default=None, help="Extra monthly payment")
    @click.option(
        "--method",
        type=click.Choice(list(METHODS)),
        default="avalanche",
        show_default=True,
        help="; ".join(f"{name}: {label}" for name, label in METHODS.items()),
    )
    def debtsage_simulate(scenario: str, extra: str | None, method: str) -> None:
        """Simulate paying off a sample scenario."""

        config = current_app.config["DEBTSAGE_CONFIG"]
        try:
            sim = SimulationInput(
                debts=load_scenario(scenario),
                extra_monthly_payment=(
                    to_decimal(extra, field="extra") if extra else config.DEFAULT_EXTRA_PAYMENT
                ),
                method=method,
            )
            plan = simulate(sim, horizon_months=config.HORIZON_MONTHS)
        except InvalidInputError as exc:
            raise click.ClickException(str(exc)) from exc
        emit(SIMULATION_COMPLETED)

        if plan.horizon_exceeded:
            click.echo(
                f"Payoff exceeds the planning horizon; "
                f"{format_currency(plan.remaining_balance, cents=True)} still owed."
            )
        click.echo(f"Method: {plan.method} ({METHODS[plan.method]})")
        click.echo(
            f"Months to payoff: {plan.months_to_payoff} ({format_years(plan.months_to_payoff)} years)"
        )
        click.echo(f"Payoff date: {plan.payoff_date.isoformat()}")
        click.echo(f"Total interest: {format_currency(plan.total_interest_paid)}")
        for entry in plan.order:
            click.echo(
                f"  #{entry.rank} {entry.name} ({format_percentage(entry.interest_rate_apr)})"
            )
