"""Tests for the Flask CLI commands."""

from __future__ import annotations

from debtsage.services import events


def test_scenarios_command_lists_presets(runner):
    result = runner.invoke(args=["debtsage-scenarios"])

    assert result.exit_code == 0
    assert "creditCardStack (credit card stack)" in result.output
    assert "Store Card: $450.00 at 27.99%, min $25.00" in result.output


def test_simulate_command_prints_ranked_order(runner):
    result = runner.invoke(
        args=["debtsage-simulate", "--scenario", "creditCardStack", "--extra", "200"]
    )

    assert result.exit_code == 0
    assert "Method: avalanche (highest APR first)" in result.output
    assert "#1 Store Card (27.99%)" in result.output
    assert "#3 Capital One (22.49%)" in result.output
    assert "Total interest: $" in result.output


def test_simulate_command_snowball(runner):
    result = runner.invoke(
        args=["debtsage-simulate", "--scenario", "studentLoans", "--method", "snowball"]
    )

    assert result.exit_code == 0
    assert "#1 Federal Loan 2 (5.28%)" in result.output


def test_simulate_command_rejects_negative_extra(runner):
    result = runner.invoke(args=["debtsage-simulate", "--extra=-5"])

    assert result.exit_code != 0
    assert "Extra payment cannot be negative." in result.output


def test_simulate_command_rejects_garbage_extra(runner):
    result = runner.invoke(args=["debtsage-simulate", "--extra=abc"])

    assert result.exit_code != 0
    assert "Enter a valid number" in result.output


def test_simulate_command_announces_completion(runner):
    calls = []
    events.subscribe(events.SIMULATION_COMPLETED, lambda: calls.append(True))

    result = runner.invoke(args=["debtsage-simulate", "--scenario", "autoAndPersonal"])

    assert result.exit_code == 0
    assert calls == [True]


def test_simulate_command_failure_is_silent(runner):
    calls = []
    events.subscribe(events.SIMULATION_COMPLETED, lambda: calls.append(True))

    result = runner.invoke(args=["debtsage-simulate", "--extra=-5"])

    assert result.exit_code != 0
    assert calls == []


def test_simulate_help_describes_methods(runner):
    result = runner.invoke(args=["debtsage-simulate", "--help"])
    text = " ".join(result.output.split())

    assert "avalanche: highest APR first" in text
    assert "snowball: smallest balance first" in text
