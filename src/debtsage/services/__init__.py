"""Service module exports."""

from . import comparisons, events, jobs, payoff, scenarios, summary

__all__ = [
    "comparisons",
    "events",
    "jobs",
    "payoff",
    "scenarios",
    "summary",
]
