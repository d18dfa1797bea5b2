"""Exception hierarchy for DebtSage."""

from __future__ import annotations


class DebtSageError(Exception):
    """Base class for all DebtSage specific errors."""


class InvalidInputError(DebtSageError, ValueError):
    """Raised when a payoff simulation cannot start with the supplied data.

    ``field`` names the offending input when one can be singled out, so the
    web layer can attach the message to the right form field.
    """

    def __init__(self, message: str, *, field: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.field = field
