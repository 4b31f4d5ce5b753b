"""Exception types for keycalc.

Arithmetic faults are never raised: division by zero is reported through the
engine's error state. These exceptions cover bad input handed to the engine
by a caller, and bad configuration.
"""

from __future__ import annotations


class KeycalcError(Exception):
    """Base class for keycalc errors."""


class InvalidTokenError(KeycalcError, ValueError):
    """A digit-entry token that is not a single 0-9 or '.'."""

    def __init__(self, token: object) -> None:
        self.token = token
        super().__init__(f"Invalid digit token: {token!r}")


class UnknownOperatorError(KeycalcError, ValueError):
    """An operator token outside + − × ÷ and their keyboard aliases."""

    def __init__(self, token: object) -> None:
        self.token = token
        super().__init__(f"Unknown operator: {token!r}")


class SettingsError(KeycalcError, ValueError):
    """An environment setting could not be parsed."""
