"""Data models for the keycalc engine.

Operator enum, CalculatorState, and the tagged Value / Fault results that
flow from engine → keymap → CLI.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Optional, Union

from keycalc.errors import UnknownOperatorError

# A typed operand: digits with at most one decimal point, possibly empty.
_PENDING_RE = re.compile(r"[0-9]*(\.[0-9]*)?")


class Operator(str, Enum):
    """The four binary operators, stored by their display symbol."""

    ADD = "+"
    SUBTRACT = "−"
    MULTIPLY = "×"
    DIVIDE = "÷"

    @classmethod
    def parse(cls, token: Union[str, Operator]) -> Operator:
        """Resolve a display symbol or keyboard alias to an Operator.

        Accepts the canonical symbols plus the ASCII keys a keyboard sends
        ('-', '*', 'x', '/').

        Raises:
            UnknownOperatorError: token is not a recognised operator.
        """
        if isinstance(token, cls):
            return token
        op = _OPERATOR_ALIASES.get(token) if isinstance(token, str) else None
        if op is None:
            raise UnknownOperatorError(token)
        return op

    def apply(self, left: float, right: float) -> float:
        """Compute ``left <op> right``. Division by zero is the caller's check."""
        if self is Operator.ADD:
            return left + right
        if self is Operator.SUBTRACT:
            return left - right
        if self is Operator.MULTIPLY:
            return left * right
        return left / right


_OPERATOR_ALIASES: dict[str, Operator] = {
    "+": Operator.ADD,
    "−": Operator.SUBTRACT,
    "-": Operator.SUBTRACT,
    "×": Operator.MULTIPLY,
    "*": Operator.MULTIPLY,
    "x": Operator.MULTIPLY,
    "÷": Operator.DIVIDE,
    "/": Operator.DIVIDE,
}


class FaultKind(str, Enum):
    """Arithmetic faults the engine can enter."""

    DIVISION_BY_ZERO = "division-by-zero"


@dataclass(frozen=True)
class Value:
    """Successful evaluation: the number and how the display renders it."""

    number: float
    display: str

    ok = True


@dataclass(frozen=True)
class Fault:
    """Failed evaluation. Carries no number, only the kind and the indicator."""

    kind: FaultKind
    display: str

    ok = False


Result = Union[Value, Fault]


def format_number(value: float) -> str:
    """Render a float for the calculator display.

    Positional between 1e-6 and 1e21, exponent form outside it:
    7.0 → '7', -0.0 → '0', 1e-05 → '0.00001', 1e-07 → '1e-7',
    1e21 → '1e+21', inf → 'Infinity'.
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == 0:
        return "0"
    magnitude = abs(value)
    if 1e-6 <= magnitude < 1e21:
        if value.is_integer():
            return str(int(value))
        # repr gives the shortest round-tripping digits; Decimal lays them out positionally
        return format(Decimal(repr(value)), "f")
    mantissa, exponent = repr(value).split("e")
    exp = int(exponent)
    return f"{mantissa}e{'+' if exp > 0 else '-'}{abs(exp)}"


@dataclass
class CalculatorState:
    """Everything the engine knows between two key presses."""

    pending_input: str = ""
    accumulator: Optional[float] = None
    operator: Optional[Operator] = None
    in_error: bool = False

    def to_dict(self) -> dict:
        """Serialize to a JSON-compatible dict."""
        return {
            "pending_input": self.pending_input,
            "accumulator": self.accumulator,
            "operator": self.operator.value if self.operator else None,
            "in_error": self.in_error,
        }

    @classmethod
    def from_dict(cls, d: dict) -> CalculatorState:
        """Deserialize from a JSON dict, rejecting states the engine can't reach.

        Raises:
            ValueError: malformed operand text, unknown operator, or an error
                state that still carries operands, or d is not a dict.
        """
        if not isinstance(d, dict):
            raise ValueError(f"State must be an object, got {type(d).__name__}")

        pending = d.get("pending_input", "")
        if not isinstance(pending, str) or not _PENDING_RE.fullmatch(pending):
            raise ValueError(f"Malformed pending input: {pending!r}")

        acc = d.get("accumulator")
        accumulator = float(acc) if acc is not None else None

        op = d.get("operator")
        operator = Operator.parse(op) if op is not None else None

        in_error = bool(d.get("in_error", False))
        if in_error and (pending or accumulator is not None or operator):
            raise ValueError("Error state must not carry operands")

        return cls(
            pending_input=pending,
            accumulator=accumulator,
            operator=operator,
            in_error=in_error,
        )
