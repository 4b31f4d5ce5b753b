"""Calculator engine — the state machine behind a four-function keypad.

One Calculator per calculator session. Each user action maps to one mutating
call (append_digit, set_operator, evaluate, reset, backspace); the caller then
asks query_display() for the string to show.

States:
    entering          digits being typed, no operator pending
    operator pending  left operand committed, waiting for the right one
    error             after division by zero; absorbing until reset()

Evaluation is strictly left to right: choosing a new operator while one is
pending and a right operand has been typed evaluates the pending one first.
"""

from __future__ import annotations

import logging
from typing import Optional, Union

from keycalc.config import DEFAULT_ERROR_TEXT, DEFAULT_PRECISION, Settings
from keycalc.errors import InvalidTokenError
from keycalc.models import (
    CalculatorState,
    Fault,
    FaultKind,
    Operator,
    Result,
    Value,
    format_number,
)

logger = logging.getLogger(__name__)

DECIMAL_POINT = "."
_DIGITS = frozenset("0123456789")


class Calculator:
    """Four-function calculator engine."""

    def __init__(
        self,
        precision: int = DEFAULT_PRECISION,
        error_indicator: str = DEFAULT_ERROR_TEXT,
        state: Optional[CalculatorState] = None,
    ) -> None:
        self.precision = precision
        self.error_indicator = error_indicator
        self._state = state if state is not None else CalculatorState()

    @classmethod
    def from_settings(cls, settings: Settings, state: Optional[CalculatorState] = None) -> Calculator:
        return cls(
            precision=settings.precision,
            error_indicator=settings.error_indicator,
            state=state,
        )

    @property
    def state(self) -> CalculatorState:
        """A copy of the current state; mutating it does not affect the engine."""
        s = self._state
        return CalculatorState(
            pending_input=s.pending_input,
            accumulator=s.accumulator,
            operator=s.operator,
            in_error=s.in_error,
        )

    @property
    def in_error(self) -> bool:
        return self._state.in_error

    # --- Input ---

    def append_digit(self, token: str) -> None:
        """Type a digit 0-9 or the decimal point into the current operand.

        A second decimal point is ignored, a decimal point on an empty operand
        yields '0.', and a lone '0' is not extended by another '0'.

        Raises:
            InvalidTokenError: token is not a single digit or '.'.
        """
        if token != DECIMAL_POINT and token not in _DIGITS:
            raise InvalidTokenError(token)
        s = self._state
        if s.in_error:
            logger.debug("Ignoring %r: calculator is in error", token)
            return

        if token == DECIMAL_POINT:
            if DECIMAL_POINT in s.pending_input:
                return
            s.pending_input = s.pending_input + DECIMAL_POINT if s.pending_input else "0."
            return

        if s.pending_input == "0" and token == "0":
            return
        s.pending_input += token

    def set_operator(self, op: Union[str, Operator]) -> None:
        """Choose the operator to apply to the next operand.

        Raises:
            UnknownOperatorError: op is not one of + − × ÷ (or an alias).
        """
        operator = Operator.parse(op)
        s = self._state
        if s.in_error:
            logger.debug("Ignoring operator %s: calculator is in error", operator.value)
            return

        if s.operator is not None and s.pending_input:
            logger.debug("Chained operator %s: evaluating pending %s first", operator.value, s.operator.value)
            self.evaluate()
            if s.in_error:
                return

        if s.pending_input:
            s.accumulator = float(s.pending_input)
        elif s.accumulator is None:
            s.accumulator = 0.0

        s.operator = operator
        s.pending_input = ""

    def evaluate(self) -> Result:
        """Apply the pending operator and return the tagged result.

        With nothing to compute (no operator pending, or already in error) the
        current display is returned and state is left untouched. Division by
        zero moves the engine into the error state and returns a Fault.
        """
        s = self._state
        if s.in_error:
            return self._fault()
        if s.operator is None or s.accumulator is None:
            return self._current_value()

        operand = float(s.pending_input) if s.pending_input else s.accumulator

        if s.operator is Operator.DIVIDE and operand == 0:
            logger.debug("Division by zero: %s ÷ 0, entering error state", format_number(s.accumulator))
            s.pending_input = ""
            s.accumulator = None
            s.operator = None
            s.in_error = True
            return self._fault()

        result = round(s.operator.apply(s.accumulator, operand), self.precision)
        logger.debug(
            "Evaluated %s %s %s = %s",
            format_number(s.accumulator), s.operator.value, format_number(operand), format_number(result),
        )
        s.accumulator = result
        s.pending_input = ""
        s.operator = None
        return Value(number=result, display=format_number(result))

    def reset(self) -> None:
        """Return to the freshly-constructed state, including from error."""
        self._state = CalculatorState()

    def backspace(self) -> None:
        """Drop the last typed character of the current operand."""
        s = self._state
        if s.in_error or not s.pending_input:
            return
        s.pending_input = s.pending_input[:-1]

    # --- Query ---

    def query_display(self) -> str:
        """The string the display should show right now."""
        s = self._state
        if s.in_error:
            return self.error_indicator
        if s.pending_input:
            return s.pending_input
        if s.accumulator is not None:
            return format_number(s.accumulator)
        return "0"

    def _current_value(self) -> Value:
        s = self._state
        if s.pending_input:
            number = float(s.pending_input)
        elif s.accumulator is not None:
            number = s.accumulator
        else:
            number = 0.0
        return Value(number=number, display=self.query_display())

    def _fault(self) -> Fault:
        return Fault(kind=FaultKind.DIVISION_BY_ZERO, display=self.error_indicator)

    def __repr__(self) -> str:
        s = self._state
        return (
            f"Calculator(pending_input={s.pending_input!r}, accumulator={s.accumulator!r}, "
            f"operator={s.operator.value if s.operator else None!r}, in_error={s.in_error})"
        )
