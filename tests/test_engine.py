"""Tests for the calculator engine.

Covers digit entry rules, operator chaining, evaluation and rounding, the
division-by-zero error latch, backspace, reset, and the display query.
"""

import pytest

from keycalc.engine import Calculator
from keycalc.errors import InvalidTokenError, UnknownOperatorError
from keycalc.models import Fault, FaultKind, Operator, Value


@pytest.fixture
def calc():
    return Calculator()


def type_digits(calc, digits):
    for d in digits:
        calc.append_digit(d)


# --- Digit entry ---

def test_initial_display_is_zero(calc):
    assert calc.query_display() == "0"
    assert calc.state.pending_input == ""
    assert calc.state.accumulator is None
    assert calc.state.operator is None
    assert not calc.in_error


def test_repeated_zeros_collapse(calc):
    type_digits(calc, "000")
    assert calc.state.pending_input == "0"


def test_zeros_after_decimal_are_kept(calc):
    type_digits(calc, "0.00")
    assert calc.state.pending_input == "0.00"


def test_decimal_on_empty_input_gets_leading_zero(calc):
    calc.append_digit(".")
    assert calc.state.pending_input == "0."
    assert calc.query_display() == "0."


def test_second_decimal_point_ignored(calc):
    type_digits(calc, "1.2.3.")
    assert calc.state.pending_input == "1.23"
    assert calc.state.pending_input.count(".") == 1


def test_digit_after_lone_zero_appends(calc):
    type_digits(calc, "05")
    assert calc.state.pending_input == "05"


@pytest.mark.parametrize("token", ["a", "12", "", "-", ",", 5, None])
def test_invalid_digit_token_rejected(calc, token):
    with pytest.raises(InvalidTokenError):
        calc.append_digit(token)
    assert calc.state.pending_input == ""


# --- Operators and chaining ---

def test_operator_commits_pending_input(calc):
    type_digits(calc, "12")
    calc.set_operator("+")
    s = calc.state
    assert s.accumulator == 12.0
    assert s.operator is Operator.ADD
    assert s.pending_input == ""
    assert calc.query_display() == "12"


def test_operator_before_any_digit_defaults_to_zero(calc):
    calc.set_operator("−")
    assert calc.state.accumulator == 0.0
    calc.append_digit("5")
    assert calc.evaluate() == Value(number=-5.0, display="-5")


def test_repeated_operator_replaces_pending(calc):
    type_digits(calc, "8")
    calc.set_operator("+")
    calc.set_operator("×")
    calc.set_operator("÷")
    assert calc.state.operator is Operator.DIVIDE
    assert calc.state.accumulator == 8.0
    calc.append_digit("2")
    assert calc.evaluate().number == 4.0


def test_chaining_is_left_to_right(calc):
    """3 + 4 × 2 = 14, not 11."""
    calc.append_digit("3")
    calc.set_operator("+")
    calc.append_digit("4")
    calc.set_operator("×")
    assert calc.query_display() == "7"
    calc.append_digit("2")
    result = calc.evaluate()
    assert result == Value(number=14.0, display="14")
    assert calc.query_display() == "14"


def test_keyboard_aliases_accepted(calc):
    type_digits(calc, "9")
    calc.set_operator("/")
    type_digits(calc, "3")
    calc.set_operator("*")
    type_digits(calc, "4")
    calc.set_operator("-")
    type_digits(calc, "2")
    assert calc.evaluate().display == "10"


@pytest.mark.parametrize("token", ["%", "^", "plus", "", None])
def test_unknown_operator_rejected(calc, token):
    calc.append_digit("1")
    with pytest.raises(UnknownOperatorError):
        calc.set_operator(token)
    assert calc.state.operator is None
    assert calc.state.pending_input == "1"


# --- Evaluation ---

@pytest.mark.parametrize(
    "left, op, right, expected",
    [
        ("2", "+", "3", "5"),
        ("10", "−", "4", "6"),
        ("3", "×", "7", "21"),
        ("15", "÷", "4", "3.75"),
        ("1", "÷", "3", "0.333333333333"),
        ("2.5", "×", "2", "5"),
    ],
)
def test_basic_arithmetic(calc, left, op, right, expected):
    type_digits(calc, left)
    calc.set_operator(op)
    type_digits(calc, right)
    result = calc.evaluate()
    assert result.ok
    assert result.display == expected
    assert calc.query_display() == expected


def test_rounding_hides_float_noise(calc):
    type_digits(calc, "0.1")
    calc.set_operator("+")
    type_digits(calc, "0.2")
    result = calc.evaluate()
    assert result.number == 0.3
    assert calc.query_display() == "0.3"


def test_precision_is_configurable():
    calc = Calculator(precision=2)
    calc.append_digit("2")
    calc.set_operator("÷")
    calc.append_digit("3")
    assert calc.evaluate().display == "0.67"


def test_evaluate_without_second_operand_reuses_accumulator(calc):
    calc.append_digit("6")
    calc.set_operator("×")
    assert calc.evaluate() == Value(number=36.0, display="36")


def test_evaluate_is_idempotent(calc):
    type_digits(calc, "3")
    calc.set_operator("+")
    type_digits(calc, "4")
    first = calc.evaluate()
    state_after_first = calc.state
    second = calc.evaluate()
    assert first == second == Value(number=7.0, display="7")
    assert calc.state == state_after_first
    assert calc.state.operator is None


def test_evaluate_with_nothing_pending_returns_display(calc):
    assert calc.evaluate() == Value(number=0.0, display="0")
    type_digits(calc, "4.")
    assert calc.evaluate() == Value(number=4.0, display="4.")
    assert calc.state.pending_input == "4."


def test_digits_after_result_start_new_operand(calc):
    type_digits(calc, "2")
    calc.set_operator("+")
    type_digits(calc, "2")
    calc.evaluate()
    type_digits(calc, "9")
    assert calc.query_display() == "9"
    calc.set_operator("+")
    calc.append_digit("1")
    assert calc.evaluate().display == "10"


def test_operator_after_result_continues_from_result(calc):
    type_digits(calc, "5")
    calc.set_operator("×")
    type_digits(calc, "5")
    calc.evaluate()
    calc.set_operator("−")
    type_digits(calc, "5")
    assert calc.evaluate().display == "20"


def test_negative_zero_displays_as_zero(calc):
    calc.set_operator("−")
    calc.append_digit("5")
    calc.evaluate()
    calc.set_operator("×")
    calc.append_digit("0")
    assert calc.query_display() == "0"
    assert calc.evaluate().display == "0"


# --- Division by zero ---

def test_division_by_zero_enters_error(calc):
    calc.append_digit("5")
    calc.set_operator("÷")
    calc.append_digit("0")
    result = calc.evaluate()
    assert isinstance(result, Fault)
    assert not result.ok
    assert result.kind is FaultKind.DIVISION_BY_ZERO
    assert result.display == "Error"
    assert calc.query_display() == "Error"

    s = calc.state
    assert s.in_error
    assert s.pending_input == ""
    assert s.accumulator is None
    assert s.operator is None


def test_division_by_repeated_zero_accumulator(calc):
    """0 ÷ = divides by the accumulator, which is zero."""
    calc.append_digit("0")
    calc.set_operator("÷")
    assert isinstance(calc.evaluate(), Fault)


def test_division_by_zero_point_zero(calc):
    calc.append_digit("1")
    calc.set_operator("÷")
    type_digits(calc, "0.0")
    assert isinstance(calc.evaluate(), Fault)


def test_error_state_ignores_everything_but_reset(calc):
    calc.append_digit("5")
    calc.set_operator("÷")
    calc.append_digit("0")
    calc.evaluate()

    calc.append_digit("7")
    calc.append_digit(".")
    calc.set_operator("+")
    calc.backspace()
    assert isinstance(calc.evaluate(), Fault)
    assert calc.query_display() == "Error"
    assert calc.state.pending_input == ""
    assert calc.state.operator is None

    calc.reset()
    calc.append_digit("7")
    assert calc.query_display() == "7"


def test_implicit_evaluation_can_fault(calc):
    calc.append_digit("8")
    calc.set_operator("÷")
    calc.append_digit("0")
    calc.set_operator("+")
    s = calc.state
    assert s.in_error
    assert s.accumulator is None
    assert s.operator is None
    assert calc.query_display() == "Error"


def test_custom_error_indicator():
    calc = Calculator(error_indicator="Cannot divide by zero")
    calc.append_digit("1")
    calc.set_operator("÷")
    calc.append_digit("0")
    assert calc.evaluate().display == "Cannot divide by zero"
    assert calc.query_display() == "Cannot divide by zero"


# --- Backspace and reset ---

def test_backspace_removes_last_character(calc):
    type_digits(calc, "123")
    calc.backspace()
    calc.backspace()
    assert calc.state.pending_input == "1"


def test_backspace_on_empty_is_noop(calc):
    calc.backspace()
    assert calc.query_display() == "0"
    type_digits(calc, "4")
    calc.set_operator("+")
    calc.backspace()
    s = calc.state
    assert s.accumulator == 4.0
    assert s.operator is Operator.ADD


def test_backspace_does_not_undo_committed_operand(calc):
    type_digits(calc, "42")
    calc.set_operator("+")
    type_digits(calc, "7")
    calc.backspace()
    calc.backspace()
    assert calc.state.accumulator == 42.0
    assert calc.query_display() == "42"


def test_reset_restores_initial_state(calc):
    type_digits(calc, "9")
    calc.set_operator("×")
    type_digits(calc, "3.")
    calc.reset()
    assert calc.query_display() == "0"
    assert calc.state == Calculator().state


# --- Isolation ---

def test_instances_do_not_share_state():
    a = Calculator()
    b = Calculator()
    a.append_digit("1")
    b.append_digit("2")
    assert a.query_display() == "1"
    assert b.query_display() == "2"


def test_state_property_is_a_copy(calc):
    calc.append_digit("3")
    snapshot = calc.state
    snapshot.pending_input = "999"
    assert calc.query_display() == "3"
