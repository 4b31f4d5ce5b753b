"""Translate raw key presses into calculator actions.

A presentation layer receives keys ('7', '.', '*', 'Enter', 'Escape', ...)
and needs to turn each one into exactly one engine call. Unrecognised keys
are ignored, the same way a keypad ignores keys it has no button for.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional

from keycalc.engine import DECIMAL_POINT, Calculator
from keycalc.models import Operator


class Action(str, Enum):
    """Calculator actions a key can trigger."""

    DIGIT = "digit"
    DECIMAL = "decimal"
    OPERATOR = "operator"
    EVALUATE = "evaluate"
    CLEAR = "clear"
    BACKSPACE = "backspace"


@dataclass(frozen=True)
class KeyEvent:
    """One translated key press."""

    action: Action
    token: str = ""


# Named keys, matched case-insensitively.
_NAMED_KEYS: dict[str, Action] = {
    "enter": Action.EVALUATE,
    "return": Action.EVALUATE,
    "backspace": Action.BACKSPACE,
    "bs": Action.BACKSPACE,
    "escape": Action.CLEAR,
    "esc": Action.CLEAR,
    "clear": Action.CLEAR,
    "c": Action.CLEAR,
}

_SINGLE_KEYS: dict[str, KeyEvent] = {
    "=": KeyEvent(Action.EVALUATE),
    ".": KeyEvent(Action.DECIMAL, DECIMAL_POINT),
    # Some keyboard layouts put the decimal separator on ','
    ",": KeyEvent(Action.DECIMAL, DECIMAL_POINT),
    "\b": KeyEvent(Action.BACKSPACE),
    "\x1b": KeyEvent(Action.CLEAR),
}

# (keys, description) rows for help output
KEY_BINDINGS: list[tuple[str, str]] = [
    ("0-9", "Type a digit"),
    (". ,", "Decimal point"),
    ("+", "Add"),
    ("- −", "Subtract"),
    ("* x ×", "Multiply"),
    ("/ ÷", "Divide"),
    ("= Enter", "Evaluate"),
    ("Backspace", "Delete last typed character"),
    ("Escape C", "Clear everything"),
]


def translate(key: str) -> Optional[KeyEvent]:
    """Map a key to a KeyEvent, or None if the key does nothing."""
    if not key:
        return None
    if key.isdigit() and len(key) == 1 and key.isascii():
        return KeyEvent(Action.DIGIT, key)
    if key in _SINGLE_KEYS:
        return _SINGLE_KEYS[key]
    action = _NAMED_KEYS.get(key.lower())
    if action:
        return KeyEvent(action)
    try:
        return KeyEvent(Action.OPERATOR, Operator.parse(key).value)
    except ValueError:
        return None


def dispatch(calc: Calculator, event: KeyEvent) -> None:
    """Invoke the engine operation for one event."""
    if event.action in (Action.DIGIT, Action.DECIMAL):
        calc.append_digit(event.token)
    elif event.action is Action.OPERATOR:
        calc.set_operator(event.token)
    elif event.action is Action.EVALUATE:
        calc.evaluate()
    elif event.action is Action.CLEAR:
        calc.reset()
    elif event.action is Action.BACKSPACE:
        calc.backspace()


def feed(calc: Calculator, keys: Iterable[str]) -> str:
    """Press each key in order and return the resulting display."""
    for key in keys:
        event = translate(key)
        if event is not None:
            dispatch(calc, event)
    return calc.query_display()


def split_keys(text: str) -> list[str]:
    """Break typed text into individual keys.

    Whitespace separates words. A word that is a named key ('Enter',
    'backspace', ...) stays whole; anything else is one key per character.

        '12+3='          → ['1', '2', '+', '3', '=']
        '5 / 0 Enter'    → ['5', '/', '0', 'Enter']
    """
    keys: list[str] = []
    for word in text.split():
        if len(word) > 1 and word.lower() in _NAMED_KEYS:
            keys.append(word)
        else:
            keys.extend(word)
    return keys
