"""keycalc — the state machine behind a four-function keypad calculator.

Turns discrete key presses (digits, operators, =, clear, backspace) into the
string a calculator display shows. Evaluation is strictly left to right, and
division by zero latches an error until the calculator is cleared.

Usage:
    python -m keycalc press 3 + 4 x 2 =    # → 14
    python -m keycalc press --fresh 5/0=    # → Error
    python -m keycalc repl                  # Interactive keypad
    python -m keycalc keys                  # Key bindings
"""
