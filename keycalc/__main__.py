"""CLI for the keycalc four-function calculator.

Usage:
    python -m keycalc press 3 + 4 x 2 =     # Feed keys, print the display
    python -m keycalc press --fresh 0.1+0.2=
    python -m keycalc show                  # Current display and state
    python -m keycalc clear                 # Reset and forget the session
    python -m keycalc keys                  # Show key bindings
    python -m keycalc repl                  # Interactive keypad
"""

from __future__ import annotations

import logging

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from keycalc.config import Settings, load_settings
from keycalc.engine import Calculator
from keycalc.errors import SettingsError
from keycalc.keymap import KEY_BINDINGS, feed, split_keys
from keycalc.session import clear_session, load_session, save_session

app = typer.Typer(
    name="keycalc",
    help="Four-function keypad calculator",
    no_args_is_help=True,
)
console = Console(stderr=True)

_QUIT_WORDS = {"q", "quit", "exit"}


def _configure_logging(verbose: bool) -> None:
    """Route keycalc debug logging through Rich when --verbose is set."""
    if not verbose:
        return
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False, show_time=False)],
        force=True,
    )


def _settings() -> Settings:
    try:
        return load_settings()
    except SettingsError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)


def _open(settings: Settings, fresh: bool = False) -> Calculator:
    """Resume the saved session, or start a new calculator."""
    calc = None if fresh else load_session(settings.session_path, settings)
    return calc if calc is not None else Calculator.from_settings(settings)


def _render_state(calc: Calculator) -> Table:
    s = calc.state
    table = Table(title="Calculator", show_header=True, header_style="bold")
    table.add_column("Field", style="dim", min_width=14)
    table.add_column("Value", min_width=10)
    table.add_row("Display", f"[bold]{escape(calc.query_display())}[/bold]")
    table.add_row("Pending input", escape(s.pending_input) or "--")
    table.add_row("Accumulator", "--" if s.accumulator is None else repr(s.accumulator))
    table.add_row("Operator", s.operator.value if s.operator else "--")
    table.add_row("Error", "[red]yes[/red]" if s.in_error else "no")
    return table


@app.command("press")
def cmd_press(
    keys: list[str] = typer.Argument(..., help="Keys to press, e.g. '12+3=' or 5 / 0 Enter"),
    fresh: bool = typer.Option(False, "--fresh", "-f", help="Ignore the saved session and start from 0"),
    no_save: bool = typer.Option(False, "--no-save", help="Don't write the session back"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log engine decisions"),
) -> None:
    """Press keys and print the resulting display."""
    _configure_logging(verbose)
    settings = _settings()
    calc = _open(settings, fresh=fresh)

    pressed = [k for arg in keys for k in split_keys(arg)]
    display = feed(calc, pressed)

    if not no_save:
        save_session(calc, settings.session_path)
    typer.echo(display)


@app.command("show")
def cmd_show(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log engine decisions"),
) -> None:
    """Show the current display and state of the saved session."""
    _configure_logging(verbose)
    settings = _settings()
    calc = _open(settings)
    console.print()
    console.print(_render_state(calc))
    console.print()


@app.command("clear")
def cmd_clear(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log engine decisions"),
) -> None:
    """Reset the calculator and delete the saved session."""
    _configure_logging(verbose)
    settings = _settings()
    if clear_session(settings.session_path):
        console.print(f"Session cleared ({settings.session_path})")
    else:
        console.print("[dim]No saved session.[/dim]")
    typer.echo("0")


@app.command("keys")
def cmd_keys() -> None:
    """Show key bindings."""
    table = Table(title="Key Bindings", show_header=True, header_style="bold")
    table.add_column("Keys", style="green", min_width=12)
    table.add_column("Action", min_width=30)
    for keys, description in KEY_BINDINGS:
        table.add_row(escape(keys), description)

    console.print()
    console.print(table)
    console.print()


@app.command("repl")
def cmd_repl(
    fresh: bool = typer.Option(False, "--fresh", "-f", help="Ignore the saved session and start from 0"),
    no_save: bool = typer.Option(False, "--no-save", help="Don't write the session back on exit"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log engine decisions"),
) -> None:
    """Interactive keypad: type keys, see the display after each line."""
    _configure_logging(verbose)
    settings = _settings()
    calc = _open(settings, fresh=fresh)

    console.print("[dim]Type keys (e.g. 12+3=), 'keys' for bindings, 'q' to quit.[/dim]")
    console.print(f"[bold]{escape(calc.query_display())}[/bold]")
    while True:
        try:
            line = console.input("> ")
        except (EOFError, KeyboardInterrupt):
            console.print()
            break

        word = line.strip().lower()
        if word in _QUIT_WORDS:
            break
        if word == "keys":
            cmd_keys()
            continue

        display = feed(calc, split_keys(line))
        style = "bold red" if calc.in_error else "bold"
        console.print(f"[{style}]{escape(display)}[/{style}]")

    if not no_save:
        save_session(calc, settings.session_path)


if __name__ == "__main__":
    app()
