"""Settings for keycalc, read from the environment.

    KEYCALC_PRECISION     decimal places kept on results (default 12)
    KEYCALC_ERROR_TEXT    display text while in the error state (default 'Error')
    KEYCALC_SESSION_FILE  where the CLI persists state between invocations
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

from keycalc.errors import SettingsError

DEFAULT_PRECISION = 12
DEFAULT_ERROR_TEXT = "Error"


def default_session_path() -> Path:
    """~/.keycalc/session.json"""
    return Path.home() / ".keycalc" / "session.json"


@dataclass(frozen=True)
class Settings:
    """Resolved configuration."""

    precision: int = DEFAULT_PRECISION
    error_indicator: str = DEFAULT_ERROR_TEXT
    session_path: Path = field(default_factory=default_session_path)


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build Settings from environment variables.

    Args:
        environ: Mapping to read from. Defaults to os.environ.

    Raises:
        SettingsError: KEYCALC_PRECISION is not a non-negative integer, or
            KEYCALC_ERROR_TEXT is blank.
    """
    env = os.environ if environ is None else environ

    raw_precision = env.get("KEYCALC_PRECISION", "").strip()
    precision = DEFAULT_PRECISION
    if raw_precision:
        try:
            precision = int(raw_precision)
        except ValueError:
            raise SettingsError(f"KEYCALC_PRECISION must be an integer, got {raw_precision!r}")
        if precision < 0:
            raise SettingsError(f"KEYCALC_PRECISION must be >= 0, got {precision}")

    error_text = env.get("KEYCALC_ERROR_TEXT", DEFAULT_ERROR_TEXT)
    if not error_text.strip():
        raise SettingsError("KEYCALC_ERROR_TEXT must not be blank")

    raw_path = env.get("KEYCALC_SESSION_FILE", "").strip()
    session_path = Path(raw_path).expanduser() if raw_path else default_session_path()

    return Settings(
        precision=precision,
        error_indicator=error_text,
        session_path=session_path,
    )
