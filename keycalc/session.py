"""Persist a Calculator between CLI invocations.

Each `keycalc press` is a separate process, so the engine state is written to
a small JSON file after every command and read back at the start of the next:

    {"state": {...CalculatorState...}, "saved_at": "2026-01-01T00:00:00Z"}
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from keycalc.config import Settings
from keycalc.engine import Calculator
from keycalc.models import CalculatorState

logger = logging.getLogger(__name__)


def save_session(calc: Calculator, path: Path) -> None:
    """Write the calculator's state to path, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = {
        "state": calc.state.to_dict(),
        "saved_at": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ"),
    }
    path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
    logger.debug("Session saved to %s", path)


def load_session(path: Path, settings: Optional[Settings] = None) -> Optional[Calculator]:
    """Rebuild a Calculator from a saved session.

    Returns None when the file is missing, unreadable, or holds a state the
    engine could never have produced.
    """
    if not path.exists():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        state = CalculatorState.from_dict(data["state"])
    except (json.JSONDecodeError, OSError, KeyError, TypeError, ValueError) as e:
        logger.debug("Discarding unreadable session %s: %s", path, e)
        return None

    logger.debug("Session loaded from %s", path)
    if settings is None:
        return Calculator(state=state)
    return Calculator.from_settings(settings, state=state)


def clear_session(path: Path) -> bool:
    """Delete the saved session. Returns True if a file was removed."""
    try:
        path.unlink()
    except FileNotFoundError:
        return False
    logger.debug("Session cleared: %s", path)
    return True
