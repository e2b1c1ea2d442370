"""Persistent JSON defaults for selection sessions.

Stores the search debounce delay, blur grace delay, and page size.
All access is defensive: malformed or missing config falls back safely.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from platformdirs import user_config_dir

logger = logging.getLogger(__name__)

APP_NAME = "lazyselect"
CONFIG_FILENAME = "config.json"
DEFAULT_CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
CONFIG_PATH = DEFAULT_CONFIG_PATH

DEFAULT_DEBOUNCE_SECONDS = 0.5
DEFAULT_BLUR_GRACE_SECONDS = 0.25
DEFAULT_PAGE_SIZE = 5
MAX_DELAY_SECONDS = 10.0


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as exc:
        logger.debug("ignoring unreadable config %s: %s", CONFIG_PATH, exc)
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Filesystem errors are logged and otherwise ignored so a read-only config
    directory never breaks a session.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except OSError as exc:
        logger.warning("could not write config %s: %s", CONFIG_PATH, exc)


def _load_seconds(key: str, default: float) -> float:
    """Read a delay in seconds constrained to ``[0, MAX_DELAY_SECONDS]``."""
    value = load_config().get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    if value < 0 or value > MAX_DELAY_SECONDS:
        return default
    return float(value)


def _save_seconds(key: str, seconds: float) -> None:
    clamped = max(0.0, min(MAX_DELAY_SECONDS, float(seconds)))
    config = load_config()
    config[key] = round(clamped, 3)
    save_config(config)


def load_debounce_seconds() -> float:
    """Trailing-edge delay applied to keystroke-driven searches."""
    return _load_seconds("debounce_seconds", DEFAULT_DEBOUNCE_SECONDS)


def save_debounce_seconds(seconds: float) -> None:
    _save_seconds("debounce_seconds", seconds)


def load_blur_grace_seconds() -> float:
    """Delay between blur and close, cancellable by a pointer-down inside."""
    return _load_seconds("blur_grace_seconds", DEFAULT_BLUR_GRACE_SECONDS)


def save_blur_grace_seconds(seconds: float) -> None:
    _save_seconds("blur_grace_seconds", seconds)


def load_page_size() -> int:
    """Rows moved by PageUp/PageDown; booleans and non-positive ints are rejected."""
    value = load_config().get("page_size")
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        return DEFAULT_PAGE_SIZE
    return value


def save_page_size(page_size: int) -> None:
    if page_size <= 0:
        return
    config = load_config()
    config["page_size"] = int(page_size)
    save_config(config)
