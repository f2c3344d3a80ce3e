"""Persistent JSON config helpers.

Stores presentation preferences only: simulated fetch delay, checkbox
position, and UI theme. Tree contents and selections are never persisted.
All access is defensive: malformed or missing config falls back safely.
"""

from __future__ import annotations

import json
import math
from pathlib import Path

from platformdirs import user_config_dir

from .runtime.resolver import DEFAULT_FETCH_DELAY_SECONDS

APP_NAME = "lazypicker"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
CHECKBOX_POSITIONS = ("left", "right")


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except Exception:
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Any filesystem/serialization error is ignored to keep runtime behavior
    non-fatal when config cannot be written.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except Exception:
        pass


def load_fetch_delay_seconds() -> float:
    """Return the simulated fetch delay; booleans and negatives fall back to default."""
    value = load_config().get("fetch_delay_seconds")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return DEFAULT_FETCH_DELAY_SECONDS
    if value < 0 or not math.isfinite(value):
        return DEFAULT_FETCH_DELAY_SECONDS
    return float(value)


def save_fetch_delay_seconds(seconds: float) -> None:
    config = load_config()
    config["fetch_delay_seconds"] = max(0.0, float(seconds))
    save_config(config)


def load_checkbox_position() -> str:
    value = load_config().get("checkbox_position")
    return value if value in CHECKBOX_POSITIONS else "left"


def save_checkbox_position(position: str) -> None:
    if position not in CHECKBOX_POSITIONS:
        return
    config = load_config()
    config["checkbox_position"] = position
    save_config(config)


def load_theme_name() -> str | None:
    """Load persisted UI theme name, returning ``None`` when unset/invalid."""
    value = load_config().get("theme")
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped if stripped else None


def save_theme_name(theme_name: str) -> None:
    """Persist selected UI theme name."""
    stripped = str(theme_name).strip()
    if not stripped:
        return
    config = load_config()
    config["theme"] = stripped
    save_config(config)
