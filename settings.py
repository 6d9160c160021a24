"""Persistent settings for Yatzi.

Stores preferences in ~/.yatzi_settings.json.
No frontend dependency — follows the same pattern as storage.py.
"""

import json
from pathlib import Path

DEFAULTS = {
    "roll_steps": 10,
    "roll_interval_ms": 60,
    "zero_counts_as_scored": False,
}


def _default_path():
    """Return the default path for the settings file."""
    return Path.home() / ".yatzi_settings.json"


def load_settings(path=None):
    """Load settings from JSON file. Returns DEFAULTS on missing/corrupt.

    Merges with DEFAULTS so missing keys get default values.
    Unknown keys are ignored, as are values whose type differs from the default.
    Negative step counts and intervals are raised to 0.
    """
    if path is None:
        path = _default_path()
    path = Path(path)
    try:
        data = json.loads(path.read_text())
        if not isinstance(data, dict):
            return dict(DEFAULTS)
        # Merge: only keep known keys, fill missing from defaults
        result = dict(DEFAULTS)
        for key, default in DEFAULTS.items():
            if key in data and type(data[key]) is type(default):
                result[key] = data[key]
        # Counts and intervals cannot go below zero
        for key in ("roll_steps", "roll_interval_ms"):
            result[key] = max(0, result[key])
        return result
    except (FileNotFoundError, json.JSONDecodeError, OSError):
        return dict(DEFAULTS)


def save_settings(settings, path=None):
    """Write settings dict to JSON. Silently ignores write errors."""
    if path is None:
        path = _default_path()
    path = Path(path)
    try:
        path.write_text(json.dumps(settings, indent=2))
    except OSError:
        pass
