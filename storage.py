"""Key-value storage for Yatzi.

A small localStorage-style store kept in ~/.yatzi_storage.json: a flat JSON
object mapping keys to string values. The only record the game keeps is the
list of player names from the last setup, so a reload skips the setup form.
No frontend dependency — follows the same pattern as settings.py.
"""

import json
import logging
import os
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)

PLAYER_NAMES_KEY = "yatziPlayerNames"


def _default_path():
    """Return the default path for the storage file."""
    return Path.home() / ".yatzi_storage.json"


def _read_all(path):
    """Load every stored item. Returns {} on missing/corrupt."""
    try:
        data = json.loads(path.read_text())
    except FileNotFoundError:
        return {}
    except (json.JSONDecodeError, OSError):
        logger.warning("Ignoring unreadable storage file %s", path)
        return {}
    if not isinstance(data, dict):
        return {}
    return {k: v for k, v in data.items() if isinstance(v, str)}


def _write_all(items, path):
    """Atomically replace the storage file. Silently ignores write errors."""
    try:
        raw = json.dumps(items, indent=2).encode()
        fd, tmp = tempfile.mkstemp(dir=path.parent, suffix=".tmp")
        closed = False
        try:
            os.write(fd, raw)
            os.close(fd)
            closed = True
            os.replace(tmp, path)
        except BaseException:
            if not closed:
                os.close(fd)
            try:
                os.unlink(tmp)
            except OSError:
                pass
            raise
    except OSError:
        logger.warning("Could not write storage file %s", path, exc_info=True)


def get_item(key, path=None):
    """Return the string stored under key, or None."""
    path = Path(path) if path is not None else _default_path()
    return _read_all(path).get(key)


def set_item(key, value, path=None):
    """Store a string value under key."""
    path = Path(path) if path is not None else _default_path()
    items = _read_all(path)
    items[key] = value
    _write_all(items, path)


def remove_item(key, path=None):
    """Delete key. Missing keys are fine."""
    path = Path(path) if path is not None else _default_path()
    items = _read_all(path)
    if key in items:
        del items[key]
        _write_all(items, path)


def save_player_names(names, path=None):
    """Remember the player names of the game just started."""
    set_item(PLAYER_NAMES_KEY, json.dumps(list(names)), path=path)


def load_player_names(path=None):
    """Return the remembered player names, or None.

    Anything other than a non-empty JSON list of strings is treated as no
    stored session: the key is cleared and None returned.
    """
    raw = get_item(PLAYER_NAMES_KEY, path=path)
    if raw is None:
        return None
    try:
        names = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("Discarding unparseable player names: %r", raw)
        names = None
    if (isinstance(names, list) and names
            and all(isinstance(name, str) for name in names)):
        return names
    clear_player_names(path=path)
    return None


def clear_player_names(path=None):
    """Forget the remembered player names."""
    remove_item(PLAYER_NAMES_KEY, path=path)
