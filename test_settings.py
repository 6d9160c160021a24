"""
Settings Test Suite

Tests for persistent settings load/save.

Sections:
    1. Load — missing file, corrupt file, partial, unknown keys, wrong types
    2. Save — round-trip, bad path
"""
import json

from settings import DEFAULTS, load_settings, save_settings

# ── 1. Load ──────────────────────────────────────────────────────────────────


def test_defaults():
    assert DEFAULTS == {
        "roll_steps": 10,
        "roll_interval_ms": 60,
        "zero_counts_as_scored": False,
    }


def test_load_missing_file_returns_defaults(tmp_path):
    """Loading from a nonexistent file returns DEFAULTS."""
    path = tmp_path / "no_such_file.json"
    assert load_settings(path=path) == DEFAULTS


def test_load_corrupt_file_returns_defaults(tmp_path):
    """Loading from a corrupt (non-JSON) file returns DEFAULTS."""
    path = tmp_path / "bad.json"
    path.write_text("not json at all {{{")
    assert load_settings(path=path) == DEFAULTS


def test_load_non_object_returns_defaults(tmp_path):
    path = tmp_path / "list.json"
    path.write_text("[1, 2, 3]")
    assert load_settings(path=path) == DEFAULTS


def test_partial_file_fills_missing_keys(tmp_path):
    """A file with only some keys gets missing ones filled from DEFAULTS."""
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"roll_steps": 4}))
    result = load_settings(path=path)
    assert result["roll_steps"] == 4
    assert result["roll_interval_ms"] == DEFAULTS["roll_interval_ms"]
    assert result["zero_counts_as_scored"] == DEFAULTS["zero_counts_as_scored"]


def test_unknown_keys_ignored(tmp_path):
    """Unknown keys in the file are dropped, not passed through."""
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"roll_steps": 4, "unknown_key": 42}))
    result = load_settings(path=path)
    assert "unknown_key" not in result
    assert result["roll_steps"] == 4


def test_wrong_type_falls_back_to_default(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"roll_steps": "ten", "zero_counts_as_scored": 1}))
    result = load_settings(path=path)
    assert result["roll_steps"] == DEFAULTS["roll_steps"]
    assert result["zero_counts_as_scored"] is False


def test_negative_values_are_clamped_to_zero(tmp_path):
    """A negative interval would crash the tick thread's sleep."""
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"roll_steps": -3, "roll_interval_ms": -60}))
    result = load_settings(path=path)
    assert result["roll_steps"] == 0
    assert result["roll_interval_ms"] == 0


# ── 2. Save ──────────────────────────────────────────────────────────────────


def test_save_load_round_trip(tmp_path):
    """Settings survive a save/load round trip."""
    path = tmp_path / "settings.json"
    settings = {"roll_steps": 0, "roll_interval_ms": 30, "zero_counts_as_scored": True}
    save_settings(settings, path=path)
    assert load_settings(path=path) == settings


def test_save_to_bad_path_does_not_raise(tmp_path):
    """Writing to an invalid path silently fails."""
    bad_path = tmp_path / "nonexistent_dir" / "nested" / "settings.json"
    save_settings({"roll_steps": 3}, path=bad_path)
