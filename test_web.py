"""Tests for web.py — action dispatch and the page route."""

import json
from dataclasses import replace

import pytest

from frontend_adapter import FrontendAdapter
from game_coordinator import GameCoordinator
from game_engine import Category, DieState
from settings import DEFAULTS
from web import _handle_action, app, main

# ── Helpers ──────────────────────────────────────────────────────────────────

@pytest.fixture
def adapter(tmp_path):
    """Adapter with instant rolls and a two-player game."""
    coord = GameCoordinator(roll_steps=0, storage_path=tmp_path / "storage.json")
    coord.start_game(["Ann", "Bo"])
    return FrontendAdapter(coord)


def _set_dice(adapter, *values):
    coord = adapter.coordinator
    coord.state = replace(coord.state,
                          dice=tuple(DieState(value=v) for v in values),
                          rolls_used=1)


# ── Page ─────────────────────────────────────────────────────────────────────

def test_index_page():
    client = app.test_client()
    response = client.get("/")
    assert response.status_code == 200
    assert b"Yatzi" in response.data


def test_index_page_escapes_player_names():
    response = app.test_client().get("/")
    assert b"escapeHtml(p.name)" in response.data
    assert b">${p.name}<" not in response.data


# ── Entry point ──────────────────────────────────────────────────────────────

def test_main_writes_settings_file(tmp_path, monkeypatch):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"roll_interval_ms": -5}))
    monkeypatch.setattr("settings._default_path", lambda: path)
    monkeypatch.setattr("sys.argv", ["yatzi-web"])
    monkeypatch.setattr(app, "run", lambda **kwargs: None)
    main()
    assert json.loads(path.read_text()) == {**DEFAULTS, "roll_interval_ms": 0}


# ── Dispatch ─────────────────────────────────────────────────────────────────

class TestHandleAction:

    def test_start(self, tmp_path):
        coord = GameCoordinator(storage_path=tmp_path / "storage.json")
        adapter = FrontendAdapter(coord)
        _handle_action(adapter, {"action": "start", "names": ["Ann", "", "Bo"]})
        assert [p.name for p in coord.players] == ["Ann", "Bo"]

    def test_start_with_bad_names_ignored(self, tmp_path):
        coord = GameCoordinator(storage_path=tmp_path / "storage.json")
        _handle_action(FrontendAdapter(coord), {"action": "start", "names": "Ann"})
        assert coord.showing_setup is True

    def test_roll(self, adapter):
        _handle_action(adapter, {"action": "roll"})
        assert adapter.coordinator.rolls_used == 1

    def test_hold(self, adapter):
        _handle_action(adapter, {"action": "roll"})
        _handle_action(adapter, {"action": "hold", "die_index": 2})
        assert adapter.coordinator.dice[2].held is True

    @pytest.mark.parametrize("die_index", [-1, 5, "2", None])
    def test_hold_bad_index_ignored(self, adapter, die_index):
        _handle_action(adapter, {"action": "roll"})
        _handle_action(adapter, {"action": "hold", "die_index": die_index})
        assert not any(d.held for d in adapter.coordinator.dice)

    def test_score(self, adapter):
        _set_dice(adapter, 3, 3, 3, 5, 6)
        _handle_action(adapter, {"action": "score", "category": "three_of_a_kind",
                                 "player_index": 0, "score": 20})
        coord = adapter.coordinator
        assert coord.players[0].scorecard.scores[Category.THREE_OF_A_KIND] == 20
        assert coord.current_player.name == "Bo"

    def test_score_without_score_uses_preview(self, adapter):
        _set_dice(adapter, 5, 5, 5, 5, 5)
        _handle_action(adapter, {"action": "score", "category": "yatzi", "player_index": 0})
        assert adapter.coordinator.players[0].scorecard.scores[Category.YATZI] == 50

    def test_score_with_bad_score_uses_preview(self, adapter):
        _set_dice(adapter, 5, 5, 5, 5, 5)
        _handle_action(adapter, {"action": "score", "category": "yatzi",
                                 "player_index": 0, "score": "lots"})
        assert adapter.coordinator.players[0].scorecard.scores[Category.YATZI] == 50

    def test_score_unknown_category_ignored(self, adapter):
        _set_dice(adapter, 5, 5, 5, 5, 5)
        _handle_action(adapter, {"action": "score", "category": "Yatzi", "player_index": 0})
        assert adapter.coordinator.current_player_index == 0

    def test_score_for_other_player_shows_notice(self, adapter):
        _set_dice(adapter, 5, 5, 5, 5, 5)
        _handle_action(adapter, {"action": "score", "category": "yatzi", "player_index": 1})
        assert adapter.coordinator.notice is not None
        assert adapter.coordinator.current_player_index == 0

    def test_skip_then_confirm(self, adapter):
        _handle_action(adapter, {"action": "skip"})
        assert adapter.coordinator.current_player_index == 0
        _handle_action(adapter, {"action": "confirm"})
        assert adapter.coordinator.current_player_index == 1

    def test_reset_then_dismiss(self, adapter):
        _handle_action(adapter, {"action": "reset"})
        _handle_action(adapter, {"action": "dismiss"})
        assert adapter.coordinator.showing_setup is False
        assert adapter.coordinator.notice is None

    def test_reset_then_confirm(self, adapter):
        _handle_action(adapter, {"action": "reset"})
        _handle_action(adapter, {"action": "confirm"})
        assert adapter.coordinator.showing_setup is True

    def test_unknown_action_ignored(self, adapter):
        state = adapter.coordinator.state
        _handle_action(adapter, {"action": "cheat"})
        _handle_action(adapter, {})
        assert adapter.coordinator.state is state
