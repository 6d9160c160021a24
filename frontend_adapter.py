"""FrontendAdapter — Shared UI state management for the Yatzi browser frontend.

Owns the cosmetic roll animation, potential-score previews and the JSON
snapshot pushed to the browser. Pure Python — no web framework
dependency.

The web layer creates a FrontendAdapter wrapping a GameCoordinator and
delegates UI-state logic here, keeping only transport and input translation
in web.py.
"""

import random

from game_engine import CATEGORIES, SEPARATOR, Category, calculate_score
from settings import DEFAULTS


CATEGORY_TOOLTIPS = {
    Category.ONES: "Sum of all dice showing 1",
    Category.TWOS: "Sum of all dice showing 2",
    Category.THREES: "Sum of all dice showing 3",
    Category.FOURS: "Sum of all dice showing 4",
    Category.FIVES: "Sum of all dice showing 5",
    Category.SIXES: "Sum of all dice showing 6",
    Category.THREE_OF_A_KIND: "3 of the same, score = sum of all dice",
    Category.FOUR_OF_A_KIND: "4 of the same, score = sum of all dice",
    Category.FULL_HOUSE: "3 of one + 2 of another = 25",
    Category.SMALL_STRAIGHT: "4 consecutive dice = 30",
    Category.LARGE_STRAIGHT: "5 consecutive dice = 40",
    Category.YATZI: "All 5 dice the same = 50",
    Category.CHANCE: "Sum of all dice, no pattern needed",
}


class FrontendAdapter:
    """Shared UI state management for the Yatzi frontend.

    Wraps a GameCoordinator; translates player input into coordinator calls
    and renders the coordinator into a snapshot.
    """

    def __init__(self, coordinator, roll_interval_ms=DEFAULTS["roll_interval_ms"]):
        self.coordinator = coordinator

        # Values shown while a roll animates (None = show the real dice)
        self.display_values = None

        # Milliseconds between animation ticks
        self.roll_interval_ms = roll_interval_ms

    # ── Game actions ──────────────────────────────────────────────────────

    def do_start(self, names):
        """Start a game from the setup form. Returns True if it started."""
        return self.coordinator.start_game(names)

    def do_roll(self):
        """Roll dice. Returns True if a roll animation started."""
        self.coordinator.roll_dice()
        if self.coordinator.is_rolling:
            self._scramble()
            return True
        return False

    def do_hold(self, die_index):
        """Toggle hold on a die."""
        self.coordinator.toggle_hold(die_index)

    def do_score(self, category, player_index, score=None):
        """Commit a category for a player.

        The browser sends the potential score it displayed; without one the
        preview score is used.
        """
        if self.coordinator.is_rolling:
            return False
        if score is None:
            score = self.coordinator.preview_score(category)
        return self.coordinator.commit_score(category, player_index, score)

    def do_skip(self):
        """Ask to skip the round (confirmation required)."""
        self.coordinator.request_skip_round()

    def do_reset(self):
        """Ask to reset the game (confirmation required)."""
        self.coordinator.request_reset()

    def confirm(self):
        self.coordinator.confirm_notice()
        self._sync_display()

    def dismiss(self):
        self.coordinator.dismiss_notice()

    # ── Per-frame update ──────────────────────────────────────────────────

    def update(self):
        """Advance the roll animation by one step.

        Returns dict of events that occurred this step:
            roll_ended
        """
        coord = self.coordinator
        events = {"roll_ended": False}

        was_rolling = coord.is_rolling
        coord.tick()

        if coord.is_rolling:
            self._scramble()
        elif was_rolling:
            events["roll_ended"] = True
            self.display_values = None
        else:
            self._sync_display()

        return events

    def _scramble(self):
        """Show random faces on unheld dice. Held dice never change."""
        self.display_values = [
            die.value if die.held else random.randint(1, 6)
            for die in self.coordinator.dice
        ]

    def _sync_display(self):
        if not self.coordinator.is_rolling:
            self.display_values = None

    # ── Data helpers ──────────────────────────────────────────────────────

    def get_potential_scores(self):
        """Potential scores for the current player's open categories.

        Empty before the first roll, during a roll animation and after the
        game has ended.
        """
        coord = self.coordinator
        if (coord.showing_setup or coord.rolls_used == 0
                or coord.is_rolling or coord.game_over):
            return {}
        scorecard = coord.current_player.scorecard
        return {
            cat.value: calculate_score(cat, coord.dice)
            for cat in Category
            if not scorecard.is_filled(cat)
        }

    # ── Full state snapshot (for web frontend) ────────────────────────────

    def get_game_snapshot(self):
        """Return a complete JSON-serializable dict of game + UI state.

        Used by the web frontend to push full state over WebSocket.
        """
        coord = self.coordinator

        if self.display_values is not None:
            values = self.display_values
        else:
            values = [d.value for d in coord.dice]
        dice = [
            {"value": value, "held": die.held}
            for value, die in zip(values, coord.dice)
        ]

        players = []
        for player in coord.players:
            totals = player.totals
            players.append({
                "id": player.id,
                "name": player.name,
                "scores": {cat.value: player.scorecard.scores[cat] for cat in Category},
                "filled": [cat.value for cat in Category if player.scorecard.is_filled(cat)],
                "totals": {
                    "upper_sum": totals.upper_sum,
                    "bonus": totals.bonus,
                    "lower_sum": totals.lower_sum,
                    "grand_total": totals.grand_total,
                },
            })

        categories = [
            {
                "id": info.id,
                "name": info.name,
                "section": info.section,
                "tooltip": (CATEGORY_TOOLTIPS[Category(info.id)]
                            if info.section != SEPARATOR else ""),
            }
            for info in CATEGORIES
        ]

        return {
            "showing_setup": coord.showing_setup,
            "players": players,
            "current_player_index": coord.current_player_index,
            "dice": dice,
            "rolls_used": coord.rolls_used,
            "is_rolling": coord.is_rolling,
            "can_roll": coord.can_roll_now,
            "potential_scores": self.get_potential_scores(),
            "game_over": coord.game_over,
            "winners": [p.name for p in coord.winners],
            "notice": coord.notice.to_dict() if coord.notice else None,
            "categories": categories,
            "roll_interval_ms": self.roll_interval_ms,
        }
