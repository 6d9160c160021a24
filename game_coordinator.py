"""
GameCoordinator — All non-UI game coordination logic.

Owns the game state, setup phase, roll animation window, pending notice and
persistence of the player roster. The web layer delegates to this and only
handles rendering and input translation.
"""
from __future__ import annotations

import logging
from pathlib import Path

from game_engine import (
    DieState,
    GameState,
    Player,
    can_roll,
    category_by_id,
    clean_player_names,
    commit_rejection,
    determine_winners,
    preview_score,
    start_rejection,
    toggle_die_hold,
)
from game_engine import (
    advance_turn as engine_advance_turn,
)
from game_engine import (
    commit_score as engine_commit_score,
)
from game_engine import (
    roll_dice as engine_roll_dice,
)
from notices import (
    Notice,
    NoticeKind,
    PendingAction,
    game_over_notice,
    hold_rejected_notice,
    rejection_notice,
    reset_game_notice,
    skip_round_notice,
    turn_change_notice,
)
from settings import DEFAULTS
from storage import clear_player_names, load_player_names, save_player_names

logger = logging.getLogger(__name__)


class GameCoordinator:
    """Coordinates game state, the roll window, and turn management.

    The frontend reads coordinator properties to decide what to render, and
    calls coordinator action methods in response to user input. Every
    validation failure ends up in self.notice instead of raising.
    """

    def __init__(self, roll_steps: int = DEFAULTS["roll_steps"],
                 zero_counts_as_scored: bool = DEFAULTS["zero_counts_as_scored"],
                 storage_path: str | Path | None = None) -> None:
        """Initialize the coordinator in the setup phase.

        Args:
            roll_steps: Number of ticks a roll animation lasts (0 = instant).
            zero_counts_as_scored: Whether committing 0 fills a category.
            storage_path: Key-value store file (None = default location).
        """
        # None while the setup form is showing
        self.state: GameState | None = None

        self.roll_steps = roll_steps
        self.zero_counts_as_scored = zero_counts_as_scored
        self.storage_path = storage_path

        # Roll animation window (coordinator owns timing; frontend owns display randomization)
        self.is_rolling = False
        self.roll_timer = 0

        # Latest modal message, answered via confirm_notice()/dismiss_notice()
        self.notice: Notice | None = None

    # ── Properties ────────────────────────────────────────────────────────

    @property
    def showing_setup(self) -> bool:
        """Whether the player setup form should be shown."""
        return self.state is None

    @property
    def players(self) -> tuple[Player, ...]:
        return self.state.players if self.state else ()

    @property
    def current_player_index(self) -> int:
        return self.state.current_player_index if self.state else 0

    @property
    def current_player(self) -> Player | None:
        return self.state.current_player if self.state else None

    @property
    def dice(self) -> tuple[DieState, ...]:
        return self.state.dice if self.state else ()

    @property
    def rolls_used(self) -> int:
        return self.state.rolls_used if self.state else 0

    @property
    def game_over(self) -> bool:
        return self.state.game_over if self.state else False

    @property
    def winners(self) -> tuple[Player, ...]:
        """Players sharing the best total once the game is over, else ()."""
        if not self.game_over:
            return ()
        return determine_winners(self.state.players)

    @property
    def can_roll_now(self) -> bool:
        """Whether dice can be rolled right now."""
        if self.state is None or self.is_rolling:
            return False
        return can_roll(self.state)

    # ── Setup / reset ─────────────────────────────────────────────────────

    def start_game(self, names: list[str]) -> bool:
        """Create the players and leave setup. Returns True on success."""
        names = clean_player_names(names)
        rejection = start_rejection(names)
        if rejection is not None:
            self.notice = rejection_notice(rejection)
            return False

        self._begin(names)
        save_player_names(names, path=self.storage_path)
        logger.debug("Game started with %d players", len(names))
        return True

    def _begin(self, names: list[str]) -> None:
        self.state = GameState.create_initial(names, self.zero_counts_as_scored)
        self.is_rolling = False
        self.roll_timer = 0
        self.notice = None

    def reset_game(self) -> None:
        """Discard players and dice and return to setup."""
        self.state = None
        self.is_rolling = False
        self.roll_timer = 0
        self.notice = None
        clear_player_names(path=self.storage_path)

    @classmethod
    def restore_session(cls, storage_path: str | Path | None = None, **kwargs) -> GameCoordinator:
        """Build a coordinator, resuming with the remembered roster if any.

        Scores are never stored, so a restored game starts from zero. A roster
        that would not pass start_game is forgotten and setup is shown.
        """
        coord = cls(storage_path=storage_path, **kwargs)
        names = load_player_names(path=storage_path)
        if names is None:
            return coord
        names = clean_player_names(names)
        rejection = start_rejection(names)
        if rejection is not None:
            logger.warning("Discarding stored roster (%s)", rejection.name)
            clear_player_names(path=storage_path)
            return coord
        coord._begin(names)
        return coord

    # ── Confirmation gate ─────────────────────────────────────────────────

    def request_skip_round(self) -> None:
        """Ask for confirmation before skipping the current turn."""
        if self.state is None or self.game_over:
            return
        self.notice = skip_round_notice()

    def request_reset(self) -> None:
        """Ask for confirmation before a full reset."""
        if self.state is None:
            return
        self.notice = reset_game_notice()

    def confirm_notice(self) -> None:
        """Close the current notice, running its pending action if any."""
        notice = self.notice
        self.notice = None
        if notice is None or notice.kind is not NoticeKind.CONFIRM:
            return
        if notice.action is PendingAction.SKIP_ROUND:
            self.skip_round()
        elif notice.action is PendingAction.RESET_GAME:
            self.reset_game()

    def dismiss_notice(self) -> None:
        """Close the current notice without acting on it."""
        self.notice = None

    # ── Action methods (called by frontend on input) ──────────────────────

    def roll_dice(self) -> None:
        """Start a dice roll.

        The final values are decided right away; is_rolling stays True for
        roll_steps ticks so the frontend can animate. Ignored while rolling,
        after three rolls, or when the game is over.
        """
        if not self.can_roll_now:
            return
        self.state = engine_roll_dice(self.state)
        self.roll_timer = 0
        self.is_rolling = self.roll_steps > 0

    def toggle_hold(self, die_index: int) -> None:
        """Toggle hold on a die. Needs a finished roll first."""
        if self.state is None or self.game_over:
            return
        if self.rolls_used == 0 or self.is_rolling:
            self.notice = hold_rejected_notice()
            return
        self.state = toggle_die_hold(self.state, die_index)

    def preview_score(self, category) -> int:
        """Score the current hand would earn in category."""
        if self.state is None:
            return 0
        return preview_score(self.state, category)

    def commit_score(self, category, player_index: int, score: int | None = None) -> bool:
        """Record a score for player_index and pass the turn.

        Args:
            category: Category or category id
            player_index: Seat the score is meant for
            score: Precomputed score (defaults to the preview score)

        Returns:
            True if the score was recorded
        """
        if self.state is None or self.game_over:
            return False
        cat = category_by_id(category)
        if cat is None:
            logger.warning("Ignoring commit for unknown category %r", category)
            return False

        rejection = commit_rejection(self.state, cat, player_index)
        if rejection is not None:
            self.notice = rejection_notice(rejection)
            return False

        if score is None:
            score = preview_score(self.state, cat)
        self.state = engine_commit_score(self.state, cat, player_index, score)
        self._on_turn_ended()
        return True

    def skip_round(self) -> None:
        """End the current turn without scoring."""
        self.advance_turn()

    def advance_turn(self) -> None:
        """Pass the turn to the next player, or finish the game."""
        if self.state is None or self.game_over:
            return
        self.state = engine_advance_turn(self.state)
        self._on_turn_ended()

    # ── Frame update ─────────────────────────────────────────────────────

    def tick(self) -> None:
        """Advance one step of the roll animation window."""
        if self.is_rolling:
            self.roll_timer += 1
            if self.roll_timer >= self.roll_steps:
                self.is_rolling = False
                self.roll_timer = 0

    # ── Internal ─────────────────────────────────────────────────────────

    def _on_turn_ended(self) -> None:
        """Clear the roll window and announce the next player or the result."""
        self.is_rolling = False
        self.roll_timer = 0
        if self.state.game_over:
            winners = determine_winners(self.state.players)
            self.notice = game_over_notice(self.state.players, winners)
            logger.debug("Game over, winners: %s", [p.name for p in winners])
        else:
            self.notice = turn_change_notice(self.state.current_player.name)
            logger.debug("Turn passes to %s", self.state.current_player.name)
