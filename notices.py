"""Notices for Yatzi — alerts and confirmation requests for the player.

The coordinator never calls into the UI. It publishes a Notice value and the
frontend shows it as a modal, then reports back with confirm or dismiss.
Pure Python, no frontend dependency.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from game_engine import Rejection


class NoticeKind(Enum):
    ALERT = "alert"
    CONFIRM = "confirm"


class PendingAction(Enum):
    """Destructive actions that wait for a confirmation."""
    SKIP_ROUND = "skip_round"
    RESET_GAME = "reset_game"


@dataclass(frozen=True)
class Notice:
    """A modal message emitted by the coordinator."""
    title: str
    message: str
    kind: NoticeKind = NoticeKind.ALERT
    action: PendingAction | None = None

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "message": self.message,
            "kind": self.kind.value,
            "action": self.action.value if self.action else None,
        }


ATTENTION = "Attention"

_REJECTION_MESSAGES = {
    Rejection.WRONG_PLAYER: "You can only enter points for the current player.",
    Rejection.NOT_ROLLED: "Please roll the dice first.",
    Rejection.ALREADY_SCORED: "This category has already been scored.",
    Rejection.NO_PLAYERS: "Please enter at least one name to start the game.",
    Rejection.TOO_MANY_PLAYERS: "At most six players can join a game.",
}

HOLD_BEFORE_ROLL_MESSAGE = "Please roll the dice before holding any of them."


def rejection_notice(rejection: Rejection) -> Notice:
    """Alert explaining why an action was refused."""
    return Notice(ATTENTION, _REJECTION_MESSAGES[rejection])


def hold_rejected_notice() -> Notice:
    return Notice(ATTENTION, HOLD_BEFORE_ROLL_MESSAGE)


def turn_change_notice(player_name: str) -> Notice:
    return Notice("Next player", f"{player_name} is up.")


def game_over_notice(players, winners) -> Notice:
    """Summarize the finished game.

    Args:
        players: every Player, in seat order
        winners: the players sharing the best grand total
    """
    best = winners[0].totals.grand_total
    if len(winners) > 1:
        names = " and ".join(p.name for p in winners)
        headline = f"It's a tie! {names} share the win with {best} points."
    else:
        headline = f"{winners[0].name} wins with {best} points!"
    final_scores = ", ".join(f"{p.name}: {p.totals.grand_total}" for p in players)
    return Notice("Game over!", f"{headline}\n\nFinal scores: {final_scores}")


def skip_round_notice() -> Notice:
    return Notice(
        "Skip round",
        "Do you really want to skip this round? The current player enters "
        "no points this round and the next player takes over.",
        kind=NoticeKind.CONFIRM,
        action=PendingAction.SKIP_ROUND,
    )


def reset_game_notice() -> Notice:
    return Notice(
        "Reset game",
        "Do you really want to restart the game and enter new players?",
        kind=NoticeKind.CONFIRM,
        action=PendingAction.RESET_GAME,
    )
