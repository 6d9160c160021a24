"""
Yatzi Game Engine - Pure game logic without GUI dependencies

This module contains the scoring rules and turn-state transitions for Yatzi.
It uses immutable data structures and pure functions to enable unit testing
without a browser.
"""
from dataclasses import dataclass, field, replace
from typing import Tuple
from enum import Enum
from collections import Counter
import random


class Category(str, Enum):
    """Yatzi score categories (values are the scorecard ids)"""
    ONES = "ones"
    TWOS = "twos"
    THREES = "threes"
    FOURS = "fours"
    FIVES = "fives"
    SIXES = "sixes"
    THREE_OF_A_KIND = "three_of_a_kind"
    FOUR_OF_A_KIND = "four_of_a_kind"
    FULL_HOUSE = "full_house"
    SMALL_STRAIGHT = "small_straight"
    LARGE_STRAIGHT = "large_straight"
    YATZI = "yatzi"
    CHANCE = "chance"


class Rejection(Enum):
    """Why an action was refused"""
    WRONG_PLAYER = "wrong_player"
    NOT_ROLLED = "not_rolled"
    ALREADY_SCORED = "already_scored"
    NO_PLAYERS = "no_players"
    TOO_MANY_PLAYERS = "too_many_players"


@dataclass(frozen=True)
class CategoryInfo:
    """One row of the scoresheet"""
    id: str
    name: str
    section: str  # "upper", "lower" or "separator"


SEPARATOR = "separator"

CATEGORIES = (
    CategoryInfo(Category.ONES.value, "Ones", "upper"),
    CategoryInfo(Category.TWOS.value, "Twos", "upper"),
    CategoryInfo(Category.THREES.value, "Threes", "upper"),
    CategoryInfo(Category.FOURS.value, "Fours", "upper"),
    CategoryInfo(Category.FIVES.value, "Fives", "upper"),
    CategoryInfo(Category.SIXES.value, "Sixes", "upper"),
    CategoryInfo(SEPARATOR, "", SEPARATOR),
    CategoryInfo(Category.THREE_OF_A_KIND.value, "Three of a Kind", "lower"),
    CategoryInfo(Category.FOUR_OF_A_KIND.value, "Four of a Kind", "lower"),
    CategoryInfo(Category.FULL_HOUSE.value, "Full House", "lower"),
    CategoryInfo(Category.SMALL_STRAIGHT.value, "Small Straight", "lower"),
    CategoryInfo(Category.LARGE_STRAIGHT.value, "Large Straight", "lower"),
    CategoryInfo(Category.YATZI.value, "Yatzi", "lower"),
    CategoryInfo(Category.CHANCE.value, "Chance", "lower"),
)

UPPER_CATEGORIES = tuple(Category(c.id) for c in CATEGORIES if c.section == "upper")
LOWER_CATEGORIES = tuple(Category(c.id) for c in CATEGORIES if c.section == "lower")

MIN_PLAYERS = 1
MAX_PLAYERS = 6
MAX_ROLLS = 3
NUM_DICE = 5
UPPER_BONUS_THRESHOLD = 63
UPPER_BONUS = 35


def category_by_id(category_id):
    """Look up a Category by its id, or None if the id is unknown."""
    if isinstance(category_id, Category):
        return category_id
    try:
        return Category(category_id)
    except ValueError:
        return None


@dataclass(frozen=True)
class Totals:
    """Derived scorecard sums"""
    upper_sum: int = 0
    bonus: int = 0
    lower_sum: int = 0
    grand_total: int = 0


class Scorecard:
    """Manages one player's Yatzi scorecard.

    Every category starts at 0. By default a category counts as filled only
    once it holds a nonzero score, so a committed 0 can be overwritten later.
    With zero_counts_as_scored=True any commit fills the category.
    """

    def __init__(self, zero_counts_as_scored=False):
        """Initialize an empty scorecard"""
        self.scores = {category: 0 for category in Category}
        self.committed = set()
        self.zero_counts_as_scored = zero_counts_as_scored

    def is_filled(self, category):
        """Check if a category has been filled"""
        if self.zero_counts_as_scored:
            return category in self.committed
        return self.scores[category] > 0

    def set_score(self, category, score):
        """Set the score for a category"""
        if not self.is_filled(category):
            self.scores[category] = score
            self.committed.add(category)

    def get_upper_section_total(self):
        """Calculate total for upper section (Ones through Sixes)"""
        return sum(self.scores[cat] for cat in UPPER_CATEGORIES)

    def get_upper_section_bonus(self):
        """Calculate bonus (35 points if upper section >= 63)"""
        return UPPER_BONUS if self.get_upper_section_total() >= UPPER_BONUS_THRESHOLD else 0

    def get_lower_section_total(self):
        """Calculate total for lower section"""
        return sum(self.scores[cat] for cat in LOWER_CATEGORIES)

    def get_grand_total(self):
        """Calculate grand total including bonus"""
        return (self.get_upper_section_total() +
                self.get_upper_section_bonus() +
                self.get_lower_section_total())

    def totals(self):
        """Project the scores onto a Totals record"""
        return Totals(
            upper_sum=self.get_upper_section_total(),
            bonus=self.get_upper_section_bonus(),
            lower_sum=self.get_lower_section_total(),
            grand_total=self.get_grand_total(),
        )

    def is_complete(self):
        """Check if all categories are filled"""
        return all(self.is_filled(cat) for cat in Category)

    def copy(self):
        """Create a deep copy of the scorecard"""
        new_card = Scorecard(self.zero_counts_as_scored)
        new_card.scores = self.scores.copy()
        new_card.committed = set(self.committed)
        return new_card

    def with_score(self, category, score):
        """Return new Scorecard with score set for category"""
        new_card = self.copy()
        new_card.set_score(category, score)
        return new_card


@dataclass(frozen=True)
class Player:
    """A named seat at the table with its own scorecard"""
    id: int  # 1-based
    name: str
    scorecard: Scorecard = field(default_factory=Scorecard, compare=False)

    @property
    def totals(self) -> Totals:
        return self.scorecard.totals()

    def with_scorecard(self, scorecard: Scorecard) -> 'Player':
        return replace(self, scorecard=scorecard)


def _values(dice):
    """Accept either plain ints or objects with a .value attribute."""
    return [getattr(die, "value", die) for die in dice]


def count_values(dice):
    """
    Count occurrences of each die value

    Args:
        dice: List of ints or DieState objects

    Returns:
        Counter object with die values as keys
    """
    return Counter(_values(dice))


def has_n_of_kind(dice, n):
    """True if at least n dice show the same value"""
    counts = count_values(dice)
    return bool(counts) and max(counts.values()) >= n


def has_full_house(dice):
    """
    Check if dice form a full house (exactly 3 of one value, 2 of another).

    Five of a kind is not a full house.
    """
    counts = count_values(dice)
    return sorted(counts.values(), reverse=True) == [3, 2]


def has_small_straight(dice):
    """Check if dice contain 4 consecutive values"""
    values = set(_values(dice))
    # Possible small straights: 1-2-3-4, 2-3-4-5, 3-4-5-6
    small_straights = [{1, 2, 3, 4}, {2, 3, 4, 5}, {3, 4, 5, 6}]
    return any(straight.issubset(values) for straight in small_straights)


def has_large_straight(dice):
    """Check if dice are 5 consecutive values"""
    values = set(_values(dice))
    large_straights = [{1, 2, 3, 4, 5}, {2, 3, 4, 5, 6}]
    return any(straight == values for straight in large_straights)


def has_yatzi(dice):
    """Check if all five dice match"""
    return has_n_of_kind(dice, 5)


_UPPER_FACES = {
    Category.ONES: 1, Category.TWOS: 2, Category.THREES: 3,
    Category.FOURS: 4, Category.FIVES: 5, Category.SIXES: 6,
}


def calculate_score(category, dice):
    """
    Calculate the score for a given category and dice

    Args:
        category: Category enum value or category id string
        dice: Five ints or DieState objects

    Returns:
        Integer score for the category (0 if it doesn't qualify or the
        category id is unknown)
    """
    category = category_by_id(category)
    if category is None:
        return 0

    values = _values(dice)
    total = sum(values)
    counts = Counter(values)

    # Upper section - sum of matching dice
    if category in _UPPER_FACES:
        face = _UPPER_FACES[category]
        return counts[face] * face

    elif category == Category.THREE_OF_A_KIND:
        return total if has_n_of_kind(values, 3) else 0

    elif category == Category.FOUR_OF_A_KIND:
        return total if has_n_of_kind(values, 4) else 0

    elif category == Category.FULL_HOUSE:
        return 25 if has_full_house(values) else 0

    elif category == Category.SMALL_STRAIGHT:
        return 30 if has_small_straight(values) else 0

    elif category == Category.LARGE_STRAIGHT:
        return 40 if has_large_straight(values) else 0

    elif category == Category.YATZI:
        return 50 if has_yatzi(values) else 0

    elif category == Category.CHANCE:
        return total

    return 0


@dataclass(frozen=True)
class DieState:
    """Pure representation of a single die's state - immutable"""
    value: int = 1  # 1-6
    held: bool = False

    def roll(self) -> 'DieState':
        """Return new DieState with random value (if not held)"""
        if self.held:
            return self
        return replace(self, value=random.randint(1, 6))

    def toggle_held(self) -> 'DieState':
        """Return new DieState with held status toggled"""
        return replace(self, held=not self.held)


def initial_dice() -> Tuple[DieState, ...]:
    """Neutral hand shown at the start of every turn: five unheld 1s."""
    return tuple(DieState(value=1, held=False) for _ in range(NUM_DICE))


@dataclass(frozen=True)
class GameState:
    """Immutable game state - the whole table at a point in time"""
    players: Tuple[Player, ...]
    current_player_index: int
    dice: Tuple[DieState, ...]
    rolls_used: int  # 0-3
    game_over: bool = False

    @staticmethod
    def create_initial(names, zero_counts_as_scored=False):
        """Create a fresh game for the given player names"""
        players = tuple(
            Player(id=i + 1, name=name, scorecard=Scorecard(zero_counts_as_scored))
            for i, name in enumerate(names)
        )
        return GameState(
            players=players,
            current_player_index=0,
            dice=initial_dice(),
            rolls_used=0,
            game_over=False,
        )

    @property
    def current_player(self) -> Player:
        return self.players[self.current_player_index]

    @property
    def dice_values(self) -> Tuple[int, ...]:
        return tuple(die.value for die in self.dice)


# Game Action Functions

def clean_player_names(names):
    """Strip names and drop blank entries."""
    return [name.strip() for name in names if isinstance(name, str) and name.strip()]


def start_rejection(names):
    """Return the Rejection for an unusable name list, or None if it is fine."""
    if len(names) < MIN_PLAYERS:
        return Rejection.NO_PLAYERS
    if len(names) > MAX_PLAYERS:
        return Rejection.TOO_MANY_PLAYERS
    return None


def roll_dice(state: GameState) -> GameState:
    """
    Roll all unheld dice and increment roll counter.

    If already rolled 3 times or game is over, returns state unchanged.
    """
    if not can_roll(state):
        return state

    new_dice = tuple(die.roll() for die in state.dice)
    return replace(state,
                   dice=new_dice,
                   rolls_used=state.rolls_used + 1)


def toggle_die_hold(state: GameState, die_index: int) -> GameState:
    """
    Toggle hold status of a specific die.

    If index is invalid, nothing has been rolled yet, or the game is over,
    returns state unchanged.
    """
    if not (0 <= die_index < NUM_DICE) or state.game_over or state.rolls_used == 0:
        return state

    dice_list = list(state.dice)
    dice_list[die_index] = dice_list[die_index].toggle_held()
    return replace(state, dice=tuple(dice_list))


def preview_score(state: GameState, category) -> int:
    """Score the current hand would earn in category. Never changes state."""
    return calculate_score(category, state.dice)


def commit_rejection(state: GameState, category, player_index: int):
    """
    Check whether player_index may score category right now.

    Checks run in order and the first failure wins: wrong player, no roll
    yet, category already filled.

    Returns:
        A Rejection, or None if the commit is allowed
    """
    if player_index != state.current_player_index:
        return Rejection.WRONG_PLAYER
    if state.rolls_used == 0:
        return Rejection.NOT_ROLLED
    if state.players[player_index].scorecard.is_filled(category):
        return Rejection.ALREADY_SCORED
    return None


def commit_score(state: GameState, category, player_index: int, score: int) -> GameState:
    """
    Record score for category on player_index's scorecard and advance the turn.

    Returns state unchanged if the game is over, the category id is unknown,
    or commit_rejection() refuses the request.
    """
    category = category_by_id(category)
    if state.game_over or category is None:
        return state
    if commit_rejection(state, category, player_index) is not None:
        return state

    player = state.players[player_index]
    players = list(state.players)
    players[player_index] = player.with_scorecard(player.scorecard.with_score(category, score))
    return advance_turn(replace(state, players=tuple(players)))


def advance_turn(state: GameState) -> GameState:
    """
    End the current player's turn.

    If every scorecard is complete the game is over and the pointer stays put.
    Otherwise the next player gets a fresh turn: rolls reset, holds cleared
    and the dice back to all 1s.
    """
    if state.game_over:
        return state

    if is_game_over(state.players):
        return replace(state, game_over=True)

    next_player = (state.current_player_index + 1) % len(state.players)
    return replace(state,
                   current_player_index=next_player,
                   dice=initial_dice(),
                   rolls_used=0)


def skip_round(state: GameState) -> GameState:
    """End the turn without scoring anything."""
    return advance_turn(state)


def is_game_over(players) -> bool:
    """True once every player has filled every category."""
    return bool(players) and all(p.scorecard.is_complete() for p in players)


def determine_winners(players) -> Tuple[Player, ...]:
    """
    Return every player whose grand total equals the best grand total.

    More than one entry means a tie.
    """
    if not players:
        return ()
    best = max(p.totals.grand_total for p in players)
    return tuple(p for p in players if p.totals.grand_total == best)


def can_roll(state: GameState) -> bool:
    """Player can roll if game is not over and hasn't used all 3 rolls."""
    return not state.game_over and state.rolls_used < MAX_ROLLS


def can_select_category(state: GameState, category) -> bool:
    """Whether the current player may score category right now."""
    category = category_by_id(category)
    if category is None or state.game_over:
        return False
    return commit_rejection(state, category, state.current_player_index) is None
