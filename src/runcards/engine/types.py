from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Literal, Protocol, get_args

LETTERS = "ABCDEFGHI"
COLOR_COUNT = 7
MIN_SIDES = 3

# (label, value); value 0 means "go back"
LENGTH_OPTIONS: tuple[tuple[str, int], ...] = (
    ("Normal", 5),
    ("Medium", 6),
    ("Long", 7),
    ("Too Long", 9),
    ("Back", 0),
)

RuleKey = Literal[
    "run_backwards",
    "double_jump",
    "carbon_copy",
    "monochrome",
    "double_length",
    "double_number",
    "double_letter",
    "double_shape",
    "double_color",
    "no_unplay",
    "timed_turn",
    "discard_to_deck",
]

RULE_KEYS: tuple[RuleKey, ...] = get_args(RuleKey)

Event = dict[str, object]


class GameState(Enum):
    START_SCREEN = "start_screen"
    LENGTH_SELECT = "length_select"
    GAME_START = "game_start"
    DRAW_CARDS = "draw_cards"
    PICK_CARD = "pick_card"
    ANIMATE_PLAY = "animate_play"
    ANIMATE_UNPLAY = "animate_unplay"
    END_TURN = "end_turn"
    END_GAME = "end_game"
    TUTORIAL = "tutorial"


@dataclass(frozen=True)
class Card:
    number: int
    letter: str
    sides: int
    color: int

    def label(self) -> str:
        return f"{self.number}{self.letter}/{self.sides}/{self.color}"


@dataclass
class RunCard:
    """A card placed in the run. Only the last one may be unlocked."""

    card: Card
    locked: bool = False


@dataclass(frozen=True)
class RuleDefinition:
    key: RuleKey
    text: str
    value: int
    tick_on_end: bool
    tick_on_play: bool


class RuleQuery(Protocol):
    def enabled(self, key: RuleKey) -> bool: ...
