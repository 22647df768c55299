from __future__ import annotations

import random
from dataclasses import dataclass, field

from .deck import Hand, Run
from .rules import RuleBook, RulePool
from .types import Card, Event


@dataclass(frozen=True)
class GameConfig:
    hand_size: int = 7
    min_hand: int = 3  # fewer cards than this after drawing ends the game
    min_run: int = 3  # shortest run that can be banked
    animation_rate: float = 1.8
    animation_threshold: float = 1.0
    turn_time: float = 20.0  # seconds per turn while timed_turn is active
    grant_chance: int = 2
    grant_base: int = 5
    default_length: int = 5


@dataclass
class GameSession:
    """All mutable state of one player's session, shared by every state."""

    config: GameConfig
    rules: RuleBook
    rng: random.Random
    seed: int | None = None
    deck: list[Card] = field(default_factory=list)
    hand: Hand = field(default_factory=Hand)
    run: Run = field(default_factory=Run)
    discard: list[Card] = field(default_factory=list)
    score: int = 0
    game_length: int = 5
    card_played_index: int = -1
    turn_time_left: float = 0.0
    tutorial: tuple[str, ...] = ()
    tutorial_index: int = 0
    event_log: list[Event] = field(default_factory=list)

    def log(self, event_type: str, **payload: object) -> None:
        self.event_log.append({"type": event_type, **payload})

    def drain_events(self) -> list[Event]:
        out = list(self.event_log)
        self.event_log.clear()
        return out


def new_session(
    pool: RulePool,
    tutorial: tuple[str, ...] = (),
    seed: int | None = None,
    config: GameConfig | None = None,
) -> GameSession:
    cfg = config or GameConfig()
    return GameSession(
        config=cfg,
        rules=RuleBook(pool=pool),
        rng=random.Random(seed),
        seed=seed,
        hand=Hand(max_size=cfg.hand_size),
        game_length=cfg.default_length,
        tutorial=tutorial,
    )
