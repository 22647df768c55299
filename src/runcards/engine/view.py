from __future__ import annotations

from dataclasses import dataclass

from .layout import Button, Rect, buttons_for, hand_card_rect, run_card_rect
from .machine import GameMachine
from .types import Card, GameState, RuleKey
from .validity import playable_flags


@dataclass(frozen=True)
class HandCardView:
    card: Card
    rect: Rect
    playable: bool


@dataclass(frozen=True)
class RunCardView:
    card: Card
    rect: Rect
    locked: bool


@dataclass(frozen=True)
class RuleView:
    key: RuleKey
    text: str
    value: int


@dataclass(frozen=True)
class GameView:
    """Read-only picture of one frame, handed to the renderer."""

    state: GameState
    hand: tuple[HandCardView, ...]
    run: tuple[RunCardView, ...]
    rules: tuple[RuleView, ...]
    buttons: tuple[Button, ...]
    score: int
    deck_count: int
    game_length: int
    turn_time_left: float | None
    animation_progress: float
    moving_index: int
    tutorial_page: str | None
    tutorial_index: int
    tutorial_total: int


def build_view(machine: GameMachine) -> GameView:
    session = machine.session
    hand_cards = session.hand.cards
    flags = playable_flags(hand_cards, session.run.last_card(), session.rules)

    hand = tuple(
        HandCardView(card=c, rect=hand_card_rect(i, len(hand_cards)), playable=ok)
        for i, (c, ok) in enumerate(zip(hand_cards, flags))
    )
    run = tuple(
        RunCardView(card=rc.card, rect=run_card_rect(i, len(session.run)), locked=rc.locked)
        for i, rc in enumerate(session.run.cards)
    )
    rules = tuple(RuleView(key=k, text=t, value=v) for k, t, v in session.rules.display())

    timed = session.rules.enabled("timed_turn")
    page: str | None = None
    if machine.current == GameState.TUTORIAL and session.tutorial:
        page = session.tutorial[min(session.tutorial_index, len(session.tutorial) - 1)]

    return GameView(
        state=machine.current,
        hand=hand,
        run=run,
        rules=rules,
        buttons=buttons_for(machine.current, len(session.run), session.config.min_run),
        score=session.score,
        deck_count=len(session.deck),
        game_length=session.game_length,
        turn_time_left=session.turn_time_left if timed else None,
        animation_progress=machine.animation_progress(),
        moving_index=session.card_played_index,
        tutorial_page=page,
        tutorial_index=session.tutorial_index,
        tutorial_total=len(session.tutorial),
    )
