from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from .deck import build_deck, draw_up_to, shuffle
from .layout import Button, Point, button_at, buttons_for, hand_index_at, run_card_rect
from .scoring import score_breakdown
from .session import GameSession
from .types import GameState, RuleKey
from .validity import is_valid_extension


@dataclass(frozen=True)
class FrameInput:
    pointer: Point = (0.0, 0.0)
    pressed: bool = False  # primary button went down this frame
    elapsed: float = 0.0


class State(Protocol):
    def on_enter(self, session: GameSession) -> None: ...
    def on_update(self, session: GameSession, frame: FrameInput) -> GameState: ...
    def on_exit(self, session: GameSession) -> None: ...


class _Hooks:
    def on_enter(self, session: GameSession) -> None:
        pass

    def on_exit(self, session: GameSession) -> None:
        pass


def _clicked(session: GameSession, state: GameState, frame: FrameInput) -> Button | None:
    if not frame.pressed:
        return None
    buttons = buttons_for(state, len(session.run), session.config.min_run)
    return button_at(buttons, frame.pointer)


def _log_expired(session: GameSession, keys: list[RuleKey]) -> None:
    for key in keys:
        session.log("RULE_EXPIRED", key=key)


class StartScreenState(_Hooks):
    def on_update(self, session: GameSession, frame: FrameInput) -> GameState:
        hit = _clicked(session, GameState.START_SCREEN, frame)
        if hit is None:
            return GameState.START_SCREEN
        if hit.name == "start":
            return GameState.LENGTH_SELECT
        if hit.name == "tutorial":
            return GameState.TUTORIAL
        return GameState.START_SCREEN


class LengthSelectState(_Hooks):
    def on_update(self, session: GameSession, frame: FrameInput) -> GameState:
        hit = _clicked(session, GameState.LENGTH_SELECT, frame)
        if hit is None:
            return GameState.LENGTH_SELECT
        if hit.value == 0:
            return GameState.START_SCREEN
        session.game_length = hit.value
        return GameState.GAME_START


class GameStartState(_Hooks):
    def on_enter(self, session: GameSession) -> None:
        session.hand.max_size = session.config.hand_size
        session.hand.clear()
        session.run.clear()
        session.discard.clear()
        session.rules.clear()

        session.deck = build_deck(session.game_length)
        shuffle(session.deck, session.rng)
        session.log("GAME_STARTED", length=session.game_length, deck=len(session.deck))

    def on_update(self, session: GameSession, frame: FrameInput) -> GameState:
        return GameState.DRAW_CARDS


class DrawCardsState(_Hooks):
    def on_enter(self, session: GameSession) -> None:
        drawn = draw_up_to(session.deck, session.hand)
        session.turn_time_left = session.config.turn_time
        session.log("CARDS_DRAWN", count=len(drawn), deck=len(session.deck))

    def on_update(self, session: GameSession, frame: FrameInput) -> GameState:
        if len(session.hand) < session.config.min_hand:
            return GameState.END_GAME
        return GameState.PICK_CARD


def _discard_hand(session: GameSession, reason: str) -> None:
    cards = session.hand.clear()
    if session.rules.enabled("discard_to_deck"):
        session.deck.extend(cards)
    else:
        session.discard.extend(cards)
    session.log("HAND_DISCARDED", count=len(cards), reason=reason)


class PickCardState(_Hooks):
    def on_update(self, session: GameSession, frame: FrameInput) -> GameState:
        timed = session.rules.enabled("timed_turn")
        if timed:
            session.turn_time_left = max(0.0, session.turn_time_left - frame.elapsed)

        if frame.pressed:
            index = hand_index_at(frame.pointer, len(session.hand))
            if index is not None:
                candidate = session.hand.cards[index]
                if is_valid_extension(session.run.last_card(), candidate, session.rules):
                    session.card_played_index = index
                    return GameState.ANIMATE_PLAY

            if session.run.can_unplay():
                last = run_card_rect(len(session.run) - 1, len(session.run))
                if last.contains(frame.pointer):
                    return GameState.ANIMATE_UNPLAY

            hit = _clicked(session, GameState.PICK_CARD, frame)
            if hit is not None and hit.name == "end_turn":
                return GameState.END_TURN
            if hit is not None and hit.name == "discard":
                _discard_hand(session, "discard")
                return GameState.END_TURN

        if timed and session.turn_time_left <= 0.0:
            _discard_hand(session, "timeout")
            return GameState.END_TURN

        return GameState.PICK_CARD


class AnimatePlayState(_Hooks):
    def __init__(self) -> None:
        self.timer = 0.0

    def on_enter(self, session: GameSession) -> None:
        self.timer = 0.0

    def on_update(self, session: GameSession, frame: FrameInput) -> GameState:
        self.timer += session.config.animation_rate * frame.elapsed
        if self.timer < session.config.animation_threshold:
            return GameState.ANIMATE_PLAY

        index = session.card_played_index
        card = session.hand.take(index)
        session.run.add(card, locked=session.rules.enabled("no_unplay"))
        session.card_played_index = -1
        session.log("CARD_PLAYED", card=card.label(), hand_index=index, run=len(session.run))
        return GameState.PICK_CARD

    def on_exit(self, session: GameSession) -> None:
        _log_expired(session, session.rules.tick_on_play())


class AnimateUnplayState(_Hooks):
    def __init__(self) -> None:
        self.timer = 0.0

    def on_enter(self, session: GameSession) -> None:
        self.timer = 0.0

    def on_update(self, session: GameSession, frame: FrameInput) -> GameState:
        self.timer += session.config.animation_rate * frame.elapsed
        if self.timer < session.config.animation_threshold:
            return GameState.ANIMATE_UNPLAY

        card = session.run.take_last()
        session.hand.add(card)
        session.log("CARD_UNPLAYED", card=card.label(), run=len(session.run))
        return GameState.PICK_CARD


class EndTurnState:
    def on_enter(self, session: GameSession) -> None:
        cfg = session.config
        granted = session.rules.maybe_grant(session.rng, chance=cfg.grant_chance, base=cfg.grant_base)
        if granted is not None:
            session.log("RULE_GRANTED", key=granted, value=session.rules.remaining(granted))

        if len(session.run) >= cfg.min_run:
            breakdown = score_breakdown(session.run.plain(), session.rules)
            session.score += breakdown.total
            session.log("TURN_SCORED", run=len(session.run), **breakdown.as_dict())

        cards = session.run.clear()
        if session.rules.enabled("discard_to_deck"):
            session.deck.extend(cards)
            shuffle(session.deck, session.rng)
        else:
            session.discard.extend(cards)
        session.log("TURN_ENDED", score=session.score, deck=len(session.deck))

    def on_update(self, session: GameSession, frame: FrameInput) -> GameState:
        return GameState.DRAW_CARDS

    def on_exit(self, session: GameSession) -> None:
        _log_expired(session, session.rules.tick_on_end())


class EndGameState(_Hooks):
    def on_enter(self, session: GameSession) -> None:
        session.hand.clear()
        session.run.clear()
        session.deck.clear()
        session.rules.clear()
        session.log("GAME_ENDED", score=session.score, length=session.game_length)

    def on_update(self, session: GameSession, frame: FrameInput) -> GameState:
        hit = _clicked(session, GameState.END_GAME, frame)
        if hit is not None and hit.name == "restart":
            session.score = 0
            return GameState.START_SCREEN
        return GameState.END_GAME


class TutorialState(_Hooks):
    def on_enter(self, session: GameSession) -> None:
        session.tutorial_index = 0

    def on_update(self, session: GameSession, frame: FrameInput) -> GameState:
        if not frame.pressed:
            return GameState.TUTORIAL
        if session.tutorial_index >= len(session.tutorial) - 1:
            return GameState.START_SCREEN
        session.tutorial_index += 1
        return GameState.TUTORIAL


class GameMachine:
    """Frame-driven turn engine.

    Each call to `advance` runs one frame: `on_enter` if the state became
    current since the last frame, then `on_update`, then `on_exit` if the
    update picked a different state.
    """

    def __init__(self, session: GameSession, initial: GameState = GameState.START_SCREEN) -> None:
        self.session = session
        self.states: dict[GameState, State] = {
            GameState.START_SCREEN: StartScreenState(),
            GameState.LENGTH_SELECT: LengthSelectState(),
            GameState.GAME_START: GameStartState(),
            GameState.DRAW_CARDS: DrawCardsState(),
            GameState.PICK_CARD: PickCardState(),
            GameState.ANIMATE_PLAY: AnimatePlayState(),
            GameState.ANIMATE_UNPLAY: AnimateUnplayState(),
            GameState.END_TURN: EndTurnState(),
            GameState.END_GAME: EndGameState(),
            GameState.TUTORIAL: TutorialState(),
        }
        self.current = initial
        self.previous: GameState | None = None

    def advance(self, frame: FrameInput) -> GameState:
        state = self.states[self.current]
        if self.current != self.previous:
            state.on_enter(self.session)

        next_state = state.on_update(self.session, frame)

        if next_state != self.current:
            state.on_exit(self.session)

        self.previous = self.current
        self.current = next_state
        return next_state

    def animation_progress(self) -> float:
        state = self.states[self.current]
        if isinstance(state, (AnimatePlayState, AnimateUnplayState)):
            return min(1.0, state.timer / self.session.config.animation_threshold)
        return 0.0
