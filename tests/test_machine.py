from __future__ import annotations

from runcards.engine.layout import (
    LENGTH_BUTTONS,
    RESTART_BUTTON,
    START_BUTTONS,
    hand_card_rect,
    pick_buttons,
    run_card_rect,
)
from runcards.engine.machine import FrameInput, GameMachine
from runcards.engine.rules import RuleBook, RulePool
from runcards.engine.scoring import score
from runcards.engine.serialize import snapshot
from runcards.engine.session import GameConfig, new_session
from runcards.engine.types import Card, GameState
from runcards.paths import get_paths
from runcards.services.content import ContentService

NO_GRANTS = GameConfig(grant_chance=0)

END_TURN_AT = pick_buttons(3, 3)[0].rect.center
DISCARD_AT = pick_buttons(0, 3)[1].rect.center

FILLER = [
    Card(number=5, letter="E", sides=7, color=6),
    Card(number=5, letter="E", sides=7, color=5),
    Card(number=5, letter="D", sides=7, color=6),
    Card(number=5, letter="E", sides=6, color=6),
]


def _load_pool() -> RulePool:
    paths = get_paths()
    content = ContentService(paths.data_dir, paths.schema_dir)
    return content.load_rules()


def _machine(seed: int = 7, config: GameConfig | None = None) -> GameMachine:
    session = new_session(_load_pool(), tutorial=("one", "two", "three"), seed=seed, config=config)
    return GameMachine(session)


def _click(m: GameMachine, point: tuple[float, float]) -> GameState:
    return m.advance(FrameInput(pointer=point, pressed=True, elapsed=0.016))


def _idle(m: GameMachine, elapsed: float = 0.016) -> GameState:
    return m.advance(FrameInput(elapsed=elapsed))


def _start_game(m: GameMachine, length: int = 5) -> None:
    assert _click(m, START_BUTTONS[0].rect.center) == GameState.LENGTH_SELECT
    button = next(b for b in LENGTH_BUTTONS if b.value == length)
    assert _click(m, button.rect.center) == GameState.GAME_START
    assert _idle(m) == GameState.DRAW_CARDS
    assert _idle(m) == GameState.PICK_CARD


def _play(m: GameMachine, index: int) -> None:
    n = len(m.session.hand)
    assert _click(m, hand_card_rect(index, n).center) == GameState.ANIMATE_PLAY
    assert _idle(m, elapsed=0.6) == GameState.PICK_CARD


def _stack_hand(m: GameMachine, cards: list[Card]) -> None:
    m.session.hand.cards[:] = cards


def test_start_builds_and_deals() -> None:
    m = _machine()
    _click(m, START_BUTTONS[0].rect.center)
    _click(m, next(b for b in LENGTH_BUTTONS if b.value == 5).rect.center)
    assert m.session.game_length == 5

    assert _idle(m) == GameState.DRAW_CARDS
    assert len(m.session.deck) == 125

    assert _idle(m) == GameState.PICK_CARD
    assert len(m.session.hand) == 7
    assert len(m.session.deck) == 118


def test_length_select_back_returns_to_start() -> None:
    m = _machine()
    _click(m, START_BUTTONS[0].rect.center)
    back = next(b for b in LENGTH_BUTTONS if b.value == 0)
    assert _click(m, back.rect.center) == GameState.START_SCREEN
    assert m.session.game_length == 5


def test_clicks_outside_buttons_do_nothing() -> None:
    m = _machine()
    assert _click(m, (1.0, 1.0)) == GameState.START_SCREEN
    assert _idle(m) == GameState.START_SCREEN


def test_single_card_then_discard_scores_nothing() -> None:
    m = _machine()
    _start_game(m, 5)
    _play(m, 0)
    assert len(m.session.run) == 1
    assert len(m.session.hand) == 6

    # End Turn is disabled with a run this short
    assert _click(m, END_TURN_AT) == GameState.PICK_CARD

    assert _click(m, DISCARD_AT) == GameState.END_TURN
    assert len(m.session.hand) == 0
    assert _idle(m) == GameState.DRAW_CARDS
    assert m.session.score == 0
    assert len(m.session.run) == 0


def test_three_card_run_is_banked() -> None:
    m = _machine(config=NO_GRANTS)
    _start_game(m, 5)
    run = [
        Card(number=1, letter="A", sides=3, color=0),
        Card(number=2, letter="B", sides=4, color=1),
        Card(number=3, letter="C", sides=4, color=2),
    ]
    _stack_hand(m, run + FILLER)

    _play(m, 0)
    _play(m, 0)
    _play(m, 0)
    assert [rc.card for rc in m.session.run.cards] == run
    expected = score(run, RuleBook(pool=_load_pool()))
    assert expected == 3

    deck_before = len(m.session.deck)
    assert _click(m, END_TURN_AT) == GameState.END_TURN
    assert _idle(m) == GameState.DRAW_CARDS
    assert m.session.score == expected
    assert len(m.session.run) == 0
    assert m.session.discard == run

    assert _idle(m) == GameState.PICK_CARD
    assert len(m.session.hand) == 7
    assert len(m.session.deck) == deck_before - 3


class _GrantRng:
    """Always wins the grant roll and picks `key`."""

    def __init__(self, key: str) -> None:
        self.key = key

    def randint(self, a: int, b: int) -> int:
        return a

    def choice(self, seq):
        assert self.key in seq
        return self.key


def test_rule_granted_at_end_turn_applies_to_that_score() -> None:
    m = _machine()
    _start_game(m, 5)
    run = [
        Card(number=1, letter="A", sides=3, color=0),
        Card(number=2, letter="B", sides=4, color=1),
        Card(number=3, letter="C", sides=4, color=2),
    ]
    _stack_hand(m, run + FILLER)
    _play(m, 0)
    _play(m, 0)
    _play(m, 0)
    assert m.session.rules.active == {}

    m.session.rng = _GrantRng("double_length")  # type: ignore[assignment]
    assert _click(m, END_TURN_AT) == GameState.END_TURN
    assert _idle(m) == GameState.DRAW_CARDS

    # length fib(3) doubled plus one repeated shape
    assert m.session.score == 5
    # granted at 3, ticked once leaving END_TURN
    assert m.session.rules.display() == [("double_length", "Length scores x2", 2)]
    granted = [ev for ev in m.session.event_log if ev["type"] == "RULE_GRANTED"]
    assert granted == [{"type": "RULE_GRANTED", "key": "double_length", "value": 3}]


def test_play_mutates_model_only_at_threshold() -> None:
    m = _machine()
    _start_game(m, 5)
    assert _click(m, hand_card_rect(2, 7).center) == GameState.ANIMATE_PLAY
    played = m.session.hand.cards[2]

    # 1.8 * 0.25 = 0.45 per frame
    assert _idle(m, 0.25) == GameState.ANIMATE_PLAY
    assert _idle(m, 0.25) == GameState.ANIMATE_PLAY
    assert len(m.session.hand) == 7
    assert len(m.session.run) == 0

    assert _idle(m, 0.25) == GameState.PICK_CARD
    assert len(m.session.hand) == 6
    assert m.session.run.last_card() == played
    assert m.session.card_played_index == -1


def test_animation_speed_does_not_depend_on_frame_count() -> None:
    m = _machine()
    _start_game(m, 5)
    _click(m, hand_card_rect(0, 7).center)
    assert _idle(m, 0.5) == GameState.ANIMATE_PLAY
    assert _idle(m, 0.5) == GameState.PICK_CARD


def test_invalid_card_click_is_ignored() -> None:
    m = _machine(config=NO_GRANTS)
    _start_game(m, 5)
    _stack_hand(m, [Card(number=1, letter="A", sides=3, color=0)] + FILLER + [FILLER[0], FILLER[1]])
    _play(m, 0)
    assert _click(m, hand_card_rect(0, 6).center) == GameState.PICK_CARD
    assert len(m.session.run) == 1


def test_unplay_returns_last_card_to_hand() -> None:
    m = _machine()
    _start_game(m, 5)
    _play(m, 0)
    card = m.session.run.last_card()

    assert _click(m, run_card_rect(0, 1).center) == GameState.ANIMATE_UNPLAY
    assert len(m.session.run) == 1
    assert _idle(m, 0.6) == GameState.PICK_CARD
    assert len(m.session.run) == 0
    assert m.session.hand.cards[-1] == card
    assert len(m.session.hand) == 7


def test_locked_cards_cannot_be_unplayed() -> None:
    m = _machine(config=NO_GRANTS)
    _start_game(m, 5)
    _stack_hand(
        m,
        [Card(number=1, letter="A", sides=3, color=0), Card(number=2, letter="E", sides=7, color=6)] + FILLER[:3],
    )
    _play(m, 0)
    _play(m, 0)
    assert [rc.locked for rc in m.session.run.cards] == [True, False]
    assert _click(m, run_card_rect(0, 2).center) == GameState.PICK_CARD
    assert _click(m, run_card_rect(1, 2).center) == GameState.ANIMATE_UNPLAY


def test_no_unplay_locks_at_once_and_ticks_on_play() -> None:
    m = _machine()
    _start_game(m, 5)
    m.session.rules.grant("no_unplay")
    start = m.session.rules.remaining("no_unplay")
    assert start is not None

    _play(m, 0)
    assert m.session.run.cards[0].locked
    assert m.session.rules.remaining("no_unplay") == start - 1
    assert _click(m, run_card_rect(0, 1).center) == GameState.PICK_CARD


def test_timed_turn_forces_end_of_turn() -> None:
    m = _machine(config=NO_GRANTS)
    _start_game(m, 5)
    m.session.rules.grant("timed_turn")
    assert m.session.turn_time_left == m.session.config.turn_time

    assert _idle(m, 5.0) == GameState.PICK_CARD
    assert m.session.turn_time_left == m.session.config.turn_time - 5.0
    assert _idle(m, 100.0) == GameState.END_TURN
    assert len(m.session.hand) == 0
    assert any(ev["type"] == "HAND_DISCARDED" and ev["reason"] == "timeout" for ev in m.session.event_log)

    # the next deal restarts the clock
    assert _idle(m) == GameState.DRAW_CARDS
    assert _idle(m) == GameState.PICK_CARD
    assert m.session.rules.enabled("timed_turn")
    assert m.session.turn_time_left == m.session.config.turn_time
    assert _idle(m, 1.0) == GameState.PICK_CARD
    assert m.session.turn_time_left == m.session.config.turn_time - 1.0
    assert len(m.session.hand) == 7


def test_discard_to_deck_returns_cards() -> None:
    m = _machine(config=NO_GRANTS)
    _start_game(m, 5)
    m.session.rules.grant("discard_to_deck")
    _play(m, 0)
    assert len(m.session.deck) == 118

    _click(m, DISCARD_AT)
    assert len(m.session.deck) == 124
    assert _idle(m) == GameState.DRAW_CARDS
    assert len(m.session.deck) == 125
    assert m.session.discard == []
    # tick_on_end fired when leaving END_TURN
    default = m.session.rules.pool.get("discard_to_deck").value
    assert m.session.rules.remaining("discard_to_deck") == default - 1


def test_rules_tick_when_leaving_end_turn() -> None:
    m = _machine(config=NO_GRANTS)
    _start_game(m, 5)
    m.session.rules.grant("double_length")
    m.session.rules.active["double_length"].value = 0

    _click(m, DISCARD_AT)
    assert m.session.rules.enabled("double_length")
    _idle(m)
    assert not m.session.rules.enabled("double_length")
    assert {"type": "RULE_EXPIRED", "key": "double_length"} in m.session.event_log


def test_short_deck_ends_game_and_restart_resets_score() -> None:
    m = _machine(config=NO_GRANTS)
    _start_game(m, 5)
    m.session.score = 42
    m.session.deck[:] = m.session.deck[:2]

    _click(m, DISCARD_AT)
    assert _idle(m) == GameState.DRAW_CARDS
    assert _idle(m) == GameState.END_GAME
    assert len(m.session.hand) == 2

    assert _idle(m) == GameState.END_GAME
    assert len(m.session.hand) == 0
    assert m.session.deck == []
    assert m.session.score == 42

    assert _click(m, RESTART_BUTTON.rect.center) == GameState.START_SCREEN
    assert m.session.score == 0


def test_new_game_clears_rules() -> None:
    m = _machine()
    m.session.rules.grant("monochrome")
    _start_game(m, 6)
    assert m.session.rules.active == {}
    assert len(m.session.deck) == 216 - 7


def test_tutorial_walks_pages_then_returns() -> None:
    m = _machine()
    assert _click(m, START_BUTTONS[1].rect.center) == GameState.TUTORIAL
    assert _idle(m) == GameState.TUTORIAL
    assert m.session.tutorial_index == 0
    assert _click(m, (10.0, 10.0)) == GameState.TUTORIAL
    assert m.session.tutorial_index == 1
    assert _click(m, (10.0, 10.0)) == GameState.TUTORIAL
    assert m.session.tutorial_index == 2
    assert _click(m, (10.0, 10.0)) == GameState.START_SCREEN


def test_enter_and_exit_fire_once_per_visit() -> None:
    m = _machine()
    calls: list[str] = []
    original = m.states[GameState.TUTORIAL]

    class Recording:
        def on_enter(self, session) -> None:
            calls.append("enter")
            original.on_enter(session)

        def on_update(self, session, frame) -> GameState:
            calls.append("update")
            return original.on_update(session, frame)

        def on_exit(self, session) -> None:
            calls.append("exit")

    m.states[GameState.TUTORIAL] = Recording()
    _click(m, START_BUTTONS[1].rect.center)
    _idle(m)
    _idle(m)
    for _ in range(3):
        _click(m, (10.0, 10.0))
    assert calls == ["enter", "update", "update", "update", "update", "update", "exit"]


def test_same_seed_same_game() -> None:
    def play(seed: int) -> dict[str, object]:
        m = _machine(seed=seed)
        _start_game(m, 5)
        for _ in range(6):
            _play(m, 0)
            _click(m, DISCARD_AT)
            _idle(m)
            _idle(m)
        return snapshot(m.session)

    assert play(99) == play(99)
