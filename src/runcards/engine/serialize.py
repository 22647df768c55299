from __future__ import annotations

from .rules import RuleBook
from .session import GameSession
from .types import Card


def card_to_dict(c: Card) -> dict[str, object]:
    return {"number": c.number, "letter": c.letter, "sides": c.sides, "color": c.color}


def _rules_to_dict(rules: RuleBook) -> dict[str, int]:
    return {key: value for key, _text, value in rules.display()}


def snapshot(session: GameSession) -> dict[str, object]:
    """Return a JSON-serializable canonical snapshot of the session."""
    return {
        "seed": session.seed,
        "game_length": session.game_length,
        "score": session.score,
        "deck": [card_to_dict(c) for c in session.deck],
        "hand": [card_to_dict(c) for c in session.hand.cards],
        "run": [{**card_to_dict(rc.card), "locked": rc.locked} for rc in session.run.cards],
        "discard": [card_to_dict(c) for c in session.discard],
        "rules": _rules_to_dict(session.rules),
        "turn_time_left": session.turn_time_left,
    }
