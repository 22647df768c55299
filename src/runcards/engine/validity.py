from __future__ import annotations

from typing import Sequence

from .types import Card, RuleQuery


def required_delta(rules: RuleQuery) -> int:
    """Step between consecutive attributes under the active rules.

    The factors compose, so carbon_copy zeroes the step no matter what else
    is active.
    """
    delta = 1
    if rules.enabled("run_backwards"):
        delta *= -1
    if rules.enabled("double_jump"):
        delta *= 2
    if rules.enabled("carbon_copy"):
        delta *= 0
    return delta


def _letter_step(last: Card, candidate: Card, delta: int) -> bool:
    return ord(candidate.letter) == ord(last.letter) + delta


def is_valid_extension(last: Card | None, candidate: Card, rules: RuleQuery) -> bool:
    """True if `candidate` may follow `last`; any card may open an empty run."""
    if last is None:
        return True

    delta = required_delta(rules)

    if _letter_step(last, candidate, delta):
        return True
    if candidate.number == last.number + delta:
        return True
    if candidate.sides == last.sides + delta:
        return True

    if rules.enabled("monochrome"):
        return delta == 0
    return candidate.color == last.color + delta


def playable_flags(hand: Sequence[Card], last: Card | None, rules: RuleQuery) -> list[bool]:
    return [is_valid_extension(last, c, rules) for c in hand]
