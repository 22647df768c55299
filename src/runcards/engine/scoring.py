from __future__ import annotations

import math
from collections import Counter
from dataclasses import dataclass
from typing import Hashable, Iterable, Sequence

from .types import Card, RuleKey, RuleQuery

PHI = 1.618
SQRT5 = 2.236


def fib(x: int) -> int:
    """Closed-form Fibonacci approximation, rounded half away from zero."""
    return math.floor(PHI**x / SQRT5 + 0.5)


def _repeat_bonus(values: Iterable[Hashable]) -> int:
    counts = Counter(values)
    if not counts:
        return 0
    return max(counts.values()) - 1


@dataclass(frozen=True)
class ScoreBreakdown:
    length: int
    number: int
    letter: int
    shape: int
    color: int

    @property
    def total(self) -> int:
        return self.length + self.number + self.letter + self.shape + self.color

    def as_dict(self) -> dict[str, int]:
        return {
            "length": self.length,
            "number": self.number,
            "letter": self.letter,
            "shape": self.shape,
            "color": self.color,
            "total": self.total,
        }


def score_breakdown(run: Sequence[Card], rules: RuleQuery) -> ScoreBreakdown:
    def doubled(value: int, key: RuleKey) -> int:
        return value * 2 if rules.enabled(key) else value

    return ScoreBreakdown(
        length=doubled(fib(len(run)), "double_length"),
        number=doubled(_repeat_bonus(c.number for c in run), "double_number"),
        letter=doubled(_repeat_bonus(c.letter for c in run), "double_letter"),
        shape=doubled(_repeat_bonus(c.sides for c in run), "double_shape"),
        color=doubled(_repeat_bonus(c.color for c in run), "double_color"),
    )


def score(run: Sequence[Card], rules: RuleQuery) -> int:
    return score_breakdown(run, rules).total
