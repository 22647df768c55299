from __future__ import annotations

import random
from collections.abc import Sequence
from dataclasses import dataclass, field

from .types import RuleDefinition, RuleKey


@dataclass(frozen=True)
class RulePool:
    """Every rule that can be granted, keyed by rule key."""

    rules: dict[RuleKey, RuleDefinition]

    def get(self, key: RuleKey) -> RuleDefinition:
        return self.rules[key]

    def keys(self) -> Sequence[RuleKey]:
        return list(self.rules.keys())


@dataclass
class ActiveRule:
    definition: RuleDefinition
    value: int

    @property
    def key(self) -> RuleKey:
        return self.definition.key


@dataclass
class RuleBook:
    """The set of rules currently in effect for one game session."""

    pool: RulePool
    active: dict[RuleKey, ActiveRule] = field(default_factory=dict)

    def enabled(self, key: RuleKey) -> bool:
        return key in self.active

    def remaining(self, key: RuleKey) -> int | None:
        rule = self.active.get(key)
        return rule.value if rule is not None else None

    def grant(self, key: RuleKey) -> ActiveRule:
        # Re-granting replaces the entry, so the counter is refreshed.
        definition = self.pool.get(key)
        rule = ActiveRule(definition=definition, value=definition.value)
        self.active[key] = rule
        return rule

    def maybe_grant(self, rng: random.Random, *, chance: int, base: int) -> RuleKey | None:
        """Roll for a new rule; the odds shrink as more rules pile up."""
        roll = rng.randint(0, base + len(self.active))
        if roll >= chance:
            return None
        key = rng.choice(self.pool.keys())
        self.grant(key)
        return key

    def tick(self, key: RuleKey) -> bool:
        """Spend one use of `key`. Returns True if the rule expired."""
        rule = self.active.get(key)
        if rule is None:
            return False
        rule.value -= 1
        if rule.value < 0:
            del self.active[key]
            return True
        return False

    def tick_on_end(self) -> list[RuleKey]:
        return [r.key for r in list(self.active.values()) if r.definition.tick_on_end and self.tick(r.key)]

    def tick_on_play(self) -> list[RuleKey]:
        return [r.key for r in list(self.active.values()) if r.definition.tick_on_play and self.tick(r.key)]

    def clear(self) -> None:
        self.active.clear()

    def display(self) -> list[tuple[RuleKey, str, int]]:
        return [(r.key, r.definition.text, r.value) for r in self.active.values()]
