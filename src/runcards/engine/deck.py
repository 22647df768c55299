from __future__ import annotations

import random
from dataclasses import dataclass, field

from .types import COLOR_COUNT, LETTERS, MIN_SIDES, Card, RunCard


def build_deck(n: int) -> list[Card]:
    """Build the unshuffled n*n*n deck.

    Colors are handed out round-robin over construction order, so when n**3
    is not a multiple of 7 the low color indices appear once more than the
    others.
    """
    deck: list[Card] = []
    counter = 0
    for number in range(n):
        for letter in range(n):
            for shape in range(n):
                deck.append(
                    Card(
                        number=number + 1,
                        letter=LETTERS[letter],
                        sides=shape + MIN_SIDES,
                        color=counter % COLOR_COUNT,
                    )
                )
                counter += 1
    return deck


def shuffle(deck: list[Card], rng: random.Random) -> None:
    rng.shuffle(deck)


def draw(deck: list[Card]) -> Card | None:
    if not deck:
        return None
    return deck.pop()


@dataclass
class Hand:
    cards: list[Card] = field(default_factory=list)
    max_size: int = 7

    def __len__(self) -> int:
        return len(self.cards)

    def room(self) -> int:
        return max(0, self.max_size - len(self.cards))

    def add(self, card: Card) -> None:
        self.cards.append(card)

    def take(self, index: int) -> Card:
        return self.cards.pop(index)

    def clear(self) -> list[Card]:
        out = list(self.cards)
        self.cards.clear()
        return out


@dataclass
class Run:
    cards: list[RunCard] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.cards)

    def last(self) -> RunCard | None:
        return self.cards[-1] if self.cards else None

    def last_card(self) -> Card | None:
        last = self.last()
        return last.card if last is not None else None

    def can_unplay(self) -> bool:
        last = self.last()
        return last is not None and not last.locked

    def add(self, card: Card, locked: bool = False) -> None:
        if self.cards:
            self.cards[-1].locked = True
        self.cards.append(RunCard(card=card, locked=locked))

    def take_last(self) -> Card:
        return self.cards.pop().card

    def plain(self) -> list[Card]:
        return [rc.card for rc in self.cards]

    def clear(self) -> list[Card]:
        out = self.plain()
        self.cards.clear()
        return out


def draw_up_to(deck: list[Card], hand: Hand) -> list[Card]:
    """Fill the hand from the deck tail; clamps silently when the deck runs out."""
    drawn: list[Card] = []
    for _ in range(min(hand.room(), len(deck))):
        card = draw(deck)
        if card is None:
            break
        hand.add(card)
        drawn.append(card)
    return drawn
