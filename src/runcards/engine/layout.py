"""Hit regions in the logical 256x240 play area.

The client scales window coordinates into this space before handing the
pointer to the engine, so everything here is resolution independent.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from .types import LENGTH_OPTIONS, GameState

LOGICAL_WIDTH = 256
LOGICAL_HEIGHT = 240

CARD_W = 25.0
CARD_H = 35.0

HAND_ORIGIN = (128.0, 205.0)
RUN_ORIGIN = (128.0, 120.0)

Point = tuple[float, float]


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    w: float
    h: float

    def contains(self, point: Point) -> bool:
        px, py = point
        return self.x <= px < self.x + self.w and self.y <= py < self.y + self.h

    @property
    def center(self) -> Point:
        return (self.x + self.w / 2.0, self.y + self.h / 2.0)


@dataclass(frozen=True)
class Button:
    name: str
    label: str
    rect: Rect
    value: int = 0
    enabled: bool = True


def _row_rect(origin: Point, index: int, count: int) -> Rect:
    # origin is the top-centre of the row
    start_x = origin[0] - count * CARD_W / 2.0
    return Rect(start_x + index * CARD_W, origin[1], CARD_W, CARD_H)


def hand_card_rect(index: int, count: int) -> Rect:
    return _row_rect(HAND_ORIGIN, index, count)


def run_card_rect(index: int, count: int) -> Rect:
    return _row_rect(RUN_ORIGIN, index, count)


def hand_index_at(point: Point, count: int) -> int | None:
    for i in range(count):
        if hand_card_rect(i, count).contains(point):
            return i
    return None


START_BUTTONS: tuple[Button, ...] = (
    Button("start", "Start", Rect(88.0, 150.0, 80.0, 20.0)),
    Button("tutorial", "Tutorial", Rect(88.0, 176.0, 80.0, 20.0)),
)

LENGTH_BUTTONS: tuple[Button, ...] = tuple(
    Button("length", label, Rect(88.0, 91.0 + 12.0 * i, 80.0, 10.0), value=value)
    for i, (label, value) in enumerate(LENGTH_OPTIONS)
)

RESTART_BUTTON = Button("restart", "Restart", Rect(100.0, 174.0, 56.0, 12.0))


def pick_buttons(run_length: int, min_run: int) -> tuple[Button, ...]:
    return (
        Button("end_turn", "End Turn", Rect(2.0, 193.0, 80.0, 10.0), enabled=run_length >= min_run),
        Button("discard", "Discard", Rect(174.0, 193.0, 80.0, 10.0)),
    )


def buttons_for(state: GameState, run_length: int = 0, min_run: int = 3) -> tuple[Button, ...]:
    if state == GameState.START_SCREEN:
        return START_BUTTONS
    if state == GameState.LENGTH_SELECT:
        return LENGTH_BUTTONS
    if state == GameState.PICK_CARD:
        return pick_buttons(run_length, min_run)
    if state == GameState.END_GAME:
        return (RESTART_BUTTON,)
    return ()


def button_at(buttons: Sequence[Button], point: Point) -> Button | None:
    for b in buttons:
        if b.enabled and b.rect.contains(point):
            return b
    return None
