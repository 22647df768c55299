from __future__ import annotations

import math

from runcards.engine.layout import Rect

Color = tuple[int, int, int]

CARD_COLORS: tuple[Color, ...] = (
    (0, 0, 255),
    (0, 128, 0),
    (255, 0, 0),
    (255, 0, 255),
    (128, 128, 0),
    (192, 192, 192),
    (0, 128, 128),
)

SHAPE_COLORS: tuple[Color, ...] = (
    (0, 0, 64),
    (0, 64, 0),
    (64, 0, 0),
    (64, 0, 64),
    (64, 64, 0),
    (64, 64, 64),
    (0, 64, 64),
)


def polygon_points(sides: int, size: float = 10.0) -> list[tuple[float, float]]:
    """Regular polygon around the origin, first vertex pointing down."""
    step = (2.0 * math.pi) / sides
    return [(size * math.sin(i * step), size * math.cos(i * step)) for i in range(sides)]


def ease(x: float) -> float:
    x = max(0.0, min(1.0, x))
    return -(math.cos(math.pi * x) - 1.0) / 2.0


def lerp(a: float, b: float, t: float) -> float:
    return (1.0 - t) * a + t * b


def lerp_rect(a: Rect, b: Rect, t: float) -> Rect:
    return Rect(lerp(a.x, b.x, t), lerp(a.y, b.y, t), lerp(a.w, b.w, t), lerp(a.h, b.h, t))


def dim(color: Color, factor: float) -> Color:
    r, g, b = color
    return (int(r * factor), int(g * factor), int(b * factor))
