from __future__ import annotations

from dataclasses import dataclass

import pygame  # type: ignore[import-not-found]

from .geometry import polygon_points


@dataclass
class Fonts:
    ui: pygame.font.Font
    small: pygame.font.Font
    big: pygame.font.Font


class AssetManager:
    """Fonts sized for the window scale, plus cached shape outlines."""

    def __init__(self, scale: float) -> None:
        self.scale = scale
        self._shapes: dict[int, list[tuple[float, float]]] = {}

        pygame.font.init()
        self.fonts = Fonts(
            ui=pygame.font.SysFont(None, max(12, int(10 * scale))),
            small=pygame.font.SysFont(None, max(10, int(8 * scale))),
            big=pygame.font.SysFont(None, max(18, int(24 * scale))),
        )

    def shape(self, sides: int) -> list[tuple[float, float]]:
        pts = self._shapes.get(sides)
        if pts is None:
            pts = polygon_points(sides)
            self._shapes[sides] = pts
        return pts
