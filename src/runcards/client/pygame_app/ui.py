from __future__ import annotations

from dataclasses import dataclass

import pygame  # type: ignore[import-not-found]

from runcards.engine.layout import Button, Point, Rect
from runcards.engine.types import Card

from .asset_manager import AssetManager
from .geometry import CARD_COLORS, SHAPE_COLORS, Color, dim

WHITE: Color = (240, 240, 240)
BLACK: Color = (0, 0, 0)


@dataclass(frozen=True)
class Viewport:
    """Maps the engine's logical coordinates to window pixels."""

    sx: float
    sy: float

    def to_screen(self, r: Rect) -> pygame.Rect:
        return pygame.Rect(int(r.x * self.sx), int(r.y * self.sy), int(r.w * self.sx), int(r.h * self.sy))

    def point(self, p: Point) -> tuple[int, int]:
        return (int(p[0] * self.sx), int(p[1] * self.sy))

    def to_logical(self, pos: tuple[int, int]) -> Point:
        return (pos[0] / self.sx, pos[1] / self.sy)


def draw_text(
    screen: pygame.Surface,
    font: pygame.font.Font,
    text: str,
    pos: tuple[int, int],
    color: Color = WHITE,
) -> None:
    img = font.render(text, True, color)
    screen.blit(img, pos)


def draw_centered(screen: pygame.Surface, font: pygame.font.Font, text: str, center: tuple[int, int], color: Color = WHITE) -> None:
    img = font.render(text, True, color)
    screen.blit(img, img.get_rect(center=center).topleft)


def wrap_text(font: pygame.font.Font, text: str, width: int) -> list[str]:
    lines: list[str] = []
    current = ""
    for word in text.split():
        trial = f"{current} {word}".strip()
        if current and font.size(trial)[0] > width:
            lines.append(current)
            current = word
        else:
            current = trial
    if current:
        lines.append(current)
    return lines


def draw_button(screen: pygame.Surface, font: pygame.font.Font, view: Viewport, button: Button) -> None:
    rect = view.to_screen(button.rect)
    bg = (90, 90, 90) if button.enabled else (40, 40, 40)
    pygame.draw.rect(screen, bg, rect, border_radius=4)
    draw_centered(screen, font, button.label, rect.center, BLACK if button.enabled else (90, 90, 90))


def draw_card(
    screen: pygame.Surface,
    assets: AssetManager,
    view: Viewport,
    card: Card,
    rect: Rect,
    brightness: float = 1.0,
) -> None:
    r = view.to_screen(rect)
    pygame.draw.rect(screen, dim(CARD_COLORS[card.color], brightness), r)

    cx, cy = r.center
    pts = [(cx + x * view.sx, cy + y * view.sy) for x, y in assets.shape(card.sides)]
    pygame.draw.polygon(screen, dim(SHAPE_COLORS[card.color], brightness), pts)

    font = assets.fonts.small
    text_color = dim(WHITE, brightness)
    draw_text(screen, font, str(card.number), (r.x + 3, r.y + 2), text_color)
    img = font.render(card.letter, True, text_color)
    screen.blit(img, (r.right - img.get_width() - 3, r.bottom - img.get_height() - 2))
