from __future__ import annotations

import pygame  # type: ignore[import-not-found]

from runcards.engine.layout import LOGICAL_WIDTH, Rect, hand_card_rect, run_card_rect
from runcards.engine.machine import FrameInput, GameMachine
from runcards.engine.types import GameState
from runcards.engine.view import GameView, build_view

from ..app import GameContext, SceneTransition
from ..geometry import ease, lerp_rect
from ..ui import draw_button, draw_card, draw_centered, draw_text, wrap_text

DIM = 0.3

TABLE_STATES = (
    GameState.GAME_START,
    GameState.DRAW_CARDS,
    GameState.PICK_CARD,
    GameState.ANIMATE_PLAY,
    GameState.ANIMATE_UNPLAY,
    GameState.END_TURN,
)


def animated_hand_rects(view: GameView) -> list[Rect]:
    n = len(view.hand)
    t = ease(view.animation_progress)
    if view.state == GameState.ANIMATE_PLAY and 0 <= view.moving_index < n:
        out: list[Rect] = []
        slot = 0
        for i, hc in enumerate(view.hand):
            if i == view.moving_index:
                end = run_card_rect(len(view.run), len(view.run) + 1)
            else:
                end = hand_card_rect(slot, n - 1)
                slot += 1
            out.append(lerp_rect(hc.rect, end, t))
        return out
    if view.state == GameState.ANIMATE_UNPLAY:
        return [lerp_rect(hc.rect, hand_card_rect(i, n + 1), t) for i, hc in enumerate(view.hand)]
    return [hc.rect for hc in view.hand]


def animated_run_rects(view: GameView) -> list[Rect]:
    m = len(view.run)
    t = ease(view.animation_progress)
    if view.state == GameState.ANIMATE_PLAY:
        return [lerp_rect(rc.rect, run_card_rect(i, m + 1), t) for i, rc in enumerate(view.run)]
    if view.state == GameState.ANIMATE_UNPLAY and m > 0:
        out: list[Rect] = []
        for i, rc in enumerate(view.run):
            if i == m - 1:
                end = hand_card_rect(len(view.hand), len(view.hand) + 1)
            else:
                end = run_card_rect(i, m - 1)
            out.append(lerp_rect(rc.rect, end, t))
        return out
    return [rc.rect for rc in view.run]


class TableScene:
    """Feeds pygame input to the engine and draws whatever state it is in."""

    def __init__(self, ctx: GameContext) -> None:
        assert ctx.machine is not None
        self.ctx = ctx
        self.machine: GameMachine = ctx.machine
        self._pointer: tuple[float, float] = (0.0, 0.0)
        self._pressed = False

    def handle_event(self, event: pygame.event.Event) -> None:
        if event.type == pygame.MOUSEMOTION:
            self._pointer = self.ctx.viewport.to_logical(event.pos)
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            self._pointer = self.ctx.viewport.to_logical(event.pos)
            self._pressed = True

    def update(self, dt: float) -> SceneTransition | None:
        frame = FrameInput(pointer=self._pointer, pressed=self._pressed, elapsed=dt)
        self._pressed = False
        self.machine.advance(frame)
        self.ctx.telemetry.log_events(self.machine.session.drain_events())
        return None

    def render(self, screen: pygame.Surface) -> None:
        screen.fill((0, 0, 0))
        view = build_view(self.machine)
        if view.state == GameState.START_SCREEN:
            self._draw_title(screen, "RUN")
        elif view.state == GameState.LENGTH_SELECT:
            self._draw_title(screen, "Game length")
        elif view.state == GameState.TUTORIAL:
            self._draw_tutorial(screen, view)
        elif view.state == GameState.END_GAME:
            self._draw_game_over(screen, view)
        elif view.state in TABLE_STATES:
            self._draw_table(screen, view)

        for b in view.buttons:
            draw_button(screen, self.ctx.assets.fonts.small, self.ctx.viewport, b)

    def _draw_title(self, screen: pygame.Surface, title: str) -> None:
        draw_centered(screen, self.ctx.assets.fonts.big, title, self.ctx.viewport.point((LOGICAL_WIDTH / 2.0, 60.0)))

    def _draw_tutorial(self, screen: pygame.Surface, view: GameView) -> None:
        fonts = self.ctx.assets.fonts
        vp = self.ctx.viewport
        x, y = vp.point((16.0, 40.0))
        width = vp.point((LOGICAL_WIDTH - 32.0, 0.0))[0]
        for line in wrap_text(fonts.ui, view.tutorial_page or "", width):
            draw_text(screen, fonts.ui, line, (x, y))
            y += fonts.ui.get_linesize()
        footer = f"{view.tutorial_index + 1}/{view.tutorial_total}  click to continue"
        draw_text(screen, fonts.small, footer, vp.point((16.0, 222.0)), color=(160, 160, 160))

    def _draw_table(self, screen: pygame.Surface, view: GameView) -> None:
        fonts = self.ctx.assets.fonts
        vp = self.ctx.viewport

        draw_text(screen, fonts.small, f"Score: {view.score}", vp.point((4.0, 4.0)))
        draw_text(screen, fonts.small, f"Deck : {view.deck_count}", vp.point((4.0, 14.0)))
        if view.turn_time_left is not None:
            draw_text(screen, fonts.small, f"Time : {view.turn_time_left:0.1f}", vp.point((4.0, 24.0)), color=(240, 200, 120))

        y = 4.0
        for rule in view.rules:
            draw_text(screen, fonts.small, f"{rule.text} ({rule.value})", vp.point((150.0, y)), color=(180, 180, 220))
            y += 10.0

        for rc, rect in zip(view.run, animated_run_rects(view)):
            draw_card(screen, self.ctx.assets, vp, rc.card, rect, DIM if rc.locked else 1.0)
        for hc, rect in zip(view.hand, animated_hand_rects(view)):
            draw_card(screen, self.ctx.assets, vp, hc.card, rect, 1.0 if hc.playable else DIM)

    def _draw_game_over(self, screen: pygame.Surface, view: GameView) -> None:
        fonts = self.ctx.assets.fonts
        vp = self.ctx.viewport
        draw_centered(screen, fonts.ui, "Final Score:", vp.point((LOGICAL_WIDTH / 2.0, 110.0)))
        draw_centered(screen, fonts.big, str(view.score), vp.point((LOGICAL_WIDTH / 2.0, 125.0)))
