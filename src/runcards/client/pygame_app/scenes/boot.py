from __future__ import annotations

import traceback

import pygame  # type: ignore[import-not-found]

from runcards.engine.layout import Button, Rect
from runcards.engine.machine import GameMachine
from runcards.engine.session import new_session
from runcards.services.content import ContentError

from ..app import GameContext, SceneTransition
from ..ui import draw_button, draw_text
from .table import TableScene

QUIT_BUTTON = Button("quit", "Quit", Rect(4.0, 222.0, 40.0, 14.0))


class BootScene:
    def __init__(self, ctx: GameContext) -> None:
        self.ctx = ctx
        self._did_boot = False
        self._error: str | None = None

    def handle_event(self, event: pygame.event.Event) -> None:
        if self._error is None:
            return
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if QUIT_BUTTON.rect.contains(self.ctx.viewport.to_logical(event.pos)):
                pygame.event.post(pygame.event.Event(pygame.QUIT))

    def update(self, dt: float) -> SceneTransition | None:
        if self._did_boot:
            return None
        self._did_boot = True
        try:
            pool = self.ctx.content.load_rules()
            tutorial = self.ctx.content.load_tutorial()
        except ContentError as e:
            tb = traceback.format_exc(limit=8)
            self._error = f"{e}\n\n{tb}"
            self.ctx.telemetry.log("boot", {"ok": False, "error": str(e)})
            return None

        session = new_session(pool, tutorial=tutorial.pages, seed=self.ctx.seed)
        self.ctx.machine = GameMachine(session)
        self.ctx.telemetry.log("boot", {"ok": True, "rules": len(pool.rules), "seed": self.ctx.seed})
        return SceneTransition(TableScene(self.ctx))

    def render(self, screen: pygame.Surface) -> None:
        screen.fill((10, 10, 10))
        fonts = self.ctx.assets.fonts
        draw_text(screen, fonts.big, "RUN", (20, 20))
        if self._error is None:
            draw_text(screen, fonts.ui, "Loading rules...", (20, 80))
            return

        draw_text(screen, fonts.ui, "BOOT ERROR", (20, 80), color=(240, 80, 80))
        y = 120
        for line in self._error.splitlines()[:22]:
            draw_text(screen, fonts.small, line[:120], (20, y), color=(230, 230, 230))
            y += fonts.small.get_linesize()
        draw_button(screen, fonts.ui, self.ctx.viewport, QUIT_BUTTON)
