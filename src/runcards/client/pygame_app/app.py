from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

import pygame  # type: ignore[import-not-found]

from runcards.engine.machine import GameMachine
from runcards.paths import Paths
from runcards.services.content import ContentService
from runcards.services.telemetry import TelemetryService

from .asset_manager import AssetManager
from .ui import Viewport


@dataclass
class SceneTransition:
    next_scene: "Scene"


class Scene(Protocol):
    def handle_event(self, event: pygame.event.Event) -> None: ...
    def update(self, dt: float) -> SceneTransition | None: ...
    def render(self, screen: pygame.Surface) -> None: ...


@dataclass
class GameContext:
    screen: pygame.Surface
    clock: pygame.time.Clock
    paths: Paths
    assets: AssetManager
    viewport: Viewport
    content: ContentService
    telemetry: TelemetryService
    seed: Optional[int] = None

    # Created at boot
    machine: Optional[GameMachine] = None


class App:
    def __init__(self, ctx: GameContext, initial_scene: Scene) -> None:
        self.ctx = ctx
        self.scene: Scene = initial_scene
        self.running = True

    def run(self) -> int:
        while self.running:
            dt = self.ctx.clock.tick(60) / 1000.0
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    self.running = False
                    break
                self.scene.handle_event(event)

            tr = self.scene.update(dt)
            if tr is not None:
                self.scene = tr.next_scene

            self.scene.render(self.ctx.screen)
            pygame.display.flip()

        return 0
