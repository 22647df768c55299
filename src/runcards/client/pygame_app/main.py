from __future__ import annotations

import argparse
from pathlib import Path

import pygame  # type: ignore[import-not-found]

from runcards.engine.layout import LOGICAL_HEIGHT, LOGICAL_WIDTH
from runcards.paths import get_paths
from runcards.services.content import ContentService
from runcards.services.telemetry import TelemetryService

from .app import App, GameContext
from .asset_manager import AssetManager
from .scenes.boot import BootScene
from .ui import Viewport


def main() -> int:
    parser = argparse.ArgumentParser(prog="runcards")
    parser.add_argument("--width", type=int, default=LOGICAL_WIDTH * 4)
    parser.add_argument("--height", type=int, default=LOGICAL_HEIGHT * 4)
    parser.add_argument("--seed", type=int, default=None, help="fix the shuffle/rule RNG")
    parser.add_argument("--telemetry", type=Path, default=None, help="JSONL event log path")
    parser.add_argument("--no-telemetry", action="store_true")
    args = parser.parse_args()

    pygame.init()
    screen = pygame.display.set_mode((args.width, args.height))
    pygame.display.set_caption("Run")

    clock = pygame.time.Clock()
    paths = get_paths()

    viewport = Viewport(sx=args.width / LOGICAL_WIDTH, sy=args.height / LOGICAL_HEIGHT)
    assets = AssetManager(scale=min(viewport.sx, viewport.sy))
    content = ContentService(data_dir=paths.data_dir, schema_dir=paths.schema_dir)
    telemetry = TelemetryService(
        args.telemetry or paths.userdata_dir / "telemetry.jsonl",
        enabled=not args.no_telemetry,
    )

    ctx = GameContext(
        screen=screen,
        clock=clock,
        paths=paths,
        assets=assets,
        viewport=viewport,
        content=content,
        telemetry=telemetry,
        seed=args.seed,
    )

    app = App(ctx, BootScene(ctx))
    try:
        return app.run()
    finally:
        pygame.quit()


if __name__ == "__main__":
    raise SystemExit(main())
