"""
Main application for the finger snake game.
"""
import asyncio
import logging
import sys
from typing import Optional

import pygame
from dotenv import load_dotenv

from .camera import CameraSource
from .config import Cfg, MediaPipeConfig, load_config
from .frame_clock import AsyncioFrameClock
from .game import RUNNING_PHASES, GameLoopController, load_tracker
from .pygame_renderer import PygameRenderer
from .tracker_mock import CirclingTracker, MockFrameSource
from .types import GamePhase

logger = logging.getLogger(__name__)


def _build_hands_tracker(cfg: MediaPipeConfig):
    # Imported here so the window comes up before mediapipe is loaded.
    from .landmarks import HandsTracker
    return HandsTracker(cfg)


class FingerSnakeApp:
    """Wires camera, tracker, game loop and pygame window together."""

    def __init__(self, config: Cfg, demo: bool = False):
        """Initialize the application with configuration."""
        self.config = config
        self.demo = demo
        cam = config.camera

        pygame.init()
        self.screen = pygame.display.set_mode((cam.width, cam.height))
        pygame.display.set_caption(config.display.window_name)

        if demo:
            self.frame_source = MockFrameSource()
            background = None
        else:
            self.frame_source = CameraSource(cam)
            background = lambda: self.frame_source.latest

        self.renderer = PygameRenderer(self.screen, background=background)
        self.clock = AsyncioFrameClock(config.display.fps)
        self.controller = GameLoopController(
            config,
            frame_source=self.frame_source,
            renderer=self.renderer,
            clock=self.clock,
            canvas_size=lambda: (cam.width, cam.height),
            score_observer=self._on_score,
            haptics=self._on_haptic
        )
        self.running = False

    def _on_score(self, score: int) -> None:
        logger.info("Score: %d", score)

    def _on_haptic(self, duration_ms: int) -> None:
        logger.debug("Vibrate %d ms", duration_ms)

    async def load_tracker(self) -> None:
        """Bring up the hand tracker off the event loop, then open the menu."""
        if self.demo:
            self.controller.tracker_ready(CirclingTracker())
            return

        self.controller.status_message = "Loading MediaPipe Models..."
        await load_tracker(self.controller, _build_hands_tracker, self.config.mediapipe)

    def handle_events(self) -> None:
        phase = self.controller.phase
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self.running = False
                elif event.key in (pygame.K_SPACE, pygame.K_RETURN):
                    if phase is GamePhase.MENU:
                        if not self.controller.start_game():
                            print(f"⚠️  {self.controller.status_message}")
                    elif phase is GamePhase.GAME_OVER:
                        self.controller.restart()
                elif event.key == pygame.K_c and phase in RUNNING_PHASES:
                    self.controller.toggle_camera()

    async def run(self) -> None:
        """Run the display loop until the window is closed."""
        print(f"Starting {self.config.display.window_name}")
        print("🐍 Steer the snake with your index finger")
        print("🍎 Touch the colored dots to grow, avoid your own tail")
        print("SPACE: start / play again | C: toggle camera | ESC: quit")

        self.running = True
        loader = asyncio.create_task(self.load_tracker())
        interval = 1.0 / self.config.display.fps
        fps_clock = pygame.time.Clock()

        try:
            while self.running:
                self.handle_events()
                fps_clock.tick()
                fps = fps_clock.get_fps() if self.config.display.show_fps else None
                self.renderer.present(self.controller.phase, self.controller.status_message,
                                      self.controller.score, fps=fps)
                await asyncio.sleep(interval)
        finally:
            self.running = False
            if not loader.done():
                loader.cancel()
                try:
                    await loader
                except asyncio.CancelledError:
                    pass
            self.controller.close()
            self.clock.cancel_all()
            self.frame_source.release()
            pygame.quit()


async def main(argv: Optional[list] = None) -> None:
    """Entry point for the application."""
    argv = sys.argv[1:] if argv is None else argv
    load_dotenv()

    config = load_config()
    logging.basicConfig(
        level=getattr(logging, config.logging.level, logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    demo = "--demo" in argv
    if demo:
        print("🎬 Demo mode: a scripted fingertip replaces the camera")

    try:
        app = FingerSnakeApp(config, demo=demo)
        await app.run()
    except KeyboardInterrupt:
        print("\nApplication interrupted by user")


def cli() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    cli()
