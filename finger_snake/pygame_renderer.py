"""
pygame drawing backend: executes draw primitives and paints phase overlays.
"""
from typing import Callable, Dict, List, Optional, Sequence

import cv2
import numpy as np
import pygame

from .render import BLACK, WHITE, Circle, Clear, DrawCommand, Stroke, Text
from .types import Color, GamePhase

BACKDROP: Color = (15, 23, 42)
NEON_GREEN: Color = (74, 222, 128)
NEON_RED: Color = (239, 68, 68)
MUTED: Color = (203, 213, 225)


def _lerp(a: Color, b: Color, t: float) -> Color:
    return tuple(int(a[i] + (b[i] - a[i]) * t) for i in range(3))


class PygameRenderer:
    """Keeps the latest scene from the game loop and presents it each display frame."""

    def __init__(self, screen: pygame.Surface,
                 background: Optional[Callable[[], Optional[np.ndarray]]] = None):
        self.screen = screen
        self.background = background
        self.scene: List[DrawCommand] = []
        self._fonts: Dict[int, pygame.font.Font] = {}

    def draw(self, commands: Sequence[DrawCommand]) -> None:
        self.scene = list(commands)

    def present(self, phase: GamePhase, status_message: Optional[str], score: int,
                fps: Optional[float] = None) -> None:
        """Paint the current scene plus whatever overlay the phase calls for, then flip."""
        if phase in (GamePhase.PLAYING, GamePhase.GAME_OVER) and self.scene:
            for command in self.scene:
                self._execute(command)
        else:
            self.screen.fill(BACKDROP)

        if phase is GamePhase.LOADING:
            self._draw_loading(status_message)
        elif phase is GamePhase.MENU:
            self._draw_menu(status_message)
        elif phase is GamePhase.GAME_OVER:
            self._draw_game_over(score)

        if fps is not None:
            label = self._font(16).render(f"{fps:.0f} FPS", True, MUTED)
            self.screen.blit(label, label.get_rect(topright=(self.screen.get_width() - 10, 10)))

        pygame.display.flip()

    # --- Primitives -----------------------------------------------------

    def _font(self, size: int) -> pygame.font.Font:
        if size not in self._fonts:
            self._fonts[size] = pygame.font.Font(None, int(size * 1.4))
        return self._fonts[size]

    def _execute(self, command: DrawCommand) -> None:
        if isinstance(command, Clear):
            self._clear(command)
        elif isinstance(command, Circle):
            self._circle(command)
        elif isinstance(command, Stroke):
            self._stroke(command)
        elif isinstance(command, Text):
            self._text(command)

    def _clear(self, command: Clear) -> None:
        if command.fill is not None:
            self.screen.fill(command.fill)
            return

        frame = self.background() if self.background else None
        if frame is None:
            self.screen.fill(BLACK)
            return

        frame_rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
        surface = pygame.surfarray.make_surface(frame_rgb.swapaxes(0, 1))
        if surface.get_size() != self.screen.get_size():
            surface = pygame.transform.smoothscale(surface, self.screen.get_size())
        self.screen.blit(surface, (0, 0))

    def _circle(self, command: Circle) -> None:
        x, y = int(command.center.x), int(command.center.y)

        if command.glow is not None and command.glow_radius > command.radius:
            # Concentric translucent rings fading outwards
            steps = 5
            for i in range(steps, 0, -1):
                radius = int(command.radius + (command.glow_radius - command.radius) * i / steps)
                alpha = int(60 * (steps - i + 1) / steps)
                glow_surface = pygame.Surface((radius * 2, radius * 2), pygame.SRCALPHA)
                pygame.draw.circle(glow_surface, (*command.glow, alpha), (radius, radius), radius)
                self.screen.blit(glow_surface, (x - radius, y - radius))

        pygame.draw.circle(self.screen, command.fill, (x, y), int(command.radius))
        if command.outline is not None and command.outline_width > 0:
            pygame.draw.circle(self.screen, command.outline, (x, y), int(command.radius),
                               command.outline_width)

    def _stroke(self, command: Stroke) -> None:
        points = [(int(p.x), int(p.y)) for p in command.points]
        width = int(command.width)
        cap = width // 2
        count = len(points)

        for i, point in enumerate(points):
            t = i / (count - 1) if count > 1 else 0.0
            color = _lerp(command.start_color, command.end_color, t)
            if i > 0:
                pygame.draw.line(self.screen, color, points[i - 1], point, width)
            # Round joins and caps
            pygame.draw.circle(self.screen, color, point, cap)

    def _text(self, command: Text) -> None:
        surface = self._font(command.size).render(command.text, True, command.color)
        if command.alpha < 255:
            surface.set_alpha(command.alpha)
        rect = surface.get_rect(center=(int(command.position.x), int(command.position.y)))
        self.screen.blit(surface, rect)

    # --- Overlays -------------------------------------------------------

    def _shade(self, alpha: int = 200) -> None:
        overlay = pygame.Surface(self.screen.get_size(), pygame.SRCALPHA)
        overlay.fill((0, 0, 0, alpha))
        self.screen.blit(overlay, (0, 0))

    def _centered(self, text: str, size: int, color: Color, dy: int) -> None:
        width, height = self.screen.get_size()
        surface = self._font(size).render(text, True, color)
        self.screen.blit(surface, surface.get_rect(center=(width // 2, height // 2 + dy)))

    def _draw_loading(self, status_message: Optional[str]) -> None:
        self._centered(status_message or "Loading...", 24, NEON_GREEN, 0)

    def _draw_menu(self, status_message: Optional[str]) -> None:
        self._shade()
        self._centered("AR Finger Snake", 56, NEON_GREEN, -90)
        self._centered("Control the snake with your index finger.", 22, MUTED, -20)
        self._centered("Avoid hitting your own tail!", 22, MUTED, 10)
        self._centered("Press SPACE to start", 28, WHITE, 70)
        if status_message:
            self._centered(status_message, 22, NEON_RED, 120)

    def _draw_game_over(self, score: int) -> None:
        self._shade()
        self._centered("GAME OVER", 48, NEON_RED, -90)
        self._centered(str(score), 64, WHITE, -20)
        self._centered("You bit your tail!", 22, MUTED, 40)
        self._centered("Press SPACE to play again", 26, WHITE, 90)
