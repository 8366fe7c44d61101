"""
Food placement.
"""
import random
from typing import Optional

from .config import GameplayConfig
from .types import Food, FoodColor


PALETTE = tuple(FoodColor)


class FoodSpawner:
    """Places food uniformly inside the canvas, away from the edges."""

    def __init__(self, cfg: GameplayConfig, rng: Optional[random.Random] = None):
        self.padding = cfg.spawn_padding
        self.rng = rng or random.Random()

    def spawn(self, width: float, height: float) -> Food:
        """
        Create a new food target.

        Args:
            width: Canvas width in pixels, must exceed twice the padding
            height: Canvas height in pixels, must exceed twice the padding

        Returns:
            Food with x in [padding, width - padding], y in [padding, height - padding]
        """
        pad = self.padding
        if width <= 2 * pad or height <= 2 * pad:
            raise ValueError(f"Canvas {width}x{height} leaves no room inside {pad}px padding")

        return Food(
            x=self.rng.uniform(pad, width - pad),
            y=self.rng.uniform(pad, height - pad),
            color=self.rng.choice(PALETTE)
        )
