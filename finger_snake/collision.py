"""
Collision tests between the fingertip, the trail and the food.
"""
from typing import Optional, Sequence

from .config import GameplayConfig
from .geometry import distance
from .types import Food, Point


def check_self_collision(live_tip: Point, trail: Sequence[Point],
                         grace_nodes: int, snake_radius: float) -> bool:
    """
    Check whether the fingertip touches its own body.

    The ``grace_nodes`` nodes nearest the head are skipped: during a tight
    turn the tip passes right over nodes it has just laid down.
    """
    if len(trail) <= grace_nodes:
        return False

    for i in range(grace_nodes, len(trail)):
        if distance(live_tip, trail[i]) < snake_radius:
            return True
    return False


def check_food_collision(live_tip: Point, food: Food, threshold: float) -> bool:
    """True iff the fingertip is strictly closer than ``threshold`` to the food."""
    return distance(live_tip, food.position) < threshold


class CollisionEngine:
    """Collision checks bound to the gameplay configuration."""

    def __init__(self, cfg: GameplayConfig):
        self.cfg = cfg

    def self_collision(self, live_tip: Point, trail: Sequence[Point]) -> bool:
        return check_self_collision(live_tip, trail, self.cfg.grace_nodes, self.cfg.snake_radius)

    def food_collision(self, live_tip: Point, food: Optional[Food]) -> bool:
        if food is None:
            return False
        return check_food_collision(live_tip, food, self.cfg.collision_threshold)
