"""
The snake body: a head-first history of committed fingertip positions.
"""
from collections import deque
from typing import Deque, Iterable, Optional, Tuple

from .config import GameplayConfig
from .geometry import distance
from .types import Point


class TrailManager:
    """
    Owns the trail and the score that sizes it.

    Nodes are stored head-first: index 0 is the newest. A live fingertip is
    only committed as a new head once it has moved more than
    ``min_node_distance`` from the current head, so trimming is paced by how
    far the hand travels rather than by elapsed frames. A missing fingertip
    freezes the trail in place.
    """

    def __init__(self, cfg: GameplayConfig, nodes: Optional[Iterable[Point]] = None,
                 score: int = 0):
        self.cfg = cfg
        self._nodes: Deque[Point] = deque(nodes or ())
        self.score = score

    @property
    def nodes(self) -> Tuple[Point, ...]:
        """Snapshot of the trail, head first."""
        return tuple(self._nodes)

    @property
    def head(self) -> Optional[Point]:
        return self._nodes[0] if self._nodes else None

    @property
    def target_length(self) -> int:
        return self.cfg.target_length(self.score)

    def __len__(self) -> int:
        return len(self._nodes)

    def reset(self) -> None:
        """Clear the trail and the score for a new game."""
        self._nodes.clear()
        self.score = 0

    def add_score(self) -> int:
        """Count one eaten food and return the new score."""
        self.score += 1
        return self.score

    def tick(self, live_tip: Optional[Point], score: Optional[int] = None) -> bool:
        """
        Apply one frame of fingertip input.

        Args:
            live_tip: Fingertip for this frame in pixels, or None if no hand
            score: Score used to size the trail; defaults to the tracked score

        Returns:
            True if a node was committed this tick
        """
        if live_tip is None:
            return False

        if self._nodes and distance(live_tip, self._nodes[0]) <= self.cfg.min_node_distance:
            return False

        self._nodes.appendleft(live_tip)

        target = self.cfg.target_length(self.score if score is None else score)
        while len(self._nodes) > target:
            self._nodes.pop()
        return True
