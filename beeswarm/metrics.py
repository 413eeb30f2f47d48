"""Quality report for a computed layout."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np
from scipy.spatial.distance import pdist

from .logging_utils import apply_debug_logging
from .model import Layout, Position

logger = logging.getLogger(__name__)


@dataclass
class LayoutReport:
    count: int
    radius: float
    min_distance: float
    overlaps: int
    max_displacement: float
    mean_displacement: float

    @property
    def collision_free(self) -> bool:
        return self.overlaps == 0

    def summary(self) -> str:
        min_text = "n/a" if math.isinf(self.min_distance) else f"{self.min_distance:.3f}"
        return (
            f"points={self.count} min_distance={min_text} "
            f"overlaps={self.overlaps} (< {2 * self.radius:g}) "
            f"max_displacement={self.max_displacement:.3f} "
            f"mean_displacement={self.mean_displacement:.3f}"
        )


def _as_array(positions: Sequence[Position]) -> np.ndarray:
    return np.array([[pos.x, pos.y] for pos in positions], dtype=float).reshape(-1, 2)


def min_pairwise_distance(positions: Sequence[Position]) -> float:
    """Smallest centre-to-centre distance, ``inf`` for fewer than two points."""

    if len(positions) < 2:
        return math.inf
    return float(pdist(_as_array(positions)).min())


def score_layout(layout: Layout, radius: float, tolerance: float = 1e-6) -> LayoutReport:
    """Summarise how well ``layout`` separates footprints of ``radius``.

    A pair counts as overlapping when its distance is below
    ``2 * radius - tolerance``.
    """

    positions = _as_array(layout.positions)
    anchors = _as_array([node.anchor for node in layout.nodes])
    overlaps = 0
    min_distance = math.inf
    if len(positions) >= 2:
        distances = pdist(positions)
        overlaps = int(np.count_nonzero(distances < 2.0 * radius - tolerance))
        min_distance = float(distances.min())

    max_disp: Optional[float] = None
    mean_disp = 0.0
    if len(positions):
        displacement = np.hypot(*(positions - anchors).T)
        max_disp = float(displacement.max())
        mean_disp = float(displacement.mean())

    report = LayoutReport(
        count=len(positions),
        radius=float(radius),
        min_distance=min_distance,
        overlaps=overlaps,
        max_displacement=max_disp or 0.0,
        mean_displacement=mean_disp,
    )
    logger.info("Layout report: %s", report.summary())
    return report


apply_debug_logging(globals(), logger=logger)


__all__ = ["LayoutReport", "min_pairwise_distance", "score_layout"]
