"""Core data structures for the beeswarm layout pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List, Optional

import numpy as np

if TYPE_CHECKING:  # pragma: no cover - imported for type checking only
    from .scales import BandScale, ValueScale

Category = str

ALPHA_MIN = 0.001
ALPHA_DECAY = 1.0 - ALPHA_MIN ** (1.0 / 300.0)


@dataclass(frozen=True)
class Observation:
    """A single (category, value) sample, e.g. one practice session."""

    category: Category
    value: float


@dataclass(frozen=True)
class Position:
    x: float
    y: float


@dataclass(frozen=True)
class Margins:
    """Space reserved around the plotting area, in pixels."""

    top: float = 20.0
    right: float = 20.0
    bottom: float = 40.0
    left: float = 40.0


@dataclass
class LayoutOptions:
    """Tunable knobs of the force simulation and the scales."""

    iterations: int = 120
    x_strength: float = 0.2
    y_strength: float = 0.2
    collide_strength: float = 0.8
    collide_iterations: int = 1
    alpha: float = 1.0
    alpha_decay: float = ALPHA_DECAY
    alpha_target: float = 0.0
    velocity_decay: float = 0.4
    band_padding: float = 0.1
    nice_count: int = 10
    min_value_ceiling: float = 1.0
    jiggle: float = 1e-6
    seed: int = 0


@dataclass(frozen=True)
class Node:
    """Read-out of one simulated observation."""

    observation: Observation
    anchor: Position
    position: Position


@dataclass(frozen=True, eq=False)
class SimulationState:
    """Snapshot of every node at one tick.

    ``anchors`` never change during a computation; each step builds a new
    state with fresh ``positions`` and ``velocities`` arrays.
    """

    anchors: np.ndarray
    positions: np.ndarray
    velocities: np.ndarray

    @classmethod
    def at_rest(cls, anchors: np.ndarray) -> "SimulationState":
        anchors = np.array(anchors, dtype=float).reshape(-1, 2)
        anchors.setflags(write=False)
        return cls(
            anchors=anchors,
            positions=anchors.copy(),
            velocities=np.zeros_like(anchors),
        )

    @property
    def size(self) -> int:
        return int(self.anchors.shape[0])


@dataclass
class Layout:
    """Result of a single layout computation."""

    positions: List[Position]
    nodes: List[Node]
    band_scale: "BandScale"
    value_scale: "ValueScale"
    ticks_run: int = 0
    alpha: float = 1.0
    state: Optional[SimulationState] = None
    notes: List[str] = field(default_factory=list)


__all__ = [
    "ALPHA_DECAY",
    "ALPHA_MIN",
    "Category",
    "Layout",
    "LayoutOptions",
    "Margins",
    "Node",
    "Observation",
    "Position",
    "SimulationState",
]
