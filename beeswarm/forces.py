"""Force contributions and the single simulation step.

Every function here is pure with respect to the simulation state: inputs are
read, new arrays are returned. The random generator is the only mutable
argument and is used solely to separate exactly coincident nodes.
"""

from __future__ import annotations

import logging
from typing import Optional, Tuple

import numpy as np
from scipy.spatial.distance import pdist

from .model import LayoutOptions, SimulationState

logger = logging.getLogger(__name__)


def _pair_indices(count: int) -> Tuple[np.ndarray, np.ndarray]:
    # Same ordering as pdist's condensed output.
    return np.triu_indices(count, k=1)


def jiggle(rng: np.random.Generator, size: int, magnitude: float) -> np.ndarray:
    """Return ``size`` tiny offsets in ``(-magnitude / 2, magnitude / 2)``."""

    return (rng.random(size) - 0.5) * magnitude


def restoring_velocity(state: SimulationState, alpha: float, options: LayoutOptions) -> np.ndarray:
    """Velocity change pulling each node towards its anchor on both axes."""

    strengths = np.array([options.x_strength, options.y_strength], dtype=float) * alpha
    return (state.anchors - state.positions) * strengths


def collision_velocity(
    state: SimulationState,
    radius: float,
    options: LayoutOptions,
    rng: np.random.Generator,
) -> np.ndarray:
    """Velocity change separating every pair of overlapping footprints.

    Overlap is tested on predicted positions (position plus velocity). All
    ``N * (N - 1) / 2`` pairs are screened on each pass; each overlapping
    pair is pushed apart symmetrically, half of the correction per node.
    """

    count = state.size
    delta = np.zeros_like(state.velocities)
    if count < 2 or options.collide_strength == 0.0:
        return delta

    reach = 2.0 * radius
    left, right = _pair_indices(count)
    velocities = state.velocities
    for _ in range(options.collide_iterations):
        predicted = state.positions + velocities
        hits = np.flatnonzero(pdist(predicted) < reach)
        if hits.size == 0:
            break
        ii = left[hits]
        jj = right[hits]
        diff = predicted[ii] - predicted[jj]
        coincident = diff == 0.0
        if coincident.any():
            diff[coincident] = jiggle(rng, int(coincident.sum()), options.jiggle)
        length = np.hypot(diff[:, 0], diff[:, 1])
        factor = (reach - length) / length * options.collide_strength * 0.5
        push = diff * factor[:, None]
        impulse = np.zeros_like(velocities)
        np.add.at(impulse, ii, push)
        np.add.at(impulse, jj, -push)
        velocities = velocities + impulse
        logger.debug("Collision pass separated %d overlapping pair(s)", hits.size)
    return velocities - state.velocities


def apply_forces(
    state: SimulationState,
    alpha: float,
    radius: float,
    options: LayoutOptions,
    rng: Optional[np.random.Generator] = None,
) -> SimulationState:
    """Advance ``state`` by one tick and return the new state.

    Restoring and collision contributions are both computed from ``state``
    before anything is integrated, so the update is simultaneous for all
    nodes and independent of node order.
    """

    if rng is None:
        rng = np.random.default_rng(options.seed)
    restoring = restoring_velocity(state, alpha, options)
    collision = collision_velocity(state, radius, options, rng)
    velocities = (state.velocities + restoring + collision) * (1.0 - options.velocity_decay)
    return SimulationState(
        anchors=state.anchors,
        positions=state.positions + velocities,
        velocities=velocities,
    )


__all__ = [
    "apply_forces",
    "collision_velocity",
    "jiggle",
    "restoring_velocity",
]
