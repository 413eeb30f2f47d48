"""Bounded tick loop driving the force step."""

from __future__ import annotations

import logging
from typing import Optional, Tuple

import numpy as np

from .forces import apply_forces
from .model import LayoutOptions, SimulationState

logger = logging.getLogger(__name__)


def cool(alpha: float, options: LayoutOptions) -> float:
    """Return ``alpha`` after one step of exponential decay towards the target."""

    return alpha + (options.alpha_target - alpha) * options.alpha_decay


def run_ticks(
    state: SimulationState,
    ticks: int,
    radius: float,
    options: LayoutOptions,
    *,
    alpha: Optional[float] = None,
    rng: Optional[np.random.Generator] = None,
) -> Tuple[SimulationState, float]:
    """Run exactly ``ticks`` steps and return the final state and alpha.

    There is no convergence test; the cost is always
    ``O(ticks * N ** 2)``. Passing back the returned alpha continues the
    same cooling schedule.
    """

    alpha = options.alpha if alpha is None else float(alpha)
    if rng is None:
        rng = np.random.default_rng(options.seed)

    logger.info("Running %d tick(s) for %d node(s) from alpha=%.4f", ticks, state.size, alpha)
    for _ in range(ticks):
        alpha = cool(alpha, options)
        state = apply_forces(state, alpha, radius, options, rng)

    if state.size:
        speed = float(np.max(np.hypot(state.velocities[:, 0], state.velocities[:, 1])))
        logger.info("Simulation stopped at alpha=%.4f, max residual speed=%.3e", alpha, speed)
    return state, alpha


__all__ = ["cool", "run_ticks"]
