"""Beeswarm layout façade: scales, anchors and the force simulation."""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np

from .config import get_default_margins, get_default_options
from .logging_utils import apply_debug_logging
from .model import Layout, LayoutOptions, Margins, Node, Observation, Position, SimulationState
from .scales import BandScale, ValueScale, build_band_scale, build_value_scale
from .simulation import run_ticks
from .validate import validate_request

logger = logging.getLogger(__name__)


def plot_ranges(
    width: float, height: float, margins: Margins
) -> Tuple[Tuple[float, float], Tuple[float, float]]:
    """Return the horizontal and (inverted) vertical pixel ranges.

    Extents that the margins would make negative are clamped to zero.
    """

    span_x = max(0.0, float(width) - margins.left - margins.right)
    span_y = max(0.0, float(height) - margins.top - margins.bottom)
    x_range = (float(margins.left), margins.left + span_x)
    y_range = (margins.top + span_y, float(margins.top))
    return x_range, y_range


def build_scales(
    observations: Sequence[Observation],
    width: float,
    height: float,
    margins: Margins,
    options: LayoutOptions,
) -> Tuple[BandScale, ValueScale]:
    x_range, y_range = plot_ranges(width, height, margins)
    band_scale = build_band_scale([obs.category for obs in observations], x_range, options.band_padding)
    value_scale = build_value_scale(
        [obs.value for obs in observations],
        y_range,
        nice_count=options.nice_count,
        min_ceiling=options.min_value_ceiling,
    )
    return band_scale, value_scale


def project_anchors(
    observations: Sequence[Observation], band_scale: BandScale, value_scale: ValueScale
) -> np.ndarray:
    """Return the ``(N, 2)`` array of ideal positions."""

    anchors = np.empty((len(observations), 2), dtype=float)
    for idx, obs in enumerate(observations):
        anchors[idx, 0] = band_scale.center(obs.category)
        anchors[idx, 1] = value_scale(obs.value)
    return anchors


def _resolve(
    margins: Optional[Margins], options: Optional[LayoutOptions]
) -> Tuple[Margins, LayoutOptions]:
    return (
        margins if margins is not None else get_default_margins(),
        options if options is not None else get_default_options(),
    )


def _read_nodes(observations: Sequence[Observation], state: SimulationState) -> List[Node]:
    nodes: List[Node] = []
    for obs, (ax, ay), (px, py) in zip(observations, state.anchors, state.positions):
        nodes.append(
            Node(
                observation=obs,
                anchor=Position(float(ax), float(ay)),
                position=Position(float(px), float(py)),
            )
        )
    return nodes


def compute_layout(
    observations: Iterable[object],
    width: float,
    height: float,
    margins: Optional[Margins] = None,
    radius: float = 6.0,
    options: Optional[LayoutOptions] = None,
) -> Layout:
    """Lay out ``observations`` as a beeswarm and return the full result."""

    margins, options = _resolve(margins, options)
    items = validate_request(observations, width, height, margins, radius, options)
    band_scale, value_scale = build_scales(items, width, height, margins, options)
    notes: List[str] = []

    if not items:
        logger.info("No observations; skipping simulation")
        return Layout(
            positions=[],
            nodes=[],
            band_scale=band_scale,
            value_scale=value_scale,
            ticks_run=0,
            alpha=options.alpha,
            notes=["empty"],
        )

    state = SimulationState.at_rest(project_anchors(items, band_scale, value_scale))
    x_range, y_range = plot_ranges(width, height, margins)
    alpha = options.alpha
    ticks_run = 0
    if x_range[1] == x_range[0] or y_range[1] == y_range[0]:
        logger.warning(
            "Drawable area %sx%s has no extent after margins; returning anchors", width, height
        )
        notes.append("degenerate drawable area; simulation skipped")
    else:
        logger.info(
            "Laying out %d observation(s) in %d band(s), value domain=%s",
            len(items),
            len(band_scale.categories),
            value_scale.domain,
        )
        rng = np.random.default_rng(options.seed)
        state, alpha = run_ticks(state, options.iterations, radius, options, rng=rng)
        ticks_run = options.iterations

    nodes = _read_nodes(items, state)
    return Layout(
        positions=[node.position for node in nodes],
        nodes=nodes,
        band_scale=band_scale,
        value_scale=value_scale,
        ticks_run=ticks_run,
        alpha=alpha,
        state=state,
        notes=notes,
    )


def layout(
    observations: Iterable[object],
    width: float,
    height: float,
    margins: Optional[Margins] = None,
    radius: float = 6.0,
    options: Optional[LayoutOptions] = None,
) -> List[Position]:
    """Return one collision-free position per observation, in input order."""

    return compute_layout(observations, width, height, margins, radius, options).positions


def scatter_positions(
    observations: Iterable[object],
    width: float,
    height: float,
    margins: Optional[Margins] = None,
    options: Optional[LayoutOptions] = None,
) -> List[Position]:
    """Return the un-simulated anchor of every observation (plain scatter plot)."""

    margins, options = _resolve(margins, options)
    # Radius is irrelevant without collisions; any positive value validates.
    items = validate_request(observations, width, height, margins, 1.0, options)
    band_scale, value_scale = build_scales(items, width, height, margins, options)
    anchors = project_anchors(items, band_scale, value_scale)
    return [Position(float(x), float(y)) for x, y in anchors]


apply_debug_logging(globals(), logger=logger)


__all__ = [
    "build_scales",
    "compute_layout",
    "layout",
    "plot_ranges",
    "project_anchors",
    "scatter_positions",
]
