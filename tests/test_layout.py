import math
from itertools import combinations

import numpy as np
import pytest

from beeswarm import (
    InvalidInput,
    LayoutOptions,
    Margins,
    Observation,
    compute_layout,
    layout,
    min_pairwise_distance,
    run_ticks,
    scatter_positions,
)

RADIUS = 6.0


def _dense_series():
    values = [5, 5, 6, 5, 4, 6, 5, 5, 7, 6, 5, 4, 5, 6, 5, 5, 6, 4, 5, 5]
    days = ['Mon', 'Tue', 'Wed']
    return [Observation(days[idx % 3], float(value)) for idx, value in enumerate(values)]


def _sparse_series():
    return [
        Observation('2024-01-01', 2.0),
        Observation('2024-01-02', 8.0),
        Observation('2024-01-03', 5.0),
        Observation('2024-01-04', 10.0),
    ]


def _distance(a, b) -> float:
    return math.hypot(a.x - b.x, a.y - b.y)


def test_empty_series_returns_empty_list():
    assert layout([], 400, 250, Margins(), 6) == []


def test_empty_series_skips_simulation():
    result = compute_layout([], 400, 250)

    assert result.ticks_run == 0
    assert result.nodes == []
    assert result.state is None


def test_layout_is_deterministic():
    first = layout(_dense_series(), 400, 250, Margins(), RADIUS)
    second = layout(_dense_series(), 400, 250, Margins(), RADIUS)

    assert first == second


def test_output_preserves_input_order():
    series = _dense_series()
    result = compute_layout(series, 400, 250, Margins(), RADIUS)

    assert len(result.positions) == len(series)
    for obs, node, pos in zip(series, result.nodes, result.positions):
        assert node.observation == obs
        assert node.position == pos
        assert node.anchor.x == pytest.approx(result.band_scale.center(obs.category))
        assert node.anchor.y == pytest.approx(result.value_scale(obs.value))


def test_sparse_points_stay_on_their_anchors():
    series = _sparse_series()

    positions = layout(series, 400, 250, Margins(), RADIUS)
    anchors = scatter_positions(series, 400, 250, Margins())

    for pos, anchor in zip(positions, anchors):
        assert pos.x == pytest.approx(anchor.x, abs=1e-9)
        assert pos.y == pytest.approx(anchor.y, abs=1e-9)


def test_dense_points_are_separated():
    result = compute_layout(_dense_series(), 400, 250, Margins(), RADIUS)

    assert min_pairwise_distance(result.positions) >= RADIUS
    anchors = [node.anchor for node in result.nodes]
    assert min_pairwise_distance(anchors) == 0.0


def test_single_category_collapse():
    series = [Observation('A-D', 1.0), Observation('A-D', 1.0), Observation('A-D', 1.0)]

    result = compute_layout(series, 300, 250, Margins(), RADIUS)

    for a, b in combinations(result.positions, 2):
        assert _distance(a, b) >= RADIUS
    anchor_x = result.nodes[0].anchor.x
    assert anchor_x == pytest.approx(160.0)
    mean_x = sum(pos.x for pos in result.positions) / len(result.positions)
    assert mean_x == pytest.approx(anchor_x, abs=1e-6)


def test_all_zero_values_land_on_bottom():
    series = [Observation('a', 0.0), Observation('b', 0), Observation('c', 0.0)]

    positions = layout(series, 400, 250, Margins(), RADIUS)

    ys = {pos.y for pos in positions}
    assert len(ys) == 1
    (y,) = ys
    assert math.isfinite(y)
    assert y == pytest.approx(250 - Margins().bottom)


def test_extra_ticks_leave_sparse_layout_unchanged():
    options = LayoutOptions()
    result = compute_layout(_sparse_series(), 400, 250, Margins(), RADIUS, options)

    state, _ = run_ticks(result.state, 60, RADIUS, options, alpha=result.alpha)

    assert np.max(np.abs(state.positions - result.state.positions)) < 1e-9


def test_layout_does_not_clamp_to_margins():
    # Many identical points in one band must spill past the band.
    series = [Observation('x', 0.0) for _ in range(12)]

    result = compute_layout(series, 120, 100, Margins(10, 10, 10, 10), RADIUS)

    ys = [pos.y for pos in result.positions]
    assert max(ys) > 90.0


@pytest.mark.parametrize('width, height', [(0, 250), (400, 0), (30, 30)])
def test_degenerate_area_returns_anchors(width, height):
    series = _dense_series()

    result = compute_layout(series, width, height, Margins(), RADIUS)

    assert len(result.positions) == len(series)
    assert result.ticks_run == 0
    assert all(math.isfinite(pos.x) and math.isfinite(pos.y) for pos in result.positions)
    assert result.notes


def test_seed_only_affects_coincident_points():
    series = [Observation('A', 3.0), Observation('A', 3.0)]

    default = layout(series, 300, 250, Margins(), RADIUS)
    reseeded = layout(series, 300, 250, Margins(), RADIUS, LayoutOptions(seed=99))
    sparse = layout(_sparse_series(), 400, 250, Margins(), RADIUS, LayoutOptions(seed=99))

    assert default != reseeded
    assert sparse == layout(_sparse_series(), 400, 250, Margins(), RADIUS)


def test_accepts_mappings_and_pairs():
    as_dicts = [{'date': 'd1', 'value': 3}, {'category': 'd2', 'value': 4}]
    as_pairs = [('d1', 3), ('d2', 4)]

    assert layout(as_dicts, 400, 250) == layout(as_pairs, 400, 250)


@pytest.mark.parametrize(
    'kwargs, message',
    [
        ({'width': -1}, 'width must be non-negative'),
        ({'height': -5}, 'height must be non-negative'),
        ({'radius': 0}, 'radius must be positive'),
        ({'radius': float('nan')}, 'radius must be finite'),
        ({'margins': Margins(top=-1)}, 'margin top must be non-negative'),
    ],
)
def test_invalid_geometry_is_rejected(kwargs, message):
    args = {'width': 400, 'height': 250, 'margins': Margins(), 'radius': RADIUS}
    args.update(kwargs)

    with pytest.raises(InvalidInput) as exc:
        layout(_sparse_series(), **args)

    assert message in str(exc.value)


@pytest.mark.parametrize('bad', [float('nan'), float('inf'), -float('inf')])
def test_non_finite_value_names_index(bad):
    series = [Observation('a', 1.0), Observation('b', bad)]

    with pytest.raises(InvalidInput) as exc:
        layout(series, 400, 250)

    assert exc.value.index == 1
    assert 'observation 1' in str(exc.value)
