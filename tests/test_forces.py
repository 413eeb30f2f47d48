import numpy as np
import pytest

from beeswarm import LayoutOptions, SimulationState, apply_forces
from beeswarm.forces import collision_velocity, restoring_velocity
from beeswarm.model import ALPHA_DECAY
from beeswarm.simulation import cool, run_ticks


def _state(positions, anchors=None, velocities=None) -> SimulationState:
    positions = np.asarray(positions, dtype=float)
    anchors = positions if anchors is None else np.asarray(anchors, dtype=float)
    state = SimulationState.at_rest(anchors)
    if velocities is None:
        velocities = np.zeros_like(positions)
    return SimulationState(
        anchors=state.anchors,
        positions=positions.copy(),
        velocities=np.asarray(velocities, dtype=float),
    )


def test_restoring_velocity_scales_with_alpha():
    state = _state([[10.0, -5.0]], anchors=[[0.0, 0.0]])

    delta = restoring_velocity(state, 0.5, LayoutOptions())

    assert delta[0].tolist() == pytest.approx([-1.0, 0.5])


def test_collision_pushes_pair_apart_symmetrically():
    state = _state([[0.0, 0.0], [4.0, 0.0]])
    rng = np.random.default_rng(0)

    delta = collision_velocity(state, 6.0, LayoutOptions(), rng)

    # (12 - 4) / 4 * 0.8, split evenly between the two nodes
    assert delta[0].tolist() == pytest.approx([-3.2, 0.0])
    assert delta[1].tolist() == pytest.approx([3.2, 0.0])
    assert delta.sum(axis=0).tolist() == pytest.approx([0.0, 0.0])


def test_collision_ignores_separated_nodes():
    state = _state([[0.0, 0.0], [12.5, 0.0], [0.0, 30.0]])

    delta = collision_velocity(state, 6.0, LayoutOptions(), np.random.default_rng(0))

    assert np.all(delta == 0.0)


def test_collision_uses_predicted_positions():
    # Currently apart, but velocities bring them within reach.
    state = _state([[0.0, 0.0], [20.0, 0.0]], velocities=[[5.0, 0.0], [-5.0, 0.0]])

    delta = collision_velocity(state, 6.0, LayoutOptions(), np.random.default_rng(0))

    assert delta[0, 0] < 0.0
    assert delta[1, 0] > 0.0


def test_coincident_nodes_are_jiggled_deterministically():
    state = _state([[50.0, 50.0], [50.0, 50.0]])

    first = collision_velocity(state, 6.0, LayoutOptions(), np.random.default_rng(7))
    second = collision_velocity(state, 6.0, LayoutOptions(), np.random.default_rng(7))

    assert np.array_equal(first, second)
    assert np.hypot(*first[0]) == pytest.approx(4.8, abs=1e-5)
    assert first.sum(axis=0).tolist() == pytest.approx([0.0, 0.0], abs=1e-12)


def test_apply_forces_does_not_mutate_input():
    state = _state([[0.0, 0.0], [3.0, 1.0], [100.0, 100.0]], anchors=[[1.0, 1.0], [3.0, 2.0], [90.0, 95.0]])
    positions = state.positions.copy()
    velocities = state.velocities.copy()

    new_state = apply_forces(state, 1.0, 6.0, LayoutOptions(), np.random.default_rng(0))

    assert np.array_equal(state.positions, positions)
    assert np.array_equal(state.velocities, velocities)
    assert new_state.anchors is state.anchors
    assert not np.array_equal(new_state.positions, positions)


def test_apply_forces_is_order_independent():
    positions = [[0.0, 0.0], [5.0, 1.0], [2.0, 4.0]]
    anchors = [[1.0, 0.5], [4.0, 1.0], [2.0, 3.0]]
    order = [2, 0, 1]
    options = LayoutOptions()

    forward = apply_forces(_state(positions, anchors), 0.9, 6.0, options, np.random.default_rng(0))
    permuted = apply_forces(
        _state([positions[i] for i in order], [anchors[i] for i in order]),
        0.9,
        6.0,
        options,
        np.random.default_rng(0),
    )

    assert permuted.positions == pytest.approx(forward.positions[order], abs=1e-9)


def test_anchored_state_stays_at_rest():
    state = SimulationState.at_rest([[10.0, 10.0], [60.0, 10.0]])

    final, _ = run_ticks(state, 50, 6.0, LayoutOptions())

    assert np.array_equal(final.positions, state.anchors)
    assert np.all(final.velocities == 0.0)


def test_anchors_are_read_only():
    state = SimulationState.at_rest([[1.0, 2.0]])

    with pytest.raises(ValueError):
        state.anchors[0, 0] = 5.0


def test_cooling_schedule():
    options = LayoutOptions()

    assert cool(1.0, options) == pytest.approx(1.0 - ALPHA_DECAY)

    alpha = 1.0
    for _ in range(300):
        alpha = cool(alpha, options)
    assert alpha == pytest.approx(0.001, rel=1e-9)
