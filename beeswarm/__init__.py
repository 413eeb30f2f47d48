from .model import (
    Layout,
    LayoutOptions,
    Margins,
    Node,
    Observation,
    Position,
    SimulationState,
)
from .validate import InvalidInput, coerce_observations
from .scales import (
    BandScale,
    ValueScale,
    build_band_scale,
    build_value_scale,
    nice_domain,
    tick_increment,
    ticks,
)
from .forces import apply_forces
from .simulation import run_ticks
from .engine import compute_layout, layout, scatter_positions
from .metrics import LayoutReport, min_pairwise_distance, score_layout
from .config import get_default_margins, get_default_options, set_default_margins, set_default_options

__all__ = [
    'Layout',
    'LayoutOptions',
    'Margins',
    'Node',
    'Observation',
    'Position',
    'SimulationState',
    'InvalidInput',
    'coerce_observations',
    'BandScale',
    'ValueScale',
    'build_band_scale',
    'build_value_scale',
    'nice_domain',
    'tick_increment',
    'ticks',
    'apply_forces',
    'run_ticks',
    'compute_layout',
    'layout',
    'scatter_positions',
    'LayoutReport',
    'min_pairwise_distance',
    'score_layout',
    'get_default_margins',
    'get_default_options',
    'set_default_margins',
    'set_default_options',
]
