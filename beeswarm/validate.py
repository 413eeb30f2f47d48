import math
import numbers
from collections.abc import Mapping
from typing import Iterable, List, Optional

from .model import LayoutOptions, Margins, Observation


class InvalidInput(ValueError):
    """Raised when a layout request cannot be computed."""

    def __init__(self, message: str, index: Optional[int] = None):
        super().__init__(message)
        self.index = index


def _coerce_value(raw: object, idx: int) -> float:
    if isinstance(raw, str) or not isinstance(raw, numbers.Real):
        raise InvalidInput(f'observation {idx}: value must be a number, got {raw!r}', idx)
    value = float(raw)
    if not math.isfinite(value):
        raise InvalidInput(f'observation {idx}: value must be finite, got {value!r}', idx)
    return value


def _coerce_observation(item: object, idx: int) -> Observation:
    if isinstance(item, Observation):
        category, raw = item.category, item.value
    elif isinstance(item, Mapping):
        if 'category' in item:
            category = item['category']
        elif 'date' in item:
            category = item['date']
        else:
            raise InvalidInput(f'observation {idx}: missing "category"', idx)
        if 'value' not in item:
            raise InvalidInput(f'observation {idx}: missing "value"', idx)
        raw = item['value']
    elif isinstance(item, (list, tuple)) and len(item) == 2:
        category, raw = item
    else:
        raise InvalidInput(f'observation {idx}: expected (category, value), got {item!r}', idx)
    if not isinstance(category, str):
        raise InvalidInput(f'observation {idx}: category must be a string, got {category!r}', idx)
    return Observation(category=category, value=_coerce_value(raw, idx))


def coerce_observations(observations: Iterable[object]) -> List[Observation]:
    return [_coerce_observation(item, idx) for idx, item in enumerate(observations)]


def _ensure_dimension(name: str, value: object) -> float:
    if isinstance(value, str) or not isinstance(value, numbers.Real):
        raise InvalidInput(f'{name} must be a number, got {value!r}')
    value = float(value)
    if not math.isfinite(value):
        raise InvalidInput(f'{name} must be finite, got {value!r}')
    if value < 0:
        raise InvalidInput(f'{name} must be non-negative, got {value!r}')
    return value


def validate_geometry(width: float, height: float, margins: Margins, radius: float) -> None:
    _ensure_dimension('width', width)
    _ensure_dimension('height', height)
    for side in ('top', 'right', 'bottom', 'left'):
        _ensure_dimension(f'margin {side}', getattr(margins, side))
    r = _ensure_dimension('radius', radius)
    if r == 0:
        raise InvalidInput('radius must be positive, got 0.0')


def validate_options(options: LayoutOptions) -> None:
    if options.iterations < 1:
        raise InvalidInput(f'iterations must be at least 1, got {options.iterations}')
    if options.collide_iterations < 1:
        raise InvalidInput(f'collide_iterations must be at least 1, got {options.collide_iterations}')
    for key in ('x_strength', 'y_strength', 'collide_strength', 'alpha', 'jiggle'):
        _ensure_dimension(key, getattr(options, key))
    for key in ('alpha_decay', 'velocity_decay', 'band_padding'):
        value = _ensure_dimension(key, getattr(options, key))
        if value > 1:
            raise InvalidInput(f'{key} must be within [0, 1], got {value!r}')
    if options.nice_count < 1:
        raise InvalidInput(f'nice_count must be positive, got {options.nice_count}')
    if not _ensure_dimension('min_value_ceiling', options.min_value_ceiling) > 0:
        raise InvalidInput('min_value_ceiling must be positive')


def validate_request(
    observations: Iterable[object],
    width: float,
    height: float,
    margins: Margins,
    radius: float,
    options: LayoutOptions,
) -> List[Observation]:
    validate_geometry(width, height, margins, radius)
    validate_options(options)
    return coerce_observations(observations)
