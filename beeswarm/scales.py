"""Pure band and linear scales used to project observations onto the canvas.

The arithmetic follows d3-scale (``scaleBand`` with symmetric padding and
``scaleLinear().nice()``) so anchors match charts drawn with d3.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Sequence, Tuple

from .model import Category

logger = logging.getLogger(__name__)

_E10 = math.sqrt(50.0)
_E5 = math.sqrt(10.0)
_E2 = math.sqrt(2.0)

_NICE_MAX_PASSES = 10


def _js_round(value: float) -> int:
    # Math.round semantics: halves go towards +inf.
    return int(math.floor(value + 0.5))


def _tick_spec(start: float, stop: float, count: float) -> Tuple[int, int, float]:
    if not count > 0 or not stop > start:
        return 0, -1, 0.0
    step = (stop - start) / count
    if not math.isfinite(step):
        return 0, -1, 0.0
    power = math.floor(math.log10(step))
    error = step / math.pow(10.0, power)
    if error >= _E10:
        factor = 10
    elif error >= _E5:
        factor = 5
    elif error >= _E2:
        factor = 2
    else:
        factor = 1

    if power < 0:
        inc = math.pow(10.0, -power) / factor
        i1 = _js_round(start * inc)
        i2 = _js_round(stop * inc)
        if i1 / inc < start:
            i1 += 1
        if i2 / inc > stop:
            i2 -= 1
        inc = -inc
    else:
        inc = math.pow(10.0, power) * factor
        i1 = _js_round(start / inc)
        i2 = _js_round(stop / inc)
        if i1 * inc < start:
            i1 += 1
        if i2 * inc > stop:
            i2 -= 1

    if i2 < i1 and 0.5 <= count < 2:
        return _tick_spec(start, stop, count * 2)
    return i1, i2, inc


def tick_increment(start: float, stop: float, count: float) -> float:
    """Return the tick step for ``[start, stop]``.

    Positive results are the step itself; negative results ``-k`` encode a
    fractional step of ``1 / k``, which keeps decimal ticks exact.
    """

    return _tick_spec(float(start), float(stop), float(count))[2]


def ticks(start: float, stop: float, count: float) -> List[float]:
    """Return up to roughly ``count`` round values spanning ``[start, stop]``."""

    start = float(start)
    stop = float(stop)
    if not count > 0:
        return []
    if start == stop:
        return [start]
    reverse = stop < start
    lo, hi = (stop, start) if reverse else (start, stop)
    i1, i2, inc = _tick_spec(lo, hi, float(count))
    if not i2 >= i1:
        return []
    n = i2 - i1 + 1
    if inc < 0:
        values = [(i1 + i) / -inc for i in range(n)]
    else:
        values = [(i1 + i) * inc for i in range(n)]
    if reverse:
        values.reverse()
    return values


def nice_domain(start: float, stop: float, count: int = 10) -> Tuple[float, float]:
    """Extend ``[start, stop]`` outwards to round tick boundaries."""

    lo, hi = float(start), float(stop)
    reverse = hi < lo
    if reverse:
        lo, hi = hi, lo

    prestep = None
    for _ in range(_NICE_MAX_PASSES):
        step = tick_increment(lo, hi, count)
        if step == prestep:
            break
        if step > 0:
            lo = math.floor(lo / step) * step
            hi = math.ceil(hi / step) * step
        elif step < 0:
            lo = math.ceil(lo * step) / step
            hi = math.floor(hi * step) / step
        else:
            break
        prestep = step

    return (hi, lo) if reverse else (lo, hi)


@dataclass(frozen=True)
class BandScale:
    """Maps categories onto equal-width horizontal bands."""

    categories: Tuple[Category, ...]
    start: float
    step: float
    bandwidth: float
    _index: Dict[Category, int] = field(default_factory=dict, repr=False, compare=False)

    def __contains__(self, category: object) -> bool:
        return category in self._index

    def index(self, category: Category) -> int:
        try:
            return self._index[category]
        except KeyError as exc:
            raise KeyError(f"Unknown category {category!r} for band scale") from exc

    def band_start(self, category: Category) -> float:
        return self.start + self.step * self.index(category)

    def center(self, category: Category) -> float:
        """Return the x coordinate of the middle of ``category``'s band."""

        return self.band_start(category) + self.bandwidth / 2.0


def unique_categories(categories: Iterable[Category]) -> List[Category]:
    """Return distinct categories in order of first appearance."""

    return list(dict.fromkeys(categories))


def build_band_scale(
    categories: Sequence[Category],
    range_: Tuple[float, float],
    padding: float = 0.1,
) -> BandScale:
    """Build a band scale with equal inner and outer ``padding``, centered."""

    domain = tuple(unique_categories(categories))
    r0, r1 = float(range_[0]), float(range_[1])
    n = len(domain)
    step = (r1 - r0) / max(1.0, n - padding + padding * 2.0)
    start = r0 + (r1 - r0 - step * (n - padding)) * 0.5
    bandwidth = step * (1.0 - padding)
    scale = BandScale(
        categories=domain,
        start=start,
        step=step,
        bandwidth=bandwidth,
        _index={category: idx for idx, category in enumerate(domain)},
    )
    logger.debug(
        "Built band scale: %d band(s), start=%.3f step=%.3f bandwidth=%.3f",
        n,
        start,
        step,
        bandwidth,
    )
    return scale


@dataclass(frozen=True)
class ValueScale:
    """Linear map from a value domain onto a pixel range."""

    domain: Tuple[float, float]
    range: Tuple[float, float]

    def __call__(self, value: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        if d1 == d0:
            return (r0 + r1) / 2.0
        t = (float(value) - d0) / (d1 - d0)
        return r0 * (1.0 - t) + r1 * t

    def invert(self, pixel: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        if r1 == r0:
            return (d0 + d1) / 2.0
        t = (float(pixel) - r0) / (r1 - r0)
        return d0 * (1.0 - t) + d1 * t

    def ticks(self, count: int = 10) -> List[float]:
        return ticks(self.domain[0], self.domain[1], count)


def build_value_scale(
    values: Sequence[float],
    range_: Tuple[float, float],
    *,
    nice_count: int = 10,
    min_ceiling: float = 1.0,
) -> ValueScale:
    """Build the ``[0, max(values)]`` scale with a nice upper bound.

    When the maximum is not positive (no values, or all zero) the upper
    bound falls back to ``min_ceiling`` so the domain never collapses.
    """

    top = max((float(v) for v in values), default=0.0)
    if not top > 0.0:
        logger.info("Value domain max %.3g is not positive; using ceiling %.3g", top, min_ceiling)
        top = float(min_ceiling)
    domain = nice_domain(0.0, top, nice_count)
    scale = ValueScale(domain=domain, range=(float(range_[0]), float(range_[1])))
    logger.debug("Built value scale: domain=%s range=%s", scale.domain, scale.range)
    return scale


__all__ = [
    "BandScale",
    "ValueScale",
    "build_band_scale",
    "build_value_scale",
    "nice_domain",
    "tick_increment",
    "ticks",
    "unique_categories",
]
