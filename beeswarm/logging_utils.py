"""DEBUG call tracing for the layout pipeline.

Arguments and results are rendered as short summaries: a series of 500
observations prints as ``500 observation(s) in 7 category(ies)`` rather
than as 500 dataclass reprs.
"""

from __future__ import annotations

import inspect
import logging
import reprlib
from functools import wraps
from typing import Any, Callable, Iterable, MutableMapping, Optional, Sequence, TypeVar, cast

import numpy as np

from .model import Layout, LayoutOptions, Observation, Position, SimulationState

F = TypeVar("F", bound=Callable[..., Any])

_repr = reprlib.Repr()
_repr.maxother = 120
_repr.maxlist = 6
_repr.maxtuple = 6


def _summarize_array(value: np.ndarray) -> str:
    text = f"ndarray{tuple(value.shape)}"
    if value.size and np.issubdtype(value.dtype, np.number):
        text += f" in [{float(value.min()):.6g}, {float(value.max()):.6g}]"
    return text


def _summarize_sequence(value: Sequence[Any]) -> Optional[str]:
    if not value:
        return None
    if all(isinstance(item, Observation) for item in value):
        categories = len({item.category for item in value})
        return f"{len(value)} observation(s) in {categories} category(ies)"
    if all(isinstance(item, Position) for item in value):
        return f"{len(value)} position(s)"
    return None


def _summarize(value: Any) -> str:
    """Render ``value`` compactly for a DEBUG line."""

    if isinstance(value, np.ndarray):
        return _summarize_array(value)
    if isinstance(value, SimulationState):
        return f"SimulationState(n={value.size})"
    if isinstance(value, Layout):
        return (
            f"Layout(n={len(value.positions)}, ticks_run={value.ticks_run}, "
            f"alpha={value.alpha:.4g})"
        )
    if isinstance(value, LayoutOptions):
        return f"LayoutOptions(iterations={value.iterations}, seed={value.seed})"
    if isinstance(value, (list, tuple)):
        summary = _summarize_sequence(value)
        if summary is not None:
            return summary
    return _repr.repr(value)


def _format_arguments(args: Sequence[Any], kwargs: MutableMapping[str, Any]) -> str:
    parts = [_summarize(arg) for arg in args]
    parts.extend(f"{key}={_summarize(value)}" for key, value in kwargs.items())
    return ", ".join(parts)


def debug_log_call(logger: logging.Logger, *, name: Optional[str] = None) -> Callable[[F], F]:
    """Return a decorator that logs entry, exit and failures at DEBUG."""

    def decorator(func: F) -> F:
        if getattr(func, "_debug_logging_wrapped", False):
            return func

        qualname = name or func.__qualname__

        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any):
            if not logger.isEnabledFor(logging.DEBUG):
                return func(*args, **kwargs)
            logger.debug("Entering %s(%s)", qualname, _format_arguments(args, kwargs))
            try:
                result = func(*args, **kwargs)
            except Exception:
                logger.debug("Exception in %s", qualname, exc_info=True)
                raise
            logger.debug("Exiting %s -> %s", qualname, _summarize(result))
            return result

        setattr(wrapper, "_debug_logging_wrapped", True)
        return cast(F, wrapper)

    return decorator


def apply_debug_logging(
    namespace: MutableMapping[str, Any],
    *,
    logger: Optional[logging.Logger] = None,
    skip: Optional[Iterable[str]] = None,
) -> None:
    """Wrap the public functions defined in ``namespace`` with :func:`debug_log_call`."""

    module_name = namespace.get("__name__")
    logger = logger or logging.getLogger(module_name or __name__)
    skip_set = set(skip or ())

    for name, value in list(namespace.items()):
        if name.startswith("_") or name in skip_set:
            continue
        if inspect.isfunction(value) and value.__module__ == module_name:
            namespace[name] = debug_log_call(logger, name=name)(value)


__all__ = ["apply_debug_logging", "debug_log_call"]
